# chess_insights/routes/summary.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from chess_insights.config import DEFAULT_WINDOW_DAYS, MAX_WINDOW_DAYS
from chess_insights.models import ErrorResponse, SummaryResponse
from chess_insights.routes.deps import get_narrator, get_store
from chess_insights.services.aggregate import aggregate
from chess_insights.services.narrator import LlmNarrator, narrate
from chess_insights.store.base import EventStore

router = APIRouter(prefix="/api", tags=["summary"])


@router.get("/summary", response_model=SummaryResponse, responses={400: {"model": ErrorResponse}})
def summary(
    player: Optional[str] = None,
    window_days: int = Query(DEFAULT_WINDOW_DAYS, alias="windowDays", ge=1, le=MAX_WINDOW_DAYS),
    store: EventStore = Depends(get_store),
    llm: Optional[LlmNarrator] = Depends(get_narrator),
):
  """
  Example:
    /api/summary?player=hikaru&windowDays=30
  """
  stats = aggregate(store, window_days=window_days, player=player)
  story = narrate(stats, llm)
  return SummaryResponse(**stats.model_dump(), insight=story.text, source=story.source)
