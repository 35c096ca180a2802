# chess_insights/routes/dashboard.py
from typing import Optional

from fastapi import APIRouter, Depends

from chess_insights.models import DashboardResponse
from chess_insights.routes.deps import get_store
from chess_insights.services.dashboard import dashboard
from chess_insights.store.base import EventStore

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(player: Optional[str] = None, store: EventStore = Depends(get_store)):
  return dashboard(store, player=player)
