# chess_insights/routes/ingest.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from chess_insights.chesscom_client import ChessComClient
from chess_insights.errors import ChessInsightsError
from chess_insights.models import ErrorResponse, IngestRequest, IngestResult
from chess_insights.routes.deps import error_response, get_retry_policy, get_store
from chess_insights.services.fetcher import ArchiveFetcher
from chess_insights.services.ingest import ingest
from chess_insights.store.base import EventStore
from chess_insights.util.log import get_logger
from chess_insights.util.retry import RetryPolicy

log = get_logger("chess_insights.routes.ingest", "API")

router = APIRouter(prefix="/api", tags=["ingest"])

_ERRORS = {code: {"model": ErrorResponse} for code in (400, 404, 500, 502)}


@router.post("/ingest", response_model=IngestResult, responses=_ERRORS)
async def ingest_player(
    body: IngestRequest,
    request: Request,
    store: EventStore = Depends(get_store),
    policy: RetryPolicy = Depends(get_retry_policy),
):
  """
  Example:
    POST /api/ingest {"username": "hikaru"}
  """
  try:
    async with ChessComClient(transport=request.app.state.http_transport) as cc:
      return await ingest(body.username, store=store, fetcher=ArchiveFetcher(cc, policy))
  except ChessInsightsError as e:
    log.info("ingest rejected (%s): %s", e.code, e)
    return error_response(e)
  except Exception:
    log.exception("ingestion error")
    return JSONResponse({"error": "Internal server error"}, status_code=500)
