from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from chess_insights.config import DATABASE_URL, NARRATOR_BACKEND
from chess_insights.errors import ChessInsightsError, InvalidInput
from chess_insights.routes.dashboard import router as dashboard_router
from chess_insights.routes.deps import error_response
from chess_insights.routes.ingest import router as ingest_router
from chess_insights.routes.summary import router as summary_router
from chess_insights.services.narrator import LlmNarrator
from chess_insights.store.base import EventStore
from chess_insights.store.sql import SqlEventStore
from chess_insights.util.log import get_logger
from chess_insights.util.retry import RetryPolicy

log = get_logger("chess_insights.main", "Startup")


def default_narrator() -> Optional[LlmNarrator]:
  if NARRATOR_BACKEND == "bedrock":
    from chess_insights.bedrock_client import BedrockNarrator
    return BedrockNarrator()
  return None


def create_app(
    *,
    store: Optional[EventStore] = None,
    narrator: Optional[LlmNarrator] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    retry_policy: Optional[RetryPolicy] = None,
    use_default_narrator: bool = True,
) -> FastAPI:
  @asynccontextmanager
  async def lifespan(app: FastAPI):
    owned = app.state.store is None
    if owned:
      app.state.store = SqlEventStore.from_url(DATABASE_URL)
    log.info("narrator: %s", getattr(app.state.narrator, "source", "heuristic"))
    try:
      yield
    finally:
      if owned:
        app.state.store.close()
        app.state.store = None

  app = FastAPI(title="Chess Insights", lifespan=lifespan)
  app.state.store = store
  app.state.narrator = narrator if narrator is not None or not use_default_narrator else default_narrator()
  app.state.http_transport = transport
  app.state.retry_policy = retry_policy or RetryPolicy()

  @app.exception_handler(ChessInsightsError)
  async def _typed_error(request: Request, exc: ChessInsightsError):
    return error_response(exc)

  # ingest answers {"error"} even when the body is not a JSON object
  @app.exception_handler(RequestValidationError)
  async def _invalid_body(request: Request, exc: RequestValidationError):
    if request.url.path == "/api/ingest":
      return error_response(InvalidInput("Username is required"))
    return await request_validation_exception_handler(request, exc)

  #health check
  @app.get("/api/health", response_class=PlainTextResponse)
  async def health():
    return "ok"

  #register API routes
  app.include_router(ingest_router)
  app.include_router(summary_router)
  app.include_router(dashboard_router)
  return app


app = create_app()
