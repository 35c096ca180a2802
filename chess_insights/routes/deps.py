# chess_insights/routes/deps.py
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from chess_insights.errors import ChessInsightsError
from chess_insights.services.narrator import LlmNarrator
from chess_insights.store.base import EventStore
from chess_insights.util.retry import RetryPolicy

STATUS_FOR_CODE = {
  "invalid_input": 400,
  "player_not_found": 404,
  "no_games_found": 404,
  "fetch_failed": 502,
}


def get_store(request: Request) -> EventStore:
  return request.app.state.store


def get_narrator(request: Request) -> Optional[LlmNarrator]:
  return request.app.state.narrator


def get_retry_policy(request: Request) -> RetryPolicy:
  return request.app.state.retry_policy


def error_response(exc: ChessInsightsError) -> JSONResponse:
  return JSONResponse({"error": str(exc)}, status_code=STATUS_FOR_CODE.get(exc.code, 500))
