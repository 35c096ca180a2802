# chess_insights/chesscom_client.py
from typing import Any, Optional
from urllib.parse import quote

import httpx

from chess_insights.config import CHESSCOM_API_BASE, CHESSCOM_USER_AGENT, HTTP_TIMEOUT_SECONDS
from chess_insights.errors import NotFound, TransientError


class ChessComClient:
  """
  Thin async wrapper over the chess.com public API.

  Status mapping:
    - 404 -> NotFound (definitive, never retried),
    - any other non-2xx, transport error or bad body -> TransientError.
  Retries are not done here; see RetryPolicy.
  """

  def __init__(self, *, transport: Optional[httpx.AsyncBaseTransport] = None, base_url: str = CHESSCOM_API_BASE):
    self._transport = transport
    self.base_url = base_url.rstrip("/")
    self._client: Optional[httpx.AsyncClient] = None

  async def __aenter__(self):
    limits = httpx.Limits(max_keepalive_connections=5, max_connections=10)
    # monthly archives can be large; keep the read timeout generous
    self._client = httpx.AsyncClient(
        timeout=httpx.Timeout(HTTP_TIMEOUT_SECONDS, connect=5.0),
        limits=limits,
        headers={"User-Agent": CHESSCOM_USER_AGENT, "Accept": "application/json"},
        transport=self._transport,
        follow_redirects=True,
    )
    return self

  async def __aexit__(self, *exc):
    if self._client:
      await self._client.aclose()
      self._client = None

  def archives_url(self, username: str) -> str:
    return f"{self.base_url}/player/{quote(username)}/games/archives"

  async def get_json(self, url: str) -> Any:
    if self._client is None:
      raise RuntimeError("ChessComClient must be used as an async context manager")
    try:
      r = await self._client.get(url)
    except httpx.HTTPError as e:
      raise TransientError(url, f"{type(e).__name__}: {e}") from e
    if r.status_code == 404:
      raise NotFound(url)
    if r.status_code < 200 or r.status_code >= 300:
      raise TransientError(url, f"HTTP {r.status_code}")
    try:
      return r.json()
    except ValueError as e:
      raise TransientError(url, "invalid JSON body") from e
