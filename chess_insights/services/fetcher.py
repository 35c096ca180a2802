# chess_insights/services/fetcher.py
from typing import List, Optional

from chess_insights.chesscom_client import ChessComClient
from chess_insights.errors import FetchFailed, NotFound, PlayerNotFound
from chess_insights.util.retry import RetryPolicy


class ArchiveFetcher:
  """Resilient retrieval of a player's monthly archive list and archive contents."""

  def __init__(self, client: ChessComClient, policy: Optional[RetryPolicy] = None):
    self.client = client
    self.policy = policy or RetryPolicy()

  async def _get(self, url: str):
    return await self.policy.run(lambda: self.client.get_json(url), url)

  async def list_archives(self, username: str) -> List[str]:
    url = self.client.archives_url(username)
    try:
      data = await self._get(url)
    except NotFound as e:
      raise PlayerNotFound(username) from e
    archives = (data or {}).get("archives") if isinstance(data, dict) else None
    return [a for a in (archives or []) if isinstance(a, str)]

  async def fetch_archive(self, url: str) -> List[dict]:
    # the player exists once list_archives answered; a missing month is a fetch failure
    try:
      data = await self._get(url)
    except NotFound as e:
      raise FetchFailed(url) from e
    games = (data or {}).get("games") if isinstance(data, dict) else None
    return [g for g in (games or []) if isinstance(g, dict)]
