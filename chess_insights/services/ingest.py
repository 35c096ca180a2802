# chess_insights/services/ingest.py
import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from chess_insights.config import ARCHIVE_LIMIT, EVENT_TYPE, SERVICE, UNKNOWN_BUCKET
from chess_insights.errors import InvalidInput, NoGamesFound
from chess_insights.models import GameEvent, IngestResult
from chess_insights.services.classifier import Outcome, classify
from chess_insights.services.fetcher import ArchiveFetcher
from chess_insights.store.base import EventStore
from chess_insights.util.log import get_logger

log = get_logger("chess_insights.ingest", "INGEST")


def _utcnow() -> datetime:
  return datetime.now(timezone.utc)


def normalize_username(username) -> str:
  if not isinstance(username, str) or not username.strip():
    raise InvalidInput("Username is required")
  return username.strip().lower()


def _side_for(game: dict, username: str) -> dict:
  """The tracked player's side: White on a case-insensitive name match, else Black."""
  white = game.get("white") or {}
  black = game.get("black") or {}
  name = white.get("username") if isinstance(white, dict) else None
  if isinstance(name, str) and name.lower() == username:
    return white
  return black if isinstance(black, dict) else {}


def _end_time(game: dict, clock: Callable[[], datetime]) -> Tuple[datetime, bool]:
  raw = game.get("end_time")
  if raw:
    try:
      return datetime.fromtimestamp(int(raw), tz=timezone.utc), False
    except (TypeError, ValueError, OverflowError, OSError):
      pass
  return clock(), True


def game_to_event(game: dict, username: str, clock: Callable[[], datetime] = _utcnow) -> Optional[GameEvent]:
  """Canonical event for one raw chess.com game, or None when the result is unclassifiable."""
  me = _side_for(game, username)
  outcome = classify(me.get("result"))
  if outcome is Outcome.UNKNOWN:
    return None

  time_class = game.get("time_class") or UNKNOWN_BUCKET
  created_at, degraded = _end_time(game, clock)
  if degraded:
    log.warning("game %s has no end_time; using current time", game.get("url") or "?")

  return GameEvent(
      service=SERVICE,
      type=EVENT_TYPE,
      route=f"/{time_class}",
      status=outcome.status,
      created_at=created_at,
      player=username,
  )


async def ingest(
    username: str,
    *,
    store: EventStore,
    fetcher: ArchiveFetcher,
    archive_limit: int = ARCHIVE_LIMIT,
    clock: Callable[[], datetime] = _utcnow,
) -> IngestResult:
  """
  Pull the newest monthly archives for `username` and append unseen outcome events.

  Raises InvalidInput, PlayerNotFound, NoGamesFound or FetchFailed. Events appended
  before a failure stay stored; re-running is safe because each append is dedup-checked.
  """
  player = normalize_username(username)

  archives = await fetcher.list_archives(player)
  if not archives:
    raise NoGamesFound(player)

  targets = archives[-archive_limit:] if archive_limit > 0 else []
  ingested = 0
  skipped = 0
  duplicates = 0

  for url in targets:
    games = await fetcher.fetch_archive(url)
    for g in games:
      event = game_to_event(g, player, clock)
      if event is None:
        skipped += 1
        log.debug("skipping unclassifiable game %s", g.get("url") or "?")
        continue
      # store calls are blocking; keep them off the event loop
      if await asyncio.to_thread(store.exists, event.service, event.player, event.route, event.created_at):
        duplicates += 1
        continue
      await asyncio.to_thread(store.append, event)
      ingested += 1

  total = await asyncio.to_thread(store.count, SERVICE, player)
  log.info(
      "ingested %s: new=%d duplicate=%d skipped=%d archives=%d total=%d",
      player, ingested, duplicates, skipped, len(targets), total,
  )
  return IngestResult(
      username=player,
      games_ingested=ingested,
      total_games=total,
      message=f"Successfully ingested {ingested} new games. Total: {total}",
  )
