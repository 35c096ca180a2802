import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from chess_insights.chesscom_client import ChessComClient
from chess_insights.config import DATABASE_URL
from chess_insights.errors import ChessInsightsError
from chess_insights.models import IngestResult
from chess_insights.services.fetcher import ArchiveFetcher
from chess_insights.services.ingest import ingest
from chess_insights.store.base import EventStore
from chess_insights.store.sql import SqlEventStore

EXIT_CODES = {
  "invalid_input": 2,
  "player_not_found": 3,
  "no_games_found": 4,
}


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(description="Ingest a chess.com player's recent games")
  parser.add_argument("username", help="chess.com username")
  parser.add_argument("--database-url", default=DATABASE_URL, help="SQLAlchemy URL of the event store")
  parser.add_argument("--verbose", action="store_true", help="Print debug logs")
  return parser.parse_args(argv)


async def _run(username: str, store: EventStore) -> IngestResult:
  async with ChessComClient() as cc:
    return await ingest(username, store=store, fetcher=ArchiveFetcher(cc))


def main(argv: Optional[List[str]] = None) -> int:
  args = _parse_args(argv)
  if args.verbose:
    for name in ("chess_insights.ingest", "chess_insights.retry", "chess_insights.store"):
      logging.getLogger(name).setLevel(logging.DEBUG)

  store = SqlEventStore.from_url(args.database_url)
  try:
    result = asyncio.run(_run(args.username, store))
  except ChessInsightsError as e:
    print(f"error: {e}", file=sys.stderr)
    return EXIT_CODES.get(e.code, 1)
  finally:
    store.close()

  print(f"Ingested games for {result.username}. {result.message}")
  return 0


if __name__ == "__main__":
  sys.exit(main())
