# chess_insights/services/aggregate.py
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from chess_insights.config import MAX_WINDOW_DAYS, SERVICE, UNKNOWN_BUCKET
from chess_insights.errors import InvalidInput
from chess_insights.models import AggregationResult, BucketStats, GameEvent, Streak
from chess_insights.store.base import EventStore

WIN, DRAW, LOSS = 1, 0, -1

# ----------------------------
# Helpers
# ----------------------------
def win_rate(wins: int, total: int) -> float:
  if total <= 0:
    return 0.0
  return wins / total

def bucket_key(route: Optional[str]) -> str:
  """'/blitz' -> 'blitz'; blank routes land in the unknown bucket."""
  key = (route or "").replace("/", "", 1).strip()
  return key or UNKNOWN_BUCKET

def normalize_player(player: Optional[str]) -> Optional[str]:
  if player is None:
    return None
  p = player.strip().lower()
  return p or None

def check_window(window_days: int) -> int:
  if isinstance(window_days, bool) or not isinstance(window_days, int):
    raise InvalidInput("windowDays must be an integer")
  if window_days < 1 or window_days > MAX_WINDOW_DAYS:
    raise InvalidInput(f"windowDays must be between 1 and {MAX_WINDOW_DAYS}")
  return window_days

# ----------------------------
# Buckets
# ----------------------------
def bucket_breakdown(events: Sequence[GameEvent]) -> List[BucketStats]:
  """Per time-control counts, most games first; ties keep first-seen order."""
  per: Dict[str, Dict[str, int]] = {}
  for e in events:
    r = per.setdefault(bucket_key(e.route), {"games": 0, "wins": 0, "draws": 0, "losses": 0})
    r["games"] += 1
    if e.status == WIN:
      r["wins"] += 1
    elif e.status == DRAW:
      r["draws"] += 1
    elif e.status == LOSS:
      r["losses"] += 1

  rows = [
    BucketStats(bucket=k, win_rate=win_rate(v["wins"], v["games"]), **v)
    for k, v in per.items()
  ]
  rows.sort(key=lambda b: b.games, reverse=True)
  return rows

def most_played(buckets: Sequence[BucketStats]) -> Optional[BucketStats]:
  return buckets[0] if buckets else None

def weakest(buckets: Sequence[BucketStats]) -> Optional[BucketStats]:
  played = [b for b in buckets if b.games > 0]
  if not played:
    return None
  return sorted(played, key=lambda b: b.win_rate)[0]

# ----------------------------
# Streaks
# ----------------------------
def current_streak(events: Sequence[GameEvent]) -> Streak:
  """
  Scan newest -> oldest. Leading draws are skipped until a win or loss fixes the
  streak type; after that any other outcome (draws included) ends the scan.
  """
  kind = None
  length = 0
  for e in reversed(events):
    if kind is None:
      if e.status == WIN:
        kind, length = WIN, 1
      elif e.status == LOSS:
        kind, length = LOSS, 1
    elif e.status == kind:
      length += 1
    else:
      break

  if kind is None:
    return Streak(type="none", length=0)
  return Streak(type="win" if kind == WIN else "loss", length=length)

def longest_win_streak(events: Sequence[GameEvent]) -> int:
  best = run = 0
  for e in events:
    if e.status == WIN:
      run += 1
      best = max(best, run)
    else:
      run = 0
  return best

# ----------------------------
# Engine
# ----------------------------
def summarize_events(
    events: Sequence[GameEvent],
    *,
    window_days: int,
    since: datetime,
    player: Optional[str] = None,
) -> AggregationResult:
  """Pure aggregation over events already ordered ascending by created_at."""
  total = len(events)
  wins = sum(1 for e in events if e.status == WIN)
  draws = sum(1 for e in events if e.status == DRAW)
  losses = sum(1 for e in events if e.status == LOSS)
  buckets = bucket_breakdown(events)

  return AggregationResult(
      window_days=window_days,
      since=since,
      player=player,
      total=total,
      wins=wins,
      draws=draws,
      losses=losses,
      win_rate=win_rate(wins, total),
      buckets=buckets,
      most_played=most_played(buckets),
      weakest=weakest(buckets),
      current_streak=current_streak(events),
      longest_win_streak=longest_win_streak(events),
  )

def aggregate(
    store: EventStore,
    *,
    window_days: int,
    player: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AggregationResult:
  window_days = check_window(window_days)
  player = normalize_player(player)
  now = now or datetime.now(timezone.utc)
  since = now - timedelta(days=window_days)

  events = store.query(SERVICE, player=player, since=since)
  return summarize_events(events, window_days=window_days, since=since, player=player)
