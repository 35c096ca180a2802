# chess_insights/services/dashboard.py
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from chess_insights.config import DAILY_WINDOW_DAYS, HISTORY_WINDOW_DAYS, KPI_WINDOW_DAYS, SERVICE
from chess_insights.models import DailyPoint, DashboardResponse, GameEvent, Kpis, TimeClassPoint
from chess_insights.services.aggregate import WIN, bucket_breakdown, normalize_player, win_rate
from chess_insights.store.base import EventStore


def _ymd(d: datetime) -> str:
  return d.astimezone(timezone.utc).strftime("%Y-%m-%d")


def kpis(events: Sequence[GameEvent], now: datetime) -> Kpis:
  cut = now - timedelta(days=KPI_WINDOW_DAYS)
  recent = [e for e in events if e.created_at >= cut]
  wins = sum(1 for e in recent if e.status == WIN)
  return Kpis(
      total_7d=len(recent),
      wins_7d=wins,
      win_rate_7d=win_rate(wins, len(recent)),
      last_ingested=events[-1].created_at if events else None,
  )


def daily_series(events: Sequence[GameEvent], now: datetime) -> List[DailyPoint]:
  """One row per UTC day over the daily window (today included), zero-filled."""
  cut = now - timedelta(days=DAILY_WINDOW_DAYS)
  days: Dict[str, Dict[str, int]] = {}
  for e in events:
    if e.created_at < cut:
      continue
    d = days.setdefault(_ymd(e.created_at), {"games": 0, "wins": 0})
    d["games"] += 1
    if e.status == WIN:
      d["wins"] += 1
  for i in range(DAILY_WINDOW_DAYS, -1, -1):
    days.setdefault(_ymd(now - timedelta(days=i)), {"games": 0, "wins": 0})

  return [
    DailyPoint(date=k, games=v["games"], wins=v["wins"], win_rate=win_rate(v["wins"], v["games"]))
    for k, v in sorted(days.items())
  ]


def dashboard(store: EventStore, *, player: Optional[str] = None, now: Optional[datetime] = None) -> DashboardResponse:
  player = normalize_player(player)
  now = now or datetime.now(timezone.utc)
  events = store.query(SERVICE, player=player, since=now - timedelta(days=HISTORY_WINDOW_DAYS))

  return DashboardResponse(
      player=player,
      players=store.players(SERVICE),
      kpis=kpis(events, now),
      daily=daily_series(events, now),
      by_time_class=[
        TimeClassPoint(time_class=b.bucket, games=b.games, win_rate=b.win_rate)
        for b in bucket_breakdown(events)
      ],
  )
