from datetime import datetime, timedelta, timezone

import pytest

from chess_insights.errors import InvalidInput
from chess_insights.models import BucketStats
from chess_insights.services.aggregate import (
  aggregate,
  bucket_breakdown,
  bucket_key,
  current_streak,
  longest_win_streak,
  most_played,
  summarize_events,
  weakest,
  win_rate,
)
from tests.testkit import make_event

NOW = datetime(2024, 6, 1, 12, tzinfo=timezone.utc)
W, D, L = 1, 0, -1


def seq(*statuses, route="/blitz", start=None):
  start = start or NOW - timedelta(days=3)
  return [make_event(s, start + timedelta(minutes=i), route=route) for i, s in enumerate(statuses)]


def test_win_rate_never_divides_by_zero():
  assert win_rate(0, 0) == 0.0
  assert win_rate(3, 4) == 0.75


@pytest.mark.parametrize("wins,draws,losses", [(0, 0, 1), (5, 0, 0), (2, 3, 4), (1, 1, 1)])
def test_win_rate_bounds(wins, draws, losses):
  r = summarize_events(seq(*([W] * wins + [D] * draws + [L] * losses)), window_days=7, since=NOW)
  assert r.total == wins + draws + losses
  assert r.win_rate == pytest.approx(wins / r.total)
  assert 0.0 <= r.win_rate <= 1.0


def test_streak_after_loss_then_three_wins():
  events = seq(L, W, W, W)
  assert current_streak(events).model_dump() == {"type": "win", "length": 3}
  assert longest_win_streak(events) == 3


def test_draw_stops_an_established_streak():
  events = seq(W, D, W, W)
  assert current_streak(events).model_dump() == {"type": "win", "length": 2}


def test_leading_draws_are_skipped():
  events = seq(L, L, W, L, L, D, D)
  assert current_streak(events).model_dump() == {"type": "loss", "length": 2}


def test_all_draws_or_empty_is_no_streak():
  assert current_streak(seq(D, D, D)).model_dump() == {"type": "none", "length": 0}
  assert current_streak([]).model_dump() == {"type": "none", "length": 0}


def test_longest_win_streak_resets_on_draw_and_loss():
  assert longest_win_streak(seq(W, W, D, W, W, W, L, W)) == 3
  assert longest_win_streak(seq(W, W, W, W, D, W)) == 4
  assert longest_win_streak(seq(L, D)) == 0


def test_bucket_key():
  assert bucket_key("/blitz") == "blitz"
  assert bucket_key("/") == "unknown"
  assert bucket_key(None) == "unknown"


def test_most_played_and_weakest():
  buckets = [
    BucketStats(bucket="blitz", games=10, wins=6, win_rate=0.6),
    BucketStats(bucket="bullet", games=5, wins=1, win_rate=0.2),
  ]
  assert most_played(buckets).bucket == "blitz"
  assert weakest(buckets).bucket == "bullet"


def test_bucket_breakdown_orders_by_games_then_first_seen():
  events = (
    seq(W, route="/rapid")
    + seq(L, L, route="/bullet", start=NOW - timedelta(days=2))
    + seq(W, D, route="/blitz", start=NOW - timedelta(days=1))
  )
  rows = bucket_breakdown(events)
  assert [r.bucket for r in rows] == ["bullet", "blitz", "rapid"]
  blitz = rows[1]
  assert (blitz.games, blitz.wins, blitz.draws, blitz.losses) == (2, 1, 1, 0)
  assert blitz.win_rate == 0.5


def test_weakest_tie_keeps_game_order():
  events = seq(L, L, L, route="/blitz") + seq(L, route="/bullet", start=NOW - timedelta(days=1))
  rows = bucket_breakdown(events)
  assert weakest(rows).bucket == "blitz"


def test_empty_window_summary():
  r = summarize_events([], window_days=7, since=NOW)
  assert r.total == 0
  assert r.win_rate == 0.0
  assert r.buckets == []
  assert r.most_played is None and r.weakest is None
  assert r.current_streak.type == "none"


def test_aggregate_reads_window_and_player_from_store(store):
  store.append(make_event(W, NOW - timedelta(days=10)))
  store.append(make_event(L, NOW - timedelta(days=2)))
  store.append(make_event(W, NOW - timedelta(days=1), route="/bullet"))
  store.append(make_event(W, NOW - timedelta(hours=1), player="bob"))

  r = aggregate(store, window_days=7, player=" Alice ", now=NOW)
  assert r.player == "alice"
  assert (r.total, r.wins, r.losses) == (2, 1, 1)
  assert r.current_streak.model_dump() == {"type": "win", "length": 1}
  assert r.since == NOW - timedelta(days=7)

  everyone = aggregate(store, window_days=30, now=NOW)
  assert everyone.player is None
  assert everyone.total == 4


def test_aggregate_orders_by_game_time_not_insert_order(store):
  store.append(make_event(W, NOW - timedelta(hours=1)))
  store.append(make_event(L, NOW - timedelta(hours=3)))
  store.append(make_event(W, NOW - timedelta(hours=2)))

  r = aggregate(store, window_days=1, now=NOW)
  assert r.current_streak.model_dump() == {"type": "win", "length": 2}


@pytest.mark.parametrize("bad", [0, -1, 10_000])
def test_aggregate_rejects_bad_windows(store, bad):
  with pytest.raises(InvalidInput):
    aggregate(store, window_days=bad, now=NOW)
