from __future__ import annotations

import pytest

from chess_insights.store.sql import SqlEventStore
from chess_insights.util.retry import RetryPolicy
from tests.testkit import FakeChessCom, RecordingSleep


@pytest.fixture
def store():
  s = SqlEventStore.from_url("sqlite://")
  yield s
  s.close()


@pytest.fixture
def sleeper() -> RecordingSleep:
  return RecordingSleep()


@pytest.fixture
def policy(sleeper) -> RetryPolicy:
  return RetryPolicy(max_attempts=3, base_delay=0.5, sleep=sleeper)


@pytest.fixture
def chesscom() -> FakeChessCom:
  return FakeChessCom()
