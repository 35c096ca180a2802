from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Camel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----------------------------
# Stored entity
# ----------------------------
class GameEvent(BaseModel):
  """One game's outcome from one player's side. Immutable once written."""
  model_config = ConfigDict(frozen=True)

  service: str
  type: str
  route: str
  status: Literal[-1, 0, 1]
  created_at: datetime
  player: str


# ----------------------------
# Ingestion
# ----------------------------
class IngestRequest(BaseModel):
  # checked by normalize_username so bad values answer 400 {"error"}
  username: Any = None


class IngestResult(_Camel):
  success: bool = True
  username: str
  games_ingested: int = 0
  total_games: int = 0
  message: str = ""


class ErrorResponse(BaseModel):
  error: str


# ----------------------------
# Aggregation
# ----------------------------
class BucketStats(_Camel):
  bucket: str
  games: int = 0
  wins: int = 0
  draws: int = 0
  losses: int = 0
  win_rate: float = 0.0


class Streak(_Camel):
  type: Literal["win", "loss", "none"] = "none"
  length: int = 0


class AggregationResult(_Camel):
  window_days: int
  since: datetime
  player: Optional[str] = None
  total: int = 0
  wins: int = 0
  draws: int = 0
  losses: int = 0
  win_rate: float = 0.0
  buckets: List[BucketStats] = Field(default_factory=list)
  most_played: Optional[BucketStats] = None
  weakest: Optional[BucketStats] = None
  current_streak: Streak = Field(default_factory=Streak)
  longest_win_streak: int = 0


class SummaryResponse(AggregationResult):
  insight: str
  source: Literal["bedrock", "heuristic"]


# ----------------------------
# Dashboard
# ----------------------------
class Kpis(_Camel):
  # to_camel would render these as "total7D"
  total_7d: int = Field(0, alias="total7d")
  wins_7d: int = Field(0, alias="wins7d")
  win_rate_7d: float = Field(0.0, alias="winRate7d")
  last_ingested: Optional[datetime] = None


class DailyPoint(_Camel):
  date: str
  games: int = 0
  wins: int = 0
  win_rate: float = 0.0


class TimeClassPoint(_Camel):
  time_class: str
  games: int = 0
  win_rate: float = 0.0


class DashboardResponse(_Camel):
  player: Optional[str] = None
  players: List[str] = Field(default_factory=list)
  kpis: Kpis = Field(default_factory=Kpis)
  daily: List[DailyPoint] = Field(default_factory=list)
  by_time_class: List[TimeClassPoint] = Field(default_factory=list)
