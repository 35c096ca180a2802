# chess_insights/store/base.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from chess_insights.models import GameEvent


class EventStore(ABC):
  """
  Append-only store of GameEvents.

  Dedup is the caller's job: check `exists` on (service, player, route, created_at)
  before `append`. The pair is not atomic against a concurrent identical write.
  """

  @abstractmethod
  def exists(self, service: str, player: str, route: str, created_at: datetime) -> bool: ...

  @abstractmethod
  def append(self, event: GameEvent) -> None: ...

  @abstractmethod
  def count(self, service: str, player: Optional[str] = None) -> int: ...

  @abstractmethod
  def query(self, service: str, player: Optional[str] = None, since: Optional[datetime] = None) -> List[GameEvent]:
    """Events ordered ascending by created_at, created_at >= since when given."""

  @abstractmethod
  def players(self, service: str) -> List[str]: ...

  def close(self) -> None:
    pass
