# chess_insights/store/sql.py
from datetime import datetime, timezone
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from chess_insights.config import DATABASE_URL
from chess_insights.models import GameEvent
from chess_insights.store.base import EventStore
from chess_insights.util.log import get_logger

log = get_logger("chess_insights.store", "STORE")


class Base(DeclarativeBase):
  pass


class EventRow(Base):
  __tablename__ = "events"

  id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
  service: Mapped[str] = mapped_column(sa.String(32), nullable=False)
  type: Mapped[str] = mapped_column(sa.String(32), nullable=False)
  route: Mapped[str] = mapped_column(sa.String(64), nullable=False)
  status: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False)
  # naive UTC
  created_at: Mapped[datetime] = mapped_column(sa.DateTime, nullable=False)
  player: Mapped[str] = mapped_column(sa.String(64), nullable=False)

  __table_args__ = (
      sa.Index("ix_events_dedup", "service", "player", "route", "created_at"),
      sa.Index("ix_events_service_created", "service", "created_at"),
      sa.CheckConstraint("status IN (-1, 0, 1)", name="ck_events_status"),
  )


def _to_db(dt: datetime) -> datetime:
  if dt.tzinfo is None:
    return dt
  return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db(dt: datetime) -> datetime:
  return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)


def _to_event(row: EventRow) -> GameEvent:
  return GameEvent(
      service=row.service,
      type=row.type,
      route=row.route,
      status=row.status,
      created_at=_from_db(row.created_at),
      player=row.player,
  )


def make_engine(url: str = DATABASE_URL) -> Engine:
  if url.startswith("sqlite"):
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
      # every session must see the same in-memory database
      kwargs["poolclass"] = StaticPool
    return sa.create_engine(url, **kwargs)
  return sa.create_engine(url, pool_pre_ping=True)


class SqlEventStore(EventStore):
  def __init__(self, engine: Engine):
    self.engine = engine
    self._session = sessionmaker(bind=engine, expire_on_commit=False)
    Base.metadata.create_all(engine)

  @classmethod
  def from_url(cls, url: str = DATABASE_URL) -> "SqlEventStore":
    log.info("opening event store %s", engine_label(url))
    return cls(make_engine(url))

  def exists(self, service: str, player: str, route: str, created_at: datetime) -> bool:
    stmt = (
        sa.select(EventRow.id)
        .where(
            EventRow.service == service,
            EventRow.player == player,
            EventRow.route == route,
            EventRow.created_at == _to_db(created_at),
        )
        .limit(1)
    )
    with self._session() as s:
      return s.execute(stmt).first() is not None

  def append(self, event: GameEvent) -> None:
    row = EventRow(
        service=event.service,
        type=event.type,
        route=event.route,
        status=event.status,
        created_at=_to_db(event.created_at),
        player=event.player,
    )
    with self._session() as s:
      s.add(row)
      s.commit()

  def count(self, service: str, player: Optional[str] = None) -> int:
    stmt = sa.select(sa.func.count()).select_from(EventRow).where(EventRow.service == service)
    if player:
      stmt = stmt.where(EventRow.player == player)
    with self._session() as s:
      return int(s.execute(stmt).scalar_one())

  def query(self, service: str, player: Optional[str] = None, since: Optional[datetime] = None) -> List[GameEvent]:
    stmt = sa.select(EventRow).where(EventRow.service == service)
    if player:
      stmt = stmt.where(EventRow.player == player)
    if since is not None:
      stmt = stmt.where(EventRow.created_at >= _to_db(since))
    stmt = stmt.order_by(EventRow.created_at.asc(), EventRow.id.asc())
    with self._session() as s:
      return [_to_event(r) for r in s.scalars(stmt).all()]

  def players(self, service: str) -> List[str]:
    stmt = (
        sa.select(EventRow.player)
        .where(EventRow.service == service)
        .distinct()
        .order_by(EventRow.player)
    )
    with self._session() as s:
      return [p for p in s.scalars(stmt).all() if p]

  def close(self) -> None:
    self.engine.dispose()


def engine_label(url: str) -> str:
  """URL without credentials, for logs."""
  try:
    return sa.engine.make_url(url).render_as_string(hide_password=True)
  except sa.exc.ArgumentError:
    return "<invalid url>"
