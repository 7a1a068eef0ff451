"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_type: Mapped[str]
    players: Mapped[list[str]] = mapped_column(JSON)
    status: Mapped[str]
    current_turn: Mapped[str]
    winner: Mapped[Optional[str]]
    # kernel fields, stored under their document names
    state: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    # compare-and-set token, bumped on every write
    version: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    last_updated: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBInvite(Base):
    __tablename__ = "invites"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    sender: Mapped[str]
    receiver: Mapped[str]
    game_type: Mapped[str]
    status: Mapped[str]
    game_id: Mapped[Optional[UUID]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
