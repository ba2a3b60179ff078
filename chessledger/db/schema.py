"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBChallenge(Base):
    __tablename__ = "challenges"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    # secondary indexes: "challenges created by X" / "challenges directed at X" (NULL = open challenge)
    created_by: Mapped[str] = mapped_column(String, index=True)
    opponent: Mapped[Optional[str]] = mapped_column(String, index=True)
    play_as: Mapped[Optional[str]]
    block_limit: Mapped[Optional[int]]
    block_created: Mapped[int]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    # secondary indexes: "games where X plays white" / "games where X plays black"
    player1: Mapped[str] = mapped_column(String, index=True)
    player2: Mapped[str] = mapped_column(String, index=True)
    block_limit: Mapped[Optional[int]]
    block_start: Mapped[int]
    turn_block: Mapped[int]
    fen: Mapped[str]
    moves: Mapped[list[list]] = mapped_column(JSON, default=list)
    history_fen: Mapped[list[str]] = mapped_column(JSON, default=list)
    draw_offer: Mapped[Optional[str]]
    status: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBRating(Base):
    __tablename__ = "ratings"
    player: Mapped[str] = mapped_column(String, primary_key=True)
    rating: Mapped[int]


class DBCounter(Base):
    """Monotonic id sequences. Ids of deleted records are never handed out again."""

    __tablename__ = "counters"
    name: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[int]


class DBState(Base):
    """Singleton row (id is always 1)."""

    __tablename__ = "state"
    id: Mapped[int] = mapped_column(primary_key=True)
    owner: Mapped[str]
