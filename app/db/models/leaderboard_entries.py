from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard_entries"
    __table_args__ = (
        CheckConstraint("score > 0", name="ck_leaderboard_entries_score_positive"),
        CheckConstraint(
            "game_mode IN ('single','endless','multiplayer','daily_challenge')",
            name="ck_leaderboard_entries_game_mode",
        ),
        Index("idx_leaderboard_mode_difficulty_score", "game_mode", "difficulty", "score"),
        Index("idx_leaderboard_user_created", "user_id", "created_at"),
        UniqueConstraint("score_nonce", name="uq_leaderboard_entries_score_nonce"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    game_mode: Mapped[str] = mapped_column(String(16), nullable=False)
    difficulty: Mapped[str | None] = mapped_column(String(8), nullable=True)
    session_id: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), nullable=True)
    score_nonce: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
