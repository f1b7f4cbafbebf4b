from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class GameSession(Base):
    __tablename__ = "game_sessions"
    __table_args__ = (
        CheckConstraint(
            "mode IN ('single','endless','daily_challenge')",
            name="ck_game_sessions_mode",
        ),
        CheckConstraint(
            "difficulty IN ('easy','medium','hard','endless')",
            name="ck_game_sessions_difficulty",
        ),
        CheckConstraint("current_turn >= 1", name="ck_game_sessions_current_turn_positive"),
        CheckConstraint("total_turns >= 0", name="ck_game_sessions_total_turns_non_negative"),
        CheckConstraint("score >= 0", name="ck_game_sessions_score_non_negative"),
        CheckConstraint("lives >= 0", name="ck_game_sessions_lives_non_negative"),
        CheckConstraint("lives <= starting_lives", name="ck_game_sessions_lives_cap"),
        CheckConstraint(
            "current_streak >= 0",
            name="ck_game_sessions_current_streak_non_negative",
        ),
        CheckConstraint(
            "current_real_image_id IS NULL OR current_ai_image_id IS NULL "
            "OR current_real_image_id != current_ai_image_id",
            name="ck_game_sessions_distinct_pair",
        ),
        CheckConstraint(
            "pending_bonus_type IS NULL OR pending_bonus_type IN ('four_image','single_image')",
            name="ck_game_sessions_pending_bonus_type",
        ),
        Index("idx_game_sessions_owner_created", "owner_user_id", "created_at"),
        Index(
            "uq_game_sessions_daily_owner_date",
            "owner_user_id",
            "local_date",
            unique=True,
            postgresql_where=text("mode = 'daily_challenge'"),
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    owner_user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    mode: Mapped[str] = mapped_column(String(16), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(8), nullable=False)
    current_turn: Mapped[int] = mapped_column(Integer, nullable=False)
    total_turns: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    lives: Mapped[int] = mapped_column(Integer, nullable=False)
    starting_lives: Mapped[int] = mapped_column(Integer, nullable=False)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False)
    current_real_image_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    current_ai_image_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    left_is_real: Mapped[bool] = mapped_column(Boolean, nullable=False)
    shown_images: Mapped[list[int]] = mapped_column(JSONB, nullable=False)
    time_penalty: Mapped[bool] = mapped_column(Boolean, nullable=False)
    last_answer_key: Mapped[str | None] = mapped_column(String(96), nullable=True)
    last_answer_correct: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    pending_bonus_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    bonus_real_image_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    local_date: Mapped[date] = mapped_column(Date, nullable=False)
