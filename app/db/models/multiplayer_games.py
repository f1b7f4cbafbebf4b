from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models.base import Base


class MultiplayerGame(Base):
    __tablename__ = "multiplayer_games"
    __table_args__ = (
        CheckConstraint(
            "status IN ('waiting','in_progress','completed')",
            name="ck_multiplayer_games_status",
        ),
        CheckConstraint("current_turn >= 1", name="ck_multiplayer_games_current_turn_positive"),
        CheckConstraint(
            "total_turns >= 5 AND total_turns <= 100",
            name="ck_multiplayer_games_total_turns_range",
        ),
        CheckConstraint(
            "current_real_image_id IS NULL OR current_ai_image_id IS NULL "
            "OR current_real_image_id != current_ai_image_id",
            name="ck_multiplayer_games_distinct_pair",
        ),
        Index("idx_multiplayer_games_status_timeout", "status", "wait_timeout_at"),
        Index("idx_multiplayer_games_public_waiting", "is_public", "status", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    room_code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    current_turn: Mapped[int] = mapped_column(Integer, nullable=False)
    total_turns: Mapped[int] = mapped_column(Integer, nullable=False)
    current_real_image_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    current_ai_image_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    left_is_real: Mapped[bool] = mapped_column(Boolean, nullable=False)
    shown_images: Mapped[list[int]] = mapped_column(JSONB, nullable=False)
    has_bots: Mapped[bool] = mapped_column(Boolean, nullable=False)
    winner_slot_indexes: Mapped[list[int] | None] = mapped_column(JSONB, nullable=True)
    wait_timeout_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    players: Mapped[list[MultiplayerPlayer]] = relationship(
        back_populates="game",
        order_by="MultiplayerPlayer.slot_index",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    chest_game: Mapped[BonusChestGame | None] = relationship(
        back_populates="game",
        lazy="selectin",
        uselist=False,
        cascade="all, delete-orphan",
    )


class MultiplayerPlayer(Base):
    __tablename__ = "multiplayer_players"
    __table_args__ = (
        UniqueConstraint("game_id", "slot_index", name="uq_multiplayer_players_game_slot"),
        CheckConstraint(
            "slot_index >= 0 AND slot_index <= 3",
            name="ck_multiplayer_players_slot_index_range",
        ),
        CheckConstraint("score >= 0", name="ck_multiplayer_players_score_non_negative"),
        CheckConstraint("streak >= 0", name="ck_multiplayer_players_streak_non_negative"),
        Index("idx_multiplayer_players_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    game_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("multiplayer_games.id"),
        nullable=False,
    )
    slot_index: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    is_bot: Mapped[bool] = mapped_column(Boolean, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    streak: Mapped[int] = mapped_column(Integer, nullable=False)
    answered_turn: Mapped[int] = mapped_column(Integer, nullable=False)
    last_answer_correct: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    finished: Mapped[bool] = mapped_column(Boolean, nullable=False)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    game: Mapped[MultiplayerGame] = relationship(back_populates="players")


class BonusChestGame(Base):
    __tablename__ = "bonus_chest_games"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    game_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("multiplayer_games.id"),
        unique=True,
        nullable=False,
    )
    chest_values: Mapped[list[int]] = mapped_column(JSONB, nullable=False)
    chest_claims: Mapped[list[int | None]] = mapped_column(JSONB, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    game: Mapped[MultiplayerGame] = relationship(back_populates="chest_game")
