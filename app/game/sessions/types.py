from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from app.game.images.types import ImageView


@dataclass(slots=True, frozen=True)
class SessionContext:
    session_id: UUID
    mode: str


@dataclass(slots=True)
class SessionSnapshot:
    session_id: UUID
    mode: str
    difficulty: str
    score: int
    lives: int
    starting_lives: int
    turn: int
    total_turns: int
    current_streak: int
    completed: bool
    has_pending_turn: bool


@dataclass(slots=True)
class StartGameResult:
    context: SessionContext
    snapshot: SessionSnapshot


@dataclass(slots=True)
class TurnView:
    snapshot: SessionSnapshot
    left_image: ImageView
    right_image: ImageView
    left_is_real: bool
    is_final_turn: bool
    real_image_description: str
    is_resumed_turn: bool = False


@dataclass(slots=True)
class AnswerResult:
    snapshot: SessionSnapshot
    correct: bool
    streak_bonus: int
    time_bonus: int
    score_hash: str
    score_verification: int
    image_description: str | None = None
    duplicate: bool = False


@dataclass(slots=True)
class FourImageChallengeView:
    images: list[ImageView]
    real_image_index: int


@dataclass(slots=True)
class SingleImageChallengeView:
    image: ImageView
    is_real: bool


BonusChallengeView = FourImageChallengeView | SingleImageChallengeView


@dataclass(slots=True)
class BonusResult:
    snapshot: SessionSnapshot
    correct: bool
    game_type: str
    life_awarded: bool
    points_reward: bool
    max_lives: int
