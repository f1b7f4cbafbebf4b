from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from app.game.images.types import ImageView


@dataclass(slots=True)
class PlayerSlotView:
    slot_index: int
    name: str
    is_bot: bool
    score: int
    streak: int
    answered_current_turn: bool
    finished: bool
    user_id: int | None = None


@dataclass(slots=True)
class MultiplayerGameView:
    game_id: UUID
    room_code: str
    is_public: bool
    status: str
    current_turn: int
    total_turns: int
    has_bots: bool
    wait_timeout_at: datetime
    players: list[PlayerSlotView] = field(default_factory=list)
    winner_slot_indexes: list[int] | None = None


@dataclass(slots=True)
class JoinResult:
    game: MultiplayerGameView
    slot_index: int
    joined_now: bool


@dataclass(slots=True)
class MultiplayerTurnView:
    game: MultiplayerGameView
    left_image: ImageView
    right_image: ImageView
    left_is_real: bool
    is_final_turn: bool
    real_image_description: str


@dataclass(slots=True)
class MultiplayerAnswerResult:
    game: MultiplayerGameView
    slot_index: int
    correct: bool
    score: int
    streak: int
    streak_bonus: int
    all_answered: bool
    finished: bool
    score_hash: str
    score_verification: int
    image_description: str | None = None
    duplicate: bool = False


@dataclass(slots=True)
class ChestView:
    chest_index: int
    claimed_by_slot: int | None
    value: int | None


@dataclass(slots=True)
class ChestGameView:
    game_id: UUID
    chests: list[ChestView]
    completed: bool
    players: list[PlayerSlotView]
    selected_chest_index: int | None = None


@dataclass(slots=True)
class ChestSelectionResult:
    chest_game: ChestGameView
    slot_index: int
    chest_index: int
    value: int
    score: int


@dataclass(slots=True)
class WinnerResult:
    game_id: UUID
    winner_slot_indexes: list[int]
    winner_names: list[str]
    is_tie: bool
    top_score: int
    players: list[PlayerSlotView]
