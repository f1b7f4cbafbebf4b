from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.api.routes.game_models import GameResponseModel, ImagePayload


class CreateGameRequest(BaseModel):
    is_public: bool = True
    total_turns: int | None = Field(default=None, ge=1, le=1000)


class JoinGameRequest(BaseModel):
    game_id: UUID | None = None
    room_code: str | None = Field(default=None, min_length=1, max_length=8)


class GameRequest(BaseModel):
    session_id: UUID


class AdvanceTurnRequest(GameRequest):
    from_turn: int | None = Field(default=None, ge=1)


class MultiplayerAnswerRequest(GameRequest):
    selected: str = Field(min_length=1, max_length=8)


class ChestSelectionRequest(GameRequest):
    chest_index: int


class PlayerPayload(GameResponseModel):
    slot_index: int
    name: str
    is_bot: bool
    score: int
    streak: int
    answered_current_turn: bool
    finished: bool


class MultiplayerGamePayload(GameResponseModel):
    session_id: UUID
    room_code: str
    is_public: bool
    status: str
    turn: int
    total_turns: int = Field(alias="totalTurns")
    has_bots: bool
    wait_timeout_at: datetime
    players: list[PlayerPayload]
    winner_slot_indexes: list[int] | None = None


class MultiplayerGameResponse(GameResponseModel):
    success: bool = True
    game: MultiplayerGamePayload


class JoinGameResponse(GameResponseModel):
    success: bool = True
    game: MultiplayerGamePayload
    slot_index: int
    joined_now: bool


class MultiplayerTurnResponse(GameResponseModel):
    success: bool = True
    game: MultiplayerGamePayload
    left_image: ImagePayload = Field(alias="leftImage")
    right_image: ImagePayload = Field(alias="rightImage")
    left_is_real: bool = Field(alias="leftIsReal")
    turn: int
    total_turns: int = Field(alias="totalTurns")
    is_final_turn: bool
    real_image_description: str


class MultiplayerAnswerResponse(GameResponseModel):
    success: bool = True
    game: MultiplayerGamePayload
    slot_index: int
    correct: bool
    score: int
    streak: int
    current_streak: int
    streak_bonus: int
    all_answered: bool
    finished: bool
    image_description: str | None = None
    score_hash: str
    score_verification: int
    duplicate: bool = False


class ChestPayload(GameResponseModel):
    chest_index: int
    claimed_by_slot: int | None = None
    value: int | None = None


class ChestGameResponse(GameResponseModel):
    success: bool = True
    session_id: UUID
    chests: list[ChestPayload]
    completed: bool
    players: list[PlayerPayload]
    selected_chest_index: int | None = None


class ChestSelectionResponse(GameResponseModel):
    success: bool = True
    chest_game: ChestGameResponse
    slot_index: int
    chest_index: int
    value: int
    score: int


class WinnerResponse(GameResponseModel):
    success: bool = True
    session_id: UUID
    winner_slot_indexes: list[int]
    winner_names: list[str]
    is_tie: bool
    top_score: int
    players: list[PlayerPayload]
