from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GameResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class StartGameRequest(BaseModel):
    mode: str = Field(default="single", min_length=1, max_length=32)
    difficulty: str | None = Field(default=None, max_length=16)


class SessionRequest(BaseModel):
    session_id: UUID
    game_mode: str = Field(default="single", min_length=1, max_length=32)


class SubmitAnswerRequest(SessionRequest):
    selected: str = Field(min_length=1, max_length=8)
    response_time_ms: int = Field(default=0, ge=0, le=3_600_000)


class BonusResultRequest(SessionRequest):
    correct: bool
    selected_image_id: int | None = Field(default=None, gt=0)


class ImagePayload(GameResponseModel):
    image_id: int = Field(alias="id")
    url: str
    filename: str
    description: str | None = None


class StartGameResponse(GameResponseModel):
    success: bool = True
    session_id: UUID
    mode: str
    difficulty: str
    score: int
    lives: int
    turn: int
    total_turns: int = Field(alias="totalTurns")


class SessionStateResponse(GameResponseModel):
    success: bool = True
    session_id: UUID
    mode: str
    difficulty: str
    score: int
    lives: int
    starting_lives: int
    turn: int
    total_turns: int = Field(alias="totalTurns")
    current_streak: int
    completed: bool
    has_pending_turn: bool


class TurnResponse(GameResponseModel):
    success: bool = True
    left_image: ImagePayload = Field(alias="leftImage")
    right_image: ImagePayload = Field(alias="rightImage")
    left_is_real: bool = Field(alias="leftIsReal")
    turn: int
    total_turns: int = Field(alias="totalTurns")
    score: int
    lives: int
    current_streak: int
    completed: bool
    is_final_turn: bool
    real_image_description: str
    is_resumed_turn: bool = False


class AnswerResponse(GameResponseModel):
    success: bool = True
    correct: bool
    score: int
    lives: int
    turn: int
    total_turns: int = Field(alias="totalTurns")
    completed: bool
    current_streak: int
    streak_bonus: int
    time_bonus: int
    image_description: str | None = None
    score_hash: str
    score_verification: int
    duplicate: bool = False


class TerminalResponse(GameResponseModel):
    success: bool = False
    completed: bool = True
    score: int
    lives: int
    turn: int
    total_turns: int = Field(alias="totalTurns")
    message: str


class BonusImagesResponse(GameResponseModel):
    success: bool = True
    game_type: str
    images: list[ImagePayload]
    real_image_index: int | None = None
    is_real: bool | None = None


class BonusResultResponse(GameResponseModel):
    success: bool = True
    correct: bool
    game_type: str
    score: int
    lives: int
    max_lives: int
    life_awarded: bool
    points_reward: bool
