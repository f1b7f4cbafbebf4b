from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.api.deps import get_identity
from app.db.session import SessionLocal
from app.game.identity import PlayerIdentity
from app.game.leaderboard.service import submit_score as submit_leaderboard_score

from .game_helpers import _now_utc

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


class SubmitScoreRequest(BaseModel):
    score: int = Field(ge=0)
    game_mode: str = Field(min_length=1, max_length=32)
    difficulty: str | None = Field(default=None, max_length=16)
    score_hash: str = Field(min_length=1, max_length=1024)
    score_timestamp: int | None = Field(default=None, ge=0)
    session_id: UUID | None = None


class SubmitScoreResponse(BaseModel):
    success: bool = True
    entry_id: int
    score: int
    game_mode: str
    difficulty: str | None = None
    score_adjusted: bool


@router.post("/submit_score", response_model=SubmitScoreResponse)
async def submit_score(
    payload: SubmitScoreRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> SubmitScoreResponse:
    async with SessionLocal.begin() as session:
        result = await submit_leaderboard_score(
            session,
            identity=identity,
            score=payload.score,
            game_mode=payload.game_mode,
            difficulty=payload.difficulty,
            score_hash=payload.score_hash,
            score_timestamp=payload.score_timestamp,
            now_utc=_now_utc(),
            session_id=payload.session_id,
        )
    return SubmitScoreResponse(
        entry_id=result.entry_id,
        score=result.score,
        game_mode=result.game_mode,
        difficulty=result.difficulty,
        score_adjusted=result.score_adjusted,
    )
