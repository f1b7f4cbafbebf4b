from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.leaderboard_entries import LeaderboardEntry
from app.db.repo.leaderboard_repo import LeaderboardRepo
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo
from app.game.errors import LoginRequiredError
from app.game.identity import PlayerIdentity
from app.game.integrity.score_hash import verify_score_hash
from app.game.leaderboard.errors import (
    InvalidScoreSubmissionError,
    ScoreHashInvalidError,
    ScoreSubmissionTooEarlyError,
)
from app.game.leaderboard.types import SubmitScoreResult
from app.game.multiplayer.errors import MultiplayerGameNotFoundError, PlayerNotInGameError
from app.game.multiplayer.service.internal import find_player_slot

logger = structlog.get_logger(__name__)

LEADERBOARD_GAME_MODES = frozenset({"single", "endless", "multiplayer", "daily_challenge"})
SINGLE_DIFFICULTIES = frozenset({"easy", "medium", "hard"})


def _resolve_difficulty(*, game_mode: str, difficulty: str | None) -> str | None:
    if game_mode == "endless":
        return "endless"
    if difficulty is None:
        return None
    if game_mode == "single" and difficulty not in SINGLE_DIFFICULTIES:
        raise InvalidScoreSubmissionError
    return difficulty


async def _ensure_multiplayer_submission_allowed(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    now_utc: datetime,
) -> None:
    game = await MultiplayerGamesRepo.get_by_id(session, game_id)
    if game is None:
        raise MultiplayerGameNotFoundError
    if game.status == "completed":
        return
    player = find_player_slot(game, identity)
    if player is None:
        raise PlayerNotInGameError
    if not player.finished or player.finished_at is None:
        raise ScoreSubmissionTooEarlyError
    wait = timedelta(seconds=get_settings().multiplayer_finish_wait_seconds)
    if now_utc - player.finished_at < wait:
        raise ScoreSubmissionTooEarlyError


async def submit_score(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    score: int,
    game_mode: str,
    difficulty: str | None,
    score_hash: str,
    score_timestamp: int | None,
    now_utc: datetime,
    session_id: UUID | None = None,
) -> SubmitScoreResult:
    if identity.user_id is None:
        raise LoginRequiredError
    if game_mode not in LEADERBOARD_GAME_MODES:
        raise InvalidScoreSubmissionError

    settings = get_settings()
    try:
        verified = verify_score_hash(
            score_hash,
            user_id=identity.user_id,
            score_timestamp=score_timestamp,
            now_utc=now_utc,
            secret=settings.score_secret_key,
            max_age_seconds=settings.score_hash_max_age_seconds,
        )
    except ScoreHashInvalidError as exc:
        logger.warning(
            "score_hash_rejected",
            user_id=identity.user_id,
            game_mode=game_mode,
            submitted_score=score,
            reason=exc.reason,
            suspicious=True,
        )
        raise

    final_score = verified.score
    score_adjusted = final_score != score
    if score_adjusted:
        logger.error(
            "score_tampering_detected",
            user_id=identity.user_id,
            game_mode=game_mode,
            submitted_score=score,
            verified_score=final_score,
        )
    if final_score <= 0:
        raise InvalidScoreSubmissionError

    resolved_difficulty = _resolve_difficulty(game_mode=game_mode, difficulty=difficulty)
    if game_mode == "multiplayer":
        if session_id is None:
            raise InvalidScoreSubmissionError
        await _ensure_multiplayer_submission_allowed(
            session,
            game_id=session_id,
            identity=identity,
            now_utc=now_utc,
        )

    try:
        entry = await LeaderboardRepo.create(
            session,
            entry=LeaderboardEntry(
                user_id=identity.user_id,
                username=(identity.username or f"Player{identity.user_id}")[:64],
                score=final_score,
                game_mode=game_mode,
                difficulty=resolved_difficulty,
                session_id=session_id,
                score_nonce=verified.nonce,
                created_at=now_utc,
            ),
        )
    except IntegrityError as exc:
        logger.warning(
            "score_hash_rejected",
            user_id=identity.user_id,
            game_mode=game_mode,
            submitted_score=score,
            reason="replayed",
            suspicious=True,
        )
        raise ScoreHashInvalidError("replayed") from exc
    logger.info(
        "leaderboard_score_submitted",
        user_id=identity.user_id,
        game_mode=game_mode,
        difficulty=resolved_difficulty,
        score=final_score,
        score_adjusted=score_adjusted,
    )
    return SubmitScoreResult(
        entry_id=int(entry.id),
        score=final_score,
        game_mode=game_mode,
        difficulty=resolved_difficulty,
        score_adjusted=score_adjusted,
    )
