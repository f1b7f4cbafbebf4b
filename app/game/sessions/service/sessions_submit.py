from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.game_sessions import GameSession
from app.db.repo.images_repo import ImagesRepo
from app.game.identity import PlayerIdentity
from app.game.integrity.score_hash import mint_score_hash
from app.game.scoring.rules import score_correct_answer
from app.game.sessions.errors import InvalidSelectionError, NoPendingTurnError
from app.game.sessions.types import AnswerResult, SessionContext

from .constants import SELECTION_REAL, VALID_SELECTIONS
from .descriptions import describe_real_image_for_feedback
from .sessions_internal import (
    build_session_snapshot,
    complete_session,
    ensure_not_completed,
    has_pending_pair,
    heal_turn_counter,
    is_session_over,
    load_session_for_update,
)

logger = structlog.get_logger("app.game.sessions")


def build_answer_key(*, real_image_id: int, ai_image_id: int, selection: str) -> str:
    return f"{real_image_id}:{ai_image_id}:{selection}"


def _real_image_id_from_key(answer_key: str) -> int | None:
    real_part = answer_key.split(":", 1)[0]
    return int(real_part) if real_part.isdigit() else None


def _resolve_answer_key(game_session: GameSession, *, selection: str) -> str | None:
    if has_pending_pair(game_session):
        return build_answer_key(
            real_image_id=int(game_session.current_real_image_id),
            ai_image_id=int(game_session.current_ai_image_id),
            selection=selection,
        )
    if game_session.last_answer_key is None:
        return None
    answered_pair = game_session.last_answer_key.rsplit(":", 1)[0]
    return f"{answered_pair}:{selection}"


async def _feedback_description(session: AsyncSession, *, real_image_id: int) -> str:
    image = await ImagesRepo.get_by_id(session, real_image_id)
    return describe_real_image_for_feedback(image, image_id=real_image_id)


def _mint_hash(game_session: GameSession, *, now_utc: datetime) -> tuple[str, int]:
    settings = get_settings()
    issued = mint_score_hash(
        score=game_session.score,
        user_id=game_session.owner_user_id,
        now_utc=now_utc,
        secret=settings.score_secret_key,
    )
    return issued.token, issued.timestamp


async def _build_duplicate_result(
    session: AsyncSession,
    *,
    game_session: GameSession,
    answer_key: str,
    now_utc: datetime,
) -> AnswerResult:
    correct = bool(game_session.last_answer_correct)
    image_description = None
    if not correct:
        real_image_id = _real_image_id_from_key(answer_key)
        if real_image_id is not None:
            image_description = await _feedback_description(session, real_image_id=real_image_id)
    score_hash, score_verification = _mint_hash(game_session, now_utc=now_utc)
    return AnswerResult(
        snapshot=build_session_snapshot(game_session),
        correct=correct,
        streak_bonus=0,
        time_bonus=0,
        score_hash=score_hash,
        score_verification=score_verification,
        image_description=image_description,
        duplicate=True,
    )


async def submit_answer(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
    selection: str,
    response_time_ms: int,
    now_utc: datetime,
) -> AnswerResult:
    if selection not in VALID_SELECTIONS:
        raise InvalidSelectionError

    game_session = await load_session_for_update(session, context=context, identity=identity)
    ensure_not_completed(game_session)
    heal_turn_counter(game_session)

    answer_key = _resolve_answer_key(game_session, selection=selection)
    if answer_key is not None and answer_key == game_session.last_answer_key:
        logger.info(
            "duplicate_answer_ignored",
            session_id=str(game_session.id),
            turn=game_session.current_turn,
        )
        return await _build_duplicate_result(
            session,
            game_session=game_session,
            answer_key=answer_key,
            now_utc=now_utc,
        )
    if answer_key is None or not has_pending_pair(game_session):
        raise NoPendingTurnError

    real_image_id = int(game_session.current_real_image_id)
    correct = selection == SELECTION_REAL
    earned_time_bonus = 0
    earned_streak_bonus = 0
    image_description = None
    if correct:
        breakdown = score_correct_answer(
            mode=game_session.mode,
            difficulty=game_session.difficulty,
            current_streak=game_session.current_streak,
            response_time_ms=response_time_ms,
            time_penalty=game_session.time_penalty,
        )
        game_session.score += breakdown.points
        game_session.current_streak = breakdown.streak
        earned_time_bonus = breakdown.time_bonus
        earned_streak_bonus = breakdown.streak_bonus
    else:
        game_session.lives = max(0, game_session.lives - 1)
        game_session.current_streak = 0
        image_description = await _feedback_description(session, real_image_id=real_image_id)

    game_session.current_real_image_id = None
    game_session.current_ai_image_id = None
    game_session.time_penalty = False
    game_session.last_answer_key = answer_key
    game_session.last_answer_correct = correct

    logger.info(
        "game_session_answer_recorded",
        session_id=str(game_session.id),
        turn=game_session.current_turn,
        correct=correct,
        score=game_session.score,
        lives=game_session.lives,
        streak=game_session.current_streak,
    )
    if is_session_over(game_session):
        await complete_session(session, game_session=game_session, now_utc=now_utc)

    score_hash, score_verification = _mint_hash(game_session, now_utc=now_utc)
    return AnswerResult(
        snapshot=build_session_snapshot(game_session),
        correct=correct,
        streak_bonus=earned_streak_bonus,
        time_bonus=earned_time_bonus,
        score_hash=score_hash,
        score_verification=score_verification,
        image_description=image_description,
        duplicate=False,
    )
