from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.achievements import (
    ACHIEVEMENT_FLAWLESS,
    award_achievement,
    complete_difficulty_slug,
)
from app.db.models.game_sessions import GameSession
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.game.identity import PlayerIdentity
from app.game.sessions.errors import GameAlreadyCompletedError, SessionNotFoundError
from app.game.sessions.types import SessionContext, SessionSnapshot

from .constants import MODE_SINGLE

logger = structlog.get_logger("app.game.sessions")


def build_session_snapshot(game_session: GameSession) -> SessionSnapshot:
    return SessionSnapshot(
        session_id=game_session.id,
        mode=game_session.mode,
        difficulty=game_session.difficulty,
        score=int(game_session.score),
        lives=int(game_session.lives),
        starting_lives=int(game_session.starting_lives),
        turn=int(game_session.current_turn),
        total_turns=int(game_session.total_turns),
        current_streak=int(game_session.current_streak),
        completed=bool(game_session.completed),
        has_pending_turn=has_pending_pair(game_session),
    )


def has_pending_pair(game_session: GameSession) -> bool:
    return (
        game_session.current_real_image_id is not None
        and game_session.current_ai_image_id is not None
    )


def _ensure_visible(
    game_session: GameSession | None,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
) -> GameSession:
    if game_session is None or game_session.mode != context.mode:
        raise SessionNotFoundError
    if (
        game_session.owner_user_id is not None
        and game_session.owner_user_id != identity.user_id
    ):
        raise SessionNotFoundError
    return game_session


async def load_session(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
) -> GameSession:
    game_session = await GameSessionsRepo.get_by_id(session, context.session_id)
    return _ensure_visible(game_session, context=context, identity=identity)


async def load_session_for_update(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
) -> GameSession:
    game_session = await GameSessionsRepo.get_by_id_for_update(session, context.session_id)
    return _ensure_visible(game_session, context=context, identity=identity)


def ensure_not_completed(game_session: GameSession) -> None:
    if game_session.completed or game_session.lives <= 0:
        raise GameAlreadyCompletedError(build_session_snapshot(game_session))


def heal_turn_counter(game_session: GameSession) -> None:
    if game_session.current_turn is not None and game_session.current_turn >= 1:
        return
    logger.error(
        "game_session_turn_counter_invalid",
        session_id=str(game_session.id),
        current_turn=game_session.current_turn,
    )
    game_session.current_turn = 1


def is_session_over(game_session: GameSession) -> bool:
    if game_session.lives <= 0:
        return True
    return game_session.total_turns > 0 and game_session.current_turn > game_session.total_turns


async def complete_session(
    session: AsyncSession,
    *,
    game_session: GameSession,
    now_utc: datetime,
) -> None:
    game_session.completed = True
    game_session.completed_at = now_utc
    game_session.current_real_image_id = None
    game_session.current_ai_image_id = None
    game_session.pending_bonus_type = None
    game_session.bonus_real_image_id = None

    finished_run = game_session.lives > 0
    logger.info(
        "game_session_completed",
        session_id=str(game_session.id),
        mode=game_session.mode,
        difficulty=game_session.difficulty,
        score=game_session.score,
        lives=game_session.lives,
        turn=game_session.current_turn,
        finished_run=finished_run,
    )
    if not finished_run:
        return

    payload: dict[str, object] = {
        "session_id": str(game_session.id),
        "mode": game_session.mode,
        "difficulty": game_session.difficulty,
        "score": game_session.score,
    }
    if game_session.mode == MODE_SINGLE:
        await award_achievement(
            session,
            user_id=game_session.owner_user_id,
            slug=complete_difficulty_slug(game_session.difficulty),
            happened_at=now_utc,
            payload=payload,
        )
    if game_session.lives == game_session.starting_lives:
        await award_achievement(
            session,
            user_id=game_session.owner_user_id,
            slug=ACHIEVEMENT_FLAWLESS,
            happened_at=now_utc,
            payload=payload,
        )
