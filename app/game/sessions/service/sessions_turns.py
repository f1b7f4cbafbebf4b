from __future__ import annotations

import random
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_sessions import GameSession
from app.game.errors import NoImagesAvailableError
from app.game.identity import PlayerIdentity
from app.game.images.selection import (
    load_images,
    pick_left_is_real,
    select_pair,
    to_image_view,
)
from app.game.sessions.types import SessionContext, SessionSnapshot, TurnView

from .constants import (
    DAILY_CHALLENGE_FINAL_TURN_DIFFICULTY,
    MODE_DAILY_CHALLENGE,
    MODE_ENDLESS,
)
from .descriptions import describe_real_image_for_turn
from .sessions_internal import (
    build_session_snapshot,
    complete_session,
    ensure_not_completed,
    has_pending_pair,
    heal_turn_counter,
    load_session,
    load_session_for_update,
)

logger = structlog.get_logger("app.game.sessions")


def _selection_difficulty(game_session: GameSession) -> str:
    if (
        game_session.mode == MODE_DAILY_CHALLENGE
        and game_session.current_turn >= game_session.total_turns
    ):
        return DAILY_CHALLENGE_FINAL_TURN_DIFFICULTY
    return game_session.difficulty


def _is_final_turn(game_session: GameSession) -> bool:
    return game_session.total_turns > 0 and game_session.current_turn >= game_session.total_turns


async def _serve_turn(
    session: AsyncSession,
    *,
    game_session: GameSession,
    rng: random.Random | None,
) -> TurnView:
    resumed = has_pending_pair(game_session)
    if resumed:
        # The pair was already shown once, so the time bonus is forfeited.
        game_session.time_penalty = True
        logger.info(
            "game_session_turn_resumed",
            session_id=str(game_session.id),
            turn=game_session.current_turn,
        )
    else:
        try:
            pair = await select_pair(
                session,
                shown_images=game_session.shown_images,
                difficulty=_selection_difficulty(game_session),
                rng=rng,
            )
        except NoImagesAvailableError:
            logger.info(
                "game_session_images_exhausted",
                session_id=str(game_session.id),
                turn=game_session.current_turn,
                shown_count=len(game_session.shown_images),
            )
            raise
        game_session.current_real_image_id = pair.real_image_id
        game_session.current_ai_image_id = pair.ai_image_id
        game_session.left_is_real = pick_left_is_real(rng=rng)
        game_session.shown_images = [
            *game_session.shown_images,
            pair.real_image_id,
            pair.ai_image_id,
        ]
        game_session.time_penalty = False

    real_image_id = int(game_session.current_real_image_id)
    ai_image_id = int(game_session.current_ai_image_id)
    images = await load_images(session, (real_image_id, ai_image_id))
    real_view = to_image_view(images[real_image_id])
    ai_view = to_image_view(images[ai_image_id])
    left_is_real = bool(game_session.left_is_real)
    return TurnView(
        snapshot=build_session_snapshot(game_session),
        left_image=real_view if left_is_real else ai_view,
        right_image=ai_view if left_is_real else real_view,
        left_is_real=left_is_real,
        is_final_turn=_is_final_turn(game_session),
        real_image_description=describe_real_image_for_turn(images[real_image_id]),
        is_resumed_turn=resumed and game_session.mode == MODE_ENDLESS,
    )


async def get_current_turn(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
    rng: random.Random | None = None,
) -> TurnView:
    game_session = await load_session_for_update(session, context=context, identity=identity)
    ensure_not_completed(game_session)
    heal_turn_counter(game_session)
    return await _serve_turn(session, game_session=game_session, rng=rng)


async def advance_turn(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
    now_utc: datetime,
    rng: random.Random | None = None,
) -> TurnView | SessionSnapshot:
    """Move to the next turn; a returned snapshot means the session just ended."""
    game_session = await load_session_for_update(session, context=context, identity=identity)
    ensure_not_completed(game_session)
    heal_turn_counter(game_session)

    game_session.current_turn += 1
    if game_session.total_turns > 0 and game_session.current_turn > game_session.total_turns:
        await complete_session(session, game_session=game_session, now_utc=now_utc)
        return build_session_snapshot(game_session)
    return await _serve_turn(session, game_session=game_session, rng=rng)


async def get_session_state(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
) -> SessionSnapshot:
    game_session = await load_session(session, context=context, identity=identity)
    return build_session_snapshot(game_session)
