from __future__ import annotations

import random
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.achievements import (
    ACHIEVEMENT_BONUS_GAME_WIN,
    ACHIEVEMENT_SINGLE_IMAGE_BONUS_WIN,
    award_achievement,
)
from app.db.models.game_sessions import GameSession
from app.game.identity import PlayerIdentity
from app.game.images.selection import (
    bonus_set_image_ids,
    load_images,
    select_bonus_set,
    to_image_view,
)
from app.game.images.types import FourImageSet
from app.game.scoring.rules import bonus_outcome, max_lives_for_difficulty
from app.game.sessions.errors import BonusNotPendingError, BonusUnavailableInModeError
from app.game.sessions.types import (
    BonusChallengeView,
    BonusResult,
    FourImageChallengeView,
    SessionContext,
    SingleImageChallengeView,
)

from .constants import BONUS_MODES, BONUS_TYPE_FOUR_IMAGE, BONUS_TYPE_SINGLE_IMAGE
from .sessions_internal import build_session_snapshot, ensure_not_completed, load_session_for_update

logger = structlog.get_logger("app.game.sessions")


async def _load_bonus_session(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
) -> GameSession:
    if context.mode not in BONUS_MODES:
        raise BonusUnavailableInModeError
    game_session = await load_session_for_update(session, context=context, identity=identity)
    ensure_not_completed(game_session)
    return game_session


def _max_lives(game_session: GameSession) -> int:
    return min(max_lives_for_difficulty(game_session.difficulty), game_session.starting_lives)


async def get_bonus_images(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
    rng: random.Random | None = None,
) -> BonusChallengeView:
    game_session = await _load_bonus_session(session, context=context, identity=identity)

    bonus_set = await select_bonus_set(
        session,
        shown_images=game_session.shown_images,
        difficulty=game_session.difficulty,
        rng=rng,
    )
    image_ids = bonus_set_image_ids(bonus_set)
    game_session.shown_images = [*game_session.shown_images, *image_ids]
    images = await load_images(session, image_ids)

    if isinstance(bonus_set, FourImageSet):
        game_session.pending_bonus_type = BONUS_TYPE_FOUR_IMAGE
        game_session.bonus_real_image_id = bonus_set.real_image_id
        view: BonusChallengeView = FourImageChallengeView(
            images=[to_image_view(images[image_id]) for image_id in bonus_set.image_ids],
            real_image_index=bonus_set.real_image_index,
        )
    else:
        game_session.pending_bonus_type = BONUS_TYPE_SINGLE_IMAGE
        game_session.bonus_real_image_id = bonus_set.image_id if bonus_set.is_real else None
        view = SingleImageChallengeView(
            image=to_image_view(images[bonus_set.image_id]),
            is_real=bonus_set.is_real,
        )

    logger.info(
        "bonus_game_served",
        session_id=str(game_session.id),
        bonus_type=game_session.pending_bonus_type,
        difficulty=game_session.difficulty,
    )
    return view


async def resolve_bonus_result(
    session: AsyncSession,
    *,
    context: SessionContext,
    identity: PlayerIdentity,
    correct: bool,
    now_utc: datetime,
    selected_image_id: int | None = None,
) -> BonusResult:
    game_session = await _load_bonus_session(session, context=context, identity=identity)
    bonus_type = game_session.pending_bonus_type
    if bonus_type is None:
        raise BonusNotPendingError

    if (
        bonus_type == BONUS_TYPE_FOUR_IMAGE
        and selected_image_id is not None
        and game_session.bonus_real_image_id is not None
    ):
        correct = selected_image_id == game_session.bonus_real_image_id

    max_lives = _max_lives(game_session)
    outcome = bonus_outcome(
        score=game_session.score,
        lives=game_session.lives,
        max_lives=max_lives,
        correct=correct,
    )
    game_session.score = outcome.score
    game_session.lives = outcome.lives
    game_session.pending_bonus_type = None
    game_session.bonus_real_image_id = None

    logger.info(
        "bonus_game_resolved",
        session_id=str(game_session.id),
        bonus_type=bonus_type,
        correct=correct,
        life_awarded=outcome.life_awarded,
        points_reward=outcome.points_reward,
        score=game_session.score,
        lives=game_session.lives,
    )
    if correct:
        await award_achievement(
            session,
            user_id=game_session.owner_user_id,
            slug=(
                ACHIEVEMENT_SINGLE_IMAGE_BONUS_WIN
                if bonus_type == BONUS_TYPE_SINGLE_IMAGE
                else ACHIEVEMENT_BONUS_GAME_WIN
            ),
            happened_at=now_utc,
            payload={"session_id": str(game_session.id), "difficulty": game_session.difficulty},
        )

    return BonusResult(
        snapshot=build_session_snapshot(game_session),
        correct=correct,
        game_type=bonus_type,
        life_awarded=outcome.life_awarded,
        points_reward=outcome.points_reward,
        max_lives=max_lives,
    )
