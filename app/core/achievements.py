from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.achievements_repo import AchievementsRepo

logger = structlog.get_logger(__name__)

ACHIEVEMENT_FLAWLESS = "flawless"
ACHIEVEMENT_BONUS_GAME_WIN = "bonus_game_win"
ACHIEVEMENT_SINGLE_IMAGE_BONUS_WIN = "single_image_bonus_win"
ACHIEVEMENT_MULTIPLAYER_WIN = "multiplayer_win"


def complete_difficulty_slug(difficulty: str) -> str:
    return f"complete_{difficulty}"


async def award_achievement(
    session: AsyncSession,
    *,
    user_id: int | None,
    slug: str,
    happened_at: datetime,
    payload: dict[str, object] | None = None,
) -> bool:
    """Record a milestone for the achievement catalog; never fails the caller."""
    if user_id is None:
        return False
    try:
        async with session.begin_nested():
            created = await AchievementsRepo.insert_award_if_absent(
                session,
                user_id=user_id,
                slug=slug,
                payload=payload or {},
                awarded_at=happened_at,
            )
    except SQLAlchemyError:
        logger.warning("achievement_award_failed", user_id=user_id, slug=slug, exc_info=True)
        return False
    if created:
        logger.info("achievement_awarded", user_id=user_id, slug=slug)
    return created
