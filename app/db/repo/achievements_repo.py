from __future__ import annotations

from datetime import datetime

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.achievement_awards import AchievementAward


class AchievementsRepo:
    @staticmethod
    async def insert_award_if_absent(
        session: AsyncSession,
        *,
        user_id: int,
        slug: str,
        payload: dict[str, object],
        awarded_at: datetime,
    ) -> bool:
        stmt = (
            pg_insert(AchievementAward)
            .values(
                user_id=user_id,
                slug=slug,
                payload=payload,
                awarded_at=awarded_at,
            )
            .on_conflict_do_nothing(
                index_elements=[AchievementAward.user_id, AchievementAward.slug]
            )
            .returning(AchievementAward.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
