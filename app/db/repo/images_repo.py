from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.images import Image


class ImagesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, image_id: int) -> Image | None:
        return await session.get(Image, image_id)

    @staticmethod
    async def list_by_ids(session: AsyncSession, image_ids: Collection[int]) -> list[Image]:
        if not image_ids:
            return []
        stmt = select(Image).where(Image.id.in_(list(image_ids)))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_unused_ids(
        session: AsyncSession,
        *,
        image_type: str,
        difficulties: tuple[str, ...] | None,
        include_untagged: bool,
        exclude_ids: Collection[int],
    ) -> list[int]:
        stmt = select(Image.id).where(Image.type == image_type)
        if difficulties is not None:
            if include_untagged:
                stmt = stmt.where(
                    or_(Image.difficulty.in_(difficulties), Image.difficulty.is_(None))
                )
            else:
                stmt = stmt.where(Image.difficulty.in_(difficulties))
        if exclude_ids:
            stmt = stmt.where(Image.id.not_in(list(exclude_ids)))
        result = await session.execute(stmt.order_by(Image.id.asc()))
        return [int(image_id) for image_id in result.scalars().all()]
