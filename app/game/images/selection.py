from __future__ import annotations

import base64
import random
from collections.abc import Collection, Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.images import Image
from app.db.repo.images_repo import ImagesRepo
from app.game.errors import NoImagesAvailableError
from app.game.images.types import BonusImageSet, FourImageSet, ImagePair, ImageView, SingleImageSet

FOUR_IMAGE_AI_COUNT = 3
SINGLE_IMAGE_DIFFICULTY = "hard"

# Pools are cumulative: harder settings also draw from easier and untagged images.
DIFFICULTY_POOLS: dict[str, tuple[str, ...] | None] = {
    "easy": ("easy",),
    "medium": ("easy", "medium"),
    "hard": None,
    "endless": None,
}

_system_rng = random.SystemRandom()


def difficulty_pool(difficulty: str) -> tuple[str, ...] | None:
    return DIFFICULTY_POOLS.get(difficulty)


def _resolve_rng(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else _system_rng


def pick_pair(
    real_ids: Sequence[int],
    ai_ids: Sequence[int],
    *,
    rng: random.Random | None = None,
) -> ImagePair:
    """Uniform pick among unused candidates; either side empty means exhaustion."""
    if not real_ids or not ai_ids:
        raise NoImagesAvailableError
    resolved_rng = _resolve_rng(rng)
    real_id = resolved_rng.choice(list(real_ids))
    ai_choices = [image_id for image_id in ai_ids if image_id != real_id]
    if not ai_choices:
        raise NoImagesAvailableError
    return ImagePair(real_image_id=real_id, ai_image_id=resolved_rng.choice(ai_choices))


def pick_four_image_set(
    real_ids: Sequence[int],
    ai_ids: Sequence[int],
    *,
    rng: random.Random | None = None,
) -> FourImageSet:
    if not real_ids or len(ai_ids) < FOUR_IMAGE_AI_COUNT:
        raise NoImagesAvailableError
    resolved_rng = _resolve_rng(rng)
    real_id = resolved_rng.choice(list(real_ids))
    ai_picks = resolved_rng.sample(list(ai_ids), FOUR_IMAGE_AI_COUNT)
    real_index = resolved_rng.randrange(FOUR_IMAGE_AI_COUNT + 1)
    image_ids = list(ai_picks)
    image_ids.insert(real_index, real_id)
    return FourImageSet(image_ids=tuple(image_ids), real_image_index=real_index)


def pick_bonus_set(
    *,
    difficulty: str,
    real_ids: Sequence[int],
    ai_ids: Sequence[int],
    hard_real_ids: Sequence[int],
    hard_ai_ids: Sequence[int],
    rng: random.Random | None = None,
) -> BonusImageSet:
    resolved_rng = _resolve_rng(rng)
    if difficulty != "hard" and resolved_rng.random() < 0.5:
        if hard_real_ids and hard_ai_ids:
            is_real = resolved_rng.random() < 0.5
            image_id = resolved_rng.choice(list(hard_real_ids if is_real else hard_ai_ids))
            return SingleImageSet(image_id=image_id, is_real=is_real)
    return pick_four_image_set(real_ids, ai_ids, rng=resolved_rng)


async def _list_unused(
    session: AsyncSession,
    *,
    image_type: str,
    difficulties: tuple[str, ...] | None,
    include_untagged: bool,
    shown_images: Collection[int],
) -> list[int]:
    return await ImagesRepo.list_unused_ids(
        session,
        image_type=image_type,
        difficulties=difficulties,
        include_untagged=include_untagged,
        exclude_ids=shown_images,
    )


async def select_pair(
    session: AsyncSession,
    *,
    shown_images: Collection[int],
    difficulty: str,
    rng: random.Random | None = None,
) -> ImagePair:
    pool = difficulty_pool(difficulty)
    real_ids = await _list_unused(
        session,
        image_type="real",
        difficulties=pool,
        include_untagged=True,
        shown_images=shown_images,
    )
    ai_ids = await _list_unused(
        session,
        image_type="ai",
        difficulties=pool,
        include_untagged=True,
        shown_images=shown_images,
    )
    return pick_pair(real_ids, ai_ids, rng=rng)


async def select_bonus_set(
    session: AsyncSession,
    *,
    shown_images: Collection[int],
    difficulty: str,
    rng: random.Random | None = None,
) -> BonusImageSet:
    pool = difficulty_pool(difficulty)
    real_ids = await _list_unused(
        session,
        image_type="real",
        difficulties=pool,
        include_untagged=True,
        shown_images=shown_images,
    )
    ai_ids = await _list_unused(
        session,
        image_type="ai",
        difficulties=pool,
        include_untagged=True,
        shown_images=shown_images,
    )
    hard_real_ids: list[int] = []
    hard_ai_ids: list[int] = []
    if difficulty != "hard":
        hard_real_ids = await _list_unused(
            session,
            image_type="real",
            difficulties=(SINGLE_IMAGE_DIFFICULTY,),
            include_untagged=False,
            shown_images=shown_images,
        )
        hard_ai_ids = await _list_unused(
            session,
            image_type="ai",
            difficulties=(SINGLE_IMAGE_DIFFICULTY,),
            include_untagged=False,
            shown_images=shown_images,
        )
    return pick_bonus_set(
        difficulty=difficulty,
        real_ids=real_ids,
        ai_ids=ai_ids,
        hard_real_ids=hard_real_ids,
        hard_ai_ids=hard_ai_ids,
        rng=rng,
    )


def bonus_set_image_ids(bonus_set: BonusImageSet) -> list[int]:
    if isinstance(bonus_set, FourImageSet):
        return list(bonus_set.image_ids)
    return [bonus_set.image_id]


def image_url(filename: str) -> str:
    encoded = base64.urlsafe_b64encode(filename.encode("utf-8")).decode("ascii").rstrip("=")
    return f"{get_settings().image_proxy_path}?id={encoded}"


def to_image_view(image: Image, *, with_description: bool = False) -> ImageView:
    return ImageView(
        image_id=int(image.id),
        url=image_url(image.filename),
        filename=image.filename,
        description=image.description if with_description else None,
    )


async def load_images(session: AsyncSession, image_ids: Iterable[int]) -> dict[int, Image]:
    wanted = [int(image_id) for image_id in image_ids]
    images = await ImagesRepo.list_by_ids(session, wanted)
    by_id = {int(image.id): image for image in images}
    if any(image_id not in by_id for image_id in wanted):
        raise NoImagesAvailableError
    return by_id


def pick_left_is_real(*, rng: random.Random | None = None) -> bool:
    return _resolve_rng(rng).random() < 0.5
