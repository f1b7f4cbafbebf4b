from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ImagePair:
    real_image_id: int
    ai_image_id: int


@dataclass(slots=True, frozen=True)
class FourImageSet:
    image_ids: tuple[int, int, int, int]
    real_image_index: int

    @property
    def real_image_id(self) -> int:
        return self.image_ids[self.real_image_index]


@dataclass(slots=True, frozen=True)
class SingleImageSet:
    image_id: int
    is_real: bool


BonusImageSet = FourImageSet | SingleImageSet


@dataclass(slots=True)
class ImageView:
    image_id: int
    url: str
    filename: str
    description: str | None = None
