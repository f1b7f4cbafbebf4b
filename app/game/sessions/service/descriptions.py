from __future__ import annotations

from app.db.models.images import Image

MISSING_DESCRIPTION_TEMPLATE = (
    "This is a real photograph. The full description wasn't available. (Image: {filename})"
)
TURN_DESCRIPTION_FALLBACK = "A real photograph."


def _clean(description: str | None) -> str | None:
    if description is None:
        return None
    stripped = description.strip()
    return stripped or None


def describe_real_image_for_feedback(image: Image | None, *, image_id: int) -> str:
    if image is not None:
        description = _clean(image.description)
        if description is not None:
            return description
        return MISSING_DESCRIPTION_TEMPLATE.format(filename=image.filename)
    return MISSING_DESCRIPTION_TEMPLATE.format(filename=f"#{image_id}")


def describe_real_image_for_turn(image: Image) -> str:
    return _clean(image.description) or TURN_DESCRIPTION_FALLBACK
