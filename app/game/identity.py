from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class PlayerIdentity:
    user_id: int | None
    username: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None
