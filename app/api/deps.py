from __future__ import annotations

from fastapi import Header

from app.game.identity import PlayerIdentity

USER_ID_HEADER = "X-User-Id"
USERNAME_HEADER = "X-Username"


def _parse_user_id(raw_value: str | None) -> int | None:
    if raw_value is None:
        return None
    candidate = raw_value.strip()
    if not candidate.isdigit():
        return None
    user_id = int(candidate)
    return user_id if user_id > 0 else None


def get_identity(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    x_username: str | None = Header(default=None, alias=USERNAME_HEADER),
) -> PlayerIdentity:
    """Identity is asserted by the upstream auth proxy through trusted headers."""
    username = x_username.strip()[:64] if x_username else None
    return PlayerIdentity(user_id=_parse_user_id(x_user_id), username=username or None)
