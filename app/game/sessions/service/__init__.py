from __future__ import annotations

from .constants import (
    BONUS_TYPE_FOUR_IMAGE,
    BONUS_TYPE_SINGLE_IMAGE,
    MODE_DAILY_CHALLENGE,
    MODE_ENDLESS,
    MODE_SINGLE,
    SESSION_MODES,
)
from .sessions_bonus import get_bonus_images, resolve_bonus_result
from .sessions_internal import build_session_snapshot, heal_turn_counter
from .sessions_start import resolve_mode_rules, start_game
from .sessions_submit import build_answer_key, submit_answer
from .sessions_turns import advance_turn, get_current_turn, get_session_state


class GameSessionService:
    _build_session_snapshot = staticmethod(build_session_snapshot)
    _heal_turn_counter = staticmethod(heal_turn_counter)
    resolve_mode_rules = staticmethod(resolve_mode_rules)
    build_answer_key = staticmethod(build_answer_key)
    start_game = staticmethod(start_game)
    get_current_turn = staticmethod(get_current_turn)
    advance_turn = staticmethod(advance_turn)
    get_session_state = staticmethod(get_session_state)
    submit_answer = staticmethod(submit_answer)
    get_bonus_images = staticmethod(get_bonus_images)
    resolve_bonus_result = staticmethod(resolve_bonus_result)


__all__ = [
    "BONUS_TYPE_FOUR_IMAGE",
    "BONUS_TYPE_SINGLE_IMAGE",
    "MODE_DAILY_CHALLENGE",
    "MODE_ENDLESS",
    "MODE_SINGLE",
    "SESSION_MODES",
    "GameSessionService",
]
