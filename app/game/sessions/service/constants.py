from __future__ import annotations

from app.core.config import get_settings

MODE_SINGLE = "single"
MODE_ENDLESS = "endless"
MODE_DAILY_CHALLENGE = "daily_challenge"
SESSION_MODES: tuple[str, ...] = (MODE_SINGLE, MODE_ENDLESS, MODE_DAILY_CHALLENGE)

DEFAULT_SINGLE_DIFFICULTY = "easy"
DAILY_CHALLENGE_DIFFICULTY = "medium"
DAILY_CHALLENGE_FINAL_TURN_DIFFICULTY = "hard"
ENDLESS_DIFFICULTY = "endless"

# (total_turns, lives); total_turns == 0 means unlimited.
SINGLE_MODE_RULES: dict[str, tuple[int, int]] = {
    "easy": (20, 5),
    "medium": (50, 3),
    "hard": (100, 1),
}
ENDLESS_RULES: tuple[int, int] = (0, 1)
DAILY_CHALLENGE_TOTAL_TURNS = max(1, int(get_settings().daily_challenge_total_turns))
DAILY_CHALLENGE_LIVES = max(1, int(get_settings().daily_challenge_lives))

SELECTION_REAL = "real"
SELECTION_AI = "ai"
VALID_SELECTIONS = frozenset({SELECTION_REAL, SELECTION_AI})

BONUS_TYPE_FOUR_IMAGE = "four_image"
BONUS_TYPE_SINGLE_IMAGE = "single_image"
BONUS_MODES = frozenset({MODE_SINGLE})
