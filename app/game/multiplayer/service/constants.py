from __future__ import annotations

from app.core.config import get_settings

STATUS_WAITING = "waiting"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"

MAX_PLAYERS = 4
MIN_PLAYERS_TO_START = 2
MIN_TOTAL_TURNS = 5
MAX_TOTAL_TURNS = 100
DEFAULT_TOTAL_TURNS = 10

ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_MAX_ATTEMPTS = 10

MULTIPLAYER_DIFFICULTY = "endless"
MULTIPLAYER_MODE = "multiplayer"

CHEST_VALUES: tuple[int, int, int, int] = (10, 20, 50, 100)

WAIT_TIMEOUT_SECONDS = max(1, int(get_settings().multiplayer_wait_timeout_seconds))
