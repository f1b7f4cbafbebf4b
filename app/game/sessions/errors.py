from __future__ import annotations

from typing import TYPE_CHECKING

from app.game.errors import GameValidationError, InvalidStateError, NotFoundError

if TYPE_CHECKING:
    from app.game.sessions.types import SessionSnapshot


class SessionNotFoundError(NotFoundError):
    code = "E_SESSION_NOT_FOUND"
    message = "Game session not found"


class GameAlreadyCompletedError(InvalidStateError):
    code = "E_GAME_COMPLETED"
    message = "Game already completed"

    def __init__(self, snapshot: SessionSnapshot | None = None) -> None:
        super().__init__()
        self.snapshot = snapshot


class NoPendingTurnError(InvalidStateError):
    code = "E_NO_PENDING_TURN"
    message = "No images are pending an answer"


class DailyChallengeAlreadyPlayedError(InvalidStateError):
    code = "E_DAILY_CHALLENGE_ALREADY_PLAYED"
    message = "Daily challenge already played today"


class BonusNotPendingError(InvalidStateError):
    code = "E_BONUS_NOT_PENDING"
    message = "No bonus game is pending"


class InvalidModeOrDifficultyError(GameValidationError):
    code = "E_INVALID_MODE_OR_DIFFICULTY"
    message = "Invalid game mode or difficulty"


class InvalidSelectionError(GameValidationError):
    code = "E_INVALID_SELECTION"
    message = "Selection must be 'real' or 'ai'"


class BonusUnavailableInModeError(GameValidationError):
    code = "E_BONUS_UNAVAILABLE"
    message = "Bonus games are not available in this mode"
