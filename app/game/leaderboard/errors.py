from app.game.errors import GameValidationError, IntegrityViolationError, InvalidStateError


class ScoreHashInvalidError(IntegrityViolationError):
    code = "E_SCORE_HASH_INVALID"
    message = "Score verification failed"

    def __init__(self, reason: str = "invalid") -> None:
        super().__init__()
        self.reason = reason


class InvalidScoreSubmissionError(GameValidationError):
    code = "E_INVALID_SCORE"
    message = "Invalid score submission"


class ScoreSubmissionTooEarlyError(InvalidStateError):
    code = "E_SCORE_SUBMISSION_TOO_EARLY"
    message = "Waiting for other players to finish"
