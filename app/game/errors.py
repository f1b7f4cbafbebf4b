class GameError(Exception):
    code = "E_GAME"
    message = "Game request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class NotFoundError(GameError):
    code = "E_NOT_FOUND"
    message = "Not found"


class InvalidStateError(GameError):
    code = "E_INVALID_STATE"
    message = "Action not allowed in the current state"


class ContentExhaustedError(GameError):
    code = "E_NO_MORE_IMAGES"
    message = "No more images available"


class GameValidationError(GameError):
    code = "E_VALIDATION"
    message = "Invalid request"


class AccessDeniedError(GameError):
    code = "E_ACCESS_DENIED"
    message = "Access denied"


class IntegrityViolationError(GameError):
    code = "E_INTEGRITY"
    message = "Integrity check failed"


class NoImagesAvailableError(ContentExhaustedError):
    pass


class LoginRequiredError(AccessDeniedError):
    code = "E_LOGIN_REQUIRED"
    message = "You must be logged in"
