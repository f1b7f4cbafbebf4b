from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.game.errors import (
    AccessDeniedError,
    ContentExhaustedError,
    GameError,
    GameValidationError,
    IntegrityViolationError,
    InvalidStateError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_CATEGORY: tuple[tuple[type[GameError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (ContentExhaustedError, status.HTTP_200_OK),
    (GameValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AccessDeniedError, status.HTTP_401_UNAUTHORIZED),
    (IntegrityViolationError, status.HTTP_403_FORBIDDEN),
)


def error_envelope(code: str, message: str, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "code": code, "message": message}
    payload.update(extra)
    return payload


def status_for_error(exc: GameError) -> int:
    for error_type, status_code in _STATUS_BY_CATEGORY:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def game_error_response(exc: GameError) -> JSONResponse:
    extra: dict[str, Any] = {}
    if isinstance(exc, ContentExhaustedError):
        extra["no_more_images"] = True
    return JSONResponse(
        status_code=status_for_error(exc),
        content=error_envelope(exc.code, exc.message, **extra),
    )


async def _handle_game_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, GameError)
    return game_error_response(exc)


async def _handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_envelope(
            "E_VALIDATION",
            "Invalid request",
            errors=[
                {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
                for error in exc.errors()
            ],
        ),
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_request_error",
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("E_INTERNAL", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GameError, _handle_game_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
