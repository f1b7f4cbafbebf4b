from __future__ import annotations

from datetime import datetime, timezone

from fastapi import status
from fastapi.responses import JSONResponse

from app.api.errors import game_error_response
from app.api.routes.game_models import (
    AnswerResponse,
    BonusImagesResponse,
    BonusResultResponse,
    ImagePayload,
    SessionStateResponse,
    StartGameResponse,
    TerminalResponse,
    TurnResponse,
)
from app.game.images.types import ImageView
from app.game.sessions.errors import GameAlreadyCompletedError
from app.game.sessions.service import BONUS_TYPE_FOUR_IMAGE, BONUS_TYPE_SINGLE_IMAGE
from app.game.sessions.types import (
    AnswerResult,
    BonusChallengeView,
    BonusResult,
    FourImageChallengeView,
    SessionSnapshot,
    StartGameResult,
    TurnView,
)

GAME_OVER_MESSAGE = "Game over"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def _image_payload(image: ImageView) -> ImagePayload:
    return ImagePayload(
        image_id=image.image_id,
        url=image.url,
        filename=image.filename,
        description=image.description,
    )


def _terminal_response(snapshot: SessionSnapshot, *, message: str) -> JSONResponse:
    payload = TerminalResponse(
        score=snapshot.score,
        lives=snapshot.lives,
        turn=snapshot.turn,
        total_turns=snapshot.total_turns,
        message=message,
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=_dump(payload))


def _completed_error_response(exc: GameAlreadyCompletedError) -> JSONResponse:
    if exc.snapshot is None:
        return game_error_response(exc)
    return _terminal_response(exc.snapshot, message=exc.message)


def _start_response(result: StartGameResult) -> StartGameResponse:
    snapshot = result.snapshot
    return StartGameResponse(
        session_id=result.context.session_id,
        mode=result.context.mode,
        difficulty=snapshot.difficulty,
        score=snapshot.score,
        lives=snapshot.lives,
        turn=snapshot.turn,
        total_turns=snapshot.total_turns,
    )


def _state_response(snapshot: SessionSnapshot) -> SessionStateResponse:
    return SessionStateResponse(
        session_id=snapshot.session_id,
        mode=snapshot.mode,
        difficulty=snapshot.difficulty,
        score=snapshot.score,
        lives=snapshot.lives,
        starting_lives=snapshot.starting_lives,
        turn=snapshot.turn,
        total_turns=snapshot.total_turns,
        current_streak=snapshot.current_streak,
        completed=snapshot.completed,
        has_pending_turn=snapshot.has_pending_turn,
    )


def _turn_response(turn: TurnView) -> TurnResponse:
    snapshot = turn.snapshot
    return TurnResponse(
        left_image=_image_payload(turn.left_image),
        right_image=_image_payload(turn.right_image),
        left_is_real=turn.left_is_real,
        turn=snapshot.turn,
        total_turns=snapshot.total_turns,
        score=snapshot.score,
        lives=snapshot.lives,
        current_streak=snapshot.current_streak,
        completed=snapshot.completed,
        is_final_turn=turn.is_final_turn,
        real_image_description=turn.real_image_description,
        is_resumed_turn=turn.is_resumed_turn,
    )


def _answer_response(result: AnswerResult) -> AnswerResponse:
    snapshot = result.snapshot
    return AnswerResponse(
        correct=result.correct,
        score=snapshot.score,
        lives=snapshot.lives,
        turn=snapshot.turn,
        total_turns=snapshot.total_turns,
        completed=snapshot.completed,
        current_streak=snapshot.current_streak,
        streak_bonus=result.streak_bonus,
        time_bonus=result.time_bonus,
        image_description=result.image_description,
        score_hash=result.score_hash,
        score_verification=result.score_verification,
        duplicate=result.duplicate,
    )


def _bonus_images_response(challenge: BonusChallengeView) -> BonusImagesResponse:
    if isinstance(challenge, FourImageChallengeView):
        return BonusImagesResponse(
            game_type=BONUS_TYPE_FOUR_IMAGE,
            images=[_image_payload(image) for image in challenge.images],
            real_image_index=challenge.real_image_index,
        )
    return BonusImagesResponse(
        game_type=BONUS_TYPE_SINGLE_IMAGE,
        images=[_image_payload(challenge.image)],
        is_real=challenge.is_real,
    )


def _bonus_result_response(result: BonusResult) -> BonusResultResponse:
    return BonusResultResponse(
        correct=result.correct,
        game_type=result.game_type,
        score=result.snapshot.score,
        lives=result.snapshot.lives,
        max_lives=result.max_lives,
        life_awarded=result.life_awarded,
        points_reward=result.points_reward,
    )
