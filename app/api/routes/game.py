from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_identity
from app.db.session import SessionLocal
from app.game.identity import PlayerIdentity
from app.game.sessions.errors import GameAlreadyCompletedError
from app.game.sessions.service import GameSessionService
from app.game.sessions.types import SessionContext, SessionSnapshot

from .game_helpers import (
    GAME_OVER_MESSAGE,
    _answer_response,
    _bonus_images_response,
    _bonus_result_response,
    _completed_error_response,
    _now_utc,
    _start_response,
    _state_response,
    _terminal_response,
    _turn_response,
)
from .game_models import (
    AnswerResponse,
    BonusImagesResponse,
    BonusResultRequest,
    BonusResultResponse,
    SessionRequest,
    SessionStateResponse,
    StartGameRequest,
    StartGameResponse,
    SubmitAnswerRequest,
    TurnResponse,
)

router = APIRouter(prefix="/api/game", tags=["game"])


def _context(payload: SessionRequest) -> SessionContext:
    return SessionContext(session_id=payload.session_id, mode=payload.game_mode)


@router.post("/start_game", response_model=StartGameResponse)
async def start_game(
    payload: StartGameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> StartGameResponse:
    async with SessionLocal.begin() as session:
        result = await GameSessionService.start_game(
            session,
            identity=identity,
            mode=payload.mode,
            difficulty=payload.difficulty,
            now_utc=_now_utc(),
        )
    return _start_response(result)


@router.post("/get_current_turn", response_model=TurnResponse)
async def get_current_turn(
    payload: SessionRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> TurnResponse | JSONResponse:
    try:
        async with SessionLocal.begin() as session:
            turn = await GameSessionService.get_current_turn(
                session,
                context=_context(payload),
                identity=identity,
            )
    except GameAlreadyCompletedError as exc:
        return _completed_error_response(exc)
    return _turn_response(turn)


@router.post("/submit_answer", response_model=AnswerResponse)
async def submit_answer(
    payload: SubmitAnswerRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> AnswerResponse | JSONResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await GameSessionService.submit_answer(
                session,
                context=_context(payload),
                identity=identity,
                selection=payload.selected,
                response_time_ms=payload.response_time_ms,
                now_utc=_now_utc(),
            )
    except GameAlreadyCompletedError as exc:
        return _completed_error_response(exc)
    return _answer_response(result)


@router.post("/get_next_turn", response_model=TurnResponse)
async def get_next_turn(
    payload: SessionRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> TurnResponse | JSONResponse:
    try:
        async with SessionLocal.begin() as session:
            outcome = await GameSessionService.advance_turn(
                session,
                context=_context(payload),
                identity=identity,
                now_utc=_now_utc(),
            )
    except GameAlreadyCompletedError as exc:
        return _completed_error_response(exc)
    if isinstance(outcome, SessionSnapshot):
        return _terminal_response(outcome, message=GAME_OVER_MESSAGE)
    return _turn_response(outcome)


@router.post("/state", response_model=SessionStateResponse)
async def get_state(
    payload: SessionRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> SessionStateResponse:
    async with SessionLocal() as session:
        snapshot = await GameSessionService.get_session_state(
            session,
            context=_context(payload),
            identity=identity,
        )
    return _state_response(snapshot)


@router.post("/get_bonus_images", response_model=BonusImagesResponse)
async def get_bonus_images(
    payload: SessionRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> BonusImagesResponse | JSONResponse:
    try:
        async with SessionLocal.begin() as session:
            challenge = await GameSessionService.get_bonus_images(
                session,
                context=_context(payload),
                identity=identity,
            )
    except GameAlreadyCompletedError as exc:
        return _completed_error_response(exc)
    return _bonus_images_response(challenge)


@router.post("/handle_bonus_result", response_model=BonusResultResponse)
async def handle_bonus_result(
    payload: BonusResultRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> BonusResultResponse | JSONResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await GameSessionService.resolve_bonus_result(
                session,
                context=_context(payload),
                identity=identity,
                correct=payload.correct,
                now_utc=_now_utc(),
                selected_image_id=payload.selected_image_id,
            )
    except GameAlreadyCompletedError as exc:
        return _completed_error_response(exc)
    return _bonus_result_response(result)
