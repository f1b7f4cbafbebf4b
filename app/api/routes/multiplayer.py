from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_identity
from app.db.session import SessionLocal
from app.game.identity import PlayerIdentity
from app.game.multiplayer.service import MultiplayerService
from app.game.multiplayer.types import MultiplayerGameView

from .game_helpers import _now_utc
from .multiplayer_helpers import (
    _answer_response,
    _chest_game_response,
    _chest_selection_response,
    _game_response,
    _join_response,
    _turn_response,
    _winner_response,
)
from .multiplayer_models import (
    AdvanceTurnRequest,
    ChestGameResponse,
    ChestSelectionRequest,
    ChestSelectionResponse,
    CreateGameRequest,
    GameRequest,
    JoinGameRequest,
    JoinGameResponse,
    MultiplayerAnswerRequest,
    MultiplayerAnswerResponse,
    MultiplayerGameResponse,
    MultiplayerTurnResponse,
    WinnerResponse,
)

router = APIRouter(prefix="/api/multiplayer", tags=["multiplayer"])


@router.post("/create", response_model=JoinGameResponse)
async def create_game(
    payload: CreateGameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> JoinGameResponse:
    async with SessionLocal.begin() as session:
        result = await MultiplayerService.create_game(
            session,
            identity=identity,
            is_public=payload.is_public,
            total_turns=payload.total_turns,
            now_utc=_now_utc(),
        )
    return _join_response(result)


@router.post("/join", response_model=JoinGameResponse)
async def join_game(
    payload: JoinGameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> JoinGameResponse:
    async with SessionLocal.begin() as session:
        result = await MultiplayerService.join_game(
            session,
            identity=identity,
            now_utc=_now_utc(),
            game_id=payload.game_id,
            room_code=payload.room_code,
        )
    return _join_response(result)


@router.post("/quick_match", response_model=JoinGameResponse)
async def quick_match(identity: PlayerIdentity = Depends(get_identity)) -> JoinGameResponse:
    async with SessionLocal.begin() as session:
        result = await MultiplayerService.quick_match(
            session,
            identity=identity,
            now_utc=_now_utc(),
        )
    return _join_response(result)


@router.post("/start", response_model=MultiplayerGameResponse)
async def start_game(
    payload: GameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> MultiplayerGameResponse:
    async with SessionLocal.begin() as session:
        game = await MultiplayerService.start_game(
            session,
            game_id=payload.session_id,
            identity=identity,
            now_utc=_now_utc(),
        )
    return _game_response(game)


@router.post("/get_turn", response_model=MultiplayerTurnResponse)
async def get_turn(
    payload: GameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> MultiplayerTurnResponse:
    async with SessionLocal.begin() as session:
        turn = await MultiplayerService.get_turn(
            session,
            game_id=payload.session_id,
            identity=identity,
        )
    return _turn_response(turn)


@router.post("/get_next_turn", response_model=None)
async def get_next_turn(
    payload: AdvanceTurnRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> MultiplayerTurnResponse | MultiplayerGameResponse:
    async with SessionLocal.begin() as session:
        outcome = await MultiplayerService.advance_turn(
            session,
            game_id=payload.session_id,
            identity=identity,
            now_utc=_now_utc(),
            from_turn=payload.from_turn,
        )
    if isinstance(outcome, MultiplayerGameView):
        return _game_response(outcome)
    return _turn_response(outcome)


@router.post("/submit_multiplayer_answer", response_model=MultiplayerAnswerResponse)
async def submit_multiplayer_answer(
    payload: MultiplayerAnswerRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> MultiplayerAnswerResponse:
    async with SessionLocal.begin() as session:
        result = await MultiplayerService.submit_answer(
            session,
            game_id=payload.session_id,
            identity=identity,
            selection=payload.selected,
            now_utc=_now_utc(),
        )
    return _answer_response(result)


@router.post("/start_multiplayer_bonus_game", response_model=ChestGameResponse)
async def start_multiplayer_bonus_game(
    payload: GameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> ChestGameResponse:
    async with SessionLocal.begin() as session:
        view = await MultiplayerService.start_chest_game(
            session,
            game_id=payload.session_id,
            identity=identity,
            now_utc=_now_utc(),
        )
    return _chest_game_response(view)


@router.post("/get_multiplayer_bonus_images", response_model=ChestGameResponse)
async def get_multiplayer_bonus_images(
    payload: GameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> ChestGameResponse:
    async with SessionLocal() as session:
        view = await MultiplayerService.get_chest_game_state(
            session,
            game_id=payload.session_id,
            identity=identity,
        )
    return _chest_game_response(view)


@router.post("/multiplayer_chest_selection", response_model=ChestSelectionResponse)
async def multiplayer_chest_selection(
    payload: ChestSelectionRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> ChestSelectionResponse:
    async with SessionLocal.begin() as session:
        result = await MultiplayerService.select_chest(
            session,
            game_id=payload.session_id,
            identity=identity,
            chest_index=payload.chest_index,
        )
    return _chest_selection_response(result)


@router.post("/handle_multiplayer_bonus_result", response_model=WinnerResponse)
async def handle_multiplayer_bonus_result(
    payload: GameRequest,
    identity: PlayerIdentity = Depends(get_identity),
) -> WinnerResponse:
    async with SessionLocal.begin() as session:
        result = await MultiplayerService.resolve_winner(
            session,
            game_id=payload.session_id,
            identity=identity,
            now_utc=_now_utc(),
        )
    return _winner_response(result)
