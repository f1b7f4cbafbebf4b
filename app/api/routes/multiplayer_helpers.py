from __future__ import annotations

from app.api.routes.game_helpers import _image_payload
from app.game.multiplayer.types import (
    ChestGameView,
    ChestSelectionResult,
    JoinResult,
    MultiplayerAnswerResult,
    MultiplayerGameView,
    MultiplayerTurnView,
    PlayerSlotView,
    WinnerResult,
)

from .multiplayer_models import (
    ChestGameResponse,
    ChestPayload,
    ChestSelectionResponse,
    JoinGameResponse,
    MultiplayerAnswerResponse,
    MultiplayerGamePayload,
    MultiplayerGameResponse,
    MultiplayerTurnResponse,
    PlayerPayload,
    WinnerResponse,
)


def _player_payload(player: PlayerSlotView) -> PlayerPayload:
    return PlayerPayload(
        slot_index=player.slot_index,
        name=player.name,
        is_bot=player.is_bot,
        score=player.score,
        streak=player.streak,
        answered_current_turn=player.answered_current_turn,
        finished=player.finished,
    )


def _game_payload(game: MultiplayerGameView) -> MultiplayerGamePayload:
    return MultiplayerGamePayload(
        session_id=game.game_id,
        room_code=game.room_code,
        is_public=game.is_public,
        status=game.status,
        turn=game.current_turn,
        total_turns=game.total_turns,
        has_bots=game.has_bots,
        wait_timeout_at=game.wait_timeout_at,
        players=[_player_payload(player) for player in game.players],
        winner_slot_indexes=game.winner_slot_indexes,
    )


def _game_response(game: MultiplayerGameView) -> MultiplayerGameResponse:
    return MultiplayerGameResponse(game=_game_payload(game))


def _join_response(result: JoinResult) -> JoinGameResponse:
    return JoinGameResponse(
        game=_game_payload(result.game),
        slot_index=result.slot_index,
        joined_now=result.joined_now,
    )


def _turn_response(turn: MultiplayerTurnView) -> MultiplayerTurnResponse:
    return MultiplayerTurnResponse(
        game=_game_payload(turn.game),
        left_image=_image_payload(turn.left_image),
        right_image=_image_payload(turn.right_image),
        left_is_real=turn.left_is_real,
        turn=turn.game.current_turn,
        total_turns=turn.game.total_turns,
        is_final_turn=turn.is_final_turn,
        real_image_description=turn.real_image_description,
    )


def _answer_response(result: MultiplayerAnswerResult) -> MultiplayerAnswerResponse:
    return MultiplayerAnswerResponse(
        game=_game_payload(result.game),
        slot_index=result.slot_index,
        correct=result.correct,
        score=result.score,
        streak=result.streak,
        current_streak=result.streak,
        streak_bonus=result.streak_bonus,
        all_answered=result.all_answered,
        finished=result.finished,
        image_description=result.image_description,
        score_hash=result.score_hash,
        score_verification=result.score_verification,
        duplicate=result.duplicate,
    )


def _chest_game_response(view: ChestGameView) -> ChestGameResponse:
    return ChestGameResponse(
        session_id=view.game_id,
        chests=[
            ChestPayload(
                chest_index=chest.chest_index,
                claimed_by_slot=chest.claimed_by_slot,
                value=chest.value,
            )
            for chest in view.chests
        ],
        completed=view.completed,
        players=[_player_payload(player) for player in view.players],
        selected_chest_index=view.selected_chest_index,
    )


def _chest_selection_response(result: ChestSelectionResult) -> ChestSelectionResponse:
    return ChestSelectionResponse(
        chest_game=_chest_game_response(result.chest_game),
        slot_index=result.slot_index,
        chest_index=result.chest_index,
        value=result.value,
        score=result.score,
    )


def _winner_response(result: WinnerResult) -> WinnerResponse:
    return WinnerResponse(
        session_id=result.game_id,
        winner_slot_indexes=result.winner_slot_indexes,
        winner_names=result.winner_names,
        is_tie=result.is_tie,
        top_score=result.top_score,
        players=[_player_payload(player) for player in result.players],
    )
