from __future__ import annotations

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.multiplayer_games import MultiplayerGame, MultiplayerPlayer
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo
from app.game.errors import LoginRequiredError
from app.game.identity import PlayerIdentity
from app.game.multiplayer.errors import MultiplayerGameNotFoundError, PlayerNotInGameError
from app.game.multiplayer.types import MultiplayerGameView, PlayerSlotView

logger = structlog.get_logger("app.game.multiplayer")


def require_identity(identity: PlayerIdentity) -> None:
    if identity.user_id is None and not (identity.username or "").strip():
        raise LoginRequiredError


def build_player_view(player: MultiplayerPlayer, *, current_turn: int) -> PlayerSlotView:
    return PlayerSlotView(
        slot_index=int(player.slot_index),
        name=player.name,
        is_bot=bool(player.is_bot),
        score=int(player.score),
        streak=int(player.streak),
        answered_current_turn=int(player.answered_turn) >= current_turn,
        finished=bool(player.finished),
        user_id=player.user_id,
    )


def build_game_view(game: MultiplayerGame) -> MultiplayerGameView:
    current_turn = int(game.current_turn)
    return MultiplayerGameView(
        game_id=game.id,
        room_code=game.room_code,
        is_public=bool(game.is_public),
        status=game.status,
        current_turn=current_turn,
        total_turns=int(game.total_turns),
        has_bots=bool(game.has_bots),
        wait_timeout_at=game.wait_timeout_at,
        players=[build_player_view(player, current_turn=current_turn) for player in game.players],
        winner_slot_indexes=(
            list(game.winner_slot_indexes) if game.winner_slot_indexes is not None else None
        ),
    )


async def load_game(session: AsyncSession, game_id: UUID) -> MultiplayerGame:
    game = await MultiplayerGamesRepo.get_by_id(session, game_id)
    if game is None:
        raise MultiplayerGameNotFoundError
    return game


async def load_game_for_update(session: AsyncSession, game_id: UUID) -> MultiplayerGame:
    game = await MultiplayerGamesRepo.get_by_id_for_update(session, game_id)
    if game is None:
        raise MultiplayerGameNotFoundError
    return game


def find_player_slot(game: MultiplayerGame, identity: PlayerIdentity) -> MultiplayerPlayer | None:
    humans = [player for player in game.players if not player.is_bot]
    if identity.user_id is not None:
        for player in humans:
            if player.user_id == identity.user_id:
                return player
    username = (identity.username or "").strip()
    if username:
        for player in humans:
            if player.user_id is None and player.name == username:
                return player
    return None


def resolve_player_slot(game: MultiplayerGame, identity: PlayerIdentity) -> MultiplayerPlayer:
    player = find_player_slot(game, identity)
    if player is None:
        raise PlayerNotInGameError
    return player


def free_slot_index(game: MultiplayerGame, *, max_players: int) -> int | None:
    taken = {int(player.slot_index) for player in game.players}
    for slot_index in range(max_players):
        if slot_index not in taken:
            return slot_index
    return None


def all_players_answered(game: MultiplayerGame) -> bool:
    return all(int(player.answered_turn) >= int(game.current_turn) for player in game.players)
