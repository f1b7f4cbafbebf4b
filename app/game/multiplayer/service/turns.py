from __future__ import annotations

import random
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.multiplayer_games import MultiplayerGame
from app.game.errors import NoImagesAvailableError
from app.game.identity import PlayerIdentity
from app.game.images.selection import load_images, pick_left_is_real, select_pair, to_image_view
from app.game.multiplayer.errors import GameNotInProgressError, TurnNotCompleteError
from app.game.multiplayer.types import MultiplayerGameView, MultiplayerTurnView
from app.game.sessions.service.descriptions import describe_real_image_for_turn

from .constants import MULTIPLAYER_DIFFICULTY, STATUS_COMPLETED, STATUS_IN_PROGRESS
from .internal import (
    all_players_answered,
    build_game_view,
    load_game_for_update,
    logger,
    require_identity,
    resolve_player_slot,
)


def has_pending_pair(game: MultiplayerGame) -> bool:
    return game.current_real_image_id is not None and game.current_ai_image_id is not None


async def serve_turn(
    session: AsyncSession,
    *,
    game: MultiplayerGame,
    rng: random.Random | None,
) -> MultiplayerTurnView:
    if not has_pending_pair(game):
        pair = await select_pair(
            session,
            shown_images=game.shown_images,
            difficulty=MULTIPLAYER_DIFFICULTY,
            rng=rng,
        )
        game.current_real_image_id = pair.real_image_id
        game.current_ai_image_id = pair.ai_image_id
        game.left_is_real = pick_left_is_real(rng=rng)
        game.shown_images = [*game.shown_images, pair.real_image_id, pair.ai_image_id]

    real_image_id = int(game.current_real_image_id)
    ai_image_id = int(game.current_ai_image_id)
    images = await load_images(session, (real_image_id, ai_image_id))
    real_view = to_image_view(images[real_image_id])
    ai_view = to_image_view(images[ai_image_id])
    left_is_real = bool(game.left_is_real)
    return MultiplayerTurnView(
        game=build_game_view(game),
        left_image=real_view if left_is_real else ai_view,
        right_image=ai_view if left_is_real else real_view,
        left_is_real=left_is_real,
        is_final_turn=game.current_turn >= game.total_turns,
        real_image_description=describe_real_image_for_turn(images[real_image_id]),
    )


def complete_game(game: MultiplayerGame, *, now_utc: datetime) -> MultiplayerGameView:
    game.status = STATUS_COMPLETED
    game.completed_at = now_utc
    for player in game.players:
        if not player.finished:
            player.finished = True
            player.finished_at = now_utc
    logger.info(
        "multiplayer_game_completed",
        game_id=str(game.id),
        total_turns=game.total_turns,
        scores={int(player.slot_index): int(player.score) for player in game.players},
    )
    return build_game_view(game)


async def get_turn(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    rng: random.Random | None = None,
) -> MultiplayerTurnView:
    require_identity(identity)
    game = await load_game_for_update(session, game_id)
    resolve_player_slot(game, identity)
    if game.status != STATUS_IN_PROGRESS:
        raise GameNotInProgressError
    return await serve_turn(session, game=game, rng=rng)


async def advance_turn(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    now_utc: datetime,
    from_turn: int | None = None,
    rng: random.Random | None = None,
) -> MultiplayerTurnView | MultiplayerGameView:
    """Advance the shared turn once; a game view is returned when the game is over."""
    require_identity(identity)
    game = await load_game_for_update(session, game_id)
    resolve_player_slot(game, identity)
    if game.status == STATUS_COMPLETED:
        return build_game_view(game)
    if game.status != STATUS_IN_PROGRESS:
        raise GameNotInProgressError

    if from_turn is not None and from_turn != game.current_turn:
        logger.info(
            "multiplayer_stale_advance_ignored",
            game_id=str(game.id),
            from_turn=from_turn,
            current_turn=game.current_turn,
        )
        return await serve_turn(session, game=game, rng=rng)

    if not all_players_answered(game):
        raise TurnNotCompleteError

    game.current_turn += 1
    game.current_real_image_id = None
    game.current_ai_image_id = None
    if game.current_turn > game.total_turns:
        return complete_game(game, now_utc=now_utc)
    try:
        return await serve_turn(session, game=game, rng=rng)
    except NoImagesAvailableError:
        logger.warning(
            "multiplayer_images_exhausted",
            game_id=str(game.id),
            turns_played=game.current_turn - 1,
            total_turns=game.total_turns,
        )
        return complete_game(game, now_utc=now_utc)
