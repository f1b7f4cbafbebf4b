from __future__ import annotations

import random
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.achievements import ACHIEVEMENT_MULTIPLAYER_WIN, award_achievement
from app.db.models.multiplayer_games import BonusChestGame, MultiplayerGame, MultiplayerPlayer
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo
from app.game.identity import PlayerIdentity
from app.game.multiplayer.errors import (
    ChestAlreadyTakenError,
    ChestGameClosedError,
    ChestGameNotFoundError,
    GameNotCompletedError,
    InvalidChestIndexError,
    PlayerAlreadySelectedError,
)
from app.game.multiplayer.types import ChestGameView, ChestSelectionResult, ChestView, WinnerResult

from .constants import CHEST_VALUES, STATUS_COMPLETED
from .internal import (
    build_player_view,
    load_game,
    load_game_for_update,
    logger,
    require_identity,
    resolve_player_slot,
)

_system_rng = random.SystemRandom()


def shuffled_chest_values(*, rng: random.Random | None = None) -> list[int]:
    values = list(CHEST_VALUES)
    (rng if rng is not None else _system_rng).shuffle(values)
    return values


def build_chest_game_view(
    game: MultiplayerGame,
    chest_game: BonusChestGame,
    *,
    viewer_slot: int | None = None,
) -> ChestGameView:
    claims = list(chest_game.chest_claims)
    chests = [
        ChestView(
            chest_index=index,
            claimed_by_slot=claims[index],
            # Values stay hidden until the chest is opened.
            value=int(value) if claims[index] is not None else None,
        )
        for index, value in enumerate(chest_game.chest_values)
    ]
    selected = None
    if viewer_slot is not None and viewer_slot in claims:
        selected = claims.index(viewer_slot)
    return ChestGameView(
        game_id=game.id,
        chests=chests,
        completed=bool(chest_game.completed),
        players=[
            build_player_view(player, current_turn=int(game.current_turn))
            for player in game.players
        ],
        selected_chest_index=selected,
    )


def _require_completed(game: MultiplayerGame) -> None:
    if game.status != STATUS_COMPLETED:
        raise GameNotCompletedError


def _require_chest_game(game: MultiplayerGame) -> BonusChestGame:
    if game.chest_game is None:
        raise ChestGameNotFoundError
    return game.chest_game


def _claim(
    chest_game: BonusChestGame,
    *,
    player: MultiplayerPlayer,
    chest_index: int,
) -> int:
    claims = list(chest_game.chest_claims)
    claims[chest_index] = int(player.slot_index)
    chest_game.chest_claims = claims
    value = int(chest_game.chest_values[chest_index])
    player.score += value
    return value


def _claim_for_bots(
    game: MultiplayerGame,
    chest_game: BonusChestGame,
    *,
    rng: random.Random | None,
) -> int:
    claims = list(chest_game.chest_claims)
    humans = [player for player in game.players if not player.is_bot]
    if any(int(player.slot_index) not in claims for player in humans):
        return 0
    resolved_rng = rng if rng is not None else _system_rng
    claimed = 0
    for player in game.players:
        if not player.is_bot or int(player.slot_index) in chest_game.chest_claims:
            continue
        free = [index for index, slot in enumerate(chest_game.chest_claims) if slot is None]
        if not free:
            break
        _claim(chest_game, player=player, chest_index=resolved_rng.choice(free))
        claimed += 1
    return claimed


async def start_chest_game(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    now_utc: datetime,
    rng: random.Random | None = None,
) -> ChestGameView:
    require_identity(identity)
    game = await load_game_for_update(session, game_id)
    player = resolve_player_slot(game, identity)
    _require_completed(game)
    if game.chest_game is None:
        await MultiplayerGamesRepo.create_chest_game(
            session,
            game=game,
            chest_game=BonusChestGame(
                game_id=game.id,
                chest_values=shuffled_chest_values(rng=rng),
                chest_claims=[None] * len(CHEST_VALUES),
                completed=False,
                created_at=now_utc,
            ),
        )
        logger.info("multiplayer_chest_game_started", game_id=str(game.id))
    return build_chest_game_view(game, game.chest_game, viewer_slot=int(player.slot_index))


async def get_chest_game_state(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
) -> ChestGameView:
    require_identity(identity)
    game = await load_game(session, game_id)
    player = resolve_player_slot(game, identity)
    chest_game = _require_chest_game(game)
    return build_chest_game_view(game, chest_game, viewer_slot=int(player.slot_index))


async def select_chest(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    chest_index: int,
    rng: random.Random | None = None,
) -> ChestSelectionResult:
    require_identity(identity)
    game = await load_game_for_update(session, game_id)
    player = resolve_player_slot(game, identity)
    chest_game = _require_chest_game(game)
    if chest_game.completed:
        raise ChestGameClosedError
    if chest_index < 0 or chest_index >= len(chest_game.chest_values):
        raise InvalidChestIndexError
    if int(player.slot_index) in chest_game.chest_claims:
        raise PlayerAlreadySelectedError
    if chest_game.chest_claims[chest_index] is not None:
        raise ChestAlreadyTakenError

    value = _claim(chest_game, player=player, chest_index=chest_index)
    bots_claimed = _claim_for_bots(game, chest_game, rng=rng)
    logger.info(
        "multiplayer_chest_selected",
        game_id=str(game.id),
        slot_index=int(player.slot_index),
        chest_index=chest_index,
        value=value,
        bots_claimed=bots_claimed,
    )
    return ChestSelectionResult(
        chest_game=build_chest_game_view(game, chest_game, viewer_slot=int(player.slot_index)),
        slot_index=int(player.slot_index),
        chest_index=chest_index,
        value=value,
        score=int(player.score),
    )


def pick_winners(players: list[MultiplayerPlayer]) -> tuple[list[MultiplayerPlayer], int]:
    if not players:
        return [], 0
    top_score = max(int(player.score) for player in players)
    return [player for player in players if int(player.score) == top_score], top_score


async def resolve_winner(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    now_utc: datetime,
) -> WinnerResult:
    require_identity(identity)
    game = await load_game_for_update(session, game_id)
    resolve_player_slot(game, identity)
    _require_completed(game)

    winners, top_score = pick_winners(list(game.players))
    winner_slots = [int(player.slot_index) for player in winners]
    already_resolved = game.winner_slot_indexes is not None
    game.winner_slot_indexes = winner_slots
    if game.chest_game is not None:
        game.chest_game.completed = True

    is_tie = len(winners) > 1
    if not already_resolved:
        logger.info(
            "multiplayer_winner_resolved",
            game_id=str(game.id),
            winner_slot_indexes=winner_slots,
            top_score=top_score,
            is_tie=is_tie,
        )
        if winners and not is_tie and not winners[0].is_bot:
            await award_achievement(
                session,
                user_id=winners[0].user_id,
                slug=ACHIEVEMENT_MULTIPLAYER_WIN,
                happened_at=now_utc,
                payload={"game_id": str(game.id), "score": top_score},
            )

    return WinnerResult(
        game_id=game.id,
        winner_slot_indexes=winner_slots,
        winner_names=[player.name for player in winners],
        is_tie=is_tie,
        top_score=top_score,
        players=[
            build_player_view(player, current_turn=int(game.current_turn))
            for player in game.players
        ],
    )
