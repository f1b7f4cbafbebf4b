from __future__ import annotations

import random
import secrets
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.multiplayer_games import MultiplayerGame, MultiplayerPlayer
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo
from app.game.identity import PlayerIdentity
from app.game.multiplayer.bots import generate_bot_name
from app.game.multiplayer.errors import (
    GameFullError,
    GameNotJoinableError,
    MultiplayerGameNotFoundError,
    NotEnoughPlayersError,
)
from app.game.multiplayer.types import JoinResult, MultiplayerGameView

from .constants import (
    DEFAULT_TOTAL_TURNS,
    MAX_PLAYERS,
    MAX_TOTAL_TURNS,
    MIN_PLAYERS_TO_START,
    MIN_TOTAL_TURNS,
    ROOM_CODE_ALPHABET,
    ROOM_CODE_LENGTH,
    ROOM_CODE_MAX_ATTEMPTS,
    STATUS_IN_PROGRESS,
    STATUS_WAITING,
    WAIT_TIMEOUT_SECONDS,
)
from .internal import (
    build_game_view,
    find_player_slot,
    free_slot_index,
    load_game_for_update,
    logger,
    require_identity,
    resolve_player_slot,
)


def normalize_total_turns(total_turns: int | None) -> int:
    if total_turns is None or total_turns < MIN_TOTAL_TURNS or total_turns > MAX_TOTAL_TURNS:
        return DEFAULT_TOTAL_TURNS
    return int(total_turns)


def _display_name(identity: PlayerIdentity) -> str:
    username = (identity.username or "").strip()
    if username:
        return username[:64]
    return f"Player{identity.user_id}"


def _new_player(
    *,
    slot_index: int,
    name: str,
    user_id: int | None,
    is_bot: bool,
    now_utc: datetime,
) -> MultiplayerPlayer:
    return MultiplayerPlayer(
        slot_index=slot_index,
        user_id=user_id,
        name=name,
        is_bot=is_bot,
        score=0,
        streak=0,
        answered_turn=0,
        last_answer_correct=None,
        finished=False,
        finished_at=None,
        joined_at=now_utc,
    )


async def _generate_room_code(session: AsyncSession) -> str:
    for _ in range(ROOM_CODE_MAX_ATTEMPTS):
        room_code = "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
        if not await MultiplayerGamesRepo.room_code_exists(session, room_code):
            return room_code
    raise RuntimeError("room_code_generation_exhausted")


async def create_game(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    is_public: bool,
    total_turns: int | None,
    now_utc: datetime,
) -> JoinResult:
    require_identity(identity)
    resolved_total_turns = normalize_total_turns(total_turns)
    game = MultiplayerGame(
        id=uuid4(),
        room_code=await _generate_room_code(session),
        is_public=is_public,
        status=STATUS_WAITING,
        current_turn=1,
        total_turns=resolved_total_turns,
        current_real_image_id=None,
        current_ai_image_id=None,
        left_is_real=False,
        shown_images=[],
        has_bots=False,
        winner_slot_indexes=None,
        wait_timeout_at=now_utc + timedelta(seconds=WAIT_TIMEOUT_SECONDS),
        created_at=now_utc,
        started_at=None,
        completed_at=None,
    )
    game.players = [
        _new_player(
            slot_index=0,
            name=_display_name(identity),
            user_id=identity.user_id,
            is_bot=False,
            now_utc=now_utc,
        )
    ]
    await MultiplayerGamesRepo.create(session, game=game)
    logger.info(
        "multiplayer_game_created",
        game_id=str(game.id),
        room_code=game.room_code,
        is_public=is_public,
        total_turns=resolved_total_turns,
        host_user_id=identity.user_id,
    )
    return JoinResult(game=build_game_view(game), slot_index=0, joined_now=True)


async def _join_locked_game(
    session: AsyncSession,
    *,
    game: MultiplayerGame,
    identity: PlayerIdentity,
    now_utc: datetime,
) -> JoinResult:
    existing = find_player_slot(game, identity)
    if existing is not None:
        return JoinResult(
            game=build_game_view(game),
            slot_index=int(existing.slot_index),
            joined_now=False,
        )
    if game.status != STATUS_WAITING:
        raise GameNotJoinableError
    slot_index = free_slot_index(game, max_players=MAX_PLAYERS)
    if slot_index is None:
        raise GameFullError

    await MultiplayerGamesRepo.add_player(
        session,
        game=game,
        player=_new_player(
            slot_index=slot_index,
            name=_display_name(identity),
            user_id=identity.user_id,
            is_bot=False,
            now_utc=now_utc,
        ),
    )
    logger.info(
        "multiplayer_player_joined",
        game_id=str(game.id),
        slot_index=slot_index,
        user_id=identity.user_id,
    )
    return JoinResult(game=build_game_view(game), slot_index=slot_index, joined_now=True)


async def join_game(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    now_utc: datetime,
    game_id: UUID | None = None,
    room_code: str | None = None,
) -> JoinResult:
    require_identity(identity)
    if game_id is not None:
        game = await load_game_for_update(session, game_id)
    elif room_code:
        game = await MultiplayerGamesRepo.get_by_room_code_for_update(
            session,
            room_code.strip().upper(),
        )
        if game is None:
            raise MultiplayerGameNotFoundError
    else:
        raise MultiplayerGameNotFoundError
    return await _join_locked_game(session, game=game, identity=identity, now_utc=now_utc)


async def quick_match(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    now_utc: datetime,
) -> JoinResult:
    require_identity(identity)
    game = await MultiplayerGamesRepo.get_open_public_for_update(session, max_players=MAX_PLAYERS)
    if game is None:
        return await create_game(
            session,
            identity=identity,
            is_public=True,
            total_turns=DEFAULT_TOTAL_TURNS,
            now_utc=now_utc,
        )
    return await _join_locked_game(session, game=game, identity=identity, now_utc=now_utc)


def _mark_started(game: MultiplayerGame, *, now_utc: datetime) -> None:
    game.status = STATUS_IN_PROGRESS
    game.started_at = now_utc
    logger.info(
        "multiplayer_game_started",
        game_id=str(game.id),
        players=len(game.players),
        has_bots=bool(game.has_bots),
    )


async def start_game(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    now_utc: datetime,
) -> MultiplayerGameView:
    require_identity(identity)
    game = await load_game_for_update(session, game_id)
    resolve_player_slot(game, identity)
    if game.status == STATUS_IN_PROGRESS:
        return build_game_view(game)
    if game.status != STATUS_WAITING:
        raise GameNotJoinableError
    if len(game.players) < MIN_PLAYERS_TO_START:
        raise NotEnoughPlayersError
    _mark_started(game, now_utc=now_utc)
    return build_game_view(game)


async def fill_with_bots(
    session: AsyncSession,
    *,
    game: MultiplayerGame,
    now_utc: datetime,
    rng: random.Random | None = None,
) -> int:
    """Seat bots in a locked waiting game until it can start, then start it."""
    if game.status != STATUS_WAITING:
        return 0
    needed = max(1, MIN_PLAYERS_TO_START - len(game.players))
    added = 0
    taken_names = {player.name for player in game.players}
    while added < needed:
        slot_index = free_slot_index(game, max_players=MAX_PLAYERS)
        if slot_index is None:
            break
        bot_name = generate_bot_name(taken=taken_names, rng=rng)
        taken_names.add(bot_name)
        await MultiplayerGamesRepo.add_player(
            session,
            game=game,
            player=_new_player(
                slot_index=slot_index,
                name=bot_name,
                user_id=None,
                is_bot=True,
                now_utc=now_utc,
            ),
        )
        added += 1
    if added > 0:
        game.has_bots = True
        logger.info("multiplayer_bots_added", game_id=str(game.id), bots_added=added)
    if len(game.players) >= MIN_PLAYERS_TO_START:
        _mark_started(game, now_utc=now_utc)
    return added
