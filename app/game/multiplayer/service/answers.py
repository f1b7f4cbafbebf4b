from __future__ import annotations

import random
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.multiplayer_games import MultiplayerGame, MultiplayerPlayer
from app.db.repo.images_repo import ImagesRepo
from app.game.identity import PlayerIdentity
from app.game.integrity.score_hash import mint_score_hash
from app.game.multiplayer.bots import simulate_bot_answer
from app.game.multiplayer.errors import GameNotInProgressError
from app.game.multiplayer.types import MultiplayerAnswerResult
from app.game.scoring.rules import MULTIPLAYER_POINTS_PER_CORRECT, streak_milestone_bonus
from app.game.sessions.errors import InvalidSelectionError, NoPendingTurnError
from app.game.sessions.service.constants import SELECTION_REAL, VALID_SELECTIONS
from app.game.sessions.service.descriptions import describe_real_image_for_feedback

from .constants import STATUS_IN_PROGRESS
from .internal import (
    all_players_answered,
    build_game_view,
    load_game_for_update,
    logger,
    require_identity,
    resolve_player_slot,
)
from .turns import has_pending_pair


def _record_answer(
    game: MultiplayerGame,
    *,
    player: MultiplayerPlayer,
    correct: bool,
    now_utc: datetime,
) -> None:
    # Multiplayer scores one flat point per correct answer; streaks are display-only.
    if correct:
        player.streak += 1
        player.score += MULTIPLAYER_POINTS_PER_CORRECT
    else:
        player.streak = 0
    player.answered_turn = game.current_turn
    player.last_answer_correct = correct
    if game.current_turn >= game.total_turns and not player.finished:
        player.finished = True
        player.finished_at = now_utc


def _answer_pending_bots(
    game: MultiplayerGame,
    *,
    now_utc: datetime,
    rng: random.Random | None,
) -> int:
    humans = [player for player in game.players if not player.is_bot]
    if any(player.answered_turn < game.current_turn for player in humans):
        return 0
    answered = 0
    for player in game.players:
        if not player.is_bot or player.answered_turn >= game.current_turn:
            continue
        _record_answer(game, player=player, correct=simulate_bot_answer(rng=rng), now_utc=now_utc)
        answered += 1
    return answered


async def submit_answer(
    session: AsyncSession,
    *,
    game_id: UUID,
    identity: PlayerIdentity,
    selection: str,
    now_utc: datetime,
    rng: random.Random | None = None,
) -> MultiplayerAnswerResult:
    if selection not in VALID_SELECTIONS:
        raise InvalidSelectionError
    require_identity(identity)

    game = await load_game_for_update(session, game_id)
    player = resolve_player_slot(game, identity)
    if game.status != STATUS_IN_PROGRESS:
        raise GameNotInProgressError
    if not has_pending_pair(game):
        raise NoPendingTurnError

    real_image_id = int(game.current_real_image_id)
    duplicate = player.answered_turn >= game.current_turn
    if duplicate:
        correct = bool(player.last_answer_correct)
        logger.info(
            "duplicate_answer_ignored",
            game_id=str(game.id),
            slot_index=int(player.slot_index),
            turn=game.current_turn,
        )
    else:
        correct = selection == SELECTION_REAL
        _record_answer(game, player=player, correct=correct, now_utc=now_utc)
        bots_answered = _answer_pending_bots(game, now_utc=now_utc, rng=rng)
        logger.info(
            "multiplayer_answer_recorded",
            game_id=str(game.id),
            slot_index=int(player.slot_index),
            turn=game.current_turn,
            correct=correct,
            score=player.score,
            bots_answered=bots_answered,
        )

    displayed_streak_bonus = 0
    if correct and not duplicate:
        displayed_streak_bonus = streak_milestone_bonus(int(player.streak))

    image_description = None
    if not correct:
        image = await ImagesRepo.get_by_id(session, real_image_id)
        image_description = describe_real_image_for_feedback(image, image_id=real_image_id)

    issued = mint_score_hash(
        score=player.score,
        user_id=player.user_id,
        now_utc=now_utc,
        secret=get_settings().score_secret_key,
    )
    return MultiplayerAnswerResult(
        game=build_game_view(game),
        slot_index=int(player.slot_index),
        correct=correct,
        score=int(player.score),
        streak=int(player.streak),
        streak_bonus=displayed_streak_bonus,
        all_answered=all_players_answered(game),
        finished=bool(player.finished),
        score_hash=issued.token,
        score_verification=issued.timestamp,
        image_description=image_description,
        duplicate=duplicate,
    )
