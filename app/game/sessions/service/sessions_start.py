from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_sessions import GameSession
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.game.errors import LoginRequiredError
from app.game.identity import PlayerIdentity
from app.game.sessions.errors import (
    DailyChallengeAlreadyPlayedError,
    InvalidModeOrDifficultyError,
)
from app.game.sessions.types import SessionContext, StartGameResult

from .constants import (
    DAILY_CHALLENGE_DIFFICULTY,
    DAILY_CHALLENGE_LIVES,
    DAILY_CHALLENGE_TOTAL_TURNS,
    DEFAULT_SINGLE_DIFFICULTY,
    ENDLESS_DIFFICULTY,
    ENDLESS_RULES,
    MODE_DAILY_CHALLENGE,
    MODE_ENDLESS,
    MODE_SINGLE,
    SINGLE_MODE_RULES,
)
from .sessions_internal import build_session_snapshot

logger = structlog.get_logger("app.game.sessions")


def resolve_mode_rules(*, mode: str, difficulty: str | None) -> tuple[str, int, int]:
    """Return (difficulty, total_turns, lives) for a mode/difficulty combination."""
    if mode == MODE_SINGLE:
        resolved = difficulty or DEFAULT_SINGLE_DIFFICULTY
        rules = SINGLE_MODE_RULES.get(resolved)
        if rules is None:
            raise InvalidModeOrDifficultyError
        return resolved, rules[0], rules[1]
    if mode == MODE_ENDLESS:
        if difficulty not in (None, ENDLESS_DIFFICULTY):
            raise InvalidModeOrDifficultyError
        return ENDLESS_DIFFICULTY, ENDLESS_RULES[0], ENDLESS_RULES[1]
    if mode == MODE_DAILY_CHALLENGE:
        if difficulty not in (None, DAILY_CHALLENGE_DIFFICULTY):
            raise InvalidModeOrDifficultyError
        return DAILY_CHALLENGE_DIFFICULTY, DAILY_CHALLENGE_TOTAL_TURNS, DAILY_CHALLENGE_LIVES
    raise InvalidModeOrDifficultyError


async def start_game(
    session: AsyncSession,
    *,
    identity: PlayerIdentity,
    mode: str,
    difficulty: str | None,
    now_utc: datetime,
) -> StartGameResult:
    resolved_difficulty, total_turns, lives = resolve_mode_rules(
        mode=mode,
        difficulty=difficulty,
    )
    if mode != MODE_SINGLE and not identity.is_authenticated:
        raise LoginRequiredError

    local_date = now_utc.date()
    if mode == MODE_DAILY_CHALLENGE:
        already_played = await GameSessionsRepo.has_daily_challenge_on_date(
            session,
            owner_user_id=identity.user_id,
            local_date=local_date,
        )
        if already_played:
            raise DailyChallengeAlreadyPlayedError

    game_session = GameSession(
        id=uuid4(),
        owner_user_id=identity.user_id,
        mode=mode,
        difficulty=resolved_difficulty,
        current_turn=1,
        total_turns=total_turns,
        score=0,
        lives=lives,
        starting_lives=lives,
        current_streak=0,
        current_real_image_id=None,
        current_ai_image_id=None,
        left_is_real=False,
        shown_images=[],
        time_penalty=False,
        last_answer_key=None,
        last_answer_correct=None,
        pending_bonus_type=None,
        bonus_real_image_id=None,
        completed=False,
        created_at=now_utc,
        completed_at=None,
        local_date=local_date,
    )
    try:
        async with session.begin_nested():
            await GameSessionsRepo.create(session, game_session=game_session)
    except IntegrityError as exc:
        if mode == MODE_DAILY_CHALLENGE:
            raise DailyChallengeAlreadyPlayedError from exc
        raise

    logger.info(
        "game_session_started",
        session_id=str(game_session.id),
        user_id=identity.user_id,
        mode=mode,
        difficulty=resolved_difficulty,
        total_turns=total_turns,
        lives=lives,
    )
    return StartGameResult(
        context=SessionContext(session_id=game_session.id, mode=mode),
        snapshot=build_session_snapshot(game_session),
    )
