from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.config import get_settings
from app.db.repo.leaderboard_repo import LeaderboardRepo
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo
from app.game.errors import LoginRequiredError
from app.game.identity import PlayerIdentity
from app.game.integrity.score_hash import mint_score_hash
from app.game.leaderboard.errors import (
    InvalidScoreSubmissionError,
    ScoreHashInvalidError,
    ScoreSubmissionTooEarlyError,
)
from app.game.leaderboard.service import submit_score
from tests.game.game_fixtures import NOW_UTC

PLAYER = PlayerIdentity(user_id=17, username="alice")


@pytest.fixture
def saved_entries(monkeypatch: pytest.MonkeyPatch) -> list:
    entries: list = []

    async def fake_create(session, *, entry):  # noqa: ANN001
        del session
        if any(saved.score_nonce == entry.score_nonce for saved in entries):
            raise IntegrityError("INSERT INTO leaderboard_entries", {}, Exception("duplicate score_nonce"))
        entry.id = len(entries) + 1
        entries.append(entry)
        return entry

    monkeypatch.setattr(LeaderboardRepo, "create", fake_create)
    return entries


def _issued(score: int, *, user_id: int | None = 17):  # noqa: ANN202
    return mint_score_hash(
        score=score,
        user_id=user_id,
        now_utc=NOW_UTC - timedelta(seconds=30),
        secret=get_settings().score_secret_key,
    )


async def _submit(**overrides):  # noqa: ANN003, ANN202
    issued = overrides.pop("issued", None) or _issued(overrides.get("score", 42))
    params = {
        "identity": PLAYER,
        "score": 42,
        "game_mode": "single",
        "difficulty": "medium",
        "score_hash": issued.token,
        "score_timestamp": issued.timestamp,
        "now_utc": NOW_UTC,
    }
    params.update(overrides)
    return await submit_score(None, **params)


@pytest.mark.asyncio
async def test_valid_hash_stores_entry(saved_entries) -> None:  # noqa: ANN001
    result = await _submit()

    assert result.entry_id == 1
    assert result.score == 42
    assert result.difficulty == "medium"
    assert result.score_adjusted is False
    assert saved_entries[0].username == "alice"
    assert saved_entries[0].score == 42


@pytest.mark.asyncio
async def test_tampered_score_is_replaced_by_signed_score(saved_entries) -> None:  # noqa: ANN001
    result = await _submit(score=9999, issued=_issued(42))

    assert result.score == 42
    assert result.score_adjusted is True
    assert saved_entries[0].score == 42


@pytest.mark.asyncio
async def test_hash_for_another_user_is_rejected(saved_entries) -> None:  # noqa: ANN001
    with pytest.raises(ScoreHashInvalidError) as exc_info:
        await _submit(issued=_issued(42, user_id=18))

    assert exc_info.value.reason == "user_mismatch"
    assert saved_entries == []


@pytest.mark.asyncio
async def test_submission_requires_login_and_known_mode(saved_entries) -> None:  # noqa: ANN001
    with pytest.raises(LoginRequiredError):
        await _submit(identity=PlayerIdentity(user_id=None, username="guest"))
    with pytest.raises(InvalidScoreSubmissionError):
        await _submit(game_mode="arcade")
    with pytest.raises(InvalidScoreSubmissionError):
        await _submit(score=0, issued=_issued(0))
    assert saved_entries == []


@pytest.mark.asyncio
async def test_endless_forces_endless_difficulty(saved_entries) -> None:  # noqa: ANN001
    result = await _submit(game_mode="endless", difficulty="easy")

    assert result.difficulty == "endless"
    assert saved_entries[0].difficulty == "endless"


@pytest.mark.asyncio
async def test_multiplayer_submission_waits_for_other_players(
    monkeypatch: pytest.MonkeyPatch,
    saved_entries,  # noqa: ANN001
) -> None:
    game_id = uuid4()
    me = SimpleNamespace(
        user_id=17,
        name="alice",
        is_bot=False,
        finished=True,
        finished_at=NOW_UTC - timedelta(seconds=120),
    )
    game = SimpleNamespace(id=game_id, status="in_progress", players=[me])

    async def fake_get_by_id(session, requested_id):  # noqa: ANN001
        del session
        return game if requested_id == game_id else None

    monkeypatch.setattr(MultiplayerGamesRepo, "get_by_id", fake_get_by_id)

    with pytest.raises(ScoreSubmissionTooEarlyError):
        await _submit(game_mode="multiplayer", difficulty=None, session_id=game_id)

    me.finished_at = NOW_UTC - timedelta(seconds=601)
    result = await _submit(game_mode="multiplayer", difficulty=None, session_id=game_id)

    assert result.game_mode == "multiplayer"
    assert saved_entries[0].session_id == game_id


@pytest.mark.asyncio
async def test_issued_hash_is_accepted_once(saved_entries) -> None:  # noqa: ANN001
    issued = _issued(42)
    await _submit(issued=issued)

    for _ in range(2):
        with pytest.raises(ScoreHashInvalidError) as exc_info:
            await _submit(issued=issued)
        assert exc_info.value.reason == "replayed"

    assert len(saved_entries) == 1
    assert saved_entries[0].score_nonce


@pytest.mark.asyncio
async def test_multiplayer_submission_requires_session_id(saved_entries) -> None:  # noqa: ANN001
    with pytest.raises(InvalidScoreSubmissionError):
        await _submit(game_mode="multiplayer", difficulty=None)

    assert saved_entries == []
