from __future__ import annotations

import pytest

from app.game.identity import PlayerIdentity
from app.game.sessions.errors import BonusNotPendingError, BonusUnavailableInModeError
from app.game.sessions.service import GameSessionService
from app.game.sessions.types import FourImageChallengeView, SessionContext, SingleImageChallengeView
from tests.game.game_fixtures import (
    NOW_UTC,
    FakeSession,
    ScriptedRandom,
    install_award_sink,
    install_catalog,
    install_session_store,
    make_catalog,
    make_image,
)

PLAYER = PlayerIdentity(user_id=42, username="alice")


@pytest.fixture
def bonus_env(monkeypatch: pytest.MonkeyPatch):
    store = install_session_store(monkeypatch)
    catalog = make_catalog(real_count=10, ai_count=10)
    catalog.extend(
        [
            make_image(50, image_type="real", difficulty="hard"),
            make_image(150, image_type="ai", difficulty="hard"),
        ]
    )
    install_catalog(monkeypatch, catalog)
    awards = install_award_sink(monkeypatch)
    return store, awards


async def _start_single(session, *, difficulty: str = "easy"):  # noqa: ANN001, ANN202
    started = await GameSessionService.start_game(
        session,
        identity=PLAYER,
        mode="single",
        difficulty=difficulty,
        now_utc=NOW_UTC,
    )
    return started.context


@pytest.mark.asyncio
async def test_four_image_bonus_restores_a_life(bonus_env) -> None:  # noqa: ANN001
    store, awards = bonus_env
    session = FakeSession()
    context = await _start_single(session)
    store[context.session_id].lives = 3

    challenge = await GameSessionService.get_bonus_images(
        session,
        context=context,
        identity=PLAYER,
        rng=ScriptedRandom([0.9]),
    )
    assert isinstance(challenge, FourImageChallengeView)
    assert len(challenge.images) == 4
    game_session = store[context.session_id]
    assert game_session.pending_bonus_type == "four_image"
    assert all(image.image_id in game_session.shown_images for image in challenge.images)

    result = await GameSessionService.resolve_bonus_result(
        session,
        context=context,
        identity=PLAYER,
        correct=True,
        now_utc=NOW_UTC,
    )

    assert result.life_awarded is True
    assert result.points_reward is False
    assert result.snapshot.lives == 4
    assert result.max_lives == 5
    assert game_session.pending_bonus_type is None
    assert [award["slug"] for award in awards] == ["bonus_game_win"]


@pytest.mark.asyncio
async def test_bonus_at_max_lives_awards_points(bonus_env) -> None:  # noqa: ANN001
    store, _ = bonus_env
    session = FakeSession()
    context = await _start_single(session, difficulty="hard")
    store[context.session_id].score = 30
    await GameSessionService.get_bonus_images(session, context=context, identity=PLAYER)

    result = await GameSessionService.resolve_bonus_result(
        session,
        context=context,
        identity=PLAYER,
        correct=True,
        now_utc=NOW_UTC,
    )

    assert result.life_awarded is False
    assert result.points_reward is True
    assert result.snapshot.score == 80
    assert result.snapshot.lives == 1


@pytest.mark.asyncio
async def test_wrong_four_image_pick_halves_score(bonus_env) -> None:  # noqa: ANN001
    store, awards = bonus_env
    session = FakeSession()
    context = await _start_single(session)
    store[context.session_id].score = 45

    challenge = await GameSessionService.get_bonus_images(
        session,
        context=context,
        identity=PLAYER,
        rng=ScriptedRandom([0.9]),
    )
    assert isinstance(challenge, FourImageChallengeView)
    wrong_image = next(
        image
        for index, image in enumerate(challenge.images)
        if index != challenge.real_image_index
    )

    result = await GameSessionService.resolve_bonus_result(
        session,
        context=context,
        identity=PLAYER,
        correct=True,
        now_utc=NOW_UTC,
        selected_image_id=wrong_image.image_id,
    )

    assert result.correct is False
    assert result.snapshot.score == 22
    assert awards == []


@pytest.mark.asyncio
async def test_single_image_bonus(bonus_env) -> None:  # noqa: ANN001
    _, awards = bonus_env
    session = FakeSession()
    context = await _start_single(session)

    challenge = await GameSessionService.get_bonus_images(
        session,
        context=context,
        identity=PLAYER,
        rng=ScriptedRandom([0.1, 0.1]),
    )
    assert isinstance(challenge, SingleImageChallengeView)
    assert challenge.image.image_id == 50
    assert challenge.is_real is True

    result = await GameSessionService.resolve_bonus_result(
        session,
        context=context,
        identity=PLAYER,
        correct=True,
        now_utc=NOW_UTC,
    )
    assert result.game_type == "single_image"
    assert [award["slug"] for award in awards] == ["single_image_bonus_win"]


@pytest.mark.asyncio
async def test_bonus_result_requires_pending_bonus(bonus_env) -> None:  # noqa: ANN001
    session = FakeSession()
    context = await _start_single(session)

    with pytest.raises(BonusNotPendingError):
        await GameSessionService.resolve_bonus_result(
            session,
            context=context,
            identity=PLAYER,
            correct=True,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_bonus_unavailable_in_endless(bonus_env) -> None:  # noqa: ANN001
    session = FakeSession()
    started = await GameSessionService.start_game(
        session,
        identity=PLAYER,
        mode="endless",
        difficulty=None,
        now_utc=NOW_UTC,
    )

    with pytest.raises(BonusUnavailableInModeError):
        await GameSessionService.get_bonus_images(session, context=started.context, identity=PLAYER)
    with pytest.raises(BonusUnavailableInModeError):
        await GameSessionService.get_bonus_images(
            session,
            context=SessionContext(session_id=started.context.session_id, mode="multiplayer"),
            identity=PLAYER,
        )
