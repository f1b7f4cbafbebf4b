from __future__ import annotations

import random
from collections.abc import Iterable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.db.repo.achievements_repo import AchievementsRepo
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.images_repo import ImagesRepo
from app.db.repo.multiplayer_games_repo import MultiplayerGamesRepo

UTC = timezone.utc
NOW_UTC = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


class FakeSession:
    """Stands in for AsyncSession; repos are monkeypatched so only these are touched."""

    def __init__(self) -> None:
        self.flush_count = 0

    @asynccontextmanager
    async def begin_nested(self):
        yield self

    async def flush(self) -> None:
        self.flush_count += 1


def make_image(
    image_id: int,
    *,
    image_type: str,
    difficulty: str | None = "easy",
    description: str | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        id=image_id,
        filename=f"{image_type}_{image_id}.jpg",
        type=image_type,
        difficulty=difficulty,
        description=description,
        category=None,
    )


def make_catalog(
    *,
    real_count: int,
    ai_count: int,
    difficulty: str | None = "easy",
) -> list[SimpleNamespace]:
    images = [
        make_image(index, image_type="real", difficulty=difficulty, description=f"Real photo {index}")
        for index in range(1, real_count + 1)
    ]
    images.extend(
        make_image(100 + index, image_type="ai", difficulty=difficulty)
        for index in range(1, ai_count + 1)
    )
    return images


def install_catalog(monkeypatch: pytest.MonkeyPatch, images: Iterable[SimpleNamespace]) -> dict[int, SimpleNamespace]:
    by_id = {int(image.id): image for image in images}

    async def fake_get_by_id(session, image_id):  # noqa: ANN001
        del session
        return by_id.get(int(image_id))

    async def fake_list_by_ids(session, image_ids):  # noqa: ANN001
        del session
        return [by_id[int(image_id)] for image_id in image_ids if int(image_id) in by_id]

    async def fake_list_unused_ids(
        session,  # noqa: ANN001
        *,
        image_type: str,
        difficulties: tuple[str, ...] | None,
        include_untagged: bool,
        exclude_ids,  # noqa: ANN001
    ) -> list[int]:
        del session
        excluded = {int(image_id) for image_id in exclude_ids}
        result: list[int] = []
        for image in sorted(by_id.values(), key=lambda item: item.id):
            if image.type != image_type or image.id in excluded:
                continue
            if difficulties is not None:
                if image.difficulty is None and not include_untagged:
                    continue
                if image.difficulty is not None and image.difficulty not in difficulties:
                    continue
            result.append(int(image.id))
        return result

    monkeypatch.setattr(ImagesRepo, "get_by_id", fake_get_by_id)
    monkeypatch.setattr(ImagesRepo, "list_by_ids", fake_list_by_ids)
    monkeypatch.setattr(ImagesRepo, "list_unused_ids", fake_list_unused_ids)
    return by_id


def install_session_store(monkeypatch: pytest.MonkeyPatch) -> dict:
    store: dict = {}

    async def fake_get_by_id(session, session_id):  # noqa: ANN001
        del session
        return store.get(session_id)

    async def fake_has_daily(session, *, owner_user_id: int, local_date) -> bool:  # noqa: ANN001
        del session
        return any(
            item.mode == "daily_challenge"
            and item.owner_user_id == owner_user_id
            and item.local_date == local_date
            for item in store.values()
        )

    async def fake_create(session, *, game_session):  # noqa: ANN001
        del session
        store[game_session.id] = game_session
        return game_session

    monkeypatch.setattr(GameSessionsRepo, "get_by_id", fake_get_by_id)
    monkeypatch.setattr(GameSessionsRepo, "get_by_id_for_update", fake_get_by_id)
    monkeypatch.setattr(GameSessionsRepo, "has_daily_challenge_on_date", fake_has_daily)
    monkeypatch.setattr(GameSessionsRepo, "create", fake_create)
    return store


def install_game_store(monkeypatch: pytest.MonkeyPatch) -> dict:
    store: dict = {}

    async def fake_get_by_id(session, game_id):  # noqa: ANN001
        del session
        return store.get(game_id)

    async def fake_get_by_room_code(session, room_code: str):  # noqa: ANN001
        del session
        return next((game for game in store.values() if game.room_code == room_code), None)

    async def fake_room_code_exists(session, room_code: str) -> bool:  # noqa: ANN001
        del session
        return any(game.room_code == room_code for game in store.values())

    async def fake_get_open_public(session, *, max_players: int):  # noqa: ANN001
        del session
        for game in sorted(store.values(), key=lambda item: item.created_at):
            if game.is_public and game.status == "waiting" and len(game.players) < max_players:
                return game
        return None

    async def fake_create(session, *, game):  # noqa: ANN001
        del session
        store[game.id] = game
        return game

    monkeypatch.setattr(MultiplayerGamesRepo, "get_by_id", fake_get_by_id)
    monkeypatch.setattr(MultiplayerGamesRepo, "get_by_id_for_update", fake_get_by_id)
    monkeypatch.setattr(MultiplayerGamesRepo, "get_by_room_code_for_update", fake_get_by_room_code)
    monkeypatch.setattr(MultiplayerGamesRepo, "room_code_exists", fake_room_code_exists)
    monkeypatch.setattr(MultiplayerGamesRepo, "get_open_public_for_update", fake_get_open_public)
    monkeypatch.setattr(MultiplayerGamesRepo, "create", fake_create)
    return store


def install_award_sink(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    awards: list[dict[str, object]] = []

    async def fake_insert_award_if_absent(session, **kwargs) -> bool:  # noqa: ANN001
        del session
        if any(
            award["user_id"] == kwargs["user_id"] and award["slug"] == kwargs["slug"]
            for award in awards
        ):
            return False
        awards.append(kwargs)
        return True

    monkeypatch.setattr(AchievementsRepo, "insert_award_if_absent", fake_insert_award_if_absent)
    return awards


class ScriptedRandom(random.Random):
    """Deterministic rng whose random() draws come from a fixed script."""

    def __init__(self, draws: Iterable[float], seed: int = 7) -> None:
        super().__init__(seed)
        self._draws = list(draws)

    def random(self) -> float:
        if self._draws:
            return self._draws.pop(0)
        return super().random()
