from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.routes import multiplayer as multiplayer_routes
from app.game.multiplayer.errors import ChestAlreadyTakenError, GameFullError, MultiplayerGameNotFoundError
from app.game.multiplayer.service import MultiplayerService
from app.game.multiplayer.types import (
    JoinResult,
    MultiplayerGameView,
    MultiplayerTurnView,
    PlayerSlotView,
    WinnerResult,
)
from app.main import app
from tests.api.api_fixtures import GAME_ID, PLAYER_HEADERS, FakeSessionLocal, image_view
from tests.game.game_fixtures import NOW_UTC


@pytest.fixture
def session_local(monkeypatch: pytest.MonkeyPatch) -> FakeSessionLocal:
    fake = FakeSessionLocal()
    monkeypatch.setattr(multiplayer_routes, "SessionLocal", fake)
    return fake


def _player(slot_index: int, name: str, *, score: int = 0, is_bot: bool = False) -> PlayerSlotView:
    return PlayerSlotView(
        slot_index=slot_index,
        name=name,
        is_bot=is_bot,
        score=score,
        streak=0,
        answered_current_turn=False,
        finished=False,
    )


def _game(**overrides) -> MultiplayerGameView:
    values = {
        "game_id": GAME_ID,
        "room_code": "K7P2QX",
        "is_public": False,
        "status": "waiting",
        "current_turn": 1,
        "total_turns": 10,
        "has_bots": False,
        "wait_timeout_at": NOW_UTC,
        "players": [_player(0, "alice")],
    }
    values.update(overrides)
    return MultiplayerGameView(**values)


def test_create_returns_room_code_and_slot(monkeypatch, session_local) -> None:
    async def fake_create_game(session, *, identity, is_public, total_turns, now_utc):  # noqa: ANN001
        assert identity.user_id == 17
        assert is_public is False
        assert total_turns == 20
        return JoinResult(game=_game(total_turns=20), slot_index=0, joined_now=True)

    monkeypatch.setattr(MultiplayerService, "create_game", fake_create_game)

    response = TestClient(app).post(
        "/api/multiplayer/create",
        json={"is_public": False, "total_turns": 20},
        headers=PLAYER_HEADERS,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["slot_index"] == 0
    assert payload["game"]["room_code"] == "K7P2QX"
    assert payload["game"]["session_id"] == str(GAME_ID)
    assert payload["game"]["totalTurns"] == 20
    assert payload["game"]["players"][0]["name"] == "alice"


def test_join_errors_use_envelope(monkeypatch, session_local) -> None:
    async def fake_join_game(session, **kwargs):  # noqa: ANN001, ANN003
        if kwargs["room_code"] == "FULL01":
            raise GameFullError
        raise MultiplayerGameNotFoundError

    monkeypatch.setattr(MultiplayerService, "join_game", fake_join_game)
    client = TestClient(app)

    full = client.post("/api/multiplayer/join", json={"room_code": "FULL01"}, headers=PLAYER_HEADERS)
    missing = client.post("/api/multiplayer/join", json={"room_code": "NOPE00"}, headers=PLAYER_HEADERS)

    assert full.status_code == 409
    assert full.json()["code"] == "E_GAME_FULL"
    assert missing.status_code == 404
    assert missing.json()["code"] == "E_MULTIPLAYER_GAME_NOT_FOUND"


def test_next_turn_switches_shape_when_game_ends(monkeypatch, session_local) -> None:
    finished = _game(status="completed", current_turn=11, players=[_player(0, "alice", score=6)])
    turn = MultiplayerTurnView(
        game=_game(status="in_progress", current_turn=2),
        left_image=image_view(4),
        right_image=image_view(104),
        left_is_real=True,
        is_final_turn=False,
        real_image_description="Real photo 4",
    )
    outcomes = [turn, finished]

    async def fake_advance_turn(session, *, game_id, identity, now_utc, from_turn):  # noqa: ANN001
        assert game_id == GAME_ID
        return outcomes.pop(0)

    monkeypatch.setattr(MultiplayerService, "advance_turn", fake_advance_turn)
    client = TestClient(app)

    body = {"session_id": str(GAME_ID), "from_turn": 1}
    next_turn = client.post("/api/multiplayer/get_next_turn", json=body, headers=PLAYER_HEADERS)
    game_over = client.post("/api/multiplayer/get_next_turn", json=body, headers=PLAYER_HEADERS)

    assert next_turn.json()["leftImage"]["id"] == 4
    assert next_turn.json()["leftIsReal"] is True
    assert next_turn.json()["turn"] == 2
    assert game_over.json()["game"]["status"] == "completed"
    assert "leftImage" not in game_over.json()


def test_chest_selection_conflict(monkeypatch, session_local) -> None:
    async def fake_select_chest(session, **kwargs):  # noqa: ANN001, ANN003
        raise ChestAlreadyTakenError

    monkeypatch.setattr(MultiplayerService, "select_chest", fake_select_chest)

    response = TestClient(app).post(
        "/api/multiplayer/multiplayer_chest_selection",
        json={"session_id": str(GAME_ID), "chest_index": 1},
        headers=PLAYER_HEADERS,
    )

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "code": "E_CHEST_ALREADY_TAKEN",
        "message": "This chest was already selected by another player",
    }


def test_winner_reports_tie(monkeypatch, session_local) -> None:
    async def fake_resolve_winner(session, *, game_id, identity, now_utc):  # noqa: ANN001
        return WinnerResult(
            game_id=game_id,
            winner_slot_indexes=[0, 1],
            winner_names=["alice", "Zephyr"],
            is_tie=True,
            top_score=9,
            players=[_player(0, "alice", score=9), _player(1, "Zephyr", score=9, is_bot=True)],
        )

    monkeypatch.setattr(MultiplayerService, "resolve_winner", fake_resolve_winner)

    response = TestClient(app).post(
        "/api/multiplayer/handle_multiplayer_bonus_result",
        json={"session_id": str(GAME_ID)},
        headers=PLAYER_HEADERS,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["is_tie"] is True
    assert payload["winner_names"] == ["alice", "Zephyr"]
    assert payload["players"][1]["is_bot"] is True
