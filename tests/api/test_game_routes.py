from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.routes import game as game_routes
from app.game.errors import LoginRequiredError, NoImagesAvailableError
from app.game.sessions.errors import (
    GameAlreadyCompletedError,
    InvalidSelectionError,
    NoPendingTurnError,
    SessionNotFoundError,
)
from app.game.sessions.service import GameSessionService
from app.game.sessions.types import (
    AnswerResult,
    FourImageChallengeView,
    SessionContext,
    StartGameResult,
    TurnView,
)
from app.main import app
from tests.api.api_fixtures import (
    PLAYER_HEADERS,
    SESSION_ID,
    FakeSessionLocal,
    image_view,
    snapshot,
)


@pytest.fixture
def session_local(monkeypatch: pytest.MonkeyPatch) -> FakeSessionLocal:
    fake = FakeSessionLocal()
    monkeypatch.setattr(game_routes, "SessionLocal", fake)
    return fake


def _session_body(**extra) -> dict:
    return {"session_id": str(SESSION_ID), "game_mode": "single", **extra}


def test_start_game_passes_header_identity(monkeypatch, session_local) -> None:
    captured: dict = {}

    async def fake_start_game(session, *, identity, mode, difficulty, now_utc):  # noqa: ANN001
        captured.update(identity=identity, mode=mode, difficulty=difficulty)
        return StartGameResult(
            context=SessionContext(session_id=SESSION_ID, mode=mode),
            snapshot=snapshot(difficulty=difficulty),
        )

    monkeypatch.setattr(GameSessionService, "start_game", fake_start_game)

    response = TestClient(app).post(
        "/api/game/start_game",
        json={"mode": "single", "difficulty": "easy"},
        headers=PLAYER_HEADERS,
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "session_id": str(SESSION_ID),
        "mode": "single",
        "difficulty": "easy",
        "score": 0,
        "lives": 5,
        "turn": 1,
        "totalTurns": 5,
    }
    assert captured["identity"].user_id == 17
    assert captured["identity"].username == "alice"
    assert session_local.begin_calls == 1


def test_turn_uses_camel_case_image_fields(monkeypatch, session_local) -> None:
    async def fake_get_current_turn(session, *, context, identity):  # noqa: ANN001
        assert context == SessionContext(session_id=SESSION_ID, mode="single")
        return TurnView(
            snapshot=snapshot(has_pending_turn=True),
            left_image=image_view(101),
            right_image=image_view(3),
            left_is_real=False,
            is_final_turn=False,
            real_image_description="Real photo 3",
        )

    monkeypatch.setattr(GameSessionService, "get_current_turn", fake_get_current_turn)

    response = TestClient(app).post("/api/game/get_current_turn", json=_session_body())

    assert response.status_code == 200
    payload = response.json()
    assert payload["leftImage"]["id"] == 101
    assert payload["rightImage"]["url"] == "/static/images/game-image/token-3"
    assert payload["leftIsReal"] is False
    assert payload["totalTurns"] == 5
    assert "left_image" not in payload


def test_submit_answer_returns_score_and_hash(monkeypatch, session_local) -> None:
    async def fake_submit_answer(session, *, context, identity, selection, response_time_ms, now_utc):  # noqa: ANN001
        assert selection == "real"
        assert response_time_ms == 1500
        return AnswerResult(
            snapshot=snapshot(score=12, current_streak=1, difficulty="hard"),
            correct=True,
            streak_bonus=0,
            time_bonus=2,
            score_hash="signed-token",
            score_verification=1773489600,
        )

    monkeypatch.setattr(GameSessionService, "submit_answer", fake_submit_answer)

    response = TestClient(app).post(
        "/api/game/submit_answer",
        json=_session_body(selected="real", response_time_ms=1500),
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["correct"] is True
    assert payload["score"] == 12
    assert payload["time_bonus"] == 2
    assert payload["score_hash"] == "signed-token"
    assert payload["duplicate"] is False


def test_completed_session_answers_with_terminal_payload(monkeypatch, session_local) -> None:
    async def fake_submit_answer(session, **kwargs):  # noqa: ANN001, ANN003
        raise GameAlreadyCompletedError(snapshot(score=30, lives=0, turn=4, completed=True))

    monkeypatch.setattr(GameSessionService, "submit_answer", fake_submit_answer)

    response = TestClient(app).post("/api/game/submit_answer", json=_session_body(selected="ai"))

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "completed": True,
        "score": 30,
        "lives": 0,
        "turn": 4,
        "totalTurns": 5,
        "message": "Game already completed",
    }


def test_advancing_past_last_turn_reports_game_over(monkeypatch, session_local) -> None:
    async def fake_advance_turn(session, *, context, identity, now_utc):  # noqa: ANN001
        return snapshot(score=50, turn=5, completed=True)

    monkeypatch.setattr(GameSessionService, "advance_turn", fake_advance_turn)

    response = TestClient(app).post("/api/game/get_next_turn", json=_session_body())

    assert response.status_code == 200
    assert response.json()["message"] == "Game over"
    assert response.json()["completed"] is True


def test_exhausted_catalog_is_not_an_http_error(monkeypatch, session_local) -> None:
    async def fake_advance_turn(session, **kwargs):  # noqa: ANN001, ANN003
        raise NoImagesAvailableError

    monkeypatch.setattr(GameSessionService, "advance_turn", fake_advance_turn)

    response = TestClient(app).post("/api/game/get_next_turn", json=_session_body())

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is False
    assert payload["no_more_images"] is True
    assert payload["code"] == NoImagesAvailableError.code


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (SessionNotFoundError(), 404),
        (NoPendingTurnError(), 409),
        (InvalidSelectionError(), 422),
        (LoginRequiredError(), 401),
    ],
)
def test_game_errors_map_to_status_envelopes(monkeypatch, session_local, error, status_code) -> None:
    async def fake_submit_answer(session, **kwargs):  # noqa: ANN001, ANN003
        raise error

    monkeypatch.setattr(GameSessionService, "submit_answer", fake_submit_answer)

    response = TestClient(app).post("/api/game/submit_answer", json=_session_body(selected="real"))

    assert response.status_code == status_code
    assert response.json() == {"success": False, "code": error.code, "message": error.message}


def test_malformed_request_uses_validation_envelope(session_local) -> None:
    response = TestClient(app).post("/api/game/submit_answer", json={"session_id": "not-a-uuid"})

    assert response.status_code == 422
    payload = response.json()
    assert payload["success"] is False
    assert payload["code"] == "E_VALIDATION"
    assert payload["errors"]
    assert session_local.begin_calls == 0


def test_unexpected_failure_returns_internal_envelope(monkeypatch, session_local) -> None:
    async def fake_get_state(session, **kwargs):  # noqa: ANN001, ANN003
        raise RuntimeError("boom")

    monkeypatch.setattr(GameSessionService, "get_session_state", fake_get_state)

    response = TestClient(app, raise_server_exceptions=False).post(
        "/api/game/state",
        json=_session_body(),
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "code": "E_INTERNAL", "message": "Internal server error"}


def test_state_is_read_without_a_transaction(monkeypatch, session_local) -> None:
    async def fake_get_state(session, *, context, identity):  # noqa: ANN001
        return snapshot(has_pending_turn=True, current_streak=2)

    monkeypatch.setattr(GameSessionService, "get_session_state", fake_get_state)

    response = TestClient(app).post("/api/game/state", json=_session_body())

    assert response.status_code == 200
    assert response.json()["has_pending_turn"] is True
    assert session_local.read_calls == 1
    assert session_local.begin_calls == 0


def test_bonus_images_expose_real_index(monkeypatch, session_local) -> None:
    async def fake_get_bonus_images(session, *, context, identity):  # noqa: ANN001
        return FourImageChallengeView(
            images=[image_view(101), image_view(7), image_view(102), image_view(103)],
            real_image_index=1,
        )

    monkeypatch.setattr(GameSessionService, "get_bonus_images", fake_get_bonus_images)

    response = TestClient(app).post("/api/game/get_bonus_images", json=_session_body())

    assert response.status_code == 200
    payload = response.json()
    assert payload["game_type"] == "four_image"
    assert [image["id"] for image in payload["images"]] == [101, 7, 102, 103]
    assert payload["real_image_index"] == 1
    assert payload["is_real"] is None
