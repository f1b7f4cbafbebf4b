from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.routes import leaderboard as leaderboard_routes
from app.game.leaderboard.errors import ScoreHashInvalidError
from app.game.leaderboard.types import SubmitScoreResult
from app.main import app
from tests.api.api_fixtures import PLAYER_HEADERS, FakeSessionLocal


@pytest.fixture(autouse=True)
def session_local(monkeypatch: pytest.MonkeyPatch) -> FakeSessionLocal:
    fake = FakeSessionLocal()
    monkeypatch.setattr(leaderboard_routes, "SessionLocal", fake)
    return fake


def _body(**overrides) -> dict:
    body = {
        "score": 40,
        "game_mode": "single",
        "difficulty": "easy",
        "score_hash": "signed-token",
        "score_timestamp": 1773489600,
    }
    body.update(overrides)
    return body


def test_submit_score_reports_adjusted_score(monkeypatch) -> None:
    async def fake_submit(session, **kwargs):  # noqa: ANN001, ANN003
        assert kwargs["identity"].user_id == 17
        assert kwargs["score"] == 999
        return SubmitScoreResult(
            entry_id=8,
            score=40,
            game_mode="single",
            difficulty="easy",
            score_adjusted=True,
        )

    monkeypatch.setattr(leaderboard_routes, "submit_leaderboard_score", fake_submit)

    response = TestClient(app).post(
        "/api/leaderboard/submit_score",
        json=_body(score=999),
        headers=PLAYER_HEADERS,
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "entry_id": 8,
        "score": 40,
        "game_mode": "single",
        "difficulty": "easy",
        "score_adjusted": True,
    }


def test_invalid_hash_is_forbidden(monkeypatch) -> None:
    async def fake_submit(session, **kwargs):  # noqa: ANN001, ANN003
        raise ScoreHashInvalidError("signature_mismatch")

    monkeypatch.setattr(leaderboard_routes, "submit_leaderboard_score", fake_submit)

    response = TestClient(app).post("/api/leaderboard/submit_score", json=_body(), headers=PLAYER_HEADERS)

    assert response.status_code == 403
    assert response.json()["code"] == "E_SCORE_HASH_INVALID"


def test_anonymous_submission_needs_login() -> None:
    response = TestClient(app).post(
        "/api/leaderboard/submit_score",
        json=_body(),
        headers={"X-User-Id": "not-a-number"},
    )

    assert response.status_code == 401
    assert response.json()["code"] == "E_LOGIN_REQUIRED"
