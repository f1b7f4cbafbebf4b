from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from datetime import datetime

from app.game.leaderboard.errors import ScoreHashInvalidError

ANONYMOUS_SUBJECT = "guest"


@dataclass(slots=True, frozen=True)
class IssuedScoreHash:
    token: str
    timestamp: int


@dataclass(slots=True, frozen=True)
class VerifiedScore:
    score: int
    user_id: int | None
    timestamp: int
    nonce: str


def _subject(user_id: int | None) -> str:
    return str(user_id) if user_id is not None else ANONYMOUS_SUBJECT


def _sign(*, score: int, user_id: int | None, timestamp: int, nonce: str, secret: str) -> str:
    message = f"{score}|{_subject(user_id)}|{timestamp}|{nonce}"
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256)
    return digest.hexdigest()


def mint_score_hash(
    *,
    score: int,
    user_id: int | None,
    now_utc: datetime,
    secret: str,
    nonce: str | None = None,
) -> IssuedScoreHash:
    timestamp = int(now_utc.timestamp())
    resolved_nonce = nonce or secrets.token_hex(8)
    payload = {
        "score": int(score),
        "user_id": user_id,
        "timestamp": timestamp,
        "nonce": resolved_nonce,
        "signature": _sign(
            score=int(score),
            user_id=user_id,
            timestamp=timestamp,
            nonce=resolved_nonce,
            secret=secret,
        ),
    }
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    token = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return IssuedScoreHash(token=token, timestamp=timestamp)


def _decode(token: str) -> dict[str, object]:
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        payload = json.loads(raw)
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise ScoreHashInvalidError("malformed") from exc
    if not isinstance(payload, dict):
        raise ScoreHashInvalidError("malformed")
    return payload


def verify_score_hash(
    token: str,
    *,
    user_id: int | None,
    score_timestamp: int | None,
    now_utc: datetime,
    secret: str,
    max_age_seconds: int,
) -> VerifiedScore:
    """Return the signed score or raise ScoreHashInvalidError with a short reason."""
    if not token or score_timestamp is None:
        raise ScoreHashInvalidError("missing")

    payload = _decode(token)
    score = payload.get("score")
    timestamp = payload.get("timestamp")
    nonce = payload.get("nonce")
    signature = payload.get("signature")
    hashed_user_id = payload.get("user_id")
    if (
        not isinstance(score, int)
        or not isinstance(timestamp, int)
        or not isinstance(nonce, str)
        or not isinstance(signature, str)
        or (hashed_user_id is not None and not isinstance(hashed_user_id, int))
    ):
        raise ScoreHashInvalidError("malformed")

    expected = _sign(
        score=score,
        user_id=hashed_user_id,
        timestamp=timestamp,
        nonce=nonce,
        secret=secret,
    )
    if not hmac.compare_digest(expected, signature):
        raise ScoreHashInvalidError("signature_mismatch")
    if hashed_user_id != user_id:
        raise ScoreHashInvalidError("user_mismatch")
    if timestamp != int(score_timestamp):
        raise ScoreHashInvalidError("timestamp_mismatch")

    age_seconds = int(now_utc.timestamp()) - timestamp
    if age_seconds < 0 or age_seconds > max_age_seconds:
        raise ScoreHashInvalidError("expired")
    return VerifiedScore(score=score, user_id=hashed_user_id, timestamp=timestamp, nonce=nonce)
