from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SubmitScoreResult:
    entry_id: int
    score: int
    game_mode: str
    difficulty: str | None
    score_adjusted: bool
