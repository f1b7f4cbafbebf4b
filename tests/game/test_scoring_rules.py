from __future__ import annotations

import pytest

from app.game.scoring.rules import (
    BONUS_GAME_POINTS_REWARD,
    bonus_outcome,
    is_time_bonus_eligible,
    max_lives_for_difficulty,
    score_correct_answer,
    streak_bonus,
    streak_milestone_bonus,
    time_bonus,
)


@pytest.mark.parametrize(
    ("response_time_ms", "expected"),
    [
        (500, 20),
        (999, 20),
        (1000, 20),
        (2500, 19),
        (5500, 17),
        (29999, 1),
        (30000, 0),
        (40000, 0),
        (0, 0),
        (-5, 0),
    ],
)
def test_time_bonus_curve(response_time_ms: int, expected: int) -> None:
    assert time_bonus(response_time_ms) == expected


def test_streak_bonus_doubles_every_five_in_single_mode() -> None:
    bonuses = [streak_bonus(streak=streak, mode="single") for streak in (5, 10, 15, 20)]
    assert bonuses == [10, 20, 40, 80]
    assert streak_bonus(streak=4, mode="single") == 0
    assert streak_bonus(streak=0, mode="single") == 0


def test_streak_bonus_is_never_scored_outside_single_mode() -> None:
    assert streak_bonus(streak=5, mode="endless") == 0
    assert streak_bonus(streak=10, mode="multiplayer") == 0
    assert streak_milestone_bonus(10) == 20


def test_time_bonus_eligibility_rules() -> None:
    assert is_time_bonus_eligible(mode="single", difficulty="hard", time_penalty=False) is True
    assert is_time_bonus_eligible(mode="endless", difficulty="endless", time_penalty=False) is True
    assert is_time_bonus_eligible(mode="single", difficulty="medium", time_penalty=False) is False
    assert is_time_bonus_eligible(mode="single", difficulty="hard", time_penalty=True) is False


def test_score_correct_answer_combines_base_time_and_streak() -> None:
    result = score_correct_answer(
        mode="single",
        difficulty="hard",
        current_streak=4,
        response_time_ms=500,
        time_penalty=False,
    )
    assert result.streak == 5
    assert result.time_bonus == 20
    assert result.streak_bonus == 10
    assert result.points == 40


def test_score_correct_answer_without_bonuses_is_base_points() -> None:
    result = score_correct_answer(
        mode="single",
        difficulty="easy",
        current_streak=0,
        response_time_ms=500,
        time_penalty=False,
    )
    assert result.points == 10
    assert result.time_bonus == 0


def test_max_lives_by_difficulty() -> None:
    assert [max_lives_for_difficulty(level) for level in ("easy", "medium", "hard")] == [5, 3, 1]


def test_bonus_outcome_awards_life_below_cap() -> None:
    outcome = bonus_outcome(score=40, lives=2, max_lives=3, correct=True)
    assert (outcome.score, outcome.lives, outcome.life_awarded, outcome.points_reward) == (
        40,
        3,
        True,
        False,
    )


def test_bonus_outcome_awards_points_at_cap() -> None:
    outcome = bonus_outcome(score=40, lives=3, max_lives=3, correct=True)
    assert outcome.score == 40 + BONUS_GAME_POINTS_REWARD
    assert outcome.lives == 3
    assert outcome.points_reward is True


def test_bonus_outcome_halves_score_on_loss() -> None:
    assert bonus_outcome(score=45, lives=1, max_lives=5, correct=False).score == 22
    assert bonus_outcome(score=0, lives=1, max_lives=5, correct=False).score == 0
