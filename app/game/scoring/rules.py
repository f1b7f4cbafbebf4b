from __future__ import annotations

from dataclasses import dataclass

BASE_POINTS = 10
MAX_TIME_BONUS = 20
TIME_BONUS_FULL_WINDOW_MS = 1000
TIME_BONUS_CUTOFF_MS = 30000
TIME_BONUS_DECAY_STEP_MS = 1500

STREAK_MILESTONE = 5
STREAK_BONUS_BASE = 10

BONUS_GAME_POINTS_REWARD = 50
MULTIPLAYER_POINTS_PER_CORRECT = 1

MAX_LIVES_BY_DIFFICULTY = {
    "easy": 5,
    "medium": 3,
    "hard": 1,
}

TIME_BONUS_MODES = {"endless", "multiplayer"}


@dataclass(slots=True, frozen=True)
class AnswerScore:
    points: int
    time_bonus: int
    streak_bonus: int
    streak: int


@dataclass(slots=True, frozen=True)
class BonusOutcome:
    score: int
    lives: int
    life_awarded: bool
    points_reward: bool


def time_bonus(response_time_ms: int) -> int:
    """Decay curve: full bonus under one second, minus one point per 1.5s after."""
    if response_time_ms <= 0:
        return 0
    if response_time_ms < TIME_BONUS_FULL_WINDOW_MS:
        return MAX_TIME_BONUS
    if response_time_ms < TIME_BONUS_CUTOFF_MS:
        decay = (response_time_ms - TIME_BONUS_FULL_WINDOW_MS) // TIME_BONUS_DECAY_STEP_MS
        return max(0, MAX_TIME_BONUS - decay)
    return 0


def is_time_bonus_eligible(*, mode: str, difficulty: str, time_penalty: bool) -> bool:
    if time_penalty:
        return False
    return difficulty == "hard" or mode in TIME_BONUS_MODES


def streak_milestone_bonus(streak: int) -> int:
    if streak <= 0 or streak % STREAK_MILESTONE != 0:
        return 0
    return STREAK_BONUS_BASE * 2 ** (streak // STREAK_MILESTONE - 1)


def streak_bonus(*, streak: int, mode: str) -> int:
    """Only single-player adds the milestone bonus to the score."""
    if mode != "single":
        return 0
    return streak_milestone_bonus(streak)


def score_correct_answer(
    *,
    mode: str,
    difficulty: str,
    current_streak: int,
    response_time_ms: int,
    time_penalty: bool,
) -> AnswerScore:
    new_streak = current_streak + 1
    earned_time_bonus = 0
    if is_time_bonus_eligible(mode=mode, difficulty=difficulty, time_penalty=time_penalty):
        earned_time_bonus = time_bonus(response_time_ms)
    earned_streak_bonus = streak_bonus(streak=new_streak, mode=mode)
    return AnswerScore(
        points=BASE_POINTS + earned_time_bonus + earned_streak_bonus,
        time_bonus=earned_time_bonus,
        streak_bonus=earned_streak_bonus,
        streak=new_streak,
    )


def max_lives_for_difficulty(difficulty: str) -> int:
    return MAX_LIVES_BY_DIFFICULTY.get(difficulty, 1)


def bonus_outcome(*, score: int, lives: int, max_lives: int, correct: bool) -> BonusOutcome:
    if not correct:
        return BonusOutcome(
            score=max(0, score // 2),
            lives=lives,
            life_awarded=False,
            points_reward=False,
        )
    if lives < max_lives:
        return BonusOutcome(score=score, lives=lives + 1, life_awarded=True, points_reward=False)
    return BonusOutcome(
        score=score + BONUS_GAME_POINTS_REWARD,
        lives=lives,
        life_awarded=False,
        points_reward=True,
    )
