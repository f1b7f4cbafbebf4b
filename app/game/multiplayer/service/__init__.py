from __future__ import annotations

from .answers import submit_answer
from .chests import (
    get_chest_game_state,
    pick_winners,
    resolve_winner,
    select_chest,
    shuffled_chest_values,
    start_chest_game,
)
from .constants import (
    CHEST_VALUES,
    MAX_PLAYERS,
    MIN_PLAYERS_TO_START,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_WAITING,
)
from .lobby import create_game, fill_with_bots, join_game, normalize_total_turns, quick_match, start_game
from .turns import advance_turn, get_turn


class MultiplayerService:
    normalize_total_turns = staticmethod(normalize_total_turns)
    shuffled_chest_values = staticmethod(shuffled_chest_values)
    pick_winners = staticmethod(pick_winners)
    create_game = staticmethod(create_game)
    join_game = staticmethod(join_game)
    quick_match = staticmethod(quick_match)
    start_game = staticmethod(start_game)
    fill_with_bots = staticmethod(fill_with_bots)
    get_turn = staticmethod(get_turn)
    advance_turn = staticmethod(advance_turn)
    submit_answer = staticmethod(submit_answer)
    start_chest_game = staticmethod(start_chest_game)
    get_chest_game_state = staticmethod(get_chest_game_state)
    select_chest = staticmethod(select_chest)
    resolve_winner = staticmethod(resolve_winner)


__all__ = [
    "CHEST_VALUES",
    "MAX_PLAYERS",
    "MIN_PLAYERS_TO_START",
    "STATUS_COMPLETED",
    "STATUS_IN_PROGRESS",
    "STATUS_WAITING",
    "MultiplayerService",
]
