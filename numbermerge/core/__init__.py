# -*- coding: utf-8 -*-
"""
Core rules of the number merge puzzle.

It includes the slide/merge engine with tile identity tracking, legal move queries,
terminal-state detection and the random tile spawner.
"""

from .gameboard import (
    ACTIONS,
    BOARD_SIZE,
    Direction,
    Merge,
    Move,
    MoveResult,
    apply_move,
    assign_tile_ids,
    empty_board,
    max_tile,
    merge_line,
)
from .gamemove import (
    WIN_VALUE,
    can_move,
    has_reached_win_value,
    illegal_actions,
    is_game_over,
    legal_actions,
)
from .spawner import (
    TILE_SPAWN_PROBS,
    SpawnPolicy,
    SpawnResult,
    constant_policy,
    easy_start_policy,
    place_tile,
    spawn_tile,
)

__all__ = [
    "ACTIONS",
    "BOARD_SIZE",
    "Direction",
    "Merge",
    "Move",
    "MoveResult",
    "apply_move",
    "assign_tile_ids",
    "empty_board",
    "max_tile",
    "merge_line",
    "WIN_VALUE",
    "can_move",
    "has_reached_win_value",
    "illegal_actions",
    "is_game_over",
    "legal_actions",
    "TILE_SPAWN_PROBS",
    "SpawnPolicy",
    "SpawnResult",
    "constant_policy",
    "easy_start_policy",
    "place_tile",
    "spawn_tile",
]
