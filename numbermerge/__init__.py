# -*- coding: utf-8 -*-
"""
Python implementation of the number merge (2048) puzzle.

This package provides the grid transition engine with stable tile identities, and the `NumberMerge`
session that plays it.
"""

from .config import GameConfig, default_config
from .core import Direction, apply_move, has_reached_win_value, is_game_over, spawn_tile
from .exceptions import InvalidDirection
from .session import NumberMerge, SessionStore

__all__ = [
    "GameConfig",
    "default_config",
    "Direction",
    "apply_move",
    "has_reached_win_value",
    "is_game_over",
    "spawn_tile",
    "InvalidDirection",
    "NumberMerge",
    "SessionStore",
]
