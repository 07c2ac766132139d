# -*- coding: utf-8 -*-
"""
Game configuration.
"""
from dataclasses import dataclass, field
from pathlib import Path

from numbermerge.core.gameboard import BOARD_SIZE
from numbermerge.core.gamemove import WIN_VALUE
from numbermerge.core.spawner import SpawnPolicy, constant_policy


@dataclass
class GameConfig:
    """Rules and storage of a game session."""

    size: int = BOARD_SIZE  # Side length of the square board
    win_value: int = WIN_VALUE  # Tile value that wins the game
    start_tiles: int = 2  # Tiles spawned on a new game
    spawn_policy: SpawnPolicy = field(default_factory=constant_policy)
    storage_path: Path | None = None  # JSON file holding the session, None to keep it in memory

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f'size must be at least 2, got {self.size}')
        if self.start_tiles > self.size * self.size:
            raise ValueError(f'Cannot start with {self.start_tiles} tiles on a {self.size}x{self.size} board')
        if self.storage_path is not None:
            self.storage_path = Path(self.storage_path)


def default_config() -> GameConfig:
    """Return the reference configuration: 4x4 board, 2048 to win, 90% of spawned tiles are 2s."""
    return GameConfig()
