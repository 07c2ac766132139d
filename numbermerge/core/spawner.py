"""
Random tile spawning after a successful slide.
"""

import logging
from typing import Callable, NamedTuple

from numpy import argwhere, asarray, int64, ndarray
from numpy.random import Generator, default_rng

_logger = logging.getLogger(__name__)

# ##>: Tile spawn probabilities (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

# ##>: Policy giving the probability of spawning a 2, from the number of moves played.
SpawnPolicy = Callable[[int], float]

# ##>: Module-level generator, used when the caller does not inject one.
_GENERATOR = default_rng()


class SpawnResult(NamedTuple):
    """A tile chosen by the spawner; ``next_tile_id`` is the counter after minting it."""

    row: int
    col: int
    value: int
    tile_id: int
    next_tile_id: int


def constant_policy(two_probability: float = TILE_SPAWN_PROBS[2]) -> SpawnPolicy:
    """Spawn a 2 with the same probability for the whole game."""
    if not 0.0 <= two_probability <= 1.0:
        raise ValueError(f'two_probability must be in [0, 1], got {two_probability}')
    return lambda move_count: two_probability


def easy_start_policy(
    opening_moves: int = 10,
    opening_probability: float = 1.0,
    two_probability: float = TILE_SPAWN_PROBS[2],
) -> SpawnPolicy:
    """
    Spawn more 2s during the first moves of a game, then fall back to the usual odds.

    Parameters
    ----------
    opening_moves : int, optional
        Number of moves using ``opening_probability`` (default is 10).
    opening_probability : float, optional
        Probability of a 2 during the opening (default is 1.0).
    two_probability : float, optional
        Probability of a 2 afterwards (default is 0.9).

    Returns
    -------
    SpawnPolicy
        The probability schedule.
    """
    for probability in (opening_probability, two_probability):
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f'Probabilities must be in [0, 1], got {probability}')
    return lambda move_count: opening_probability if move_count < opening_moves else two_probability


def spawn_tile(
    grid: ndarray,
    tile_ids: ndarray,
    next_tile_id: int,
    rng: Generator | None = None,
    two_probability: float = TILE_SPAWN_PROBS[2],
) -> SpawnResult | None:
    """
    Choose where and what to spawn on the board.

    Parameters
    ----------
    grid : ndarray
        The current tile values. Not modified.
    tile_ids : ndarray
        The current tile identities. Not modified.
    next_tile_id : int
        Identity given to the new tile.
    rng : Generator, optional
        Random source; a module-level generator is used when omitted.
    two_probability : float, optional
        Probability that the new tile is a 2 rather than a 4 (default is 0.9).

    Returns
    -------
    SpawnResult or None
        The chosen cell, value and identity, or None when the board is full.

    Notes
    -----
    - The cell is chosen uniformly among empty cells.
    - ``tile_ids`` is accepted for symmetry with the engine; emptiness is read from ``grid``.
    """
    rng = rng if rng is not None else _GENERATOR

    # ##: Only if there are still available places.
    available_cells = argwhere(asarray(grid) == 0)
    if len(available_cells) == 0:
        _logger.debug('No empty cell left, nothing spawned')
        return None

    row, col = available_cells[rng.integers(len(available_cells))]
    value = 2 if rng.random() < two_probability else 4
    return SpawnResult(int(row), int(col), value, next_tile_id, next_tile_id + 1)


def place_tile(grid: ndarray, tile_ids: ndarray, spawn: SpawnResult) -> tuple[ndarray, ndarray]:
    """
    Return copies of the board matrices with the spawned tile set.

    Raises
    ------
    ValueError
        If the target cell is already occupied.
    """
    grid = asarray(grid, dtype=int64).copy()
    tile_ids = asarray(tile_ids, dtype=int64).copy()
    if grid[spawn.row, spawn.col] != 0:
        raise ValueError(f'Cell ({spawn.row}, {spawn.col}) is already occupied')

    grid[spawn.row, spawn.col] = spawn.value
    tile_ids[spawn.row, spawn.col] = spawn.tile_id
    return grid, tile_ids
