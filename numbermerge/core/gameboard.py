"""
Grid model and slide/merge engine for the number merge puzzle.

The board is held as two parallel matrices: one with tile values (0 for an empty cell) and one with
stable tile identities. Identities survive a slide; a merge consumes both sources and mints a new one.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import NamedTuple, Sequence

from numpy import array_equal, asarray, int64, integer, ndarray, zeros, zeros_like

from numbermerge.exceptions import InvalidDirection

# ##>: Default side length of the square board.
BOARD_SIZE = 4

Cell = tuple[int, int]


class Direction(IntEnum):
    """Slide directions, numbered as quarter turns of the board."""

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @classmethod
    def parse(cls, value) -> 'Direction':
        """
        Interpret a direction given as a member, an integer or a name.

        Parameters
        ----------
        value : Direction, int or str
            The requested direction (names are case-insensitive).

        Returns
        -------
        Direction
            The matching direction.

        Raises
        ------
        InvalidDirection
            If the value does not name one of the four directions.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidDirection(value) from None
        if isinstance(value, (int, integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                raise InvalidDirection(value) from None
        raise InvalidDirection(value)


# ##: All Actions.
ACTIONS = {direction.name.lower(): direction for direction in Direction}


class Move(NamedTuple):
    """Translation of a tile from one cell to another, without value change."""

    tile_id: int
    from_row: int
    from_col: int
    to_row: int
    to_col: int


class Merge(NamedTuple):
    """Fusion of two equal tiles into a new tile at the target cell."""

    source_tile_ids: tuple[int, int]
    target_row: int
    target_col: int
    result_value: int
    result_tile_id: int

    @property
    def source_value(self) -> int:
        """Value held by each of the two source tiles."""
        return self.result_value // 2


@dataclass(frozen=True, eq=False)
class MoveResult:
    """
    Outcome of sliding a board in one direction.

    Attributes
    ----------
    grid : ndarray
        Tile values after the slide.
    tile_ids : ndarray
        Tile identities after the slide.
    moves : tuple[Move, ...]
        Translations to animate, including both sources of every merge.
    merges : tuple[Merge, ...]
        Fusions performed by the slide.
    score_gain : int
        Sum of the values created by merges.
    changed : bool
        False when the slide leaves every cell untouched; such a move must be rejected by the caller.
    next_tile_id : int
        Identity counter after minting the merge results.
    """

    grid: ndarray
    tile_ids: ndarray
    moves: tuple[Move, ...]
    merges: tuple[Merge, ...]
    score_gain: int
    changed: bool
    next_tile_id: int


def empty_board(size: int = BOARD_SIZE) -> ndarray:
    """Return a board without any tile."""
    return zeros((size, size), dtype=int64)


def assign_tile_ids(grid: ndarray, next_tile_id: int = 1) -> tuple[ndarray, int]:
    """
    Give a fresh identity to every tile of a grid, in row-major order.

    Parameters
    ----------
    grid : ndarray
        Tile values.
    next_tile_id : int, optional
        First identity to mint (default is 1).

    Returns
    -------
    tile_ids : ndarray
        Identity matrix parallel to the grid.
    next_tile_id : int
        The advanced identity counter.
    """
    grid = asarray(grid, dtype=int64)
    tile_ids = zeros(grid.shape, dtype=int64)
    for row, col in zip(*grid.nonzero()):
        tile_ids[row, col] = next_tile_id
        next_tile_id += 1
    return tile_ids, next_tile_id


def max_tile(grid: ndarray) -> int:
    """Largest value on the board, 0 when empty."""
    grid = asarray(grid)
    return int(grid.max()) if grid.size else 0


@lru_cache(maxsize=None)
def line_coordinates(direction: Direction, size: int = BOARD_SIZE) -> tuple[tuple[Cell, ...], ...]:
    """
    Cells of every line of the board, each listed from the edge the tiles slide toward.

    Parameters
    ----------
    direction : Direction
        The slide direction.
    size : int, optional
        Side length of the board.

    Returns
    -------
    tuple
        One tuple of (row, col) per line; rows for left/right and columns for up/down, in ascending index.
    """
    forward = range(size)
    backward = range(size - 1, -1, -1)
    if direction == Direction.LEFT:
        return tuple(tuple((row, col) for col in forward) for row in forward)
    if direction == Direction.RIGHT:
        return tuple(tuple((row, col) for col in backward) for row in forward)
    if direction == Direction.UP:
        return tuple(tuple((row, col) for row in forward) for col in forward)
    return tuple(tuple((row, col) for row in backward) for col in forward)


def merge_line(values: Sequence[int]) -> tuple[int, list[tuple[int, ...]]]:
    """
    Group the tiles of one line the way a slide packs them.

    Parameters
    ----------
    values : Sequence[int]
        Non-zero tile values, in slide order (leading edge first).

    Returns
    -------
    score : int
        Sum of the merged values.
    groups : list[tuple[int, ...]]
        For each destination cell from the leading edge, the indices of the tiles landing there:
        one index for a plain slide, two for a merge.

    Notes
    -----
    - The first equal pair from the leading edge wins; a tile merges at most once per slide.
    - A run of three equal tiles merges the first two and leaves the third alone.
    """
    score = 0
    groups = []

    i = 0
    while i < len(values):
        if i + 1 < len(values) and values[i] == values[i + 1]:
            groups.append((i, i + 1))
            score += values[i] * 2
            i += 2
        else:
            groups.append((i,))
            i += 1

    return score, groups


def apply_move(grid, tile_ids, direction, next_tile_id: int | None = None) -> MoveResult:
    """
    Slide every tile of the board in one direction and merge equal neighbours.

    Parameters
    ----------
    grid : array_like
        Square matrix of tile values. Not modified.
    tile_ids : array_like
        Identity matrix parallel to ``grid``. Not modified.
    direction : Direction, int or str
        The slide direction.
    next_tile_id : int, optional
        Identity minted for the first merge result. Defaults to one past the largest identity in use.

    Returns
    -------
    MoveResult
        The new board, the translations and fusions to animate, the score gain and whether anything changed.

    Raises
    ------
    InvalidDirection
        If ``direction`` is not one of the four slide directions.
    ValueError
        If the two matrices are not square or do not share a shape.
    """
    direction = Direction.parse(direction)
    grid = asarray(grid, dtype=int64)
    tile_ids = asarray(tile_ids, dtype=int64)
    if grid.ndim != 2 or grid.shape[0] != grid.shape[1] or grid.shape != tile_ids.shape:
        raise ValueError(f'Expected two square matrices of the same shape, got {grid.shape} and {tile_ids.shape}')

    if next_tile_id is None:
        next_tile_id = int(tile_ids.max()) + 1 if tile_ids.size else 1

    new_grid = zeros_like(grid)
    new_ids = zeros_like(tile_ids)
    moves = []
    merges = []
    score_gain = 0

    for line in line_coordinates(direction, grid.shape[0]):
        occupied = [cell for cell in line if grid[cell] != 0]
        score, groups = merge_line([int(grid[cell]) for cell in occupied])
        score_gain += score

        for target, group in zip(line, groups):
            sources = [occupied[index] for index in group]

            if len(sources) == 2:
                value = int(grid[sources[0]]) * 2
                source_ids = (int(tile_ids[sources[0]]), int(tile_ids[sources[1]]))
                for tile_id, source in zip(source_ids, sources):
                    moves.append(Move(tile_id, *source, *target))
                merges.append(Merge(source_ids, *target, value, next_tile_id))

                new_grid[target] = value
                new_ids[target] = next_tile_id
                next_tile_id += 1
            else:
                source = sources[0]
                new_grid[target] = grid[source]
                new_ids[target] = tile_ids[source]
                if source != target:
                    moves.append(Move(int(tile_ids[source]), *source, *target))

    return MoveResult(
        grid=new_grid,
        tile_ids=new_ids,
        moves=tuple(moves),
        merges=tuple(merges),
        score_gain=score_gain,
        changed=not array_equal(new_grid, grid),
        next_tile_id=next_tile_id,
    )
