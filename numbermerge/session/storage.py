"""
Persistence of a session as a flat JSON record.

Loading never fails on a corrupt field: each field falls back to its default on its own, so that a
single bad value does not prevent resuming the rest of the session.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from numpy import array, iinfo, int64, ndarray

from numbermerge.core.gameboard import BOARD_SIZE, assign_tile_ids, empty_board, max_tile
from numbermerge.core.gamemove import is_game_over
from numbermerge.session.state import SessionState

_logger = logging.getLogger(__name__)

# ##>: Largest stored integer accepted, leaving int64 room to mint identities and merge tiles.
_INT_LIMIT = iinfo(int64).max // 2

# ##>: Persisted key for each integer field, with its default.
_INT_FIELDS = {
    'next_tile_id': ('nextTileId', 1),
    'score': ('score', 0),
    'best_score': ('bestScore', 0),
    'total_games': ('totalGames', 0),
    'max_tile_ever_reached': ('maxTileEverReached', 0),
    'move_count': ('moveCount', 0),
}

# ##>: Persisted key for each flag, with its default.
_BOOL_FIELDS = {
    'won': ('won', False),
    'keep_playing_after_win': ('keepPlayingAfterWin', False),
    'game_over': ('gameOver', False),
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and -_INT_LIMIT <= value <= _INT_LIMIT


def _is_tile_value(value: Any) -> bool:
    return _is_int(value) and (value == 0 or (value >= 2 and value & (value - 1) == 0))


def _is_matrix(value: Any, size: int) -> bool:
    return (
        isinstance(value, list)
        and len(value) == size
        and all(isinstance(row, list) and len(row) == size for row in value)
    )


def _read_grid(value: Any, size: int) -> ndarray:
    if value is None:
        return empty_board(size)
    if not _is_matrix(value, size) or not all(_is_tile_value(cell) for row in value for cell in row):
        _logger.warning('Stored grid is not a %dx%d matrix of tile values, starting from an empty board', size, size)
        return empty_board(size)
    return array(value, dtype=int64)


def _read_tile_ids(value: Any, grid: ndarray, next_tile_id: int) -> tuple[ndarray, int]:
    size = grid.shape[0]
    well_formed = _is_matrix(value, size) and all(_is_int(cell) and cell >= 0 for row in value for cell in row)
    if well_formed:
        tile_ids = array(value, dtype=int64)
        tile_ids[grid == 0] = 0
        on_tiles = tile_ids[grid != 0]
        if (on_tiles > 0).all() and len(set(on_tiles.tolist())) == len(on_tiles):
            return tile_ids, max(next_tile_id, int(tile_ids.max()) + 1)

    if value is not None or grid.any():
        _logger.warning('Stored tile identities are missing or inconsistent, assigning fresh ones')
    return assign_tile_ids(grid, next_tile_id)


def state_to_dict(state: SessionState) -> dict[str, Any]:
    """
    Flatten a session into a JSON-serializable record.

    The undo snapshot is not part of the record.
    """
    record = {'grid': state.grid.tolist(), 'tileIds': state.tile_ids.tolist()}
    for name, (key, _) in _INT_FIELDS.items():
        record[key] = int(getattr(state, name))
    for name, (key, _) in _BOOL_FIELDS.items():
        record[key] = bool(getattr(state, name))
    return record


def state_from_dict(record: Mapping[str, Any], size: int = BOARD_SIZE) -> SessionState:
    """
    Rebuild a session from a persisted record, defaulting every invalid field.

    Parameters
    ----------
    record : Mapping[str, Any]
        The persisted record.
    size : int, optional
        Expected side length of the board.

    Returns
    -------
    SessionState
        The restored session, without undo snapshot.

    Notes
    -----
    - A grid of the wrong shape or holding a value that is not 0 or a power of two >= 2 becomes empty.
    - Tile identities that are missing, malformed, zero under a tile or duplicated are reassigned in
      row-major order starting from the stored (or default) ``nextTileId``.
    - Integers beyond half the int64 range are invalid.
    - ``nextTileId`` is raised past every identity in use, the best score past the score and the max
      tile past the largest tile on the board.
    - A board with no move left is marked over, and counted as a played game, whatever the stored flag says.
    """
    values = {}
    for name, (key, default) in _INT_FIELDS.items():
        value = record.get(key, default)
        if not _is_int(value) or value < 0:
            _logger.warning('Stored %s=%r is invalid, using %r', key, value, default)
            value = default
        values[name] = value
    for name, (key, default) in _BOOL_FIELDS.items():
        value = record.get(key, default)
        if not isinstance(value, bool):
            _logger.warning('Stored %s=%r is invalid, using %r', key, value, default)
            value = default
        values[name] = value

    values['next_tile_id'] = max(values['next_tile_id'], 1)
    grid = _read_grid(record.get('grid'), size)
    tile_ids, values['next_tile_id'] = _read_tile_ids(record.get('tileIds'), grid, values['next_tile_id'])

    values['best_score'] = max(values['best_score'], values['score'])
    values['max_tile_ever_reached'] = max(values['max_tile_ever_reached'], max_tile(grid))

    if not values['game_over'] and is_game_over(grid):
        _logger.warning('Stored board has no move left, marking the game as over')
        values['game_over'] = True
        values['total_games'] += 1
    return SessionState(grid=grid, tile_ids=tile_ids, **values)


class SessionStore:
    """
    Store a session in a JSON file.

    Parameters
    ----------
    path : Path or str
        Location of the JSON file.
    size : int, optional
        Side length of the stored board.
    """

    def __init__(self, path: Path | str, size: int = BOARD_SIZE):
        self.path = Path(path)
        self.size = size

    def load(self) -> SessionState | None:
        """
        Read the stored session.

        Returns
        -------
        SessionState or None
            The session, or None when the file is missing or cannot be parsed at all.
        """
        if not self.path.exists():
            _logger.debug('No stored session at %s', self.path)
            return None

        try:
            record = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as error:
            _logger.warning('Could not read stored session at %s: %s', self.path, error)
            return None

        if not isinstance(record, dict):
            _logger.warning('Stored session at %s is not a record, ignoring it', self.path)
            return None
        return state_from_dict(record, size=self.size)

    def save(self, state: SessionState) -> None:
        """Write the session; failures are logged and the game goes on."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(state_to_dict(state)), encoding='utf-8')
        except OSError as error:
            _logger.warning('Could not save session to %s: %s', self.path, error)

    def clear(self) -> None:
        """Remove the stored session, if any."""
        self.path.unlink(missing_ok=True)
