"""
Session state and single-level undo snapshots.
"""

from dataclasses import dataclass, field, replace
from typing import NamedTuple

from numpy import ndarray

from numbermerge.core.gameboard import BOARD_SIZE, empty_board


class UndoState(NamedTuple):
    """Board and score captured right before a move is committed."""

    grid: ndarray
    tile_ids: ndarray
    score: int


@dataclass
class SessionState:
    """
    Everything needed to resume a game.

    Attributes
    ----------
    grid : ndarray
        Tile values, 0 for an empty cell.
    tile_ids : ndarray
        Tile identities parallel to ``grid``.
    next_tile_id : int
        Next identity to mint; never reused.
    score : int
        Score of the current game.
    best_score : int
        Best score over all games.
    total_games : int
        Number of finished or abandoned games.
    max_tile_ever_reached : int
        Largest tile value seen over all games.
    won : bool
        Whether the win value was reached in the current game.
    keep_playing_after_win : bool
        Whether the player chose to continue past the win.
    game_over : bool
        Whether no move remains.
    move_count : int
        Successful moves in the current game.
    undo : UndoState, optional
        The latest pre-move snapshot, not persisted.
    """

    grid: ndarray = field(default_factory=empty_board)
    tile_ids: ndarray = field(default_factory=empty_board)
    next_tile_id: int = 1
    score: int = 0
    best_score: int = 0
    total_games: int = 0
    max_tile_ever_reached: int = 0
    won: bool = False
    keep_playing_after_win: bool = False
    game_over: bool = False
    move_count: int = 0
    undo: UndoState | None = field(default=None, repr=False)


def new_session(size: int = BOARD_SIZE, previous: SessionState | None = None) -> SessionState:
    """
    Create an empty game, carrying over the statistics of a previous session.

    Parameters
    ----------
    size : int, optional
        Side length of the board.
    previous : SessionState, optional
        Session whose best score, game count and max tile are kept.

    Returns
    -------
    SessionState
        A session without tiles, score or undo snapshot.
    """
    state = SessionState(grid=empty_board(size), tile_ids=empty_board(size))
    if previous is not None:
        state = replace(
            state,
            best_score=previous.best_score,
            total_games=previous.total_games,
            max_tile_ever_reached=previous.max_tile_ever_reached,
        )
    return state


def snapshot(state: SessionState) -> UndoState:
    """Capture the board and score of a session."""
    return UndoState(grid=state.grid.copy(), tile_ids=state.tile_ids.copy(), score=state.score)


def restore(state: SessionState, undo: UndoState) -> SessionState:
    """
    Put a session back to a snapshot.

    The board and score are replaced, the game-over flag is cleared and the snapshot is discarded.
    ``next_tile_id`` keeps its value so identities minted since the snapshot are never reused.
    """
    state.grid = undo.grid.copy()
    state.tile_ids = undo.tile_ids.copy()
    state.score = undo.score
    state.game_over = False
    state.undo = None
    return state
