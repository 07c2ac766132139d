"""
Move legality and terminal-state detection for the number merge board.
"""

from numpy import asarray, ndarray

from numbermerge.core.gameboard import Direction

# ##>: Tile value that wins the game.
WIN_VALUE = 2048


def legal_actions_mask(state: ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions in a single pass.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for (left, up, right, down) where True means the slide changes the board.

    Notes
    -----
    Horizontal and vertical adjacencies are computed once, then all four directions derive from them.
    """
    state = asarray(state)

    # ##>: Compute horizontal adjacency once for left/right.
    left_cols, right_cols = state[:, :-1], state[:, 1:]
    h_can_merge = (left_cols != 0) & (left_cols == right_cols)

    # ##>: Compute vertical adjacency once for up/down.
    top_rows, bottom_rows = state[:-1, :], state[1:, :]
    v_can_merge = (top_rows != 0) & (top_rows == bottom_rows)

    # ##>: Check slide conditions per direction.
    left = (left_cols == 0) & (right_cols != 0)
    right = (right_cols == 0) & (left_cols != 0)
    up = (top_rows == 0) & (bottom_rows != 0)
    down = (bottom_rows == 0) & (top_rows != 0)

    return (
        bool(left.any() or h_can_merge.any()),
        bool(up.any() or v_can_merge.any()),
        bool(right.any() or h_can_merge.any()),
        bool(down.any() or v_can_merge.any()),
    )


def legal_actions(state: ndarray) -> list[Direction]:
    """
    Directions whose slide would change the board.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    list[Direction]
        Legal directions, in (left, up, right, down) order.
    """
    mask = legal_actions_mask(state)
    return [direction for direction in Direction if mask[direction]]


def illegal_actions(state: ndarray) -> list[Direction]:
    """Directions whose slide would leave the board untouched."""
    mask = legal_actions_mask(state)
    return [direction for direction in Direction if not mask[direction]]


def can_move(state: ndarray, direction=Direction.LEFT) -> bool:
    """
    Check if a slide in one direction would change the board.

    Parameters
    ----------
    state : ndarray
        The game board to check.
    direction : Direction, int or str, optional
        Direction to check (default is left).

    Returns
    -------
    bool
        True if the slide moves or merges at least one tile.
    """
    return legal_actions_mask(state)[Direction.parse(direction)]


def is_game_over(state: ndarray) -> bool:
    """
    Check if the game has ended.

    Parameters
    ----------
    state : ndarray
        The current state of the game board.

    Returns
    -------
    bool
        True if no slide can change the board.

    Notes
    -----
    The game is over when there are no empty cells AND no adjacent cells share a value.
    """
    state = asarray(state)
    return bool(
        (state != 0).all() and not (state[:-1] == state[1:]).any() and not (state[:, :-1] == state[:, 1:]).any()
    )


def has_reached_win_value(state: ndarray, threshold: int = WIN_VALUE) -> bool:
    """True once a tile of at least ``threshold`` is on the board."""
    state = asarray(state)
    return bool(state.size and state.max() >= threshold)
