"""Number merge game session."""

import logging
from typing import NamedTuple

from numpy.random import default_rng

from numbermerge.config import GameConfig, default_config
from numbermerge.core.gameboard import ACTIONS, Direction, MoveResult, apply_move, max_tile
from numbermerge.core.gamemove import has_reached_win_value, is_game_over
from numbermerge.core.spawner import SpawnResult, place_tile, spawn_tile
from numbermerge.session.state import SessionState, new_session, restore, snapshot
from numbermerge.session.storage import SessionStore

_logger = logging.getLogger(__name__)


class Turn(NamedTuple):
    """
    A committed move.

    Attributes
    ----------
    result : MoveResult
        The slide computed by the engine.
    spawn : SpawnResult or None
        The tile added after the slide, None if nothing was added.
    won : bool
        True only on the move that first reached the win value.
    game_over : bool
        Whether the game ended with this move.
    """

    result: MoveResult
    spawn: SpawnResult | None
    won: bool
    game_over: bool


class NumberMerge:
    """
    Number merge game session.

    This class owns the session state and runs a move from end to end: engine, commit, score, spawn,
    win and game-over checks, undo snapshot and persistence. A move can be split in two steps
    (``begin_move`` then ``complete_move``) so a presentation layer can animate in between; no other
    move is accepted until the pending one is completed.
    """

    # ##: All Actions.
    ACTIONS = ACTIONS

    def __init__(self, config: GameConfig | None = None, seed: int | None = None, store: SessionStore | None = None):
        """
        Initialize the session, resuming the stored one when it is still playable.

        Parameters
        ----------
        config : GameConfig, optional
            Rules and storage of the session (default is the reference configuration).
        seed : int, optional
            Seed of the random source used to spawn tiles.
        store : SessionStore, optional
            Where the session is persisted. Built from ``config.storage_path`` when omitted.
        """
        self.config = config if config is not None else default_config()
        self._rng = default_rng(seed)
        if store is None and self.config.storage_path is not None:
            store = SessionStore(self.config.storage_path, size=self.config.size)
        self._store = store
        self._pending: MoveResult | None = None

        stored = self._store.load() if self._store is not None else None
        if stored is not None and stored.grid.any() and not stored.game_over:
            _logger.info('Resuming stored game (score=%d, moves=%d)', stored.score, stored.move_count)
            self.state = stored
        else:
            self.state = stored if stored is not None else new_session(self.config.size)
            self._start()

    @property
    def animating(self) -> bool:
        """True while a move has been begun and not completed."""
        return self._pending is not None

    @property
    def is_finished(self) -> bool:
        """True if no slide can change the board."""
        return is_game_over(self.state.grid)

    @property
    def can_undo(self) -> bool:
        return self.state.undo is not None

    def new_game(self) -> SessionState:
        """
        Start a new game, keeping best score, game count and max tile.

        An unfinished game with at least one move counts as played.
        """
        if not self.state.game_over and self.state.move_count > 0:
            self.state.total_games += 1
        self._start()
        return self.state

    def begin_move(self, direction) -> MoveResult | None:
        """
        Compute a slide and commit it to the board, leaving spawn and terminal checks pending.

        Parameters
        ----------
        direction : Direction, int or str
            The slide direction.

        Returns
        -------
        MoveResult or None
            The slide, or None when the move is rejected because the game is over or a move is pending.
            A slide with ``changed=False`` is returned without touching the session.

        Raises
        ------
        InvalidDirection
            If ``direction`` is not one of the four slide directions.
        """
        direction = Direction.parse(direction)
        state = self.state
        if state.game_over or self.animating:
            _logger.debug(
                'Move %s rejected (game_over=%s, animating=%s)', direction.name, state.game_over, self.animating
            )
            return None

        result = apply_move(state.grid, state.tile_ids, direction, state.next_tile_id)
        if not result.changed:
            _logger.debug('Move %s leaves the board unchanged', direction.name)
            return result

        state.undo = snapshot(state)
        state.grid = result.grid
        state.tile_ids = result.tile_ids
        state.next_tile_id = result.next_tile_id
        state.score += result.score_gain
        state.best_score = max(state.best_score, state.score)
        state.move_count += 1
        state.max_tile_ever_reached = max(state.max_tile_ever_reached, max_tile(state.grid))

        self._pending = result
        return result

    def complete_move(self) -> Turn:
        """
        Finish the pending move: spawn a tile, detect win and game over, then persist.

        Raises
        ------
        RuntimeError
            If no move is pending.
        """
        if self._pending is None:
            raise RuntimeError('No move in progress')
        result, self._pending = self._pending, None
        state = self.state

        spawn = self._spawn()

        won_now = False
        win_value = self.config.win_value
        if not state.won and not state.keep_playing_after_win and has_reached_win_value(state.grid, win_value):
            state.won = True
            won_now = True
            _logger.info('Reached %d with score %d after %d moves', win_value, state.score, state.move_count)

        if is_game_over(state.grid):
            state.game_over = True
            state.total_games += 1
            _logger.info('Game over with score %d after %d moves', state.score, state.move_count)

        self._save()
        return Turn(result, spawn, won_now, state.game_over)

    def step(self, direction) -> Turn | None:
        """
        Apply a slide from end to end.

        Returns
        -------
        Turn or None
            The committed move, a turn whose result has ``changed=False`` when the slide does nothing,
            or None when the move is rejected.
        """
        result = self.begin_move(direction)
        if result is None:
            return None
        if not result.changed:
            return Turn(result, None, False, self.state.game_over)
        return self.complete_move()

    def undo(self) -> bool:
        """
        Revert the last move. Only one level is kept and there is no redo.

        Returns
        -------
        bool
            False when there is nothing to undo.
        """
        if self.state.undo is None:
            return False
        restore(self.state, self.state.undo)
        self._pending = None
        self._save()
        return True

    def keep_playing(self) -> None:
        """Continue past the win; no further win is reported for this game."""
        self.state.keep_playing_after_win = True
        self._save()

    def render(self) -> None:
        """
        Render the game board. This method prints the current state of the game board to the console.
        """
        for row in self.state.grid.tolist():
            print(' \t'.join(str(value) if value else '.' for value in row))

    def _start(self) -> None:
        self._pending = None
        self.state = new_session(self.config.size, previous=self.state)
        for _ in range(self.config.start_tiles):
            self._spawn()
        self.state.max_tile_ever_reached = max(self.state.max_tile_ever_reached, max_tile(self.state.grid))
        _logger.info('New game started (games played: %d)', self.state.total_games)
        self._save()

    def _spawn(self) -> SpawnResult | None:
        state = self.state
        spawn = spawn_tile(
            state.grid,
            state.tile_ids,
            state.next_tile_id,
            rng=self._rng,
            two_probability=self.config.spawn_policy(state.move_count),
        )
        if spawn is not None:
            state.grid, state.tile_ids = place_tile(state.grid, state.tile_ids, spawn)
            state.next_tile_id = spawn.next_tile_id
            _logger.debug('Spawned %d at (%d, %d) as tile %d', spawn.value, spawn.row, spawn.col, spawn.tile_id)
        return spawn

    def _save(self) -> None:
        if self._store is not None:
            self._store.save(self.state)
