# -*- coding: utf-8 -*-
"""
Play the number merge game in a terminal.
"""
import logging
from pathlib import Path

from numbermerge import GameConfig, InvalidDirection, NumberMerge
from numbermerge.core import max_tile
from numbermerge.progress import stage_for_value, title_for_score

# ##: Keys accepted as slide directions.
KEYS = {"a": "left", "d": "right", "w": "up", "s": "down"}


def redraw(game: NumberMerge):
    """
    Redraw the game board with the scores.

    Parameters
    ----------
    game: NumberMerge
        The game session
    """
    state = game.state
    print(f"\nscore={state.score} best={state.best_score} moves={state.move_count}")
    game.render()


def summary(game: NumberMerge):
    """
    Print the end of game summary.

    Parameters
    ----------
    game: NumberMerge
        The game session
    """
    state = game.state
    stage = stage_for_value(max_tile(state.grid))
    print(f"Game over! score={state.score}, title: {title_for_score(state.score).name}")
    if stage is not None:
        print(f"Stage reached: {stage.name} ({stage.value})")


def step(game: NumberMerge, direction: str):
    """
    Applied a slide into the game.

    Parameters
    ----------
    game: NumberMerge
        The game session

    direction: str
        Direction to slide
    """
    turn = game.step(direction)
    if turn is None:
        print("move rejected")
        return
    if not turn.result.changed:
        print("nothing moves")
        return

    if turn.result.score_gain:
        print(f"+{turn.result.score_gain}")
    redraw(game)

    if turn.won:
        print(f"You reached {game.config.win_value}! Type 'k' to keep playing or 'n' for a new game.")
    if turn.game_over:
        summary(game)


def key_handler(game: NumberMerge, key: str) -> bool:
    """
    Handle one command typed by the player.

    Parameters
    ----------
    game: NumberMerge
        The game session

    key: str
        Typed command

    Returns
    -------
    bool
        False when the player quits
    """
    key = key.strip().lower()

    if key in ("q", "quit", "escape"):
        return False

    if key in ("n", "new"):
        game.new_game()
        redraw(game)
        return True

    if key in ("u", "undo"):
        if game.undo():
            redraw(game)
        else:
            print("nothing to undo")
        return True

    if key in ("k", "keep"):
        game.keep_playing()
        return True

    try:
        step(game, KEYS.get(key, key))
    except InvalidDirection as error:
        print(error)
    return True


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--save", type=Path, default=Path.home() / ".numbermerge.json")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--win-value", type=int, default=2048)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    env = NumberMerge(GameConfig(win_value=args.win_value, storage_path=args.save), seed=args.seed)
    print("w/a/s/d or left/up/right/down to slide, u: undo, n: new game, k: keep playing, q: quit")
    redraw(env)

    # Blocking input loop
    while True:
        try:
            command = input("> ")
        except EOFError:
            break
        if not key_handler(env, command):
            break
