# -*- coding: utf-8 -*-
"""
Evaluate a playing policy over many games.
"""
import logging
from collections import Counter
from typing import Callable, Dict

import numpy as np
from tqdm import trange

from numbermerge import GameConfig, NumberMerge
from numbermerge.core import Direction, legal_actions, max_tile
from numbermerge.core.spawner import constant_policy, easy_start_policy

Policy = Callable[[np.ndarray, np.random.Generator], Direction]


def random_policy(board: np.ndarray, rng: np.random.Generator) -> Direction:
    """Slide in a random legal direction."""
    legal = legal_actions(board)
    return legal[rng.integers(len(legal))]


def corner_policy(board: np.ndarray, rng: np.random.Generator) -> Direction:
    """Prefer left, then up, then right, then down."""
    return legal_actions(board)[0]


POLICIES: Dict[str, Policy] = {
    "random": random_policy,
    "corner": corner_policy,
}


def evaluate(method: str, length: int = 10, seed: int | None = None, easy_start: bool = False) -> Dict[int, int]:
    """
    Evaluate a playing policy.

    Parameters
    ----------
    method : str
        The name of the policy to evaluate.
    length : int, optional
        The number of games to play (default is 10).
    seed : int, optional
        Seed of the tile spawner and of the policy.
    easy_start : bool, optional
        Spawn only 2s during the opening moves.

    Returns
    -------
    Dict[int, int]
        Number of games ending with each max tile.
    """
    policy = POLICIES[method]
    rng = np.random.default_rng(seed)
    spawn_policy = easy_start_policy() if easy_start else constant_policy()
    env = NumberMerge(GameConfig(spawn_policy=spawn_policy), seed=seed)
    score = []

    with trange(length) as period:
        for num in period:
            env.new_game()
            env.keep_playing()
            done = False

            # ##: Play a game.
            while not done:
                turn = env.step(policy(env.state.grid, rng))
                done = turn is None or turn.game_over

                # ##: Log.
                period.set_description(f"Evaluation: {num + 1}")
                period.set_postfix(score=env.state.score, max=max_tile(env.state.grid))

            # ##: Save max cells.
            score.append(max_tile(env.state.grid))

    # ##: Final log.
    frequency = Counter(score)
    return dict(sorted(frequency.items()))


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--method", type=str, default="random", choices=sorted(POLICIES))
    parser.add_argument("--length", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--easy-start", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    result = evaluate(method=args.method, length=args.length, seed=args.seed, easy_start=args.easy_start)
    print(f"Evaluation of the {args.method} policy, max tiles: {result}")
