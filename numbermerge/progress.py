"""
Achievement ladder: titles earned by score and stages reached by tile value.
"""

from bisect import bisect_right
from typing import NamedTuple


class Title(NamedTuple):
    """Rank earned once the score reaches ``min_score``."""

    min_score: int
    name: str


class Stage(NamedTuple):
    """Milestone reached once a tile of ``value`` is on the board."""

    value: int
    name: str
    bonus: int


TITLES = (
    Title(0, 'novice researcher'),
    Title(500, 'apprentice tamer'),
    Title(1000, 'evolution challenger'),
    Title(2000, 'mutation scholar'),
    Title(3000, 'genetic engineer'),
    Title(5000, 'evolution master'),
    Title(8000, 'architect of life'),
    Title(12000, 'apprentice creator'),
    Title(20000, 'god of creation'),
    Title(30000, 'ruler of all things'),
    Title(50000, 'universe creator'),
)

STAGES = (
    Stage(128, 'intro', 200),
    Stage(256, 'beginner', 500),
    Stage(512, 'intermediate', 1000),
    Stage(1024, 'advanced', 2000),
    Stage(2048, 'master', 5000),
    Stage(4096, 'legend', 10000),
)


def title_for_score(score: int) -> Title:
    """Highest title whose minimum score is reached; negative scores get the first one."""
    index = bisect_right([title.min_score for title in TITLES], score)
    return TITLES[max(index - 1, 0)]


def stage_for_value(value: int) -> Stage | None:
    """Highest stage reached by a tile value, None below the first stage."""
    index = bisect_right([stage.value for stage in STAGES], value)
    return STAGES[index - 1] if index else None
