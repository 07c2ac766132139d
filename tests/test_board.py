# -*-  coding: utf-8 -*-
"""
Set of test for the slide/merge engine.
"""
from unittest import TestCase, main

import numpy as np

from numbermerge.core.gameboard import (
    ACTIONS,
    Direction,
    Merge,
    Move,
    apply_move,
    assign_tile_ids,
    empty_board,
    merge_line,
)
from numbermerge.exceptions import InvalidDirection

generator = np.random.default_rng(42)


def board(*rows):
    """Build a 4x4 board from its first rows, padding with empty rows."""
    grid = empty_board()
    for index, row in enumerate(rows):
        grid[index] = row
    return grid


def generate_random_board(size: int = 4) -> np.ndarray:
    """Generate a random game board."""
    grid = np.zeros((size, size), dtype=np.int64)
    num_tiles = generator.integers(1, size * size + 1)
    tile_values = generator.choice([2, 4, 8, 16, 32, 64, 128, 256, 512, 1024, 2048], size=num_tiles)
    indices = generator.choice(size * size, size=num_tiles, replace=False)
    grid.flat[indices] = tile_values
    return grid


class TestMergeLine(TestCase):
    """Test the grouping of a single line."""

    def test_merge_pairs(self):
        """Two pairs merge into two tiles."""
        score, groups = merge_line([2, 2, 4, 4])
        self.assertEqual(score, 12)
        self.assertEqual(groups, [(0, 1), (2, 3)])

    def test_first_pair_wins(self):
        """A run of three merges the first two only."""
        score, groups = merge_line([2, 2, 2])
        self.assertEqual(score, 4)
        self.assertEqual(groups, [(0, 1), (2,)])

    def test_no_merge(self):
        """Distinct neighbours slide without merging."""
        score, groups = merge_line([2, 4, 2])
        self.assertEqual(score, 0)
        self.assertEqual(groups, [(0,), (1,), (2,)])

    def test_empty_line(self):
        """An empty line yields nothing."""
        self.assertEqual(merge_line([]), (0, []))


class TestDirection(TestCase):
    """Test the parsing of slide directions."""

    def test_parse(self):
        """Members, integers and names map to the same direction."""
        self.assertIs(Direction.parse(Direction.UP), Direction.UP)
        self.assertIs(Direction.parse(2), Direction.RIGHT)
        self.assertIs(Direction.parse(np.int64(3)), Direction.DOWN)
        self.assertIs(Direction.parse(" Left "), Direction.LEFT)
        self.assertEqual(ACTIONS["down"], Direction.DOWN)

    def test_invalid(self):
        """Unknown values raise InvalidDirection."""
        for value in ("diagonal", 4, -1, None, True, 1.0):
            with self.assertRaises(InvalidDirection):
                Direction.parse(value)

    def test_apply_move_invalid_direction(self):
        """The engine rejects invalid directions and leaves its input alone."""
        grid = board([2, 2, 0, 0])
        tile_ids, _ = assign_tile_ids(grid)
        with self.assertRaises(InvalidDirection):
            apply_move(grid, tile_ids, "sideways")
        np.testing.assert_array_equal(grid, board([2, 2, 0, 0]))


class TestApplyMove(TestCase):
    """Test the slide/merge engine on known boards."""

    def test_merge_left(self):
        """Two equal tiles slid left fuse into a new tile."""
        grid = board([2, 2, 0, 0])
        tile_ids, next_tile_id = assign_tile_ids(grid)
        result = apply_move(grid, tile_ids, Direction.LEFT, next_tile_id)

        np.testing.assert_array_equal(result.grid, board([4, 0, 0, 0]))
        self.assertEqual(result.score_gain, 4)
        self.assertTrue(result.changed)

        # ##>: Both sources move to the target, the result gets a fresh identity.
        self.assertEqual(result.merges, (Merge((1, 2), 0, 0, 4, 3),))
        self.assertEqual(result.moves, (Move(1, 0, 0, 0, 0), Move(2, 0, 1, 0, 0)))
        self.assertEqual(result.tile_ids[0, 0], 3)
        self.assertEqual(result.next_tile_id, 4)

    def test_slide_right(self):
        """A single tile slides to the far edge keeping its identity."""
        grid = board([2, 0, 0, 0])
        tile_ids, _ = assign_tile_ids(grid)
        result = apply_move(grid, tile_ids, "right")

        np.testing.assert_array_equal(result.grid, board([0, 0, 0, 2]))
        self.assertEqual(result.moves, (Move(1, 0, 0, 0, 3),))
        self.assertEqual(result.merges, ())
        self.assertEqual(result.score_gain, 0)
        self.assertEqual(result.tile_ids[0, 3], 1)

    def test_row_of_four(self):
        """Four equal tiles make two merges, not one."""
        grid = board([2, 2, 2, 2])
        tile_ids, next_tile_id = assign_tile_ids(grid)

        left = apply_move(grid, tile_ids, Direction.LEFT, next_tile_id)
        np.testing.assert_array_equal(left.grid, board([4, 4, 0, 0]))
        self.assertEqual(left.score_gain, 8)
        self.assertEqual([merge.source_tile_ids for merge in left.merges], [(1, 2), (3, 4)])

        right = apply_move(grid, tile_ids, Direction.RIGHT, next_tile_id)
        np.testing.assert_array_equal(right.grid, board([0, 0, 4, 4]))
        self.assertEqual([merge.source_tile_ids for merge in right.merges], [(4, 3), (2, 1)])

    def test_triple_merges_from_leading_edge(self):
        """Three equal tiles merge the pair nearest to the edge they slide toward."""
        grid = board([2, 2, 2, 0])
        tile_ids, _ = assign_tile_ids(grid)

        left = apply_move(grid, tile_ids, Direction.LEFT)
        np.testing.assert_array_equal(left.grid, board([4, 2, 0, 0]))
        self.assertEqual(len(left.merges), 1)
        self.assertEqual(left.merges[0].source_tile_ids, (1, 2))

        right = apply_move(grid, tile_ids, Direction.RIGHT)
        np.testing.assert_array_equal(right.grid, board([0, 0, 2, 4]))
        self.assertEqual(right.merges[0].source_tile_ids, (3, 2))
        self.assertEqual(right.tile_ids[0, 2], 1)

    def test_vertical_moves(self):
        """Columns are processed like rows for up and down."""
        grid = np.array([[2, 0, 0, 0], [2, 0, 0, 0], [4, 0, 0, 0], [0, 0, 0, 0]])
        tile_ids, _ = assign_tile_ids(grid)

        up = apply_move(grid, tile_ids, Direction.UP)
        np.testing.assert_array_equal(up.grid[:, 0], [4, 4, 0, 0])
        self.assertEqual(up.score_gain, 4)
        self.assertIn(Move(3, 2, 0, 1, 0), up.moves)

        down = apply_move(grid, tile_ids, Direction.DOWN)
        np.testing.assert_array_equal(down.grid[:, 0], [0, 0, 4, 4])
        self.assertEqual(down.merges[0].target_row, 2)
        self.assertIn(Move(3, 2, 0, 3, 0), down.moves)

    def test_merge_ids_minted_in_line_order(self):
        """Merge results receive identities row by row."""
        grid = board([2, 2, 0, 0], [8, 8, 0, 0])
        tile_ids, next_tile_id = assign_tile_ids(grid)
        result = apply_move(grid, tile_ids, Direction.LEFT, next_tile_id)
        self.assertEqual([merge.result_tile_id for merge in result.merges], [5, 6])
        self.assertEqual(result.next_tile_id, 7)

    def test_default_next_tile_id(self):
        """Without a counter, identities continue after the largest one in use."""
        grid = board([2, 2, 0, 0])
        tile_ids = board([7, 9, 0, 0])
        result = apply_move(grid, tile_ids, Direction.LEFT)
        self.assertEqual(result.merges[0].result_tile_id, 10)

    def test_unchanged(self):
        """A packed board reports no change and no records."""
        grid = board([2, 4, 0, 0])
        tile_ids, next_tile_id = assign_tile_ids(grid)
        result = apply_move(grid, tile_ids, Direction.LEFT, next_tile_id)
        self.assertFalse(result.changed)
        self.assertEqual(result.moves, ())
        self.assertEqual(result.next_tile_id, next_tile_id)

    def test_no_move_on_locked_board(self):
        """A checkerboard cannot change in any direction."""
        grid = np.array([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]])
        tile_ids, _ = assign_tile_ids(grid)
        for direction in Direction:
            self.assertFalse(apply_move(grid, tile_ids, direction).changed)

    def test_input_not_modified(self):
        """The engine works on copies."""
        grid = board([2, 2, 4, 0])
        tile_ids, _ = assign_tile_ids(grid)
        apply_move(grid, tile_ids, Direction.RIGHT)
        np.testing.assert_array_equal(grid, board([2, 2, 4, 0]))
        np.testing.assert_array_equal(tile_ids, board([1, 2, 3, 0]))

    def test_shape_mismatch(self):
        """Matrices of different shapes are refused."""
        with self.assertRaises(ValueError):
            apply_move(empty_board(4), empty_board(3), Direction.LEFT)


class TestMoveProperties(TestCase):
    """Test engine properties on random boards."""

    def setUp(self):
        self.boards = [generate_random_board() for _ in range(200)]

    def test_conservation(self):
        """Merges double their sources, the score adds them up and the tile count drops by one per merge."""
        for grid in self.boards:
            tile_ids, next_tile_id = assign_tile_ids(grid)
            values = {int(tile_ids[cell]): int(grid[cell]) for cell in zip(*grid.nonzero())}

            for direction in Direction:
                result = apply_move(grid, tile_ids, direction, next_tile_id)
                for merge in result.merges:
                    first, second = merge.source_tile_ids
                    self.assertEqual(values[first], values[second])
                    self.assertEqual(merge.result_value, 2 * values[first])
                self.assertEqual(result.score_gain, sum(merge.result_value for merge in result.merges))
                self.assertEqual(np.count_nonzero(result.grid), np.count_nonzero(grid) - len(result.merges))

    def test_identities(self):
        """Every tile has a unique identity, and a source merges at most once."""
        for grid in self.boards:
            tile_ids, next_tile_id = assign_tile_ids(grid)

            for direction in Direction:
                result = apply_move(grid, tile_ids, direction, next_tile_id)
                on_tiles = result.tile_ids[result.grid != 0]
                self.assertTrue((on_tiles > 0).all())
                self.assertEqual(len(set(on_tiles.tolist())), len(on_tiles))
                self.assertTrue((result.tile_ids[result.grid == 0] == 0).all())

                sources = [tile_id for merge in result.merges for tile_id in merge.source_tile_ids]
                self.assertEqual(len(sources), len(set(sources)))
                self.assertEqual(result.next_tile_id, next_tile_id + len(result.merges))

    def test_merge_sources_move_to_target(self):
        """Both sources of a merge are animated toward the merge cell."""
        for grid in self.boards:
            tile_ids, _ = assign_tile_ids(grid)
            result = apply_move(grid, tile_ids, Direction.DOWN)
            targets = {move.tile_id: (move.to_row, move.to_col) for move in result.moves}
            for merge in result.merges:
                for tile_id in merge.source_tile_ids:
                    self.assertEqual(targets[tile_id], (merge.target_row, merge.target_col))

    def test_repeated_move_only_merges(self):
        """Repeating a slide never translates a packed tile again."""
        for grid in self.boards:
            tile_ids, _ = assign_tile_ids(grid)
            for direction in Direction:
                first = apply_move(grid, tile_ids, direction)
                second = apply_move(first.grid, first.tile_ids, direction)
                if not second.merges:
                    self.assertFalse(second.changed)

    def test_repeated_move_on_consolidated_board(self):
        """Sliding left twice without spawning changes nothing the second time."""
        grid = board([0, 2, 0, 4], [8, 0, 8, 0], [2, 4, 8, 16])
        tile_ids, _ = assign_tile_ids(grid)
        first = apply_move(grid, tile_ids, Direction.LEFT)
        second = apply_move(first.grid, first.tile_ids, Direction.LEFT)
        self.assertTrue(first.changed)
        self.assertFalse(second.changed)


if __name__ == "__main__":
    main()
