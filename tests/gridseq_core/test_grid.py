"""
Tests for Grid state.
"""

import random
import statistics

import pytest

from gridseq_core.ir.grid import Grid


class TestGridBasics:
    def test_starts_empty(self):
        grid = Grid()

        assert grid.rows == 8
        assert grid.cols == 8
        assert len(grid) == 64
        assert grid.active_count == 0

    def test_toggle_flips_one_cell(self):
        grid = Grid()

        assert grid.toggle(2, 5) is True
        assert grid.is_active(2, 5)
        assert grid.active_count == 1

        assert grid.toggle(2, 5) is False
        assert not grid.is_active(2, 5)

    def test_cell_index_is_row_major(self):
        grid = Grid()

        assert grid.cell_index(0, 0) == 0
        assert grid.cell_index(1, 0) == 8
        assert grid.cell_index(3, 5) == 29

    @pytest.mark.parametrize(("row", "col"), [(-1, 0), (8, 0), (0, 8), (0, -1)])
    def test_out_of_range(self, row: int, col: int):
        with pytest.raises(IndexError):
            Grid().toggle(row, col)

    def test_column_reads_top_row_first(self):
        grid = Grid()
        grid.set(0, 3, True)
        grid.set(6, 3, True)

        assert grid.column(3) == [True, False, False, False, False, False, True, False]

    def test_set_all(self):
        grid = Grid()

        grid.set_all(lambda row, col: row == col)

        assert grid.active_count == 8
        assert grid.is_active(4, 4)
        assert not grid.is_active(4, 5)

    def test_clear(self):
        grid = Grid()
        grid.set_all(lambda row, col: True)

        grid.clear()

        assert grid.active_count == 0
        assert len(grid) == 64

    def test_to_rows_snapshot_is_independent(self):
        grid = Grid()
        snapshot = grid.to_rows()

        grid.toggle(0, 0)

        assert snapshot[0][0] is False
        assert grid.to_dict()["cells"][0][0] is True


class TestRandomize:
    def test_probability_zero_and_one(self):
        grid = Grid()

        grid.randomize(1.0)
        assert grid.active_count == 64

        grid.randomize(0.0)
        assert grid.active_count == 0

    def test_seeded_rng_is_deterministic(self):
        a, b = Grid(), Grid()

        a.randomize(rng=random.Random(7))
        b.randomize(rng=random.Random(7))

        assert a.to_rows() == b.to_rows()

    def test_active_count_concentrates_near_expected(self):
        # 64 cells * 0.15 = 9.6 expected active cells
        rng = random.Random(1234)
        grid = Grid()
        counts = []
        for _ in range(500):
            grid.randomize(rng=rng)
            counts.append(grid.active_count)

        assert statistics.mean(counts) == pytest.approx(9.6, abs=1.0)

    def test_dimensions_never_change(self):
        grid = Grid()

        grid.randomize()
        grid.clear()
        grid.set_all(lambda row, col: True)

        assert (grid.rows, grid.cols, len(grid)) == (8, 8, 64)
