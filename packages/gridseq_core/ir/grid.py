"""Grid state for Gridseq."""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

from gridseq_core.constants.grid import GRID_COLS, GRID_ROWS, RANDOMIZE_PROBABILITY


class Grid:
    """
    Fixed 8x8 matrix of note-active flags.

    Rows are pitches (row 0 = highest), columns are time steps.
    Cells are stored row-major, so cell index = row * cols + col.
    Dimensions never change after construction.
    """

    def __init__(self, rows: int = GRID_ROWS, cols: int = GRID_COLS):
        self._rows = rows
        self._cols = cols
        self._cells: list[bool] = [False] * (rows * cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def __len__(self) -> int:
        return len(self._cells)

    def cell_index(self, row: int, col: int) -> int:
        """Row-major index of a cell. Raises IndexError when out of range."""
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise IndexError(f"Cell ({row}, {col}) outside {self._rows}x{self._cols} grid")
        return row * self._cols + col

    def is_active(self, row: int, col: int) -> bool:
        return self._cells[self.cell_index(row, col)]

    def set(self, row: int, col: int, active: bool) -> None:
        self._cells[self.cell_index(row, col)] = active

    def toggle(self, row: int, col: int) -> bool:
        """Flip one cell and return its new value."""
        index = self.cell_index(row, col)
        self._cells[index] = not self._cells[index]
        return self._cells[index]

    def set_all(self, predicate: Callable[[int, int], bool]) -> None:
        """Set every cell to predicate(row, col)."""
        self._cells = [
            bool(predicate(row, col))
            for row in range(self._rows)
            for col in range(self._cols)
        ]

    def randomize(
        self,
        probability: float = RANDOMIZE_PROBABILITY,
        rng: random.Random | None = None,
    ) -> None:
        """Activate each cell independently with the given probability."""
        rand = rng.random if rng is not None else random.random
        self.set_all(lambda row, col: rand() < probability)

    def clear(self) -> None:
        """Deactivate every cell."""
        self._cells = [False] * (self._rows * self._cols)

    def column(self, col: int) -> list[bool]:
        """Active flags of one column, top row first."""
        return [self.is_active(row, col) for row in range(self._rows)]

    @property
    def active_count(self) -> int:
        return sum(self._cells)

    def to_rows(self) -> list[list[bool]]:
        """Snapshot as a list of rows."""
        return [
            self._cells[row * self._cols:(row + 1) * self._cols]
            for row in range(self._rows)
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for IPC"""
        return {"rows": self._rows, "cols": self._cols, "cells": self.to_rows()}
