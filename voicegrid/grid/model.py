#!/usr/bin/env python3
"""Grid addressing and state.

The grid is 12 columns x 2 rows = 24 main cells, indexed row-major 0..23.
Each cell holds a 3x3 block of 9 boolean sub-cells, indexed row-major 0..8
(0 = top-left, 4 = center, 8 = bottom-right).
"""

from dataclasses import dataclass, field

import numpy as np

MAIN_COLS = 12
MAIN_ROWS = 2
MAIN_COUNT = MAIN_COLS * MAIN_ROWS  # 24
SUB_COLS = 3
SUB_ROWS = 3
SUB_PER_CELL = SUB_COLS * SUB_ROWS  # 9

__all__ = [
    "MAIN_COLS",
    "MAIN_ROWS",
    "MAIN_COUNT",
    "SUB_COLS",
    "SUB_ROWS",
    "SUB_PER_CELL",
    "GridFocus",
    "GridState",
    "empty_cells",
    "is_valid_sub",
]


def is_valid_sub(index: int) -> bool:
    return 0 <= index < SUB_PER_CELL


def empty_cells() -> np.ndarray:
    """Create a read-only all-off cell array of shape (24, 9)."""
    cells = np.zeros((MAIN_COUNT, SUB_PER_CELL), dtype=bool)
    cells.setflags(write=False)
    return cells


@dataclass(frozen=True)
class GridFocus:
    """Which main cell is active and which of its sub-cells are focused/selected."""

    active_cell_index: int = 0
    focused_sub_index: int | None = None
    selected_sub_indices: tuple[int, ...] = ()


@dataclass(frozen=True, eq=False)
class GridState:
    """Immutable snapshot of grid data plus focus.

    ``cells`` is never written in place; reducers copy it and hand back a new
    read-only array.
    """

    cells: np.ndarray = field(default_factory=empty_cells)
    focus: GridFocus = field(default_factory=GridFocus)

    def __post_init__(self):
        if self.cells.shape != (MAIN_COUNT, SUB_PER_CELL):
            raise ValueError(
                f"cells must have shape ({MAIN_COUNT}, {SUB_PER_CELL}), got {self.cells.shape}"
            )
        if self.cells.flags.writeable:
            cells = self.cells.astype(bool, copy=True)
            cells.setflags(write=False)
            object.__setattr__(self, "cells", cells)

    def __eq__(self, other):
        if not isinstance(other, GridState):
            return NotImplemented
        return self.focus == other.focus and np.array_equal(self.cells, other.cells)

    def on_count(self) -> int:
        """Number of sub-cells that are on across the whole grid."""
        return int(np.count_nonzero(self.cells))
