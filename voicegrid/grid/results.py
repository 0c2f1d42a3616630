#!/usr/bin/env python3
"""Read-only summary of grid data and selections."""

from dataclasses import dataclass

from voicegrid.grid.model import MAIN_COUNT, SUB_PER_CELL, GridState

ON_MARK = "✓"
OFF_MARK = "—"


@dataclass(frozen=True)
class ResultsSummary:
    """What the results view shows. All numbers are 1-based."""

    current_cell: int
    selected_sub_cells: tuple[int, ...]
    rows: tuple[tuple[bool, ...], ...]

    @property
    def selected_label(self) -> str:
        if not self.selected_sub_cells:
            return "None"
        return ", ".join(str(i) for i in self.selected_sub_cells)


def summarize(state: GridState) -> ResultsSummary:
    return ResultsSummary(
        current_cell=state.focus.active_cell_index + 1,
        selected_sub_cells=tuple(i + 1 for i in state.focus.selected_sub_indices),
        rows=tuple(tuple(bool(v) for v in row) for row in state.cells),
    )


def results_lines(state: GridState) -> list[str]:
    """Render the summary as text lines (header, selections, then a 24-row table)."""
    summary = summarize(state)

    lines = [
        f"Current cell: Cell {summary.current_cell}",
        f"Selected sub-cells (current cell): {summary.selected_label}",
        "",
        "Cell | " + " ".join(str(i + 1) for i in range(SUB_PER_CELL)),
    ]
    for cell_index in range(MAIN_COUNT):
        marks = " ".join(ON_MARK if v else OFF_MARK for v in summary.rows[cell_index])
        lines.append(f"{cell_index + 1:>4} | {marks}")
    return lines


def format_results(state: GridState) -> str:
    return "\n".join(results_lines(state))
