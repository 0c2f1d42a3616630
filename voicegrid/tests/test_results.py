#!/usr/bin/env python3
"""Tests for the results summary."""

from voicegrid.grid.actions import GoToCell, SelectSubCells
from voicegrid.grid.model import GridState
from voicegrid.grid.reducer import reduce, toggle_sub
from voicegrid.grid.results import OFF_MARK, ON_MARK, format_results, results_lines, summarize


def test_empty_grid():
    lines = results_lines(GridState())
    assert lines[0] == "Current cell: Cell 1"
    assert lines[1] == "Selected sub-cells (current cell): None"
    assert lines[3] == "Cell | 1 2 3 4 5 6 7 8 9"
    assert len(lines) == 4 + 24
    assert lines[4] == "   1 | " + " ".join([OFF_MARK] * 9)


def test_summary_is_one_based():
    state = reduce(GridState(), GoToCell(11))
    state = reduce(state, SelectSubCells((5, 3)))
    summary = summarize(state)
    assert summary.current_cell == 12
    assert summary.selected_sub_cells == (4, 6)
    assert summary.selected_label == "4, 6"


def test_rows_show_on_cells():
    state = toggle_sub(GridState(), 23, 8)
    lines = results_lines(state)
    assert lines[-1] == "  24 | " + " ".join([OFF_MARK] * 8 + [ON_MARK])


def test_format_results_joins_lines():
    state = GridState()
    assert format_results(state) == "\n".join(results_lines(state))
