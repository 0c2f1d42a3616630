#!/usr/bin/env python3
"""Pure grid reducer.

Every function takes a GridState and returns a new one; nothing is mutated
in place. Changing the active cell always clears the focused and selected
sub-cells.
"""

import numpy as np

from voicegrid.grid.actions import (
    Action,
    ApplyToSub,
    CellNotFound,
    GoToCell,
    NextCell,
    PrevCell,
    SelectSub,
    SelectSubCells,
    SwitchAction,
    Toggle,
    TurnOff,
    TurnOn,
)
from voicegrid.grid.model import MAIN_COUNT, SUB_PER_CELL, GridFocus, GridState, is_valid_sub

__all__ = [
    "set_active_cell",
    "move_active_cell",
    "set_focused_sub",
    "set_selected_sub_indices",
    "toggle_sub",
    "apply_switch",
    "reduce",
]


def _with_cells(state: GridState, cells: np.ndarray) -> GridState:
    cells.setflags(write=False)
    return GridState(cells=cells, focus=state.focus)


def set_active_cell(state: GridState, index: int) -> GridState:
    """Activate a cell, clamped to 0..23, and reset sub-cell focus."""
    clamped = max(0, min(MAIN_COUNT - 1, index))
    return GridState(cells=state.cells, focus=GridFocus(active_cell_index=clamped))


def move_active_cell(state: GridState, delta: int) -> GridState:
    return set_active_cell(state, state.focus.active_cell_index + delta)


def set_focused_sub(state: GridState, sub_index: int | None) -> GridState:
    """Focus a sub-cell of the active cell; out-of-range indices are ignored."""
    if sub_index is not None and not is_valid_sub(sub_index):
        return state
    focus = GridFocus(
        active_cell_index=state.focus.active_cell_index,
        focused_sub_index=sub_index,
        selected_sub_indices=state.focus.selected_sub_indices,
    )
    return GridState(cells=state.cells, focus=focus)


def set_selected_sub_indices(state: GridState, indices) -> GridState:
    """Replace the multi-selection, dropping anything outside 0..8."""
    valid = tuple(i for i in indices if is_valid_sub(i))
    focus = GridFocus(
        active_cell_index=state.focus.active_cell_index,
        focused_sub_index=state.focus.focused_sub_index,
        selected_sub_indices=valid,
    )
    return GridState(cells=state.cells, focus=focus)


def toggle_sub(
    state: GridState, cell_index: int, sub_index: int, value: bool | None = None
) -> GridState:
    """Flip one sub-cell, or set it to ``value`` when given."""
    cells = state.cells.copy()
    cells[cell_index, sub_index] = (not cells[cell_index, sub_index]) if value is None else value
    return _with_cells(state, cells)


def apply_switch(
    state: GridState, cell_index: int, sub_index: int | None, switch: SwitchAction
) -> GridState:
    """Apply a switch to one sub-cell, or to all 9 when ``sub_index`` is None."""
    cells = state.cells.copy()
    if sub_index is None:
        targets = slice(0, SUB_PER_CELL)
    else:
        targets = sub_index

    if switch is SwitchAction.TOGGLE:
        cells[cell_index, targets] = ~cells[cell_index, targets]
    else:
        cells[cell_index, targets] = switch is SwitchAction.TURN_ON
    return _with_cells(state, cells)


def reduce(state: GridState, action: Action | None) -> GridState:
    """Apply one interpreter action.

    CellNotFound and None leave the state untouched; the caller turns them
    into user feedback.
    """
    focus = state.focus

    if action is None or isinstance(action, CellNotFound):
        return state
    if isinstance(action, NextCell):
        return move_active_cell(state, 1)
    if isinstance(action, PrevCell):
        return move_active_cell(state, -1)
    if isinstance(action, GoToCell):
        return set_active_cell(state, action.index)
    if isinstance(action, SelectSub):
        return set_focused_sub(state, action.index)
    if isinstance(action, SelectSubCells):
        return set_selected_sub_indices(state, action.indices)
    if isinstance(action, ApplyToSub):
        return apply_switch(state, focus.active_cell_index, action.sub_index, action.action)
    if isinstance(action, (Toggle, TurnOn, TurnOff)):
        return apply_switch(state, focus.active_cell_index, focus.focused_sub_index, action.switch)

    raise TypeError(f"Unknown action: {action!r}")
