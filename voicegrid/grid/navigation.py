#!/usr/bin/env python3
"""Keyboard and pointer fallback for the grid.

Keys are plain names so the logic does not depend on a windowing toolkit;
the pygame view maps its key codes onto them.
"""

from voicegrid.grid.model import MAIN_COLS, GridState
from voicegrid.grid.reducer import move_active_cell, set_active_cell, set_focused_sub, toggle_sub

# Arrow key -> active cell offset
KEY_MOVES = {
    "right": 1,
    "left": -1,
    "down": MAIN_COLS,
    "up": -MAIN_COLS,
}

TOGGLE_KEYS = frozenset({"enter", "space"})


def handle_key(state: GridState, key: str) -> GridState:
    """Apply a key press.

    Arrows move the active cell (clamped at the grid edges); Enter and Space
    toggle the focused sub-cell when there is one. Other keys are ignored.
    """
    if key in KEY_MOVES:
        return move_active_cell(state, KEY_MOVES[key])

    focused = state.focus.focused_sub_index
    if key in TOGGLE_KEYS and focused is not None:
        return toggle_sub(state, state.focus.active_cell_index, focused)

    return state


def handle_cell_click(state: GridState, cell_index: int) -> GridState:
    return set_active_cell(state, cell_index)


def handle_sub_click(state: GridState, cell_index: int, sub_index: int) -> GridState:
    """Clicking a sub-cell activates its cell, focuses it and toggles it."""
    state = set_active_cell(state, cell_index)
    state = set_focused_sub(state, sub_index)
    return toggle_sub(state, cell_index, sub_index)
