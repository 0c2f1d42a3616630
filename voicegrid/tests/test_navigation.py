#!/usr/bin/env python3
"""Tests for keyboard and pointer fallback."""

from voicegrid.grid.model import GridState
from voicegrid.grid.navigation import handle_cell_click, handle_key, handle_sub_click
from voicegrid.grid.reducer import set_active_cell, set_focused_sub


def test_arrow_keys():
    state = GridState()
    state = handle_key(state, "right")
    assert state.focus.active_cell_index == 1
    state = handle_key(state, "down")
    assert state.focus.active_cell_index == 13
    state = handle_key(state, "left")
    assert state.focus.active_cell_index == 12
    state = handle_key(state, "up")
    assert state.focus.active_cell_index == 0


def test_arrow_keys_clamp():
    assert handle_key(GridState(), "up").focus.active_cell_index == 0
    last = set_active_cell(GridState(), 23)
    assert handle_key(last, "down").focus.active_cell_index == 23


def test_enter_without_focus_is_no_op():
    state = GridState()
    assert handle_key(state, "enter") is state


def test_space_toggles_focused_sub():
    state = set_focused_sub(set_active_cell(GridState(), 4), 8)
    state = handle_key(state, "space")
    assert state.cells[4, 8]
    state = handle_key(state, "enter")
    assert not state.cells[4, 8]


def test_unknown_key_ignored():
    state = GridState()
    assert handle_key(state, "x") is state


def test_cell_click():
    state = set_focused_sub(GridState(), 3)
    state = handle_cell_click(state, 7)
    assert state.focus.active_cell_index == 7
    assert state.focus.focused_sub_index is None


def test_sub_click_activates_focuses_and_toggles():
    state = handle_sub_click(GridState(), 20, 2)
    assert state.focus.active_cell_index == 20
    assert state.focus.focused_sub_index == 2
    assert state.cells[20, 2]
    assert state.on_count() == 1
