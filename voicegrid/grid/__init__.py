#!/usr/bin/env python3
"""Grid model and voice command interpretation.

Contains:
- Model (24 cells x 9 sub-cells, focus, immutable state)
- Actions (closed set of interpreter outputs)
- Lexicon (spoken numbers and positions)
- Interpreter (ordered rule table)
- Reducer (pure state transitions)
- Navigation (keyboard/pointer fallback)
- Results (read-only summary)
"""

from .actions import (
    Action,
    ActionType,
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
    action_to_payload,
)
from .interpreter import parse_voice_command
from .model import MAIN_COLS, MAIN_COUNT, MAIN_ROWS, SUB_PER_CELL, GridFocus, GridState
from .reducer import reduce

__all__ = [
    "Action",
    "ActionType",
    "ApplyToSub",
    "CellNotFound",
    "GoToCell",
    "NextCell",
    "PrevCell",
    "SelectSub",
    "SelectSubCells",
    "SwitchAction",
    "Toggle",
    "TurnOff",
    "TurnOn",
    "action_to_payload",
    "parse_voice_command",
    "reduce",
    "GridFocus",
    "GridState",
    "MAIN_COLS",
    "MAIN_ROWS",
    "MAIN_COUNT",
    "SUB_PER_CELL",
]
