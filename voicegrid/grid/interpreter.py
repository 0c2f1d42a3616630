#!/usr/bin/env python3
"""Forgiving voice command interpreter.

Maps one finalized utterance to one grid action, or None when nothing
matches. The transcript is normalized (lower-case, single spaces) and run
through ``RULES`` in order; the first rule that returns an action wins.
Interpretation is pure and never raises.
"""

import re
from collections.abc import Callable

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
from voicegrid.grid.lexicon import (
    NUMBER_WORDS,
    normalize,
    parse_cell_number,
    parse_number_word,
    parse_sub_position,
)
from voicegrid.grid.model import MAIN_COUNT, SUB_PER_CELL

__all__ = ["RULES", "parse_voice_command"]

Rule = Callable[[str], Action | None]

_NEXT_RE = re.compile(r"\b(?:next|go to next) cell\b")
_PREV_RE = re.compile(r"\b(?:previous|prev|go to previous) cell\b")
_SELECT_CELL_RE = re.compile(r"\bselect (?:cell|block) (?:number )?(\d{1,2})\b")
_TOGGLE_CELL_RE = re.compile(
    r"\btoggle cell (?:number )?([1-9]|" + "|".join(NUMBER_WORDS) + r")\b"
)
# A number only navigates when it is addressed to a main cell: the whole
# utterance is the number, or it follows go to / cell / block (but not
# "sub cell"), or it is the row/column form.
_CELL_ADDRESS_RE = re.compile(
    r"^(?:go to )?(?:(?:cell|block) )?(?:number )?\d{1,2}$"
    r"|(?<!sub )(?<!sub-)\b(?:go to|cell|block) (?:number )?\d{1,2}\b"
    r"|\brow \d col(?:umn)? \d+\b"
)
_SELECT_SUB_CELLS_RE = re.compile(r"\bselect sub[ -]?cells? ([\d\s,and]+)")
_SUB_DIGIT_RE = re.compile(r"\b[1-9]\b")
_BOX_RE = re.compile(r"\b(uncheck|check|toggle|mark|clear) box (?:number )?([1-9])\b")
_TOGGLE_RE = re.compile(r"\b(?:toggle all|toggle|switch|flip)\b")
_TURN_ON_RE = re.compile(r"\b(?:turn on|mark|enable|set on|check)\b")
_TURN_OFF_RE = re.compile(r"\b(?:turn off|clear|unmark|disable|set off|uncheck)\b")

_BOX_VERBS = {
    "check": SwitchAction.TURN_ON,
    "mark": SwitchAction.TURN_ON,
    "uncheck": SwitchAction.TURN_OFF,
    "clear": SwitchAction.TURN_OFF,
    "toggle": SwitchAction.TOGGLE,
}


def _next_cell(n: str) -> Action | None:
    if _NEXT_RE.search(n) or n == "next":
        return NextCell()
    return None


def _prev_cell(n: str) -> Action | None:
    if _PREV_RE.search(n) or n in ("previous", "prev"):
        return PrevCell()
    return None


def _select_cell(n: str) -> Action | None:
    """'select cell number 5' -> cell 5, or CellNotFound when out of range."""
    match = _SELECT_CELL_RE.search(n)
    if not match:
        return None
    requested = int(match.group(1))
    if 1 <= requested <= MAIN_COUNT:
        return GoToCell(requested - 1)
    return CellNotFound(requested)


def _toggle_cell(n: str) -> Action | None:
    """'toggle cell five' toggles sub-cell 5 of the active cell."""
    match = _TOGGLE_CELL_RE.search(n)
    if not match:
        return None
    number = parse_number_word(match.group(1))
    sub_index = min(max(number - 1, 0), SUB_PER_CELL - 1)
    return ApplyToSub(sub_index, SwitchAction.TOGGLE)


def _go_to_cell(n: str) -> Action | None:
    if not _CELL_ADDRESS_RE.search(n):
        return None
    index = parse_cell_number(n)
    if index is None:
        return None
    return GoToCell(index)


def _select_sub_cells(n: str) -> Action | None:
    """'select sub cells 4, 5 and 6' -> sub-cells 3, 4, 5."""
    match = _SELECT_SUB_CELLS_RE.search(n)
    if not match:
        return None
    rest = re.sub(r"\band\b", " ", match.group(1)).replace(",", " ")
    numbers = _SUB_DIGIT_RE.findall(rest)
    if not numbers:
        return None
    return SelectSubCells(tuple(int(x) - 1 for x in numbers))


def _select_sub(n: str) -> Action | None:
    if "select" not in n:
        return None
    index = parse_sub_position(n)
    if index is None:
        return None
    return SelectSub(index)


def _box(n: str) -> Action | None:
    """'check box 3', 'clear box number 7', 'toggle box 1'."""
    match = _BOX_RE.search(n)
    if not match:
        return None
    return ApplyToSub(int(match.group(2)) - 1, _BOX_VERBS[match.group(1)])


def _toggle(n: str) -> Action | None:
    return Toggle() if _TOGGLE_RE.search(n) else None


def _turn_on(n: str) -> Action | None:
    return TurnOn() if _TURN_ON_RE.search(n) else None


def _turn_off(n: str) -> Action | None:
    return TurnOff() if _TURN_OFF_RE.search(n) else None


# Priority order, highest first. Earlier rules shadow later ones, e.g.
# "select cell 5" must navigate before the generic "select" rule sees it.
RULES: tuple[Rule, ...] = (
    _next_cell,
    _prev_cell,
    _select_cell,
    _toggle_cell,
    _go_to_cell,
    _select_sub_cells,
    _select_sub,
    _box,
    _toggle,
    _turn_on,
    _turn_off,
)


def parse_voice_command(transcript) -> Action | None:
    """Interpret a finalized utterance.

    Args:
        transcript: Recognized text; anything that is not a non-empty string
            yields None.

    Returns:
        The action of the first matching rule, or None

    Examples:
        >>> parse_voice_command("Select cell number 5")
        GoToCell(index=4)
        >>> parse_voice_command("select sub cells 6, 4 and 5")
        SelectSubCells(indices=(3, 4, 5))
        >>> parse_voice_command("hello") is None
        True
    """
    if not isinstance(transcript, str) or not transcript:
        return None

    n = normalize(transcript)
    if not n:
        return None

    for rule in RULES:
        action = rule(n)
        if action is not None:
            return action
    return None
