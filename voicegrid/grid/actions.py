#!/usr/bin/env python3
"""Grid actions produced by the voice command interpreter.

Every action is a small frozen dataclass; the union of them is ``Action``.
"No action" is represented by ``None``.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Union

from voicegrid.grid.model import MAIN_COUNT, SUB_PER_CELL


class ActionType(str, Enum):
    """Action type constants.

    Inherits from str so payloads and logs carry plain names.
    """

    NEXT_CELL = "next_cell"
    PREV_CELL = "prev_cell"
    GO_TO_CELL = "go_to_cell"
    CELL_NOT_FOUND = "cell_not_found"
    SELECT_SUB = "select_sub"
    SELECT_SUB_CELLS = "select_sub_cells"
    APPLY_TO_SUB = "apply_to_sub"
    TOGGLE = "toggle"
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"

    def __str__(self) -> str:
        return self.value


class SwitchAction(str, Enum):
    """What to do to a sub-cell."""

    TOGGLE = "toggle"
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"

    def __str__(self) -> str:
        return self.value

    def apply(self, value: bool) -> bool:
        """Compute the new value of a sub-cell currently set to ``value``."""
        if self is SwitchAction.TOGGLE:
            return not value
        return self is SwitchAction.TURN_ON


def _check_range(name: str, value: int, upper: int):
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < upper:
        raise ValueError(f"{name} must be an int in 0..{upper - 1}, got {value!r}")


@dataclass(frozen=True)
class NextCell:
    type: ClassVar[ActionType] = ActionType.NEXT_CELL


@dataclass(frozen=True)
class PrevCell:
    type: ClassVar[ActionType] = ActionType.PREV_CELL


@dataclass(frozen=True)
class GoToCell:
    index: int
    type: ClassVar[ActionType] = ActionType.GO_TO_CELL

    def __post_init__(self):
        _check_range("index", self.index, MAIN_COUNT)


@dataclass(frozen=True)
class CellNotFound:
    """Navigation target outside 1..24.

    ``requested`` is the raw spoken (1-based) number, kept for user feedback.
    """

    requested: int
    type: ClassVar[ActionType] = ActionType.CELL_NOT_FOUND

    def __post_init__(self):
        if 1 <= self.requested <= MAIN_COUNT:
            raise ValueError(f"cell {self.requested} exists; use GoToCell")


@dataclass(frozen=True)
class SelectSub:
    index: int
    type: ClassVar[ActionType] = ActionType.SELECT_SUB

    def __post_init__(self):
        _check_range("index", self.index, SUB_PER_CELL)


@dataclass(frozen=True)
class SelectSubCells:
    indices: tuple[int, ...]
    type: ClassVar[ActionType] = ActionType.SELECT_SUB_CELLS

    def __post_init__(self):
        for index in self.indices:
            _check_range("indices", index, SUB_PER_CELL)
        object.__setattr__(self, "indices", tuple(sorted(set(self.indices))))


@dataclass(frozen=True)
class ApplyToSub:
    """Mutate one sub-cell of the active cell regardless of focus."""

    sub_index: int
    action: SwitchAction
    type: ClassVar[ActionType] = ActionType.APPLY_TO_SUB

    def __post_init__(self):
        _check_range("sub_index", self.sub_index, SUB_PER_CELL)
        object.__setattr__(self, "action", SwitchAction(self.action))


# Focus-relative switches: the focused sub-cell, or the whole active cell when
# nothing is focused.
@dataclass(frozen=True)
class Toggle:
    type: ClassVar[ActionType] = ActionType.TOGGLE
    switch: ClassVar[SwitchAction] = SwitchAction.TOGGLE


@dataclass(frozen=True)
class TurnOn:
    type: ClassVar[ActionType] = ActionType.TURN_ON
    switch: ClassVar[SwitchAction] = SwitchAction.TURN_ON


@dataclass(frozen=True)
class TurnOff:
    type: ClassVar[ActionType] = ActionType.TURN_OFF
    switch: ClassVar[SwitchAction] = SwitchAction.TURN_OFF


Action = Union[
    NextCell,
    PrevCell,
    GoToCell,
    CellNotFound,
    SelectSub,
    SelectSubCells,
    ApplyToSub,
    Toggle,
    TurnOn,
    TurnOff,
]


def action_to_payload(action: Action) -> dict[str, Any]:
    """Flatten an action into a JSON-friendly dict for events and logs.

    Example:
        >>> action_to_payload(GoToCell(4))
        {'type': 'go_to_cell', 'index': 4}
    """
    payload: dict[str, Any] = {"type": action.type.value}
    for f in fields(action):
        value = getattr(action, f.name)
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        payload[f.name] = value
    return payload


__all__ = [
    "Action",
    "ActionType",
    "SwitchAction",
    "NextCell",
    "PrevCell",
    "GoToCell",
    "CellNotFound",
    "SelectSub",
    "SelectSubCells",
    "ApplyToSub",
    "Toggle",
    "TurnOn",
    "TurnOff",
    "action_to_payload",
]
