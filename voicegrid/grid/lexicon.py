#!/usr/bin/env python3
"""Spoken numbers and positions.

Resolves sub-cell positions ("select 5", "top left", "center") and main cell
numbers ("cell 12", "go to block 3", "row 2 column 4") to 0-based indices.
All resolvers are case-insensitive and ignore extra whitespace. Out-of-range
numbers resolve to None rather than being clamped.
"""

import re

from voicegrid.grid.model import MAIN_COLS, MAIN_COUNT, MAIN_ROWS

__all__ = [
    "NUMBER_WORDS",
    "SUB_POSITIONS",
    "normalize",
    "parse_number_word",
    "parse_sub_position",
    "parse_cell_number",
]

_WHITESPACE_RE = re.compile(r"\s+")

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
}

# Checked in order, first substring hit wins. Two-word phrases come before the
# single words they contain ("bottom center" before "center", "middle right"
# before "right").
SUB_POSITIONS: tuple[tuple[str, int], ...] = (
    ("top left", 0),
    ("top center", 1),
    ("top right", 2),
    ("middle left", 3),
    ("middle right", 5),
    ("bottom left", 6),
    ("bottom center", 7),
    ("bottom right", 8),
    ("center", 4),
    ("left", 0),
    ("right", 2),
    ("middle", 4),
)

_SUB_DIGIT_RE = re.compile(r"\b(?:select )?([1-9])\b")

# Numbers directly after "row"/"col"/"column" belong to the row/column form.
_CELL_NUMBER_RE = re.compile(
    r"(?<!row )(?<!col )(?<!column )\b(?:go to )?(?:(?:cell|block) )?(\d{1,2})\b"
)
_ROW_COL_RE = re.compile(r"\brow (\d) col(?:umn)? (\d+)\b")


def normalize(text: str) -> str:
    """Lower-case, collapse whitespace runs to one space and trim.

    Example:
        >>> normalize("  Select   CELL 5 ")
        'select cell 5'
    """
    return _WHITESPACE_RE.sub(" ", text.lower()).strip()


def parse_number_word(token: str) -> int | None:
    """Map a digit 1-9 or a number word one..nine to its value."""
    token = token.strip().lower()
    if len(token) == 1 and token in "123456789":
        return int(token)
    return NUMBER_WORDS.get(token)


def parse_sub_position(text: str) -> int | None:
    """Resolve a sub-cell position to 0..8.

    A lone digit 1-9 wins ("select 5" -> 4); otherwise the first positional
    phrase found anywhere in the text is used.

    Args:
        text: Utterance text (normalized or not)

    Returns:
        Sub-cell index or None
    """
    n = normalize(text)

    match = _SUB_DIGIT_RE.search(n)
    if match:
        return int(match.group(1)) - 1

    for phrase, index in SUB_POSITIONS:
        if phrase in n:
            return index
    return None


def parse_cell_number(text: str) -> int | None:
    """Resolve a main cell reference to 0..23.

    Accepts "go to cell 5", "block 12", a bare "7" and "row 2 column 3".
    Only the first plain number is considered; if it is outside 1..24 the
    row/column form is tried before giving up.

    Args:
        text: Utterance text (normalized or not)

    Returns:
        Cell index or None
    """
    n = normalize(text)

    match = _CELL_NUMBER_RE.search(n)
    if match:
        number = int(match.group(1))
        if 1 <= number <= MAIN_COUNT:
            return number - 1

    match = _ROW_COL_RE.search(n)
    if match:
        row = int(match.group(1))
        col = int(match.group(2))
        if 1 <= row <= MAIN_ROWS and 1 <= col <= MAIN_COLS:
            return (row - 1) * MAIN_COLS + (col - 1)
    return None
