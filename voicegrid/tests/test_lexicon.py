#!/usr/bin/env python3
"""Tests for spoken number and position resolvers."""

import pytest

from voicegrid.grid.lexicon import normalize, parse_cell_number, parse_number_word, parse_sub_position


def test_normalize():
    assert normalize("  Select   CELL\t5 ") == "select cell 5"
    assert normalize("") == ""


@pytest.mark.parametrize(
    "token,value", [("1", 1), ("9", 9), ("one", 1), ("Five", 5), ("nine", 9), ("0", None), ("ten", None)]
)
def test_parse_number_word(token, value):
    assert parse_number_word(token) == value


class TestSubPosition:
    @pytest.mark.parametrize(
        "text,index",
        [
            ("top left", 0),
            ("top center", 1),
            ("top right", 2),
            ("middle left", 3),
            ("center", 4),
            ("middle right", 5),
            ("bottom left", 6),
            ("bottom center", 7),
            ("bottom right", 8),
            ("left", 0),
            ("right", 2),
            ("middle", 4),
        ],
    )
    def test_phrase_table(self, text, index):
        assert parse_sub_position(text) == index

    def test_digit_wins_over_phrase(self):
        assert parse_sub_position("select 3 top left") == 2

    def test_first_digit_wins(self):
        assert parse_sub_position("7 or 2") == 6

    def test_case_and_whitespace(self):
        assert parse_sub_position("  BOTTOM    Right ") == 8

    @pytest.mark.parametrize("text", ["", "nothing here", "10", "0"])
    def test_no_match(self, text):
        assert parse_sub_position(text) is None


class TestCellNumber:
    @pytest.mark.parametrize(
        "text,index",
        [
            ("7", 6),
            ("go to cell 5", 4),
            ("cell 24", 23),
            ("  Block   3 ", 2),
            ("go to 1", 0),
            ("row 1 col 12", 11),
            ("row 2 column 1", 12),
        ],
    )
    def test_resolves(self, text, index):
        assert parse_cell_number(text) == index

    @pytest.mark.parametrize("text", ["cell 25", "0", "row 2 col 13", "row 3 col 1", "go to cell", ""])
    def test_rejects_out_of_range(self, text):
        """Out-of-range numbers are rejected, never clamped."""
        assert parse_cell_number(text) is None
