#!/usr/bin/env python3
"""Tests for grid layout geometry and color parsing (no display needed)."""

import pytest

from voicegrid.ui.colors import dim_color, palette_from_config, parse_color
from voicegrid.ui.grid_view import GridLayout


class TestGridLayout:
    def setup_method(self):
        self.layout = GridLayout(1280, 520)

    def test_cell_geometry(self):
        assert self.layout.cell_size == 96
        assert tuple(self.layout.cell_rect(0)) == (20, 110, 96, 96)
        # Cell 14 (index 13) is second row, second column
        assert tuple(self.layout.cell_rect(13)) == (124, 214, 96, 96)

    def test_every_sub_cell_hit(self):
        for cell_index in range(24):
            for sub_index in range(9):
                center = self.layout.sub_rect(cell_index, sub_index).center
                assert self.layout.hit_test(center) == (cell_index, sub_index)

    def test_cell_border_hit(self):
        assert self.layout.hit_test((21, 111)) == (0, None)

    @pytest.mark.parametrize("pos", [(5, 5), (118, 150), (1270, 500)])
    def test_miss(self, pos):
        assert self.layout.hit_test(pos) is None


class TestColors:
    def test_parse_hex(self):
        assert parse_color("#2C405B") == (44, 64, 91)
        assert parse_color("ffffff") == (255, 255, 255)

    def test_parse_list(self):
        assert parse_color([255, 20, 147]) == (255, 20, 147)

    def test_invalid_hex(self):
        with pytest.raises(ValueError):
            parse_color("#fff")

    def test_dim(self):
        assert dim_color((255, 255, 255), 0.5) == (127, 127, 127)

    def test_palette(self):
        palette = palette_from_config({"colors": {"on": "#3FB950", "background": [0, 0, 0]}})
        assert palette == {"on": (63, 185, 80), "background": (0, 0, 0)}
