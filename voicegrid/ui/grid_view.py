#!/usr/bin/env python3
"""Pygame rendering of the voice grid.

Draws the 12x2 grid of 3x3 sub-cells, the voice status lines and the
results page. Layout math lives in GridLayout so pointer hit-testing works
without a display.
"""

import pygame

from voicegrid.grid.model import MAIN_COLS, MAIN_COUNT, MAIN_ROWS, SUB_COLS, SUB_ROWS, GridState
from voicegrid.grid.results import results_lines
from voicegrid.ui.colors import dim_color, palette_from_config
from voicegrid.voice.session import VoiceSession

HINT = 'Say "select cell number 5", "select sub cell 4, 5 and 6", "next cell", "toggle".'

# pygame key code -> navigation key name
KEY_NAMES = {
    pygame.K_RIGHT: "right",
    pygame.K_LEFT: "left",
    pygame.K_DOWN: "down",
    pygame.K_UP: "up",
    pygame.K_RETURN: "enter",
    pygame.K_KP_ENTER: "enter",
    pygame.K_SPACE: "space",
}


class GridLayout:
    """Pixel geometry of the grid area."""

    def __init__(
        self,
        width: int,
        height: int,
        top: int = 110,
        margin: int = 20,
        gap: int = 8,
        sub_gap: int = 3,
    ):
        self.origin_x = margin
        self.origin_y = top
        self.gap = gap
        self.sub_gap = sub_gap

        usable_w = width - 2 * margin - (MAIN_COLS - 1) * gap
        usable_h = height - top - margin - (MAIN_ROWS - 1) * gap
        self.cell_size = max(SUB_COLS, min(usable_w // MAIN_COLS, usable_h // MAIN_ROWS))
        self.sub_size = (self.cell_size - (SUB_COLS + 1) * sub_gap) // SUB_COLS

    def cell_rect(self, cell_index: int) -> pygame.Rect:
        row, col = divmod(cell_index, MAIN_COLS)
        x = self.origin_x + col * (self.cell_size + self.gap)
        y = self.origin_y + row * (self.cell_size + self.gap)
        return pygame.Rect(x, y, self.cell_size, self.cell_size)

    def sub_rect(self, cell_index: int, sub_index: int) -> pygame.Rect:
        cell = self.cell_rect(cell_index)
        row, col = divmod(sub_index, SUB_COLS)
        x = cell.x + self.sub_gap + col * (self.sub_size + self.sub_gap)
        y = cell.y + self.sub_gap + row * (self.sub_size + self.sub_gap)
        return pygame.Rect(x, y, self.sub_size, self.sub_size)

    def hit_test(self, pos: tuple[int, int]) -> tuple[int, int | None] | None:
        """Find what is under a point.

        Returns:
            (cell_index, sub_index) for a sub-cell, (cell_index, None) for the
            cell border area, or None outside the grid
        """
        for cell_index in range(MAIN_COUNT):
            if not self.cell_rect(cell_index).collidepoint(pos):
                continue
            for sub_index in range(SUB_ROWS * SUB_COLS):
                if self.sub_rect(cell_index, sub_index).collidepoint(pos):
                    return cell_index, sub_index
            return cell_index, None
        return None


class GridView:
    """Draws the grid page and the results page."""

    def __init__(self, config: dict, size: tuple[int, int]):
        self.palette = palette_from_config(config)
        self.layout = GridLayout(*size)
        if not pygame.font.get_init():
            pygame.font.init()
        self.title_font = pygame.font.SysFont("helvetica", 28, bold=True)
        self.font = pygame.font.SysFont("helvetica", 18)
        self.mono_font = pygame.font.SysFont("courier", 16)

    def draw(self, surface: pygame.Surface, session: VoiceSession, show_results: bool = False):
        surface.fill(self.palette["background"])
        if show_results:
            self.draw_results(surface, session.state)
        else:
            self.draw_header(surface, session)
            self.draw_grid(surface, session.state, session.command_flash)

    def draw_header(self, surface: pygame.Surface, session: VoiceSession):
        primary = self.palette["primary"]
        secondary = self.palette["secondary"]
        error = self.palette["error"]

        self._blit(surface, self.title_font, "Voice Data Grid", primary, (20, 12))
        self._blit(surface, self.font, HINT, dim_color(secondary, 0.7), (20, 46))

        if not session.is_supported:
            status = session.error or "Voice input is not supported. Use --console."
            lines = [(status, error)]
        else:
            listening = "Listening (press V to stop)" if session.is_listening else "Press V to start voice input"
            lines = [(listening, secondary)]
            if session.last_recognized:
                lines.append((f"Heard: {session.last_recognized}", secondary))
            for message in (session.error, session.unrecognized_message, session.cell_not_found_message):
                if message:
                    lines.append((message, error))

        x = 20
        for text, color in lines[:3]:
            rect = self._blit(surface, self.font, text, color, (x, 74))
            x = rect.right + 24

    def draw_grid(self, surface: pygame.Surface, state: GridState, flash: bool = False):
        focus = state.focus
        primary = self.palette["primary"]
        dim = self.palette["dim"]
        on = self.palette["on"]
        secondary = self.palette["secondary"]

        for cell_index in range(MAIN_COUNT):
            is_active = cell_index == focus.active_cell_index
            cell_rect = self.layout.cell_rect(cell_index)
            border = primary if is_active else dim
            if is_active and flash:
                pygame.draw.rect(surface, dim_color(primary, 0.35), cell_rect)
            pygame.draw.rect(surface, border, cell_rect, 3 if is_active else 1)

            for sub_index, value in enumerate(state.cells[cell_index]):
                sub_rect = self.layout.sub_rect(cell_index, sub_index)
                pygame.draw.rect(surface, on if value else dim_color(dim, 0.6), sub_rect)
                if is_active and sub_index in focus.selected_sub_indices:
                    pygame.draw.rect(surface, secondary, sub_rect, 2)
                if is_active and sub_index == focus.focused_sub_index:
                    pygame.draw.rect(surface, primary, sub_rect.inflate(2, 2), 3)

            label_pos = (cell_rect.x + 2, cell_rect.bottom + 1)
            self._blit(surface, self.mono_font, str(cell_index + 1), dim_color(secondary, 0.5), label_pos)

    def draw_results(self, surface: pygame.Surface, state: GridState):
        self._blit(surface, self.title_font, "Results", self.palette["primary"], (20, 12))
        self._blit(
            surface, self.font, "Press R to go back to the grid", self.palette["secondary"], (20, 46)
        )

        # Two columns of table rows so all 24 cells fit
        lines = results_lines(state)
        header, table = lines[:3], lines[3:]
        y = 80
        for line in header:
            self._blit(surface, self.mono_font, line, self.palette["secondary"], (20, y))
            y += 18
        column_header, rows = table[0], table[1:]
        half = (len(rows) + 1) // 2
        for column, chunk in enumerate((rows[:half], rows[half:])):
            x = 20 + column * 420
            row_y = y
            self._blit(surface, self.mono_font, column_header, self.palette["primary"], (x, row_y))
            for line in chunk:
                row_y += 18
                self._blit(surface, self.mono_font, line, self.palette["secondary"], (x, row_y))

    @staticmethod
    def _blit(surface, font, text, color, pos) -> pygame.Rect:
        rendered = font.render(text, True, color)
        return surface.blit(rendered, pos)
