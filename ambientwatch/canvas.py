"""Character-cell canvas and ANSI helpers for terminal rendering."""

from __future__ import annotations

import re
from typing import Optional

# ANSI escape codes
CLEAR_SCREEN = "\033[2J\033[H"
BOLD = "\033[1m"
DIM = "\033[2m"
REVERSE = "\033[7m"
RESET = "\033[0m"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

_ANSI_RE = re.compile(r"\033\[[0-9;?]*[A-Za-z]")

RGB = tuple[int, int, int]

PALETTE: dict[str, RGB] = {
    "text": (232, 238, 255),
    "muted": (105, 115, 148),
    "border": (42, 48, 66),
    "accent": (255, 92, 0),
    "pm2p5": (56, 145, 255),
    "co2": (255, 158, 40),
    "temperature": (255, 75, 90),
    "humidity": (40, 200, 210),
    "voc_index": (165, 85, 240),
    "nox_index": (255, 205, 60),
    "pm1p0": (85, 210, 150),
    "ok": (65, 196, 108),
    "warn": (255, 198, 52),
    "danger": (255, 72, 72),
}


def fg(color: str | RGB) -> str:
    """Truecolor foreground escape for a palette name or RGB tuple."""
    r, g, b = PALETTE[color] if isinstance(color, str) else color
    return f"\033[38;2;{r};{g};{b}m"


def visible_len(s: str) -> int:
    """Length of a string without ANSI escape codes."""
    return len(_ANSI_RE.sub("", s))


def pad(s: str, width: int) -> str:
    """Right-pad an ANSI-colored string to a visible width."""
    return s + " " * max(width - visible_len(s), 0)


def center(s: str, width: int) -> str:
    """Center an ANSI-colored string within a visible width."""
    gap = max(width - visible_len(s), 0)
    left = gap // 2
    return " " * left + s + " " * (gap - left)


class Canvas:
    """Fixed-size grid of styled character cells.

    Coordinates are (column, row) with the origin at the top-left. Writes
    outside the grid are ignored.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells: list[list[tuple[str, str]]] = [
            [(" ", "")] * width for _ in range(height)
        ]

    def inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def put(
        self,
        x: int,
        y: int,
        char: str,
        style: str = "",
        only_over: Optional[str] = None,
    ) -> None:
        """Set one cell.

        With ``only_over`` the cell is written only if it currently holds one
        of those characters.
        """
        if not self.inside(x, y):
            return
        if only_over is not None and self._cells[y][x][0] not in only_over:
            return
        self._cells[y][x] = (char, style)

    def text(self, x: int, y: int, s: str, style: str = "") -> None:
        for i, ch in enumerate(s):
            self.put(x + i, y, ch, style)

    def lines(self) -> list[str]:
        """Render rows to strings, emitting escapes only where styles change."""
        result = []
        for row in self._cells:
            parts: list[str] = []
            current = ""
            for char, style in row:
                if style != current:
                    if current:
                        parts.append(RESET)
                    if style:
                        parts.append(style)
                    current = style
                parts.append(char)
            if current:
                parts.append(RESET)
            result.append("".join(parts))
        return result
