"""Rasterize chart primitives onto a character grid for terminal hosts."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .chart import (
    ChartStyle,
    Clear,
    Dot,
    FillPath,
    GridLine,
    Padding,
    Point,
    Primitive,
    StrokePath,
    Text,
)

GRID_CHAR = "·"
FILL_CHAR = "░"
LINE_CHAR = "█"
DOT_CHAR = "●"

# One character cell per device pixel; no room for the canvas paddings.
TERMINAL_STYLE = ChartStyle(
    padding=Padding(top=0, right=1, bottom=0, left=1),
    grid_lines=4,
    line_width=1.0,
    dot_radius=0.0,
    font_size=1.0,
    text_offset=0.0,
)


class TextCanvas:
    def __init__(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self._grid = [[" "] * self.width for _ in range(self.height)]

    def _put(self, col: int, row: int, char: str) -> None:
        if 0 <= row < self.height and 0 <= col < self.width:
            self._grid[row][col] = char

    def clear(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self._grid = [[" "] * self.width for _ in range(self.height)]

    def hline(self, x0: float, x1: float, y: float, char: str) -> None:
        row = min(self.height - 1, math.floor(y))
        for col in range(math.floor(x0), math.ceil(x1)):
            self._put(col, row, char)

    def polyline(self, points: Sequence[Point], char: str) -> None:
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            steps = max(1, math.ceil(max(abs(x1 - x0), abs(y1 - y0)) * 2))
            for step in range(steps + 1):
                t = step / steps
                self.plot(x0 + (x1 - x0) * t, y0 + (y1 - y0) * t, char)
        if len(points) == 1:
            self.plot(points[0][0], points[0][1], char)

    def polygon(self, points: Sequence[Point], char: str) -> None:
        if len(points) < 3:
            return
        for row in range(self.height):
            for col in range(self.width):
                if _contains(points, col + 0.5, row + 0.5):
                    self._put(col, row, char)

    def plot(self, x: float, y: float, char: str) -> None:
        col = min(self.width - 1, math.floor(x))
        row = min(self.height - 1, math.floor(y))
        self._put(col, row, char)

    def text(self, x: float, y: float, text: str) -> None:
        row = min(self.height - 1, math.floor(y))
        for offset, char in enumerate(text):
            self._put(math.floor(x) + offset, row, char)

    def lines(self) -> list[str]:
        return ["".join(row) for row in self._grid]


def _contains(points: Sequence[Point], x: float, y: float) -> bool:
    """Even-odd point-in-polygon test."""

    inside = False
    count = len(points)
    for index in range(count):
        x0, y0 = points[index]
        x1, y1 = points[(index + 1) % count]
        if (y0 > y) != (y1 > y):
            crossing = x0 + (y - y0) * (x1 - x0) / (y1 - y0)
            if x < crossing:
                inside = not inside
    return inside


def rasterize(primitives: Iterable[Primitive], width: int = 1, height: int = 1) -> list[str]:
    canvas = TextCanvas(width, height)
    for primitive in primitives:
        if isinstance(primitive, Clear):
            canvas.clear(primitive.width, primitive.height)
        elif isinstance(primitive, GridLine):
            canvas.hline(primitive.x0, primitive.x1, primitive.y, GRID_CHAR)
        elif isinstance(primitive, FillPath):
            canvas.polygon(primitive.points, FILL_CHAR)
        elif isinstance(primitive, StrokePath):
            canvas.polyline(primitive.points, LINE_CHAR)
        elif isinstance(primitive, Dot):
            canvas.plot(primitive.x, primitive.y, DOT_CHAR)
        elif isinstance(primitive, Text):
            canvas.text(primitive.x, primitive.y, primitive.text)
    return canvas.lines()


__all__ = ["TERMINAL_STYLE", "TextCanvas", "rasterize"]
