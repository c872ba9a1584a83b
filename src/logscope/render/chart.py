"""Per-minute request volume chart as a list of draw primitives.

``render_chart`` is a from-scratch redraw every time: it never diffs
against the previous frame. Buckets are spaced evenly along the x-axis by
index, not by time, so a gap of several empty minutes looks the same as
adjacent minutes. The y-axis runs to ``max(1, max count)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from ..core.models import AggregateSnapshot

Point = tuple[float, float]

EMPTY_CHART_TEXT = "No telemetry data"


@dataclass(frozen=True)
class Surface:
    """Drawing area in CSS pixels plus the device pixel ratio."""

    width: float
    height: float = 180.0
    device_pixel_ratio: float = 1.0


@dataclass(frozen=True)
class Padding:
    top: float
    right: float
    bottom: float
    left: float

    def scaled(self, factor: float) -> Padding:
        return Padding(
            self.top * factor, self.right * factor, self.bottom * factor, self.left * factor
        )


@dataclass(frozen=True)
class ChartStyle:
    padding: Padding = Padding(top=14, right=16, bottom=18, left=16)
    grid_lines: int = 4
    grid_color: str = "#e1e8f2"
    grid_width: float = 1.0
    line_color: str = "#0d63d6"
    line_width: float = 2.0
    dot_radius: float = 2.5
    fill_stops: tuple[tuple[float, str], ...] = (
        (0.0, "rgba(13, 99, 214, 0.26)"),
        (1.0, "rgba(13, 99, 214, 0.02)"),
    )
    text_color: str = "#64748b"
    font_size: float = 12.0
    text_offset: float = 14.0


DEFAULT_STYLE = ChartStyle()


@dataclass(frozen=True)
class Clear:
    width: int
    height: int


@dataclass(frozen=True)
class GridLine:
    x0: float
    x1: float
    y: float
    color: str
    width: float


@dataclass(frozen=True)
class Gradient:
    y0: float
    y1: float
    stops: tuple[tuple[float, str], ...]


@dataclass(frozen=True)
class FillPath:
    points: tuple[Point, ...]
    gradient: Gradient


@dataclass(frozen=True)
class StrokePath:
    points: tuple[Point, ...]
    color: str
    width: float


@dataclass(frozen=True)
class Dot:
    x: float
    y: float
    radius: float
    color: str


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    color: str
    font_size: float


Primitive = Union[Clear, GridLine, FillPath, StrokePath, Dot, Text]


def canvas_size(surface: Surface) -> tuple[int, int]:
    dpr = surface.device_pixel_ratio or 1.0
    width = max(1, math.floor(surface.width * dpr))
    height = max(1, math.floor(surface.height * dpr))
    return width, height


def plot_points(
    buckets: tuple[tuple[str, int], ...], width: int, height: int, padding: Padding
) -> tuple[Point, ...]:
    inner_width = width - padding.left - padding.right
    inner_height = height - padding.top - padding.bottom
    max_value = max([1, *(count for _, count in buckets)])
    x_step = inner_width / (len(buckets) - 1) if len(buckets) > 1 else inner_width
    return tuple(
        (
            padding.left + x_step * index,
            padding.top + inner_height - (count / max_value) * inner_height,
        )
        for index, (_, count) in enumerate(buckets)
    )


def render_chart(
    snapshot: AggregateSnapshot, surface: Surface, style: ChartStyle = DEFAULT_STYLE
) -> list[Primitive]:
    dpr = surface.device_pixel_ratio or 1.0
    width, height = canvas_size(surface)
    pad = style.padding.scaled(dpr)
    primitives: list[Primitive] = [Clear(width, height)]

    if not snapshot.buckets:
        primitives.append(
            Text(
                x=pad.left,
                y=pad.top + style.text_offset * dpr,
                text=EMPTY_CHART_TEXT,
                color=style.text_color,
                font_size=style.font_size * dpr,
            )
        )
        return primitives

    inner_height = height - pad.top - pad.bottom
    for line in range(style.grid_lines + 1):
        y = pad.top + (inner_height / style.grid_lines) * line
        primitives.append(
            GridLine(
                x0=pad.left,
                x1=width - pad.right,
                y=y,
                color=style.grid_color,
                width=style.grid_width,
            )
        )

    coords = plot_points(snapshot.buckets, width, height, pad)
    baseline = height - pad.bottom
    area = (*coords, (coords[-1][0], baseline), (coords[0][0], baseline))
    primitives.append(
        FillPath(points=area, gradient=Gradient(y0=pad.top, y1=baseline, stops=style.fill_stops))
    )
    primitives.append(
        StrokePath(points=coords, color=style.line_color, width=style.line_width * dpr)
    )
    primitives.extend(
        Dot(x=x, y=y, radius=style.dot_radius * dpr, color=style.line_color) for x, y in coords
    )
    return primitives


__all__ = [
    "DEFAULT_STYLE",
    "EMPTY_CHART_TEXT",
    "ChartStyle",
    "Clear",
    "Dot",
    "FillPath",
    "Gradient",
    "GridLine",
    "Padding",
    "Primitive",
    "StrokePath",
    "Surface",
    "Text",
    "canvas_size",
    "plot_points",
    "render_chart",
]
