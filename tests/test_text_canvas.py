from __future__ import annotations

from logscope.core.models import AggregateSnapshot
from logscope.render.chart import Surface, render_chart
from logscope.render.text_canvas import (
    DOT_CHAR,
    FILL_CHAR,
    LINE_CHAR,
    TERMINAL_STYLE,
    TextCanvas,
    rasterize,
)


def test_empty_chart_rasterizes_placeholder_text() -> None:
    primitives = render_chart(AggregateSnapshot(), Surface(width=20, height=6), TERMINAL_STYLE)
    lines = rasterize(primitives)
    assert len(lines) == 6
    assert all(len(line) == 20 for line in lines)
    assert lines[0] == " No telemetry data  "


def test_series_rasterizes_line_fill_and_dots() -> None:
    snapshot = AggregateSnapshot(
        count=3,
        buckets=(("2024-05-01T10:00:00.000Z", 1), ("2024-05-01T10:01:00.000Z", 2)),
    )
    lines = rasterize(render_chart(snapshot, Surface(width=20, height=6), TERMINAL_STYLE))
    assert lines[3][1] == DOT_CHAR
    assert lines[0][19] == DOT_CHAR
    assert any(LINE_CHAR in line for line in lines)
    assert lines[5][10] == FILL_CHAR


def test_canvas_clamps_far_edge_and_drops_negative_writes() -> None:
    canvas = TextCanvas(4, 2)
    canvas.text(2, 0, "abcdef")
    canvas.plot(-3, 0, "y")
    canvas.plot(9, 9, "x")
    assert canvas.lines() == ["  ab", "   x"]
