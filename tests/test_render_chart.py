from __future__ import annotations

import pytest

from logscope.core.models import AggregateSnapshot
from logscope.render.chart import (
    EMPTY_CHART_TEXT,
    Clear,
    Dot,
    FillPath,
    GridLine,
    StrokePath,
    Surface,
    Text,
    canvas_size,
    render_chart,
)


def _snapshot(*counts: int) -> AggregateSnapshot:
    buckets = tuple((f"2024-05-01T10:{index:02d}:00.000Z", count) for index, count in enumerate(counts))
    return AggregateSnapshot(count=sum(counts), buckets=buckets)


def _of_type(primitives: list, kind: type) -> list:
    return [primitive for primitive in primitives if isinstance(primitive, kind)]


def test_empty_snapshot_draws_placeholder_text() -> None:
    primitives = render_chart(AggregateSnapshot(), Surface(width=400))
    assert primitives[0] == Clear(400, 180)
    texts = _of_type(primitives, Text)
    assert len(texts) == 1
    assert texts[0].text == EMPTY_CHART_TEXT
    assert not _of_type(primitives, StrokePath)


def test_canvas_scales_with_device_pixel_ratio() -> None:
    assert canvas_size(Surface(width=400.6, height=180, device_pixel_ratio=2)) == (801, 360)
    assert canvas_size(Surface(width=0, height=0)) == (1, 1)
    primitives = render_chart(_snapshot(1, 2), Surface(width=400, device_pixel_ratio=2))
    assert primitives[0] == Clear(800, 360)
    stroke = _of_type(primitives, StrokePath)[0]
    assert stroke.width == 4.0
    assert _of_type(primitives, Dot)[0].radius == 5.0


def test_points_are_evenly_spaced_and_scaled_to_max() -> None:
    primitives = render_chart(_snapshot(2, 4, 0), Surface(width=232, height=132))
    # inner area: 232 - 16 - 16 = 200 wide, 132 - 14 - 18 = 100 tall.
    stroke = _of_type(primitives, StrokePath)[0]
    assert stroke.points == ((16.0, 64.0), (116.0, 14.0), (216.0, 114.0))
    dots = _of_type(primitives, Dot)
    assert [(dot.x, dot.y) for dot in dots] == list(stroke.points)


def test_single_bucket_sits_at_left_padding() -> None:
    primitives = render_chart(_snapshot(3), Surface(width=232, height=132))
    stroke = _of_type(primitives, StrokePath)[0]
    assert stroke.points == ((16.0, 14.0),)


def test_all_zero_counts_do_not_divide_by_zero() -> None:
    primitives = render_chart(_snapshot(0, 0), Surface(width=232, height=132))
    stroke = _of_type(primitives, StrokePath)[0]
    assert all(y == pytest.approx(114.0) for _, y in stroke.points)


def test_fill_path_closes_to_baseline_and_grid_has_five_lines() -> None:
    primitives = render_chart(_snapshot(1, 3), Surface(width=232, height=132))
    fill = _of_type(primitives, FillPath)[0]
    assert fill.points[-2:] == ((216.0, 114.0), (16.0, 114.0))
    assert fill.gradient.y0 == 14.0
    assert fill.gradient.y1 == 114.0
    grid = _of_type(primitives, GridLine)
    assert [line.y for line in grid] == [14.0, 39.0, 64.0, 89.0, 114.0]


def test_redraw_is_deterministic() -> None:
    snapshot = _snapshot(5, 1, 7)
    surface = Surface(width=300, device_pixel_ratio=1.5)
    assert render_chart(snapshot, surface) == render_chart(snapshot, surface)
