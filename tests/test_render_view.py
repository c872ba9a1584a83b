from __future__ import annotations

from datetime import UTC, datetime

from logscope.core.aggregate import aggregate
from logscope.core.models import LogEntry, ViewState
from logscope.render.chart import StrokePath, Surface, Text
from logscope.render.view import BANNER_TEXT, DEFAULT_ERROR_TEXT, ViewModel, render

ENTRIES = (
    LogEntry.from_payload(
        {"timestamp": "2024-05-01T10:00:03Z", "status": 200, "duration_ns": 10_000_000}
    ),
    LogEntry.from_payload(
        {"timestamp": "2024-05-01T10:01:10Z", "status": 500, "duration_ns": 20_000_000}
    ),
)


def test_ready_view_shows_table_scorecards_and_chart() -> None:
    commands = render(
        ViewModel(
            state=ViewState.READY,
            entries=ENTRIES,
            snapshot=aggregate(ENTRIES),
            surface=Surface(width=300),
            last_updated=datetime(2024, 5, 1, 10, 2, 0, tzinfo=UTC),
        )
    )
    assert commands.panel == "table"
    assert commands.banner is None
    assert commands.error_text is None
    assert commands.scorecards.count == "2"
    assert commands.scorecards.p95 == "20.0 ms"
    assert commands.scorecards.error_rate == "50.0%"
    assert commands.result_meta == "2 entries"
    assert commands.last_updated == datetime(2024, 5, 1, 10, 2, tzinfo=UTC).astimezone().strftime(
        "%X"
    )
    assert commands.table is not None and len(commands.table.rows) == 2
    assert any(isinstance(primitive, StrokePath) for primitive in commands.chart)


def test_loading_view_disables_refresh_and_hides_table() -> None:
    commands = render(ViewModel(state=ViewState.LOADING, refresh_enabled=False))
    assert commands.panel == "loading"
    assert commands.banner is not None
    assert commands.banner.mode == "loading"
    assert commands.banner.text == BANNER_TEXT[ViewState.LOADING]
    assert commands.refresh_enabled is False
    assert commands.table is None


def test_empty_view_clears_rows_and_draws_placeholder_chart() -> None:
    commands = render(ViewModel(state=ViewState.EMPTY))
    assert commands.panel == "empty"
    assert commands.banner is not None and commands.banner.mode == "empty"
    assert commands.table is not None and commands.table.rows == ()
    assert commands.scorecards.p95 == "0.0 ms"
    assert commands.scorecards.error_rate == "0.0%"
    assert commands.result_meta == "0 entries"
    assert any(isinstance(primitive, Text) for primitive in commands.chart)


def test_error_view_carries_message() -> None:
    commands = render(ViewModel(state=ViewState.ERROR, message="Query failed (HTTP 503)."))
    assert commands.panel == "error"
    assert commands.error_text == "Query failed (HTTP 503)."
    assert commands.banner is not None and commands.banner.mode == "error"
    assert commands.table is None
    assert render(ViewModel(state=ViewState.ERROR)).error_text == DEFAULT_ERROR_TEXT


def test_idle_view_has_no_banner_or_timestamp() -> None:
    commands = render(ViewModel())
    assert commands.panel == "none"
    assert commands.banner is None
    assert commands.last_updated == ""
