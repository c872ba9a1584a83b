"""Pure projection of the viewer state onto presentation commands.

The host (the Textual app, or a test) executes the returned
:class:`PresentationCommands`; nothing here touches a display.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ..core.models import EMPTY_SNAPSHOT, AggregateSnapshot, LogEntry, ViewState
from .chart import DEFAULT_STYLE, ChartStyle, Primitive, Surface, render_chart
from .table import TableView, render_table

BANNER_TEXT: dict[ViewState, str] = {
    ViewState.LOADING: "Loading telemetry data...",
    ViewState.ERROR: "Last query failed. Check logs and retry.",
    ViewState.EMPTY: "No data found for the selected filters and time range.",
}
DEFAULT_ERROR_TEXT = "Unable to load telemetry data."

_PANELS: dict[ViewState, str] = {
    ViewState.IDLE: "none",
    ViewState.LOADING: "loading",
    ViewState.EMPTY: "empty",
    ViewState.ERROR: "error",
    ViewState.READY: "table",
}


@dataclass(frozen=True)
class ViewModel:
    state: ViewState = ViewState.IDLE
    message: str | None = None
    entries: tuple[LogEntry, ...] = ()
    snapshot: AggregateSnapshot = EMPTY_SNAPSHOT
    surface: Surface = field(default_factory=lambda: Surface(width=640.0))
    last_updated: datetime | None = None
    refresh_enabled: bool = True
    chart_style: ChartStyle = DEFAULT_STYLE


@dataclass(frozen=True)
class Banner:
    mode: str
    text: str


@dataclass(frozen=True)
class Scorecards:
    count: str
    p95: str
    error_rate: str


@dataclass(frozen=True)
class PresentationCommands:
    state: ViewState
    panel: str
    banner: Banner | None
    error_text: str | None
    scorecards: Scorecards
    result_meta: str
    last_updated: str
    refresh_enabled: bool
    table: TableView | None
    chart: list[Primitive]


def render_scorecards(snapshot: AggregateSnapshot) -> Scorecards:
    return Scorecards(
        count=str(snapshot.count),
        p95=f"{snapshot.p95_ms:.1f} ms",
        error_rate=f"{snapshot.error_rate_pct:.1f}%",
    )


def render_banner(state: ViewState) -> Banner | None:
    text = BANNER_TEXT.get(state)
    if text is None:
        return None
    return Banner(mode=state.value, text=text)


def format_last_updated(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.astimezone().strftime("%X")


def render_entries_table(state: ViewState, entries: Sequence[LogEntry]) -> TableView | None:
    if state is ViewState.READY:
        return render_table(entries)
    if state is ViewState.EMPTY:
        return render_table(())
    return None


def render(view_model: ViewModel) -> PresentationCommands:
    state = view_model.state
    error_text = None
    if state is ViewState.ERROR:
        error_text = view_model.message or DEFAULT_ERROR_TEXT
    return PresentationCommands(
        state=state,
        panel=_PANELS[state],
        banner=render_banner(state),
        error_text=error_text,
        scorecards=render_scorecards(view_model.snapshot),
        result_meta=f"{view_model.snapshot.count} entries",
        last_updated=format_last_updated(view_model.last_updated),
        refresh_enabled=view_model.refresh_enabled,
        table=render_entries_table(state, view_model.entries),
        chart=render_chart(view_model.snapshot, view_model.surface, view_model.chart_style),
    )


__all__ = [
    "BANNER_TEXT",
    "Banner",
    "PresentationCommands",
    "Scorecards",
    "ViewModel",
    "render",
    "render_banner",
    "render_scorecards",
]
