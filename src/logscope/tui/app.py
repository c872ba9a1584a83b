"""Textual terminal host for the logscope viewer."""

from __future__ import annotations

import logging
from datetime import timedelta

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static, Switch

from ..config import ViewerConfig
from ..controller import LogSource, RefreshController, Trigger
from ..core.gateway import FetchGateway
from ..core.models import ViewState
from ..core.query import FilterFields, TimeRange
from ..render.chart import Surface
from ..render.table import COLUMNS, TableView
from ..render.text_canvas import TERMINAL_STYLE, rasterize
from ..render.view import BANNER_TEXT, PresentationCommands

logger = logging.getLogger(__name__)

TIME_FIELDS = ("from", "to")
FILTER_FIELDS = ("method", "status", "namespace", "pod", "path")
BADGE_STYLES = {"err": "bold red", "warn": "yellow", "ok": "green", "neutral": "dim"}
_PANEL_IDS = {"loading": "#loading-state", "empty": "#empty-state", "error": "#error-state"}


class ChartView(Static):
    """Static that reports its own size changes to the controller."""

    def __init__(self, controller: RefreshController, *, id: str | None = None) -> None:
        super().__init__("", id=id)
        self._controller = controller

    def on_resize(self, event: events.Resize) -> None:
        self._controller.resize(Surface(width=event.size.width, height=event.size.height))


class LogscopeApp(App[None]):
    """Poll ``/api/logs`` and show scorecards, a volume chart and the raw rows."""

    CSS = """
    Screen { layout: vertical; }
    #filters { height: auto; }
    #filters Input { width: 1fr; }
    #controls { height: auto; padding: 0 1; }
    #controls Label { padding: 1 1; }
    #last-updated { padding: 1 2; color: #94a3b8; }
    #banner { padding: 0 2; }
    #banner.loading { background: #1e3a8a; color: #e5e7eb; }
    #banner.error { background: #7f1d1d; color: #fee2e2; }
    #banner.empty { background: #374151; color: #e5e7eb; }
    #stats { height: 3; }
    #stats Static { width: 1fr; padding: 1 2; }
    #chart { height: 10; color: #60a5fa; }
    #result-meta { padding: 0 2; color: #94a3b8; }
    #error-state { color: #f87171; padding: 1 2; }
    #loading-state, #empty-state { padding: 1 2; color: #94a3b8; }
    """

    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("a", "toggle_auto", "Auto-refresh"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: ViewerConfig,
        filters: FilterFields | None = None,
        time_range: TimeRange | None = None,
        gateway: LogSource | None = None,
    ) -> None:
        super().__init__()
        self.config = config
        if time_range is None:
            time_range = TimeRange(window=timedelta(minutes=config.window_minutes))
        time_range.refresh_auto()
        source = gateway or FetchGateway.from_env(config.base_url, timeout=config.timeout)
        self.controller = RefreshController(
            source,
            self.apply_commands,
            filters=filters,
            time_range=time_range,
            surface=Surface(width=80, height=10),
            chart_style=TERMINAL_STYLE,
            refresh_interval=config.refresh_interval,
        )
        self._written: dict[str, str] = {}
        self._shown_table: TableView | None = None
        self._mounted = False

    def compose(self) -> ComposeResult:
        filters = self.controller.filters
        time_range = self.controller.time_range
        self._written = {"from": time_range.from_text, "to": time_range.to_text}
        yield Header(show_clock=True)
        with Horizontal(id="filters"):
            yield Input(value=time_range.from_text, placeholder="from", id="from")
            yield Input(value=time_range.to_text, placeholder="to", id="to")
            for name in FILTER_FIELDS:
                yield Input(value=getattr(filters, name), placeholder=name, id=name)
        with Horizontal(id="controls"):
            yield Button("Refresh", id="refresh", variant="primary")
            yield Switch(value=self.config.auto_refresh, id="auto-refresh")
            yield Label("Auto-refresh")
            yield Static("", id="last-updated")
        yield Static("", id="banner")
        with Horizontal(id="stats"):
            yield Static("0", id="stat-count")
            yield Static("0.0 ms", id="stat-p95")
            yield Static("0.0%", id="stat-error")
        yield ChartView(self.controller, id="chart")
        yield Static("", id="result-meta")
        yield Static(BANNER_TEXT[ViewState.LOADING], id="loading-state")
        yield Static(BANNER_TEXT[ViewState.EMPTY], id="empty-state")
        yield Static("", id="error-state")
        yield DataTable(id="rows", zebra_stripes=True)
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#rows", DataTable).add_columns(*COLUMNS)
        self._mounted = True
        self.controller.set_auto_refresh(self.config.auto_refresh)
        self.controller.trigger(Trigger.MANUAL)

    def on_unmount(self) -> None:
        self.controller.shutdown()

    def action_refresh(self) -> None:
        self.controller.trigger(Trigger.MANUAL)

    def action_toggle_auto(self) -> None:
        switch = self.query_one("#auto-refresh", Switch)
        switch.value = not switch.value

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "refresh":
            self.controller.trigger(Trigger.MANUAL)

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if event.switch.id == "auto-refresh":
            self.controller.set_auto_refresh(event.value)

    def on_input_changed(self, event: Input.Changed) -> None:
        field_id = event.input.id or ""
        if field_id in TIME_FIELDS:
            if self._written.get(field_id) == event.value:
                return
            self.controller.mark_manual_range()
            if field_id == "from":
                self.controller.time_range.from_text = event.value
            else:
                self.controller.time_range.to_text = event.value
        elif field_id in FILTER_FIELDS:
            setattr(self.controller.filters, field_id, event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if (event.input.id or "") in FILTER_FIELDS:
            self.controller.trigger(Trigger.ENTER_KEY)

    def _sync_time_fields(self) -> None:
        time_range = self.controller.time_range
        for field_id, text in (("from", time_range.from_text), ("to", time_range.to_text)):
            widget = self.query_one(f"#{field_id}", Input)
            if widget.value != text:
                self._written[field_id] = text
                widget.value = text

    def _apply_table(self, table: TableView | None) -> None:
        if table is None or table == self._shown_table:
            return
        rows = self.query_one("#rows", DataTable)
        rows.clear()
        for row in table.rows:
            cells: list[str | Text] = list(row.cells())
            cells[3] = Text(row.status.text, style=BADGE_STYLES.get(row.status.badge, ""))
            rows.add_row(*cells)
        self._shown_table = table

    def apply_commands(self, commands: PresentationCommands) -> None:
        if not self._mounted:
            return
        self._sync_time_fields()
        self.query_one("#refresh", Button).disabled = not commands.refresh_enabled

        banner = self.query_one("#banner", Static)
        banner.remove_class("loading", "error", "empty")
        if commands.banner is None:
            banner.display = False
        else:
            banner.update(commands.banner.text)
            banner.add_class(commands.banner.mode)
            banner.display = True

        self.query_one("#stat-count", Static).update(f"Requests: {commands.scorecards.count}")
        self.query_one("#stat-p95", Static).update(f"p95: {commands.scorecards.p95}")
        self.query_one("#stat-error", Static).update(
            f"Error rate: {commands.scorecards.error_rate}"
        )
        chart = self.query_one("#chart", ChartView)
        chart.update("\n".join(rasterize(commands.chart)))
        self.query_one("#result-meta", Static).update(commands.result_meta)
        if commands.last_updated:
            self.query_one("#last-updated", Static).update(
                f"Last updated {commands.last_updated}"
            )

        for panel, selector in _PANEL_IDS.items():
            self.query_one(selector, Static).display = commands.panel == panel
        if commands.error_text is not None:
            self.query_one("#error-state", Static).update(commands.error_text)
        self.query_one("#rows", DataTable).display = commands.panel == "table"
        self._apply_table(commands.table)


def run_app(
    config: ViewerConfig,
    filters: FilterFields | None = None,
    time_range: TimeRange | None = None,
) -> None:
    """Launch the Textual app against ``config.base_url``."""

    logger.info("Starting viewer against %s", config.base_url)
    LogscopeApp(config, filters=filters, time_range=time_range).run()


__all__ = ["LogscopeApp", "run_app"]
