"""Table projection of a batch of log entries."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import QUERY_LIMIT, LogEntry

PLACEHOLDER = "-"
MAX_ROWS = QUERY_LIMIT
COLUMNS: tuple[str, ...] = (
    "Time",
    "Method",
    "Path",
    "Status",
    "Duration",
    "Namespace",
    "Pod",
    "Node",
)


@dataclass(frozen=True)
class StatusCell:
    text: str
    badge: str  # "ok", "warn", "err" or "neutral"


@dataclass(frozen=True)
class TableRow:
    time: str
    method: str
    path: str
    status: StatusCell
    duration: str
    namespace: str
    pod: str
    node: str

    def cells(self) -> tuple[str, ...]:
        return (
            self.time,
            self.method,
            self.path,
            self.status.text,
            self.duration,
            self.namespace,
            self.pod,
            self.node,
        )


@dataclass(frozen=True)
class TableView:
    columns: tuple[str, ...]
    rows: tuple[TableRow, ...]


def status_badge(status: int | None) -> str:
    if not status:
        return "neutral"
    if status >= 500:
        return "err"
    if status >= 400:
        return "warn"
    return "ok"


def format_status(status: int | None) -> StatusCell:
    text = str(status) if status else PLACEHOLDER
    return StatusCell(text=text, badge=status_badge(status))


def format_duration(duration_ns: float | None) -> str:
    if duration_ns is None:
        return PLACEHOLDER
    try:
        ms = duration_ns / 1e6
    except OverflowError:
        return PLACEHOLDER
    if not math.isfinite(ms):
        return PLACEHOLDER
    if ms >= 1000:
        return f"{ms / 1000:.2f} s"
    return f"{ms:.1f} ms"


def format_time(entry: LogEntry) -> str:
    if entry.timestamp is None:
        return PLACEHOLDER
    try:
        return entry.timestamp.astimezone().strftime("%X")
    except (OverflowError, ValueError, OSError):
        return PLACEHOLDER


def _text(value: str | None) -> str:
    return value if value else PLACEHOLDER


def render_row(entry: LogEntry) -> TableRow:
    return TableRow(
        time=format_time(entry),
        method=_text(entry.method),
        path=_text(entry.path),
        status=format_status(entry.status),
        duration=format_duration(entry.duration_ns),
        namespace=_text(entry.namespace),
        pod=_text(entry.pod),
        node=_text(entry.node),
    )


def render_table(entries: Sequence[LogEntry]) -> TableView:
    # The query already asks for at most MAX_ROWS.
    rows = tuple(render_row(entry) for entry in list(entries)[:MAX_ROWS])
    return TableView(columns=COLUMNS, rows=rows)


__all__ = [
    "COLUMNS",
    "MAX_ROWS",
    "PLACEHOLDER",
    "StatusCell",
    "TableRow",
    "TableView",
    "format_duration",
    "format_status",
    "format_time",
    "render_row",
    "render_table",
    "status_badge",
]
