"""Turn the viewer's filter and time-range fields into a :class:`QuerySpec`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..contracts.error import QueryInputError
from .models import QUERY_LIMIT, QuerySpec, parse_instant

DEFAULT_WINDOW = timedelta(minutes=15)


def format_local_field(value: datetime) -> str:
    """Local wall-clock text for a time field (``YYYY-MM-DDTHH:MM:SS``)."""

    return value.astimezone().strftime("%Y-%m-%dT%H:%M:%S")


@dataclass
class FilterFields:
    """Raw text of the filter inputs, exactly as the user typed it."""

    method: str = ""
    status: str = ""
    namespace: str = ""
    pod: str = ""
    path: str = ""


class TimeRange:
    """The from/to fields plus the auto-range mode.

    While ``auto`` is on, the window is rewritten to the trailing
    ``window`` before every query. The first direct edit of either field
    turns it off; nothing turns it back on.
    """

    def __init__(
        self,
        from_text: str = "",
        to_text: str = "",
        *,
        auto: bool = True,
        window: timedelta = DEFAULT_WINDOW,
    ) -> None:
        self.from_text = from_text
        self.to_text = to_text
        self.window = window
        self._auto = auto

    @property
    def auto(self) -> bool:
        return self._auto

    def mark_manual(self) -> None:
        self._auto = False

    def refresh_auto(self, now: datetime | None = None) -> bool:
        """Recompute the window when in auto mode; return whether it changed."""

        if not self._auto:
            return False
        end = now if now is not None else datetime.now().astimezone()
        self.from_text = format_local_field(end - self.window)
        self.to_text = format_local_field(end)
        return True


def _clean(value: str) -> str | None:
    stripped = value.strip()
    return stripped or None


def _parse_time_field(label: str, text: str) -> datetime | None:
    if not text.strip():
        return None
    parsed = parse_instant(text)
    if parsed is None:
        raise QueryInputError(
            f"Invalid {label} time: {text.strip()!r}",
            hint="Use ISO-8601, e.g. 2024-05-01T12:30:00",
        )
    return parsed


def build_query(
    filters: FilterFields, time_range: TimeRange, now: datetime | None = None
) -> QuerySpec:
    time_range.refresh_auto(now)
    method = _clean(filters.method)
    return QuerySpec(
        from_=_parse_time_field("from", time_range.from_text),
        to=_parse_time_field("to", time_range.to_text),
        method=method.upper() if method else None,
        status=_clean(filters.status),
        namespace=_clean(filters.namespace),
        pod=_clean(filters.pod),
        path=_clean(filters.path),
        limit=QUERY_LIMIT,
    )


__all__ = [
    "DEFAULT_WINDOW",
    "FilterFields",
    "TimeRange",
    "build_query",
    "format_local_field",
]
