"""Data model shared by the query, aggregation and rendering layers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

QUERY_LIMIT = 200

# Go encodes time.Time with nanosecond precision; fromisoformat keeps microseconds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def format_instant(value: datetime) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""

    if value.tzinfo is None:
        value = value.astimezone()
    utc = value.astimezone(UTC)
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}T"
        f"{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}.{utc.microsecond // 1000:03d}Z"
    )


def parse_instant(text: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are local wall-clock time."""

    cleaned = _FRACTION_RE.sub(r"\1", text.strip())
    if not cleaned:
        return None
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def minute_floor(value: datetime) -> datetime:
    """Truncate ``value`` to the start of its minute, in UTC."""

    return value.astimezone(UTC).replace(second=0, microsecond=0)


def _coerce_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return str(value)
    return None


def _coerce_status(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def _coerce_duration(value: Any) -> int | float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int | float):
        return None
    try:
        as_float = float(value)
    except OverflowError:
        return None
    if not math.isfinite(as_float) or as_float < 0:
        return None
    return value


def _coerce_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.astimezone()
    if isinstance(value, str):
        return parse_instant(value)
    if isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value):
        # Bare numbers are epoch milliseconds.
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    return None


class LogEntry(BaseModel):
    """One request record returned by ``/api/logs``.

    Every field is optional. Values of the wrong type degrade to ``None``
    instead of failing validation, so a single odd record never spoils a
    whole batch.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: datetime | None = None
    method: str | None = None
    path: str | None = None
    status: int | None = None
    duration_ns: int | float | None = None
    namespace: str | None = None
    pod: str | None = None
    node: str | None = None

    @field_validator("method", "path", "namespace", "pod", "node", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str | None:
        return _coerce_text(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> int | None:
        return _coerce_status(value)

    @field_validator("duration_ns", mode="before")
    @classmethod
    def _duration(cls, value: Any) -> int | float | None:
        return _coerce_duration(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, value: Any) -> datetime | None:
        return _coerce_timestamp(value)

    @property
    def duration_ms(self) -> float | None:
        if self.duration_ns is None:
            return None
        value = self.duration_ns / 1e6
        return value if math.isfinite(value) else None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> LogEntry:
        return cls.model_validate(payload)


@dataclass(frozen=True)
class QuerySpec:
    """Canonical query sent to ``/api/logs``."""

    from_: datetime | None = None
    to: datetime | None = None
    method: str | None = None
    status: str | None = None
    namespace: str | None = None
    pod: str | None = None
    path: str | None = None
    limit: int = QUERY_LIMIT

    def to_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.from_ is not None:
            params.append(("from", format_instant(self.from_)))
        if self.to is not None:
            params.append(("to", format_instant(self.to)))
        for name in ("method", "status", "namespace", "pod", "path"):
            value = getattr(self, name)
            if value:
                params.append((name, value))
        params.append(("limit", str(self.limit)))
        return params


@dataclass(frozen=True)
class AggregateSnapshot:
    count: int = 0
    p95_ms: float = 0.0
    error_rate_pct: float = 0.0
    buckets: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "p95_ms": self.p95_ms,
            "error_rate_pct": self.error_rate_pct,
            "buckets": [{"minute": key, "count": value} for key, value in self.buckets],
        }


EMPTY_SNAPSHOT = AggregateSnapshot()


class ViewState(StrEnum):
    """Which presentation the viewer shows; driven by the last fetch outcome."""

    IDLE = "idle"
    LOADING = "loading"
    EMPTY = "empty"
    ERROR = "error"
    READY = "ready"


__all__ = [
    "EMPTY_SNAPSHOT",
    "QUERY_LIMIT",
    "AggregateSnapshot",
    "LogEntry",
    "QuerySpec",
    "ViewState",
    "format_instant",
    "minute_floor",
    "parse_instant",
]
