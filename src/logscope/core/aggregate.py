"""Summary statistics over one batch of log entries.

All functions here are pure: the same entries always give the same
snapshot, whatever order they arrive in (the bucket sequence is sorted).

The p95 is a nearest-rank estimate, the value at index
``floor(0.95 * N)`` of the sorted finite latencies, clamped to the last
element. It is not interpolated.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence

from .models import AggregateSnapshot, LogEntry, format_instant, minute_floor

P95 = 0.95
ERROR_STATUS_FLOOR = 400


def latencies_ms(entries: Sequence[LogEntry]) -> list[float]:
    """Finite per-entry latencies in milliseconds, sorted ascending."""

    values = [entry.duration_ms for entry in entries]
    return sorted(value for value in values if value is not None and math.isfinite(value))


def nearest_rank(sorted_values: Sequence[float], quantile: float) -> float:
    if not sorted_values:
        return 0.0
    index = min(len(sorted_values) - 1, max(0, math.floor(quantile * len(sorted_values))))
    return float(sorted_values[index])


def p95_ms(entries: Sequence[LogEntry]) -> float:
    return nearest_rank(latencies_ms(entries), P95)


def error_rate_pct(entries: Sequence[LogEntry]) -> float:
    if not entries:
        return 0.0
    errors = sum(
        1 for entry in entries if entry.status is not None and entry.status >= ERROR_STATUS_FLOOR
    )
    return 100.0 * errors / len(entries)


def minute_buckets(entries: Sequence[LogEntry]) -> tuple[tuple[str, int], ...]:
    """Request counts per minute, keyed by the minute's canonical instant.

    Entries without a timestamp are left out of the histogram.
    """

    counts: Counter[str] = Counter()
    for entry in entries:
        if entry.timestamp is None:
            continue
        try:
            key = format_instant(minute_floor(entry.timestamp))
        except (OverflowError, ValueError):
            continue
        counts[key] += 1
    return tuple(sorted(counts.items()))


def aggregate(entries: Sequence[LogEntry]) -> AggregateSnapshot:
    return AggregateSnapshot(
        count=len(entries),
        p95_ms=p95_ms(entries),
        error_rate_pct=error_rate_pct(entries),
        buckets=minute_buckets(entries),
    )


__all__ = [
    "aggregate",
    "error_rate_pct",
    "latencies_ms",
    "minute_buckets",
    "nearest_rank",
    "p95_ms",
]
