from .aggregate import aggregate, error_rate_pct, minute_buckets, p95_ms
from .gateway import FetchGateway
from .models import (
    EMPTY_SNAPSHOT,
    QUERY_LIMIT,
    AggregateSnapshot,
    LogEntry,
    QuerySpec,
    ViewState,
    format_instant,
    parse_instant,
)
from .query import FilterFields, TimeRange, build_query

__all__ = [
    "EMPTY_SNAPSHOT",
    "QUERY_LIMIT",
    "AggregateSnapshot",
    "FetchGateway",
    "FilterFields",
    "LogEntry",
    "QuerySpec",
    "TimeRange",
    "ViewState",
    "aggregate",
    "build_query",
    "error_rate_pct",
    "format_instant",
    "minute_buckets",
    "p95_ms",
    "parse_instant",
]
