from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from hypothesis import given
from hypothesis import strategies as st

from logscope.core.aggregate import aggregate, error_rate_pct, minute_buckets, p95_ms
from logscope.core.models import LogEntry

BASE = datetime(2024, 5, 1, tzinfo=UTC)

durations = st.one_of(
    st.none(),
    st.integers(min_value=0),
    st.just(10**400),
    st.floats(min_value=0, allow_nan=False, allow_infinity=True),
    st.just(float("nan")),
)
statuses = st.one_of(st.none(), st.integers(min_value=0, max_value=599), st.text(max_size=3))
timestamps = st.one_of(
    st.none(),
    st.integers(min_value=0, max_value=6 * 3600 * 1000).map(
        lambda ms: (BASE + timedelta(milliseconds=ms)).isoformat()
    ),
)
entries_strategy = st.lists(
    st.builds(
        lambda ts, status, duration: LogEntry.from_payload(
            {"timestamp": ts, "status": status, "duration_ns": duration}
        ),
        timestamps,
        statuses,
        durations,
    ),
    max_size=60,
)


@given(entries_strategy)
def test_error_rate_is_a_percentage(entries: list[LogEntry]) -> None:
    rate = error_rate_pct(entries)
    assert 0.0 <= rate <= 100.0
    if not entries:
        assert rate == 0.0


@given(entries_strategy)
def test_p95_matches_nearest_rank_definition(entries: list[LogEntry]) -> None:
    finite = sorted(
        entry.duration_ns / 1e6
        for entry in entries
        if entry.duration_ns is not None and math.isfinite(entry.duration_ns / 1e6)
    )
    if not finite:
        assert p95_ms(entries) == 0.0
        return
    index = min(len(finite) - 1, max(0, math.floor(0.95 * len(finite))))
    assert p95_ms(entries) == finite[index]


@given(entries_strategy, st.randoms(use_true_random=False))
def test_bucketing_ignores_input_order(entries: list[LogEntry], rnd) -> None:  # noqa: ANN001
    shuffled = list(entries)
    rnd.shuffle(shuffled)
    assert minute_buckets(shuffled) == minute_buckets(entries)
    assert aggregate(shuffled) == aggregate(entries)


@given(entries_strategy)
def test_bucket_counts_cover_timestamped_entries(entries: list[LogEntry]) -> None:
    buckets = minute_buckets(entries)
    keys = [key for key, _ in buckets]
    assert keys == sorted(keys)
    assert len(set(keys)) == len(keys)
    assert sum(count for _, count in buckets) == sum(
        1 for entry in entries if entry.timestamp is not None
    )
    assert all(key.endswith(":00.000Z") for key in keys)
