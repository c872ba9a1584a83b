"""Refresh state machine glue between the query pipeline and the host UI."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import StrEnum
from typing import Any, Protocol

from .contracts.error import FetchError, QueryInputError
from .core.aggregate import aggregate
from .core.models import EMPTY_SNAPSHOT, AggregateSnapshot, LogEntry, QuerySpec, ViewState
from .core.query import FilterFields, TimeRange, build_query
from .render.chart import DEFAULT_STYLE, ChartStyle, Surface
from .render.view import DEFAULT_ERROR_TEXT, PresentationCommands, ViewModel, render

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 10.0


class Trigger(StrEnum):
    MANUAL = "manual"
    TIMER = "timer"
    ENTER_KEY = "enter"


class LogSource(Protocol):
    def fetch_async(self, spec: QuerySpec) -> Awaitable[list[LogEntry]]: ...


def _local_now() -> datetime:
    return datetime.now().astimezone()


class AutoRefreshTimer:
    """Fixed-period ticker running on the current event loop.

    ``start`` replaces any running ticker, so at most one is ever active.
    """

    def __init__(self, interval: float, callback: Callable[[], Any]) -> None:
        if interval <= 0:
            raise ValueError(f"Refresh interval must be > 0; got {interval}")
        self.interval = interval
        self._callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._callback()


class RefreshController:
    """Drive one refresh cycle at a time and publish the resulting view.

    States run ``idle -> loading -> ready | empty | error``; any settled
    state accepts the next trigger. A trigger that arrives while a cycle is
    loading is dropped, so responses are always applied in request order.
    """

    def __init__(
        self,
        gateway: LogSource,
        sink: Callable[[PresentationCommands], None] | None = None,
        *,
        filters: FilterFields | None = None,
        time_range: TimeRange | None = None,
        surface: Surface | None = None,
        chart_style: ChartStyle = DEFAULT_STYLE,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._gateway = gateway
        self._sink = sink
        self.filters = filters if filters is not None else FilterFields()
        self.time_range = time_range if time_range is not None else TimeRange()
        self._surface = surface if surface is not None else Surface(width=640.0)
        self._chart_style = chart_style
        self._clock = clock
        self._timer = AutoRefreshTimer(refresh_interval, self._on_timer)
        self._tasks: set[asyncio.Task[bool]] = set()

        self._state = ViewState.IDLE
        self._message: str | None = None
        self._entries: tuple[LogEntry, ...] = ()
        self._snapshot: AggregateSnapshot = EMPTY_SNAPSHOT
        self._last_updated: datetime | None = None
        self._refresh_enabled = True
        self.last_commands: PresentationCommands | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def message(self) -> str | None:
        return self._message

    @property
    def snapshot(self) -> AggregateSnapshot:
        return self._snapshot

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return self._entries

    @property
    def last_updated(self) -> datetime | None:
        return self._last_updated

    @property
    def refresh_enabled(self) -> bool:
        return self._refresh_enabled

    @property
    def in_flight(self) -> bool:
        return self._state is ViewState.LOADING

    @property
    def auto_refresh(self) -> bool:
        return self._timer.running

    def present(self) -> PresentationCommands:
        return render(
            ViewModel(
                state=self._state,
                message=self._message,
                entries=self._entries,
                snapshot=self._snapshot,
                surface=self._surface,
                last_updated=self._last_updated,
                refresh_enabled=self._refresh_enabled,
                chart_style=self._chart_style,
            )
        )

    def _publish(self) -> None:
        commands = self.present()
        self.last_commands = commands
        if self._sink is not None:
            self._sink(commands)

    async def refresh(self, trigger: Trigger = Trigger.MANUAL) -> bool:
        """Run one cycle; return ``False`` if it was dropped as overlapping."""

        if self._state is ViewState.LOADING:
            logger.debug("Dropping %s trigger: refresh already in flight", trigger.value)
            return False

        now = self._clock()
        self._state = ViewState.LOADING
        self._message = None
        self._refresh_enabled = False

        try:
            self.time_range.refresh_auto(now)
            self._publish()
            spec = build_query(self.filters, self.time_range, now)
            entries = await self._gateway.fetch_async(spec)
        except FetchError as exc:
            logger.warning("Log query failed: %s", exc.cause)
            self._state = ViewState.ERROR
            self._message = exc.user_message()
        except QueryInputError as exc:
            logger.warning("Rejected query input: %s", exc)
            self._state = ViewState.ERROR
            self._message = f"Query failed ({exc})."
        else:
            self._entries = tuple(entries)
            self._snapshot = aggregate(self._entries)
            self._state = ViewState.READY if self._entries else ViewState.EMPTY
            logger.info(
                "Refresh (%s) finished: %s, %d entries",
                trigger.value,
                self._state.value,
                self._snapshot.count,
            )
        finally:
            if self._state is ViewState.LOADING:
                # Unexpected failure or cancellation; never leave the guard stuck.
                self._state = ViewState.ERROR
                self._message = DEFAULT_ERROR_TEXT
            self._refresh_enabled = True
            self._last_updated = self._clock()
            self._publish()
        return True

    def trigger(self, trigger: Trigger = Trigger.MANUAL) -> asyncio.Task[bool] | None:
        """Schedule a cycle on the running loop unless one is already loading."""

        if self._state is ViewState.LOADING:
            logger.debug("Dropping %s trigger: refresh already in flight", trigger.value)
            return None
        task = asyncio.get_running_loop().create_task(self.refresh(trigger))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[bool]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.exception("Refresh cycle failed", exc_info=exc)

    def _on_timer(self) -> None:
        self.trigger(Trigger.TIMER)

    def set_auto_refresh(self, enabled: bool) -> None:
        if enabled:
            if not self._timer.running:
                self._timer.start()
                logger.info("Auto-refresh every %.1fs", self._timer.interval)
        elif self._timer.running:
            self._timer.stop()
            logger.info("Auto-refresh stopped")

    def mark_manual_range(self) -> None:
        if self.time_range.auto:
            logger.debug("Time range switched to manual")
        self.time_range.mark_manual()

    def resize(self, surface: Surface) -> None:
        """Redraw from the last snapshot for a new surface size; no fetch."""

        self._surface = surface
        self._publish()

    def shutdown(self) -> None:
        self._timer.stop()


__all__ = [
    "DEFAULT_REFRESH_INTERVAL",
    "AutoRefreshTimer",
    "LogSource",
    "RefreshController",
    "Trigger",
]
