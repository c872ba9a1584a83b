from __future__ import annotations

import asyncio

import pytest
from textual.widgets import Button, DataTable, Input

from logscope.config import ViewerConfig
from logscope.core.models import LogEntry, QuerySpec, ViewState
from logscope.tui.app import LogscopeApp

pytestmark = pytest.mark.tui


class StaticGateway:
    def __init__(self, entries: list[LogEntry]) -> None:
        self.entries = entries
        self.calls: list[QuerySpec] = []

    async def fetch_async(self, spec: QuerySpec) -> list[LogEntry]:
        self.calls.append(spec)
        return list(self.entries)


def _entries() -> list[LogEntry]:
    return [
        LogEntry.from_payload(
            {
                "timestamp": "2024-05-01T10:00:00Z",
                "method": "GET",
                "path": "/healthz",
                "status": status,
                "duration_ns": 2_000_000,
            }
        )
        for status in (200, 404, 503)
    ]


async def _settle(app: LogscopeApp, pilot, calls: int) -> None:  # noqa: ANN001
    gateway = app.controller._gateway
    for _ in range(100):
        if len(gateway.calls) >= calls and not app.controller.in_flight:
            break
        await pilot.pause(0.01)
    await pilot.pause()


def test_app_renders_rows_after_first_refresh() -> None:
    gateway = StaticGateway(_entries())
    app = LogscopeApp(ViewerConfig(auto_refresh=False), gateway=gateway)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await _settle(app, pilot, 1)
            assert app.controller.state is ViewState.READY
            assert app.query_one("#rows", DataTable).row_count == 3
            assert app.query_one("#refresh", Button).disabled is False

            app.query_one("#refresh", Button).press()
            await _settle(app, pilot, 2)
            assert len(gateway.calls) == 2

    asyncio.run(scenario())


def test_editing_time_field_switches_to_manual_range() -> None:
    gateway = StaticGateway([])
    app = LogscopeApp(ViewerConfig(auto_refresh=False), gateway=gateway)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await _settle(app, pilot, 1)
            assert app.controller.state is ViewState.EMPTY
            assert app.controller.time_range.auto is True

            app.query_one("#from", Input).value = "2024-05-01T00:00:00"
            await pilot.pause()
            assert app.controller.time_range.auto is False
            assert app.controller.time_range.from_text == "2024-05-01T00:00:00"

    asyncio.run(scenario())
