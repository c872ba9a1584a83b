"""Command-line entry point for the logscope viewer."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from datetime import timedelta
from typing import Any

from .config import ViewerConfig, load_viewer_config
from .contracts.error import Exit, guard_cli
from .controller import LogSource, RefreshController, Trigger
from .core.gateway import FetchGateway
from .core.models import ViewState
from .core.query import FilterFields, TimeRange
from .logs import configure_logging

logger = logging.getLogger("logscope.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logscope",
        description="Terminal viewer for request telemetry served by /api/logs.",
    )
    parser.add_argument("--config", default=None, help="Optional TOML config file.")
    parser.add_argument(
        "--base-url",
        default=None,
        help="Query service base URL (default: config or http://127.0.0.1:8080)",
    )
    parser.add_argument(
        "--refresh-interval",
        type=float,
        default=None,
        help="Seconds between auto-refreshes (default: 10)",
    )
    parser.add_argument(
        "--no-auto-refresh",
        action="store_true",
        help="Start with the auto-refresh timer switched off.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: transport default)",
    )
    parser.add_argument("--method", default="", help="Only show this HTTP method.")
    parser.add_argument("--status", default="", help="Only show this status code.")
    parser.add_argument("--namespace", default="", help="Only show this namespace.")
    parser.add_argument("--pod", default="", help="Only show this pod.")
    parser.add_argument("--path", default="", help="Only show this request path.")
    parser.add_argument(
        "--from",
        dest="from_time",
        default=None,
        help="Window start (ISO-8601); disables the trailing auto range.",
    )
    parser.add_argument(
        "--to",
        dest="to_time",
        default=None,
        help="Window end (ISO-8601); disables the trailing auto range.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single refresh and print a JSON summary instead of the UI.",
    )
    parser.add_argument("--log-json", action="store_true", help="Emit JSON log lines.")
    parser.add_argument("--log-file", default=None, help="Also log to this rotating file.")
    return parser


def resolve_config(args: argparse.Namespace) -> ViewerConfig:
    config = load_viewer_config(args.config)
    if args.base_url:
        config.base_url = args.base_url
    if args.refresh_interval is not None:
        config.refresh_interval = args.refresh_interval
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.no_auto_refresh:
        config.auto_refresh = False
    config.validate()
    return config


def filters_from_args(args: argparse.Namespace) -> FilterFields:
    return FilterFields(
        method=args.method,
        status=args.status,
        namespace=args.namespace,
        pod=args.pod,
        path=args.path,
    )


def time_range_from_args(args: argparse.Namespace, config: ViewerConfig) -> TimeRange:
    window = timedelta(minutes=config.window_minutes)
    if args.from_time is None and args.to_time is None:
        return TimeRange(window=window)
    return TimeRange(args.from_time or "", args.to_time or "", auto=False, window=window)


def summarize(controller: RefreshController) -> dict[str, Any]:
    payload: dict[str, Any] = {"state": controller.state.value}
    if controller.message:
        payload["message"] = controller.message
    if controller.last_updated is not None:
        payload["last_updated"] = controller.last_updated.isoformat()
    payload.update(controller.snapshot.to_dict())
    return payload


async def run_once(
    config: ViewerConfig,
    filters: FilterFields,
    time_range: TimeRange,
    gateway: LogSource | None = None,
) -> RefreshController:
    source = gateway or FetchGateway.from_env(config.base_url, timeout=config.timeout)
    controller = RefreshController(
        source,
        filters=filters,
        time_range=time_range,
        refresh_interval=config.refresh_interval,
    )
    await controller.refresh(Trigger.MANUAL)
    return controller


@guard_cli
def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(use_json=args.log_json, log_file=args.log_file, console=args.once)
    config = resolve_config(args)
    filters = filters_from_args(args)
    time_range = time_range_from_args(args, config)

    if args.once:
        controller = asyncio.run(run_once(config, filters, time_range))
        sys.stdout.write(json.dumps(summarize(controller), indent=2) + "\n")
        return int(Exit.FETCH if controller.state is ViewState.ERROR else Exit.OK)

    from .tui.app import run_app

    run_app(config, filters=filters, time_range=time_range)
    return int(Exit.OK)


__all__ = ["build_parser", "main", "run_once", "summarize"]
