"""Request telemetry viewer: query, aggregate and render ``/api/logs`` batches."""

from . import contracts, core, render
from .controller import AutoRefreshTimer, RefreshController, Trigger

__version__ = "0.1.0"

__all__ = [
    "AutoRefreshTimer",
    "RefreshController",
    "Trigger",
    "contracts",
    "core",
    "render",
]
