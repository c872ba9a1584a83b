"""Textual terminal host for the viewer."""

from .app import LogscopeApp, run_app

__all__ = ["LogscopeApp", "run_app"]
