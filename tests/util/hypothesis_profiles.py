from __future__ import annotations

import os

from hypothesis import HealthCheck, settings

# No deadline: the first pydantic validation in a process is slow.
settings.register_profile(
    "logscope",
    max_examples=60,
    deadline=None,
    derandomize=True,
    print_blob=True,
)

settings.register_profile(
    "logscope-quick",
    parent=settings.get_profile("logscope"),
    max_examples=15,
)

settings.register_profile(
    "logscope-ci",
    parent=settings.get_profile("logscope"),
    max_examples=300,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.data_too_large],
)

active_profile = os.getenv("LOGSCOPE_HYPOTHESIS_PROFILE", "logscope")
try:
    settings.load_profile(active_profile)
except KeyError:  # pragma: no cover - unknown profile name
    settings.load_profile("logscope")

__all__ = ["active_profile"]
