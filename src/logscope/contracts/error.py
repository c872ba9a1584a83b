"""Error envelope helpers and exit codes for the logscope viewer."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, NoReturn, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Exit(IntEnum):
    """Stable exit codes shared across the command line."""

    OK = 0
    INTERNAL = 1
    BAD_INPUT = 2
    FETCH = 5


@dataclass(slots=True)
class ErrorEnvelope:
    """Machine-readable error contract for command-line failures."""

    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {"error": self.error, "detail": self.detail}
        if self.hint:
            payload["hint"] = self.hint
        return json.dumps(payload, ensure_ascii=False)


def die(code: Exit, kind: str, detail: str, hint: str | None = None) -> NoReturn:
    """Emit standardized JSON error on stderr and exit with a stable code."""

    env = ErrorEnvelope(error=kind, detail=detail, hint=hint)
    sys.stderr.write(env.to_json() + "\n")
    try:
        sys.stderr.flush()
    finally:
        sys.exit(int(code))


class EnvelopeError(Exception):
    """Base exception that carries an optional hint for the error envelope."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class BadInputError(EnvelopeError):
    """Raised for malformed user input (config values, flags, time fields)."""


class QueryInputError(BadInputError):
    """Raised when a filter or time field cannot be turned into a query."""


class FetchError(EnvelopeError):
    """A log query failed; ``cause`` is short text suitable for the user."""

    def __init__(self, cause: str, *, hint: str | None = None) -> None:
        super().__init__(cause, hint=hint)
        self.cause = cause

    def user_message(self) -> str:
        return f"Query failed ({self.cause})."


class TransportError(FetchError):
    """Network unreachable, DNS failure, refused connection or timeout."""


class HttpStatusError(FetchError):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, status: int, *, hint: str | None = None) -> None:
        super().__init__(f"HTTP {status}", hint=hint)
        self.status = status


class DecodeError(FetchError):
    """The response body was not the JSON object we expect."""


_EXCEPTION_ORDER: tuple[tuple[type[EnvelopeError], Exit, str], ...] = (
    (BadInputError, Exit.BAD_INPUT, "BadInput"),
    (FetchError, Exit.FETCH, "Fetch"),
)


def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Decorate a CLI handler to enforce exit codes and error envelopes."""

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            for exc_type, exit_code, label in _EXCEPTION_ORDER:
                if isinstance(exc, exc_type):
                    die(exit_code, label, str(exc), hint=getattr(exc, "hint", None))
            die(Exit.BAD_INPUT, "UnhandledEnvelope", str(exc), hint=getattr(exc, "hint", None))
        except FileNotFoundError as exc:
            die(Exit.BAD_INPUT, "FileNotFound", str(exc))
        except Exception as exc:
            logger.exception("Unhandled CLI exception")
            die(Exit.INTERNAL, "Unhandled", f"{type(exc).__name__}: {exc}")

    return _wrapped


__all__ = [
    "BadInputError",
    "DecodeError",
    "EnvelopeError",
    "ErrorEnvelope",
    "Exit",
    "FetchError",
    "HttpStatusError",
    "QueryInputError",
    "TransportError",
    "die",
    "guard_cli",
]
