"""Contract helpers for the logscope viewer."""

from .error import (
    BadInputError,
    DecodeError,
    EnvelopeError,
    ErrorEnvelope,
    Exit,
    FetchError,
    HttpStatusError,
    QueryInputError,
    TransportError,
    die,
    guard_cli,
)

__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "QueryInputError",
    "FetchError",
    "TransportError",
    "HttpStatusError",
    "DecodeError",
    "guard_cli",
    "die",
]
