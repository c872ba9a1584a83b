"""HTTP client for the ``/api/logs`` query endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from http.client import HTTPException
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urlparse
from urllib.request import Request, urlopen

from ..contracts.error import BadInputError, DecodeError, HttpStatusError, TransportError
from .models import LogEntry, QuerySpec

logger = logging.getLogger(__name__)

LOGS_PATH = "/api/logs"
TOKEN_ENV_VAR = "LOGSCOPE_TOKEN"
ALLOWED_SCHEMES = {"http", "https"}
_CLIENT_USER_AGENT = "logscope/0.1"
_MAX_RESPONSE_BYTES = 5 * 1024 * 1024  # 5 MiB cap to prevent runaway responses.


def _validated_base_url(base_url: str) -> str:
    if base_url is None:
        raise BadInputError("Base URL must be provided")
    candidate = base_url.strip().rstrip("/")
    parsed = urlparse(candidate)
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise BadInputError(
            f"Unsupported URL scheme '{parsed.scheme}' (allowed: http, https)",
            hint="Pass a base URL such as http://127.0.0.1:8080",
        )
    if not parsed.hostname:
        raise BadInputError("Base URL must include a host")
    return candidate


def _charset_from_content_type(content_type: str) -> str | None:
    """Extract a ``charset`` parameter from ``Content-Type`` if present."""

    if not content_type:
        return None
    for part in content_type.split(";"):
        part = part.strip()
        if part.lower().startswith("charset="):
            charset = part.split("=", 1)[1].strip().strip('"').strip("'")
            if charset:
                return charset
    return None


def _entries_from_payload(data: Any) -> list[LogEntry]:
    if not isinstance(data, dict):
        raise DecodeError("unexpected response shape")
    raw = data.get("entries")
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeError("'entries' is not a list")
    return [LogEntry.from_payload(item) for item in raw if isinstance(item, dict)]


class FetchGateway:
    """Issue one log query per call and hand back the parsed entries.

    Every failure is reported as a :class:`~logscope.contracts.FetchError`
    subclass; there is no retry here.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        token: str | None = None,
    ) -> None:
        self.base_url = _validated_base_url(base_url)
        self.timeout = timeout
        self._token = token

    @classmethod
    def from_env(cls, base_url: str, timeout: float | None = None) -> FetchGateway:
        return cls(base_url, timeout=timeout, token=os.getenv(TOKEN_ENV_VAR) or None)

    def url_for(self, spec: QuerySpec) -> str:
        return f"{self.base_url}{LOGS_PATH}?{urlencode(spec.to_params())}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": _CLIENT_USER_AGENT}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _open(self, request: Request) -> Any:
        if self.timeout is None:
            return urlopen(request)  # noqa: S310  # nosec B310
        return urlopen(request, timeout=self.timeout)  # noqa: S310  # nosec B310

    def fetch(self, spec: QuerySpec) -> list[LogEntry]:
        target = self.url_for(spec)
        request = Request(target, headers=self._headers())  # noqa: S310  # nosec B310
        logger.debug("GET %s", target)
        try:
            with self._open(request) as response:
                status = getattr(response, "status", 200)
                if not 200 <= int(status) < 300:
                    raise HttpStatusError(int(status))
                payload = response.read(_MAX_RESPONSE_BYTES + 1)
                headers = getattr(response, "headers", None)
                content_type = headers.get("Content-Type", "") if headers is not None else ""
        except HTTPError as exc:
            raise HttpStatusError(exc.code) from exc
        except URLError as exc:
            raise TransportError(str(exc.reason)) from exc
        except (TimeoutError, ConnectionError, OSError, HTTPException) as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

        if len(payload) > _MAX_RESPONSE_BYTES:
            raise DecodeError("response exceeds 5 MiB")
        encoding = _charset_from_content_type(content_type or "") or "utf-8"
        try:
            data = json.loads(payload.decode(encoding))
        except (LookupError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"invalid JSON: {exc}") from exc
        entries = _entries_from_payload(data)
        logger.debug("Fetched %d entries", len(entries))
        return entries

    async def fetch_async(self, spec: QuerySpec) -> list[LogEntry]:
        return await asyncio.to_thread(self.fetch, spec)


__all__ = ["LOGS_PATH", "TOKEN_ENV_VAR", "FetchGateway"]
