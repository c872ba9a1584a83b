"""Typed configuration loader for the logscope viewer."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
    raise BadInputError(f"{name} must be boolean")


def _parse_optional_float(raw: str) -> float | None:
    if raw.strip().lower() in {"", "none", "null", "off"}:
        return None
    return float(raw)


@dataclass
class ViewerConfig:
    base_url: str = "http://127.0.0.1:8080"
    refresh_interval: float = 10.0
    auto_refresh: bool = True
    timeout: float | None = None
    window_minutes: float = 15.0

    def validate(self) -> None:
        if not isinstance(self.base_url, str) or not self.base_url.strip():
            raise BadInputError("viewer.base_url must be a non-empty string")
        if self.refresh_interval <= 0:
            raise BadInputError("viewer.refresh_interval must be > 0")
        if self.timeout is not None and self.timeout <= 0:
            raise BadInputError("viewer.timeout must be > 0 when set")
        if self.window_minutes <= 0:
            raise BadInputError("viewer.window_minutes must be > 0")

    @classmethod
    def load(cls, path: Path | None, env: Mapping[str, str] | None = None) -> ViewerConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ if env is None else env)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ViewerConfig:
        section = data.get("viewer", {})
        if not isinstance(section, dict):
            raise BadInputError("[viewer] section must be a table")
        known = {"base_url", "refresh_interval", "auto_refresh", "timeout", "window_minutes"}
        unknown = sorted(set(section) - known)
        if unknown:
            raise BadInputError(f"Unknown [viewer] keys: {', '.join(unknown)}")
        kwargs: dict[str, Any] = {}
        if "base_url" in section:
            kwargs["base_url"] = str(section["base_url"])
        if "auto_refresh" in section:
            kwargs["auto_refresh"] = _parse_bool("viewer.auto_refresh", section["auto_refresh"])
        for key in ("refresh_interval", "window_minutes"):
            if key in section:
                try:
                    kwargs[key] = float(section[key])
                except (TypeError, ValueError) as exc:
                    raise BadInputError(f"viewer.{key} must be a number") from exc
        if "timeout" in section:
            value = section["timeout"]
            try:
                kwargs["timeout"] = (
                    _parse_optional_float(value) if isinstance(value, str) else float(value)
                )
            except (TypeError, ValueError) as exc:
                raise BadInputError("viewer.timeout must be a number or 'none'") from exc
        return cls(**kwargs)

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        mapping: dict[str, tuple[str, Callable[[str], Any]]] = {
            "LOGSCOPE_BASE_URL": ("base_url", str),
            "LOGSCOPE_REFRESH_INTERVAL": ("refresh_interval", float),
            "LOGSCOPE_TIMEOUT": ("timeout", _parse_optional_float),
            "LOGSCOPE_WINDOW_MINUTES": ("window_minutes", float),
        }
        for key, (attr, caster) in mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(self, attr, value)

        raw_auto = env.get("LOGSCOPE_AUTO_REFRESH")
        if raw_auto is not None:
            try:
                self.auto_refresh = _parse_bool("LOGSCOPE_AUTO_REFRESH", raw_auto)
            except BadInputError as exc:
                raise BadInputError(
                    f"Invalid env override LOGSCOPE_AUTO_REFRESH={raw_auto!r}"
                ) from exc


def load_viewer_config(path: str | None, env: Mapping[str, str] | None = None) -> ViewerConfig:
    config_path = Path(path) if path else None
    return ViewerConfig.load(config_path, env)


__all__ = ["ViewerConfig", "load_viewer_config"]
