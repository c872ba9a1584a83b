from __future__ import annotations

from pathlib import Path

import pytest

from logscope.config import ViewerConfig, load_viewer_config
from logscope.contracts.error import BadInputError


def test_defaults_when_no_file() -> None:
    config = load_viewer_config(None, env={})
    assert config.base_url == "http://127.0.0.1:8080"
    assert config.refresh_interval == 10.0
    assert config.auto_refresh is True
    assert config.timeout is None
    assert config.window_minutes == 15.0


def test_toml_values_are_loaded(tmp_path: Path) -> None:
    path = tmp_path / "viewer.toml"
    path.write_text(
        "\n".join(
            [
                "[viewer]",
                'base_url = "https://logs.internal:9443"',
                "refresh_interval = 30",
                "auto_refresh = false",
                "timeout = 4.5",
                "window_minutes = 60",
            ]
        ),
        encoding="utf-8",
    )
    config = load_viewer_config(str(path), env={})
    assert config.base_url == "https://logs.internal:9443"
    assert config.refresh_interval == 30.0
    assert config.auto_refresh is False
    assert config.timeout == 4.5
    assert config.window_minutes == 60.0


def test_env_overrides_win_over_file(tmp_path: Path) -> None:
    path = tmp_path / "viewer.toml"
    path.write_text('[viewer]\nbase_url = "http://a:1"\ntimeout = 3\n', encoding="utf-8")
    env = {
        "LOGSCOPE_BASE_URL": "http://b:2",
        "LOGSCOPE_TIMEOUT": "none",
        "LOGSCOPE_AUTO_REFRESH": "off",
        "LOGSCOPE_REFRESH_INTERVAL": "2.5",
    }
    config = load_viewer_config(str(path), env=env)
    assert config.base_url == "http://b:2"
    assert config.timeout is None
    assert config.auto_refresh is False
    assert config.refresh_interval == 2.5


@pytest.mark.parametrize(
    "body",
    [
        "[viewer]\nrefresh_interval = 0\n",
        "[viewer]\nrefresh_interval = 'soon'\n",
        "[viewer]\nwindow_minutes = -5\n",
        "[viewer]\ncolour = 'blue'\n",
        "viewer = 3\n",
        "[viewer\n",
    ],
)
def test_invalid_files_raise_bad_input(tmp_path: Path, body: str) -> None:
    path = tmp_path / "viewer.toml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(BadInputError):
        load_viewer_config(str(path), env={})


def test_missing_file_is_bad_input(tmp_path: Path) -> None:
    with pytest.raises(BadInputError, match="not found"):
        ViewerConfig.load(tmp_path / "absent.toml", env={})


@pytest.mark.parametrize(
    "env",
    [
        {"LOGSCOPE_REFRESH_INTERVAL": "fast"},
        {"LOGSCOPE_AUTO_REFRESH": "maybe"},
        {"LOGSCOPE_TIMEOUT": "-1"},
    ],
)
def test_invalid_env_overrides_raise(env: dict[str, str]) -> None:
    with pytest.raises(BadInputError):
        load_viewer_config(None, env=env)
