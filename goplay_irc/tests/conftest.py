"""Shared pytest fixtures for goplay_irc tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

_CONFIG_KEYS = (
    "IRC_NICK",
    "IRC_USER",
    "IRC_REAL_NAME",
    "IRC_SASL_USER",
    "IRC_SASL_PASSWORD",
    "IRC_SERVER",
    "IRC_USE_TLS",
    "COMMAND_PREFIX",
    "IRC_JOIN_CHANNELS",
    "DEBUG",
    "VERSION_RESPONSE",
    "PLAYGROUND_URL",
    "PLAYGROUND_TIMEOUT",
    "FORMATTER",
    "GOIMPORTS_PATH",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setenv("GOPLAY_IRC_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DOTENV_PATH", str(tmp_path / ".env"))
    return tmp_path / ".env"


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from goplay_irc.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def env_path(_isolate_env: Path) -> Path:
    return _isolate_env


def _make_response(
    status: int = 200, *, text: str = "", body: bytes | None = None, json_data: object = None,
) -> AsyncMock:
    """An aiohttp response usable as ``async with http.post(...) as resp``."""
    resp = AsyncMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    resp.read = AsyncMock(return_value=text.encode() if body is None else body)
    resp.json = AsyncMock(return_value=json_data)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


def _make_http(**methods: object) -> MagicMock:
    """A ``ClientSession`` double whose ``get``/``post`` return the given responses.

    Pass a single response, a list (consumed in order) or an exception.
    """
    http = MagicMock(spec=aiohttp.ClientSession)
    for name, value in methods.items():
        if isinstance(value, list) or isinstance(value, BaseException):
            setattr(http, name, MagicMock(side_effect=value))
        else:
            setattr(http, name, MagicMock(return_value=value))
    return http


def _session_returning(http: MagicMock) -> MagicMock:
    """Stand-in for the ``aiohttp.ClientSession`` class yielding *http*."""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=http)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.fixture()
def make_response():
    return _make_response


@pytest.fixture()
def make_http():
    return _make_http


@pytest.fixture()
def session_returning():
    return _session_returning
