"""Application settings -- reads from environment and ``.env`` file."""

from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import ClassVar

from .. import __version__
from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

SECRET_ENV_KEYS: frozenset[str] = frozenset({
    "IRC_SASL_PASSWORD",
})

_TRUTHY = frozenset({"1", "true", "yes", "on"})

DEFAULT_PLAYGROUND_URL = "https://play.golang.org"


class ConfigError(ValueError):
    """Raised when the configuration cannot be used to start the bot."""


class Formatter(enum.Enum):
    playground = "playground"
    goimports = "goimports"


def _flag(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


class Settings:

    _DATA_DIR_ENV: ClassVar[str] = "GOPLAY_IRC_DATA_DIR"

    def __init__(self) -> None:
        dotenv = os.getenv("DOTENV_PATH")
        if not dotenv:
            data_dir = os.getenv(self._DATA_DIR_ENV)
            if data_dir:
                dotenv = str(Path(data_dir) / ".env")
            else:
                dotenv = ".env"
        self.env = EnvFile(dotenv)
        self.reload()

    def reload(self) -> None:
        e = self._read

        self.nick: str = e("IRC_NICK") or "goplay"
        self.user: str = e("IRC_USER") or self.nick
        self.real_name: str = e("IRC_REAL_NAME") or self.nick
        self.sasl_user: str = e("IRC_SASL_USER")
        self.sasl_password: str = e("IRC_SASL_PASSWORD")

        self.server: str = e("IRC_SERVER")
        self.use_tls: bool = _flag(e("IRC_USE_TLS"))
        self.command_prefix: str = e("COMMAND_PREFIX") or "~"

        raw_channels = e("IRC_JOIN_CHANNELS")
        self.join_channels: tuple[str, ...] = tuple(
            ch.strip() for ch in raw_channels.split(",") if ch.strip()
        ) if raw_channels else ()

        self.debug: bool = _flag(e("DEBUG"))
        self.version_response: str = e("VERSION_RESPONSE") or f"goplay-irc {__version__}"

        self.playground_url: str = (e("PLAYGROUND_URL") or DEFAULT_PLAYGROUND_URL).rstrip("/")
        self._raw_timeout: str = e("PLAYGROUND_TIMEOUT") or "30"
        self._raw_formatter: str = (e("FORMATTER") or Formatter.playground.value).lower()
        self.goimports_path: str = e("GOIMPORTS_PATH") or "goimports"

    @property
    def sasl_enabled(self) -> bool:
        return bool(self.sasl_user and self.sasl_password)

    @property
    def playground_timeout(self) -> float:
        try:
            timeout = float(self._raw_timeout)
        except ValueError:
            raise ConfigError(f"PLAYGROUND_TIMEOUT must be a number, got {self._raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigError("PLAYGROUND_TIMEOUT must be positive")
        return timeout

    @property
    def formatter(self) -> Formatter:
        try:
            return Formatter(self._raw_formatter)
        except ValueError:
            allowed = ", ".join(f.value for f in Formatter)
            raise ConfigError(
                f"FORMATTER must be one of {allowed}, got {self._raw_formatter!r}"
            ) from None

    @property
    def server_address(self) -> tuple[str, int]:
        """Split ``IRC_SERVER`` into ``(host, port)``.

        The port is optional and defaults to 6697 with TLS, 6667 without.
        """
        if not self.server:
            raise ConfigError("IRC_SERVER is not set")
        host, sep, raw_port = self.server.rpartition(":")
        if not sep:
            return self.server, 6697 if self.use_tls else 6667
        if not host:
            raise ConfigError(f"IRC_SERVER has no host: {self.server!r}")
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"IRC_SERVER has an invalid port: {self.server!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"IRC_SERVER port out of range: {port}")
        return host, port

    def validate(self) -> None:
        """Raise :class:`ConfigError` if the bot cannot start with these settings."""
        if any(c.isspace() for c in self.command_prefix):
            raise ConfigError(f"COMMAND_PREFIX must not contain whitespace: {self.command_prefix!r}")
        if any(c.isspace() for c in self.nick):
            raise ConfigError(f"IRC_NICK must not contain whitespace: {self.nick!r}")
        if bool(self.sasl_user) != bool(self.sasl_password):
            raise ConfigError("IRC_SASL_USER and IRC_SASL_PASSWORD must be set together")
        # The properties raise ConfigError on malformed values.
        self.server_address
        self.playground_timeout
        self.formatter

    def describe(self) -> dict[str, str]:
        """Return the effective settings with secrets masked, for logging."""
        values = {
            "IRC_NICK": self.nick,
            "IRC_USER": self.user,
            "IRC_REAL_NAME": self.real_name,
            "IRC_SASL_USER": self.sasl_user,
            "IRC_SASL_PASSWORD": self.sasl_password,
            "IRC_SERVER": self.server,
            "IRC_USE_TLS": str(self.use_tls).lower(),
            "COMMAND_PREFIX": self.command_prefix,
            "IRC_JOIN_CHANNELS": ",".join(self.join_channels),
            "DEBUG": str(self.debug).lower(),
            "PLAYGROUND_URL": self.playground_url,
            "PLAYGROUND_TIMEOUT": self._raw_timeout,
            "FORMATTER": self._raw_formatter,
        }
        for key in SECRET_ENV_KEYS:
            if values.get(key):
                values[key] = "***"
        return values

    def _read(self, key: str) -> str:
        return (self.env.read(key) or os.getenv(key, "")).strip()


cfg = Settings()


def _reset_cfg() -> None:
    global cfg
    cfg = Settings()


register_singleton(_reset_cfg)
