"""Runtime configuration."""

from .settings import ConfigError, Formatter, Settings

__all__ = ["ConfigError", "Formatter", "Settings"]
