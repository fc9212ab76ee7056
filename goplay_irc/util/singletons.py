"""Registry of module-level singletons that tests can rebuild."""

from __future__ import annotations

from collections.abc import Callable

_RESETTERS: list[Callable[[], None]] = []


def register_singleton(reset: Callable[[], None]) -> None:
    """Register *reset* to be called by :func:`reset_all_singletons`."""
    if reset not in _RESETTERS:
        _RESETTERS.append(reset)


def reset_all_singletons() -> None:
    for reset in _RESETTERS:
        reset()
