"""Value types for playground results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

SHARE_LINK_UNAVAILABLE = "Unable to create share link"


@dataclass(frozen=True)
class OutputEvent:
    """One chunk of program output, emitted *delay* after the previous one."""

    message: str
    kind: str = "stdout"
    delay: timedelta = timedelta(0)

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> OutputEvent:
        # Delay is a Go time.Duration, i.e. nanoseconds.
        delay_ns = raw.get("Delay") or 0
        return cls(
            message=raw.get("Message") or "",
            kind=raw.get("Kind") or "stdout",
            delay=timedelta(microseconds=delay_ns / 1000),
        )


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one compile-and-run request.

    ``share_link`` is ``None`` when no link was requested, otherwise either
    the link or :data:`SHARE_LINK_UNAVAILABLE`.
    """

    compile_errors: str = ""
    events: tuple[OutputEvent, ...] = field(default_factory=tuple)
    share_link: str | None = None

    def __post_init__(self) -> None:
        if self.compile_errors and self.events:
            raise ValueError("a compile failure cannot carry output events")

    @property
    def compile_failed(self) -> bool:
        return bool(self.compile_errors)

    @classmethod
    def from_json(cls, raw: dict[str, Any], *, share_link: str | None = None) -> ExecutionResult:
        errors = raw.get("Errors") or ""
        if errors:
            return cls(compile_errors=errors, share_link=share_link)
        events = tuple(OutputEvent.from_json(e) for e in raw.get("Events") or ())
        return cls(events=events, share_link=share_link)
