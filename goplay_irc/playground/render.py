"""Turn an :class:`ExecutionResult` into one line of IRC text."""

from __future__ import annotations

from .models import ExecutionResult

NO_OUTPUT = "Complete, but no prints"
OUTPUT_SUPPRESSED = "Output suppressed, non-printable characters detected."
NO_ERRORS = "No errors in file"

_BELL = "\x07"


def first_line(message: str) -> str:
    """Return the first line of *message* in a form safe to send to IRC.

    Anything that still contains control or other non-printable characters
    after the bell is removed is replaced wholesale with
    :data:`OUTPUT_SUPPRESSED`.

    >>> first_line("  hello\\nworld")
    'hello'
    """
    line = message.split("\n", 1)[0].strip().replace(_BELL, "")
    if not line.isprintable():
        return OUTPUT_SUPPRESSED
    return line


def render_result(
    result: ExecutionResult,
    *,
    error_label: str = "",
    output_label: str = "",
) -> str:
    """Render *result* as one line.

    Only program output carries the share link; compile diagnostics and
    the no-output notice are returned on their own.
    """
    if result.compile_failed:
        return error_label + result.compile_errors.strip()
    if not result.events:
        return NO_OUTPUT
    line = output_label + first_line(result.events[0].message)
    if len(result.events) > 1:
        line += f" (First line only. {len(result.events)} events returned)"
    if result.share_link is not None:
        line = f"{result.share_link} : {line}"
    return line


def render_check(result: ExecutionResult) -> str:
    """Report only whether the program compiles."""
    if result.compile_failed:
        return f"Errors: {result.compile_errors.strip()}"
    return NO_ERRORS
