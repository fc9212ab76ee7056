"""Go playground integration -- formatting, execution, snippets and rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config.settings import Formatter
from .client import PlaygroundClient
from .errors import (
    ExecutionServiceError,
    FormatError,
    PlaygroundError,
    ShareLinkUnavailable,
    SnippetError,
    SnippetFetchError,
    SnippetNotFound,
    UnresolvableReference,
)
from .locator import SnippetLocator, extract_snippet_id
from .models import SHARE_LINK_UNAVAILABLE, ExecutionResult, OutputEvent
from .render import first_line, render_check, render_result
from .transformer import (
    GoimportsFormatter,
    PlaygroundFormatter,
    SnippetTransformer,
    wrap_body,
)

if TYPE_CHECKING:
    from ..config.settings import Settings


@dataclass(frozen=True)
class Playground:
    """The playground services a command handler may use."""

    transformer: SnippetTransformer
    client: PlaygroundClient
    locator: SnippetLocator

    @classmethod
    def from_settings(cls, settings: Settings) -> Playground:
        timeout = settings.playground_timeout
        if settings.formatter is Formatter.goimports:
            backend = GoimportsFormatter(settings.goimports_path)
        else:
            backend = PlaygroundFormatter(settings.playground_url, timeout=timeout)
        return cls(
            transformer=SnippetTransformer(backend),
            client=PlaygroundClient(settings.playground_url, timeout=timeout),
            locator=SnippetLocator(settings.playground_url, timeout=timeout),
        )


__all__ = [
    "SHARE_LINK_UNAVAILABLE",
    "ExecutionResult",
    "ExecutionServiceError",
    "FormatError",
    "GoimportsFormatter",
    "OutputEvent",
    "Playground",
    "PlaygroundClient",
    "PlaygroundError",
    "PlaygroundFormatter",
    "ShareLinkUnavailable",
    "SnippetError",
    "SnippetFetchError",
    "SnippetLocator",
    "SnippetNotFound",
    "SnippetTransformer",
    "UnresolvableReference",
    "extract_snippet_id",
    "first_line",
    "render_check",
    "render_result",
    "wrap_body",
]
