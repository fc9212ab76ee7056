"""Errors raised while talking to the Go playground."""

from __future__ import annotations


class PlaygroundError(Exception):
    """Base class for playground failures."""


class FormatError(PlaygroundError):
    """The source has a syntax error or an import that cannot be resolved."""


class ExecutionServiceError(PlaygroundError):
    """The playground could not be reached or returned an unusable response."""


class ShareLinkUnavailable(PlaygroundError):
    """A share link could not be created.  Never shown to users."""


class SnippetError(PlaygroundError):
    """A snippet reference could not be turned into source text."""


class UnresolvableReference(SnippetError):
    def __init__(self, reference: str) -> None:
        super().__init__("invalid snippet")
        self.reference = reference


class SnippetNotFound(SnippetError):
    def __init__(self, snippet_id: str) -> None:
        super().__init__("snippet does not exist")
        self.snippet_id = snippet_id


class SnippetFetchError(SnippetError):
    """Any non-404 failure while downloading a shared snippet."""
