"""Resolve playground links and snippet ids to source text."""

from __future__ import annotations

import logging
import re

import aiohttp

from .errors import SnippetFetchError, SnippetNotFound, UnresolvableReference

logger = logging.getLogger(__name__)

_SNIPPET_ID = r"[a-zA-Z0-9]{8,}(?:\.go)?"
_SNIPPET_ID_RE = re.compile(_SNIPPET_ID)
_SHARE_URL_RE = re.compile(
    rf"(?:https?://)?(?:play\.golang\.org/p|go\.dev/play/p)/({_SNIPPET_ID})"
)


def extract_snippet_id(reference: str) -> str:
    """Return the snippet id named by a share URL or a bare id.

    Raises :class:`UnresolvableReference` for anything else.
    """
    reference = reference.strip()
    match = _SHARE_URL_RE.fullmatch(reference)
    if match:
        return match.group(1)
    if _SNIPPET_ID_RE.fullmatch(reference):
        return reference
    raise UnresolvableReference(reference)


class SnippetLocator:
    def __init__(self, base_url: str, *, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def resolve(self, reference: str) -> str:
        snippet_id = extract_snippet_id(reference)
        if not snippet_id.endswith(".go"):
            snippet_id += ".go"
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        ) as http:
            return await self._fetch(http, snippet_id)

    async def _fetch(self, http: aiohttp.ClientSession, snippet_id: str) -> str:
        url = f"{self._base_url}/p/{snippet_id}"
        logger.debug("[playground.fetch] GET %s", url)
        try:
            async with http.get(url) as resp:
                if resp.status == 404:
                    raise SnippetNotFound(snippet_id)
                if resp.status != 200:
                    logger.warning("[playground.fetch] %s returned HTTP %d", url, resp.status)
                    raise SnippetFetchError(f"unexpected HTTP {resp.status}")
                return (await resp.read()).decode(errors="replace")
        except (aiohttp.ClientError, TimeoutError) as exc:
            logger.warning("[playground.fetch] %s failed: %s", url, exc)
            raise SnippetFetchError(f"download failed: {str(exc) or type(exc).__name__}") from exc
