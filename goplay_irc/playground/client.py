"""Go playground client -- compiles, runs and shares programs."""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from .errors import ExecutionServiceError, ShareLinkUnavailable
from .models import SHARE_LINK_UNAVAILABLE, ExecutionResult

logger = logging.getLogger(__name__)

_COMPILE_API_VERSION = "2"


class PlaygroundClient:
    """Submits programs to the playground's ``/compile`` and ``/share`` endpoints.

    A share failure only degrades the result's ``share_link`` to
    :data:`SHARE_LINK_UNAVAILABLE`; a compile failure raises
    :class:`ExecutionServiceError`.
    """

    def __init__(self, base_url: str, *, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def run(self, source: str, *, share: bool = False) -> ExecutionResult:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        ) as http:
            if not share:
                return ExecutionResult.from_json(await self._compile(http, source))
            share_link, raw = await asyncio.gather(
                self._share_or_placeholder(http, source),
                self._compile(http, source),
                return_exceptions=True,
            )
        if isinstance(raw, BaseException):
            raise raw
        if isinstance(share_link, BaseException):
            logger.error("[playground.share] unexpected failure", exc_info=share_link)
            share_link = SHARE_LINK_UNAVAILABLE
        return ExecutionResult.from_json(raw, share_link=share_link)

    async def _compile(self, http: aiohttp.ClientSession, source: str) -> dict:
        url = f"{self._base_url}/compile"
        form = {"version": _COMPILE_API_VERSION, "body": source}
        try:
            async with http.post(url, data=form) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise ExecutionServiceError(
                        f"compile returned HTTP {resp.status}: {body.strip()[:200]}"
                    )
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ExecutionServiceError(f"error from playground: {str(exc) or type(exc).__name__}") from exc
        except ValueError as exc:
            raise ExecutionServiceError(f"invalid compile response: {exc}") from exc
        if not isinstance(data, dict):
            raise ExecutionServiceError("invalid compile response: expected an object")
        logger.debug(
            "[playground.compile] errors=%d events=%d",
            len(data.get("Errors") or ""), len(data.get("Events") or ()),
        )
        return data

    async def _share(self, http: aiohttp.ClientSession, source: str) -> str:
        url = f"{self._base_url}/share"
        try:
            async with http.post(url, data=source.encode()) as resp:
                if resp.status != 200:
                    raise ShareLinkUnavailable(f"share returned HTTP {resp.status}")
                snippet_id = (await resp.text()).strip()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ShareLinkUnavailable(str(exc) or type(exc).__name__) from exc
        if not snippet_id:
            raise ShareLinkUnavailable("share returned an empty id")
        return f"{self._base_url}/p/{snippet_id}"

    async def _share_or_placeholder(self, http: aiohttp.ClientSession, source: str) -> str:
        try:
            return await self._share(http, source)
        except ShareLinkUnavailable as exc:
            logger.warning("[playground.share] unable to create share link: %s", exc)
            return SHARE_LINK_UNAVAILABLE
