"""Snippet transformer -- wraps, import-resolves and gofmt-formats Go source.

Two formatter backends are available:

* :class:`PlaygroundFormatter` posts to the playground's ``/fmt`` endpoint,
  which runs ``goimports`` server side (standard library only).
* :class:`GoimportsFormatter` runs a local ``goimports`` binary.

Both return the tool's output untouched, so formatting already formatted
source is a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import aiohttp

from .errors import ExecutionServiceError, FormatError

logger = logging.getLogger(__name__)

PROGRAM_SKELETON = """package main

func main() {{
{body}
}}
"""


def wrap_body(body: str) -> str:
    """Place a function body inside a minimal ``main`` package."""
    return PROGRAM_SKELETON.format(body=body)


class FormatBackend(Protocol):
    async def format(self, source: str, *, imports: bool) -> str: ...


class PlaygroundFormatter:
    def __init__(self, base_url: str, *, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def format(self, source: str, *, imports: bool) -> str:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        ) as http:
            return await self._format(http, source, imports=imports)

    async def _format(self, http: aiohttp.ClientSession, source: str, *, imports: bool) -> str:
        url = f"{self._base_url}/fmt"
        form = {"body": source, "imports": "true" if imports else ""}
        try:
            async with http.post(url, data=form) as resp:
                if resp.status != 200:
                    raise ExecutionServiceError(f"fmt returned HTTP {resp.status}")
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ExecutionServiceError(f"error from playground: {str(exc) or type(exc).__name__}") from exc
        except ValueError as exc:
            raise ExecutionServiceError(f"invalid fmt response: {exc}") from exc
        if not isinstance(data, dict):
            raise ExecutionServiceError("invalid fmt response: expected an object")
        if data.get("Error"):
            raise FormatError(data["Error"].strip())
        return data.get("Body", "")


class GoimportsFormatter:
    def __init__(self, binary: str = "goimports") -> None:
        self._binary = binary

    async def format(self, source: str, *, imports: bool) -> str:
        args = [] if imports else ["-format-only"]
        try:
            proc = await asyncio.create_subprocess_exec(
                self._binary, *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ExecutionServiceError(f"cannot run {self._binary}: {exc}") from exc
        stdout, stderr = await proc.communicate(source.encode())
        if proc.returncode != 0:
            # goimports reports "<standard input>:3:5: ..." -- name it like the playground does.
            message = stderr.decode(errors="replace").strip()
            raise FormatError(message.replace("<standard input>", "prog.go"))
        return stdout.decode()


class SnippetTransformer:
    def __init__(self, backend: FormatBackend) -> None:
        self._backend = backend

    async def format(self, source: str, *, imports: bool = True) -> str:
        formatted = await self._backend.format(source, imports=imports)
        logger.debug("[transform] formatted %d -> %d bytes", len(source), len(formatted))
        return formatted

    async def format_body(self, body: str) -> str:
        return await self.format(wrap_body(body))
