"""Commands that run code on the Go playground."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...playground import (
    ExecutionResult,
    ExecutionServiceError,
    FormatError,
    Playground,
    SnippetError,
    render_check,
    render_result,
)

if TYPE_CHECKING:
    from ._dispatcher import CommandContext, CommandDispatcher

logger = logging.getLogger(__name__)

EMPTY_CODE = "Cannot eval empty code"
EMPTY_REFERENCE = "Cannot parse an empty link / URL"


def _playground(dispatcher: CommandDispatcher) -> Playground:
    if dispatcher.playground is None:
        raise RuntimeError("dispatcher has no playground configured")
    return dispatcher.playground


async def _reply_result(ctx: CommandContext, result: ExecutionResult, line: str) -> None:
    # Program output is addressed to the sender; diagnostics and notices go out bare.
    if result.events:
        await ctx.reply("%s", line)
    else:
        await ctx.reply(line)


async def cmd_eval(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    """Wrap the argument in ``func main``, resolve imports and run it."""
    if not ctx.args.strip():
        await ctx.reply(EMPTY_CODE)
        return

    pg = _playground(dispatcher)
    try:
        source = await pg.transformer.format_body(ctx.args)
        result = await pg.client.run(source, share=True)
    except (FormatError, ExecutionServiceError) as exc:
        logger.warning("[eval] %s: %s", type(exc).__name__, exc)
        await ctx.reply(f"Error occurred: {exc}")
        return

    if result.compile_failed:
        logger.info("[eval] compile failed: %s", result.compile_errors.strip())
    else:
        logger.info("[eval] completed: %s", result.share_link)
    await _reply_result(ctx, result, render_result(result))


async def _load_snippet(dispatcher: CommandDispatcher, ctx: CommandContext) -> str | None:
    reference = ctx.args.strip()
    if not reference:
        await ctx.reply(EMPTY_REFERENCE)
        return None
    try:
        return await _playground(dispatcher).locator.resolve(reference)
    except SnippetError as exc:
        logger.info("[snippet] cannot load %r: %s", reference, exc)
        await ctx.reply("Unable to get snippet: %s", exc)
        return None


async def cmd_playrun(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    """Run a shared snippet and report its first line of output."""
    code = await _load_snippet(dispatcher, ctx)
    if code is None:
        return
    try:
        result = await _playground(dispatcher).client.run(code)
    except ExecutionServiceError as exc:
        logger.warning("[playrun] unable to start compile: %s", exc)
        await ctx.reply("Unable to start compile: %s", exc)
        return
    line = render_result(result, error_label="Compile failed! ", output_label="Complete: ")
    await _reply_result(ctx, result, line)


async def cmd_play(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    """Compile a shared snippet and report only its errors."""
    code = await _load_snippet(dispatcher, ctx)
    if code is None:
        return
    try:
        result = await _playground(dispatcher).client.run(code)
    except ExecutionServiceError as exc:
        logger.warning("[play] unable to start compile: %s", exc)
        await ctx.reply("Unable to start compile: %s", exc)
        return
    await ctx.reply(render_check(result))
