"""Local commands that never leave the process."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._dispatcher import CommandContext, CommandDispatcher


async def cmd_help(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    name = ctx.args.strip()
    if not name:
        await ctx.reply(
            "Available Commands (use %shelp $cmd for more info): %s",
            dispatcher.prefix, ", ".join(dispatcher.registry),
        )
        return

    command = dispatcher.registry.get(name)
    if command is None:
        await ctx.reply('Unknown command "%s"', name)
        return
    await ctx.reply('Help for "%s": %s', command.name, command.help)
