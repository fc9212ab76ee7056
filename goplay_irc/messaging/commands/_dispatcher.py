"""Command dispatcher.

Parses inbound chat lines addressed to the bot, looks the command up in the
registry and runs its handler under the command's concurrency policy.

A line is addressed to the bot when it starts with the command prefix
(``~eval 1+1``) or with the bot's current nick followed by whitespace
(``goplay eval 1+1``).  Everything else -- including unknown commands,
which other bots sharing the prefix may own -- is ignored silently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from irc.client import NickMask
from irc.strings import IRCFoldedCase

from ._registry import Command, CommandRegistry, Concurrency

if TYPE_CHECKING:
    from ...playground import Playground

logger = logging.getLogger(__name__)

SendFn = Callable[[str, str], Awaitable[None]]

GENERIC_ERROR_REPLY = "An error occurred while processing your command."


@dataclass(frozen=True)
class InboundMessage:
    target: str
    source: str
    text: str


@dataclass(frozen=True)
class Invocation:
    command: str
    args: str
    reply_target: str
    source: str


@dataclass(frozen=True)
class CommandContext:
    invocation: Invocation
    send: SendFn

    @property
    def args(self) -> str:
        return self.invocation.args

    async def reply(self, template: str, *args: object) -> None:
        """Send one line to the invocation's reply target.

        Without *args* the template is sent as-is.  With *args* it is
        ``%``-formatted and addressed to the sender, e.g. ``(alice) ...``.
        """
        if args:
            text = f"({self.invocation.source}) {template % args}"
        else:
            text = template
        await self.send(self.invocation.reply_target, text)


def parse_command(text: str, *, prefix: str, nick: str) -> tuple[str, str] | None:
    """Split an addressed line into ``(command, args)``.

    Returns ``None`` when the line is not addressed to *nick*.
    """
    if nick and text.startswith(nick) and text[len(nick):len(nick) + 1].isspace():
        parts = text.split(None, 2)
        if len(parts) < 2:
            return None
        return parts[1], parts[2] if len(parts) > 2 else ""

    if prefix and text.startswith(prefix):
        rest = text[len(prefix):]
        if not rest or rest[0].isspace():
            return None
        parts = rest.split(None, 1)
        return parts[0], parts[1] if len(parts) > 1 else ""

    return None


def _nick_of(source: str) -> str:
    return NickMask(source).nick


class CommandDispatcher:
    def __init__(
        self,
        registry: CommandRegistry,
        send: SendFn,
        *,
        prefix: str,
        current_nick: Callable[[], str],
        playground: Playground | None = None,
        split_nick: Callable[[str], str] = _nick_of,
    ) -> None:
        self.registry = registry
        self.prefix = prefix
        self.playground = playground
        self._send = send
        self._current_nick = current_nick
        self._split_nick = split_nick
        # Only held so the event loop does not garbage-collect running
        # handlers; nothing waits on or limits them.
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_tasks(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._tasks)

    def resolve(self, message: InboundMessage) -> tuple[Command, Invocation] | None:
        """Match *message* against the registry without running anything."""
        nick = self._current_nick()
        parsed = parse_command(message.text, prefix=self.prefix, nick=nick)
        if parsed is None:
            return None
        name, args = parsed
        command = self.registry.get(name)
        if command is None:
            return None

        sender = self._split_nick(message.source)
        if IRCFoldedCase(message.target) == nick:
            reply_target = sender
        else:
            reply_target = message.target
        return command, Invocation(
            command=command.name,
            args=args,
            reply_target=reply_target,
            source=sender,
        )

    async def dispatch(self, message: InboundMessage) -> bool:
        """Run the command in *message*, if any.  Returns whether one matched.

        Sequential commands finish before this returns; concurrent ones are
        started as tasks and left running.
        """
        resolved = self.resolve(message)
        if resolved is None:
            return False
        command, invocation = resolved

        logger.info(
            "[dispatch] running %s for %s in %s with args %r",
            command.name, message.source, message.target, invocation.args,
        )
        ctx = CommandContext(invocation=invocation, send=self._send)
        if command.concurrency is Concurrency.concurrent:
            task = asyncio.create_task(self._invoke(command, ctx), name=f"command:{command.name}")
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            await self._invoke(command, ctx)
        return True

    async def run(self, queue: asyncio.Queue[InboundMessage]) -> None:
        """Consume *queue* in order, forever."""
        while True:
            message = await queue.get()
            try:
                await self.dispatch(message)
            finally:
                queue.task_done()

    async def _invoke(self, command: Command, ctx: CommandContext) -> None:
        try:
            await command.handler(self, ctx)
        except Exception as exc:
            logger.error("[dispatch] command %s failed: %s", command.name, exc, exc_info=True)
            try:
                await ctx.reply(GENERIC_ERROR_REPLY)
            except Exception as inner:
                logger.error("[dispatch] failed to send error reply: %s", inner)
