"""IRC bot -- routes channel messages to the command dispatcher.

Transport callbacks only enqueue messages; a single consumer task feeds them
to the dispatcher in arrival order, so protocol handling never waits on a
command.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ..config.settings import Settings
from ..playground import Playground
from .commands import CommandDispatcher, CommandRegistry, InboundMessage, build_registry
from .irc import Hook, MessageHandler, TransportError

logger = logging.getLogger(__name__)

RECONNECT_MIN_DELAY = 5.0
RECONNECT_MAX_DELAY = 300.0


class Transport(Protocol):
    def add_message_handler(self, handler: MessageHandler) -> None: ...

    def add_connect_handler(self, handler: Hook) -> None: ...

    async def start(self) -> None: ...

    async def wait_closed(self) -> None: ...

    async def send(self, target: str, text: str) -> None: ...

    def join(self, channel: str) -> None: ...

    def current_nick(self) -> str: ...

    def disconnect(self, message: str = "") -> None: ...


class Bot:
    def __init__(
        self,
        settings: Settings,
        transport: Transport,
        *,
        playground: Playground | None = None,
        registry: CommandRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._queue: asyncio.Queue[InboundMessage] = asyncio.Queue()
        self.dispatcher = CommandDispatcher(
            registry if registry is not None else build_registry(),
            transport.send,
            prefix=settings.command_prefix,
            current_nick=transport.current_nick,
            playground=playground or Playground.from_settings(settings),
        )
        transport.add_message_handler(self._on_message)
        transport.add_connect_handler(self._on_connect)

    @property
    def queue(self) -> asyncio.Queue[InboundMessage]:
        return self._queue

    async def run(self) -> None:
        """Connect, then serve forever, reconnecting after disconnects.

        A failure of the very first connection propagates as
        :class:`TransportError`.
        """
        consumer = asyncio.create_task(self.dispatcher.run(self._queue), name="dispatcher")
        try:
            await self._transport.start()
            delay = RECONNECT_MIN_DELAY
            while True:
                await self._transport.wait_closed()
                logger.warning("[bot] connection lost, reconnecting in %.0fs", delay)
                await asyncio.sleep(delay)
                try:
                    await self._transport.start()
                except TransportError as exc:
                    logger.warning("[bot] reconnect failed: %s", exc)
                    delay = min(delay * 2, RECONNECT_MAX_DELAY)
                else:
                    delay = RECONNECT_MIN_DELAY
        finally:
            consumer.cancel()
            self._transport.disconnect("Shutting down")

    def _on_message(self, target: str, source: str, text: str) -> None:
        self._queue.put_nowait(InboundMessage(target=target, source=source, text=text))

    def _on_connect(self) -> None:
        for channel in self._settings.join_channels:
            logger.info("[bot] joining %s", channel)
            self._transport.join(channel)
