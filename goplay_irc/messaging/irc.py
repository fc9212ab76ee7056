"""IRC transport built on the ``irc`` library's asyncio client.

Owns everything protocol specific: TLS, SASL PLAIN, CTCP VERSION, nick
collisions and fitting outgoing lines into the 512-byte message limit.
The rest of the bot only sees plain callbacks and :meth:`IrcTransport.send`.

Must be constructed inside a running event loop.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import ssl
from collections.abc import Callable

import irc.client
import irc.client_aio
import irc.connection
import irc.events

from ..config.settings import Settings

logger = logging.getLogger(__name__)

MAX_LINE_BYTES = 512
# Room for the ":nick!user@host " prefix servers add when relaying our lines.
RELAY_PREFIX_RESERVE = 100
REGISTRATION_TIMEOUT = 60.0

# AUTHENTICATE payloads are sent in chunks of at most 400 bytes.
_SASL_CHUNK = 400

MessageHandler = Callable[[str, str, str], None]
Hook = Callable[[], None]


class TransportError(Exception):
    """Connecting to or registering with the IRC server failed."""


def fit_privmsg(target: str, text: str, limit: int = MAX_LINE_BYTES) -> str:
    """Make *text* safe to send as a single ``PRIVMSG`` to *target*.

    Line breaks become spaces and the text is cut, on a UTF-8 character
    boundary, so the relayed command, including the sender prefix the
    server adds and CRLF, fits in *limit* bytes.
    """
    text = text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ").replace("\x00", "")
    budget = limit - RELAY_PREFIX_RESERVE - len(f"PRIVMSG {target} :\r\n".encode())
    encoded = text.encode()
    if len(encoded) <= budget:
        return text
    return encoded[:max(budget, 0)].decode(errors="ignore")


def _numeric(code: str) -> str:
    return irc.events.numeric.get(code, code)


class IrcTransport:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self.reactor = irc.client_aio.AioReactor(
            on_connect=self._on_socket_connect,
            loop=asyncio.get_running_loop(),
        )
        self.connection: irc.client_aio.AioConnection = self.reactor.server()
        self._message_handlers: list[MessageHandler] = []
        self._connect_handlers: list[Hook] = []
        self._registered = asyncio.Event()
        self._closed = asyncio.Event()
        self._closed.set()

        add = self.reactor.add_global_handler
        add("welcome", self._on_welcome)
        add("pubmsg", self._on_message)
        add("privmsg", self._on_message)
        add("ctcp", self._on_ctcp)
        add("nicknameinuse", self._on_nick_in_use)
        add("disconnect", self._on_disconnect)
        if settings.sasl_enabled:
            add("cap", self._on_cap)
            add("authenticate", self._on_authenticate)
            add(_numeric("903"), self._on_sasl_success)
            for code in ("902", "904", "905", "906"):
                add(_numeric(code), self._on_sasl_failure)

    # -- subscription --------------------------------------------------------

    def add_message_handler(self, handler: MessageHandler) -> None:
        """Call ``handler(target, source, text)`` for every PRIVMSG."""
        self._message_handlers.append(handler)

    def add_connect_handler(self, handler: Hook) -> None:
        """Call *handler* once the server has accepted our registration."""
        self._connect_handlers.append(handler)

    # -- operations ----------------------------------------------------------

    async def start(self) -> None:
        """Connect and wait until the server welcomes us.

        Raises :class:`TransportError` if either step fails.
        """
        host, port = self._settings.server_address
        if self._settings.use_tls:
            factory = irc.connection.AioFactory(ssl=ssl.create_default_context())
        else:
            factory = irc.connection.AioFactory()

        self._registered.clear()
        self._closed.clear()
        logger.info("[irc] connecting to %s:%d (tls=%s)", host, port, self._settings.use_tls)
        try:
            await self.connection.connect(
                host, port, self._settings.nick,
                username=self._settings.user,
                ircname=self._settings.real_name,
                connect_factory=factory,
            )
        except (OSError, irc.client.ServerConnectionError) as exc:
            self._closed.set()
            raise TransportError(f"cannot connect to {host}:{port}: {exc}") from exc

        registered = asyncio.create_task(self._registered.wait())
        closed = asyncio.create_task(self._closed.wait())
        try:
            await asyncio.wait(
                {registered, closed},
                timeout=REGISTRATION_TIMEOUT,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            registered.cancel()
            closed.cancel()
        if not self._registered.is_set():
            self.disconnect("Registration failed")
            raise TransportError(f"{host}:{port} did not accept our registration")

    async def wait_closed(self) -> None:
        await self._closed.wait()

    async def send(self, target: str, text: str) -> None:
        self.connection.privmsg(target, fit_privmsg(target, text))

    def join(self, channel: str) -> None:
        self.connection.join(channel)

    def current_nick(self) -> str:
        if self.connection.connected:
            return self.connection.get_nickname()
        return self._settings.nick

    def disconnect(self, message: str = "") -> None:
        if self.connection.connected:
            self.connection.disconnect(message)

    # -- event handlers ------------------------------------------------------

    def _on_socket_connect(self, *_args: object) -> None:
        # Runs before NICK/USER go out, so the server holds registration
        # open until CAP END.
        if self._settings.sasl_enabled:
            self.connection.send_raw("CAP REQ :sasl")

    def _on_welcome(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        logger.info("[irc] connected as %s", connection.get_nickname())
        self._registered.set()
        for handler in self._connect_handlers:
            handler()

    def _on_message(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        if not event.arguments:
            return
        for handler in self._message_handlers:
            handler(event.target, str(event.source), event.arguments[0])

    def _on_ctcp(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        if event.arguments and event.arguments[0].upper() == "VERSION":
            connection.ctcp_reply(event.source.nick, f"VERSION {self._settings.version_response}")

    def _on_nick_in_use(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        if self._registered.is_set():
            return
        new_nick = connection.get_nickname() + "_"
        logger.warning("[irc] nick in use, trying %s", new_nick)
        connection.nick(new_nick)

    def _on_disconnect(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        logger.warning("[irc] disconnected: %s", " ".join(event.arguments) or "(no reason)")
        self._registered.clear()
        self._closed.set()

    # -- SASL PLAIN ----------------------------------------------------------

    def _on_cap(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        if len(event.arguments) < 2:
            return
        subcommand, caps = event.arguments[0].upper(), event.arguments[-1].split()
        if "sasl" not in caps:
            return
        if subcommand == "ACK":
            connection.send_raw("AUTHENTICATE PLAIN")
        elif subcommand == "NAK":
            logger.error("[irc] server refused SASL")
            connection.disconnect("SASL unavailable")

    def _on_authenticate(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        if event.target != "+" and "+" not in event.arguments:
            return
        user, password = self._settings.sasl_user, self._settings.sasl_password
        payload = base64.b64encode(f"{user}\0{user}\0{password}".encode()).decode()
        for start in range(0, len(payload), _SASL_CHUNK):
            connection.send_raw(f"AUTHENTICATE {payload[start:start + _SASL_CHUNK]}")
        if len(payload) % _SASL_CHUNK == 0:
            connection.send_raw("AUTHENTICATE +")

    def _on_sasl_success(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        logger.info("[irc] SASL authentication succeeded")
        connection.send_raw("CAP END")

    def _on_sasl_failure(self, connection: irc.client.ServerConnection, event: irc.client.Event) -> None:
        logger.error("[irc] SASL authentication failed: %s", " ".join(event.arguments))
        connection.disconnect("SASL authentication failed")
