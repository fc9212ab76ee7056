"""IRC messaging -- transport, bot wiring and commands."""

from .bot import Bot, Transport
from .irc import IrcTransport, TransportError, fit_privmsg

__all__ = [
    "Bot",
    "IrcTransport",
    "Transport",
    "TransportError",
    "fit_privmsg",
]
