"""Command dispatcher, registry and command implementations.

Sub-modules group commands by what they touch:

- ``playground`` -- eval, playrun, play (remote, concurrent)
- ``system``     -- help (local, sequential)
"""

from ._dispatcher import (
    CommandContext,
    CommandDispatcher,
    InboundMessage,
    Invocation,
    SendFn,
    parse_command,
)
from ._registry import Command, CommandRegistry, Concurrency, build_registry

__all__ = [
    "Command",
    "CommandContext",
    "CommandDispatcher",
    "CommandRegistry",
    "Concurrency",
    "InboundMessage",
    "Invocation",
    "SendFn",
    "build_registry",
    "parse_command",
]
