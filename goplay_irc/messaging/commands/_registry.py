"""The fixed command table."""

from __future__ import annotations

import enum
import types
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from . import playground as _playground_cmds
from . import system as _system_cmds

if TYPE_CHECKING:
    from ._dispatcher import CommandContext, CommandDispatcher

Handler = Callable[["CommandDispatcher", "CommandContext"], Awaitable[None]]


class Concurrency(enum.Enum):
    sequential = "sequential"
    concurrent = "concurrent"


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    handler: Handler
    concurrency: Concurrency


CommandRegistry = Mapping[str, Command]

# Anything that talks to the playground must be concurrent, otherwise a slow
# request would hold up every other message.
_COMMANDS: tuple[Command, ...] = (
    Command(
        "eval",
        "Evaluates the given go string. Imports are automatically resolved (stdlib only)",
        _playground_cmds.cmd_eval,
        Concurrency.concurrent,
    ),
    Command(
        "playrun",
        "Runs the given play link, returning errors and output (if any)",
        _playground_cmds.cmd_playrun,
        Concurrency.concurrent,
    ),
    Command(
        "play",
        "Lists any errors the given play link may have",
        _playground_cmds.cmd_play,
        Concurrency.concurrent,
    ),
    Command(
        "help",
        "This output.",
        _system_cmds.cmd_help,
        Concurrency.sequential,
    ),
)


def build_registry(commands: tuple[Command, ...] = _COMMANDS) -> CommandRegistry:
    """Return a read-only ``name -> Command`` mapping in declaration order."""
    table: dict[str, Command] = {}
    for command in commands:
        if command.name in table:
            raise ValueError(f"duplicate command {command.name!r}")
        table[command.name] = command
    return types.MappingProxyType(table)
