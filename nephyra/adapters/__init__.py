"""Adapters — bindings to the running system.

Public re-exports for convenient access.
"""

from nephyra.adapters.base import CommandResult, CommandRunner, ToolResolver
from nephyra.adapters.mock import MockCommandRunner, StaticToolResolver
from nephyra.adapters.shell.command import PathToolResolver, SubprocessRunner
from nephyra.adapters.system import SystemProbe

__all__ = [
    "CommandResult",
    "CommandRunner",
    "MockCommandRunner",
    "PathToolResolver",
    "StaticToolResolver",
    "SubprocessRunner",
    "SystemProbe",
    "ToolResolver",
]
