"""
Adapter base — the protocol contract between the engine and the system.

The engine never shells out or walks $PATH itself. It goes through a
CommandRunner (to run probe commands) and a ToolResolver (to ask whether
a tool exists), so tests can swap both for in-memory doubles.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Result of a probe command.

    Runners NEVER raise; a missing binary, a non-zero exit or a timeout
    all come back as ``ok=False`` with ``error`` set.
    """

    args: list[str] = Field(default_factory=list)
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited 0."""
        return self.error is None and self.returncode == 0

    @classmethod
    def success(cls, args: list[str], stdout: str = "", **kwargs: Any) -> CommandResult:
        """Create a success result."""
        return cls(args=args, returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(cls, args: list[str], error: str, **kwargs: Any) -> CommandResult:
        """Create a failure result."""
        return cls(args=args, error=error, **kwargs)


class CommandRunner(ABC):
    """Runs an external command and captures its output."""

    @abstractmethod
    def run(self, args: list[str]) -> CommandResult:
        """Run ``args`` to completion.

        MUST never raise exceptions. All failures are captured
        in the CommandResult.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class ToolResolver(ABC):
    """Answers "is this tool on the executable search path?"."""

    @abstractmethod
    def which(self, name: str) -> str | None:
        """Return the resolved path of ``name``, or None if absent.

        Should be fast and never raise.
        """

    def has(self, name: str) -> bool:
        return self.which(name) is not None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
