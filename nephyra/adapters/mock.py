"""
Mock adapters — test doubles for probe commands and tool lookup.

Used by the test-suite to simulate a machine without touching the
real system. Both doubles record what they were asked.
"""

from __future__ import annotations

from collections.abc import Iterable

from nephyra.adapters.base import CommandResult, CommandRunner, ToolResolver


class MockCommandRunner(CommandRunner):
    """Canned command outputs, keyed by command prefix.

    ``set_output(["pacman", "-Si"], text)`` answers every command that
    starts with ``pacman -Si``. The longest matching prefix wins.
    Commands with no configured response fail as "not found".
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, ...], CommandResult] = {}
        self._call_log: list[list[str]] = []

    @property
    def call_log(self) -> list[list[str]]:
        """All commands this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_output(self, prefix: list[str], stdout: str) -> None:
        """Make commands starting with ``prefix`` succeed with ``stdout``."""
        self._responses[tuple(prefix)] = CommandResult.success(list(prefix), stdout=stdout)

    def set_failure(
        self,
        prefix: list[str],
        error: str = "Mock failure",
        returncode: int | None = 1,
        stdout: str = "",
    ) -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self._responses[tuple(prefix)] = CommandResult(
            args=list(prefix),
            returncode=returncode,
            stdout=stdout,
            error=error,
        )

    def run(self, args: list[str]) -> CommandResult:
        self._call_log.append(list(args))

        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(args[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best):
                    best = prefix

        if best is None:
            return CommandResult.failure(list(args), f"Command not found: {args[0]}")

        canned = self._responses[best]
        return canned.model_copy(update={"args": list(args)})

    def reset(self) -> None:
        """Clear call log and configured responses."""
        self._call_log.clear()
        self._responses.clear()


class StaticToolResolver(ToolResolver):
    """Resolver that only "finds" a fixed set of tool names."""

    def __init__(self, available: Iterable[str] = ()):
        self._available = set(available)
        self._lookups: list[str] = []

    @property
    def lookups(self) -> list[str]:
        return self._lookups

    def add(self, name: str) -> None:
        self._available.add(name)

    def which(self, name: str) -> str | None:
        self._lookups.append(name)
        if name in self._available:
            return f"/usr/bin/{name}"
        return None
