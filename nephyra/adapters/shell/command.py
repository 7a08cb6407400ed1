"""
Shell command adapter — run probe commands and resolve tools on $PATH.

This is the only place the engine touches subprocess and shutil.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from nephyra.adapters.base import CommandResult, CommandRunner, ToolResolver

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Execute commands directly (no shell) and capture output.

    Args:
        timeout: Per-command timeout in seconds.
    """

    def __init__(self, timeout: float = 10):
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def run(self, args: list[str]) -> CommandResult:
        logger.debug("Executing: %s", " ".join(args))
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError:
            return CommandResult.failure(args, f"Command not found: {args[0]}")
        except subprocess.TimeoutExpired:
            logger.warning("Probe timed out after %ss: %s", self._timeout, " ".join(args))
            return CommandResult.failure(args, f"Command timed out after {self._timeout}s")
        except (OSError, ValueError) as e:
            return CommandResult.failure(args, f"Command execution error: {e}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode == 0:
            return CommandResult.success(
                args,
                stdout=result.stdout,
                stderr=result.stderr,
                duration_ms=elapsed_ms,
            )

        return CommandResult(
            args=args,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            error=result.stderr.strip() or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
        )


class PathToolResolver(ToolResolver):
    """Resolve tools on the real executable search path."""

    def which(self, name: str) -> str | None:
        return shutil.which(name)
