"""
Process-wide logging for the nephyra CLI.

The root group calls ``setup_logging`` before any command body runs;
module loggers obtained with ``logging.getLogger(__name__)`` need no
setup of their own.

Console verbosity comes from the first of: ``--debug``, ``--verbose``,
``--quiet``, ``NEPHYRA_LOG_LEVEL``. Without any of them only warnings
are shown. ``NEPHYRA_LOG_FILE`` adds a file handler whose threshold is
``NEPHYRA_LOG_FILE_LEVEL`` (console level if unset).

Log records go to stderr; stdout is reserved for command output.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "NEPHYRA_LOG_LEVEL"
ENV_FILE = "NEPHYRA_LOG_FILE"
ENV_FILE_LEVEL = "NEPHYRA_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# (upper bound, format, date format): first row whose bound >= level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Command tracing in SystemProbe is logged here at DEBUG.
_ADAPTER_LOGGERS = ("nephyra.adapters",)


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> str:
    """Level name for the console from the global CLI flags."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def _console_handler(level: int) -> logging.Handler:
    for bound, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= bound:
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler | None:
    try:
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("Cannot open log file %s: %s", path, e)
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with nephyra's.

    Safe to call more than once; earlier handlers are dropped. The root
    level is the lower of the console and file thresholds, so a
    DEBUG log file still receives records the console hides.
    """
    console_level = _parse_level(level)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(console_level))
    threshold = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = _file_handler(log_file, file_level)
        if handler is not None:
            root.addHandler(handler)
            threshold = min(threshold, file_level)

    root.setLevel(threshold)

    adapter_level = logging.DEBUG if threshold <= logging.DEBUG else logging.INFO
    for name in _ADAPTER_LOGGERS:
        logging.getLogger(name).setLevel(adapter_level)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """``"info"`` -> ``logging.INFO``; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
