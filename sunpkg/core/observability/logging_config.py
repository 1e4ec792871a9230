"""
Logging configuration — central setup for the sunpkg CLI.

Called once at startup by main.py; modules only do
``logger = logging.getLogger(__name__)``.

Console level, in precedence order:
    --debug / --verbose / --quiet  >  SUNPKG_LOG_LEVEL  >  WARNING

SUNPKG_LOG_FILE adds a file handler at SUNPKG_LOG_FILE_LEVEL (default:
the console level), always in the full diagnostic format.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "SUNPKG_LOG_LEVEL"
ENV_FILE = "SUNPKG_LOG_FILE"
ENV_FILE_LEVEL = "SUNPKG_LOG_FILE_LEVEL"

# Console formats, most detailed first: (ceiling level, format, datefmt)
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_FMT_PLAIN = "%(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with the sunpkg console (and file) handlers.

    Unknown level names fall back to WARNING.
    """
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        handlers.append(fh)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # Root passes everything any handler wants; handlers filter further
    root.setLevel(min(h.level for h in handlers))

    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _FMT_PLAIN, None
    for ceiling, candidate, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= ceiling:
            fmt, datefmt = candidate, candidate_datefmt
            break

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    numeric = getattr(logging, (level or "").upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
