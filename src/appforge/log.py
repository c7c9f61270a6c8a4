"""
appforge.log - Diagnostic Output
================================

Stages print their user-facing progress on their own rich ``Console``. This
module carries everything else:

- ``trace`` / ``debug``: pipeline detail, hidden unless ``--verbose`` or
  ``APPFORGE_LOG_LEVEL`` asks for it (stdout)
- ``warning``: problems that do not stop the run, such as a skipped git
  repository (stderr)

The threshold is read from ``APPFORGE_LOG_LEVEL`` the first time something is
logged and can be changed with :func:`set_level`. Unknown names fall back to
``info``. rich drops color on its own when ``NO_COLOR`` is set.
"""

from __future__ import annotations

import os
from enum import IntEnum

from rich.console import Console
from rich.text import Text


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARNING = 40


DEFAULT_LEVEL = LogLevel.INFO

_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.WARNING: "yellow",
}

_out = Console(highlight=False, soft_wrap=True)
_err = Console(stderr=True, highlight=False, soft_wrap=True)

_level: LogLevel | None = None


def parse_level(value: str | None) -> LogLevel:
    """
    Map a level name to a ``LogLevel``.

    Examples
    --------
    >>> parse_level("Debug")
    <LogLevel.DEBUG: 20>
    >>> parse_level("loud")
    <LogLevel.INFO: 30>
    """
    name = (value or "").strip().upper()
    if name == "WARN":
        name = "WARNING"
    return LogLevel.__members__.get(name, DEFAULT_LEVEL)


def current_level() -> LogLevel:
    global _level
    if _level is None:
        _level = parse_level(os.environ.get("APPFORGE_LOG_LEVEL"))
    return _level


def set_level(value: str | None) -> None:
    """Set the threshold; ``None`` restores the default."""
    global _level
    _level = parse_level(value)


def _emit(level: LogLevel, message: str) -> None:
    if level < current_level():
        return
    console = _err if level >= LogLevel.WARNING else _out
    console.print(Text(message, style=_STYLES[level]))


def trace(message: str) -> None:
    _emit(LogLevel.TRACE, message)


def debug(message: str) -> None:
    _emit(LogLevel.DEBUG, message)


def warning(message: str) -> None:
    _emit(LogLevel.WARNING, message)
