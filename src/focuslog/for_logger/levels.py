#!/usr/bin/env python3
"""Severity level table.

Ranks are plain integers so that callers can compare them directly and sinks
can render values that are not part of the table. The built-in five follow the
usual debug/info/warn/error spacing; trace, success and fatal are custom ranks
with their own labels.
"""

from enum import IntEnum
from typing import Final


class Level(IntEnum):
    """Built-in severity ranks, ascending."""

    TRACE = -8
    DEBUG = -4
    INFO = 0
    SUCCESS = 2
    WARN = 4
    ERROR = 8
    FATAL = 12


DEFAULT_LEVEL: Final = Level.INFO

# Standard ranks rendered by their own name
STANDARD_LEVELS: Final[dict[int, str]] = {
    Level.DEBUG: "DEBUG",
    Level.INFO: "INFO",
    Level.WARN: "WARN",
    Level.ERROR: "ERROR",
}

# Labels for ranks outside the standard four
CUSTOM_LEVELS: Final[dict[int, str]] = {
    Level.TRACE: "TRACE",
    Level.SUCCESS: "SUCCESS",
    Level.FATAL: "FATAL",
}

_NAME_TO_LEVEL: Final[dict[str, Level]] = {
    "TRACE": Level.TRACE,
    "DEBUG": Level.DEBUG,
    "INFO": Level.INFO,
    "SUCCESS": Level.SUCCESS,
    "WARN": Level.WARN,
    "WARNING": Level.WARN,
    "ERROR": Level.ERROR,
    "FATAL": Level.FATAL,
    "CRITICAL": Level.FATAL,
}


def rank_of(name: str | int | None) -> int:
    """Resolve a level name to its rank.

    Names are case-insensitive. Unknown names, ``None`` and empty strings fall
    back to :data:`DEFAULT_LEVEL` instead of raising. Integers (including
    :class:`Level` members) are returned unchanged.

    Args:
        name: Level name such as ``"debug"`` or ``"WARN"``, or a numeric rank

    Returns:
        int: The numeric rank
    """
    if isinstance(name, int):
        return int(name)
    if not name:
        return int(DEFAULT_LEVEL)
    return int(_NAME_TO_LEVEL.get(name.strip().upper(), DEFAULT_LEVEL))


def label_of(rank: int) -> str:
    """Render a rank as an upper-case label.

    Custom ranks without an entry in :data:`CUSTOM_LEVELS` render as their
    decimal value.
    """
    if rank in STANDARD_LEVELS:
        return STANDARD_LEVELS[rank]
    if rank in CUSTOM_LEVELS:
        return CUSTOM_LEVELS[rank]
    return str(int(rank))
