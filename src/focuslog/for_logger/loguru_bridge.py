#!/usr/bin/env python3
"""Sink that forwards records into loguru.

Useful when an application already routes everything through loguru's
handlers (files with rotation, colored stderr, etc.) and only wants focuslog's
named loggers and focus filtering on top. Fields and the logger context are
passed to loguru as ``extra``; grouped field keys are dotted.
"""

from collections.abc import Sequence
from typing import Any

from loguru import logger as _loguru_logger

from focuslog.for_logger.caller_utils import caller_depth
from focuslog.for_logger.handlers import Context, Handler, unique_key
from focuslog.for_logger.levels import DEFAULT_LEVEL, Level
from focuslog.for_logger.records import Field, Record

# Upper bounds (exclusive) of each loguru level, checked in order
_LOGURU_LEVELS: tuple[tuple[int, str], ...] = (
    (Level.DEBUG, "TRACE"),
    (Level.INFO, "DEBUG"),
    (Level.SUCCESS, "INFO"),
    (Level.WARN, "SUCCESS"),
    (Level.ERROR, "WARNING"),
    (Level.FATAL, "ERROR"),
)


def loguru_level(rank: int) -> str:
    """Map a focuslog rank onto the closest loguru level name at or below it."""
    for upper, name in _LOGURU_LEVELS:
        if rank < upper:
            return name
    return "CRITICAL"


class LoguruHandler(Handler):
    """Terminal handler backed by a loguru logger."""

    def __init__(
        self,
        level: int = DEFAULT_LEVEL,
        add_source: bool = False,
        logger: Any = None,
    ) -> None:
        self.level = int(level)
        self.add_source = add_source
        self._logger = logger if logger is not None else _loguru_logger
        self._bound: tuple[tuple[tuple[str, ...], Field], ...] = ()
        self._groups: tuple[str, ...] = ()

    def _clone(self) -> "LoguruHandler":
        clone = object.__new__(LoguruHandler)
        clone.__dict__.update(self.__dict__)
        return clone

    def enabled(self, level: int) -> bool:
        return level >= self.level

    def with_attrs(self, attrs: Sequence[Field]) -> "LoguruHandler":
        if not attrs:
            return self
        clone = self._clone()
        clone._bound = self._bound + tuple((self._groups, attr) for attr in attrs)
        return clone

    def with_group(self, name: str) -> "LoguruHandler":
        if not name:
            return self
        clone = self._clone()
        clone._groups = self._groups + (name,)
        return clone

    def extra_for(self, context: Context, record: Record) -> dict[str, Any]:
        extra: dict[str, Any] = dict(context)
        for path, item in self._bound:
            extra[unique_key(extra, ".".join(path + (item.key,)))] = item.value
        for item in record.fields:
            extra[unique_key(extra, ".".join(self._groups + (item.key,)))] = item.value
        if self.add_source and record.source is not None:
            extra[unique_key(extra, "source")] = str(record.source)
        return extra

    def handle(self, context: Context, record: Record) -> None:
        extra = self.extra_for(context, record)
        # depth points loguru's name/function/line at the emit call site
        self._logger.bind(**extra).opt(depth=caller_depth()).log(loguru_level(record.level), record.message)

    def flush(self) -> None:
        self._logger.complete()
