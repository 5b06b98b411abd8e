#!/usr/bin/env python3
"""Decorators layered over a sink.

Two layers sit between a logger and its sink:

- :class:`FocusFilterHandler` drops records from loggers that are outside the
  registry's focus set. The decision is made on every call against the live
  registry state, so ``focus()``/``unfocus()`` take effect on the next record.
- :class:`NamedHandler` attaches ``logger=<name>`` to each record.

Both wrap exactly one inner handler and, like every handler, return new
instances from ``with_attrs``/``with_group``.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Final

import attrs

from focuslog.for_logger.handlers import Context, Handler
from focuslog.for_logger.records import Field, Record

if TYPE_CHECKING:
    from focuslog.for_logger.registry import LoggerRegistry

LOGGER_KEY: Final = "logger"
ROOT_NAME: Final = ""


@attrs.frozen
class FocusState:
    """Registry-wide focus setting.

    Focus only restricts named loggers; the root logger always passes.
    """

    enabled: bool = False
    allowed: frozenset[str] = frozenset()

    def permits(self, name: str) -> bool:
        if name == ROOT_NAME or not self.enabled:
            return True
        return name in self.allowed


class FocusFilterHandler(Handler):
    """Pass records through only while the owning logger is in focus."""

    def __init__(self, handler: Handler, name: str, registry: "LoggerRegistry") -> None:
        self.handler = handler
        self.name = name
        self.registry = registry

    def enabled(self, level: int) -> bool:
        if not self.handler.enabled(level):
            return False
        return self.registry.is_permitted(self.name)

    def handle(self, context: Context, record: Record) -> None:
        if not self.registry.is_permitted(self.name):
            return
        self.handler.handle(context, record)

    def with_attrs(self, attrs: Sequence[Field]) -> "FocusFilterHandler":
        return FocusFilterHandler(self.handler.with_attrs(attrs), self.name, self.registry)

    def with_group(self, name: str) -> "FocusFilterHandler":
        return FocusFilterHandler(self.handler.with_group(name), self.name, self.registry)

    def flush(self) -> None:
        self.handler.flush()


class NamedHandler(Handler):
    """Attach ``logger=<name>`` to every record passing through.

    The name is bound onto the inner handler when the layer is built, ahead of
    any later attributes or groups, so it always renders at the top level.
    """

    def __init__(self, handler: Handler, name: str) -> None:
        self.name = name
        self.handler = handler.with_attrs((Field(LOGGER_KEY, name),))

    def _derive(self, handler: Handler) -> "NamedHandler":
        clone = object.__new__(NamedHandler)
        clone.name = self.name
        clone.handler = handler
        return clone

    def enabled(self, level: int) -> bool:
        return self.handler.enabled(level)

    def handle(self, context: Context, record: Record) -> None:
        self.handler.handle(context, record)

    def with_attrs(self, attrs: Sequence[Field]) -> "NamedHandler":
        return self._derive(self.handler.with_attrs(attrs))

    def with_group(self, name: str) -> "NamedHandler":
        return self._derive(self.handler.with_group(name))

    def flush(self) -> None:
        self.handler.flush()
