#!/usr/bin/env python3
"""Log record model and variadic argument pairing.

Emit operations accept a loose sequence of positional arguments. They are
paired into named fields with these rules:

1. A ``str`` followed by any value becomes ``Field(str, value)``.
2. A ``Field`` passes through unchanged.
3. A trailing ``str`` with nothing after it, or any other bare value, becomes a
   field under :data:`BAD_KEY` so that nothing the caller passed is lost.
"""

from collections.abc import Sequence
from typing import Any, Final

import attrs
import pendulum

BAD_KEY: Final = "!BADKEY"


@attrs.frozen
class Field:
    """A named value attached to a record."""

    key: str
    value: Any


@attrs.frozen
class Source:
    """Call site of an emit operation."""

    file: str
    line: int
    function: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@attrs.frozen
class Record:
    """A single log event on its way to a sink.

    Records are immutable. Decorators never annotate a record; they bind extra
    fields onto the sink with ``with_attrs`` instead.
    """

    time: pendulum.DateTime
    level: int
    message: str
    fields: tuple[Field, ...] = ()
    source: Source | None = None


def field(key: str, value: Any) -> Field:
    """Build a pre-paired field, for callers that prefer explicit keys."""
    return Field(key, value)


def fields(*args: Any) -> list[Field]:
    """Pair ``args`` into fields using the module rules."""
    return args_to_fields(args)


def _next_field(args: Sequence[Any]) -> tuple[Field, Sequence[Any]]:
    head = args[0]
    if isinstance(head, Field):
        return head, args[1:]
    if isinstance(head, str):
        if len(args) == 1:
            return Field(BAD_KEY, head), ()
        return Field(head, args[1]), args[2:]
    return Field(BAD_KEY, head), args[1:]


def args_to_fields(args: Sequence[Any], kwargs: dict[str, Any] | None = None) -> list[Field]:
    """Pair positional arguments into fields, then append keyword fields.

    Args:
        args: Positional emit arguments
        kwargs: Keyword emit arguments, appended in insertion order

    Returns:
        list[Field]: Fields in call order
    """
    result: list[Field] = []
    remaining: Sequence[Any] = tuple(args)
    while remaining:
        item, remaining = _next_field(remaining)
        result.append(item)
    if kwargs:
        result.extend(Field(key, value) for key, value in kwargs.items())
    return result


def now() -> pendulum.DateTime:
    return pendulum.now("UTC")
