#!/usr/bin/env python3
"""Record handlers.

A handler is the sink end of a logger's decorator chain. Every handler answers
two questions, ``enabled(level)`` and ``handle(context, record)``, and can be
extended with bound attributes or a group. Extension always returns a new
handler so a chain shared between loggers is never changed underneath them.

This module holds the handler contract and the two plain stream sinks:

- :class:`JSONHandler` writes one JSON object per line.
- :class:`TextHandler` writes one logfmt line per record.
"""

import json
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import IO, Any, Final

from focuslog.exceptions import WriteError
from focuslog.for_logger.levels import DEFAULT_LEVEL, label_of
from focuslog.for_logger.records import Field, Record

TIME_KEY: Final = "ts"
LEVEL_KEY: Final = "level"
MESSAGE_KEY: Final = "msg"
SOURCE_KEY: Final = "source"

Context = Mapping[str, Any]


class Handler(ABC):
    """Contract shared by sinks and the decorators layered over them."""

    @abstractmethod
    def enabled(self, level: int) -> bool:
        """Report whether a record at ``level`` would be handled."""

    @abstractmethod
    def handle(self, context: Context, record: Record) -> None:
        """Process a record.

        Raises:
            WriteError: If the record could not be written.
        """

    @abstractmethod
    def with_attrs(self, attrs: Sequence[Field]) -> "Handler":
        """Return a handler that adds ``attrs`` to every record."""

    @abstractmethod
    def with_group(self, name: str) -> "Handler":
        """Return a handler that places later fields under ``name``."""

    def flush(self) -> None:
        """Flush buffered output, if the handler buffers any."""


class StreamHandler(Handler):
    """Base for sinks that render records onto a text stream.

    Copies made by :meth:`with_attrs` and :meth:`with_group` share the stream
    and its write lock, so lines from different threads never interleave.
    """

    def __init__(
        self,
        stream: IO[str] | None = None,
        level: int = DEFAULT_LEVEL,
        add_source: bool = False,
    ) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.level = int(level)
        self.add_source = add_source
        self._lock = threading.Lock()
        # (group path, field) pairs bound ahead of the record's own fields
        self._bound: tuple[tuple[tuple[str, ...], Field], ...] = ()
        self._groups: tuple[str, ...] = ()

    def enabled(self, level: int) -> bool:
        return level >= self.level

    def _clone(self) -> "StreamHandler":
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        return clone

    def with_attrs(self, attrs: Sequence[Field]) -> "StreamHandler":
        if not attrs:
            return self
        clone = self._clone()
        clone._bound = self._bound + tuple((self._groups, attr) for attr in attrs)
        return clone

    def with_group(self, name: str) -> "StreamHandler":
        if not name:
            return self
        clone = self._clone()
        clone._groups = self._groups + (name,)
        return clone

    def iter_fields(self, record: Record) -> Iterable[tuple[tuple[str, ...], Field]]:
        """Yield every field of ``record`` with its group path, bound ones first."""
        yield from self._bound
        for item in record.fields:
            yield self._groups, item

    def handle(self, context: Context, record: Record) -> None:
        line = self.format(context, record)
        self.write(line)

    def write(self, line: str) -> None:
        with self._lock:
            try:
                self.stream.write(line + "\n")
            except (OSError, ValueError) as exc:
                raise WriteError(type(self).__name__, str(exc)) from exc

    def flush(self) -> None:
        with self._lock:
            flush = getattr(self.stream, "flush", None)
            if flush is not None:
                try:
                    flush()
                except (OSError, ValueError) as exc:
                    raise WriteError(type(self).__name__, str(exc)) from exc

    @abstractmethod
    def format(self, context: Context, record: Record) -> str:
        """Render a record as a single line without the trailing newline."""


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def unique_key(taken: Mapping[str, Any], key: str) -> str:
    """Return ``key``, or ``key.1``, ``key.2``... if it is already in ``taken``.

    Repeated field keys and keys that collide with ``ts``/``level``/``msg``
    keep their value under a suffixed name instead of overwriting.
    """
    if key not in taken:
        return key
    suffix = 1
    while f"{key}.{suffix}" in taken:
        suffix += 1
    return f"{key}.{suffix}"


class _Group(dict):
    """Marks a nested object created for a group, as opposed to a field value."""


def _insert(tree: dict[str, Any], path: tuple[str, ...], key: str, value: Any) -> None:
    node = tree
    for group in path:
        name = group
        suffix = 0
        # a field already using the group's name keeps its value
        while name in node and not isinstance(node[name], _Group):
            suffix += 1
            name = f"{group}.{suffix}"
        child = node.get(name)
        if child is None:
            child = _Group()
            node[name] = child
        node = child
    node[unique_key(node, key)] = value


class JSONHandler(StreamHandler):
    """Write each record as a JSON object on its own line.

    Every field is kept: a key that is already present (a repeated
    ``!BADKEY``, or a field named ``msg``) is written as ``msg.1`` and so on.
    """

    def format(self, context: Context, record: Record) -> str:
        payload: dict[str, Any] = {
            TIME_KEY: record.time.to_iso8601_string(),
            LEVEL_KEY: label_of(record.level).lower(),
            MESSAGE_KEY: record.message,
        }
        if self.add_source and record.source is not None:
            payload[SOURCE_KEY] = {
                "file": record.source.file,
                "line": record.source.line,
                "function": record.source.function,
            }
        for path, item in self.iter_fields(record):
            _insert(payload, path, item.key, item.value)
        return json.dumps(payload, default=_json_default, ensure_ascii=False)


def _needs_quoting(text: str) -> bool:
    if not text:
        return True
    return any(ch.isspace() or ch in '="\\' or not ch.isprintable() for ch in text)


def format_text_value(value: Any) -> str:
    """Render a field value for logfmt output, quoting when needed."""
    text = value if isinstance(value, str) else str(value)
    if _needs_quoting(text):
        return json.dumps(text, ensure_ascii=False)
    return text


class TextHandler(StreamHandler):
    """Write each record as a ``key=value`` line.

    Grouped fields are written with dotted keys, e.g. ``request.id=7``. Keys
    already on the line get the same numeric suffix as in :class:`JSONHandler`.
    """

    def format(self, context: Context, record: Record) -> str:
        parts = [
            f"{TIME_KEY}={record.time.to_iso8601_string()}",
            f"{LEVEL_KEY}={label_of(record.level).lower()}",
        ]
        if self.add_source and record.source is not None:
            parts.append(f"{SOURCE_KEY}={format_text_value(str(record.source))}")
        parts.append(f"{MESSAGE_KEY}={format_text_value(record.message)}")
        taken = dict.fromkeys((TIME_KEY, LEVEL_KEY, MESSAGE_KEY, SOURCE_KEY))
        for path, item in self.iter_fields(record):
            key = unique_key(taken, ".".join(path + (item.key,)))
            taken[key] = None
            parts.append(f"{key}={format_text_value(item.value)}")
        return " ".join(parts)
