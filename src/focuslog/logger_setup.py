#!/usr/bin/env python3
"""Named, focusable structured logging.

This module provides :class:`Logger`, a thin layer over a structured sink that
adds named sub-loggers, custom levels (trace, success, fatal), colorized
console output and a *focus* filter that limits output to chosen loggers.

Key Features:
- Named loggers created on demand and memoized per root
- Registry-wide focus: only focused loggers emit, the root always does
- JSON, logfmt, rich-colored or loguru-backed output per logger
- Error records enriched with the root cause and a call-site stack

Basic Usage Examples:
    from focuslog import logger

    logger.info("service started", "port", 8080)

    db = logger.get_logger("db")
    db.debug("query", sql="select 1")

    # Only "db" (and the root) emit from now on
    logger.focus("db")
    logger.get_logger("http").info("hidden while focused")
    logger.unfocus()

    try:
        connect()
    except ConnectionError as exc:
        db.error("connect failed", exc)

Each logger owns a decorator chain built from its settings::

    FocusFilterHandler -> NamedHandler -> sink

``with_level`` and ``with_logger_type`` rebuild only the receiver's chain.
``focus``/``unfocus`` change the shared registry and rebuild every registered
logger's chain.
"""

import sys
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import IO, Any, Callable

from loguru import logger as _diagnostics

from focuslog.config import (
    LOGGER_TYPE_CONSOLE,
    LOGGER_TYPE_LOGURU,
    LOGGER_TYPE_PRETTY,
    ON_WRITE_ERROR_IGNORE,
    ON_WRITE_ERROR_RAISE,
    LoggerOptions,
    focus_from_env,
)
from focuslog.exceptions import WriteError
from focuslog.for_logger.caller_utils import caller_source
from focuslog.for_logger.color_console import ColorConsoleHandler
from focuslog.for_logger.error_fields import enrich
from focuslog.for_logger.focus_filter import ROOT_NAME, FocusFilterHandler, NamedHandler
from focuslog.for_logger.handlers import Handler, JSONHandler, TextHandler
from focuslog.for_logger.levels import Level, label_of, rank_of
from focuslog.for_logger.loguru_bridge import LoguruHandler
from focuslog.for_logger.records import Field, Record, args_to_fields, now
from focuslog.for_logger.registry import LoggerRegistry

_EMPTY_CONTEXT: Mapping[str, Any] = MappingProxyType({})


def build_sink(options: LoggerOptions) -> Handler:
    """Create the terminal handler selected by ``options.logger_type``."""
    stream = options.stream if options.stream is not None else sys.stdout
    if options.logger_type == LOGGER_TYPE_CONSOLE:
        return TextHandler(stream, level=options.level, add_source=options.add_source)
    if options.logger_type == LOGGER_TYPE_PRETTY:
        return ColorConsoleHandler(stream, level=options.level, add_source=options.add_source)
    if options.logger_type == LOGGER_TYPE_LOGURU:
        return LoguruHandler(level=options.level, add_source=options.add_source)
    return JSONHandler(stream, level=options.level, add_source=options.add_source)


class Logger:
    """A named logger bound to a registry.

    A logger created without a registry is a root: it creates the registry and
    is exempt from focus when its name is empty. Loggers obtained through
    :meth:`get_logger` share the root's registry.
    """

    def __init__(
        self,
        name: str = ROOT_NAME,
        options: LoggerOptions | None = None,
        registry: LoggerRegistry | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.options = options if options is not None else LoggerOptions()
        self.context: Mapping[str, Any] = MappingProxyType(dict(context)) if context else _EMPTY_CONTEXT
        # ("attrs", fields) / ("group", name) steps replayed on every rebuild
        self._derivations: tuple[tuple[str, Any], ...] = ()
        self._chain: Handler | None = None
        if registry is None:
            registry = LoggerRegistry()
            registry.attach_root(self)
        self.registry = registry
        self.configure()

    def __repr__(self) -> str:
        return f"<Logger name={self.name!r} level={label_of(self.level)} type={self.logger_type}>"

    # ------------------------------------------------------------------
    # Settings

    @property
    def level(self) -> int:
        return self.options.level

    @property
    def logger_type(self) -> str:
        return self.options.logger_type

    @property
    def add_source(self) -> bool:
        return self.options.add_source

    @property
    def is_root(self) -> bool:
        return self.registry.root is self

    @property
    def handler(self) -> Handler:
        """The outermost handler of this logger's chain."""
        return self._chain

    def configure(self) -> None:
        """Rebuild this logger's decorator chain from its current settings."""
        chain = build_sink(self.options)
        if self.name:
            chain = NamedHandler(chain, self.name)
        chain = FocusFilterHandler(chain, self.name, self.registry)
        for kind, value in self._derivations:
            chain = chain.with_attrs(value) if kind == "attrs" else chain.with_group(value)
        self._chain = chain

    def with_level(self, level: str | int) -> "Logger":
        """Set this logger's minimum level. Other loggers are not affected.

        Unknown level names fall back to info.
        """
        self.options = self.options.evolve(level=level)
        self.configure()
        return self

    def with_logger_type(self, logger_type: str) -> "Logger":
        """Switch this logger's output format. Unknown formats fall back to json."""
        self.options = self.options.evolve(logger_type=logger_type)
        self.configure()
        return self

    def with_stream(self, stream: IO[str] | None) -> "Logger":
        self.options = self.options.evolve(stream=stream)
        self.configure()
        return self

    # ------------------------------------------------------------------
    # Registry and focus

    def get_logger(self, name: str) -> "Logger":
        """Return the logger registered as ``name``, creating it if needed.

        A new logger copies this logger's current settings (level, format,
        source flag, stream and policies), which need not be the root's. Later
        changes to this logger do not reach loggers already created. The empty
        name returns the root logger.
        """
        if name == ROOT_NAME and self.registry.root is not None:
            return self.registry.root
        options = self.options
        return self.registry.get_or_create(
            name, lambda: Logger(name=name, options=options, registry=self.registry)
        )

    def focus(self, *names: str) -> None:
        """Emit only from ``names`` (and the root) across the whole registry.

        Replaces any previous focus set.
        """
        self.registry.focus(names)

    def unfocus(self) -> None:
        self.registry.unfocus()

    def is_focused(self) -> bool:
        return self.registry.is_permitted(self.name)

    # ------------------------------------------------------------------
    # Derived loggers

    def _derive(self, step: tuple[str, Any] | None = None, context: Mapping[str, Any] | None = None) -> "Logger":
        clone = object.__new__(Logger)
        clone.__dict__.update(self.__dict__)
        if context is not None:
            clone.context = MappingProxyType({**self.context, **context})
        if step is not None:
            kind, value = step
            clone._derivations = self._derivations + (step,)
            clone._chain = self._chain.with_attrs(value) if kind == "attrs" else self._chain.with_group(value)
        return clone

    def bind(self, *args: Any, **kwargs: Any) -> "Logger":
        """Return a logger that adds the given fields to every record.

        Arguments are paired like emit arguments. The receiver is unchanged.
        """
        extra = args_to_fields(args, kwargs)
        if not extra:
            return self
        return self._derive(("attrs", tuple(extra)))

    def with_group(self, name: str) -> "Logger":
        """Return a logger whose later fields are nested under ``name``."""
        if not name:
            return self
        return self._derive(("group", name))

    def with_context(self, context: Mapping[str, Any]) -> "Logger":
        """Return a logger that passes ``context`` to its sink on every record."""
        return self._derive(context=context)

    # ------------------------------------------------------------------
    # Emitting

    def enabled(self, level: str | int) -> bool:
        return self._chain.enabled(rank_of(level))

    def _log(self, level: int, message: Any, args: Sequence[Any], kwargs: dict[str, Any], enrich_errors: bool = False) -> None:
        if not self._chain.enabled(level):
            return
        items: list[Field] = args_to_fields(args, kwargs)
        if enrich_errors:
            items = enrich(items)
        source = caller_source() if self.options.add_source else None
        record = Record(time=now(), level=level, message=str(message), fields=tuple(items), source=source)
        self._dispatch(record)

    def _dispatch(self, record: Record) -> None:
        try:
            self._chain.handle(self.context, record)
        except WriteError as exc:
            self._write_failed(exc)

    def _write_failed(self, exc: WriteError) -> None:
        policy = self.options.on_write_error
        if policy == ON_WRITE_ERROR_RAISE:
            raise exc
        if policy == ON_WRITE_ERROR_IGNORE:
            return
        _diagnostics.opt(exception=exc).warning("focuslog: logger {!r} dropped a record: {}", self.name, exc)

    def log(self, level: str | int, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        """Emit at an arbitrary level; error ranks and above are enriched."""
        rank = rank_of(level)
        self._log(rank, msg, args, kwargs, enrich_errors=rank >= Level.ERROR)

    def trace(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        self._log(Level.TRACE, msg, args, kwargs)

    def debug(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        self._log(Level.DEBUG, msg, args, kwargs)

    def info(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        self._log(Level.INFO, msg, args, kwargs)

    def success(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        self._log(Level.SUCCESS, msg, args, kwargs)

    def warn(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        self._log(Level.WARN, msg, args, kwargs)

    warning = warn

    def error(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        """Emit an error record.

        If an exception is among the arguments (one keyed ``"error"`` is
        preferred, otherwise the first bare one), the record gets ``error``,
        ``root_error`` (when the cause chain is deeper than the error itself),
        ``error_code`` (when the exception has a ``code``) and ``stack``.
        """
        self._log(Level.ERROR, msg, args, kwargs, enrich_errors=True)

    def fatal(self, msg: Any, /, *args: Any, **kwargs: Any) -> None:
        """Emit like :meth:`error` at fatal rank, then terminate the process.

        The sink is flushed and ``options.exit_func(1)`` is called; the default
        is :func:`os._exit`, so no further Python code runs.
        """
        try:
            self._log(Level.FATAL, msg, args, kwargs, enrich_errors=True)
            self.flush()
        finally:
            self.options.exit_func(1)

    def flush(self) -> None:
        try:
            self._chain.flush()
        except WriteError as exc:
            self._write_failed(exc)


def new_logger(
    name: str = ROOT_NAME,
    *,
    level: str | int | None = None,
    logger_type: str | None = None,
    add_source: bool | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
    on_write_error: str | None = None,
    exit_func: Callable[[int], Any] | None = None,
    options: LoggerOptions | None = None,
) -> Logger:
    """Create a root logger with its own registry.

    Explicit keyword arguments override ``options``; anything left unset keeps
    the :class:`LoggerOptions` default.
    """
    overrides = {
        key: value
        for key, value in (
            ("level", level),
            ("logger_type", logger_type),
            ("add_source", add_source),
            ("stream", stream),
            ("on_write_error", on_write_error),
            ("exit_func", exit_func),
        )
        if value is not None
    }
    base = options if options is not None else LoggerOptions()
    return Logger(name=name, options=base.evolve(**overrides), context=context)


def logger_from_env(environ: Mapping[str, str] | None = None) -> Logger:
    """Create a root logger configured from ``FOCUSLOG_*`` variables."""
    root = Logger(options=LoggerOptions.from_env(environ))
    names = focus_from_env(environ)
    if names:
        root.focus(*names)
    return root


# Create the global logger instance
logger = logger_from_env()


# Convenience functions for the global logger
def get_logger(name: str) -> Logger:
    """Return a named logger from the global registry."""
    return logger.get_logger(name)


def focus(*names: str) -> None:
    logger.focus(*names)


def unfocus() -> None:
    logger.unfocus()


def configure_level(level: str | int) -> Logger:
    """Set the global root logger's level. Named loggers keep their own level."""
    return logger.with_level(level)


def configure_logger_type(logger_type: str) -> Logger:
    return logger.with_logger_type(logger_type)
