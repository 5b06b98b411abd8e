#!/usr/bin/env python3
"""Logger configuration.

Options are collected in an immutable attrs class. Unknown level names, output
formats and write-error policies never raise; they are normalised to the
documented defaults (info, json, report).

Environment Variables:
    FOCUSLOG_LEVEL: Minimum level for the default logger (default: INFO)
    FOCUSLOG_TYPE: Output format, one of json, console, pretty, loguru (default: json)
    FOCUSLOG_ADD_SOURCE: Attach the call site to each record (default: true)
    FOCUSLOG_FOCUS: Comma-separated logger names to focus on at startup
    FOCUSLOG_ON_WRITE_ERROR: raise, report or ignore (default: report)
"""

import os
from collections.abc import Callable, Mapping
from typing import IO, Any, Final

import attrs

from focuslog.for_logger.levels import DEFAULT_LEVEL, rank_of

# Output formats
LOGGER_TYPE_JSON: Final = "json"
LOGGER_TYPE_CONSOLE: Final = "console"
LOGGER_TYPE_PRETTY: Final = "pretty"
LOGGER_TYPE_LOGURU: Final = "loguru"
LOGGER_TYPES: Final = (LOGGER_TYPE_JSON, LOGGER_TYPE_CONSOLE, LOGGER_TYPE_PRETTY, LOGGER_TYPE_LOGURU)
DEFAULT_LOGGER_TYPE: Final = LOGGER_TYPE_JSON

# Write-error policies
ON_WRITE_ERROR_RAISE: Final = "raise"
ON_WRITE_ERROR_REPORT: Final = "report"
ON_WRITE_ERROR_IGNORE: Final = "ignore"
WRITE_ERROR_POLICIES: Final = (ON_WRITE_ERROR_RAISE, ON_WRITE_ERROR_REPORT, ON_WRITE_ERROR_IGNORE)
DEFAULT_ON_WRITE_ERROR: Final = ON_WRITE_ERROR_REPORT

ENV_LEVEL: Final = "FOCUSLOG_LEVEL"
ENV_TYPE: Final = "FOCUSLOG_TYPE"
ENV_ADD_SOURCE: Final = "FOCUSLOG_ADD_SOURCE"
ENV_FOCUS: Final = "FOCUSLOG_FOCUS"
ENV_ON_WRITE_ERROR: Final = "FOCUSLOG_ON_WRITE_ERROR"

_TRUE_VALUES: Final = ("true", "1", "yes", "on")


def normalize_logger_type(value: str | None) -> str:
    """Lower-case a format selector, falling back to json when unknown."""
    candidate = (value or "").strip().lower()
    return candidate if candidate in LOGGER_TYPES else DEFAULT_LOGGER_TYPE


def normalize_write_error_policy(value: str | None) -> str:
    candidate = (value or "").strip().lower()
    return candidate if candidate in WRITE_ERROR_POLICIES else DEFAULT_ON_WRITE_ERROR


def parse_bool(value: str | bool | None, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def parse_names(value: str | None) -> list[str]:
    """Split a comma-separated list of logger names, dropping blanks."""
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


@attrs.frozen
class LoggerOptions:
    """Settings a logger is built from.

    Attributes:
        level: Minimum rank; names are resolved through the level table.
        logger_type: Output format selector.
        add_source: Attach the emit call site to records.
        stream: Text stream the sink writes to; ``None`` means ``sys.stdout``
            at the time the sink is built.
        on_write_error: What to do when the sink fails to write.
        exit_func: Called with status 1 after a fatal record is written.
    """

    level: int = attrs.field(default=DEFAULT_LEVEL, converter=rank_of)
    logger_type: str = attrs.field(default=DEFAULT_LOGGER_TYPE, converter=normalize_logger_type)
    add_source: bool = attrs.field(default=True, validator=attrs.validators.instance_of(bool))
    stream: IO[str] | None = attrs.field(default=None)
    on_write_error: str = attrs.field(default=DEFAULT_ON_WRITE_ERROR, converter=normalize_write_error_policy)
    exit_func: Callable[[int], Any] = attrs.field(default=os._exit, validator=attrs.validators.is_callable())

    def evolve(self, **changes: Any) -> "LoggerOptions":
        return attrs.evolve(self, **changes)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "LoggerOptions":
        """Build options from ``FOCUSLOG_*`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Explicit values that win over the environment

        Returns:
            LoggerOptions: The resolved options
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "level": env.get(ENV_LEVEL, "INFO"),
            "logger_type": env.get(ENV_TYPE, DEFAULT_LOGGER_TYPE),
            "add_source": parse_bool(env.get(ENV_ADD_SOURCE), default=True),
            "on_write_error": env.get(ENV_ON_WRITE_ERROR, DEFAULT_ON_WRITE_ERROR),
        }
        values.update(overrides)
        return cls(**values)


def focus_from_env(environ: Mapping[str, str] | None = None) -> list[str]:
    env = os.environ if environ is None else environ
    return parse_names(env.get(ENV_FOCUS))
