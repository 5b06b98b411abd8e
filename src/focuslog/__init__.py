"""focuslog: named, focusable structured logging.

Import the global logger and go::

    from focuslog import logger

    logger.info("hello", "user", "ada")
    logger.get_logger("db").debug("connected")
"""

from focuslog.config import (
    LOGGER_TYPE_CONSOLE,
    LOGGER_TYPE_JSON,
    LOGGER_TYPE_LOGURU,
    LOGGER_TYPE_PRETTY,
    LoggerOptions,
)
from focuslog.exceptions import FocuslogError, WriteError
from focuslog.for_logger.focus_filter import FocusState
from focuslog.for_logger.levels import Level, label_of, rank_of
from focuslog.for_logger.records import Field, Record, field, fields
from focuslog.logger_setup import (
    Logger,
    configure_level,
    configure_logger_type,
    focus,
    get_logger,
    logger,
    logger_from_env,
    new_logger,
    unfocus,
)

__version__ = "0.1.0"

__all__ = [
    "LOGGER_TYPE_CONSOLE",
    "LOGGER_TYPE_JSON",
    "LOGGER_TYPE_LOGURU",
    "LOGGER_TYPE_PRETTY",
    "Field",
    "FocusState",
    "FocuslogError",
    "Level",
    "Logger",
    "LoggerOptions",
    "Record",
    "WriteError",
    "configure_level",
    "configure_logger_type",
    "field",
    "fields",
    "focus",
    "get_logger",
    "label_of",
    "logger",
    "logger_from_env",
    "new_logger",
    "rank_of",
    "unfocus",
]
