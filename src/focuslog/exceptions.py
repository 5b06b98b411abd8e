#!/usr/bin/env python3
"""Exceptions raised by focuslog.

Configuration mistakes never raise; unknown level names and output formats
fall back to documented defaults. The only runtime failure surfaced to callers
is a sink that cannot write, and only under the ``"raise"`` write-error policy.
"""


class FocuslogError(Exception):
    """Base exception for all focuslog errors."""


class WriteError(FocuslogError):
    """Raised when a sink fails to write a record."""

    def __init__(self, sink: str, message: str = "failed to write log record") -> None:
        """Initialize WriteError.

        Args:
            sink: Name of the sink class that failed.
            message: Error description.
        """
        self.sink = sink
        self.message = message
        super().__init__(f"{sink}: {message}")
