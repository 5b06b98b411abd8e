#!/usr/bin/env python3
"""Named logger registry.

One registry is owned by each root logger. It maps names to logger instances
and holds the focus state shared by every logger created through it. All
access goes through a single re-entrant lock, so looking up a name and
registering it happen as one step and at most one logger is ever built per name.
"""

import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from loguru import logger as _diagnostics

from focuslog.for_logger.focus_filter import FocusState

if TYPE_CHECKING:
    from focuslog.logger_setup import Logger


class LoggerRegistry:
    """Thread-safe map of logger names to loggers, plus focus state."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._loggers: dict[str, "Logger"] = {}
        self._focus = FocusState()
        self._root: "Logger | None" = None

    def attach_root(self, root: "Logger") -> None:
        with self._lock:
            self._root = root

    @property
    def root(self) -> "Logger | None":
        return self._root

    @property
    def focus_state(self) -> FocusState:
        with self._lock:
            return self._focus

    def is_permitted(self, name: str) -> bool:
        """Check the current focus state for ``name``; evaluated on every call."""
        with self._lock:
            return self._focus.permits(name)

    def lookup(self, name: str) -> "Logger | None":
        with self._lock:
            return self._loggers.get(name)

    def get_or_create(self, name: str, factory: Callable[[], "Logger"]) -> "Logger":
        """Return the logger registered under ``name``, building it on first use.

        Args:
            name: Logger name
            factory: Builds a fully configured logger; called at most once per name

        Returns:
            Logger: The registered instance
        """
        with self._lock:
            existing = self._loggers.get(name)
            if existing is not None:
                return existing
            created = factory()
            self._loggers[name] = created
            _diagnostics.trace("focuslog: registered logger {!r}", name)
            return created

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._loggers)

    def focus(self, names: Iterable[str]) -> None:
        """Restrict emission to ``names``, replacing any previous focus set."""
        with self._lock:
            self._focus = FocusState(enabled=True, allowed=frozenset(names))
            self._reconfigure_all()

    def unfocus(self) -> None:
        with self._lock:
            self._focus = FocusState()
            self._reconfigure_all()

    def _reconfigure_all(self) -> None:
        for registered in self._loggers.values():
            registered.configure()
        if self._root is not None:
            self._root.configure()

    def __len__(self) -> int:
        with self._lock:
            return len(self._loggers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._loggers
