#!/usr/bin/env python3
"""Colorized console sink.

Renders each record as a single rich-styled line::

    [2026-01-30 14:05:09] INFO request served path=/ - status=200 [app.py:42]

Colors follow the level; the message is cyan and fields are dimmed. Whether
ANSI codes are actually emitted is left to rich, which disables them for
non-terminal streams and honours ``NO_COLOR``.
"""

from typing import IO, Final

from rich.console import Console
from rich.text import Text

from focuslog.exceptions import WriteError
from focuslog.for_logger.handlers import Context, StreamHandler, format_text_value
from focuslog.for_logger.levels import DEFAULT_LEVEL, Level, label_of
from focuslog.for_logger.records import Record

TIME_FORMAT: Final = "YYYY-MM-DD HH:mm:ss"
FIELD_SPACER: Final = " - "

LEVEL_STYLES: Final[dict[int, str]] = {
    Level.TRACE: "white",
    Level.DEBUG: "magenta",
    Level.INFO: "blue",
    Level.SUCCESS: "green",
    Level.WARN: "yellow",
    Level.ERROR: "red",
    Level.FATAL: "bold red",
}


def level_style(level: int) -> str:
    return LEVEL_STYLES.get(level, "default")


class ColorConsoleHandler(StreamHandler):
    """Stream sink that writes colored, human-oriented lines."""

    def __init__(
        self,
        stream: IO[str] | None = None,
        level: int = DEFAULT_LEVEL,
        add_source: bool = False,
        force_terminal: bool | None = None,
    ) -> None:
        super().__init__(stream=stream, level=level, add_source=add_source)
        self.console = Console(
            file=self.stream,
            force_terminal=force_terminal,
            highlight=False,
            markup=False,
            emoji=False,
            soft_wrap=True,
        )

    def render(self, record: Record) -> Text:
        line = Text()
        line.append(f"[{record.time.format(TIME_FORMAT)}]", style="green")
        line.append(" ")
        line.append(label_of(record.level), style=level_style(record.level))
        line.append(" ")
        line.append(record.message, style="cyan")

        pairs = []
        for path, item in self.iter_fields(record):
            key = ".".join(path + (item.key,))
            pairs.append(f"{key}={format_text_value(item.value)}")
        if pairs:
            line.append(" ")
            line.append(FIELD_SPACER.join(pairs), style="dim")

        if self.add_source and record.source is not None:
            line.append(" [")
            line.append(record.source.file, style="cyan")
            line.append(":")
            line.append(str(record.source.line), style="yellow")
            line.append("]")
        return line

    def format(self, context: Context, record: Record) -> str:
        return self.render(record).plain

    def handle(self, context: Context, record: Record) -> None:
        text = self.render(record)
        with self._lock:
            try:
                self.console.print(text)
            except (OSError, ValueError) as exc:
                raise WriteError(type(self).__name__, str(exc)) from exc
