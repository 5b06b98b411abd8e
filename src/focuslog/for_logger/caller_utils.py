#!/usr/bin/env python3
"""Call-site detection for emit operations.

Both the ``source`` location and the ``stack`` snapshot attached to error
records must point at application code, not at focuslog's own frames. Frames
are skipped while their file lives inside the focuslog package.
"""

import inspect
import os
import traceback
from types import FrameType
from typing import Final

from focuslog.for_logger.records import Source

_PACKAGE_DIR: Final = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + os.sep

STACK_DEPTH: Final = 32


def _is_internal(frame: FrameType) -> bool:
    return os.path.abspath(frame.f_code.co_filename).startswith(_PACKAGE_DIR)


def caller_frame() -> FrameType | None:
    """Return the innermost frame outside the focuslog package."""
    frame = inspect.currentframe()
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    return frame


def caller_source() -> Source | None:
    frame = caller_frame()
    if frame is None:
        return None
    return Source(
        file=os.path.basename(frame.f_code.co_filename),
        line=frame.f_lineno,
        function=frame.f_code.co_name,
    )


def stack_snapshot(limit: int = STACK_DEPTH) -> str:
    """Format the stack from the emit call site outwards.

    The innermost application frame comes first, the reverse of Python's
    traceback order.

    Args:
        limit: Maximum number of frames to include

    Returns:
        str: One ``function`` line and one indented ``file:line`` line per frame
    """
    frame = caller_frame()
    if frame is None:
        return ""
    summary = traceback.extract_stack(frame, limit=limit)
    lines = [f"{entry.name}\n\t{entry.filename}:{entry.lineno}\n" for entry in reversed(summary)]
    return "".join(lines)


def caller_depth() -> int:
    """Count the frames between the function calling this and the application.

    The result is the ``depth`` loguru's ``opt()`` needs to attribute a record
    to the emit call site instead of to the sink.
    """
    depth = 0
    frame = inspect.currentframe()
    frame = frame.f_back if frame is not None else None
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
        depth += 1
    return depth
