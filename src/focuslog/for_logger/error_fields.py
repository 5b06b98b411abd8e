#!/usr/bin/env python3
"""Error enrichment for error and fatal records.

When an error-rank emit carries an exception, the record gets:

- ``error_code`` if the exception exposes a non-``None`` ``code`` attribute
- ``root_error`` with the innermost cause, only when it differs from the error
- ``error`` with the exception itself
- ``stack`` with a snapshot of the emit call site
"""

from collections.abc import Sequence
from typing import Final

from focuslog.for_logger.caller_utils import stack_snapshot
from focuslog.for_logger.records import BAD_KEY, Field

ERROR_KEY: Final = "error"
ROOT_ERROR_KEY: Final = "root_error"
ERROR_CODE_KEY: Final = "error_code"
STACK_KEY: Final = "stack"


def find_error(items: Sequence[Field]) -> tuple[BaseException | None, list[Field]]:
    """Pick the exception to enrich from already-paired fields.

    A field keyed ``"error"`` wins over bare exceptions. Otherwise the first bare
    exception (one paired under ``!BADKEY``) is used. The chosen field is removed
    from the returned list; everything else is kept in order.

    Args:
        items: Paired emit fields

    Returns:
        tuple: (exception or None, remaining fields)
    """
    chosen = None
    for index, item in enumerate(items):
        if item.key == ERROR_KEY and isinstance(item.value, BaseException):
            chosen = index
            break
    if chosen is None:
        for index, item in enumerate(items):
            if item.key == BAD_KEY and isinstance(item.value, BaseException):
                chosen = index
                break
    if chosen is None:
        return None, list(items)
    remaining = [item for index, item in enumerate(items) if index != chosen]
    return items[chosen].value, remaining


def next_cause(error: BaseException) -> BaseException | None:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def root_cause(error: BaseException) -> BaseException:
    """Follow explicit causes, then implicit context, to the innermost error."""
    seen = {id(error)}
    current = error
    while True:
        cause = next_cause(current)
        if cause is None or id(cause) in seen:
            return current
        seen.add(id(cause))
        current = cause


def error_fields(error: BaseException) -> list[Field]:
    derived: list[Field] = []
    code = getattr(error, "code", None)
    if code is not None:
        derived.append(Field(ERROR_CODE_KEY, code))
    root = root_cause(error)
    if root is not error:
        derived.append(Field(ROOT_ERROR_KEY, root))
    derived.append(Field(ERROR_KEY, error))
    derived.append(Field(STACK_KEY, stack_snapshot()))
    return derived


def enrich(items: Sequence[Field]) -> list[Field]:
    """Return ``items`` with derived error fields appended, if any error is present."""
    error, remaining = find_error(items)
    if error is None:
        return remaining
    return remaining + error_fields(error)
