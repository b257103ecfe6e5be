"""Shell-safe re-serialization of argument lists."""

from __future__ import annotations

from collections.abc import Iterable

_QUOTE_ESCAPE = "'\"'\"'"


def quote_one(value: str) -> str:
    cleaned = value.replace("\r", "").replace("\n", "")
    return "'" + cleaned.replace("'", _QUOTE_ESCAPE) + "'"


def quote(values: Iterable[str]) -> str:
    """Single-quote every value and join them with one space.

    Embedded single quotes are closed, emitted inside double quotes and
    reopened, so a POSIX shell splits the result back into exactly the
    original values. Newlines are dropped.
    """
    return " ".join(quote_one(value) for value in values)
