"""Grouping of arguments into per-pane batches."""

from __future__ import annotations

from collections.abc import Sequence


def batch_arguments(arguments: Sequence[str], size: int | None = None) -> list[list[str]]:
    """Split into consecutive ``size``-long chunks; the last one may be shorter."""
    step = 1 if size is None else size
    if step < 1:
        raise ValueError(f"Invalid batch size: {size}")
    return [list(arguments[start : start + step]) for start in range(0, len(arguments), step)]
