"""Replacement-token substitution into a command template."""

from __future__ import annotations

from collections.abc import Sequence


def join_batch(arguments: Sequence[str]) -> str:
    return " ".join(arguments)


def render_command(template: str, token: str, arguments: Sequence[str]) -> str:
    if not token or token not in template:
        return template
    return template.replace(token, join_batch(arguments))
