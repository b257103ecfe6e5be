"""Argument source resolution: positional arguments or piped standard input."""

from __future__ import annotations

import logging as py_logging
import os
from collections.abc import Iterable
from dataclasses import dataclass

from panefan.errors import ConflictingSource, MissingArguments
from panefan.options import ParsedConfig

logger = py_logging.getLogger(__name__)

DEFAULT_TEMPLATE = "echo {}"
DEFAULT_TOKEN = "{}"
SESSION_ENV = "TMUX"


@dataclass(frozen=True)
class ResolvedInput:
    arguments: list[str]
    command_template: str
    replacement_token: str
    max_pane_args: int | None
    pipe_mode: bool


def inside_tmux_session(environ: dict[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get(SESSION_ENV, ""))


def read_input_lines(stream: Iterable[str]) -> list[str]:
    """Read every line until EOF, dropping blank ones."""
    lines: list[str] = []
    for raw in stream:
        line = raw.rstrip("\r\n")
        if line.strip():
            lines.append(line)
    return lines


def resolve_sources(
    config: ParsedConfig,
    *,
    stdin: Iterable[str] | None,
    stdin_is_tty: bool,
    inside_session: bool,
) -> ResolvedInput:
    token = config.replacement_token or None
    template = config.command_template
    max_pane_args = config.max_pane_args
    positional = list(config.positional)

    if stdin_is_tty or stdin is None:
        if not positional:
            raise MissingArguments(
                "no arguments given",
                hint="Pass arguments on the command line or pipe them on standard input.",
            )
        arguments = positional
        pipe_mode = False
    else:
        if positional:
            if config.template_from_option:
                raise ConflictingSource(
                    "both arguments and an option that sets the command (-c, -e, --ssh) are given",
                    hint="Drop the positional arguments or the command option.",
                )
            template = " ".join(positional)
            if token is None:
                token = DEFAULT_TOKEN
                template = f"{template} {token}"
        arguments = read_input_lines(stdin)
        if not arguments:
            raise MissingArguments("no arguments given", hint="Standard input had no usable lines.")
        if max_pane_args is None and not inside_session:
            max_pane_args = 1
        pipe_mode = True

    resolved = ResolvedInput(
        arguments=arguments,
        command_template=DEFAULT_TEMPLATE if template is None else template,
        replacement_token=DEFAULT_TOKEN if token is None else token,
        max_pane_args=max_pane_args,
        pipe_mode=pipe_mode,
    )
    logger.debug(
        "Resolved input pipe_mode=%s arguments=%s template=%r token=%r max_pane_args=%s",
        resolved.pipe_mode,
        len(resolved.arguments),
        resolved.command_template,
        resolved.replacement_token,
        resolved.max_pane_args,
    )
    return resolved
