"""Translation of a pane plan into tmux commands, and their execution."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable
from typing import BinaryIO

from panefan.errors import TerminalUnavailable, TmuxCommandFailed
from panefan.planning.assignments import PanePlan
from panefan.quoting import quote, quote_one
from panefan.tmux.layouts import LayoutName

logger = py_logging.getLogger(__name__)

SubprocessRunner = Callable[..., subprocess.CompletedProcess]
CONTROLLING_TERMINAL = "/dev/tty"


def default_names(pid: int) -> tuple[str, str]:
    name = f"panefan-{pid}"
    return name, name


def _prefix(socket_path: str | None) -> list[str]:
    if socket_path:
        return ["tmux", "-S", socket_path]
    return ["tmux"]


def build_tmux_commands(
    plan: PanePlan,
    *,
    session_name: str,
    window_name: str,
    inside_session: bool,
) -> list[list[str]]:
    tmux = _prefix(plan.socket_path)
    target = window_name if inside_session else f"{session_name}:{window_name}"

    if inside_session:
        create = [*tmux, "new-window"]
        if not plan.attach:
            create.append("-d")
        create.extend(["-n", window_name])
    else:
        create = [*tmux, "new-session", "-d", "-s", session_name, "-n", window_name]
    commands: list[list[str]] = [create]

    for assignment in plan.assignments:
        if assignment.index > 0:
            # Each split targets the active pane, which becomes the new pane.
            commands.append([*tmux, "split-window", "-t", target])
            commands.append([*tmux, "select-layout", "-t", target, LayoutName.TILED.value])
        if assignment.log_file is not None:
            commands.append([*tmux, "pipe-pane", "-t", target, f"cat >> {quote_one(str(assignment.log_file))}"])
        commands.append([*tmux, "send-keys", "-t", target, assignment.command, "C-m"])

    for directive in plan.layout.directives:
        commands.append([*tmux, "select-layout", "-t", target, directive.value])

    if plan.sync:
        commands.append([*tmux, "set-window-option", "-t", target, "synchronize-panes", "on"])

    if not inside_session and plan.attach:
        commands.append([*tmux, "attach-session", "-t", session_name])
    return commands


def render_commands(commands: list[list[str]]) -> list[str]:
    return [quote(command) for command in commands]


def _is_attach(command: list[str]) -> bool:
    return "attach-session" in command


def open_controlling_terminal(path: str = CONTROLLING_TERMINAL) -> BinaryIO:
    """Open the controlling terminal for ``attach-session``.

    Used when standard input is a pipe: tmux refuses to attach a client
    whose stdin is not a terminal.
    """
    try:
        return open(path, "r+b", buffering=0)
    except OSError as exc:
        logger.info("Cannot open controlling terminal path=%s error=%s", path, exc)
        raise TerminalUnavailable(
            "no terminal available to attach the tmux session",
            hint="Rerun with --stay to start the panes detached.",
        ) from exc


class TmuxDriver:
    def __init__(self, runner: SubprocessRunner = subprocess.run, *, terminal: BinaryIO | None = None) -> None:
        self.runner = runner
        self.terminal = terminal

    def execute(self, commands: list[list[str]]) -> list[list[str]]:
        executed: list[list[str]] = []
        for command in commands:
            logger.debug("Executing tmux command: %s", command)
            if _is_attach(command):
                if self.terminal is not None:
                    result = self.runner(command, stdin=self.terminal, check=False)
                else:
                    result = self.runner(command, check=False)
                executed.append(command)
                if result.returncode != 0:
                    logger.info("tmux attach failed returncode=%s", result.returncode)
                    raise TerminalUnavailable(
                        "failed to attach to the tmux session",
                        hint=f"Attach manually: {quote(command)}",
                    )
                continue

            result = self.runner(command, capture_output=True, text=True, check=False)
            executed.append(command)
            if result.returncode != 0:
                stderr = (result.stderr or "").strip()
                logger.info("tmux command failed command=%s stderr=%s", command, stderr)
                raise TmuxCommandFailed(
                    "tmux command failed",
                    hint=stderr or "Inspect tmux output and retry.",
                )
        logger.debug("Executed %s tmux commands", len(executed))
        return executed
