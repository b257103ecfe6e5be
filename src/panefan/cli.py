"""Public CLI contract and entrypoint."""

from __future__ import annotations

import logging as py_logging
import os
import shutil
import subprocess
import sys
from collections.abc import Callable, Iterable, Sequence
from typing import BinaryIO

from . import __version__
from .config import load_defaults, resolve_log_dir
from .errors import ExitCode, PanefanError, user_facing_error, user_facing_warning
from .logging import configure_logging, default_log_path, enable_debug
from .options import Action, ParsedConfig, parse_argv
from .planning import LogSettings, PanePlan, build_pane_plan, prepare_log_dir
from .sources import inside_tmux_session, resolve_sources
from .tmux.bootstrap import ensure_tmux
from .tmux.driver import (
    TmuxDriver,
    build_tmux_commands,
    default_names,
    open_controlling_terminal,
    render_commands,
)

USAGE = """\
Usage:
  panefan [OPTIONS] [argument ...]
  command ... | panefan [OPTIONS] [<utility> ...]

Options:
  -h, --help                 Show this help and exit.
  -V, --version              Show the version and exit.
  -c <utility>               Command template run in each pane (default: echo {}).
  -I <repstr>                Replacement token in the template (default: {}).
  -d, --desync               Do not synchronize keyboard input across panes.
  -e                         Execute each argument as a command.
  -l <layout>                Final layout: t, eh, ev, mh, mv or the full tmux name.
  -n <number>                Maximum number of arguments per pane.
  -S <socket-path>           Use an alternative tmux server socket.
  --log[=<directory>]        Record each pane's output to a log file.
  --log-format=<format>      Log file name format ([:ARG:], [:PID:], strftime).
  --ssh                      Shorthand for -c 'ssh -o StrictHostKeyChecking=no {}'.
  --dry-run                  Print the tmux commands instead of running them.
  --stay                     Do not switch to or attach the new window.
  --debug                    Verbose diagnostics on standard error.
  --                         Treat every following token as an argument.
"""

def _report(exc: PanefanError) -> None:
    print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
    if exc.show_usage:
        print(USAGE, file=sys.stderr, end="")


def plan_from_config(
    config: ParsedConfig,
    *,
    stdin: Iterable[str] | None,
    stdin_is_tty: bool,
    environ: dict[str, str],
    pid: int,
) -> PanePlan:
    defaults = load_defaults(environ=environ)
    resolved = resolve_sources(
        config,
        stdin=stdin,
        stdin_is_tty=stdin_is_tty,
        inside_session=inside_tmux_session(environ),
    )

    logs: LogSettings | None = None
    if config.log_enabled:
        directory = resolve_log_dir(config.log_dir, defaults, environ)
        logs = LogSettings(
            directory=prepare_log_dir(directory, create=not config.dry_run),
            file_format=config.log_format or defaults.log_format,
            pid=pid,
        )

    return build_pane_plan(
        resolved,
        layout=config.layout or defaults.layout,
        sync=config.sync and defaults.sync,
        attach=config.attach,
        socket_path=config.socket_path,
        logs=logs,
    )


def run_cli_flow(
    config: ParsedConfig,
    *,
    stdin: Iterable[str] | None,
    stdin_is_tty: bool,
    environ: dict[str, str],
    runner: Callable[..., subprocess.CompletedProcess],
    which: Callable[[str], str | None],
    open_terminal: Callable[[], BinaryIO] = open_controlling_terminal,
) -> int:
    pid = os.getpid()
    plan = plan_from_config(config, stdin=stdin, stdin_is_tty=stdin_is_tty, environ=environ, pid=pid)
    if not config.dry_run:
        probe = ensure_tmux(which=which, runner=runner)
        if probe.advisory:
            print(user_facing_warning(probe.advisory), file=sys.stderr)

    inside_session = inside_tmux_session(environ)
    terminal: BinaryIO | None = None
    if not config.dry_run and plan.attach and not inside_session and not stdin_is_tty:
        # Standard input is the exhausted pipe; attach through the terminal instead.
        terminal = open_terminal()

    session_name, window_name = default_names(pid)
    commands = build_tmux_commands(
        plan,
        session_name=session_name,
        window_name=window_name,
        inside_session=inside_session,
    )

    if config.dry_run:
        for line in render_commands(commands):
            print(line)
        return int(ExitCode.SUCCESS)

    try:
        TmuxDriver(runner, terminal=terminal).execute(commands)
    finally:
        if terminal is not None:
            terminal.close()
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: Iterable[str] | None = None,
    stdin_is_tty: bool | None = None,
    environ: dict[str, str] | None = None,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    which: Callable[[str], str | None] = shutil.which,
    open_terminal: Callable[[], BinaryIO] = open_controlling_terminal,
) -> int:
    env = dict(os.environ) if environ is None else environ
    log_path = default_log_path(env)
    logger = configure_logging(log_file=log_path, environ=env)
    raw_argv = list(argv) if argv is not None else list(sys.argv[1:])

    try:
        config = parse_argv(raw_argv)
    except PanefanError as exc:
        logger.info("Argument parsing failed with exit code %s: %s", int(exc.code), exc.message)
        _report(exc)
        return int(exc.code)

    if config.debug:
        enable_debug(logger)

    if config.action is Action.HELP:
        print(USAGE, end="")
        return int(ExitCode.SUCCESS)
    if config.action is Action.VERSION:
        print(f"panefan {__version__}")
        return int(ExitCode.SUCCESS)

    if stdin is None:
        stdin = sys.stdin
        if stdin_is_tty is None:
            stdin_is_tty = stdin is None or stdin.isatty()
    if stdin_is_tty is None:
        stdin_is_tty = False

    try:
        logger.debug("Starting CLI flow")
        return run_cli_flow(
            config,
            stdin=stdin,
            stdin_is_tty=stdin_is_tty,
            environ=env,
            runner=runner,
            which=which,
            open_terminal=open_terminal,
        )
    except PanefanError as exc:
        logger.info(
            "Handled PanefanError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        _report(exc)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        print(user_facing_error("unexpected failure", hint=f"Inspect logs: {log_path}"), file=sys.stderr)
        return int(ExitCode.GENERIC_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
