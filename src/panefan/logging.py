"""Diagnostic logging for panefan itself.

Pane output is recorded by tmux into per-pane files; this module only
covers panefan's own diagnostics. Records at or above the configured
level go to standard error and are appended to a file under the cache
directory, so a failed run can be inspected afterwards.
"""

from __future__ import annotations

import logging as py_logging
import os
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "panefan"
LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
DEFAULT_LEVEL = "WARN"
LOG_LEVEL_ENV = "PANEFAN_LOG_LEVEL"
CACHE_HOME_ENV = "XDG_CACHE_HOME"
LOG_FILE_NAME = "panefan.log"
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def default_log_path(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    cache_home = env.get(CACHE_HOME_ENV, "").strip()
    try:
        base = Path(cache_home or "~/.cache").expanduser()
    except RuntimeError:
        base = Path.cwd() / ".cache"
    return base.resolve() / "panefan" / LOG_FILE_NAME


def resolve_level(
    requested: str | None = None,
    *,
    debug: bool = False,
    environ: dict[str, str] | None = None,
) -> int:
    """``debug`` wins, then ``requested``, then ``PANEFAN_LOG_LEVEL``.

    Unknown names fall back to WARNING rather than failing the run.
    """
    if debug:
        return py_logging.DEBUG
    env = os.environ if environ is None else environ
    name = (requested or env.get(LOG_LEVEL_ENV, "")).strip().upper() or DEFAULT_LEVEL
    return LOG_LEVELS.get(name, py_logging.WARNING)


def _release_handlers(logger: py_logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _open_file_handler(log_file: str | Path) -> py_logging.Handler | None:
    path = Path(log_file)
    try:
        path = path.expanduser()
    except RuntimeError:
        pass
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return py_logging.FileHandler(path.resolve(), encoding="utf-8")
    except OSError:
        return None


def configure_logging(
    level: str | None = None,
    stream: TextIO | None = None,
    *,
    debug: bool = False,
    log_file: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> py_logging.Logger:
    resolved = resolve_level(level, debug=debug, environ=environ)
    logger = py_logging.getLogger(LOGGER_NAME)
    _release_handlers(logger)
    logger.setLevel(resolved)
    formatter = py_logging.Formatter(_FORMAT)

    console = py_logging.StreamHandler(stream or sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = _open_file_handler(log_file)
        if file_handler is not None:
            file_handler.setLevel(py_logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def enable_debug(logger: py_logging.Logger) -> None:
    """Lower the console threshold to DEBUG, keeping the open log file."""
    logger.setLevel(py_logging.DEBUG)
    for handler in logger.handlers:
        if not isinstance(handler, py_logging.FileHandler):
            handler.setLevel(py_logging.DEBUG)
