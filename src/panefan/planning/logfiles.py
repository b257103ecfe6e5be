"""Per-pane log file naming and log directory checks."""

from __future__ import annotations

import logging as py_logging
import os
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from panefan.errors import ExitCode, LogDirUnavailable

logger = py_logging.getLogger(__name__)

ARG_TOKEN = "[:ARG:]"
PID_TOKEN = "[:PID:]"
EMPTY_PLACEHOLDER = "EMPTY"
DEFAULT_LOG_FORMAT = f"{ARG_TOKEN}.log.%Y-%m-%d_%H-%M-%S"


def _printable_label(value: str) -> str:
    label = "".join(char for char in value if char.isprintable())
    if not label.strip():
        return EMPTY_PLACEHOLDER
    return label.replace("/", "_")


def generate_log_filenames(
    arguments: Sequence[str],
    log_format: str = DEFAULT_LOG_FORMAT,
    *,
    pid: int,
    now: datetime | None = None,
) -> list[str]:
    """Return one file name per argument, in argument order.

    Date directives are rendered once for the whole call. Each label gets a
    ``-N`` suffix counting earlier occurrences of the same value, so repeated
    arguments never share a file.
    """
    moment = now or datetime.now()
    rendered = moment.strftime(log_format)

    occurrences: dict[str, int] = {}
    names: list[str] = []
    for value in arguments:
        label = _printable_label(value)
        count = occurrences.get(label, 1)
        occurrences[label] = count + 1
        name = rendered.replace(ARG_TOKEN, f"{label}-{count}").replace(PID_TOKEN, str(pid))
        names.append(name)
    return names


def log_paths(log_dir: Path, names: Sequence[str]) -> list[Path]:
    base = log_dir.expanduser().resolve()
    return [base / name for name in names]


def prepare_log_dir(log_dir: Path, *, create: bool = True) -> Path:
    resolved = log_dir.expanduser().resolve()
    if create:
        try:
            resolved.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.info("Failed to create log directory path=%s error=%s", resolved, exc)
            raise LogDirUnavailable(
                f"failed to create log directory '{resolved}'",
                code=ExitCode.LOG_DIR_CREATE,
                hint="Choose another directory with --log=DIR.",
            ) from exc
    if resolved.exists() and not os.access(resolved, os.W_OK):
        logger.info("Log directory is not writable path=%s", resolved)
        raise LogDirUnavailable(
            f"log directory '{resolved}' is not writable",
            code=ExitCode.LOG_DIR_NOT_WRITABLE,
            hint="Fix its permissions or choose another directory with --log=DIR.",
        )
    return resolved
