"""Tmux availability and version probe."""

from __future__ import annotations

import logging as py_logging
import re
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from panefan.errors import MissingDependency

logger = py_logging.getLogger(__name__)

MINIMUM_VERSION = (1, 8)
_VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)")


@dataclass
class BootstrapResult:
    tmux_path: str
    version: tuple[int, int] | None = None
    advisory: str = ""


def parse_tmux_version(output: str) -> tuple[int, int] | None:
    match = _VERSION_PATTERN.search(output)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def _install_hint() -> str:
    return "Install tmux with your package manager (for example: apt-get install tmux, brew install tmux)."


def ensure_tmux(
    *,
    which: Callable[[str], str | None] = shutil.which,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> BootstrapResult:
    tmux_path = which("tmux")
    if not tmux_path:
        logger.info("tmux executable not found on PATH")
        raise MissingDependency("tmux is required but was not found", hint=_install_hint())

    check = runner(["tmux", "-V"], capture_output=True, text=True, check=False)
    raw_version = f"{check.stdout or ''}{check.stderr or ''}".strip()
    version = parse_tmux_version(raw_version) if check.returncode == 0 else None
    logger.debug("Found tmux path=%s version=%s raw=%r", tmux_path, version, raw_version)

    advisory = ""
    if version is None:
        # Development builds print "tmux master"; assume recent.
        if check.returncode != 0:
            advisory = "could not determine the tmux version"
    elif version < MINIMUM_VERSION:
        required = ".".join(str(part) for part in MINIMUM_VERSION)
        advisory = f"tmux {raw_version.split()[-1]} is older than {required}; some features may not work"
    if advisory:
        logger.info("tmux version advisory: %s", advisory)
    return BootstrapResult(tmux_path=tmux_path, version=version, advisory=advisory)
