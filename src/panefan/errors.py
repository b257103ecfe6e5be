"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

PROGRAM_NAME = "panefan"


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERIC_ERROR = 1
    INVALID_ARGS = 4
    TTY_ERROR = 5
    INVALID_LAYOUT = 6
    LOG_DIR_CREATE = 20
    LOG_DIR_NOT_WRITABLE = 21
    MISSING_DEPENDENCY = 127


@dataclass
class PanefanError(Exception):
    message: str
    code: ExitCode = ExitCode.GENERIC_ERROR
    hint: str = ""

    show_usage = False

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class InvalidOption(PanefanError):
    code: ExitCode = ExitCode.INVALID_ARGS

    show_usage = True


@dataclass
class InvalidLayout(PanefanError):
    code: ExitCode = ExitCode.INVALID_LAYOUT


@dataclass
class MissingArguments(PanefanError):
    code: ExitCode = ExitCode.INVALID_ARGS


@dataclass
class ConflictingSource(PanefanError):
    code: ExitCode = ExitCode.INVALID_ARGS


@dataclass
class MissingDependency(PanefanError):
    code: ExitCode = ExitCode.MISSING_DEPENDENCY


@dataclass
class LogDirUnavailable(PanefanError):
    code: ExitCode = ExitCode.LOG_DIR_CREATE


@dataclass
class TerminalUnavailable(PanefanError):
    code: ExitCode = ExitCode.TTY_ERROR


@dataclass
class TmuxCommandFailed(PanefanError):
    code: ExitCode = ExitCode.GENERIC_ERROR


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"{PROGRAM_NAME}:error: {message}. {hint}"
    return f"{PROGRAM_NAME}:error: {message}"


def user_facing_warning(message: str) -> str:
    return f"{PROGRAM_NAME}:warning: {message}"
