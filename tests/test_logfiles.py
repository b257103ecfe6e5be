from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import pytest

from panefan.errors import ExitCode, LogDirUnavailable
from panefan.planning.logfiles import (
    DEFAULT_LOG_FORMAT,
    EMPTY_PLACEHOLDER,
    generate_log_filenames,
    log_paths,
    prepare_log_dir,
)

_NOW = datetime(2023, 5, 6, 7, 8, 9)


def test_default_format_renders_date_and_counter() -> None:
    names = generate_log_filenames(["host"], DEFAULT_LOG_FORMAT, pid=1, now=_NOW)
    assert names == ["host-1.log.2023-05-06_07-08-09"]


def test_duplicates_get_increasing_counters() -> None:
    names = generate_log_filenames(["a", "b", "a", "a"], "[:ARG:]", pid=1, now=_NOW)
    assert names == ["a-1", "b-1", "a-2", "a-3"]


def test_pid_token_is_substituted() -> None:
    names = generate_log_filenames(["x"], "[:PID:]_[:ARG:]_%Y", pid=4242, now=_NOW)
    assert names == ["4242_x-1_2023"]


def test_percent_in_argument_is_not_a_date_directive() -> None:
    names = generate_log_filenames(["100%d"], "[:ARG:].log", pid=1, now=_NOW)
    assert names == ["100%d-1.log"]


@pytest.mark.parametrize("value", ["", "   ", "\t"])
def test_blank_values_use_placeholder(value: str) -> None:
    names = generate_log_filenames([value, ""], "[:ARG:]", pid=1, now=_NOW)
    assert names == [f"{EMPTY_PLACEHOLDER}-1", f"{EMPTY_PLACEHOLDER}-2"]


def test_path_separators_do_not_escape_directory() -> None:
    names = generate_log_filenames(["../etc/passwd"], "[:ARG:]", pid=1, now=_NOW)
    assert names == [".._etc_passwd-1"]


def test_control_characters_are_dropped_from_labels() -> None:
    names = generate_log_filenames(["\x1b[31mred\x07", "red", "\x1b"], "[:ARG:]", pid=1, now=_NOW)
    assert names == ["[31mred-1", "red-1", f"{EMPTY_PLACEHOLDER}-1"]


def test_counters_do_not_leak_between_calls() -> None:
    first = generate_log_filenames(["a"], "[:ARG:]", pid=1, now=_NOW)
    second = generate_log_filenames(["a"], "[:ARG:]", pid=1, now=_NOW)
    assert first == second == ["a-1"]


def test_log_paths_are_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    paths = log_paths(Path("logs"), ["a-1"])
    assert paths == [tmp_path.resolve() / "logs" / "a-1"]
    assert paths[0].is_absolute()


def test_prepare_log_dir_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "deep" / "logs"
    assert prepare_log_dir(target) == target.resolve()
    assert target.is_dir()


def test_prepare_log_dir_without_create_does_not_touch_disk(tmp_path: Path) -> None:
    target = tmp_path / "later"
    prepare_log_dir(target, create=False)
    assert not target.exists()


def test_prepare_log_dir_creation_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(LogDirUnavailable) as exc:
        prepare_log_dir(blocker / "logs")
    assert exc.value.code == ExitCode.LOG_DIR_CREATE


def test_prepare_log_dir_not_writable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(os, "access", lambda *_args, **_kwargs: False)
    with pytest.raises(LogDirUnavailable) as exc:
        prepare_log_dir(tmp_path)
    assert exc.value.code == ExitCode.LOG_DIR_NOT_WRITABLE
