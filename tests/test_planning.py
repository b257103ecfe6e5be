from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from panefan.options import parse_argv
from panefan.planning import (
    LogSettings,
    batch_arguments,
    build_pane_plan,
    render_command,
)
from panefan.sources import ResolvedInput, resolve_sources
from panefan.tmux.layouts import LayoutName


def _resolved(arguments: list[str], *, template: str = "echo {}", size: int | None = None) -> ResolvedInput:
    return ResolvedInput(
        arguments=arguments,
        command_template=template,
        replacement_token="{}",
        max_pane_args=size,
        pipe_mode=False,
    )


def test_batches_default_to_one_argument_each() -> None:
    assert batch_arguments(["a", "b", "c"]) == [["a"], ["b"], ["c"]]


def test_batches_allow_short_final_chunk() -> None:
    assert batch_arguments(["a", "b", "c", "d", "e"], 2) == [["a", "b"], ["c", "d"], ["e"]]


def test_batching_empty_list() -> None:
    assert batch_arguments([], 3) == []


def test_batch_size_below_one_is_rejected() -> None:
    with pytest.raises(ValueError):
        batch_arguments(["a"], 0)


def test_render_replaces_every_occurrence() -> None:
    assert render_command("cp {} {}.bak", "{}", ["notes"]) == "cp notes notes.bak"


def test_render_joins_batch_with_spaces() -> None:
    assert render_command("echo {}", "{}", ["a", "b"]) == "echo a b"


def test_render_without_occurrence_leaves_template() -> None:
    assert render_command("top", "{}", ["ignored"]) == "top"


def test_render_with_empty_token_leaves_template() -> None:
    assert render_command("uptime", "", ["host"]) == "uptime"


def test_custom_token_scenario() -> None:
    config = parse_argv(["-I", "@@", "-c", "ping @@", "host1"])
    resolved = resolve_sources(config, stdin=None, stdin_is_tty=True, inside_session=True)
    plan = build_pane_plan(resolved)
    assert [item.command for item in plan.assignments] == ["ping host1"]


def test_default_template_scenario() -> None:
    plan = build_pane_plan(_resolved(["a", "b", "c"]))
    assert [item.command for item in plan.assignments] == ["echo a", "echo b", "echo c"]
    assert [item.index for item in plan.assignments] == [0, 1, 2]
    assert plan.layout.final is LayoutName.TILED


def test_batched_scenario() -> None:
    plan = build_pane_plan(_resolved(["a", "b", "c", "d", "e"], size=2))
    assert plan.pane_count == 3
    assert [item.arguments for item in plan.assignments] == [("a", "b"), ("c", "d"), ("e",)]
    assert [item.command for item in plan.assignments] == ["echo a b", "echo c d", "echo e"]


def test_plan_carries_layout_override_and_session_settings() -> None:
    plan = build_pane_plan(
        _resolved(["a", "b", "c"]),
        layout=LayoutName.MAIN_VERTICAL,
        sync=False,
        attach=False,
        socket_path="/tmp/sock",
    )
    assert plan.layout.final is LayoutName.MAIN_VERTICAL
    assert plan.sync is False
    assert plan.attach is False
    assert plan.socket_path == "/tmp/sock"


def test_plan_without_logging_has_no_log_files() -> None:
    plan = build_pane_plan(_resolved(["a"]))
    assert plan.assignments[0].log_file is None


def test_plan_log_files_follow_pane_order(tmp_path: Path) -> None:
    plan = build_pane_plan(
        _resolved(["web", "db", "web"]),
        logs=LogSettings(directory=tmp_path, file_format="[:ARG:].log", pid=7),
        now=datetime(2024, 1, 2, 3, 4, 5),
    )
    assert [item.log_file for item in plan.assignments] == [
        tmp_path.resolve() / "web-1.log",
        tmp_path.resolve() / "db-1.log",
        tmp_path.resolve() / "web-2.log",
    ]


def test_plan_log_file_per_batch(tmp_path: Path) -> None:
    plan = build_pane_plan(
        _resolved(["a", "b", "c"], size=2),
        logs=LogSettings(directory=tmp_path, file_format="[:ARG:].log", pid=7),
    )
    assert [item.log_file.name for item in plan.assignments if item.log_file] == ["a b-1.log", "c-1.log"]
