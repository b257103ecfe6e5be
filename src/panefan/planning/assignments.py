"""Assembly of the per-pane plan handed to the tmux driver."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from panefan.planning.batching import batch_arguments
from panefan.planning.logfiles import generate_log_filenames, log_paths
from panefan.planning.template import join_batch, render_command
from panefan.sources import ResolvedInput
from panefan.tmux.layouts import LayoutName, LayoutPlan, plan_layout

logger = py_logging.getLogger(__name__)


@dataclass(frozen=True)
class PaneAssignment:
    index: int
    arguments: tuple[str, ...]
    command: str
    log_file: Path | None = None


@dataclass(frozen=True)
class PanePlan:
    assignments: tuple[PaneAssignment, ...]
    layout: LayoutPlan
    sync: bool = True
    attach: bool = True
    socket_path: str | None = None

    @property
    def pane_count(self) -> int:
        return len(self.assignments)


@dataclass(frozen=True)
class LogSettings:
    directory: Path
    file_format: str
    pid: int


def build_pane_plan(
    resolved: ResolvedInput,
    *,
    layout: LayoutName | None = None,
    sync: bool = True,
    attach: bool = True,
    socket_path: str | None = None,
    logs: LogSettings | None = None,
    now: datetime | None = None,
) -> PanePlan:
    batches = batch_arguments(resolved.arguments, resolved.max_pane_args)

    log_files: list[Path | None] = [None] * len(batches)
    if logs is not None:
        names = generate_log_filenames(
            [join_batch(batch) for batch in batches],
            logs.file_format,
            pid=logs.pid,
            now=now,
        )
        log_files = list(log_paths(logs.directory, names))

    assignments = tuple(
        PaneAssignment(
            index=index,
            arguments=tuple(batch),
            command=render_command(resolved.command_template, resolved.replacement_token, batch),
            log_file=log_file,
        )
        for index, (batch, log_file) in enumerate(zip(batches, log_files))
    )
    plan = PanePlan(
        assignments=assignments,
        layout=plan_layout(len(assignments), layout),
        sync=sync,
        attach=attach,
        socket_path=socket_path,
    )
    logger.debug(
        "Built pane plan panes=%s layout=%s logging=%s",
        plan.pane_count,
        [item.value for item in plan.layout.directives],
        logs is not None,
    )
    return plan
