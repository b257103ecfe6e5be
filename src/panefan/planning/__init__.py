"""Input-to-pane planning."""

from .assignments import LogSettings, PaneAssignment, PanePlan, build_pane_plan
from .batching import batch_arguments
from .logfiles import DEFAULT_LOG_FORMAT, generate_log_filenames, log_paths, prepare_log_dir
from .template import render_command

__all__ = [
    "batch_arguments",
    "build_pane_plan",
    "DEFAULT_LOG_FORMAT",
    "generate_log_filenames",
    "log_paths",
    "LogSettings",
    "PaneAssignment",
    "PanePlan",
    "prepare_log_dir",
    "render_command",
]
