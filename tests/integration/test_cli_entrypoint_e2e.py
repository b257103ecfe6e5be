from __future__ import annotations

import os
import shlex
import subprocess
import sys
from pathlib import Path


def _env_with_pythonpath(tmp_path: Path) -> dict[str, str]:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH", "")
    src_path = str(Path("src").resolve())
    env["PYTHONPATH"] = f"{src_path}{os.pathsep}{existing}" if existing else src_path
    env["HOME"] = str(tmp_path)
    env["TMUX"] = "/tmp/tmux-test/default,1,0"
    return env


def test_cli_module_reports_invalid_option_via_exit_code(tmp_path: Path) -> None:
    completed = subprocess.run(
        [sys.executable, "-m", "panefan", "-x", "a"],
        capture_output=True,
        text=True,
        check=False,
        env=_env_with_pythonpath(tmp_path),
    )

    assert completed.returncode == 4
    assert "panefan:error: invalid option -- 'x'" in completed.stderr


def test_cli_module_dry_run_from_piped_input(tmp_path: Path) -> None:
    completed = subprocess.run(
        [sys.executable, "-m", "panefan", "--dry-run", "-l", "ev", "ping", "-c", "1"],
        input="alpha\n\nbeta\n",
        capture_output=True,
        text=True,
        check=False,
        env=_env_with_pythonpath(tmp_path),
    )

    assert completed.returncode == 0
    commands = [shlex.split(line) for line in completed.stdout.splitlines()]
    sent = [command[-2] for command in commands if command[1] == "send-keys"]
    assert sent == ["ping -c 1 alpha", "ping -c 1 beta"]
    assert commands[-2][-1] == "even-vertical"
    assert commands[-1][-2:] == ["synchronize-panes", "on"]
