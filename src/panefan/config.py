"""User defaults loaded from an optional TOML file."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from panefan.errors import InvalidLayout
from panefan.planning.logfiles import DEFAULT_LOG_FORMAT
from panefan.tmux.layouts import LayoutName, normalize_layout

DEFAULT_CONFIG_PATH = Path("~/.config/panefan/config.toml")
CONFIG_PATH_ENV = "PANEFAN_CONFIG"
LOG_DIR_ENV = "PANEFAN_LOG_DIR"
CACHE_HOME_ENV = "XDG_CACHE_HOME"


def default_log_dir(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    cache_home = env.get(CACHE_HOME_ENV, "").strip()
    base = Path(cache_home).expanduser() if cache_home else Path("~/.cache").expanduser()
    return base / "panefan" / "logs"


class UserDefaults(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    log_dir: Path | None = None
    log_format: str = DEFAULT_LOG_FORMAT
    layout: LayoutName | None = None
    sync: bool = True

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Empty log format")
        return value


def get_config_path(path: str | Path | None = None, environ: dict[str, str] | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _sanitize(raw: dict[str, object]) -> UserDefaults:
    cfg = UserDefaults()

    log_dir = raw.get("log_dir")
    if isinstance(log_dir, str) and log_dir.strip():
        cfg.log_dir = Path(log_dir).expanduser()

    log_format = raw.get("log_format")
    if isinstance(log_format, str) and log_format.strip():
        cfg.log_format = log_format

    layout = raw.get("layout")
    if isinstance(layout, str):
        try:
            cfg.layout = normalize_layout(layout.strip())
        except InvalidLayout:
            pass

    sync = raw.get("sync")
    if isinstance(sync, bool):
        cfg.sync = sync

    return cfg


def load_defaults(path: str | Path | None = None, environ: dict[str, str] | None = None) -> UserDefaults:
    resolved = get_config_path(path, environ)
    if not resolved.exists():
        return UserDefaults()
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return UserDefaults()
    if not isinstance(raw, dict):
        return UserDefaults()
    return _sanitize(raw)


def resolve_log_dir(
    requested: Path | None,
    defaults: UserDefaults,
    environ: dict[str, str] | None = None,
) -> Path:
    """Pick the pane log directory: ``--log=DIR``, then ``PANEFAN_LOG_DIR``,
    then ``log_dir`` from the config file, then the cache default."""
    if requested is not None:
        return requested
    env = os.environ if environ is None else environ
    override = env.get(LOG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    if defaults.log_dir is not None:
        return defaults.log_dir
    return default_log_dir(env)
