"""Filesystem locations used by pemsign."""
from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "pemsign"


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path(PlatformDirs(appname=_APP_NAME, appauthor=None).user_config_path)


def project_config_path() -> Path:
    return Path.cwd() / ".pemsign" / "config.yaml"
