"""Locate the cdnctl config file.

Search order, first hit wins:

1. ``CDNCTL_CONFIG`` (an explicit path; if it names no file, nothing is loaded)
2. ``cdnctl.toml`` in the start directory or any parent, the way git finds ``.git/``
3. the per-user file ``$XDG_CONFIG_HOME/cdnctl/config.toml``
   (``~/.config/cdnctl/config.toml`` when the variable is unset)

``--config`` bypasses all of this; see :meth:`CdnSettings.from_cli`.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "cdnctl.toml"
CONFIG_ENV_VAR = "CDNCTL_CONFIG"
USER_CONFIG_FILENAME = "config.toml"


def user_config_path() -> Path:
    """Where the per-user config file lives, whether or not it exists."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "cdnctl" / USER_CONFIG_FILENAME


def _ancestors(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to load, or None when there is none."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    for directory in _ancestors(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

    user_file = user_config_path()
    return user_file if user_file.is_file() else None
