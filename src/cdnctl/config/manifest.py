"""Project manifest — the local file that names a default service.

A project directory may carry a ``cdn.toml`` with a top-level
``service_id``.  The ``CDNCTL_SERVICE_ID`` environment variable outranks
the file, and an explicit ``--service-id`` flag outranks both.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

import click
from pydantic import BaseModel

MANIFEST_FILENAME = "cdn.toml"
SERVICE_ID_ENV_VAR = "CDNCTL_SERVICE_ID"


class ManifestFile(BaseModel):
    """Parsed contents of ``cdn.toml``.  Unknown keys are ignored."""

    model_config = {"frozen": True}

    manifest_version: int = 1
    name: str = ""
    description: str = ""
    service_id: str | None = None


class ManifestData(BaseModel):
    """Default service ID sources, in priority order below the CLI flag."""

    model_config = {"frozen": True}

    env_service_id: str | None = None
    file_service_id: str | None = None
    path: Path | None = None


def read_manifest(path: Path) -> ManifestFile:
    """Parse a manifest file, raising ClickException on malformed TOML."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
    return ManifestFile.model_validate(data)


def load_manifest(path: Path | None = None, cwd: Path | None = None) -> ManifestData:
    """Collect the environment and manifest-file service defaults.

    If *path* is None, looks for ``cdn.toml`` in *cwd* (default: the
    current directory).  A missing file is not an error.
    """
    if path is None:
        path = (cwd or Path.cwd()) / MANIFEST_FILENAME

    file_service_id: str | None = None
    found: Path | None = None
    if path.is_file():
        found = path
        file_service_id = read_manifest(path).service_id or None

    return ManifestData(
        env_service_id=os.environ.get(SERVICE_ID_ENV_VAR) or None,
        file_service_id=file_service_id,
        path=found,
    )
