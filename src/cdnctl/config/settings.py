"""CdnSettings: one frozen object built from flags, environment and TOML.

Highest priority first:

1. CLI flags (``None`` means "not given" and is dropped)
2. ``CDNCTL_*`` environment variables, ``__`` for nesting
   (``CDNCTL_API__TOKEN``)
3. the config file picked by :func:`cdnctl.config.discovery.find_config`
   or named with ``--config``
4. defaults on the models
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cdnctl.config.discovery import find_config
from cdnctl.config.models import ApiConfig

# Parsed file contents for the CdnSettings being built right now.
_file_data: ContextVar[dict[str, Any]] = ContextVar("cdnctl_config_data", default={})


def load_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, turning syntax errors into a clean CLI failure."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class ConfigFileSource(PydanticBaseSettingsSource):
    """Hands the already-parsed config file to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class CdnSettings(BaseSettings):
    """Everything a cdnctl invocation is configured with.

    Attributes:
        config_path: Config file actually loaded, or None.
        manifest_path: Explicit ``--manifest`` override, or None to look in
            the working directory.
        error_log: File that failed invocations are appended to.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CDNCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    manifest_path: Path | None = None
    error_log: Path | None = None

    verbose: bool = False
    log_json: bool = False

    api: ApiConfig = Field(default_factory=ApiConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, ConfigFileSource(settings_cls, _file_data.get())

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        cwd: Path | None = None,
        token: str | None = None,
        endpoint: str | None = None,
        **cli_flags: Any,
    ) -> CdnSettings:
        """Build settings for one invocation.

        An explicit *config_path* that names no file loads nothing.
        ``--token`` and ``--endpoint`` fill the ``[api]`` section.
        """
        if config_path:
            path: Path | None = Path(config_path)
            if not path.is_file():
                path = None
        else:
            path = find_config(cwd)

        overrides = {k: v for k, v in cli_flags.items() if v is not None}
        api = {
            k: v for k, v in (("token", token), ("endpoint", endpoint)) if v is not None
        }
        if api:
            overrides["api"] = api

        reset = _file_data.set(load_toml(path) if path else {})
        try:
            return cls(config_path=path, **overrides)
        finally:
            _file_data.reset(reset)
