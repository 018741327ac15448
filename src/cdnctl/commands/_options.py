"""Shared Click options.

Every command that targets a service version takes the same trio of
flags (``--service-id``, ``--service-name``, ``--version``); mutating
commands add ``--autoclone`` and most commands take ``--json``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from click.core import ParameterSource

from cdnctl.domain.types import OptionalFlag

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_ID_HELP = "Service ID (falls back to CDNCTL_SERVICE_ID, then cdn.toml)."
SERVICE_NAME_HELP = "The name of the service."
VERSION_HELP = "'latest', 'active', or the number of a specific version."


def _was_given(ctx: click.Context, param: click.Parameter) -> bool:
    source = ctx.get_parameter_source(param.name or "")
    return source is not None and source is not ParameterSource.DEFAULT


def to_optional(ctx: click.Context, param: click.Parameter, value: Any) -> OptionalFlag[Any]:
    """Click callback: wrap a value so "not given" survives as ``was_set=False``.

    Decided by where click found the value, so a boolean pair like
    ``--dynamic/--no-dynamic`` reports ``was_set`` for either spelling.
    """
    if not _was_given(ctx, param):
        return OptionalFlag()
    return OptionalFlag.from_value(value)


def given_or_none(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
    """Click callback: the value if it came from the command line, else None."""
    return value if _was_given(ctx, param) else None


def read_content(value: str) -> str:
    """Treat *value* as a file path if one exists there, else as literal content."""
    path = Path(value)
    try:
        is_file = path.is_file()
    except (OSError, ValueError):
        # Inline VCL can be too long or contain bytes no path may hold.
        is_file = False
    return path.read_text(encoding="utf-8") if is_file else value


def content_callback(_ctx: click.Context, _param: click.Parameter, value: str | None) -> Any:
    return None if value is None else read_content(value)


def optional_content_callback(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> OptionalFlag[str]:
    return OptionalFlag.from_value(None if value is None else read_content(value))


def service_id_options(func: F) -> F:
    """``--service-id`` / ``--service-name`` (no version)."""
    func = click.option(
        "--service-name",
        "service_name",
        default=None,
        callback=to_optional,
        help=SERVICE_NAME_HELP,
    )(func)
    func = click.option(
        "-s", "--service-id", "service_id", default=None, help=SERVICE_ID_HELP
    )(func)
    return func


def service_options(func: F) -> F:
    """``--service-id``, ``--service-name`` and a required ``--version``."""
    func = click.option(
        "--version",
        "version",
        required=True,
        callback=to_optional,
        help=VERSION_HELP,
    )(func)
    return service_id_options(func)


json_option = click.option(
    "-j", "--json", "json_output", is_flag=True, help="Render output as JSON."
)

autoclone_option = click.option(
    "--autoclone",
    is_flag=True,
    help="If the selected service version is not editable, clone it and use the clone.",
)
