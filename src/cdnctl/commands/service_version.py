"""Command group: service versions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cdnctl.commands._base import CdnGroup
from cdnctl.commands._options import (
    autoclone_option,
    json_option,
    service_id_options,
    service_options,
)

if TYPE_CHECKING:
    from cdnctl.commands._context import AppContext
    from cdnctl.domain.types import OptionalFlag


@click.group(
    "service-version",
    cls=CdnGroup,
    examples="""\
  cdnctl service-version list --service-id SU1Z0isxPaozGVKXdv0eY
  cdnctl service-version clone --version active
  cdnctl service-version activate --version latest
  cdnctl service-version activate --version active --autoclone
  cdnctl service-version lock --version 7""",
)
def service_version() -> None:
    """Manipulate service versions."""


@service_version.command("list")
@service_id_options
@json_option
@click.pass_obj
def list_cmd(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    json_output: bool,
) -> None:
    """List a service's versions."""
    from cdnctl.services.catalog import CatalogService

    app.reject_verbose_json("list_versions", json_output)
    options = app.resolve_options(
        service_id=service_id, service_name=service_name, version_required=False
    )
    app.emit(
        CatalogService(app.client, errlog=app.errlog).list_versions(options),
        json_output=json_output,
    )


@service_version.command("clone")
@service_options
@json_option
@click.pass_obj
def clone(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    version: OptionalFlag[str],
    json_output: bool,
) -> None:
    """Clone a service version."""
    from cdnctl.services.catalog import CatalogService

    app.reject_verbose_json("clone_version", json_output)
    options = app.resolve_options(service_id=service_id, service_name=service_name, version=version)
    app.emit(
        CatalogService(app.client, errlog=app.errlog).clone_version(options),
        json_output=json_output,
    )


def _version_action(action: str, summary: str, *, with_autoclone: bool) -> click.Command:
    def run(
        app: AppContext,
        service_id: str | None,
        service_name: OptionalFlag[str],
        version: OptionalFlag[str],
        json_output: bool,
        autoclone: bool = False,
    ) -> None:
        from cdnctl.services.catalog import CatalogService

        app.reject_verbose_json(f"{action}_version", json_output)
        options = app.resolve_options(
            service_id=service_id,
            service_name=service_name,
            version=version,
            autoclone=autoclone,
        )
        app.emit(
            CatalogService(app.client, errlog=app.errlog).version_action(action, options),
            json_output=json_output,
        )

    run.__doc__ = summary
    func = click.pass_obj(run)
    if with_autoclone:
        func = autoclone_option(func)
    func = json_option(func)
    func = service_options(func)
    return service_version.command(action)(func)


_version_action("activate", "Activate a service version.", with_autoclone=True)
_version_action("deactivate", "Deactivate a service version.", with_autoclone=False)
_version_action("lock", "Lock a service version.", with_autoclone=False)
