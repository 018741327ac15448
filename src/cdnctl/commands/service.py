"""Command group: services."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cdnctl.commands._base import CdnGroup
from cdnctl.commands._options import json_option, service_id_options

if TYPE_CHECKING:
    from cdnctl.commands._context import AppContext
    from cdnctl.domain.types import OptionalFlag


@click.group(
    cls=CdnGroup,
    examples="""\
  cdnctl service list
  cdnctl service describe --service-id SU1Z0isxPaozGVKXdv0eY
  cdnctl service search --name my-site""",
)
def service() -> None:
    """Manipulate services."""


@service.command("list")
@json_option
@click.pass_obj
def list_cmd(app: AppContext, json_output: bool) -> None:
    """List services."""
    from cdnctl.services.catalog import CatalogService

    app.reject_verbose_json("list_services", json_output)
    app.emit(
        CatalogService(app.client, errlog=app.errlog).list_services(), json_output=json_output
    )


@service.command("describe")
@service_id_options
@json_option
@click.pass_obj
def describe(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    json_output: bool,
) -> None:
    """Show detailed information about a service. Alias: get."""
    from cdnctl.services.catalog import CatalogService

    app.reject_verbose_json("describe_service", json_output)
    options = app.resolve_options(
        service_id=service_id, service_name=service_name, version_required=False
    )
    app.emit(
        CatalogService(app.client, errlog=app.errlog).describe_service(options),
        json_output=json_output,
    )


@service.command("search")
@json_option
@click.option("-n", "--name", required=True, help="Service name.")
@click.pass_obj
def search(app: AppContext, json_output: bool, name: str) -> None:
    """Search for a service by name."""
    from cdnctl.services.catalog import CatalogService

    app.reject_verbose_json("search_service", json_output)
    app.emit(
        CatalogService(app.client, errlog=app.errlog).search_service(name),
        json_output=json_output,
    )


service.add_alias("get", "describe")
