"""Command group: VCL code (``cdnctl vcl snippet ...``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cdnctl.commands._base import CdnGroup
from cdnctl.commands._options import (
    autoclone_option,
    content_callback,
    json_option,
    optional_content_callback,
    service_options,
    to_optional,
)
from cdnctl.domain.snippets import DEFAULT_PRIORITY, LOCATIONS

if TYPE_CHECKING:
    from cdnctl.commands._context import AppContext
    from cdnctl.domain.types import OptionalFlag

_CONTENT_HELP = "VCL snippet passed as file path or content, e.g. $(< snippet.vcl)."
_TYPE_HELP = "The location in generated VCL where the snippet should be placed."


@click.group(cls=CdnGroup)
def vcl() -> None:
    """Manipulate service VCL code."""


@vcl.group(
    examples="""\
  cdnctl vcl snippet list --version active
  cdnctl vcl snippet create --version 3 --name ban --type recv --content ./ban.vcl
  cdnctl vcl snippet update --version 3 --name ban --new-name ban-v2 --autoclone
  cdnctl vcl snippet update --version active --dynamic --snippet-id 62Yd1WfiCB --content ./acl.vcl
  cdnctl vcl snippet describe --version latest --name ban"""
)
def snippet() -> None:
    """Manipulate VCL snippets."""


@snippet.command("create")
@service_options
@autoclone_option
@json_option
@click.option("--name", required=True, help="The name of the VCL snippet.")
@click.option("--content", required=True, callback=content_callback, help=_CONTENT_HELP)
@click.option("--type", "location", type=click.Choice(LOCATIONS), required=True, help=_TYPE_HELP)
@click.option(
    "-p",
    "--priority",
    type=int,
    default=DEFAULT_PRIORITY,
    show_default=True,
    help="Priority determines execution order. Lower numbers execute first.",
)
@click.option("--dynamic", is_flag=True, help="Whether the VCL snippet is dynamic or versioned.")
@click.pass_obj
def create(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    version: OptionalFlag[str],
    autoclone: bool,
    json_output: bool,
    name: str,
    content: str,
    location: str,
    priority: int,
    dynamic: bool,
) -> None:
    """Create a VCL snippet for a particular service and version."""
    from cdnctl.services.snippet import SnippetService

    app.reject_verbose_json("create_snippet", json_output)
    options = app.resolve_options(
        service_id=service_id, service_name=service_name, version=version, autoclone=autoclone
    )
    result = SnippetService(app.client, errlog=app.errlog).create(
        options,
        name=name,
        content=content,
        location=location,
        priority=priority,
        dynamic=dynamic,
    )
    app.emit(result, json_output=json_output)


@snippet.command("list")
@service_options
@json_option
@click.pass_obj
def list_cmd(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    version: OptionalFlag[str],
    json_output: bool,
) -> None:
    """List the uploaded VCL snippets for a particular service and version."""
    from cdnctl.services.snippet import SnippetService

    app.reject_verbose_json("list_snippets", json_output)
    options = app.resolve_options(service_id=service_id, service_name=service_name, version=version)
    app.emit(SnippetService(app.client, errlog=app.errlog).list(options), json_output=json_output)


@snippet.command("describe")
@service_options
@json_option
@click.option("--name", default=None, help="The name of the VCL snippet.")
@click.option("--snippet-id", default=None, help="Alphanumeric string identifying a VCL Snippet.")
@click.option("--dynamic", is_flag=True, help="Whether the VCL snippet is dynamic or versioned.")
@click.pass_obj
def describe(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    version: OptionalFlag[str],
    json_output: bool,
    name: str | None,
    snippet_id: str | None,
    dynamic: bool,
) -> None:
    """Get the uploaded VCL snippet for a particular service and version. Alias: get."""
    from cdnctl.services.snippet import SnippetService

    app.reject_verbose_json("describe_snippet", json_output)
    options = app.resolve_options(service_id=service_id, service_name=service_name, version=version)
    result = SnippetService(app.client, errlog=app.errlog).describe(
        options, name=name, snippet_id=snippet_id, dynamic=dynamic
    )
    app.emit(result, json_output=json_output)


@snippet.command("update")
@service_options
@autoclone_option
@json_option
@click.option(
    "--content", default=None, callback=optional_content_callback, help=_CONTENT_HELP
)
@click.option(
    "--dynamic/--no-dynamic",
    default=None,
    callback=to_optional,
    help="Update a dynamic VCL snippet. Giving the flag in either form selects the dynamic path.",
)
@click.option("--name", default=None, help="The name of the VCL snippet to update.")
@click.option(
    "--new-name", default=None, callback=to_optional, help="New name for the VCL snippet."
)
@click.option(
    "-p",
    "--priority",
    type=int,
    default=None,
    callback=to_optional,
    help="Priority determines execution order. Lower numbers execute first.",
)
@click.option("--snippet-id", default=None, help="Alphanumeric string identifying a VCL Snippet.")
@click.option(
    "--type",
    "location",
    type=click.Choice(LOCATIONS),
    default=None,
    callback=to_optional,
    help=_TYPE_HELP,
)
@click.pass_obj
def update(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    version: OptionalFlag[str],
    autoclone: bool,
    json_output: bool,
    content: OptionalFlag[str],
    dynamic: OptionalFlag[bool],
    name: str | None,
    new_name: OptionalFlag[str],
    priority: OptionalFlag[int],
    snippet_id: str | None,
    location: OptionalFlag[str],
) -> None:
    """Update a VCL snippet for a particular service and version.

    With --dynamic, updates the content of a dynamic snippet identified by
    --snippet-id; otherwise updates the versioned snippet named by --name.
    """
    from cdnctl.services.snippet import SnippetService

    op = "update_dynamic_snippet" if dynamic.was_set else "update_snippet"
    app.reject_verbose_json(op, json_output)
    options = app.resolve_options(
        service_id=service_id, service_name=service_name, version=version, autoclone=autoclone
    )
    result = SnippetService(app.client, errlog=app.errlog).update(
        options,
        dynamic=dynamic.was_set,
        snippet_id=snippet_id,
        name=name,
        new_name=new_name,
        priority=priority,
        content=content,
        location=location,
    )
    app.emit(result, json_output=json_output)


@snippet.command("delete")
@service_options
@autoclone_option
@json_option
@click.option("--name", required=True, help="The name of the VCL snippet to delete.")
@click.pass_obj
def delete(
    app: AppContext,
    service_id: str | None,
    service_name: OptionalFlag[str],
    version: OptionalFlag[str],
    autoclone: bool,
    json_output: bool,
    name: str,
) -> None:
    """Delete a specific VCL snippet for a particular service and version."""
    from cdnctl.services.snippet import SnippetService

    app.reject_verbose_json("delete_snippet", json_output)
    options = app.resolve_options(
        service_id=service_id, service_name=service_name, version=version, autoclone=autoclone
    )
    app.emit(
        SnippetService(app.client, errlog=app.errlog).delete(options, name),
        json_output=json_output,
    )


snippet.add_alias("get", "describe")
