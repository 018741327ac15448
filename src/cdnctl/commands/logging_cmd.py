"""Command group: logging endpoints.

``cdnctl logging <backend> list|describe|create|update|delete``.  One
subgroup per entry in the backend catalogue, each generated from the
backend's field schema.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from cdnctl.commands._base import CdnCommand, CdnGroup
from cdnctl.commands._options import (
    autoclone_option,
    given_or_none,
    json_option,
    service_options,
    to_optional,
)
from cdnctl.domain.endpoints import BACKENDS, EndpointField, LoggingBackend

if TYPE_CHECKING:
    from cdnctl.commands._context import AppContext
    from cdnctl.domain.types import OptionalFlag

_LOGGING_EXAMPLES = """\
  cdnctl logging datadog list --service-id SU1Z0isxPaozGVKXdv0eY --version active
  cdnctl logging splunk describe --version latest --name splunk-prod
  cdnctl logging loggly create --version 3 --name app --token abc123 --autoclone
  cdnctl logging ftp update --version 3 --name archive --port 2121
  cdnctl logging syslog delete --version 4 --name old-syslog"""


@click.group("logging", cls=CdnGroup, examples=_LOGGING_EXAMPLES)
def logging_group() -> None:
    """Manipulate logging endpoints on a service version."""


def _field_option(field: EndpointField, *, required: bool) -> Callable[[Any], Any]:
    if field.kind == "bool":
        base = field.flag[2:]
        return click.option(
            f"--{base}/--no-{base}",
            field.key,
            default=None,
            callback=given_or_none,
            help=field.help,
        )
    param_type: Any = int if field.kind == "int" else str
    if field.choices:
        param_type = click.Choice(field.choices)
    return click.option(
        field.flag,
        field.key,
        type=param_type,
        required=required,
        help=field.help,
    )


def _field_options(
    backend: LoggingBackend, *, for_create: bool
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        for field in reversed(backend.all_fields):
            func = _field_option(field, required=for_create and field.required)(func)
        return func

    return decorate


def _name_option(backend: LoggingBackend) -> Callable[[Any], Any]:
    return click.option(
        "-n",
        "--name",
        required=True,
        help=f"The name of the {backend.label} logging object.",
    )


def _build_backend_group(backend: LoggingBackend) -> click.Group:
    label = backend.label

    @click.group(backend.name, cls=CdnGroup, help=f"Manipulate {label} logging endpoints.")
    def group() -> None:
        pass

    @group.command(
        "list",
        help=f"List {label} endpoints on a service version.",
        examples=f"""\
  cdnctl logging {backend.name} list --version active
  cdnctl -v logging {backend.name} list --service-name my-site --version latest
  cdnctl logging {backend.name} list -s SU1Z0isxPaozGVKXdv0eY --version 2 --json""",
    )
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
        from cdnctl.services.logging_endpoints import LoggingService

        app.reject_verbose_json("list_logging", json_output)
        options = app.resolve_options(
            service_id=service_id, service_name=service_name, version=version
        )
        result = LoggingService(app.client, errlog=app.errlog).list(backend.name, options)
        app.emit(result, json_output=json_output)

    @group.command(
        "describe",
        help=f"Show detailed information about a {label} logging endpoint. Alias: get.",
    )
    @service_options
    @json_option
    @_name_option(backend)
    @click.pass_obj
    def describe_cmd(
        app: AppContext,
        service_id: str | None,
        service_name: OptionalFlag[str],
        version: OptionalFlag[str],
        json_output: bool,
        name: str,
    ) -> None:
        from cdnctl.services.logging_endpoints import LoggingService

        app.reject_verbose_json("describe_logging", json_output)
        options = app.resolve_options(
            service_id=service_id, service_name=service_name, version=version
        )
        result = LoggingService(app.client, errlog=app.errlog).describe(
            backend.name, options, name
        )
        app.emit(result, json_output=json_output)

    group.add_alias("get", "describe")

    @group.command("create", help=f"Create a {label} logging endpoint on a service version.")
    @service_options
    @autoclone_option
    @json_option
    @_name_option(backend)
    @_field_options(backend, for_create=True)
    @click.pass_obj
    def create_cmd(
        app: AppContext,
        service_id: str | None,
        service_name: OptionalFlag[str],
        version: OptionalFlag[str],
        autoclone: bool,
        json_output: bool,
        name: str,
        **fields: Any,
    ) -> None:
        from cdnctl.services.logging_endpoints import LoggingService

        app.reject_verbose_json("create_logging", json_output)
        options = app.resolve_options(
            service_id=service_id,
            service_name=service_name,
            version=version,
            autoclone=autoclone,
        )
        result = LoggingService(app.client, errlog=app.errlog).create(
            backend.name, options, name, fields
        )
        app.emit(result, json_output=json_output)

    @group.command("update", help=f"Update a {label} logging endpoint on a service version.")
    @service_options
    @autoclone_option
    @json_option
    @_name_option(backend)
    @click.option(
        "--new-name",
        default=None,
        callback=to_optional,
        help=f"New name of the {label} logging object.",
    )
    @_field_options(backend, for_create=False)
    @click.pass_obj
    def update_cmd(
        app: AppContext,
        service_id: str | None,
        service_name: OptionalFlag[str],
        version: OptionalFlag[str],
        autoclone: bool,
        json_output: bool,
        name: str,
        new_name: OptionalFlag[str],
        **fields: Any,
    ) -> None:
        from cdnctl.services.logging_endpoints import LoggingService

        app.reject_verbose_json("update_logging", json_output)
        options = app.resolve_options(
            service_id=service_id,
            service_name=service_name,
            version=version,
            autoclone=autoclone,
        )
        result = LoggingService(app.client, errlog=app.errlog).update(
            backend.name,
            options,
            name,
            fields,
            new_name=new_name.value if new_name.was_set else None,
        )
        app.emit(result, json_output=json_output)

    @group.command("delete", help=f"Delete a {label} logging endpoint on a service version.")
    @service_options
    @autoclone_option
    @json_option
    @_name_option(backend)
    @click.pass_obj
    def delete_cmd(
        app: AppContext,
        service_id: str | None,
        service_name: OptionalFlag[str],
        version: OptionalFlag[str],
        autoclone: bool,
        json_output: bool,
        name: str,
    ) -> None:
        from cdnctl.services.logging_endpoints import LoggingService

        app.reject_verbose_json("delete_logging", json_output)
        options = app.resolve_options(
            service_id=service_id,
            service_name=service_name,
            version=version,
            autoclone=autoclone,
        )
        result = LoggingService(app.client, errlog=app.errlog).delete(backend.name, options, name)
        app.emit(result, json_output=json_output)

    return group


for _backend in BACKENDS.values():
    logging_group.add_command(_build_backend_group(_backend))
