"""Root CLI group for cdnctl with global flags and command registration."""

from __future__ import annotations

import click

from cdnctl import __version__
from cdnctl.commands import register_commands
from cdnctl.commands._base import CdnGroup
from cdnctl.commands._context import AppContext
from cdnctl.config.settings import CdnSettings


@click.group(cls=CdnGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cdnctl")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging and output.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("-t", "--token", default=None, help="API token (or CDNCTL_API__TOKEN).")
@click.option("--endpoint", default=None, help="API endpoint override.")
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Manifest file path (default: ./cdn.toml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    token: str | None,
    endpoint: str | None,
    manifest_path: str | None,
) -> None:
    """cdnctl — manage CDN services, versions, logging endpoints and VCL."""
    ctx.ensure_object(dict)
    transport = ctx.obj.get("transport")
    settings = CdnSettings.from_cli(
        config_path=config_path,
        token=token,
        endpoint=endpoint,
        verbose=verbose or None,
        log_json=log_json or None,
        manifest_path=manifest_path,
    )
    app = AppContext(settings, transport=transport)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
