"""Subcommand modules for cdnctl.

Provides register_commands() which attaches every command group to the
root CLI group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from cdnctl.commands.logging_cmd import logging_group
    from cdnctl.commands.service import service
    from cdnctl.commands.service_version import service_version
    from cdnctl.commands.vcl import vcl

    cli.add_command(service)
    cli.add_command(service_version)
    cli.add_command(logging_group)
    cli.add_command(vcl)
