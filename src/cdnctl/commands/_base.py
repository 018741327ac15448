"""Click base classes: on-demand ``--examples`` and command aliases.

``--help`` stays short; worked examples live behind ``--examples``, which
prints them and exits before any other parameter is processed.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds the ``examples=`` keyword and the eager flag that prints it."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class CdnCommand(_ExamplesMixin, click.Command):
    pass


class CdnGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands (and subgroups) are Cdn* classes too.

    ``add_alias("get", "describe")`` lets ``get`` run ``describe``; help and
    error messages still show the real name.
    """

    command_class = CdnCommand
    group_class = type

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.aliases: dict[str, str] = {}

    def add_alias(self, alias: str, command_name: str) -> None:
        self.aliases[alias] = command_name

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd is not None else cmd_name), cmd, rest
