"""CLI command definitions for kitpull."""

import click

from kitpull import __version__
from kitpull.commands.add import add
from kitpull.commands.init import init
from kitpull.commands.list import list_entries
from kitpull.commands.registry import registry


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.version_option(__version__, prog_name="kitpull")
@click.pass_context
def cli(ctx, debug):
    """Copy registry entries from a template repository into your project."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(init)
cli.add_command(add)
cli.add_command(list_entries, name="list")
cli.add_command(registry)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
