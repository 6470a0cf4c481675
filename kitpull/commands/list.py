"""List command implementation."""

from pathlib import Path

import click

from kitpull import setup_logging
from kitpull.config import DEFAULT_REPOSITORY, read_kit_config
from kitpull.errors import ConfigurationMissing
from kitpull.paths import get_project_dir, get_registry_source, get_repository
from kitpull.registry import RegistryEntry, load_registry

from .utils import run_or_exit


def format_entry(entry: RegistryEntry, verbose: bool = False) -> list[str]:
    lines = [f"{entry.name:<30} {entry.entry}"]
    if not verbose:
        return lines
    if entry.copy_to:
        lines.append(f"    copyTo: {entry.copy_to}")
    if entry.dependencies:
        lines.append(f"    dependencies: {', '.join(entry.dependencies)}")
    if entry.dev_dependencies:
        lines.append(f"    devDependencies: {', '.join(entry.dev_dependencies)}")
    return lines


@click.command(name="list")
@click.option("--verbose", "-v", is_flag=True, help="Show copy targets and dependencies")
@click.pass_context
def list_entries(ctx, verbose: bool):
    """List the entries available in the registry."""
    debug = ctx.obj.get("debug", False)
    run_or_exit(run_list(get_project_dir(), verbose, debug))


async def run_list(project_dir: Path, verbose: bool, debug: bool) -> None:
    setup_logging(debug)
    try:
        repository = read_kit_config(project_dir).repository
    except ConfigurationMissing:
        repository = DEFAULT_REPOSITORY

    registry = await load_registry(get_registry_source(get_repository(repository)))
    for entry in registry:
        for line in format_entry(entry, verbose):
            click.echo(line)
