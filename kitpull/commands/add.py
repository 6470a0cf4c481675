"""Add command implementation."""

import logging
from pathlib import Path

import click

from kitpull import setup_logging
from kitpull.config import KitConfig, read_kit_config
from kitpull.installer import (
    Collaborators,
    CopyOrchestrator,
    GitFetcher,
    ShellPackageInstaller,
    load_manifest,
)
from kitpull.paths import get_project_dir, get_registry_source, get_repository
from kitpull.registry import find_entries, load_registry
from kitpull.tui import QuestionaryPrompter

from .utils import run_or_exit

_logging = logging.getLogger(__name__)


def build_collaborators(config: KitConfig, project_dir: Path) -> Collaborators:
    return Collaborators(
        fetcher=GitFetcher(get_repository(config.repository)),
        prompter=QuestionaryPrompter(),
        installer=ShellPackageInstaller(config.package_manager, project_dir),
    )


@click.command()
@click.argument("names", nargs=-1)
@click.option("--out", "-o", help="Destination path (only with a single entry)")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing fetch output")
@click.option("--verbose", "-v", is_flag=True, help="Report every fetch step")
@click.option("--dry-run", is_flag=True, help="Show what would be copied and installed")
@click.option("--yes", "-y", is_flag=True, help="Accept dependency conflicts without asking")
@click.pass_context
def add(ctx, names: tuple[str, ...], out: str | None, force: bool, verbose: bool, dry_run: bool, yes: bool):
    """Copy registry entries into the current project."""
    if out and len(names) != 1:
        raise click.BadOptionUsage(
            "--out", "Cannot use 'out' without specific registry entry to add."
        )

    debug = ctx.obj.get("debug", False)
    run_or_exit(
        run_add(
            get_project_dir(),
            list(names),
            out=out,
            force=force,
            verbose=verbose,
            dry_run=dry_run,
            yes=yes,
            debug=debug,
        )
    )


async def run_add(
    project_dir: Path,
    names: list[str],
    out: str | None = None,
    force: bool = False,
    verbose: bool = False,
    dry_run: bool = False,
    yes: bool = False,
    debug: bool = False,
) -> None:
    setup_logging(debug or verbose)
    config = read_kit_config(project_dir)

    registry = await load_registry(get_registry_source(get_repository(config.repository)))
    collaborators = build_collaborators(config, project_dir)

    if names:
        selected = [entry.name for entry in find_entries(registry, names)]
    else:
        selected = collaborators.prompter.select_many(
            "Code to add", [entry.name for entry in registry]
        )

    if not selected:
        click.echo("Nothing selected.")
        return

    click.echo(f"Adding: {', '.join(selected)}")

    orchestrator = CopyOrchestrator(
        registry,
        load_manifest(project_dir),
        config,
        collaborators,
        project_dir,
        copy_to=out,
        force=force,
        verbose=verbose,
        assume_yes=yes,
        dry_run=dry_run,
    )
    report = await orchestrator.run(selected)

    _logging.debug(
        f"copied={report.copied} skipped={report.skipped} "
        f"deps={report.dependencies} devDeps={report.dev_dependencies}"
    )
    if report.skipped:
        click.echo(f"Skipped: {', '.join(report.skipped)}")
