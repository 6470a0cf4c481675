"""Init command implementation."""

import json
from pathlib import Path

import click

from kitpull import setup_logging
from kitpull.config import (
    DEFAULT_REPOSITORY,
    PACKAGE_MANAGERS,
    KitConfig,
    normalize_src_directory,
    write_kit_config,
)
from kitpull.errors import ConfigError
from kitpull.installer import detect_package_manager
from kitpull.paths import get_config_path, get_project_dir
from kitpull.tui import Prompter, QuestionaryPrompter

from .utils import run_or_exit


@click.command()
@click.option("--force", "-f", is_flag=True, help="Re-initialize an existing config")
@click.option("--dry-run", is_flag=True, help="Print the config without writing it")
@click.option(
    "--package-manager",
    "-p",
    type=click.Choice(PACKAGE_MANAGERS),
    help="Skip package manager detection",
)
@click.option("--src-dir", "-s", help="Directory new sources are added to")
@click.option(
    "--repository",
    "-r",
    default=DEFAULT_REPOSITORY,
    show_default=True,
    help="Template repository (owner/repo)",
)
@click.pass_context
def init(ctx, force: bool, dry_run: bool, package_manager: str | None, src_dir: str | None, repository: str):
    """Create kitpull.json in the current project."""
    debug = ctx.obj.get("debug", False)
    run_or_exit(
        run_init(
            get_project_dir(),
            QuestionaryPrompter(),
            force=force,
            package_manager=package_manager,
            src_dir=src_dir,
            repository=repository,
            dry_run=dry_run,
            debug=debug,
        )
    )


async def run_init(
    project_dir: Path,
    prompter: Prompter,
    force: bool = False,
    package_manager: str | None = None,
    src_dir: str | None = None,
    repository: str = DEFAULT_REPOSITORY,
    dry_run: bool = False,
    debug: bool = False,
) -> KitConfig:
    setup_logging(debug)

    if get_config_path(project_dir).exists():
        if not force:
            raise ConfigError("Config already exists. Use --force to re-initialize.")
        click.echo("Config already exists. Forcing re-initialize.")

    package_manager = package_manager or detect_package_manager(project_dir)
    if package_manager is None:
        package_manager = prompter.select_one(
            "Select package manager", list(PACKAGE_MANAGERS), default="pnpm"
        )

    if src_dir is None:
        src_dir = prompter.text(f"Add new sources to {project_dir}/")

    try:
        config = KitConfig(
            package_manager=package_manager,
            src_directory=normalize_src_directory(src_dir),
            repository=repository,
        )
    except ValueError as e:
        raise ConfigError(str(e))

    click.echo("Final config:")
    click.echo(json.dumps(config.to_dict(), indent=2))

    if dry_run:
        return config

    write_kit_config(project_dir, config)
    click.echo("Config created.")
    return config
