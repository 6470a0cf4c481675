"""Registry maintenance commands."""

import json
from pathlib import Path

import click

from kitpull import setup_logging
from kitpull.config import DEFAULT_REPOSITORY, REPOSITORY_PATTERN, load_config
from kitpull.errors import ConfigError
from kitpull.paths import (
    MANIFEST_FILENAME,
    REGISTRY_FILENAME,
    SCHEMA_FILENAME,
    get_schema_url,
)
from kitpull.registry import REGISTRY_SCHEMA, build_registry, read_registry_file

from .utils import run_or_exit


@click.group()
def registry():
    """Registry maintenance commands (for template authors)."""
    pass


@registry.command(name="build")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Template repository checkout (defaults to the directory of SOURCE)",
)
@click.option(
    "--repository",
    "-r",
    help="Template repository (owner/repo) publishing schema.json; "
    "defaults to the repository field of the template's package.json",
)
@click.pass_context
def registry_build(ctx, source: Path, output_dir: Path, root: Path | None, repository: str | None):
    """Validate SOURCE and write registry.json and schema.json to OUTPUT_DIR.

    Every entry path must exist in the template checkout. Bare dependency
    names are pinned to the version listed in the template's package.json
    devDependencies.
    """
    debug = ctx.obj.get("debug", False)
    run_or_exit(
        run_registry_build(source, output_dir, root or source.parent, repository, debug)
    )


async def run_registry_build(
    source: Path,
    output_dir: Path,
    root: Path,
    repository: str | None = None,
    debug: bool = False,
) -> Path:
    setup_logging(debug)
    entries = read_registry_file(source)

    manifest: dict = {}
    manifest_path = root / MANIFEST_FILENAME
    if manifest_path.exists():
        manifest = load_config(manifest_path)

    versions = manifest.get("devDependencies") or {}
    if not isinstance(versions, dict):
        raise ConfigError(f"{manifest_path}: devDependencies must be an object")

    if repository is None:
        declared = manifest.get("repository")
        repository = declared if isinstance(declared, str) else DEFAULT_REPOSITORY
    if not REPOSITORY_PATTERN.match(repository):
        raise ConfigError(f"repository must look like 'owner/repo', got '{repository}'")

    document = build_registry(entries, root, versions, schema_url=get_schema_url(repository))

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / REGISTRY_FILENAME
    output_path.write_text(json.dumps(document, indent=2) + "\n")
    (output_dir / SCHEMA_FILENAME).write_text(json.dumps(REGISTRY_SCHEMA, indent=2) + "\n")
    click.echo(f"✅ Wrote {len(document['entries'])} entries to {output_path}")
    return output_path
