"""Path and location helpers for kitpull."""

import os
from pathlib import Path

CONFIG_FILENAME = "kitpull.json"
MANIFEST_FILENAME = "package.json"
REGISTRY_FILENAME = "registry.json"
SCHEMA_FILENAME = "schema.json"


def get_project_dir() -> Path:
    """Return the invoking project's working directory."""
    return Path.cwd()


def get_config_path(project_dir: Path) -> Path:
    return project_dir / CONFIG_FILENAME


def get_manifest_path(project_dir: Path) -> Path:
    return project_dir / MANIFEST_FILENAME


def get_registry_url(repository: str) -> str:
    return f"https://raw.githubusercontent.com/{repository}/refs/heads/main/{REGISTRY_FILENAME}"


def get_schema_url(repository: str) -> str:
    """Return where the GitHub Pages site of the template repository serves schema.json."""
    owner, name = repository.split("/", 1)
    return f"https://{owner}.github.io/{name}/{SCHEMA_FILENAME}"


def get_registry_source(repository: str) -> str | Path:
    """Return where the registry document is read from.

    Priority:
    1. KITPULL_REGISTRY environment variable (local file path)
    2. registry.json on the main branch of the template repository

    Returns:
        A local Path, or the URL string of the remote document
    """
    if os.environ.get("KITPULL_REGISTRY"):
        return Path(os.environ["KITPULL_REGISTRY"])
    return get_registry_url(repository)


def get_repository(configured: str) -> str:
    """Return the template repository, honouring KITPULL_REPOSITORY."""
    return os.environ.get("KITPULL_REPOSITORY") or configured
