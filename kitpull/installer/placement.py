"""Destination resolution and placement of fetched registry entries."""

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Callable

from kitpull.config import KitConfig
from kitpull.errors import ConfigError
from kitpull.registry import RegistryEntry

from .filesystem import FileSystem
from .models import CopyPlan

_logging = logging.getLogger(__name__)

PathCheck = Callable[[Path], bool]


def looks_like_file(path: str) -> bool:
    """Return True when the last path segment has a file extension.

    Examples:
        >>> looks_like_file("./biome.json")
        True
        >>> looks_like_file(".github/workflows")
        False
        >>> looks_like_file(".github")
        False
    """
    return bool(PurePosixPath(path.replace("\\", "/")).suffix)


def _rooted(project_dir: Path, *parts: str) -> Path:
    """Join parts under project_dir, never letting the result escape it.

    Raises:
        ConfigError: If ``..`` segments climb out of project_dir
    """
    root = Path(os.path.normpath(project_dir.absolute()))
    relative = [p.replace("\\", "/").lstrip("/") for p in parts]
    path = Path(os.path.normpath(root.joinpath(*relative)))
    if not path.is_relative_to(root):
        raise ConfigError(f"Path '{'/'.join(parts)}' resolves outside of {root}")
    return path


def resolve_output_dir(copy_to: str | None, src_directory: str, project_dir: Path) -> Path:
    if copy_to is None:
        return _rooted(project_dir, src_directory)
    if looks_like_file(copy_to):
        return _rooted(project_dir, str(PurePosixPath(copy_to.replace("\\", "/")).parent))
    return _rooted(project_dir, copy_to)


def resolve_copy_plan(
    entry: RegistryEntry,
    config: KitConfig,
    source_is_file: bool,
    project_dir: Path,
    copy_to: str | None = None,
    exists: PathCheck = os.path.exists,
    is_dir: PathCheck = os.path.isdir,
) -> CopyPlan:
    """Work out where a fetched entry lands and how it gets there.

    Args:
        entry: The registry entry being copied
        config: Project config (provides the default source directory)
        source_is_file: Whether the fetched artifact is a single file
        project_dir: Root every destination is resolved under
        copy_to: Destination override; falls back to entry.copy_to
        exists: Existence check for the destination
        is_dir: Directory check for the destination

    Returns:
        CopyPlan with an absolute destination path
    """
    copy_to = copy_to if copy_to is not None else entry.copy_to
    output_dir = resolve_output_dir(copy_to, config.src_directory, project_dir)

    if copy_to is not None and looks_like_file(copy_to):
        destination = output_dir / PurePosixPath(copy_to.replace("\\", "/")).name
    else:
        destination = _rooted(output_dir, entry.relative_entry)

    destination_is_dir = exists(destination) and is_dir(destination)

    if source_is_file and destination_is_dir:
        # A file dropped onto a directory lands inside it
        destination = destination / PurePosixPath(entry.relative_entry).name

    return CopyPlan(
        source_is_file=source_is_file,
        destination_path=destination,
        merge_into_existing=destination_is_dir and not source_is_file,
    )


def _merge_directory(source: Path, destination: Path, fs: FileSystem) -> None:
    for child in fs.children(source):
        target = destination / child.name
        if fs.is_dir(child) and fs.exists(target) and fs.is_dir(target):
            _merge_directory(child, target, fs)
        else:
            fs.move(child, target)


def materialize(plan: CopyPlan, source: Path, fs: FileSystem) -> None:
    """Move a fetched artifact into place according to plan."""
    destination = plan.destination_path

    if plan.merge_into_existing:
        _logging.debug(f"Merging contents of {source} into {destination}")
        _merge_directory(source, destination, fs)
        return

    fs.make_dirs(destination.parent)
    _logging.debug(f"Moving {source} to {destination}")
    fs.move(source, destination)


__all__ = [
    "looks_like_file",
    "resolve_output_dir",
    "resolve_copy_plan",
    "materialize",
]
