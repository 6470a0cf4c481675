"""Dependency reconciliation against the project manifest."""

import logging
from pathlib import Path

from kitpull.config import load_config
from kitpull.errors import ConfigError
from kitpull.paths import get_manifest_path
from kitpull.registry import RegistryEntry
from kitpull.versions import compare_versions, parse_version_or_latest, split_specifier

from .models import DependencyDecision, ManifestView

_logging = logging.getLogger(__name__)


def _version_map(data: dict, key: str) -> dict[str, str]:
    value = data.get(key)
    if not isinstance(value, dict):
        return {}
    return {name: version for name, version in value.items() if isinstance(version, str)}


def load_manifest(project_dir: Path) -> ManifestView:
    """Read package.json from the project directory.

    A missing or unparseable manifest reads as an empty one.
    """
    manifest_path = get_manifest_path(project_dir)
    if not manifest_path.exists():
        _logging.debug(f"No manifest at {manifest_path}")
        return ManifestView()

    try:
        data = load_config(manifest_path)
    except ConfigError as e:
        _logging.warning(f"Ignoring unreadable manifest {manifest_path}: {e}")
        return ManifestView()

    return ManifestView(
        dependencies=_version_map(data, "dependencies"),
        dev_dependencies=_version_map(data, "devDependencies"),
    )


def decide(specifier: str, dev: bool, installed: dict[str, str]) -> DependencyDecision:
    name, next_version = split_specifier(specifier)
    current_version = installed.get(name)

    if not current_version:
        return DependencyDecision(name=name, next_version=next_version, dev=dev, install=True)

    comparison = compare_versions(
        parse_version_or_latest(current_version),
        parse_version_or_latest(next_version),
    )

    if comparison == 0:
        return DependencyDecision(name=name, next_version=next_version, dev=dev, install=False)

    return DependencyDecision(
        name=name,
        next_version=next_version,
        dev=dev,
        install=True,
        conflict_with=current_version,
    )


def reconcile(entry: RegistryEntry, manifest: ManifestView) -> list[DependencyDecision]:
    """Decide for every declared dependency whether to install, skip, or confirm.

    Runtime dependencies come first, then dev dependencies, each in declared
    order.
    """
    installed = manifest.merged()
    decisions = [decide(spec, False, installed) for spec in entry.dependencies]
    decisions.extend(decide(spec, True, installed) for spec in entry.dev_dependencies)
    return decisions


def conflicts(decisions: list[DependencyDecision]) -> list[DependencyDecision]:
    return [d for d in decisions if d.conflict_with is not None]


__all__ = [
    "load_manifest",
    "decide",
    "reconcile",
    "conflicts",
]
