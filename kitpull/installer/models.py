"""Data models for the copy and install workflow."""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ManifestView:
    """Read-only snapshot of the project's declared dependencies."""
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "dependencies", MappingProxyType(dict(self.dependencies)))
        object.__setattr__(
            self, "dev_dependencies", MappingProxyType(dict(self.dev_dependencies))
        )

    def merged(self) -> dict[str, str]:
        """One lookup of installed versions; dependencies win over devDependencies."""
        return {**self.dev_dependencies, **self.dependencies}


@dataclass(frozen=True)
class DependencyDecision:
    name: str
    next_version: str
    dev: bool
    install: bool
    conflict_with: str | None = None

    @property
    def specifier(self) -> str:
        return f"{self.name}@{self.next_version}"

    def describe_conflict(self) -> str:
        return f"{self.name}: {self.conflict_with} -> {self.next_version}"


@dataclass(frozen=True)
class CopyPlan:
    source_is_file: bool
    destination_path: Path
    merge_into_existing: bool


@dataclass
class EntryResult:
    name: str
    status: str
    destination: Path | None = None
    message: str = ""


@dataclass
class CopyReport:
    results: list[EntryResult] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    dev_dependencies: list[str] = field(default_factory=list)

    @property
    def copied(self) -> list[str]:
        return [r.name for r in self.results if r.status == "copied"]

    @property
    def skipped(self) -> list[str]:
        return [r.name for r in self.results if r.status == "skipped"]


__all__ = [
    "ManifestView",
    "DependencyDecision",
    "CopyPlan",
    "EntryResult",
    "CopyReport",
]
