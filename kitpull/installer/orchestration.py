"""Sequential copy workflow for a selection of registry entries."""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import click

from kitpull.config import KitConfig
from kitpull.errors import KitpullError, UnknownEntry
from kitpull.registry import RegistryEntry
from kitpull.tui import Prompter

from .dependencies import conflicts, reconcile
from .fetcher import Fetcher
from .filesystem import FileSystem, LocalFileSystem
from .models import CopyReport, DependencyDecision, EntryResult, ManifestView
from .package_manager import PackageInstaller
from .placement import materialize, resolve_copy_plan

_logging = logging.getLogger(__name__)


@dataclass
class Collaborators:
    fetcher: Fetcher
    prompter: Prompter
    installer: PackageInstaller
    fs: FileSystem = field(default_factory=LocalFileSystem)


class CopyOrchestrator:
    """Copy selected entries one after another, then install their dependencies.

    Entries are processed strictly in order. Dependency installs are queued
    per entry and applied in two batches (runtime, dev) once every entry has
    been handled. A conflict the operator already accepted earlier in the
    run is not asked about again.
    """

    def __init__(
        self,
        registry: list[RegistryEntry],
        manifest: ManifestView,
        config: KitConfig,
        collaborators: Collaborators,
        project_dir: Path,
        copy_to: str | None = None,
        force: bool = False,
        verbose: bool = False,
        assume_yes: bool = False,
        dry_run: bool = False,
    ):
        self.registry = {entry.name: entry for entry in registry}
        self.manifest = manifest
        self.config = config
        self.collaborators = collaborators
        self.project_dir = project_dir
        self.copy_to = copy_to
        self.force = force
        self.verbose = verbose
        self.assume_yes = assume_yes
        self.dry_run = dry_run
        self._confirmed: set[str] = set()

    async def run(self, names: list[str]) -> CopyReport:
        report = CopyReport()

        for name in names:
            entry = self.registry.get(name)
            if entry is None:
                click.echo(f"FATAL: could not find config for source {name}. Aborted.", err=True)
                raise UnknownEntry([name])
            report.results.append(await self.process_entry(entry, report))

        await self.install_dependencies(report)
        return report

    def _accept_conflicts(self, decisions: list[DependencyDecision]) -> bool:
        found = conflicts(decisions)
        pending = [d for d in found if d.specifier not in self._confirmed]

        if pending and not self.assume_yes:
            accepted = self.collaborators.prompter.confirm(
                "Overwrite the following dependencies?",
                details=[d.describe_conflict() for d in pending],
            )
            if not accepted:
                return False

        self._confirmed.update(d.specifier for d in found)
        return True

    async def process_entry(self, entry: RegistryEntry, report: CopyReport) -> EntryResult:
        decisions = reconcile(entry, self.manifest)
        _logging.debug(f"{entry.name}: {decisions}")

        if not self._accept_conflicts(decisions):
            click.echo(f"Skipping {entry.name}.")
            return EntryResult(entry.name, "skipped", message="dependency conflicts declined")

        # Queued as declared; repeated specifiers across entries are kept
        report.dependencies.extend(d.specifier for d in decisions if d.install and not d.dev)
        report.dev_dependencies.extend(d.specifier for d in decisions if d.install and d.dev)

        try:
            destination = await self.copy_entry(entry)
        except KitpullError as e:
            click.echo(f"❌ {entry.name} failed: {e}")
            raise

        click.echo("Done.")
        return EntryResult(entry.name, "copied", destination)

    async def copy_entry(self, entry: RegistryEntry) -> Path:
        """Fetch an entry into a scratch directory and move it into the project."""
        fs = self.collaborators.fs

        with fs.temporary_directory() as scratch:
            fetched = scratch / (PurePosixPath(entry.entry).name or entry.name)
            await self.collaborators.fetcher.fetch(
                entry.entry, fetched, force=self.force, verbose=self.verbose
            )

            plan = resolve_copy_plan(
                entry,
                self.config,
                source_is_file=fs.is_file(fetched),
                project_dir=self.project_dir,
                copy_to=self.copy_to,
                exists=fs.exists,
                is_dir=fs.is_dir,
            )
            click.echo(f"Copying {entry.name} to {plan.destination_path}")

            if self.dry_run:
                mode = "merge into" if plan.merge_into_existing else "move to"
                click.echo(f"[DRY-RUN] Would {mode} {plan.destination_path}")
            else:
                materialize(plan, fetched, fs)

        return plan.destination_path

    async def install_dependencies(self, report: CopyReport) -> None:
        installer = self.collaborators.installer

        for specifiers, dev, label in (
            (report.dependencies, False, "deps"),
            (report.dev_dependencies, True, "devDeps"),
        ):
            if not specifiers:
                continue
            click.echo(f"Adding {label}: {','.join(specifiers)}")
            if self.dry_run:
                click.echo(f"[DRY-RUN] Would install {len(specifiers)} package(s)")
                continue
            await installer.install(specifiers, dev=dev)


__all__ = ["Collaborators", "CopyOrchestrator"]
