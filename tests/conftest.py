"""Pytest fixtures and fakes for kitpull tests."""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from kitpull.config import KitConfig
from kitpull.errors import FetchFailure, UserCancelled
from kitpull.installer import Collaborators, Fetcher, LocalFileSystem, PackageInstaller
from kitpull.registry import RegistryEntry
from kitpull.tui import Prompter


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """A project directory with an empty package.json."""
    project = temp_dir / "project"
    project.mkdir()
    (project / "package.json").write_text(json.dumps({"name": "demo"}))
    return project


@pytest.fixture
def template_dir(temp_dir: Path) -> Path:
    """A checkout of a template repository with a few registry entries."""
    root = temp_dir / "template"
    (root / "registry" / "github-actions").mkdir(parents=True)
    (root / "registry" / "components" / "button").mkdir(parents=True)
    (root / "biome.json").write_text('{"formatter": {}}\n')
    (root / "registry" / "typed-event-emitter.ts").write_text("export class Emitter {}\n")
    (root / "registry" / "github-actions" / "pnpm-build-and-deploy.yml").write_text("on: push\n")
    (root / "registry" / "components" / "index.ts").write_text("export * from './button'\n")
    (root / "registry" / "components" / "button" / "button.ts").write_text("export {}\n")
    return root


@pytest.fixture
def mock_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return True."""
    with patch("sys.stdin.isatty", return_value=True):
        yield


@pytest.fixture
def mock_no_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return False."""
    with patch("sys.stdin.isatty", return_value=False):
        yield


@pytest.fixture
def kit_config() -> KitConfig:
    return KitConfig(package_manager="pnpm", src_directory="./src")


@pytest.fixture
def sample_registry() -> list[RegistryEntry]:
    return [
        RegistryEntry(name="biome-config", entry="/biome.json", copy_to="./biome.json"),
        RegistryEntry(
            name="typed-event-emitter",
            entry="/registry/typed-event-emitter.ts",
            dependencies=("zod@^3.0.0",),
        ),
        RegistryEntry(
            name="components",
            entry="/registry/components",
            dependencies=("clsx@2.1.0",),
            dev_dependencies=("@types/node@^20.0.0",),
        ),
        RegistryEntry(
            name="gueterbahnhof build&deploy",
            entry="/registry/github-actions/pnpm-build-and-deploy.yml",
            copy_to=".github/workflows/build-and-deploy.yml",
        ),
    ]


class LocalCopyFetcher(Fetcher):
    """Fetch entries by copying them out of a local template checkout."""

    def __init__(self, root: Path):
        self.root = root
        self.fetched: list[str] = []

    async def fetch(self, remote_path, destination, force=False, verbose=False):
        source = self.root / remote_path.lstrip("/")
        if not source.exists():
            raise FetchFailure(f"'{remote_path}' does not exist")
        self.fetched.append(remote_path)
        if source.is_dir():
            shutil.copytree(source, destination)
        else:
            shutil.copy2(source, destination)


class ScriptedPrompter(Prompter):
    """Prompter returning canned answers; None in the confirm queue means Ctrl+C."""

    def __init__(self, confirms=None, selection=None, choice=None, text=""):
        self.confirms = list(confirms or [])
        self.selection = selection
        self.choice = choice
        self.text_answer = text
        self.confirm_calls: list[tuple[str, list[str]]] = []

    def select_many(self, message, choices):
        if self.selection is None:
            raise UserCancelled()
        return self.selection

    def select_one(self, message, choices, default=None):
        return self.choice or default

    def text(self, message, default=""):
        return self.text_answer

    def confirm(self, message, details=None):
        self.confirm_calls.append((message, list(details or [])))
        answer = self.confirms.pop(0) if self.confirms else True
        if answer is None:
            raise UserCancelled()
        return answer


class RecordingInstaller(PackageInstaller):
    def __init__(self):
        self.calls: list[tuple[list[str], bool]] = []

    async def install(self, specifiers, dev):
        self.calls.append((list(specifiers), dev))


@pytest.fixture
def fetcher(template_dir: Path) -> LocalCopyFetcher:
    return LocalCopyFetcher(template_dir)


@pytest.fixture
def installer() -> RecordingInstaller:
    return RecordingInstaller()


@pytest.fixture
def make_collaborators(fetcher, installer):
    """Factory building collaborators around a scripted prompter."""

    def _create(prompter: Prompter | None = None) -> Collaborators:
        return Collaborators(
            fetcher=fetcher,
            prompter=prompter or ScriptedPrompter(),
            installer=installer,
            fs=LocalFileSystem(),
        )

    return _create
