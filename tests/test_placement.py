"""Tests for copy destination resolution and materialization."""

from pathlib import Path

import pytest

from kitpull.config import KitConfig
from kitpull.errors import ConfigError
from kitpull.installer import (
    FileSystem,
    LocalFileSystem,
    looks_like_file,
    materialize,
    resolve_copy_plan,
)
from kitpull.installer.placement import resolve_output_dir
from kitpull.registry import RegistryEntry

CONFIG = KitConfig(package_manager="npm", src_directory="./src")


def _nothing_exists(path: Path) -> bool:
    return False


class TestLooksLikeFile:
    @pytest.mark.parametrize(
        "path", ["./biome.json", "foo.json", ".github/workflows/build-and-deploy.yml", "CLAUDE.md"]
    )
    def test_file_like(self, path):
        assert looks_like_file(path)

    @pytest.mark.parametrize("path", ["./src", ".github", ".github/workflows", "lib/"])
    def test_directory_like(self, path):
        assert not looks_like_file(path)


class TestResolveOutputDir:
    def test_file_like_copy_to_excludes_filename(self, temp_dir):
        output_dir = resolve_output_dir(".github/workflows/build.yml", "./src", temp_dir)
        assert output_dir == temp_dir / ".github" / "workflows"

    def test_directory_copy_to_is_output_dir(self, temp_dir):
        assert resolve_output_dir("./lib/utils", "./src", temp_dir) == temp_dir / "lib" / "utils"

    def test_absent_copy_to_uses_src_directory(self, temp_dir):
        assert resolve_output_dir(None, "./src", temp_dir) == temp_dir / "src"


class TestResolveCopyPlan:
    """Tests for resolve_copy_plan."""

    def test_file_copy_to_at_project_root(self, temp_dir):
        entry = RegistryEntry(name="foo", entry="/registry/foo.json", copy_to="./foo.json")

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / "foo.json"
        assert plan.source_is_file is True
        assert plan.merge_into_existing is False

    def test_nested_copy_to_keeps_single_filename(self, temp_dir):
        entry = RegistryEntry(
            name="deploy",
            entry="/registry/github-actions/pnpm-build-and-deploy.yml",
            copy_to=".github/workflows/build-and-deploy.yml",
        )

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / ".github" / "workflows" / "build-and-deploy.yml"

    def test_default_destination_strips_registry_root(self, temp_dir):
        entry = RegistryEntry(name="emitter", entry="/registry/typed-event-emitter.ts")

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / "src" / "typed-event-emitter.ts"

    def test_default_destination_keeps_nested_registry_path(self, temp_dir):
        entry = RegistryEntry(name="deploy", entry="/registry/github-actions/deploy.yml")

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / "src" / "github-actions" / "deploy.yml"

    def test_directory_copy_to_receives_entry(self, temp_dir):
        entry = RegistryEntry(name="emitter", entry="/registry/emitter.ts", copy_to="./lib")

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / "lib" / "emitter.ts"

    def test_override_wins_over_entry_copy_to(self, temp_dir):
        entry = RegistryEntry(name="biome", entry="/biome.json", copy_to="./biome.json")

        plan = resolve_copy_plan(
            entry,
            CONFIG,
            True,
            temp_dir,
            copy_to="config/biome.base.json",
            exists=_nothing_exists,
            is_dir=_nothing_exists,
        )

        assert plan.destination_path == temp_dir / "config" / "biome.base.json"

    def test_absolute_copy_to_stays_inside_project(self, temp_dir):
        entry = RegistryEntry(name="biome", entry="/biome.json", copy_to="/etc/biome.json")

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / "etc" / "biome.json"
        assert plan.destination_path.is_absolute()

    def test_directory_into_existing_directory_merges(self, temp_dir):
        (temp_dir / "src" / "components").mkdir(parents=True)
        entry = RegistryEntry(name="components", entry="/registry/components")

        plan = resolve_copy_plan(entry, CONFIG, False, temp_dir)

        assert plan.destination_path == temp_dir / "src" / "components"
        assert plan.merge_into_existing is True

    def test_directory_into_missing_destination_moves_directly(self, temp_dir):
        entry = RegistryEntry(name="components", entry="/registry/components")

        plan = resolve_copy_plan(entry, CONFIG, False, temp_dir)

        assert plan.merge_into_existing is False

    def test_file_onto_existing_directory_lands_inside(self, temp_dir):
        (temp_dir / "lib" / "emitter.ts").mkdir(parents=True)
        entry = RegistryEntry(name="emitter", entry="/registry/emitter.ts", copy_to="./lib")

        plan = resolve_copy_plan(entry, CONFIG, True, temp_dir)

        assert plan.destination_path == temp_dir / "lib" / "emitter.ts" / "emitter.ts"
        assert plan.merge_into_existing is False

    @pytest.mark.parametrize("copy_to", ["../../outside.json", "./lib/../../outside", "/../x.json"])
    def test_copy_to_cannot_climb_out_of_project(self, temp_dir, copy_to):
        entry = RegistryEntry(name="biome", entry="/biome.json", copy_to=copy_to)

        with pytest.raises(ConfigError, match="resolves outside of"):
            resolve_copy_plan(
                entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
            )

    def test_entry_cannot_climb_out_of_project(self, temp_dir):
        entry = RegistryEntry(name="evil", entry="/registry/../../../../evil.ts")

        with pytest.raises(ConfigError, match="resolves outside of"):
            resolve_copy_plan(
                entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
            )

    def test_src_directory_cannot_climb_out_of_project(self, temp_dir):
        config = KitConfig(package_manager="npm", src_directory="./../elsewhere")
        entry = RegistryEntry(name="emitter", entry="/registry/emitter.ts")

        with pytest.raises(ConfigError):
            resolve_copy_plan(
                entry, config, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
            )

    def test_inner_parent_segments_stay_inside(self, temp_dir):
        entry = RegistryEntry(name="biome", entry="/biome.json", copy_to="./config/../biome.json")

        plan = resolve_copy_plan(
            entry, CONFIG, True, temp_dir, exists=_nothing_exists, is_dir=_nothing_exists
        )

        assert plan.destination_path == temp_dir / "biome.json"


class TestMaterialize:
    """Tests for moving fetched artifacts into place."""

    def test_file_creates_missing_parent_directories(self, temp_dir):
        fetched = temp_dir / "scratch" / "deploy.yml"
        fetched.parent.mkdir()
        fetched.write_text("on: push\n")
        project = temp_dir / "project"
        project.mkdir()
        entry = RegistryEntry(
            name="deploy", entry="/registry/deploy.yml", copy_to=".github/workflows/deploy.yml"
        )

        plan = resolve_copy_plan(entry, CONFIG, True, project)
        materialize(plan, fetched, LocalFileSystem())

        assert (project / ".github" / "workflows" / "deploy.yml").read_text() == "on: push\n"
        assert not fetched.exists()

    def test_merge_moves_contents_not_directory(self, temp_dir):
        fetched = temp_dir / "scratch" / "components"
        (fetched / "button").mkdir(parents=True)
        (fetched / "index.ts").write_text("new index\n")
        (fetched / "button" / "button.ts").write_text("button\n")

        project = temp_dir / "project"
        existing = project / "src" / "components"
        (existing / "button").mkdir(parents=True)
        (existing / "card.ts").write_text("card\n")
        (existing / "button" / "legacy.ts").write_text("legacy\n")
        (existing / "index.ts").write_text("old index\n")

        entry = RegistryEntry(name="components", entry="/registry/components")
        plan = resolve_copy_plan(entry, CONFIG, False, project)
        materialize(plan, fetched, LocalFileSystem())

        assert plan.merge_into_existing is True
        assert not (existing / "components").exists()
        assert (existing / "card.ts").read_text() == "card\n"
        assert (existing / "index.ts").read_text() == "new index\n"
        assert (existing / "button" / "button.ts").read_text() == "button\n"
        assert (existing / "button" / "legacy.ts").read_text() == "legacy\n"

    def test_existing_file_is_overwritten(self, temp_dir):
        fetched = temp_dir / "biome.json"
        fetched.write_text("new\n")
        project = temp_dir / "project"
        project.mkdir()
        (project / "biome.json").write_text("old\n")

        entry = RegistryEntry(name="biome", entry="/biome.json", copy_to="./biome.json")
        plan = resolve_copy_plan(entry, CONFIG, True, project)
        materialize(plan, fetched, LocalFileSystem())

        assert (project / "biome.json").read_text() == "new\n"


def test_local_filesystem_implements_interface():
    assert isinstance(LocalFileSystem(), FileSystem)
    with pytest.raises(TypeError):
        FileSystem()  # type: ignore[abstract]
