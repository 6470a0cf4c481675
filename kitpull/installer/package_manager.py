"""Package manager detection and batched dependency installs."""

import json
import logging
import os
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import click

from kitpull.config import PACKAGE_MANAGERS
from kitpull.errors import InstallFailure
from kitpull.execution import INSTALL_TIMEOUT, run_command_async
from kitpull.paths import get_manifest_path

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManagerInfo:
    name: str
    lockfile: str
    dev_flag: str


_PACKAGE_MANAGERS = {
    "npm": PackageManagerInfo("npm", "package-lock.json", "--save-dev"),
    "pnpm": PackageManagerInfo("pnpm", "pnpm-lock.yaml", "-D"),
    "bun": PackageManagerInfo("bun", "bun.lock", "-D"),
}


def get_package_manager(name: str) -> PackageManagerInfo:
    try:
        return _PACKAGE_MANAGERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown package manager '{name}'. Available: {', '.join(PACKAGE_MANAGERS)}"
        )


def build_add_command(package_manager: str, specifiers: list[str], dev: bool) -> str:
    """Build the shell command that adds specifiers to the project.

    Examples:
        >>> build_add_command("npm", ["zod@^3.0.0"], dev=True)
        "npm add --save-dev 'zod@^3.0.0'"
        >>> build_add_command("pnpm", ["zod@latest"], dev=False)
        'pnpm add zod@latest'
    """
    info = get_package_manager(package_manager)
    parts = [info.name, "add"]
    if dev:
        parts.append(info.dev_flag)
    parts.extend(specifiers)
    return shlex.join(parts)


def detect_package_manager(project_dir: Path) -> str | None:
    """Guess the project's package manager without prompting.

    Priority:
    1. packageManager field of package.json (e.g. "pnpm@9.1.0")
    2. A known lockfile in the project directory
    3. The user agent of the runner that invoked us (npm_config_user_agent)

    Returns:
        Package manager name, or None when nothing matched
    """
    manifest_path = get_manifest_path(project_dir)
    try:
        declared = json.loads(manifest_path.read_text(encoding="utf-8")).get("packageManager")
    except (OSError, ValueError, AttributeError):
        declared = None

    if isinstance(declared, str):
        name = declared.split("@")[0]
        if name in _PACKAGE_MANAGERS:
            return name

    for info in _PACKAGE_MANAGERS.values():
        if (project_dir / info.lockfile).exists():
            click.echo(f"Found lockfile for {info.name}.")
            return info.name

    user_agent = os.environ.get("npm_config_user_agent", "")
    runner = user_agent.split("/")[0]
    if runner in _PACKAGE_MANAGERS:
        return runner

    return None


class PackageInstaller(ABC):
    """Interface for adding dependencies to the project."""

    @abstractmethod
    async def install(self, specifiers: list[str], dev: bool) -> None:
        """Add specifiers to the project.

        Raises:
            InstallFailure: If the package manager reports an error
        """


class ShellPackageInstaller(PackageInstaller):
    """Run the configured package manager's add command in the project."""

    def __init__(self, package_manager: str, project_dir: Path, timeout: int = INSTALL_TIMEOUT):
        self.package_manager = get_package_manager(package_manager).name
        self.project_dir = project_dir
        self.timeout = timeout

    async def install(self, specifiers: list[str], dev: bool) -> None:
        if not specifiers:
            return

        command = build_add_command(self.package_manager, specifiers, dev)
        _logging.debug(f"Installing in {self.project_dir}: {command}")
        output, returncode = await run_command_async(
            command, timeout=self.timeout, cwd=self.project_dir
        )
        if output:
            click.echo(output)
        if returncode != 0:
            raise InstallFailure(command, output)


__all__ = [
    "PackageManagerInfo",
    "get_package_manager",
    "build_add_command",
    "detect_package_manager",
    "PackageInstaller",
    "ShellPackageInstaller",
]
