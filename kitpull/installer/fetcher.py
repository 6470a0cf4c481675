"""Retrieval of registry entries from the template repository."""

import logging
import shlex
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import click

from kitpull.errors import FetchFailure
from kitpull.execution import FETCH_TIMEOUT, run_command_async

_logging = logging.getLogger(__name__)


class Fetcher(ABC):
    """Interface for retrieving a file or directory tree from a repository."""

    @abstractmethod
    async def fetch(
        self,
        remote_path: str,
        destination: Path,
        force: bool = False,
        verbose: bool = False,
    ) -> None:
        """Write the content at remote_path to destination.

        Args:
            remote_path: Path inside the repository (e.g. /registry/foo.ts)
            destination: Local path the file or directory is written to
            force: Replace destination if it already exists
            verbose: Report every step

        Raises:
            FetchFailure: If the content cannot be retrieved
        """


class GitFetcher(Fetcher):
    """Fetch entries from a shallow clone of a GitHub repository."""

    def __init__(self, repository: str, ref: str | None = None, host: str = "https://github.com"):
        self.repository = repository
        self.ref = ref
        self.host = host.rstrip("/")

    @property
    def clone_url(self) -> str:
        return f"{self.host}/{self.repository}.git"

    def _clone_command(self, checkout: Path, verbose: bool) -> str:
        parts = ["git", "clone", "--depth", "1"]
        if not verbose:
            parts.append("--quiet")
        if self.ref:
            parts.extend(["--branch", self.ref])
        parts.extend([self.clone_url, str(checkout)])
        return shlex.join(parts)

    async def fetch(
        self,
        remote_path: str,
        destination: Path,
        force: bool = False,
        verbose: bool = False,
    ) -> None:
        if destination.exists():
            if not force:
                raise FetchFailure(
                    f"Destination {destination} is not empty. Use --force to overwrite"
                )
            if destination.is_dir():
                shutil.rmtree(destination)
            else:
                destination.unlink()

        with tempfile.TemporaryDirectory(prefix="kitpull-checkout-") as scratch:
            checkout = Path(scratch) / "repo"
            command = self._clone_command(checkout, verbose)
            if verbose:
                click.echo(f"> cloning {self.clone_url}")

            output, returncode = await run_command_async(command, timeout=FETCH_TIMEOUT)
            if returncode != 0:
                raise FetchFailure(f"Could not clone {self.clone_url}: {output}")

            source = checkout / remote_path.lstrip("/")
            if not source.exists():
                raise FetchFailure(
                    f"'{remote_path}' does not exist in {self.repository}"
                )

            _logging.debug(f"Fetched {remote_path} from {self.repository}")
            if verbose:
                click.echo(f"> extracted {remote_path} to {destination}")
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(destination))


__all__ = ["Fetcher", "GitFetcher"]
