"""Local filesystem primitives used when placing fetched entries."""

import logging
import shutil
import tempfile
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Iterator

_logging = logging.getLogger(__name__)

TEMP_PREFIX = "kitpull-"


class FileSystem(ABC):
    """Interface for the filesystem operations used to place fetched entries."""

    @abstractmethod
    def exists(self, path: Path) -> bool: ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool: ...

    @abstractmethod
    def is_file(self, path: Path) -> bool: ...

    @abstractmethod
    def make_dirs(self, path: Path) -> None: ...

    @abstractmethod
    def children(self, path: Path) -> list[Path]: ...

    @abstractmethod
    def remove(self, path: Path) -> None: ...

    @abstractmethod
    def move(self, source: Path, destination: Path) -> None:
        """Move source to destination, replacing whatever is there."""

    @abstractmethod
    def temporary_directory(self) -> ContextManager[Path]:
        """Return a context manager yielding a fresh scratch directory that is always removed."""


class LocalFileSystem(FileSystem):
    """Thin wrapper over pathlib/shutil so placement can be exercised in isolation."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def children(self, path: Path) -> list[Path]:
        return sorted(path.iterdir())

    def remove(self, path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()

    def move(self, source: Path, destination: Path) -> None:
        """Move source to destination, replacing whatever is there."""
        if destination.exists() or destination.is_symlink():
            _logging.debug(f"Replacing existing {destination}")
            self.remove(destination)
        shutil.move(str(source), str(destination))

    @contextmanager
    def temporary_directory(self) -> Iterator[Path]:
        """Yield a fresh, uniquely named scratch directory and always remove it."""
        path = Path(tempfile.gettempdir()) / f"{TEMP_PREFIX}{uuid.uuid4()}"
        path.mkdir(parents=True)
        try:
            yield path
        finally:
            shutil.rmtree(path, ignore_errors=True)


__all__ = ["FileSystem", "LocalFileSystem", "TEMP_PREFIX"]
