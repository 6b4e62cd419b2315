"""Filesystem primitives used during plan execution."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Mutating and query primitives the executor relies on."""

    def create_directory(self, path: Path) -> None: ...

    def move_file(self, source: Path, destination: Path) -> None: ...

    def exists(self, path: Path) -> bool: ...


class LocalFileSystem:
    """Operate on the local disk."""

    def create_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def move_file(self, source: Path, destination: Path) -> None:
        shutil.move(str(source), str(destination))

    def exists(self, path: Path) -> bool:
        return path.exists()


class DryRunFileSystem:
    """Wrap a filesystem so mutating calls are recorded instead of performed.

    Queries reflect the simulated state: folders that would have been created
    exist, moved sources no longer exist and their destinations do.
    """

    def __init__(self, inner: FileSystem) -> None:
        self.inner = inner
        self.created: list[Path] = []
        self.moves: list[tuple[Path, Path]] = []
        self._added: set[Path] = set()
        self._removed: set[Path] = set()

    def create_directory(self, path: Path) -> None:
        LOGGER.info("[dry-run] would create %s", path)
        self.created.append(path)
        self._added.add(path)
        self._removed.discard(path)

    def move_file(self, source: Path, destination: Path) -> None:
        LOGGER.info("[dry-run] would move %s -> %s", source, destination)
        self.moves.append((source, destination))
        self._removed.add(source)
        self._added.discard(source)
        self._added.add(destination)
        self._removed.discard(destination)

    def exists(self, path: Path) -> bool:
        if path in self._added:
            return True
        if path in self._removed:
            return False
        return self.inner.exists(path)


__all__ = ["DryRunFileSystem", "FileSystem", "LocalFileSystem"]
