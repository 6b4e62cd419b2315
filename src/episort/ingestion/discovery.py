"""Video file discovery."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from .models import FileRecord

LOGGER = logging.getLogger(__name__)


def _is_hidden(path: Path) -> bool:
    return any(part.startswith(".") for part in path.parts if part not in (".", ".."))


class VideoScanner:
    """Discover video files within a library folder subject to configuration filters."""

    def __init__(
        self,
        *,
        video_extensions: Iterable[str],
        excluded_folders: Iterable[str] = ("Extras",),
        include_hidden: bool = False,
        follow_symlinks: bool = False,
    ) -> None:
        self.video_extensions = {self._normalize_extension(ext) for ext in video_extensions}
        self.excluded_folders = {name.casefold() for name in excluded_folders}
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks

    def list_video_files(self, root: Path) -> list[FileRecord]:
        """Return video files under ``root`` sorted by path."""
        return sorted(self.scan(root), key=lambda record: str(record.original_path))

    def scan(self, root: Path) -> Iterator[FileRecord]:
        """Yield video files discovered under root respecting configured filters."""
        root = root.expanduser().resolve()
        if not root.exists():
            LOGGER.warning("Library folder %s does not exist.", root)
            return

        for path in self._iter_paths(root):
            if path.suffix.lower() not in self.video_extensions:
                continue
            try:
                relative = path.relative_to(root)
            except ValueError:
                relative = Path(path.name)
            if not self.include_hidden and _is_hidden(relative):
                continue
            try:
                stat = path.stat()
            except OSError as exc:
                LOGGER.warning("Skipping unreadable file %s: %s", path, exc)
                continue
            yield FileRecord(
                original_path=path,
                original_name=path.name,
                extension=path.suffix,
                size_bytes=stat.st_size,
            )

    def _iter_paths(self, root: Path) -> Iterator[Path]:
        if root.is_file():
            yield root
            return

        for current, dirnames, filenames in os.walk(root, followlinks=self.follow_symlinks):
            dirnames[:] = sorted(
                name for name in dirnames if name.casefold() not in self.excluded_folders
            )
            for filename in sorted(filenames):
                path = Path(current) / filename
                if path.is_symlink() and not self.follow_symlinks:
                    continue
                if path.is_file():
                    yield path

    @staticmethod
    def _normalize_extension(value: str) -> str:
        value = value.strip().lower()
        return value if value.startswith(".") else f".{value}"


__all__ = ["VideoScanner"]
