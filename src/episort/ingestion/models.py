"""Ingestion data models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class FileRecord(BaseModel):
    """Read-only view of a discovered video file.

    Attributes:
        original_path: Path of the file at scan time.
        original_name: File name including extension.
        extension: Extension including the leading dot, as found on disk.
        size_bytes: File size at scan time.
    """

    model_config = ConfigDict(frozen=True)

    original_path: Path
    original_name: str
    extension: str = ""
    size_bytes: int = 0

    @classmethod
    def from_path(cls, path: Path, size_bytes: int = 0) -> "FileRecord":
        """Build a record for ``path`` without touching the filesystem."""
        return cls(
            original_path=path,
            original_name=path.name,
            extension=path.suffix,
            size_bytes=size_bytes,
        )

    @property
    def stem(self) -> str:
        """Return the file name without its extension."""
        if self.extension and self.original_name.endswith(self.extension):
            return self.original_name[: -len(self.extension)]
        return self.original_name


__all__ = ["FileRecord"]
