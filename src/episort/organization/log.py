"""Human-readable rename log written next to the library."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .models import ExecutionResult

DEFAULT_STATE_DIRNAME = ".episort"
DEFAULT_LOG_NAME = "rename.log"


class RenameLogWriter:
    """Append the ``original -> new`` mapping of each executed run to a log file."""

    def __init__(
        self,
        root: Path,
        *,
        base_dirname: str = DEFAULT_STATE_DIRNAME,
        filename: str = DEFAULT_LOG_NAME,
    ) -> None:
        self.root = root
        self.path = root / base_dirname / filename

    def write(
        self,
        result: ExecutionResult,
        series_name: str,
        *,
        timestamp: Optional[datetime] = None,
    ) -> Path:
        """Append one block for ``result`` and return the log path."""
        stamp = (timestamp or datetime.now(timezone.utc)).isoformat().replace("+00:00", "Z")
        lines = [f"=== {stamp} | {series_name or 'Unknown Series'} ==="]
        for source, destination in result.completed:
            lines.append(f"{self._relative(source)} -> {self._relative(destination)}")
        lines.append(
            f"--- {result.success_count} renamed, {result.skipped_count} skipped, "
            f"{result.error_count} failed"
        )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write("\n".join(lines) + "\n\n")
        return self.path

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


__all__ = ["RenameLogWriter"]
