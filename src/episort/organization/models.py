"""Operation plan data models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from episort.metadata.models import EpisodeKey


class OperationKind(str, Enum):
    """Kinds of planned work."""

    RENAME = "rename"
    VERSION = "version"
    SKIP = "skip"


class Operation(BaseModel):
    """One planned rename or move.

    Attributes:
        kind: Rename of a single file, versioned rename of a duplicate, or skip.
        source_path: Current location of the file.
        target_file_name: File name after the operation.
        target_folder: Folder the file ends up in.
        episode_key: ``(season, episode)`` the file was matched to.
        version: Assigned version for duplicate members (1 is unsuffixed).
    """

    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    source_path: Path
    target_file_name: str
    target_folder: Path
    episode_key: EpisodeKey
    version: Optional[int] = None

    @property
    def target_path(self) -> Path:
        return self.target_folder / self.target_file_name

    @property
    def is_noop(self) -> bool:
        return self.source_path == self.target_path


class PlanValidation(BaseModel):
    """Outcome of validating a plan."""

    is_valid: bool = True
    issues: List[str] = Field(default_factory=list)


class Plan(BaseModel):
    """Ordered operations for one run plus the files left untouched.

    Attributes:
        operations: Rename operations followed by version operations.
        validation: Result of the last validation pass.
        skipped: Files that stay where they are.
        specials: Special-content files excluded from planning.
        series_name: Series the plan was built for.
    """

    operations: List[Operation] = Field(default_factory=list)
    validation: PlanValidation = Field(default_factory=PlanValidation)
    skipped: List[Path] = Field(default_factory=list)
    specials: List[Path] = Field(default_factory=list)
    series_name: str = ""

    @property
    def skip_count(self) -> int:
        return len(self.skipped)

    @property
    def special_count(self) -> int:
        return len(self.specials)

    @property
    def target_folders(self) -> list[Path]:
        """Distinct target folders in first-seen order."""
        return list(dict.fromkeys(operation.target_folder for operation in self.operations))


class ExecutionResult(BaseModel):
    """Aggregate outcome of executing a plan.

    Attributes:
        success: True when no fatal error occurred and no operation failed.
        success_count: Operations that completed (or would complete, in a dry run).
        error_count: Operations that failed.
        skipped_count: Operations skipped because their destination already existed.
        folder_create_count: Target folders created (or that would be created).
        dry_run: Whether the filesystem was left untouched.
        completed: ``(source, destination)`` pairs in execution order.
        messages: Human-readable log of what happened to each operation.
    """

    success: bool = True
    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    folder_create_count: int = 0
    dry_run: bool = False
    completed: List[tuple[Path, Path]] = Field(default_factory=list)
    messages: List[str] = Field(default_factory=list)


__all__ = ["ExecutionResult", "Operation", "OperationKind", "Plan", "PlanValidation"]
