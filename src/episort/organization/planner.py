"""Plan assembly and validation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console

from episort.analysis.models import ClassifiedFile
from episort.ingestion.models import FileRecord

from .errors import PlanError
from .executor import PlanExecutor
from .filesystem import FileSystem
from .models import ExecutionResult, Operation, OperationKind, Plan, PlanValidation
from .preview import render_plan_preview

LOGGER = logging.getLogger(__name__)


class PlanManager:
    """Compose analyzer and version output into one plan and drive it.

    Args:
        filesystem: Filesystem collaborator used by ``execute``.
    """

    def __init__(self, filesystem: Optional[FileSystem] = None) -> None:
        self.executor = PlanExecutor(filesystem)

    def build(
        self,
        skip: Iterable[ClassifiedFile],
        rename: Iterable[ClassifiedFile],
        duplicate_ops: Iterable[Operation],
        specials: Iterable[FileRecord | Path] = (),
        series_name: str = "",
    ) -> Plan:
        """Produce a validated plan.

        Args:
            skip: Already-correct files; recorded, never turned into operations.
            rename: Files that need a rename.
            duplicate_ops: Operations from ``VersionManager.resolve_versions``.
            specials: Special-content files; recorded for reporting only.
            series_name: Series name used for the rename log header.

        Returns:
            Plan: Rename operations followed by version operations, with the
                validation result attached.

        Raises:
            PlanError: If a rename candidate was never matched to an episode.
        """
        plan = Plan(series_name=series_name)
        plan.skipped.extend(item.file_record.original_path for item in skip)

        for item in rename:
            record = item.file_record
            if item.is_already_correct:
                plan.skipped.append(record.original_path)
                continue
            if item.episode_key is None:
                raise PlanError(f"{record.original_path} has no matched episode.")
            plan.operations.append(
                Operation(
                    kind=OperationKind.RENAME,
                    source_path=record.original_path,
                    target_file_name=item.target_name,
                    target_folder=item.target_folder or record.original_path.parent,
                    episode_key=item.episode_key,
                )
            )

        for operation in duplicate_ops:
            if operation.kind is OperationKind.SKIP or operation.is_noop:
                plan.skipped.append(operation.source_path)
            else:
                plan.operations.append(operation)

        for special in specials:
            path = special.original_path if isinstance(special, FileRecord) else special
            plan.specials.append(path)

        plan.validation = self.validate(plan)
        LOGGER.info(
            "Built plan with %d operation(s), %d skipped, %d special(s).",
            len(plan.operations),
            plan.skip_count,
            plan.special_count,
        )
        return plan

    def validate(self, plan: Plan) -> PlanValidation:
        """Check the plan for target collisions and incomplete operations."""
        issues: list[str] = []
        claimed: dict[tuple[Path, str], Path] = {}
        staying = set(plan.skipped)

        for operation in plan.operations:
            if str(operation.source_path) in ("", "."):
                issues.append(
                    f"Operation targeting {operation.target_file_name!r} has no source path."
                )
            if not operation.target_file_name.strip():
                issues.append(f"{operation.source_path}: empty target file name.")
                continue

            slot = (operation.target_folder, operation.target_file_name)
            if slot in claimed:
                issues.append(
                    f"{operation.source_path} and {claimed[slot]} both target "
                    f"{operation.target_path}."
                )
            else:
                claimed[slot] = operation.source_path

            if operation.target_path in staying and operation.target_path != operation.source_path:
                issues.append(
                    f"{operation.source_path} would overwrite {operation.target_path}, "
                    "which is already correctly named."
                )

        for issue in issues:
            LOGGER.warning("Plan validation: %s", issue)
        return PlanValidation(is_valid=not issues, issues=issues)

    def preview(
        self,
        plan: Plan,
        console: Optional[Console] = None,
        *,
        root: Optional[Path] = None,
    ) -> None:
        """Render the plan grouped by target folder."""
        render_plan_preview(plan, console or Console(), root=root)

    def execute(self, plan: Plan, *, dry_run: bool = False) -> ExecutionResult:
        """Execute ``plan``; see ``PlanExecutor.execute``."""
        return self.executor.execute(plan, dry_run=dry_run)


__all__ = ["PlanManager"]
