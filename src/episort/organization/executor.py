"""Executor for operation plans."""

from __future__ import annotations

import logging
from typing import Optional

from .filesystem import DryRunFileSystem, FileSystem, LocalFileSystem
from .models import ExecutionResult, Operation, OperationKind, Plan

LOGGER = logging.getLogger(__name__)


class PlanExecutor:
    """Apply a validated plan to the filesystem.

    Folder creation is all-or-nothing: if any target folder cannot be created
    the batch stops before a single file is moved. Individual moves are
    independent, so one failure is recorded and the rest still run. Dry runs go
    through exactly the same steps with the mutating primitives stubbed out.
    """

    def __init__(self, filesystem: Optional[FileSystem] = None) -> None:
        self.filesystem: FileSystem = filesystem or LocalFileSystem()

    def execute(self, plan: Plan, *, dry_run: bool = False) -> ExecutionResult:
        """Execute ``plan`` and return aggregate counts.

        Args:
            plan: Plan produced by ``PlanManager.build``.
            dry_run: When True, validate and log every step without touching disk.

        Returns:
            ExecutionResult: Counts plus a per-operation message log.
        """
        filesystem: FileSystem = DryRunFileSystem(self.filesystem) if dry_run else self.filesystem
        result = ExecutionResult(dry_run=dry_run)

        if not plan.validation.is_valid:
            result.success = False
            for issue in plan.validation.issues:
                self._record(result, logging.ERROR, f"Plan invalid: {issue}")
            return result

        if not self._create_folders(plan, filesystem, result):
            result.success = False
            return result

        for operation in plan.operations:
            if operation.kind is OperationKind.SKIP:
                continue
            self._apply(operation, filesystem, result)

        result.success = result.error_count == 0
        return result

    def _create_folders(self, plan: Plan, filesystem: FileSystem, result: ExecutionResult) -> bool:
        for folder in plan.target_folders:
            if filesystem.exists(folder):
                continue
            try:
                filesystem.create_directory(folder)
            except OSError as exc:
                self._record(
                    result,
                    logging.ERROR,
                    f"Could not create folder {folder}: {exc}; no files were moved.",
                )
                return False
            result.folder_create_count += 1
            self._record(result, logging.INFO, f"Created folder {folder}")
        return True

    def _apply(self, operation: Operation, filesystem: FileSystem, result: ExecutionResult) -> None:
        source = operation.source_path
        destination = operation.target_path

        if not filesystem.exists(source):
            result.error_count += 1
            self._record(result, logging.ERROR, f"Source missing: {source}")
            return
        if filesystem.exists(destination):
            result.skipped_count += 1
            self._record(
                result, logging.WARNING, f"Destination already exists, skipped: {destination}"
            )
            return

        try:
            filesystem.move_file(source, destination)
        except OSError as exc:
            result.error_count += 1
            self._record(result, logging.ERROR, f"Failed to move {source} -> {destination}: {exc}")
            return

        result.success_count += 1
        result.completed.append((source, destination))
        self._record(result, logging.INFO, f"{source.name} -> {destination}")

    @staticmethod
    def _record(result: ExecutionResult, level: int, message: str) -> None:
        LOGGER.log(level, message)
        result.messages.append(message)


__all__ = ["PlanExecutor"]
