"""Operation planning, versioning and execution."""

from .errors import PlanError, VersionResolutionError
from .executor import PlanExecutor
from .filesystem import DryRunFileSystem, FileSystem, LocalFileSystem
from .log import RenameLogWriter
from .models import ExecutionResult, Operation, OperationKind, Plan, PlanValidation
from .planner import PlanManager
from .preview import render_plan_preview
from .versions import VersionManager, parse_version

__all__ = [
    "DryRunFileSystem",
    "ExecutionResult",
    "FileSystem",
    "LocalFileSystem",
    "Operation",
    "OperationKind",
    "Plan",
    "PlanError",
    "PlanExecutor",
    "PlanManager",
    "PlanValidation",
    "RenameLogWriter",
    "VersionManager",
    "VersionResolutionError",
    "parse_version",
    "render_plan_preview",
]
