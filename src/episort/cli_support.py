"""Shared helpers for the episort command line interface."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from episort.analysis.models import AnalysisResult
from episort.config.models import LoggingSettings, MetadataSettings
from episort.metadata import LocalEpisodeSource, MetadataSource, TVDBClient
from episort.organization.models import ExecutionResult, Plan
from episort.parsing.models import ParseResult

DEFAULT_LOG_DIR = Path("~/.episort/logs")
LOG_FILE_NAME = "episort.log"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    settings: LoggingSettings,
    *,
    log_dir: Optional[Path] = None,
    debug: bool = False,
    console: Optional[Console] = None,
    console_level: Optional[int] = None,
) -> logging.Logger:
    """Attach console and rotating file handlers to the package logger.

    Calling this again replaces the handlers installed by a previous call, so
    repeated CLI invocations in one process do not duplicate output.

    Args:
        settings: Logging section of the active configuration.
        log_dir: Directory for the rotating log file.
        debug: Force DEBUG level regardless of ``settings.level``.
        console: Console the rich handler writes to; defaults to stderr.
        console_level: Minimum level for console output when it should differ
            from the configured level.

    Returns:
        logging.Logger: The configured ``episort`` logger.
    """
    logger = logging.getLogger("episort")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if debug else logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=debug,
    )
    rich_handler.setLevel(max(level, console_level or level))
    logger.addHandler(rich_handler)

    directory = (log_dir or DEFAULT_LOG_DIR).expanduser()
    try:
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            directory / LOG_FILE_NAME,
            maxBytes=max(settings.max_size_mb, 1) * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
    except OSError as exc:
        logger.warning("File logging disabled; cannot write to %s: %s", directory, exc)
    else:
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        logger.addHandler(file_handler)
        logger.setLevel(min(level, file_handler.level))

    return logger


def build_metadata_source(
    settings: MetadataSettings,
    *,
    episodes_file: Optional[Path] = None,
) -> MetadataSource:
    """Return the local episode list when given, otherwise a TheTVDB client."""
    if episodes_file is not None:
        return LocalEpisodeSource(episodes_file)
    return TVDBClient(
        settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
    )


def relative_to_root(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` in POSIX form when possible."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def parse_result_payload(file_name: str, result: Optional[ParseResult]) -> dict[str, Any]:
    """Return the JSON representation of one parse attempt."""
    if result is None:
        return {"file": file_name, "matched": False}
    return {"file": file_name, "matched": True, **result.model_dump(mode="json")}


def analysis_payload(analysis: AnalysisResult, root: Path) -> dict[str, Any]:
    """Summarize an analysis for JSON output."""
    return {
        "already_correct": [
            relative_to_root(item.file_record.original_path, root) for item in analysis.skip
        ],
        "duplicates": {
            f"S{season:02d}E{episode:02d}": [
                relative_to_root(member.file_record.original_path, root) for member in members
            ]
            for (season, episode), members in analysis.duplicates.items()
        },
        "specials": [relative_to_root(record.original_path, root) for record in analysis.specials],
        "unmatched": [
            relative_to_root(item.file_record.original_path, root) for item in analysis.unmatched
        ],
        "unparseable": [
            relative_to_root(record.original_path, root) for record in analysis.unparseable
        ],
        "warnings": list(analysis.warnings),
    }


def plan_payload(plan: Plan, root: Path) -> dict[str, Any]:
    """Return the JSON representation of a plan."""
    return {
        "series": plan.series_name,
        "operations": [
            {
                "kind": operation.kind.value,
                "source": relative_to_root(operation.source_path, root),
                "destination": relative_to_root(operation.target_path, root),
                "season": operation.episode_key[0],
                "episode": operation.episode_key[1],
                "version": operation.version,
            }
            for operation in plan.operations
        ],
        "skipped": [relative_to_root(path, root) for path in plan.skipped],
        "specials": [relative_to_root(path, root) for path in plan.specials],
        "validation": plan.validation.model_dump(mode="json"),
    }


def execution_payload(result: ExecutionResult, root: Path) -> dict[str, Any]:
    """Return the JSON representation of an execution result."""
    return {
        "success": result.success,
        "dry_run": result.dry_run,
        "renamed": result.success_count,
        "failed": result.error_count,
        "skipped": result.skipped_count,
        "folders_created": result.folder_create_count,
        "completed": [
            {
                "source": relative_to_root(source, root),
                "destination": relative_to_root(destination, root),
            }
            for source, destination in result.completed
        ],
        "messages": list(result.messages),
    }


__all__ = [
    "DEFAULT_LOG_DIR",
    "analysis_payload",
    "build_metadata_source",
    "configure_logging",
    "execution_payload",
    "parse_result_payload",
    "plan_payload",
    "relative_to_root",
]
