"""Command line interface for episort."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from episort.analysis import SpecialFolderMatcher, StateAnalyzer
from episort.cli_support import (
    analysis_payload,
    build_metadata_source,
    configure_logging,
    execution_payload,
    parse_result_payload,
    plan_payload,
    relative_to_root,
)
from episort.config import ConfigError, ConfigManager, EpisortConfig
from episort.ingestion import VideoScanner
from episort.metadata import MetadataError
from episort.naming import NameFormatter, NamingError
from episort.organization import PlanError, PlanManager, RenameLogWriter, VersionManager
from episort.parsing import PatternParser

console = Console()
LOGGER = logging.getLogger(__name__)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    important_modes = {"summary", "warning", "error"}
    if summary_only and mode not in important_modes:
        return

    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        root: Target root path relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    formatted_root = str(root)
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {formatted_root}: {parts}.[/green]"


def _resolve_output_modes(
    ctx: click.Context,
    config: EpisortConfig,
    *,
    quiet: bool,
    summary_mode: bool,
    json_output: bool,
) -> tuple[bool, bool]:
    """Combine CLI flags with configured defaults for quiet/summary output."""
    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="episort")
def cli() -> None:
    """Episort renames loosely named episode files to a canonical scheme.

    Returns:
        None: This function is invoked for its side effects.
    """


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--series-id", type=str, help="TheTVDB series identifier to fetch episodes for.")
@click.option(
    "--episodes",
    "episodes_file",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="YAML/JSON episode list to use instead of TheTVDB.",
)
@click.option("--series-name", type=str, help="Series name to use in target file names.")
@click.option("--dry-run", is_flag=True, help="Preview changes without modifying files.")
@click.option("-y", "--yes", is_flag=True, help="Apply the plan without asking for confirmation.")
@click.option(
    "--json", "json_output", is_flag=True, help="Emit JSON describing the plan and result."
)
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option("--debug", is_flag=True, help="Log every parsing attempt at DEBUG level.")
@click.pass_context
def rename(
    ctx: click.Context,
    path: str,
    series_id: str | None,
    episodes_file: str | None,
    series_name: str | None,
    dry_run: bool,
    yes: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Rename the episode files under PATH to the configured naming scheme.

    Args:
        ctx: Click context used for parameter source inspection.
        path: Library folder holding the episodes of one series.
        series_id: Remote series identifier.
        episodes_file: Local episode list used instead of the remote database.
        series_name: Series name override for rendered file names.
        dry_run: If True, run the plan without touching the filesystem.
        yes: Skip the confirmation prompt.
        json_output: If True, emit JSON describing the plan and its execution.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error CLI output entirely.
        debug: When True, enable per-rule parser debug logging.

    Raises:
        click.ClickException: If configuration, metadata or planning fails.
    """

    json_enabled = json_output
    try:
        if bool(series_id) == bool(episodes_file):
            raise click.UsageError("Provide exactly one of --series-id or --episodes.")

        manager = ConfigManager()
        manager.ensure_exists()
        config = manager.load()

        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        debug_enabled = debug or config.parsing.debug
        configure_logging(
            config.logging,
            log_dir=manager.config_path.parent / "logs",
            debug=debug_enabled,
            console_level=logging.ERROR if json_output else None,
        )

        root = Path(path).expanduser().resolve()
        source = build_metadata_source(
            config.metadata,
            episodes_file=Path(episodes_file) if episodes_file else None,
        )
        lookup_id = series_id or ""
        episodes = source.get_episodes(lookup_id)
        resolved_series = series_name or source.get_series_info(lookup_id).name

        scanner = VideoScanner(
            video_extensions=config.scanning.video_extensions,
            excluded_folders=config.scanning.excluded_folders,
            include_hidden=config.scanning.include_hidden,
            follow_symlinks=config.scanning.follow_symlinks,
        )
        files = scanner.list_video_files(root)

        formatter = NameFormatter(config.naming)
        parser = PatternParser(
            max_length=config.parsing.max_filename_length,
            debug=debug_enabled,
        )
        analyzer = StateAnalyzer(parser, formatter, root=root)
        analysis = analyzer.analyze(
            files,
            episodes,
            resolved_series,
            SpecialFolderMatcher(config.scanning.special_folders),
        )

        duplicate_ops = VersionManager(formatter).resolve_versions(analysis.duplicates)
        planner = PlanManager()
        plan = planner.build(
            analysis.skip,
            analysis.rename,
            duplicate_ops,
            analysis.specials,
            series_name=resolved_series,
        )

        if not json_output:
            _emit_message(
                f"[cyan]Found {len(files)} video file(s) for {escape(resolved_series)} "
                f"({len(episodes)} episode(s) in metadata).[/cyan]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            if not quiet_enabled and not summary_only:
                planner.preview(plan, console, root=root)
            for warning in analysis.warnings:
                _emit_message(
                    f"[yellow]{escape(warning)}[/yellow]",
                    mode="warning",
                    quiet=quiet_enabled,
                    summary_only=summary_only,
                )

        if not plan.validation.is_valid:
            _handle_cli_error(
                "Plan validation failed; no files were changed.",
                code="plan_invalid",
                json_output=json_output,
                details={"issues": plan.validation.issues},
            )

        apply_changes = not dry_run and bool(plan.operations)
        if apply_changes and not yes and not json_output and config.cli.confirm_default:
            if not click.confirm(f"Apply {len(plan.operations)} rename(s)?", default=False):
                _emit_message(
                    "[yellow]Aborted; no files were changed.[/yellow]",
                    mode="summary",
                    quiet=quiet_enabled,
                    summary_only=summary_only,
                )
                return

        result = planner.execute(plan, dry_run=not apply_changes)

        log_path: Path | None = None
        if apply_changes and config.logging.rename_log and result.completed:
            try:
                log_path = RenameLogWriter(root).write(result, resolved_series)
            except OSError as exc:
                LOGGER.warning("Unable to write rename log under %s: %s", root, exc)

        if json_output:
            payload: dict[str, Any] = {
                "context": {
                    "root": str(root),
                    "series": resolved_series,
                    "dry_run": dry_run,
                },
                "analysis": analysis_payload(analysis, root),
                "plan": plan_payload(plan, root),
                "result": execution_payload(result, root),
            }
            if log_path is not None:
                payload["context"]["rename_log"] = relative_to_root(log_path, root)
            console.print_json(data=payload)
        else:
            if result.error_count:
                _emit_message(
                    "[red]Errors encountered:[/red]",
                    mode="error",
                    quiet=quiet_enabled,
                    summary_only=summary_only,
                )
                for message in result.messages:
                    _emit_message(
                        f"  - {escape(message)}",
                        mode="error",
                        quiet=quiet_enabled,
                        summary_only=summary_only,
                    )
            prefix = "Dry run" if dry_run else "Rename"
            _emit_message(
                _format_summary_line(
                    prefix,
                    root,
                    {
                        "renamed": result.success_count,
                        "already_correct": plan.skip_count,
                        "specials": plan.special_count,
                        "unmatched": len(analysis.unmatched),
                        "unparseable": len(analysis.unparseable),
                        "skipped": result.skipped_count,
                        "failed": result.error_count,
                    },
                ),
                mode="summary",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            if log_path is not None:
                _emit_message(
                    f"[green]Rename log updated at {log_path}.[/green]",
                    mode="detail",
                    quiet=quiet_enabled,
                    summary_only=summary_only,
                )

        if not result.success:
            raise SystemExit(1)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except MetadataError as exc:
        _handle_cli_error(str(exc), code="metadata_error", json_output=json_enabled, original=exc)
    except NamingError as exc:
        _handle_cli_error(str(exc), code="naming_error", json_output=json_enabled, original=exc)
    except PlanError as exc:
        _handle_cli_error(str(exc), code="plan_error", json_output=json_enabled, original=exc)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)


@cli.command()
@click.argument("file_names", nargs=-1, required=True)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON parse results.")
@click.option("--debug", is_flag=True, help="Log every rule attempt at DEBUG level.")
def parse(file_names: tuple[str, ...], json_output: bool, debug: bool) -> None:
    """Show the season/episode identity read from each FILE_NAMES entry.

    Args:
        file_names: File names to parse; directories are not inspected.
        json_output: If True, emit a JSON list instead of a table.
        debug: When True, log every rule attempt.
    """
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    debug_enabled = debug or config.parsing.debug
    if debug_enabled:
        configure_logging(
            config.logging,
            log_dir=ConfigManager().config_path.parent / "logs",
            debug=True,
            console_level=logging.ERROR if json_output else None,
        )

    parser = PatternParser(max_length=config.parsing.max_filename_length, debug=debug_enabled)
    results = [(name, parser.parse(name)) for name in file_names]

    if json_output:
        console.print_json(data=[parse_result_payload(name, result) for name, result in results])
        return

    table = Table(title="Parse results")
    table.add_column("File", overflow="fold")
    table.add_column("Series")
    table.add_column("Season", justify="right")
    table.add_column("Episode", justify="right")
    table.add_column("Rule")
    for name, result in results:
        if result is None:
            table.add_row(escape(name), "[red]no match[/red]", "-", "-", "-")
            continue
        table.add_row(
            escape(name),
            escape(result.series_name),
            str(result.season_number),
            str(result.episode_number),
            result.pattern_id,
        )
    console.print(table)


@cli.group()
def config() -> None:
    """Manage episort configuration files and overrides.

    Returns:
        None: This function is invoked for its side effects.
    """


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        config = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        changed = manager.set_value(key, parsed_value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if not changed:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    diff = difflib.unified_diff(
        before,
        manager.read_text().splitlines(),
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {escape(key)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        manager.replace(edited)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point.

    Returns:
        None: This function is invoked for its side effects.
    """
    cli()


if __name__ == "__main__":
    main()
