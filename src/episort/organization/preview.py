"""Rich rendering of operation plans."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Plan


def _display(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return escape(str(path.relative_to(root)))
        except ValueError:
            pass
    return escape(str(path))


def render_plan_preview(plan: Plan, console: Console, *, root: Optional[Path] = None) -> None:
    """Print one table per target folder listing ``from -> to`` pairs."""
    if not plan.operations:
        console.print("[green]Nothing to rename; every matched file is already correct.[/green]")

    for folder in plan.target_folders:
        table = Table(title=f"Target folder: {_display(folder, root)}")
        table.add_column("From", overflow="fold")
        table.add_column("To", overflow="fold")
        table.add_column("Kind")
        table.add_column("Episode", justify="right")
        for operation in plan.operations:
            if operation.target_folder != folder:
                continue
            season, episode = operation.episode_key
            table.add_row(
                _display(operation.source_path, root),
                escape(operation.target_file_name),
                operation.kind.value,
                f"S{season:02d}E{episode:02d}",
            )
        console.print(table)

    console.print(
        f"[cyan]{len(plan.operations)} operation(s), {plan.skip_count} already correct, "
        f"{plan.special_count} special file(s) left untouched.[/cyan]"
    )
    if not plan.validation.is_valid:
        console.print("[red]Plan validation failed:[/red]")
        for issue in plan.validation.issues:
            console.print(f"  - {escape(issue)}")


__all__ = ["render_plan_preview"]
