"""Rich-aware presenters for CLI output and diagnostics."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import typer

from .state import CLIState


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console


def _get_console(state: CLIState, *, stderr: bool = False) -> Console | None:
    """Retrieve the active Rich console when it drives an interactive terminal."""
    console = state.err_console if stderr else state.console
    if getattr(console, "is_terminal", False):
        return console
    return None


def _build_table(
    *,
    title: str | None,
    columns: Sequence[str],
    header_style: str = "bold cyan",
) -> Any:
    """Create a Rich table with the house style."""
    from rich import box
    from rich.table import Table

    table = Table(
        title=title or None,
        box=box.SQUARE,
        show_edge=True,
        header_style=header_style,
    )
    for col in columns:
        table.add_column(col)
    return table


def present_format_catalog(state: CLIState, formats: Sequence[Mapping[str, Any]]) -> None:
    """Render the built-in format catalog."""
    if not formats:
        return

    console = _get_console(state)
    if console is not None:
        table = _build_table(
            title="Built-in Formats",
            columns=["Keyword", "Place", "Block", "Rendering"],
        )
        for entry in formats:
            table.add_row(
                str(entry.get("keyword", "")),
                str(entry.get("place", "")),
                str(entry.get("block", "")),
                str(entry.get("rendering", "")),
            )
        console.print(table)
        return

    typer.echo("Built-in Formats:")
    for entry in formats:
        block = " (block)" if entry.get("block") == "yes" else ""
        typer.echo(
            f"  - {entry.get('keyword', '')}: {entry.get('place', '')}{block} "
            f"{entry.get('rendering', '')}"
        )


def present_ignored_attributes(state: CLIState) -> None:
    """Summarise attributes the renderer skipped, grouped by keyword."""
    counts = state.ignored_attributes
    if not counts or state.verbosity < 1:
        return

    console = _get_console(state, stderr=True)
    if console is not None:
        table = _build_table(title="Ignored Attributes", columns=["Attribute", "Ops"])
        for keyword, count in sorted(counts.items()):
            table.add_row(keyword, str(count))
        console.print(table)
        return

    typer.echo("Ignored attributes:", err=True)
    for keyword, count in sorted(counts.items()):
        typer.echo(f"  - {keyword}: {count}", err=True)


__all__ = ["present_format_catalog", "present_ignored_attributes"]
