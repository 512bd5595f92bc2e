"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="INPUT",
        help="JSON delta to render. Reads standard input when omitted or '-'.",
        show_default=False,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML or JSON file holding render settings.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

FormatsOption = Annotated[
    str | None,
    typer.Option(
        "--formats",
        metavar="MODULE:ATTR",
        help="Custom format resolver consulted before the built-in formats.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output HTML file. Defaults to stdout.",
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

PrettyOption = Annotated[
    bool,
    typer.Option(
        "--pretty",
        help="Indent the produced HTML for reading.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ListFormatsOption = Annotated[
    bool,
    typer.Option(
        "--list-formats",
        help="List the built-in formats and exit.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
