"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup
import click


STDIN_MARKER = "-"


def read_delta_source(source: Path | None) -> bytes:
    """Return the raw delta bytes from ``source`` or standard input."""
    if source is None or str(source) == STDIN_MARKER:
        stream = click.get_binary_stream("stdin")
        if stream.isatty():
            raise click.UsageError(
                "No delta given: pass a JSON file or pipe one on standard input."
            )
        return stream.read()
    try:
        return source.read_bytes()
    except OSError as exc:
        raise OSError(f"Failed to read delta from '{source}': {exc.strerror or exc}") from exc


def prettify_html(fragment: str) -> str:
    """Return ``fragment`` re-indented for reading."""
    return BeautifulSoup(fragment, "html.parser").prettify()


def write_output_file(target: Path, content: str) -> None:
    """Persist HTML content to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write HTML output to '{target}': {exc}") from exc
