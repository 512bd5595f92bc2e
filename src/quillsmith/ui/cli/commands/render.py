"""Implementation of the primary ``quillsmith`` CLI command."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from quillsmith.core.config import RenderSettings, load_settings
from quillsmith.core.exceptions import ConfigError, DecodeError, MalformedOpError
from quillsmith.core.registry import FormatRegistry
from quillsmith.core.renderer import DeltaRenderer

from .._options import (
    ConfigOption,
    DebugOption,
    FormatsOption,
    InputPathArgument,
    ListFormatsOption,
    OutputPathOption,
    PrettyOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_format_catalog, present_ignored_attributes
from ..state import debug_enabled, emit_error, set_cli_state
from ..utils import prettify_html, read_delta_source, write_output_file


def _resolve_settings(
    config: Path | None,
    *,
    formats: str | None,
    pretty: bool,
) -> RenderSettings:
    """Merge the settings file with command-line overrides."""
    settings = load_settings(config) if config is not None else RenderSettings()
    updates: dict[str, object] = {}
    if formats:
        updates["formats"] = formats
    if pretty:
        updates["pretty"] = True
    return settings.model_copy(update=updates) if updates else settings


def _emit_output(html: str, output: Path | None, *, pretty: bool) -> None:
    content = prettify_html(html) if pretty else html
    if output is None:
        typer.echo(content)
        return
    write_output_file(output, content)


def _fail(message: str, exc: BaseException) -> NoReturn:
    if debug_enabled():
        raise exc
    emit_error(message, exception=exc)
    raise typer.Exit(code=1) from exc


def render(
    input_path: InputPathArgument = None,
    output: OutputPathOption = None,
    config: ConfigOption = None,
    formats: FormatsOption = None,
    pretty: PrettyOption = False,
    list_formats: ListFormatsOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render a Quill delta (JSON array of insert operations) into HTML."""
    state = set_cli_state(verbosity=verbose, debug=debug)

    if list_formats:
        present_format_catalog(state, FormatRegistry().describe())
        raise typer.Exit()

    try:
        settings = _resolve_settings(config, formats=formats, pretty=pretty)
        custom_formats = settings.custom_formats()
    except ConfigError as exc:
        _fail(str(exc), exc)

    try:
        payload = read_delta_source(input_path)
    except OSError as exc:
        _fail(str(exc), exc)

    renderer = DeltaRenderer(
        custom_formats,
        emitter=CliEmitter(state),
        warn_unknown_attributes=settings.warn_unknown_attributes,
    )

    try:
        html = renderer.render(payload)
    except DecodeError as exc:
        _fail(str(exc), exc)
    except MalformedOpError as exc:
        if settings.keep_partial and exc.html:
            _emit_output(exc.html, output, pretty=settings.pretty)
        _fail(str(exc), exc)

    _emit_output(html, output, pretty=settings.pretty)
    present_ignored_attributes(state)


__all__ = ["render"]
