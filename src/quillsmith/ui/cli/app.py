"""Typer application and console-script entry point."""

from __future__ import annotations

import typer

from quillsmith.core.exceptions import QuillRenderingError

from .commands.render import render
from .state import emit_error, get_cli_state


app = typer.Typer(
    help="Render Quill deltas into HTML fragments.",
    add_completion=False,
    pretty_exceptions_enable=False,
)
app.command()(render)


def _print_traceback(exc: BaseException) -> None:
    from rich.traceback import Traceback

    state = get_cli_state()
    state.err_console.print(
        Traceback.from_exception(
            type(exc), exc, exc.__traceback__, show_locals=state.verbosity >= 2
        )
    )


def main() -> None:
    """Run the CLI.

    The command reports render failures itself and exits with status 1. Under
    ``--debug`` it lets them propagate so they are shown here with a full
    traceback; anything else reaching this point is a bug and is shown the
    same way.
    """
    try:
        app()
    except QuillRenderingError as exc:
        _print_traceback(exc)
        raise SystemExit(1) from exc
    except Exception as exc:  # pragma: no cover - unexpected failures
        if get_cli_state().show_tracebacks:
            _print_traceback(exc)
        else:
            emit_error(f"Unexpected failure: {exc}", exception=exc)
        raise SystemExit(1) from exc


__all__ = ["app", "main"]
