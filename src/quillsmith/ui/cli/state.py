"""Per-invocation CLI state and stderr reporting."""

from __future__ import annotations

from collections import Counter
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING

from quillsmith.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console


@dataclass(slots=True)
class CLIState:
    """Options and diagnostics gathered while one command runs.

    `verbosity`
    : ``-v`` count. One level shows render statistics, skipped attributes and
      the exception type; two levels add the chain of causes.

    `show_tracebacks`
    : set by ``--debug``; failures propagate instead of being summarised.

    `ignored_attributes`
    : number of ops on which each unsupported attribute was skipped.
    """

    verbosity: int = 0
    show_tracebacks: bool = False
    ignored_attributes: Counter[str] = field(default_factory=Counter)

    @property
    def console(self) -> Console:
        from rich.console import Console

        return Console(file=sys.stdout)

    @property
    def err_console(self) -> Console:
        from rich.console import Console

        return Console(file=sys.stderr, highlight=False)


_STATE: ContextVar[CLIState | None] = ContextVar("quillsmith_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the state of the running command, creating a default one if needed."""
    state = _STATE.get()
    if state is None:
        state = CLIState()
        _STATE.set(state)
    return state


def set_cli_state(*, verbosity: int = 0, debug: bool = False) -> CLIState:
    """Start a fresh state for a new command invocation."""
    state = CLIState(verbosity=max(0, verbosity), show_tracebacks=debug)
    _STATE.set(state)
    return state


def _details(exception: BaseException, verbosity: int) -> list[str]:
    lines = [f"type: {type(exception).__name__}"]
    if verbosity >= 2:
        causes = exception_messages(exception)[1:]
        if causes:
            lines.append("caused by:")
            lines.extend(f"  {cause}" for cause in causes)
    return lines


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` on stderr, prefixed by its level."""
    from rich.text import Text

    state = get_cli_state()
    style = {"error": "red", "warning": "yellow"}.get(level, "dim")
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        text.append("\n" + "\n".join(_details(exception, state.verbosity)), style=style)
    state.err_console.print(text)


def emit_info(message: str) -> None:
    """Print an informational line; silent unless ``-v`` was given."""
    if get_cli_state().verbosity >= 1:
        render_message("info", message)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether ``--debug`` was given for the running command."""
    state = _STATE.get()
    return state is not None and state.show_tracebacks


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]
