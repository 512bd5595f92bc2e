"""Renderer emitter feeding the CLI state."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quillsmith.core.diagnostics import (
    RENDER_COMPLETE,
    UNKNOWN_ATTRIBUTE,
    format_event_message,
)

from .state import CLIState, emit_info, emit_warning, get_cli_state


class CliEmitter:
    """Count skipped attributes for the closing summary and echo warnings."""

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()

    def warning(self, message: str) -> None:
        emit_warning(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if name == UNKNOWN_ATTRIBUTE:
            self._state.ignored_attributes[str(payload.get("keyword", ""))] += 1
        elif name == RENDER_COMPLETE:
            message = format_event_message(name, payload)
            if message:
                emit_info(message)


__all__ = ["CliEmitter"]
