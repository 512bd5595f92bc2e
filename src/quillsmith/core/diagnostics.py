"""Reporting hooks for the renderer.

The renderer never prints. It hands two kinds of diagnostics to an emitter:

`warning`
: a message worth showing to a person (unsupported attributes when
  ``warn_unknown_attributes`` is enabled).

`event`
: a structured record. The renderer emits ``unknown_attribute`` (``keyword``,
  ``index``) for each attribute it skipped and ``render_complete`` (``ops``,
  ``length``) once the fragment is finished.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)

UNKNOWN_ATTRIBUTE = "unknown_attribute"
RENDER_COMPLETE = "render_complete"


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Receiver of renderer warnings and events."""

    def warning(self, message: str) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Discard everything."""

    def warning(self, message: str) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Route diagnostics to :mod:`logging`.

    Skipped attributes are logged at DEBUG since deltas routinely carry
    attributes meant for other renderers; a finished render is logged at INFO.
    """

    def __init__(self, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message is None:
            self._logger.debug("Unhandled renderer event %s: %s", name, dict(payload))
        elif name == UNKNOWN_ATTRIBUTE:
            self._logger.debug(message)
        else:
            self._logger.info(message)


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Describe a renderer event in one line, or return None for unknown events."""
    match name:
        case "unknown_attribute":
            keyword = payload.get("keyword")
            return f"Ignoring unsupported attribute {keyword!r} (op #{payload.get('index')})"
        case "render_complete":
            ops = payload.get("ops", 0)
            return (
                f"Rendered {ops} op{'' if ops == 1 else 's'} "
                f"into {payload.get('length', 0)} characters of HTML"
            )
    return None


__all__ = [
    "RENDER_COMPLETE",
    "UNKNOWN_ATTRIBUTE",
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
