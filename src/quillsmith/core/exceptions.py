"""Custom exception hierarchy for the delta rendering pipeline."""

from __future__ import annotations

from typing import Any


class QuillRenderingError(RuntimeError):
    """Base exception for delta rendering failures."""


class DecodeError(QuillRenderingError):
    """Raised when the input is not a JSON array of insert operations."""


class MalformedOpError(QuillRenderingError):
    """Raised when an operation cannot be rendered.

    The HTML finalized before the failing operation is kept on ``html`` so
    callers may still display the partial document.
    """

    def __init__(
        self,
        message: str,
        *,
        index: int | None = None,
        record: Any = None,
        html: str = "",
    ) -> None:
        super().__init__(message)
        self.index = index
        self.record = record
        self.html = html


class ConfigError(QuillRenderingError):
    """Raised when render settings or a formats entry point cannot be loaded."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages

