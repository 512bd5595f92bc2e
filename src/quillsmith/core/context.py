"""Per-render state shared by the writer routines."""

from __future__ import annotations

from dataclasses import dataclass, field
import io

from .diagnostics import DiagnosticEmitter, NullEmitter
from .ops import Op
from .registry import FormatRegistry
from .state import FormatState


@dataclass
class RenderContext:
    """Everything one render invocation mutates.

    `output`
    : the finalized HTML.

    `pending`
    : inline content of the block being assembled; its opening tag is only
      known once the terminating newline is reached.

    `state`
    : formats currently open.

    `op`
    : scratch op refilled for every record.
    """

    registry: FormatRegistry
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    output: io.StringIO = field(default_factory=io.StringIO)
    pending: io.StringIO = field(default_factory=io.StringIO)
    state: FormatState = field(default_factory=FormatState)
    op: Op = field(default_factory=Op)
    index: int = -1

    def has_pending(self) -> bool:
        """Return True when the current block already holds inline content."""
        return self.pending.tell() > 0

    def flush_pending(self) -> None:
        """Move the pending inline content to the output and reset it."""
        self.output.write(self.pending.getvalue())
        self.pending.seek(0)
        self.pending.truncate()

    def html(self) -> str:
        """Return the HTML finalized so far."""
        return self.output.getvalue()


__all__ = ["RenderContext"]
