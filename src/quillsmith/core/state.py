"""Stack of the formats currently open in the rendered output."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from .formats import Format, TextSink


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .ops import Op


def sort_formats(formats: Iterable[Format]) -> list[Format]:
    """Order formats so that serialisation never depends on attribute order."""
    return sorted(formats, key=Format.sort_key)


class FormatState:
    """Open tag, class, style, and wrapper formats in the order they were opened.

    Re-serialising :attr:`open` from first to last reproduces the markup that is
    currently open in the output.
    """

    def __init__(self, formats: Iterable[Format] = ()) -> None:
        self.open: list[Format] = list(formats)

    def __len__(self) -> int:
        return len(self.open)

    def __iter__(self) -> Iterator[Format]:
        return iter(self.open)

    def __bool__(self) -> bool:
        return bool(self.open)

    def is_open(self, fm: Format) -> bool:
        """Say whether an equivalent non-wrapper format is already open."""
        return any(
            not entry.wrapper and entry.place == fm.place and entry.value == fm.value
            for entry in self.open
        )

    def push(self, fm: Format) -> None:
        """Record ``fm`` as opened. Block formats are merged by the writer instead."""
        self.open.append(fm)

    def pop(self, buffer: TextSink) -> Format:
        """Close the most recently opened format into ``buffer``."""
        fm = self.open.pop()
        buffer.write(fm.closing())
        return fm

    def is_due(self, fm: Format, op: Op, block: bool) -> bool:
        """Say whether ``fm`` must be closed before ``op`` is written."""
        source = fm.source
        if source is None:
            return True
        if fm.wrapper:
            return source.should_close(self.open, op, block)
        return not source.applies_to(op)

    def close_pending(
        self,
        buffer: TextSink,
        op: Op,
        *,
        block: bool = False,
        wrapper_buffer: TextSink | None = None,
    ) -> None:
        """Close the formats ``op`` no longer carries, newest first.

        Closing a format opened before others that must stay open requires
        closing those later formats too. They are held aside and reopened in
        serialisation order once the scan is done. When ``wrapper_buffer`` is
        given, block-level wrappers (and whatever sits above them) are closed
        into it instead of ``buffer``.
        """
        held: list[Format] = []

        for index in range(len(self.open) - 1, -1, -1):
            fm = self.open[index]
            if not self.is_due(fm, op, block):
                continue

            target = buffer
            if wrapper_buffer is not None and fm.wrapper and fm.block:
                target = wrapper_buffer

            while len(self.open) - 1 > index:
                held.append(self.pop(target))
            self.pop(target)

        if held:
            self.open_formats(held, buffer)

    def open_formats(self, formats: Iterable[Format], buffer: TextSink) -> list[Format]:
        """Write the opening markup of ``formats`` and push them, sorted."""
        ordered = sort_formats(formats)
        for fm in ordered:
            buffer.write(fm.opening())
        self.open.extend(ordered)
        return ordered

    def close_inline(self, buffer: TextSink) -> list[Format]:
        """Close everything above the innermost block wrapper.

        The closed formats are returned in the order they had been opened.
        """
        closed: list[Format] = []
        while self.open and not (self.open[-1].wrapper and self.open[-1].block):
            closed.append(self.pop(buffer))
        closed.reverse()
        return closed

    def drain(self, buffer: TextSink) -> None:
        """Close every remaining format."""
        while self.open:
            self.pop(buffer)


__all__ = ["FormatState", "sort_formats"]
