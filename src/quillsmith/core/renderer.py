"""Single-pass renderer turning a delta into an HTML fragment.

Ops are scanned in order. Inline runs are written to a pending buffer while
the formats they carry are opened and closed on the :class:`FormatState`.
Block-level formats (paragraphs, headers, list items, alignment...) are only
known once the newline ending the block is reached: at that point the queued
block formats are merged into a single opening tag, the pending buffer is
flushed into it, and the block is closed.
"""

from __future__ import annotations

import logging

from .context import RenderContext
from .diagnostics import (
    RENDER_COMPLETE,
    UNKNOWN_ATTRIBUTE,
    DiagnosticEmitter,
    NullEmitter,
    format_event_message,
)
from .exceptions import MalformedOpError
from .formats import (
    AUXILIARY_ATTRIBUTES,
    Format,
    FormatPlace,
    Formatter,
    bind_format,
    quote_attr,
)
from .ops import DeltaInput, RawOp, closing_op, decode_delta, populate_op
from .registry import CustomFormats, FormatRegistry


logger = logging.getLogger(__name__)


class DeltaRenderer:
    """Render deltas with the built-in catalog and optional custom formats.

    A renderer holds no per-document state, so one instance may serve any
    number of renders, including concurrent ones.
    """

    def __init__(
        self,
        custom_formats: CustomFormats | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
        warn_unknown_attributes: bool = False,
    ) -> None:
        self.registry = FormatRegistry(custom_formats)
        self.emitter: DiagnosticEmitter = emitter or NullEmitter()
        self.warn_unknown_attributes = warn_unknown_attributes

    def render(self, delta: DeltaInput) -> str:
        """Return the HTML fragment for ``delta``.

        Raises :class:`~quillsmith.core.exceptions.DecodeError` before rendering
        anything when the delta cannot be decoded, and
        :class:`~quillsmith.core.exceptions.MalformedOpError` (carrying the HTML
        finalized so far) when an op cannot be rendered.
        """
        raw_ops = decode_delta(delta)
        logger.debug("Rendering delta with %d op(s)", len(raw_ops))

        context = RenderContext(registry=self.registry, emitter=self.emitter)
        for index, raw in enumerate(raw_ops):
            context.index = index
            try:
                populate_op(raw, context.op, index=index)
                self._render_op(context, raw)
            except MalformedOpError as exc:
                exc.html = context.html()
                raise

        self._finish(context)
        html = context.html()
        self.emitter.event(RENDER_COMPLETE, {"ops": len(raw_ops), "length": len(html)})
        return html

    def _render_op(self, context: RenderContext, raw: RawOp | None) -> None:
        op = context.op
        formats: list[Format] = []
        writers: list[Formatter] = []

        type_formatter = context.registry.resolve(op.type, op)
        if type_formatter is None:
            raise MalformedOpError(
                f"Op #{context.index} has no format defined for its type '{op.type}'",
                index=context.index,
                record=raw,
            )
        self._queue(context, type_formatter, formats, writers)

        for name in sorted(op.attrs):
            if not op.attrs[name]:
                continue
            formatter = context.registry.resolve(name, op)
            if formatter is None:
                self._report_unknown(context, name)
                continue
            self._queue(context, formatter, formats, writers)

        if writers:
            # The writers print the whole element; the payload is not body text.
            op.data = ""

        if "\n" not in op.data:
            self._write_inline(context, formats, writers)
            return

        segments = op.data.split("\n")
        last = len(segments) - 1
        for position, segment in enumerate(segments):
            if segment:
                op.data = segment
                self._write_inline(context, formats, [])
            if position < last:
                carried = self._write_block(context, formats)
                formats.extend([fm for fm in carried if not _queued(fm, formats)])

    def _queue(
        self,
        context: RenderContext,
        formatter: Formatter,
        formats: list[Format],
        writers: list[Formatter],
    ) -> None:
        """Queue the format of ``formatter`` unless it is already open."""
        fm = bind_format(formatter)
        if fm is None:
            if formatter.writes_body:
                writers.append(formatter)
            return
        if fm.wrapper or not context.state.is_open(fm):
            formats.append(fm)

    def _write_inline(
        self, context: RenderContext, formats: list[Format], writers: list[Formatter]
    ) -> None:
        op = context.op
        state = context.state
        state.close_pending(context.pending, op)

        opening: list[Format] = []
        for fm in formats:
            if fm.block:
                continue
            if fm.wrapper and not _source(fm).should_open(state.open, op):
                continue
            opening.append(fm)
        state.open_formats(opening, context.pending)

        for writer in writers:
            writer.write(context.pending)
        context.pending.write(op.data)

    def _write_block(self, context: RenderContext, formats: list[Format]) -> list[Format]:
        """Close the block being assembled and return the inline formats it ended."""
        op = context.op
        state = context.state
        output = context.output

        # An empty block still needs content to be visible.
        body = "" if context.has_pending() else "<br>"

        state.close_pending(context.pending, op, block=True, wrapper_buffer=output)
        # Inline markup never spans blocks, even when the newline carries it.
        carried = state.close_inline(context.pending)

        tag_name = ""
        classes: list[str] = []
        style = ""
        for fm in formats:
            if not fm.block:
                continue
            match fm.place:
                case FormatPlace.TAG:
                    if fm.value:
                        tag_name = fm.value
                case FormatPlace.CLASS:
                    classes.append(fm.value)
                case FormatPlace.STYLE:
                    style += fm.value
            if fm.wrapper and _source(fm).should_open(state.open, op):
                state.push(fm)
                output.write(fm.wrap_open)

        if tag_name:
            output.write(f"<{tag_name}")
            if classes:
                output.write(f" class={quote_attr(' '.join(classes))}")
            if style:
                output.write(f" style={quote_attr(style)}")
            output.write(">")

        context.flush_pending()
        output.write(body)

        if tag_name:
            output.write(f"</{tag_name}>")
        return carried

    def _finish(self, context: RenderContext) -> None:
        if context.has_pending():
            # Trailing inline content forms a last paragraph of its own.
            context.op = closing_op()
            context.op.data = "\n"
            self._render_op(context, None)

        output = context.output
        context.state.close_pending(output, closing_op(), block=True, wrapper_buffer=output)
        context.state.drain(output)

    def _report_unknown(self, context: RenderContext, keyword: str) -> None:
        if keyword in AUXILIARY_ATTRIBUTES:
            return
        payload = {"keyword": keyword, "index": context.index}
        if self.warn_unknown_attributes:
            self.emitter.warning(format_event_message(UNKNOWN_ATTRIBUTE, payload) or keyword)
            return
        self.emitter.event(UNKNOWN_ATTRIBUTE, payload)


def _source(fm: Format) -> Formatter:
    if fm.source is None:  # pragma: no cover - formats are always queued with a source
        raise MalformedOpError(f"Format '{fm.value}' has no formatter attached")
    return fm.source


def _queued(fm: Format, formats: list[Format]) -> bool:
    if fm.wrapper:
        return any(other.wrapper and other.wrap_open == fm.wrap_open for other in formats)
    return any(
        not other.wrapper and other.place == fm.place and other.value == fm.value
        for other in formats
    )


def render(delta: DeltaInput) -> str:
    """Render ``delta`` with the built-in formats."""
    return DeltaRenderer().render(delta)


def render_extended(delta: DeltaInput, custom_formats: CustomFormats | None) -> str:
    """Render ``delta``, asking ``custom_formats`` first for every keyword."""
    return DeltaRenderer(custom_formats).render(delta)


__all__ = ["DeltaRenderer", "render", "render_extended"]
