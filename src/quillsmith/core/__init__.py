"""Core rendering primitives: ops, formats, the tag stack, and the renderer."""

from __future__ import annotations

from .config import RenderSettings, load_settings
from .context import RenderContext
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    ConfigError,
    DecodeError,
    MalformedOpError,
    QuillRenderingError,
    exception_messages,
)
from .formats import BuiltinFormatter, Format, FormatKind, FormatPlace, Formatter
from .ops import TRUE_MARKER, Op, RawOp, decode_delta, populate_op
from .registry import CustomFormats, FormatRegistry, load_custom_formats
from .renderer import DeltaRenderer, render, render_extended
from .state import FormatState


__all__ = [
    "TRUE_MARKER",
    "BuiltinFormatter",
    "ConfigError",
    "CustomFormats",
    "DecodeError",
    "DeltaRenderer",
    "DiagnosticEmitter",
    "Format",
    "FormatKind",
    "FormatPlace",
    "FormatRegistry",
    "FormatState",
    "Formatter",
    "LoggingEmitter",
    "MalformedOpError",
    "NullEmitter",
    "Op",
    "QuillRenderingError",
    "RawOp",
    "RenderContext",
    "RenderSettings",
    "decode_delta",
    "exception_messages",
    "load_custom_formats",
    "load_settings",
    "populate_op",
    "render",
    "render_extended",
]
