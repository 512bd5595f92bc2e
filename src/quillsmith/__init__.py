"""Primary public API for QuillSmith."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from quillsmith.core.config import RenderSettings, load_settings
from quillsmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from quillsmith.core.exceptions import (
    ConfigError,
    DecodeError,
    MalformedOpError,
    QuillRenderingError,
)
from quillsmith.core.formats import Format, FormatKind, FormatPlace, Formatter
from quillsmith.core.ops import Op
from quillsmith.core.registry import CustomFormats, FormatRegistry
from quillsmith.core.renderer import DeltaRenderer, render, render_extended


try:
    __version__ = _pkg_version("quillsmith")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ConfigError",
    "CustomFormats",
    "DecodeError",
    "DeltaRenderer",
    "DiagnosticEmitter",
    "Format",
    "FormatKind",
    "FormatPlace",
    "FormatRegistry",
    "Formatter",
    "LoggingEmitter",
    "MalformedOpError",
    "NullEmitter",
    "Op",
    "QuillRenderingError",
    "RenderSettings",
    "__version__",
    "load_settings",
    "render",
    "render_extended",
]
