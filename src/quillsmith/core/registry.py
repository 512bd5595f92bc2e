"""Formatter lookup for op types and attributes."""

from __future__ import annotations

from collections.abc import Callable
import importlib
from typing import Any

from .exceptions import ConfigError
from .formats import BuiltinFormatter, FormatKind, Formatter, catalog
from .ops import Op


CustomFormats = Callable[[str, Op], Formatter | None]
"""Caller-supplied resolver consulted before the built-in catalog."""


class FormatRegistry:
    """Resolve keywords (an op type or an attribute name) into formatters.

    The custom resolver, when present, is asked first; a ``None`` answer falls
    through to the built-in catalog.
    """

    def __init__(self, custom_formats: CustomFormats | None = None) -> None:
        self.custom_formats = custom_formats

    def resolve(self, keyword: str, op: Op) -> Formatter | None:
        """Return the formatter for ``keyword`` in the context of ``op``."""
        if self.custom_formats is not None:
            custom = self.custom_formats(keyword, op)
            if custom is not None:
                return custom

        kind = FormatKind.lookup(keyword)
        if kind is None:
            return None
        return BuiltinFormatter.for_op(kind, op)

    def describe(self) -> list[dict[str, str]]:
        """Return a serialisable snapshot of the built-in catalog."""
        return catalog()


def load_custom_formats(entrypoint: str) -> CustomFormats:
    """Load a custom resolver from a ``module:attribute`` entry point."""
    module_name, _, attr = entrypoint.partition(":")
    if not module_name or not attr:
        raise ConfigError("Formats entry point must be in the form 'module:attribute'.")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Unable to import formats module '{module_name}': {exc}") from exc

    resolver: Any = getattr(module, attr, None)
    if resolver is None:
        raise ConfigError(f"Module '{module_name}' has no attribute '{attr}'.")
    if not callable(resolver):
        raise ConfigError(f"Formats entry point '{entrypoint}' is not callable.")
    return resolver


__all__ = ["CustomFormats", "FormatRegistry", "load_custom_formats"]
