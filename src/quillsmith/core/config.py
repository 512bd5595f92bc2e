"""Configuration models used by the delta renderer.

RenderSettings

`formats` (`str | None`)
: Entry point of a custom format resolver, written as ``module:attribute``.
  The callable receives the keyword (an op type or attribute name) and the
  current op, and returns a formatter or ``None`` to fall back to the built-in
  catalog.

`pretty` (`bool`)
: Re-indent the produced HTML before writing it out. The rendered fragment
  itself is unchanged; only the presentation differs.

`keep_partial` (`bool`)
: When an op cannot be rendered, still write the HTML produced before it.

`warn_unknown_attributes` (`bool`)
: Report attributes the renderer does not understand as warnings rather than
  debug events.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
import yaml

from .exceptions import ConfigError
from .registry import CustomFormats, load_custom_formats


class RenderSettings(BaseModel):
    """Settings controlling a render invocation."""

    model_config = ConfigDict(extra="forbid")

    formats: str | None = None
    pretty: bool = False
    keep_partial: bool = True
    warn_unknown_attributes: bool = False

    def custom_formats(self) -> CustomFormats | None:
        """Load the custom resolver named by ``formats`` if any."""
        if not self.formats:
            return None
        return load_custom_formats(self.formats)


def load_settings(path: Path | str) -> RenderSettings:
    """Read settings from a YAML or JSON file."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read settings file '{source}': {exc}") from exc

    try:
        if source.suffix.lower() == ".json":
            payload: Any = json.loads(text) if text.strip() else {}
        else:
            payload = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid settings file '{source}': {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Settings file '{source}' must contain a mapping.")

    try:
        return RenderSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in '{source}': {exc}") from exc


__all__ = ["RenderSettings", "load_settings"]
