"""Delta operations and their normalisation.

A delta is a JSON array of ``insert`` records. Each record is decoded into a
:class:`RawOp` and then normalised into the canonical :class:`Op` consumed by
the renderer:

`data`
: the text payload (HTML-escaped for string inserts) or the embed value.

`type`
: ``"text"`` for string inserts, otherwise the single key of the embed object.

`attrs`
: attribute names mapped to string values. Boolean ``true`` becomes
  :data:`TRUE_MARKER`; ``false`` and ``null`` become the empty string, which is
  equivalent to an absent attribute.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import html
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .exceptions import DecodeError, MalformedOpError


TRUE_MARKER = "y"
"""Normalised value of a boolean attribute set to ``true``."""


class RawOp(BaseModel):
    """One record of the delta array, as found on the wire."""

    model_config = ConfigDict(extra="ignore")

    insert: Any = None
    attributes: dict[str, Any] | None = None


_DELTA_ADAPTER: TypeAdapter[list[RawOp]] = TypeAdapter(list[RawOp])

DeltaInput = bytes | bytearray | str | Sequence[Mapping[str, Any]]


@dataclass(slots=True)
class Op:
    """A canonical insert operation."""

    data: str = ""
    type: str = "text"
    attrs: dict[str, str] = field(default_factory=dict)

    def has_attr(self, name: str) -> bool:
        """Return True when the attribute is set to a non-blank value."""
        return bool(self.attrs.get(name))

    def reset(self, *, data: str = "", type: str = "text") -> None:
        """Clear the op in place so it can be reused for the next record."""
        self.data = data
        self.type = type
        self.attrs.clear()


def closing_op() -> Op:
    """Return the blank op used to signal that every format must end."""
    return Op(data="", type="text")


def decode_delta(delta: DeltaInput) -> list[RawOp]:
    """Decode a delta into raw op records.

    ``delta`` may be JSON text or an already-decoded sequence of mappings.
    """
    try:
        if isinstance(delta, (bytes, bytearray, str)):
            return _DELTA_ADAPTER.validate_json(delta)
        return _DELTA_ADAPTER.validate_python(list(delta))
    except ValidationError as exc:
        raise DecodeError(f"Invalid delta: {_summarise_validation(exc)}") from exc
    except TypeError as exc:
        raise DecodeError(f"Invalid delta: {exc}") from exc


def _summarise_validation(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    extra = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {message}{extra}" if location else f"{message}{extra}"


def coerce_scalar(value: Any) -> str:
    """Turn a JSON scalar into its display string."""
    match value:
        case str():
            return value
        case bool():
            return TRUE_MARKER if value else ""
        case int():
            return str(value)
        case float():
            return str(int(value)) if value.is_integer() else repr(value)
        case _:
            return ""


def populate_op(raw: RawOp, op: Op, *, index: int | None = None) -> Op:
    """Normalise ``raw`` into ``op`` (reused across iterations) and return it."""
    insert = raw.insert
    match insert:
        case str():
            op.reset(data=html.escape(insert), type="text")
        case dict() if len(insert) == 1:
            ((kind, value),) = insert.items()
            op.reset(data=coerce_scalar(value), type=str(kind))
        case None:
            raise MalformedOpError(
                f"Op {_describe_index(index)}lacks an insert: {_describe_record(raw)}",
                index=index,
                record=raw,
            )
        case _:
            raise MalformedOpError(
                f"Op {_describe_index(index)}has an unusable insert: {_describe_record(raw)}",
                index=index,
                record=raw,
            )

    if raw.attributes:
        for name, value in raw.attributes.items():
            op.attrs[name] = coerce_scalar(value)
    return op


def _describe_index(index: int | None) -> str:
    return f"#{index} " if index is not None else ""


def _describe_record(raw: RawOp) -> str:
    return repr(raw.model_dump(exclude_none=True))


__all__ = [
    "TRUE_MARKER",
    "DeltaInput",
    "Op",
    "RawOp",
    "closing_op",
    "coerce_scalar",
    "decode_delta",
    "populate_op",
]
