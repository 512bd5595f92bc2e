"""Format descriptors and the built-in formatter catalog.

A :class:`Formatter` knows how one kind of styling renders (:meth:`describe`)
and whether a given op still carries it (:meth:`applies_to`). Two optional
capabilities extend the base contract:

`Self-writing`
: ``writes_body`` is True and :meth:`Formatter.write` emits the whole element
  (embeds such as images). :meth:`describe` returns ``None`` for those.

`Wrapping`
: ``wraps`` is True and the formatter supplies literal opening/closing markup
  through :meth:`Formatter.wrap`, together with :meth:`Formatter.should_open`
  and :meth:`Formatter.should_close` predicates (list containers, anchors).

Built-in formats form a closed enumeration (:class:`FormatKind`) handled by a
single :class:`BuiltinFormatter` that dispatches on its kind. Callers extend
the catalog by subclassing :class:`Formatter` and returning instances from a
custom resolver (see :mod:`quillsmith.core.registry`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum
import html
from typing import TYPE_CHECKING, Protocol


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .ops import Op


class FormatPlace(IntEnum):
    """Where a format is printed. The order is the serialisation order."""

    TAG = 0
    CLASS = 1
    STYLE = 2


class TextSink(Protocol):
    """Anything accepting text, such as :class:`io.StringIO`."""

    def write(self, text: str, /) -> int: ...


@dataclass(slots=True, eq=False)
class Format:
    """How a matched format renders in the output.

    ``value`` is the tag name, CSS class, or inline style fragment depending on
    ``place``. Wrapper entries ignore ``place`` and print ``wrap_open`` and
    ``wrap_close`` verbatim.
    """

    value: str
    place: FormatPlace = FormatPlace.TAG
    block: bool = False
    wrapper: bool = False
    wrap_open: str = ""
    wrap_close: str = ""
    source: Formatter | None = field(default=None, repr=False)

    def sort_key(self) -> tuple[int, int, str]:
        """Wrappers first, then tags, classes and styles, then by value."""
        if self.wrapper:
            return (0, 0, self.wrap_open)
        return (1, int(self.place), self.value)

    def opening(self) -> str:
        """Return the markup opening this format inline."""
        if self.wrapper:
            return self.wrap_open
        match self.place:
            case FormatPlace.TAG:
                return f"<{self.value}>"
            case FormatPlace.CLASS:
                return f"<span class={quote_attr(self.value)}>"
            case FormatPlace.STYLE:
                return f"<span style={quote_attr(self.value)}>"

    def closing(self) -> str:
        """Return the markup closing this format."""
        if self.wrapper:
            return self.wrap_close
        if self.place is FormatPlace.TAG:
            return f"</{self.value}>"
        return "</span>"


class Formatter(ABC):
    """Source of a :class:`Format` for one op keyword."""

    writes_body: bool = False
    wraps: bool = False

    @abstractmethod
    def describe(self) -> Format | None:
        """Return the format to apply, or None when nothing is printed directly."""

    @abstractmethod
    def applies_to(self, op: Op) -> bool:
        """Say whether ``op`` still carries this format."""

    def write(self, buffer: TextSink) -> None:
        """Write the complete element body (self-writing formatters only)."""
        raise NotImplementedError(f"{type(self).__name__} does not write element bodies")

    def wrap(self) -> tuple[str, str]:
        """Return the literal opening and closing wraps (wrapping formatters only)."""
        raise NotImplementedError(f"{type(self).__name__} is not a wrapper")

    def should_open(self, open_formats: Sequence[Format], op: Op) -> bool:
        """Given the open formats and current op, say whether to write the opening wrap."""
        return True

    def should_close(self, open_formats: Sequence[Format], op: Op, block: bool) -> bool:
        """Say whether to write the closing wrap; ``block`` is True at block boundaries."""
        return not self.applies_to(op)


class FormatKind(Enum):
    """Keywords understood by the built-in catalog."""

    TEXT = "text"
    HEADER = "header"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "code-block"
    ALIGN = "align"
    INDENT = "indent"
    SIZE = "size"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE = "strike"
    COLOR = "color"
    BACKGROUND = "background"
    SCRIPT = "script"
    LINK = "link"
    IMAGE = "image"

    @classmethod
    def lookup(cls, keyword: str) -> FormatKind | None:
        """Return the kind registered under ``keyword`` if any."""
        try:
            return cls(keyword)
        except ValueError:
            return None


# Keywords whose format only depends on the attribute being set.
_FLAG_TAGS: dict[FormatKind, str] = {
    FormatKind.BLOCKQUOTE: "blockquote",
    FormatKind.CODE_BLOCK: "pre",
    FormatKind.BOLD: "strong",
    FormatKind.ITALIC: "em",
    FormatKind.UNDERLINE: "u",
    FormatKind.STRIKE: "s",
}

# Attributes read by another format rather than rendered on their own.
AUXILIARY_ATTRIBUTES = frozenset({"alt"})

_BLOCK_KINDS = frozenset(
    {
        FormatKind.TEXT,
        FormatKind.HEADER,
        FormatKind.LIST,
        FormatKind.BLOCKQUOTE,
        FormatKind.CODE_BLOCK,
        FormatKind.ALIGN,
        FormatKind.INDENT,
    }
)


@dataclass(frozen=True)
class BuiltinFormatter(Formatter):
    """Formatter for every keyword of the built-in catalog."""

    kind: FormatKind
    value: str = ""
    alt: str = ""

    @classmethod
    def for_op(cls, kind: FormatKind, op: Op) -> BuiltinFormatter:
        """Capture what the format needs from ``op`` at resolution time."""
        match kind:
            case FormatKind.TEXT:
                return cls(kind)
            case FormatKind.IMAGE:
                return cls(kind, value=op.data, alt=op.attrs.get("alt", ""))
            case _:
                return cls(kind, value=op.attrs.get(kind.value, ""))

    @property
    def writes_body(self) -> bool:  # type: ignore[override]
        return self.kind is FormatKind.IMAGE

    @property
    def wraps(self) -> bool:  # type: ignore[override]
        return self.kind in (FormatKind.LIST, FormatKind.LINK)

    @property
    def list_tag(self) -> str:
        return "ul" if self.value == "bullet" else "ol"

    def describe(self) -> Format | None:
        block = self.kind in _BLOCK_KINDS
        match self.kind:
            case FormatKind.TEXT:
                return Format("p", FormatPlace.TAG, block=block)
            case FormatKind.HEADER:
                return Format(f"h{self.value}", FormatPlace.TAG, block=block)
            case FormatKind.LIST:
                return Format("li", FormatPlace.TAG, block=block)
            case FormatKind.ALIGN:
                return Format(f"align-{self.value}", FormatPlace.CLASS, block=block)
            case FormatKind.INDENT:
                return Format(f"indent-{self.value}", FormatPlace.CLASS, block=block)
            case FormatKind.SIZE:
                return Format(f"ql-size-{self.value}", FormatPlace.CLASS)
            case FormatKind.COLOR:
                return Format(f"color:{self.value};", FormatPlace.STYLE)
            case FormatKind.BACKGROUND:
                return Format(f"background-color:{self.value};", FormatPlace.STYLE)
            case FormatKind.SCRIPT:
                return Format("sup" if self.value == "super" else "sub", FormatPlace.TAG)
            case FormatKind.LINK:
                # Only a wrapper; nothing is printed through the tag stack.
                return Format("", FormatPlace.TAG)
            case FormatKind.IMAGE:
                return None
            case _:
                return Format(_FLAG_TAGS[self.kind], FormatPlace.TAG, block=block)

    def applies_to(self, op: Op) -> bool:
        match self.kind:
            case FormatKind.TEXT:
                return op.type == "text"
            case FormatKind.LIST:
                return op.has_attr("list")
            case FormatKind.LINK:
                return False
            case FormatKind.IMAGE:
                return op.type == "image" and op.data == self.value
            case kind if kind in _FLAG_TAGS:
                return op.has_attr(kind.value)
            case _:
                return op.attrs.get(self.kind.value, "") == self.value

    def write(self, buffer: TextSink) -> None:
        if self.kind is not FormatKind.IMAGE:
            super().write(buffer)
            return
        buffer.write(f"<img src={quote_attr(self.value)}")
        if self.alt:
            buffer.write(f" alt={quote_attr(self.alt)}")
        buffer.write(">")

    def wrap(self) -> tuple[str, str]:
        match self.kind:
            case FormatKind.LIST:
                return f"<{self.list_tag}>", f"</{self.list_tag}>"
            case FormatKind.LINK:
                return f'<a href={quote_attr(self.value)} target="_blank">', "</a>"
            case _:
                return super().wrap()

    def should_open(self, open_formats: Sequence[Format], op: Op) -> bool:
        # A run of items of the same kind shares one container, and a run of
        # text with the same href shares one anchor.
        opening, _ = self.wrap()
        return not any(fm.wrapper and fm.wrap_open == opening for fm in open_formats)

    def should_close(self, open_formats: Sequence[Format], op: Op, block: bool) -> bool:
        match self.kind:
            case FormatKind.LIST:
                if not block:
                    return False
                # Nested lists are not tracked by indent: only the item kind counts.
                item = op.attrs.get("list", "")
                if not item:
                    return True
                return (item == "ordered" and self.list_tag != "ol") or (
                    item == "bullet" and self.list_tag != "ul"
                )
            case FormatKind.LINK:
                return op.attrs.get("link", "") != self.value
            case _:
                return super().should_close(open_formats, op, block)


def bind_format(formatter: Formatter) -> Format | None:
    """Describe ``formatter`` and attach it, with its wraps, to the result."""
    fm = formatter.describe()
    if fm is None:
        return None
    fm.source = formatter
    if formatter.wraps:
        fm.wrapper = True
        fm.wrap_open, fm.wrap_close = formatter.wrap()
    return fm


def quote_attr(value: str) -> str:
    """Return ``value`` as a double-quoted, escaped HTML attribute value."""
    return f'"{html.escape(value, quote=True)}"'


def catalog() -> list[dict[str, str]]:
    """Return a serialisable description of the built-in catalog."""
    sample: dict[FormatKind, str] = {
        FormatKind.HEADER: "1",
        FormatKind.LIST: "bullet",
        FormatKind.ALIGN: "center",
        FormatKind.INDENT: "1",
        FormatKind.SIZE: "large",
        FormatKind.COLOR: "#e60000",
        FormatKind.BACKGROUND: "#ffff00",
        FormatKind.SCRIPT: "super",
        FormatKind.LINK: "https://example.com",
        FormatKind.IMAGE: "image.png",
    }
    entries: list[dict[str, str]] = []
    for kind in FormatKind:
        formatter = BuiltinFormatter(kind, value=sample.get(kind, ""))
        described = formatter.describe()
        if formatter.writes_body:
            place, rendering = "body", "<img>"
        elif formatter.wraps:
            opening, closing = formatter.wrap()
            place = "wrapper"
            rendering = f"{opening}…{closing}"
            if described is not None and described.value:
                rendering = f"{rendering} + <{described.value}>"
        elif described is None:
            place, rendering = "none", ""
        else:
            place = described.place.name.lower()
            if described.block and described.place is not FormatPlace.TAG:
                rendering = f"{place}={quote_attr(described.value)} on the block tag"
            else:
                rendering = described.opening()
        entries.append(
            {
                "keyword": kind.value,
                "place": place,
                "block": "yes" if kind in _BLOCK_KINDS else "no",
                "rendering": rendering,
            }
        )
    return entries


__all__ = [
    "AUXILIARY_ATTRIBUTES",
    "BuiltinFormatter",
    "Format",
    "FormatKind",
    "FormatPlace",
    "Formatter",
    "TextSink",
    "bind_format",
    "catalog",
    "quote_attr",
]
