"""Structural Markdown events for Rough.

A parsed Markdown document is represented as a flat, document-ordered stream
of events: a start tag, the events nested inside it, and a matching end tag.
Leaf content (text runs, inline code, raw HTML, breaks and rules) is carried
by single events.

Key types:
- EventKind: What an event is (start, end, text, ...).
- TagKind: The kind of element a start/end event opens or closes.
- Tag: A tag kind plus its attributes (heading level, image URL, ...).
- Event: One immutable unit of the stream.

Image alt text is not an attribute: it is the text events that appear
between an image's start and end events.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class EventKind(Enum):
    """Kinds of structural events."""

    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    FOOTNOTE_REFERENCE = "footnote_reference"


class TagKind(Enum):
    """Kinds of elements that are opened and closed by start/end events."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCK_QUOTE = "block_quote"
    CODE_BLOCK = "code_block"
    LIST = "list"
    ITEM = "item"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_BODY = "table_body"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    FOOTNOTES = "footnotes"
    FOOTNOTE_DEFINITION = "footnote_definition"


@dataclass(frozen=True)
class Tag:
    """An element kind and its attributes.

    Attributes are stored in a read-only mapping, so tags (and the events
    that carry them) are hashable values.

    Attributes:
        kind: The element kind.
        attrs: Kind-specific attributes, e.g. ``level`` for headings,
            ``url`` and ``title`` for links and images.
    """

    kind: TagKind
    attrs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))

    def __hash__(self) -> int:
        return hash((self.kind, frozenset(self.attrs.items())))

    def get(self, name: str, default: Any = None) -> Any:
        """Return an attribute value, or ``default`` when it is unset."""
        return self.attrs.get(name, default)


@dataclass(frozen=True)
class Event:
    """A single structural event.

    Attributes:
        kind: The event kind.
        tag: The tag for START/END events, None otherwise.
        text: Payload for TEXT, CODE, HTML and FOOTNOTE_REFERENCE events.
    """

    kind: EventKind
    tag: Tag | None = None
    text: str = ""

    def is_start(self, kind: TagKind) -> bool:
        """Check whether this event opens an element of ``kind``."""
        return self.kind is EventKind.START and self.tag is not None and self.tag.kind is kind

    def is_end(self, kind: TagKind) -> bool:
        """Check whether this event closes an element of ``kind``."""
        return self.kind is EventKind.END and self.tag is not None and self.tag.kind is kind


def start(kind: TagKind, **attrs: Any) -> Event:
    """Build a start event for a new tag."""
    return Event(EventKind.START, Tag(kind, attrs))


def end(kind: TagKind, **attrs: Any) -> Event:
    """Build an end event for a new tag."""
    return Event(EventKind.END, Tag(kind, attrs))


def text(value: str) -> Event:
    return Event(EventKind.TEXT, text=value)


def code(value: str) -> Event:
    return Event(EventKind.CODE, text=value)


def html(value: str) -> Event:
    return Event(EventKind.HTML, text=value)


def soft_break() -> Event:
    return Event(EventKind.SOFT_BREAK)


def hard_break() -> Event:
    return Event(EventKind.HARD_BREAK)


def rule() -> Event:
    return Event(EventKind.RULE)


def footnote_reference(key: str, index: int) -> Event:
    """Build a reference to the footnote ``key``, numbered ``index``."""
    return Event(EventKind.FOOTNOTE_REFERENCE, Tag(TagKind.FOOTNOTE_DEFINITION, {"index": index}), key)
