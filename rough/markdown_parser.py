"""Markdown parsing into structural events.

Mistune does the actual Markdown parsing; this module flattens the AST it
produces into the start/content/end event stream the rest of the pipeline
consumes.

Key items:
- MarkdownParser: Configured mistune parser producing event streams.
- iter_events: Lazily flattens mistune AST tokens into events.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

import mistune

from . import events as ev
from .events import Event, TagKind

DEFAULT_PLUGINS = ("strikethrough", "footnotes", "table", "url")

# Mistune token types that map directly onto a container tag.
_CONTAINER_TAGS = {
    "paragraph": TagKind.PARAGRAPH,
    "block_quote": TagKind.BLOCK_QUOTE,
    "list_item": TagKind.ITEM,
    "emphasis": TagKind.EMPHASIS,
    "strong": TagKind.STRONG,
    "strikethrough": TagKind.STRIKETHROUGH,
    "table": TagKind.TABLE,
    "table_head": TagKind.TABLE_HEAD,
    "table_body": TagKind.TABLE_BODY,
    "table_row": TagKind.TABLE_ROW,
    "footnotes": TagKind.FOOTNOTES,
}

_LEAF_EVENTS = {
    "text": ev.text,
    "codespan": ev.code,
    "inline_html": ev.html,
    "block_html": ev.html,
}


class MarkdownParser:
    """Parses Markdown into a stream of structural events.

    Attributes:
        plugins: Names of the mistune plugins enabled for parsing.
    """

    def __init__(self, plugins: Sequence[str] = DEFAULT_PLUGINS):
        """Create a parser.

        Args:
            plugins: Mistune plugin names to enable.
        """
        self.plugins = tuple(plugins)
        self._markdown = mistune.create_markdown(renderer="ast", plugins=list(self.plugins))

    def parse(self, text: str) -> Iterator[Event]:
        """Parse Markdown source.

        Args:
            text: Markdown source.

        Returns:
            Iterator over the document's events, in document order.
        """
        tokens = self._markdown(text)
        return iter_events(tokens)


def _tag_for(token: dict[str, Any]) -> ev.Tag | None:
    """Build the tag for a container token, or None if it is not one."""
    kind = token["type"]
    attrs = token.get("attrs", {})
    if kind in _CONTAINER_TAGS:
        return ev.Tag(_CONTAINER_TAGS[kind])
    if kind == "heading":
        return ev.Tag(TagKind.HEADING, {"level": attrs.get("level", 1)})
    if kind == "list":
        return ev.Tag(
            TagKind.LIST,
            {"ordered": bool(attrs.get("ordered")), "start": attrs.get("start", 1)},
        )
    if kind in ("link", "image"):
        tag_kind = TagKind.LINK if kind == "link" else TagKind.IMAGE
        return ev.Tag(tag_kind, {"url": attrs.get("url", ""), "title": attrs.get("title") or ""})
    if kind == "table_cell":
        return ev.Tag(
            TagKind.TABLE_CELL,
            {"align": attrs.get("align"), "head": bool(attrs.get("head"))},
        )
    if kind == "footnote_item":
        return ev.Tag(
            TagKind.FOOTNOTE_DEFINITION,
            {"key": attrs.get("key", ""), "index": attrs.get("index", 0)},
        )
    return None


def iter_events(tokens: Iterable[dict[str, Any]]) -> Iterator[Event]:
    """Flatten mistune AST tokens into structural events.

    Args:
        tokens: Tokens as returned by a mistune parser in AST mode.

    Yields:
        Events in document order. Every start event is followed, after its
        children, by an end event carrying the same tag.
    """
    for token in tokens:
        kind = token["type"]
        if kind == "blank_line":
            continue
        if kind in _LEAF_EVENTS:
            yield _LEAF_EVENTS[kind](token.get("raw", ""))
        elif kind == "softbreak":
            yield ev.soft_break()
        elif kind == "linebreak":
            yield ev.hard_break()
        elif kind == "thematic_break":
            yield ev.rule()
        elif kind == "footnote_ref":
            attrs = token.get("attrs", {})
            yield ev.footnote_reference(token.get("raw", ""), attrs.get("index", 0))
        elif kind == "block_code":
            tag = ev.Tag(TagKind.CODE_BLOCK, {"info": token.get("attrs", {}).get("info") or ""})
            yield Event(ev.EventKind.START, tag)
            yield ev.text(token.get("raw", ""))
            yield Event(ev.EventKind.END, tag)
        elif kind == "block_text":
            # Tight list items hold their inline content without a paragraph.
            yield from iter_events(token.get("children", []))
        else:
            tag = _tag_for(token)
            children = token.get("children")
            if tag is None:
                if children is not None:
                    yield from iter_events(children)
                elif token.get("raw"):
                    yield ev.text(token["raw"])
                continue
            yield Event(ev.EventKind.START, tag)
            yield from iter_events(children or [])
            yield Event(ev.EventKind.END, tag)
