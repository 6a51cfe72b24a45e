"""HTML serialization of structural event streams.

Key class:
- HtmlWriter: Consumes an event stream and produces HTML, collecting headings
  for a table of contents along the way.

The markup mirrors mistune's HTML renderer so swapping the event pipeline in
for mistune's own renderer does not change page output beyond the pipeline's
transformations.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from markupsafe import escape
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .events import Event, EventKind, Tag, TagKind

_SIMPLE_TAGS = {
    TagKind.PARAGRAPH: ("<p>", "</p>\n"),
    TagKind.BLOCK_QUOTE: ("<blockquote>\n", "</blockquote>\n"),
    TagKind.ITEM: ("<li>", "</li>\n"),
    TagKind.EMPHASIS: ("<em>", "</em>"),
    TagKind.STRONG: ("<strong>", "</strong>"),
    TagKind.STRIKETHROUGH: ("<del>", "</del>"),
    TagKind.TABLE: ("<table>\n", "</table>\n"),
    TagKind.TABLE_HEAD: ("<thead>\n<tr>\n", "</tr>\n</thead>\n"),
    TagKind.TABLE_BODY: ("<tbody>\n", "</tbody>\n"),
    TagKind.TABLE_ROW: ("<tr>\n", "</tr>\n"),
    TagKind.FOOTNOTES: ('<section class="footnotes">\n<ol>\n', "</ol>\n</section>\n"),
}


@dataclass
class Heading:
    """Represents a heading extracted from markdown content for TOC generation.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


def generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


def _attr(value: object) -> str:
    return str(escape(str(value)))


class HtmlWriter:
    """Renders structural events to HTML.

    A writer instance renders one document; headings seen while writing are
    available afterwards in ``headings``.

    Attributes:
        headings: Headings in document order, with their anchor ids.
    """

    def __init__(self):
        self.headings: list[Heading] = []
        self._heading_id_counts: dict[str, int] = {}
        self._out: list[str] = []
        # Per open heading/image/code block: the plain text collected so far.
        self._captures: list[list[str]] = []
        self._image_depth = 0
        self._heading_start = 0
        self._in_code_block = False

    def write(self, events: Iterable[Event]) -> str:
        """Render a full event stream.

        Args:
            events: Well-formed structural events.

        Returns:
            The rendered HTML.
        """
        for event in events:
            self._handle(event)
        html = "".join(self._out)
        self._out = []
        return html

    def _handle(self, event: Event) -> None:
        if self._image_depth:
            self._handle_in_image(event)
            return
        kind = event.kind
        if kind is EventKind.START:
            self._start(event.tag)
        elif kind is EventKind.END:
            self._end(event.tag)
        elif kind is EventKind.TEXT:
            self._text(event.text)
            if not self._in_code_block:
                self._out.append(_attr(event.text))
        elif kind is EventKind.CODE:
            self._text(event.text)
            self._out.append(f"<code>{_attr(event.text)}</code>")
        elif kind is EventKind.HTML:
            self._out.append(event.text)
        elif kind is EventKind.SOFT_BREAK:
            self._text(" ")
            self._out.append("\n")
        elif kind is EventKind.HARD_BREAK:
            self._out.append("<br />\n")
        elif kind is EventKind.RULE:
            self._out.append("<hr />\n")
        elif kind is EventKind.FOOTNOTE_REFERENCE:
            index = event.tag.get("index") if event.tag else event.text
            self._out.append(
                f'<sup class="footnote-ref" id="fnref-{index}">'
                f'<a href="#fn-{index}">{index}</a></sup>'
            )

    def _handle_in_image(self, event: Event) -> None:
        """Collect alt text while inside an image; markup is dropped."""
        if event.is_start(TagKind.IMAGE):
            self._image_depth += 1
        elif event.is_end(TagKind.IMAGE):
            self._image_depth -= 1
            if not self._image_depth:
                self._close_image(event.tag)
        elif event.kind in (EventKind.TEXT, EventKind.CODE):
            self._text(event.text)
        elif event.kind in (EventKind.SOFT_BREAK, EventKind.HARD_BREAK):
            self._text(" ")

    def _text(self, value: str) -> None:
        for capture in self._captures:
            capture.append(value)

    def _start(self, tag: Tag) -> None:
        kind = tag.kind
        if kind in _SIMPLE_TAGS:
            self._out.append(_SIMPLE_TAGS[kind][0])
        elif kind is TagKind.HEADING:
            self._captures.append([])
            self._heading_start = len(self._out)
        elif kind is TagKind.CODE_BLOCK:
            self._captures.append([])
            self._in_code_block = True
        elif kind is TagKind.LIST:
            if tag.get("ordered"):
                start = tag.get("start", 1)
                self._out.append("<ol>\n" if start == 1 else f'<ol start="{start}">\n')
            else:
                self._out.append("<ul>\n")
        elif kind is TagKind.LINK:
            title = tag.get("title")
            title_attr = f' title="{_attr(title)}"' if title else ""
            self._out.append(f'<a href="{_attr(tag.get("url", ""))}"{title_attr}>')
        elif kind is TagKind.IMAGE:
            self._image_depth = 1
            self._captures.append([])
        elif kind is TagKind.TABLE_CELL:
            cell = "th" if tag.get("head") else "td"
            align = tag.get("align")
            style = f' style="text-align:{align}"' if align else ""
            self._out.append(f"<{cell}{style}>")
        elif kind is TagKind.FOOTNOTE_DEFINITION:
            self._out.append(f'<li id="fn-{tag.get("index")}">')

    def _end(self, tag: Tag) -> None:
        kind = tag.kind
        if kind in _SIMPLE_TAGS:
            self._out.append(_SIMPLE_TAGS[kind][1])
        elif kind is TagKind.HEADING:
            self._close_heading(tag)
        elif kind is TagKind.CODE_BLOCK:
            self._in_code_block = False
            code = "".join(self._captures.pop())
            self._out.append(self._render_code_block(code, tag.get("info") or ""))
        elif kind is TagKind.LIST:
            self._out.append("</ol>\n" if tag.get("ordered") else "</ul>\n")
        elif kind is TagKind.LINK:
            self._out.append("</a>")
        elif kind is TagKind.TABLE_CELL:
            cell = "th" if tag.get("head") else "td"
            self._out.append(f"</{cell}>\n")
        elif kind is TagKind.FOOTNOTE_DEFINITION:
            index = tag.get("index")
            self._out.append(f'<a href="#fnref-{index}" class="footnote">&#8617;</a></li>\n')

    def _close_heading(self, tag: Tag) -> None:
        level = tag.get("level", 1)
        heading_text = "".join(self._captures.pop()).strip()
        base_id = generate_heading_id(heading_text)
        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id
        self.headings.append(Heading(id=heading_id, text=heading_text, level=level))

        inner = "".join(self._out[self._heading_start :])
        del self._out[self._heading_start :]
        self._out.append(f'<h{level} id="{_attr(heading_id)}">{inner}</h{level}>\n')

    def _close_image(self, tag: Tag) -> None:
        alt = "".join(self._captures.pop())
        title = tag.get("title")
        title_attr = f' title="{_attr(title)}"' if title else ""
        self._out.append(
            f'<img src="{_attr(tag.get("url", ""))}" alt="{_attr(alt)}"{title_attr} />'
        )

    @staticmethod
    def _render_code_block(code: str, info: str) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Info string of the fence; its first word names the language.

        Returns:
            Highlighted HTML, or a plain ``pre`` block for unknown languages.
        """
        lang = info.split()[0] if info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        lang_class = f' class="language-{_attr(lang)}"' if lang else ""
        return f"<pre><code{lang_class}>{_attr(code)}</code></pre>\n"


def push_html(events: Iterable[Event]) -> str:
    """Render an event stream to HTML with a fresh writer."""
    return HtmlWriter().write(events)
