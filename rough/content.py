"""Project content processing for Rough.

This module loads project documents (Markdown with YAML front matter) and
renders them to HTML through the document pipeline:

    raw text -> split front matter -> parse Markdown into events
             -> unwrap lone images -> serialize to HTML

Key items:
- Project: Dataclass holding a rendered project and its metadata.
- render_markdown: Runs a Markdown body through the event pipeline.
- ProjectLoader: Discovers and loads the project documents of a site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .frontmatter import parse_document
from .html_writer import Heading, HtmlWriter
from .inline_images import InlineImages
from .markdown_parser import MarkdownParser
from .protocols import EventParser
from .utils import output_name, slugify

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """A rendered project document.

    Attributes:
        meta: Front matter metadata.
        content: Rendered HTML body.
        path: Path to the source file.
        slug: URL-friendly slug derived from the file name.
        output_name: File name of the rendered page.
        url: Site-relative URL of the rendered page.
        toc: Headings of the body, for a table of contents.
    """

    meta: dict[str, Any]
    content: str
    path: Path
    slug: str
    output_name: str
    url: str
    toc: list[Heading] = field(default_factory=list)

    def context(self) -> dict[str, Any]:
        """Return the template context for this project's page."""
        return {
            "meta": self.meta,
            "content": self.content,
            "toc": self.toc,
            "url": self.url,
        }

    def index_entry(self) -> dict[str, Any]:
        """Return this project's entry in the index listing.

        The entry is the front matter with ``url`` and ``slug`` added, unless
        the front matter already sets them.
        """
        entry = dict(self.meta)
        entry.setdefault("url", self.url)
        entry.setdefault("slug", self.slug)
        return entry


def render_markdown(
    body: str, parser: EventParser | None = None
) -> tuple[str, list[Heading]]:
    """Render a Markdown body to HTML.

    Args:
        body: Markdown source, without front matter.
        parser: Optional event parser; defaults to MarkdownParser().

    Returns:
        Tuple of (rendered HTML, list of headings).

    Raises:
        MalformedEventStreamError: If the parser produced a truncated stream.
    """
    parser = parser or MarkdownParser()
    writer = HtmlWriter()
    html = writer.write(InlineImages(parser.parse(body)))
    return html, writer.headings


class ProjectLoader:
    """Loads project documents from a directory.

    Attributes:
        projects_dir: Directory holding the project documents.
        parser: Parser used for Markdown bodies.
        url_prefix: Folder name the rendered pages are written under.
    """

    def __init__(
        self,
        projects_dir: Path,
        parser: EventParser | None = None,
        url_prefix: str = "projects",
    ):
        self.projects_dir = projects_dir
        self.parser = parser or MarkdownParser()
        self.url_prefix = url_prefix

    def iter_files(self) -> list[Path]:
        """List the project documents, sorted by file name.

        Only regular files directly inside the directory are included;
        hidden files are skipped.
        """
        if not self.projects_dir.is_dir():
            logger.info("No projects directory at %s", self.projects_dir)
            return []
        return sorted(
            path
            for path in self.projects_dir.iterdir()
            if path.is_file() and not path.name.startswith(".")
        )

    def load(self, path: Path) -> Project:
        """Load and render one project document.

        Args:
            path: Path to the document.

        Returns:
            The rendered Project.

        Raises:
            FrontMatterError: If the front matter is invalid.
            MalformedEventStreamError: If Markdown parsing produced a
                truncated event stream.
        """
        logger.debug("Rendering project %s", path)
        metadata, body = parse_document(path.read_text(encoding="utf-8"))
        content, toc = render_markdown(body, self.parser)
        name = output_name(path)
        return Project(
            meta=metadata,
            content=content,
            path=path,
            slug=slugify(path.stem),
            output_name=name,
            url=f"/{self.url_prefix}/{name}" if self.url_prefix else f"/{name}",
            toc=toc,
        )

    def load_all(self) -> list[Project]:
        """Load every project document in the directory."""
        return [self.load(path) for path in self.iter_files()]
