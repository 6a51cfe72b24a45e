"""Template rendering engine for Rough.

This module uses Jinja2 to render the site's page templates. Templates live
at the top level of the site source directory (``project.html``,
``index.html`` and anything they include or extend).

Key class:
- TemplateEngine: Loads templates and renders them to strings or files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

logger = logging.getLogger(__name__)

__all__ = ["TemplateEngine"]


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Autoescaping is off: page bodies are already HTML, and templates decide
    for themselves what to escape.

    Attributes:
        source_dir: Directory containing templates.
        env: Jinja2 environment.
    """

    def __init__(self, source_dir: Path):
        """Initialize the template engine.

        Args:
            source_dir: Directory with templates.
        """
        self.source_dir = source_dir
        self.env = Environment(
            loader=FileSystemLoader(str(source_dir)),
            autoescape=False,
            enable_async=False,
        )

    def render(self, name: str, context: dict[str, Any]) -> str:
        """Render a named template.

        Args:
            name: Template name relative to the source directory.
            context: Variables to make available in the template.

        Returns:
            Rendered string.

        Raises:
            jinja2.TemplateNotFound: If no such template exists.
        """
        return self.env.get_template(name).render(**context)

    def render_to(self, name: str, target: Path, context: dict[str, Any]) -> None:
        """Render a named template and write it to ``target``.

        Parent directories of ``target`` are created as needed.

        Args:
            name: Template name relative to the source directory.
            target: File to write.
            context: Variables to make available in the template.
        """
        rendered = self.render(name, context)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(rendered)
        logger.debug("Wrote %s", target)

