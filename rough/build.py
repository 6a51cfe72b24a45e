"""Site building functionality for Rough.

This module contains the core logic for building a static site from a source
directory. It loads configuration, copies static files, renders every project
document through the project template, and renders the site index.

Key functions:
- build_site: Main function to build the entire site.
- load_config: Loads site configuration from rough.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateNotFound, TemplateSyntaxError

from .content import Project, ProjectLoader
from .frontmatter import FrontMatterError
from .markdown_parser import DEFAULT_PLUGINS, MarkdownParser
from .protocols import TemplateRenderer
from .templates import TemplateEngine
from .utils import copy_dir_all

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


CONFIG_FILENAME = "rough.yaml"

DEFAULT_CONFIG = {
    "static_dir": "static",
    "projects_dir": "projects",
    "project_template": "project.html",
    "index_template": "index.html",
    "markdown_plugins": list(DEFAULT_PLUGINS),
}


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        projects: All rendered projects, in build order.
        output_dir: Directory where the site was built.
    """

    projects: list[Project]
    output_dir: Path


def load_config(source_dir: Path) -> dict[str, Any]:
    """Load site configuration from rough.yaml.

    Args:
        source_dir: Site source directory.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = source_dir / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
            else:
                logger.warning("Ignoring %s: expected a mapping", config_path)
    return config


def build_site(source_dir: Path, output_dir: Path) -> BuildResult:
    """Build the entire static site.

    Args:
        source_dir: Site source directory holding templates, ``static/`` and
            ``projects/``.
        output_dir: Directory to write the compiled site to.

    Returns:
        BuildResult containing all projects and the output directory.

    Raises:
        BuildError: If a project or template fails to render.
    """
    config = load_config(source_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    static_dir = source_dir / config["static_dir"]
    if static_dir.is_dir():
        copy_dir_all(static_dir, output_dir / config["static_dir"])
    else:
        logger.info("No static directory at %s; skipping copy", static_dir)

    engine = TemplateEngine(source_dir)
    projects_folder = config["projects_dir"]
    loader = ProjectLoader(
        source_dir / projects_folder,
        MarkdownParser(config["markdown_plugins"]),
        url_prefix=projects_folder,
    )
    projects = _render_projects(engine, loader, output_dir / projects_folder, config)

    index_template = config["index_template"]
    context = {"projects": [project.index_entry() for project in projects]}
    _render(engine, index_template, output_dir / "index.html", context, source_dir / index_template)
    logger.info("Built %d projects into %s", len(projects), output_dir)
    return BuildResult(projects=projects, output_dir=output_dir)


def _render_projects(
    engine: TemplateRenderer,
    loader: ProjectLoader,
    target_dir: Path,
    config: dict[str, Any],
) -> list[Project]:
    """Render every project document to its own page.

    Args:
        engine: Renderer holding the project template.
        loader: Loader for the project documents.
        target_dir: Directory the project pages are written to.
        config: Site configuration.

    Returns:
        The rendered projects.
    """
    projects: list[Project] = []
    for path in loader.iter_files():
        try:
            project = loader.load(path)
        except FrontMatterError as exc:
            raise BuildError(path, str(exc), exc) from exc
        except Exception as exc:
            raise BuildError(path, _format_error_message(exc), exc) from exc
        _render(
            engine,
            config["project_template"],
            target_dir / project.output_name,
            project.context(),
            path,
        )
        projects.append(project)
    return projects


def _render(
    engine: TemplateRenderer,
    name: str,
    target: Path,
    context: dict[str, Any],
    source_path: Path,
) -> None:
    """Render a template to a file, wrapping failures in BuildError."""
    try:
        engine.render_to(name, target, context)
    except TemplateSyntaxError as exc:
        raise BuildError(
            source_path,
            f"Template syntax error on line {exc.lineno}: {exc.message}",
            exc,
        ) from exc
    except TemplateNotFound as exc:
        raise BuildError(source_path, f"Template not found: {exc.name}", exc) from exc
    except Exception as exc:
        raise BuildError(source_path, _format_error_message(exc), exc) from exc


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "MalformedEventStreamError":
        return f"Malformed Markdown event stream: {error_msg}"
    if isinstance(exc, OSError):
        return f"File error: {error_msg}"

    return f"{error_type}: {error_msg}"
