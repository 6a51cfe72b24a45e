"""Command-line interface for Rough.

This module defines the CLI commands using Click framework.

Commands:
- build: Render a site source directory into an output directory.
- watch: Build, then rebuild whenever the source changes.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__

_SOURCE_DIR = click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path)
_OUTPUT_DIR = click.Path(file_okay=False, dir_okay=True, path_type=Path)


@click.group()
@click.version_option(version=__version__, prog_name="rough")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Render a Rough site."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("src", type=_SOURCE_DIR)
@click.argument("out", type=_OUTPUT_DIR)
def build(src: Path, out: Path):
    """Render the site in SRC into OUT."""
    from .build import BuildError, build_site

    try:
        result = build_site(src, out)
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {_display_path(exc.source_path, src)}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.projects)} projects into {result.output_dir}")


@cli.command()
@click.argument("src", type=_SOURCE_DIR)
@click.argument("out", type=_OUTPUT_DIR)
def watch(src: Path, out: Path):
    """Render the site in SRC into OUT and rebuild on changes."""
    from .watch import SiteWatcher

    SiteWatcher(src, out, report=click.echo).start()


def _display_path(path: Path, root: Path) -> Path:
    """Return ``path`` relative to ``root`` when it lies inside it."""
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def main():
    """Entry point for the CLI application."""
    cli()
