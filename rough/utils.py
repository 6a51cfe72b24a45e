"""Utility functions for Rough.

Key functions:
    slugify: Convert file names to URL slugs.
    output_name: Name of the rendered page for a source document.
    copy_dir_all: Recursively copy a directory.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path


def slugify(name: str) -> str:
    """Convert a file name stem to a URL-friendly slug.

    Args:
        name: Filename stem.

    Returns:
        Lower-case slug, or "index" when nothing usable is left.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def output_name(path: Path) -> str:
    """Return the rendered page name for a source document.

    The last extension is replaced with ``.html``; files without an
    extension gain one.

    Examples:
        >>> output_name(Path("post.md"))
        'post.html'

        >>> output_name(Path("notes"))
        'notes.html'
    """
    return Path(path.name).with_suffix(".html").name


def copy_dir_all(source: Path, target: Path) -> None:
    """Copy a directory tree, merging into ``target`` if it already exists.

    Args:
        source: Directory to copy.
        target: Destination directory.
    """
    target.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        if entry.is_dir():
            copy_dir_all(entry, target / entry.name)
        else:
            shutil.copy2(entry, target / entry.name)
