"""Front matter splitting for Rough documents.

A document may start with a YAML block fenced by ``---`` lines::

    ---
    title: Hello
    ---
    Markdown body...

The splitter is a three-state machine driven one line at a time. It never
fails: anything that does not look like front matter is body text, and YAML
validation happens later in ``parse_document``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, NamedTuple

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


class FrontMatterError(ValueError):
    """Raised when a document's front matter is not a valid YAML mapping."""


class State(Enum):
    """Splitter states."""

    START = "start"  # front matter not opened yet
    HEAD = "head"  # inside the front matter block
    BODY = "body"  # front matter closed, or there was none


class LineClass(Enum):
    DELIMITER = "delimiter"
    BLANK = "blank"
    OTHER = "other"


class Section(Enum):
    HEAD = "head"
    BODY = "body"


# (state, line class) -> (next state, section receiving the line or None)
TRANSITIONS: dict[tuple[State, LineClass], tuple[State, Section | None]] = {
    (State.START, LineClass.DELIMITER): (State.HEAD, None),
    (State.START, LineClass.BLANK): (State.START, None),
    (State.START, LineClass.OTHER): (State.BODY, Section.BODY),
    (State.HEAD, LineClass.DELIMITER): (State.BODY, None),
    (State.HEAD, LineClass.BLANK): (State.HEAD, Section.HEAD),
    (State.HEAD, LineClass.OTHER): (State.HEAD, Section.HEAD),
    (State.BODY, LineClass.DELIMITER): (State.BODY, Section.BODY),
    (State.BODY, LineClass.BLANK): (State.BODY, Section.BODY),
    (State.BODY, LineClass.OTHER): (State.BODY, Section.BODY),
}


class DocumentSplit(NamedTuple):
    """Front matter text and Markdown body of one document."""

    front_matter: str
    body: str


def classify(line: str) -> LineClass:
    """Classify a line for the transition table, ignoring surrounding whitespace."""
    stripped = line.strip()
    if stripped == DELIMITER:
        return LineClass.DELIMITER
    if not stripped:
        return LineClass.BLANK
    return LineClass.OTHER


def iter_lines(text: str) -> list[str]:
    """Split text into lines without terminators.

    Splits on ``\\n`` only and drops the ``\\r`` of a ``\\r\\n`` pair, so CRLF
    and LF input give the same lines. A newline at the very end does not
    start a new line.
    """
    lines = text.split("\n")
    last = lines.pop()
    # Only a \r followed by \n ends a line; a bare trailing \r is content.
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    if last:
        lines.append(last)
    return lines


def split(text: str) -> DocumentSplit:
    """Separate a document into front matter text and body text.

    Args:
        text: Raw document text.

    Returns:
        DocumentSplit whose ``front_matter`` is empty when the document has
        none. Both parts are rebuilt with ``\\n`` after every line.
    """
    state = State.START
    sections: dict[Section, list[str]] = {Section.HEAD: [], Section.BODY: []}
    for line in iter_lines(text):
        state, target = TRANSITIONS[(state, classify(line))]
        if target is not None:
            sections[target].append(line + "\n")
    if state is State.HEAD:
        logger.debug("Front matter block was never closed; treating it all as front matter")
    return DocumentSplit("".join(sections[Section.HEAD]), "".join(sections[Section.BODY]))


def parse_document(text: str) -> tuple[dict[str, Any], str]:
    """Split a document and load its front matter as YAML.

    Args:
        text: Raw document text.

    Returns:
        Tuple of (metadata mapping, Markdown body). Documents without front
        matter get an empty mapping.

    Raises:
        FrontMatterError: If the front matter is not valid YAML or is not a
            mapping.
    """
    front_matter, body = split(text)
    try:
        metadata = yaml.safe_load(front_matter)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid YAML front matter: {exc}") from exc
    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        raise FrontMatterError(
            f"Front matter must be a mapping, got {type(metadata).__name__}"
        )
    return metadata, body
