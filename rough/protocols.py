"""Protocol definitions for Rough.

These protocols describe the seams between the document pipeline and its
collaborators, so any compliant producer or consumer can be plugged in.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .events import Event


@runtime_checkable
class EventSource(Protocol):
    """Protocol for pull-based producers of structural events.

    A source yields the next event on each ``next()`` call and raises
    StopIteration once the stream is exhausted. Sources are single-pass.
    """

    def __iter__(self) -> EventSource: ...

    @abstractmethod
    def __next__(self) -> Event:
        """Pull the next event.

        Raises:
            StopIteration: When the stream has ended.
        """
        ...


@runtime_checkable
class EventParser(Protocol):
    """Protocol for turning Markdown text into an event stream."""

    @abstractmethod
    def parse(self, text: str) -> Iterable[Event]:
        """Parse Markdown source into structural events.

        Args:
            text: Markdown source.

        Returns:
            A well-formed, document-ordered event stream.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for rendering named templates to files."""

    @abstractmethod
    def render(self, name: str, context: dict[str, Any]) -> str:
        """Render the template ``name`` with ``context``."""
        ...

    @abstractmethod
    def render_to(self, name: str, target: Path, context: dict[str, Any]) -> None:
        """Render the template ``name`` and write the result to ``target``."""
        ...
