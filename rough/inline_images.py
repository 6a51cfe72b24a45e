"""Unwrapping of paragraphs that only hold an image.

Markdown puts a standalone image inside a paragraph, so ``![a](a.png)`` on
its own line renders as ``<p><img ...></p>``. InlineImages wraps any event
source and drops the paragraph start/end pair around such images, leaving
everything else untouched and in order.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from .events import Event, TagKind


class MalformedEventStreamError(RuntimeError):
    """Raised when the upstream stream ends with a paragraph or image still open."""


class InlineImages:
    """Event source that removes paragraph tags wrapping a single image.

    The wrapper can be used anywhere the wrapped source can. Events pulled
    from upstream but not yet handed downstream wait in a FIFO buffer; the
    buffer only fills while deciding whether a paragraph is a lone image.

    Attributes:
        events: The upstream event iterator.
    """

    def __init__(self, events: Iterable[Event]):
        """Wrap an event source.

        Args:
            events: Any iterable of well-formed structural events.
        """
        self.events = iter(events)
        self._buffer: deque[Event] = deque()

    def __iter__(self) -> InlineImages:
        return self

    def __next__(self) -> Event:
        if self._buffer:
            return self._buffer.popleft()
        event = next(self.events)
        if event.is_start(TagKind.PARAGRAPH):
            return self._on_paragraph_start(event)
        return event

    def _pull(self, message: str) -> Event:
        """Pull an event that must exist for the stream to be well formed."""
        try:
            return next(self.events)
        except StopIteration:
            raise MalformedEventStreamError(message) from None

    def _buffer_until_image_end(self) -> None:
        """Buffer upstream events up to and including the next image end."""
        while True:
            event = self._pull("event stream ended with unclosed image")
            self._buffer.append(event)
            if event.is_end(TagKind.IMAGE):
                return

    def _on_paragraph_start(self, paragraph: Event) -> Event:
        """Resolve a paragraph start and return the event to yield now.

        Leaves the rest of the paragraph's already-pulled events in the buffer.
        """
        event = self._pull("event stream ended with unclosed paragraph")
        if not event.is_start(TagKind.IMAGE):
            self._buffer.append(event)
            return paragraph

        self._buffer.append(event)
        self._buffer_until_image_end()
        following = self._pull("event stream ended with unclosed paragraph")
        if not following.is_end(TagKind.PARAGRAPH):
            # More than the image: put the paragraph back around it.
            self._buffer.appendleft(paragraph)
            self._buffer.append(following)
        return self._buffer.popleft()
