"""Watch mode for Rough.

Builds the site once, then watches the source directory and rebuilds on every
change. Build failures are reported and watching continues, so a typo in a
template does not end the session.

Key classes:
- SiteWatcher: Owns the observer and performs debounced, coalesced rebuilds.
- _ChangeHandler: File system event handler for triggering rebuilds.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import BuildError, BuildResult, build_site

logger = logging.getLogger(__name__)


class SiteWatcher:
    """Rebuilds a site whenever its source changes.

    Attributes:
        source_dir: Site source directory being watched.
        output_dir: Directory the site is built into.
        report: Callable receiving one-line status messages.
    """

    def __init__(
        self,
        source_dir: Path,
        output_dir: Path,
        report: Callable[[str], None] = print,
        debounce_seconds: float = 0.2,
    ):
        self.source_dir = source_dir
        self.output_dir = output_dir
        self.report = report
        self._observer: Observer | None = None
        self._rebuilding = False
        self._last_rebuild_at = 0.0
        self._debounce_seconds = debounce_seconds
        self._pending = False
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def start(self) -> None:  # pragma: no cover - integration path
        """Build once, then block watching for changes until interrupted."""
        self.build()
        self._start_observer()
        self.report(f"Watching {self.source_dir} for changes (Ctrl-C to stop)")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def _start_observer(self) -> None:
        observer = Observer()
        observer.schedule(_ChangeHandler(self), str(self.source_dir), recursive=True)
        observer.start()
        self._observer = observer

    def build(self) -> BuildResult | None:
        """Build the site, reporting instead of raising build errors."""
        try:
            result = build_site(self.source_dir, self.output_dir)
        except BuildError as exc:
            self.report(f"Build failed: {exc.source_path}: {exc.message}")
            return None
        self.report(f"Built {len(result.projects)} projects into {result.output_dir}")
        return result

    def rebuild(self) -> None:
        """Rebuild after a change.

        Changes that arrive while a build is running, or within the debounce
        window after one, are coalesced into a single follow-up rebuild.
        """
        with self._lock:
            if self._rebuilding:
                self._pending = True
                return
            remaining = self._debounce_seconds - (time.time() - self._last_rebuild_at)
            if remaining > 0:
                self._schedule(remaining)
                return
            self._rebuilding = True
        self._run()

    def _run(self) -> None:
        try:
            self.report("Change detected; rebuilding...")
            self.build()
        finally:
            with self._lock:
                self._rebuilding = False
                self._last_rebuild_at = time.time()
                if self._pending:
                    self._pending = False
                    self._schedule(self._debounce_seconds)

    def _schedule(self, delay: float) -> None:
        # Caller holds self._lock.
        if self._timer is not None:
            return
        timer = threading.Timer(delay, self._flush)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _flush(self) -> None:
        with self._lock:
            self._timer = None
            if self._rebuilding:
                self._pending = True
                return
            self._rebuilding = True
        self._run()


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, watcher: SiteWatcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = Path(event.src_path)
        # Output may live inside the source tree; ignore our own writes.
        try:
            path.resolve().relative_to(self.watcher.output_dir.resolve())
            return
        except ValueError:
            pass
        logger.debug("Change in %s", path)
        self.watcher.rebuild()
