"""
OS change notifications for one tailed file.

A TailWatch ties a watchdog observer to a dedicated worker thread:

    inotify (observer thread) -> signal queue -> worker thread -> cycle()

The observer thread only enqueues a signal; all file I/O happens on the
worker, one cycle at a time, in arrival order. Keeping a single worker
per file means cursor updates for that file can never interleave.

Design Decisions:
    - Watch the parent directory and filter on the file's path, which
      works on every watchdog backend and also sees a file recreated
      in place after rotation
    - One observer per file so releasing one watch never disturbs the
      watches of other files sharing a directory
    - Signals that pile up while a cycle runs are coalesced: the next
      cycle reads everything appended since the cursor anyway
"""

import os
import threading
from pathlib import Path
from queue import Empty, SimpleQueue
from typing import Callable

from watchdog.events import FileSystemEventHandler

from ..errors import WatchRegistrationError

# Seconds to wait for the observer/worker threads at shutdown
_JOIN_TIMEOUT = 2.0

_STOP = object()


class ModifiedHandler(FileSystemEventHandler):
    """
    Forward modify/create events for one file to a callback.

    Attributes:
        target: Absolute path of the watched file.
        callback: Called with no arguments for every matching event.
    """

    def __init__(self, target: Path, callback: Callable[[], None]):
        super().__init__()
        self.target = os.fspath(target)
        self.callback = callback

    def _matches(self, path) -> bool:
        return os.fsdecode(path) == self.target

    def on_modified(self, event):
        if not event.is_directory and self._matches(event.src_path):
            self.callback()

    def on_created(self, event):
        # Same path recreated (rotation with create); the cursor detects
        # the shorter file and restarts from zero
        if not event.is_directory and self._matches(event.src_path):
            self.callback()

    def on_moved(self, event):
        # Atomic replace: another file renamed onto our path
        if not event.is_directory and self._matches(event.dest_path):
            self.callback()


class TailWatch:
    """
    Owns the OS watch and the worker thread for one file.

    Attributes:
        path: File being watched.
        cycle: Poll routine run on the worker thread for each signal.
        logger: Optional SessionLogger for worker failures.

    Example:
        >>> watch = TailWatch(Path("app.log"), tailer_cycle, Observer)
        >>> watch.start()   # first cycle runs immediately
        >>> ...
        >>> watch.stop()    # unschedules the watch, joins both threads
    """

    def __init__(self, path: Path, cycle: Callable[[], None], observer_factory, logger=None):
        self.path = Path(path)
        self.cycle = cycle
        self.logger = logger
        self._observer_factory = observer_factory
        self._observer = None
        self._signals: SimpleQueue = SimpleQueue()
        self._worker = None

    def signal(self) -> None:
        """Queue one poll cycle (called from the observer thread)."""
        self._signals.put(True)

    def start(self) -> None:
        """
        Register the OS watch, start the worker and queue a first cycle.

        Raises:
            WatchRegistrationError: The file doesn't exist or the OS
                                    refused the watch (e.g. the inotify
                                    watch limit was reached).
        """
        target = self.path.resolve()
        if not target.is_file():
            raise WatchRegistrationError(self.path, "no such file")

        observer = self._observer_factory()
        handler = ModifiedHandler(target, self.signal)
        try:
            observer.schedule(handler, str(target.parent), recursive=False)
            observer.start()
        except OSError as exc:
            raise WatchRegistrationError(self.path, exc.strerror or str(exc)) from exc
        self._observer = observer

        self._worker = threading.Thread(
            target=self._run,
            name=f"tail:{self.path.name}",
            daemon=True,
        )
        self._worker.start()

        # Show existing content without waiting for a write
        self.signal()

    def _next_signal(self):
        item = self._signals.get()
        # Coalesce whatever queued up behind it; a stop always wins
        while item is not _STOP:
            try:
                queued = self._signals.get_nowait()
            except Empty:
                break
            if queued is _STOP:
                item = _STOP
        return item

    def _run(self) -> None:
        """Worker thread: one poll cycle per (coalesced) signal."""
        while self._next_signal() is not _STOP:
            try:
                self.cycle()
            except Exception as exc:
                # A bug in one file's cycle must not take the session down
                if self.logger is not None:
                    self.logger.error("watch", f"{self.path}: poll cycle failed: {exc!r}")

    def stop(self) -> None:
        """Unschedule the watch and stop both threads."""
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.unschedule_all()
            observer.stop()
            observer.join(timeout=_JOIN_TIMEOUT)

        worker, self._worker = self._worker, None
        if worker is not None:
            self._signals.put(_STOP)
            worker.join(timeout=_JOIN_TIMEOUT)
