"""
Incremental file tailing.

This module provides the per-file reading engine: a TailCursor that
remembers how far into a file we have read, and a FileTailer that owns
the cursor, a bounded history of parsed lines, and (once started) an OS
watch that triggers a new read whenever the file changes.

Design Decisions:
    - Only the bytes appended since the last poll are read; a file is
      never re-read from the start unless it shrank
    - Lines are only surfaced once complete: a trailing partial line is
      left in the file and re-read on the next poll, so the cursor
      always sits just after a newline
    - Truncation or rotation (file shorter than our offset) clears the
      history and restarts from offset 0 rather than mixing old and new
      content
    - Invalid UTF-8 is decoded lossily instead of aborting the poll
    - A missing or unreadable file is a transient condition: the cursor
      stays put and the next notification retries
"""

import os
import threading
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from watchdog.observers import Observer

from ..errors import TailUnavailable, TruncationDetected
from ..utils.settings import DEFAULT_HISTORY
from .ansi import parse_line
from .model import Line
from .ring import RingBuffer, TailWindow
from .watch import TailWatch


# Bytes read per read() call; bounds memory when a large file is first opened
READ_CHUNK = 1 << 20


@dataclass
class PollResult:
    """
    Outcome of one TailCursor poll.

    Attributes:
        lines: Newly completed lines, oldest first, without newlines.
        truncation: Set when the file shrank since the previous poll;
                    callers must discard history read before it.
        lossy: True when some bytes were not valid UTF-8 and were
               replaced during decoding.
    """
    lines: List[str] = field(default_factory=list)
    truncation: Optional[TruncationDetected] = None
    lossy: bool = False

    @property
    def truncated(self) -> bool:
        return self.truncation is not None


class TailCursor:
    """
    Read position within one file plus the delta-read logic.

    Attributes:
        position: Byte offset of the first unconsumed byte. Always just
                  after a newline (or 0).
        last_known_length: File size observed at the last successful poll.

    Example:
        >>> cursor = TailCursor()
        >>> cursor.poll(Path("app.log")).lines
        ['first line', 'second line']
        >>> cursor.poll(Path("app.log")).lines  # nothing appended yet
        []
    """

    def __init__(self):
        self.position = 0
        self.last_known_length = 0

    def _check_length(self, path: Path, length: int) -> None:
        if length < self.position:
            raise TruncationDetected(path, self.position, length)

    @staticmethod
    def _decode(chunk: bytes, result: PollResult) -> str:
        try:
            return chunk.decode("utf-8")
        except UnicodeDecodeError:
            result.lossy = True
            return chunk.decode("utf-8", errors="replace")

    def poll(self, path: Path, keep: Optional[int] = None) -> PollResult:
        """
        Read every line completed since the previous poll.

        Args:
            path: File to read.
            keep: If given, only the newest ``keep`` lines are returned.
                  Older ones would be evicted from history anyway, so
                  there is no point holding them in memory.

        Returns:
            PollResult: The new lines and any truncation/decode notes.

        Raises:
            TailUnavailable: The file is missing or cannot be read. The
                             cursor is left unchanged.
        """
        result = PollResult()
        lines = deque(maxlen=keep) if keep is not None else []

        try:
            with open(path, "rb") as f:
                length = os.fstat(f.fileno()).st_size
                start = self.position

                try:
                    self._check_length(path, length)
                except TruncationDetected as exc:
                    # Rotation or rewrite: start over from the beginning
                    result.truncation = exc
                    start = 0

                consumed = start
                carry = b""
                remaining = length - start
                f.seek(start)

                while remaining > 0:
                    block = f.read(min(READ_CHUNK, remaining))
                    if not block:
                        # File shrank while we were reading it
                        break
                    remaining -= len(block)
                    data = carry + block

                    end = data.rfind(b"\n")
                    if end < 0:
                        carry = data
                        continue

                    text = self._decode(data[:end + 1], result)
                    for raw in text.split("\n")[:-1]:
                        lines.append(raw[:-1] if raw.endswith("\r") else raw)

                    consumed += end + 1
                    carry = data[end + 1:]
        except OSError as exc:
            raise TailUnavailable(path, exc.strerror or str(exc)) from exc

        # Commit only after the whole read succeeded
        self.position = consumed
        self.last_known_length = length
        result.lines = list(lines)
        return result


class FileTailer:
    """
    Tail one file into a bounded history of parsed lines.

    The history is shared between this tailer's worker thread (which
    writes new lines) and the render loop (which copies the newest
    lines). ``lock`` arbitrates between them and is only held long
    enough to publish or copy a poll result.

    Attributes:
        path: File being tailed (never changes).
        cursor: Read position within the file.
        history: The newest lines, oldest first.
        lock: Guards ``history`` and ``status``.
        status: Last transient error for this file, or None when the
                most recent poll succeeded.
        logger: Optional SessionLogger for diagnostics.

    Example:
        >>> tailer = FileTailer(Path("app.log"))
        >>> tailer.poll()
        5
        >>> [line.text for line in tailer.snapshot(3)]
        ['c', 'd', 'e']
    """

    def __init__(self, path, capacity: int = DEFAULT_HISTORY, logger=None):
        self.path = Path(path)
        self.cursor = TailCursor()
        self.history: RingBuffer[Line] = RingBuffer(capacity)
        self.lock = threading.Lock()
        self.status: Optional[str] = None
        self.logger = logger
        # Serialises poll cycles so two callers never interleave cursor updates
        self._poll_lock = threading.Lock()
        self._watch: Optional[TailWatch] = None

    @property
    def title(self) -> str:
        return self.path.name or str(self.path)

    @property
    def watching(self) -> bool:
        return self._watch is not None

    def _log(self, level: str, message: str) -> None:
        if self.logger is not None:
            self.logger.log("tailer", level, f"{self.path}: {message}")

    # --------------------------------------------------------
    # Polling
    # --------------------------------------------------------

    def _cycle(self) -> Tuple[int, bool]:
        """
        Run one poll cycle.

        Returns:
            (pushed, changed): the number of lines pushed, and whether
            anything the drawer shows changed (new lines, a history
            cleared by truncation, or a status flip).
        """
        with self._poll_lock:
            try:
                result = self.cursor.poll(self.path, keep=self.history.capacity)
            except TailUnavailable as exc:
                with self.lock:
                    changed = self.status != exc.reason
                    self.status = exc.reason
                if changed:
                    self._log("WARN", f"unavailable ({exc.reason}), will retry")
                return 0, changed

            # Parse outside the lock; publish in one step
            parsed = [parse_line(raw) for raw in result.lines]

            with self.lock:
                recovered = self.status is not None
                self.status = None
                if result.truncated:
                    self.history.clear()
                self.history.extend(parsed)

            # The cursor has already moved, so publish before logging
            if result.truncated:
                self._log("WARN", f"truncated ({result.truncation}), re-reading from start")
            if result.lossy:
                self._log("WARN", "invalid UTF-8 replaced while decoding")
            if recovered:
                self._log("INFO", "readable again")

            return len(parsed), bool(parsed) or result.truncated or recovered

    def poll(self) -> int:
        """
        Read newly appended lines into history.

        Returns:
            int: Number of lines pushed by this poll. Zero when nothing
                 new was appended or the file is currently unavailable
                 (see ``status``).
        """
        pushed, _changed = self._cycle()
        return pushed

    # --------------------------------------------------------
    # Reading
    # --------------------------------------------------------

    def tail(self, n: int) -> TailWindow[Line]:
        """
        Return a lazy view of the newest ``n`` lines.

        Hold ``lock`` while iterating the returned view.
        """
        return self.history.iter_last(n)

    def snapshot(self, n: int) -> List[Line]:
        """Copy the newest ``n`` lines under the lock."""
        with self.lock:
            return list(self.tail(n))

    # --------------------------------------------------------
    # Watch lifecycle
    # --------------------------------------------------------

    def start(self, notify: Callable[[], None], observer_factory=Observer) -> None:
        """
        Begin watching the file for modifications.

        Registers an OS watch and starts this tailer's worker thread.
        One poll cycle is queued immediately so existing content shows
        up without waiting for a write. ``notify`` is called after every
        cycle that changed the history.

        Args:
            notify: Called with no arguments when a redraw is needed.
            observer_factory: Creates the watchdog observer (tests may
                              pass a polling observer).

        Raises:
            WatchRegistrationError: The path is missing or the OS
                                    refused the watch.
            RuntimeError: The tailer was already started.
        """
        if self._watch is not None:
            raise RuntimeError(f"{self.path} is already being watched")

        def cycle():
            _pushed, changed = self._cycle()
            if changed:
                notify()

        watch = TailWatch(self.path, cycle, observer_factory, logger=self.logger)
        watch.start()
        self._watch = watch
        self._log("INFO", "watch registered")

    def close(self) -> None:
        """Release the OS watch and stop the worker thread. Idempotent."""
        watch, self._watch = self._watch, None
        if watch is not None:
            watch.stop()
            self._log("INFO", "watch released")

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
