"""
Exception types for tailtabs.

Purpose:
    The tailing engine separates failures that end the program from
    failures that only affect one file. Every exception here derives from
    TailtabsError so the CLI can catch the whole family in one place.

Taxonomy:
    - WatchRegistrationError: the OS refused a watch for one path (fatal
      for that path only)
    - TailUnavailable: a poll could not open or read the file (transient)
    - TruncationDetected: the file shrank since the last poll (recovered
      inside the cursor)
    - TerminalSetupError / TerminalTeardownError: curses lifecycle
      failures (process-fatal)
"""

from pathlib import Path


class TailtabsError(Exception):
    """Base class for all tailtabs errors."""


class WatchRegistrationError(TailtabsError):
    """
    Raised when a filesystem watch cannot be registered for a path.

    Attributes:
        path: The path that could not be watched.
        reason: Human-readable reason (missing path, OS limit, ...).
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot watch {path}: {reason}")


class TailUnavailable(TailtabsError):
    """
    Raised when a poll cannot open or read its file.

    The cursor is left untouched so the next notification retries from
    the same offset.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path} unavailable: {reason}")


class TruncationDetected(TailtabsError):
    """Raised when a file's length drops below the consumed offset."""

    def __init__(self, path: Path, previous: int, current: int):
        self.path = path
        self.previous = previous
        self.current = current
        super().__init__(
            f"{path} shrank from {previous} to {current} bytes"
        )


class TerminalSetupError(TailtabsError):
    """Raised when curses cannot take over the terminal."""


class TerminalTeardownError(TailtabsError):
    """Raised when curses cannot restore the terminal."""
