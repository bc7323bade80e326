"""
Session logging for tailtabs.

While curses owns the terminal nothing can be printed, so the engine
records what it does (watches registered, truncations, unreadable
files) in a plain-text, append-only log file instead.

Design Decisions:
    - One log file per user, shared by every session; lines carry the
      process id so concurrent sessions can be told apart
    - Append-only writes, one open per line, so the file can itself be
      tailed (even by tailtabs) without locking surprises
    - UTC timestamps for consistency across machines
    - A lock serialises writes because every tailed file has its own
      worker thread
    - A failed write is counted, not raised: diagnostics must never stop
      a poll cycle or a watch from starting or stopping
"""

from __future__ import annotations

import datetime
import os
import threading
from pathlib import Path
from typing import Optional


def log_root() -> Path:
    """
    Return the directory that holds the default session log.

    Uses the TAILTABS_LOG_ROOT environment variable if set, otherwise
    falls back to ~/.local/state/tailtabs.

    Returns:
        Path: Directory for tailtabs logs (may not exist yet).

    Example:
        >>> os.environ["TAILTABS_LOG_ROOT"] = "/var/log/tailtabs"
        >>> log_root()
        PosixPath('/var/log/tailtabs')
    """
    root = os.environ.get("TAILTABS_LOG_ROOT")
    if root:
        return Path(root)
    return Path.home() / ".local" / "state" / "tailtabs"


def session_log_path(override: Optional[str] = None) -> Path:
    """
    Resolve the session log file.

    Priority: explicit override (--log-file), then TAILTABS_LOG_FILE,
    then <log_root()>/tailtabs.log.
    """
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get("TAILTABS_LOG_FILE")
    if env_path:
        return Path(env_path).expanduser()
    return log_root() / "tailtabs.log"


class SessionLogger:
    """
    Minimal append-only session logger.

    Attributes:
        path: The filesystem path to the log file.
        session: Identifier stamped on every line (the process id).
        dropped: Number of lines that could not be written.
        last_error: The most recent write failure, if any.

    Log Line Format:
        <timestamp> [session=<id>] [component=<name>] <LEVEL> <message>

    Example:
        >>> logger = SessionLogger(Path("/tmp/tailtabs.log"))
        >>> logger.info("tailer", "watching app.log")
        # Writes: 2024-01-15T12:00:00Z [session=4242] [component=tailer] INFO watching app.log
    """

    def __init__(self, path: Path, session: Optional[str] = None) -> None:
        """
        Initialize a logger writing to ``path``.

        Creates the parent directory if it doesn't exist, so the first
        write won't fail due to missing directories.
        """
        self.path = Path(path)
        self.session = session or str(os.getpid())
        self.dropped = 0
        self.last_error: Optional[OSError] = None
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _ts(self) -> str:
        """Return an ISO 8601 UTC timestamp like 2024-01-15T12:00:00Z."""
        return (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat(timespec="seconds")
            .replace("+00:00", "Z")
        )

    def log(self, component: str, level: str, message: str) -> None:
        """
        Append one structured line to the log file.

        Args:
            component: The part of tailtabs emitting the line
                       (e.g. "tailer", "session", "cli").
            level: Severity (INFO, WARN, ERROR).
            message: Human-readable message.

        A write that fails (disk full, directory removed) is counted in
        ``dropped`` instead of being raised.
        """
        line = (
            f"{self._ts()} "
            f"[session={self.session}] "
            f"[component={component}] "
            f"{level.upper()} {message}\n"
        )
        with self._lock:
            try:
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as exc:
                self.dropped += 1
                self.last_error = exc

    def info(self, component: str, message: str) -> None:
        """Log a normal operational message."""
        self.log(component, "INFO", message)

    def warn(self, component: str, message: str) -> None:
        """Log an unusual but non-fatal condition (unreadable file, truncation)."""
        self.log(component, "WARN", message)

    def error(self, component: str, message: str) -> None:
        """Log a failure that disabled part of the session."""
        self.log(component, "ERROR", message)
