"""
Runtime configuration for tailtabs.

Settings come from three layers, lowest priority first:
    1. Built-in defaults (the constants below)
    2. Environment variables, optionally seeded from a .env file
    3. Command-line flags (applied by cli.py)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_HISTORY = 10_000
DEFAULT_QUEUE_SIZE = 100
# Seconds the render loop waits on the change bus before re-checking input
DEFAULT_INPUT_SLICE = 0.05


def load_dotenv(path: Optional[Path] = None) -> None:
    """
    Load a .env file into os.environ if present.

    Args:
        path: File to read; defaults to .env in the current directory.

    Side Effects:
        Adds variables from the file that aren't already set (uses
        setdefault, so existing vars win).
    """
    env_path = Path(path) if path else Path.cwd() / ".env"

    # Silently skip if no .env file exists - it's optional
    if not env_path.exists():
        return

    with env_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue
            # Skip malformed lines (no = sign)
            if "=" not in line:
                continue
            # Split on first = only (value might contain =)
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())


def _env_int(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


@dataclass
class Settings:
    """
    Resolved configuration for one session.

    Attributes:
        history: Lines kept per file (TAILTABS_HISTORY).
        queue_size: Capacity of the change bus (TAILTABS_QUEUE_SIZE).
        log_file: Explicit session log path (TAILTABS_LOG_FILE), or None
                  for the default location.
        input_slice: Bus wait slice in seconds (TAILTABS_INPUT_SLICE).
    """
    history: int = DEFAULT_HISTORY
    queue_size: int = DEFAULT_QUEUE_SIZE
    log_file: Optional[str] = None
    input_slice: float = DEFAULT_INPUT_SLICE

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            history=_env_int("TAILTABS_HISTORY", DEFAULT_HISTORY, 0),
            queue_size=_env_int("TAILTABS_QUEUE_SIZE", DEFAULT_QUEUE_SIZE, 1),
            log_file=os.environ.get("TAILTABS_LOG_FILE") or None,
            input_slice=_env_float("TAILTABS_INPUT_SLICE", DEFAULT_INPUT_SLICE),
        )
