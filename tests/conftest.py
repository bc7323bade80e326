"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import time

import pytest

# Add tools/ to path for imports when the package isn't installed
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "tools"))

from tailtabs.utils.sessionlog import SessionLogger  # noqa: E402


class FakeObserver:
    """Stand-in for a watchdog observer; records calls, emits nothing."""

    instances = []

    def __init__(self):
        self.scheduled = []
        self.started = False
        self.stopped = False
        self.joined = False
        FakeObserver.instances.append(self)

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        self.started = True

    def unschedule_all(self):
        self.scheduled.clear()

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        self.joined = True


class RefusingObserver(FakeObserver):
    """Observer whose start() fails like an exhausted inotify limit."""

    def start(self):
        raise OSError(28, "inotify watch limit reached")


def wait_until(predicate, timeout=5.0, interval=0.01):
    """Poll ``predicate`` until it is truthy or ``timeout`` expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())


def append_text(path, text, mode="a"):
    with open(path, mode, encoding="utf-8", newline="") as f:
        f.write(text)
        f.flush()


@pytest.fixture
def log_file(tmp_path):
    """An empty log file inside a temporary directory."""
    path = tmp_path / "app.log"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def append():
    """Append text to a file and flush it."""
    return append_text


@pytest.fixture
def logger(tmp_path):
    """Session logger writing into the temporary directory."""
    return SessionLogger(tmp_path / "logs" / "tailtabs.log", session="test")


@pytest.fixture
def broken_logger(tmp_path):
    """Session logger whose every write fails (its path is a directory)."""
    path = tmp_path / "unwritable"
    path.mkdir()
    return SessionLogger(path, session="test")


@pytest.fixture
def fake_observer():
    FakeObserver.instances.clear()
    return FakeObserver


ENV_VARS = (
    "TAILTABS_HISTORY",
    "TAILTABS_QUEUE_SIZE",
    "TAILTABS_LOG_FILE",
    "TAILTABS_LOG_ROOT",
    "TAILTABS_INPUT_SLICE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without TAILTABS_* settings from the environment."""
    # setenv first so monkeypatch also removes values load_dotenv adds
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
