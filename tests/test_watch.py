"""
Integration tests against the real watchdog observer.
"""

import threading

from conftest import wait_until
from tailtabs.tui.bus import ChangeBus
from tailtabs.tui.tailer import FileTailer
from tailtabs.tui.watch import ModifiedHandler
from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent, DirModifiedEvent


def texts(lines):
    return [line.text for line in lines]


class TestModifiedHandler:
    """Tests for event filtering."""

    def test_matches_only_the_target_file(self, tmp_path):
        calls = []
        target = tmp_path / "app.log"
        handler = ModifiedHandler(target, lambda: calls.append(1))

        handler.on_modified(FileModifiedEvent(str(target)))
        handler.on_modified(FileModifiedEvent(str(tmp_path / "other.log")))
        handler.on_modified(DirModifiedEvent(str(tmp_path)))

        assert calls == [1]

    def test_create_and_move_onto_target(self, tmp_path):
        calls = []
        target = tmp_path / "app.log"
        handler = ModifiedHandler(target, lambda: calls.append(1))

        handler.on_created(FileCreatedEvent(str(target)))
        handler.on_moved(FileMovedEvent(str(tmp_path / "tmp.log"), str(target)))
        handler.on_moved(FileMovedEvent(str(target), str(tmp_path / "app.log.1")))

        assert calls == [1, 1]


class TestLiveWatch:
    """Tests using real filesystem notifications."""

    def test_appends_reach_history_and_bus(self, log_file, append):
        append(log_file, "a\nb\nc\nd\ne\n")
        bus = ChangeBus()
        tailer = FileTailer(log_file)
        tailer.start(bus.notify)
        try:
            assert wait_until(lambda: len(tailer.history) == 5)
            assert bus.wait(5)

            append(log_file, "f\n")
            assert wait_until(lambda: len(tailer.history) == 6)
            assert texts(tailer.snapshot(3)) == ["d", "e", "f"]
        finally:
            tailer.close()
            bus.close()

    def test_other_files_in_directory_are_ignored(self, log_file, append, tmp_path):
        calls = []
        tailer = FileTailer(log_file)
        tailer.start(lambda: calls.append(1))
        try:
            append(tmp_path / "neighbour.log", "noise\n")
            append(log_file, "mine\n")
            assert wait_until(lambda: len(tailer.history) == 1)
            assert texts(tailer.snapshot(5)) == ["mine"]
        finally:
            tailer.close()

    def test_two_tailers_in_one_directory_close_independently(self, tmp_path, append):
        first = tmp_path / "one.log"
        second = tmp_path / "two.log"
        append(first, "")
        append(second, "")
        one = FileTailer(first)
        two = FileTailer(second)
        one.start(lambda: None)
        two.start(lambda: None)
        try:
            one.close()
            append(second, "still watched\n")
            assert wait_until(lambda: len(two.history) == 1)
        finally:
            one.close()
            two.close()

    def test_concurrent_writers_and_reader(self, log_file):
        """The render side never sees partial or duplicated lines."""
        bus = ChangeBus(capacity=4)
        tailer = FileTailer(log_file)
        tailer.start(bus.notify)
        total = 300
        stop = threading.Event()
        seen_bad = []

        def reader():
            while not stop.is_set():
                bus.wait(0.01)
                snapshot = texts(tailer.snapshot(total))
                if any(not t.endswith("-end") for t in snapshot):
                    seen_bad.append(snapshot)
                if len(set(snapshot)) != len(snapshot):
                    seen_bad.append(snapshot)

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            with open(log_file, "a", encoding="utf-8") as f:
                for i in range(total):
                    f.write(f"{i}-")
                    f.flush()
                    f.write("end\n")
                    f.flush()
            assert wait_until(lambda: len(tailer.history) == total, timeout=10)
        finally:
            stop.set()
            thread.join()
            tailer.close()
            bus.close()

        assert seen_bad == []
        assert texts(tailer.snapshot(total)) == [f"{i}-end" for i in range(total)]
