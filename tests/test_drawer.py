"""
Tests for CursesDrawer layout, using a window that records writes.
"""

import curses

import pytest

from tailtabs.tui.model import OVERVIEW, Frame, Line, Pane, Single
from tailtabs.tui.views import FOOTER, CursesDrawer


class RecordingWindow:
    """Just enough of a curses window to capture addnstr calls."""

    def __init__(self, height, width):
        self.height = height
        self.width = width
        self.cells = {}

    def getmaxyx(self):
        return self.height, self.width

    def erase(self):
        self.cells.clear()

    def refresh(self):
        pass

    def addnstr(self, y, x, text, n, attr=0):
        row = self.cells.setdefault(y, {})
        row[x] = text[:n]

    def row(self, y):
        """Text written on row ``y``, joined left to right."""
        return "".join(text for _x, text in sorted(self.cells.get(y, {}).items()))


@pytest.fixture
def drawer_for(monkeypatch):
    monkeypatch.setattr(curses, "has_colors", lambda: False)

    def make(height=10, width=60):
        window = RecordingWindow(height, width)
        return window, CursesDrawer(window)

    return make


def lines(*texts):
    return tuple(Line.plain(text) for text in texts)


class TestCursesDrawer:
    """Tests for tab bar, pane layout and clipping."""

    def test_single_pane_is_bottom_aligned(self, drawer_for):
        window, drawer = drawer_for()
        frame = Frame(Single(0), ("app.log",), (None,), (Pane(0, "app.log", lines("a", "b")),))

        drawer.draw(frame)

        assert window.row(2) == "[1] app.log"
        # 6 rows of body: four blank, then the two lines
        assert [window.row(y) for y in range(3, 9)] == ["", "", "", "", "a", "b"]
        assert window.row(9) == FOOTER

    def test_long_history_keeps_newest_rows(self, drawer_for):
        window, drawer = drawer_for()
        texts = [f"line {i}" for i in range(10)]
        frame = Frame(Single(0), ("app.log",), (None,), (Pane(0, "app.log", lines(*texts)),))

        drawer.draw(frame)

        assert [window.row(y) for y in range(3, 9)] == texts[-6:]

    def test_shrunken_window_clips_snapshot(self, drawer_for):
        """A frame copied for a taller window only shows what now fits."""
        window, drawer = drawer_for(height=6)
        texts = ["a", "b", "c", "d", "e", "f"]
        frame = Frame(Single(0), ("app.log",), (None,), (Pane(0, "app.log", lines(*texts)),))

        drawer.draw(frame)

        assert [window.row(y) for y in (3, 4)] == ["e", "f"]
        assert window.row(5) == FOOTER

    def test_overview_stacks_panes(self, drawer_for):
        window, drawer = drawer_for()
        frame = Frame(
            OVERVIEW,
            ("app.log", "err.log"),
            (None, None),
            (Pane(0, "app.log", lines("a1", "a2", "a3")), Pane(1, "err.log", lines("e1"))),
        )

        drawer.draw(frame)

        assert window.row(2) == "[1] app.log"
        assert [window.row(3), window.row(4)] == ["a2", "a3"]
        assert window.row(5) == "[2] err.log"
        assert [window.row(6), window.row(7)] == ["", "e1"]

    def test_failing_file_is_marked(self, drawer_for):
        window, drawer = drawer_for(width=60)
        frame = Frame(
            Single(1),
            ("app.log", "err.log"),
            (None, "No such file or directory"),
            (Pane(1, "err.log", (), "No such file or directory"),),
        )

        drawer.draw(frame)

        assert " 1:app.log " in window.row(0)
        assert " 2:err.log! " in window.row(0)
        assert "(No such file or directory)" in window.row(2)

    def test_long_lines_are_clipped_to_width(self, drawer_for):
        window, drawer = drawer_for(width=10)
        frame = Frame(Single(0), ("a",), (None,), (Pane(0, "a", lines("x" * 50)),))

        drawer.draw(frame)

        assert window.row(8) == "x" * 9

    def test_rows_for(self, drawer_for):
        _window, drawer = drawer_for(height=10)

        assert drawer.rows_for(Single(0), 1) == 6
        assert drawer.rows_for(OVERVIEW, 2) == 2
        assert drawer.rows_for(OVERVIEW, 0) == 0
