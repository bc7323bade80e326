"""
Curses views and the render loop for tailtabs.

This module contains the main rendering loop of the dashboard. It ties
together the session (tailed files + active tab), the change bus fed by
the per-file worker threads, and a curses drawer.

Architecture:
    - Worker threads (one per file): read new lines into each tailer's
      history and signal the ChangeBus
    - Main thread: RenderLoop snapshots the session, draws, then waits
      for the next key or change
    - Communication: the bounded ChangeBus carries "redraw" signals only;
      the lines themselves are copied out of each tailer under its lock
"""

import curses
from typing import Dict, Optional

from .bus import ChangeBus
from .events import ChangeEvent, InputSource, wait_for_event
from .keys import CursesInput, Quit
from .model import Frame, Line, Single, ViewSelection
from .session import Session

FOOTER = "0: all files   1-9: single file   q: quit"


class RenderLoop:
    """
    Single consumer that redraws whenever input or a change arrives.

    Each iteration:
        1. Ask the drawer how many rows each pane gets, then snapshot
           the session (one tailer lock at a time)
        2. Draw the frame
        3. Wait for input or a change (input first when both are ready)
        4. Quit ends the loop; tab keys switch the view; everything else
           just redraws

    Whatever way run() exits, the bus is closed and every watch is
    released before it returns or raises.

    Attributes:
        session: The tailed files and active view.
        bus: Change notifications from the worker threads.
        source: Non-blocking input source.
        drawer: Object with rows_for(view, pane_count) and draw(frame).
        slice_seconds: Longest bus wait before input is re-checked.
        frames: Number of frames drawn so far.
    """

    def __init__(
        self,
        session: Session,
        bus: ChangeBus,
        source: InputSource,
        drawer,
        slice_seconds: float = 0.05,
    ):
        self.session = session
        self.bus = bus
        self.source = source
        self.drawer = drawer
        self.slice_seconds = slice_seconds
        self.frames = 0

    def render(self) -> Frame:
        visible = len(self.session.visible())
        rows = self.drawer.rows_for(self.session.view, visible)
        frame = self.session.snapshot(rows)
        self.drawer.draw(frame)
        self.frames += 1
        return frame

    def run(self) -> None:
        logger = self.session.logger
        if logger is not None:
            logger.info("render", f"session started with {len(self.session.tailers)} file(s)")
        try:
            while True:
                self.render()
                event = wait_for_event(self.source, self.bus, self.slice_seconds)

                if isinstance(event, ChangeEvent):
                    # One redraw covers every change queued so far
                    self.bus.drain()
                    continue

                if isinstance(event.action, Quit):
                    return
                self.session.apply(event.action)
        finally:
            self.bus.close()
            self.session.close()
            if logger is not None:
                logger.info("render", f"session stopped after {self.frames} frame(s)")


class CursesDrawer:
    """
    Draw frames onto a curses window.

    Layout:
        row 0        tab bar   (0:all 1:app.log 2:err.log! ...)
        row 1        separator
        rows 2..h-2  panes, each with a one-line header
        row h-1      key help
    """

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self._pairs: Dict[int, int] = {}
        self._color = False
        self._init_colors()

    def _init_colors(self) -> None:
        try:
            if not curses.has_colors():
                return
        except curses.error:
            return
        colors = min(getattr(curses, "COLORS", 0), 16)
        if colors < 8:
            return
        for fg in range(16):
            # Bright colours fall back to their base colour plus bold
            base = fg if fg < colors else fg - 8
            pair = fg + 1
            try:
                curses.init_pair(pair, base, -1)
            except curses.error:
                try:
                    curses.init_pair(pair, base, curses.COLOR_BLACK)
                except curses.error:
                    return
            self._pairs[fg] = pair
        self._color = True

    def _attr(self, fg: Optional[int], bold: bool) -> int:
        attr = curses.A_BOLD if bold else curses.A_NORMAL
        if fg is None:
            return attr
        if self._color and fg in self._pairs:
            attr |= curses.color_pair(self._pairs[fg])
        if fg >= 8:
            attr |= curses.A_BOLD
        return attr

    def _put(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> int:
        """Write clipped text; return the column after it."""
        h, w = self.stdscr.getmaxyx()
        if y >= h or x >= w - 1 or not text:
            return x
        room = w - 1 - x
        try:
            self.stdscr.addnstr(y, x, text, room, attr)
        except curses.error:
            # Writing into the last cell of the screen raises; ignore
            pass
        return x + min(len(text), room)

    def rows_for(self, view: ViewSelection, pane_count: int) -> int:
        h, _w = self.stdscr.getmaxyx()
        body = max(0, h - 3)
        if pane_count <= 0:
            return 0
        if isinstance(view, Single):
            return max(0, body - 1)
        return max(0, body // pane_count - 1)

    def _draw_line(self, y: int, line: Line) -> None:
        x = 0
        for span in line.spans:
            x = self._put(y, x, span.text, self._attr(span.fg, span.bold))

    def _draw_tabs(self, frame: Frame) -> None:
        x = self._put(0, 0, " 0:all ", curses.A_REVERSE if not isinstance(frame.view, Single) else 0)
        for index, (title, status) in enumerate(zip(frame.titles, frame.statuses)):
            label = f" {index + 1}:{title}{'!' if status else ''} "
            active = isinstance(frame.view, Single) and frame.view.index == index
            x = self._put(0, x, label, curses.A_REVERSE if active else curses.A_NORMAL)

    def draw(self, frame: Frame) -> None:
        self.stdscr.erase()
        h, w = self.stdscr.getmaxyx()

        self._draw_tabs(frame)
        self._put(1, 0, "-" * (w - 1))

        if frame.panes:
            rows = self.rows_for(frame.view, len(frame.panes))
            y = 2
            for pane in frame.panes:
                header = f"[{pane.index + 1}] {pane.title}"
                if pane.status:
                    header += f"  ({pane.status})"
                self._put(y, 0, header, curses.A_BOLD)
                y += 1
                # The window may have shrunk since the snapshot was taken
                lines = pane.lines[-rows:] if rows else ()
                # Bottom-align: pad short histories with blank rows on top
                y += rows - len(lines)
                for line in lines:
                    self._draw_line(y, line)
                    y += 1
        else:
            self._put(2, 0, "no files")

        self._put(h - 1, 0, FOOTER, curses.A_DIM)
        self.stdscr.refresh()


def run_dashboard(stdscr, session: Session, bus: ChangeBus, slice_seconds: float = 0.05) -> None:
    """
    Run the interactive dashboard until the user quits.

    Args:
        stdscr: The curses standard screen (see terminal.curses_screen).
        session: Session whose tailers are already started.
        bus: ChangeBus the tailers notify.
        slice_seconds: Input latency bound while waiting for changes.
    """
    loop = RenderLoop(session, bus, CursesInput(stdscr), CursesDrawer(stdscr), slice_seconds)
    loop.run()
