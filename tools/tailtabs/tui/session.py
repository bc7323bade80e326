"""
Session state: the tailed files and which of them are on screen.

The Session owns every FileTailer (one per command-line path, in
argument order) and the active view. Only the render loop changes the
view, through the TabController; worker threads never touch it.
"""

from typing import Callable, Dict, List, Sequence

from ..errors import WatchRegistrationError
from .keys import SelectTab
from .model import OVERVIEW, Frame, Pane, Single, ViewSelection
from .tailer import FileTailer


class TabController:
    """
    Map input actions onto view transitions.

    States are Overview and Single(i) for 0 <= i < tab_count. Digit 0
    selects the overview, digits 1..tab_count select that file, and any
    other digit falls back to the overview instead of being rejected.

    Example:
        >>> tabs = TabController(3)
        >>> tabs.select(2)
        Single(index=1)
        >>> tabs.select(7)
        Overview()
    """

    def __init__(self, tab_count: int):
        self.tab_count = tab_count

    def select(self, digit: int) -> ViewSelection:
        if 1 <= digit <= self.tab_count:
            return Single(digit - 1)
        return OVERVIEW

    def apply(self, view: ViewSelection, action) -> ViewSelection:
        """Return the view after ``action``; non-tab actions keep ``view``."""
        if isinstance(action, SelectTab):
            return self.select(action.digit)
        return view


class Session:
    """
    Ordered collection of tailers plus the active view.

    Attributes:
        tailers: One FileTailer per input path, in argument order.
        view: Current ViewSelection (starts at Overview).
        controller: TabController sized to ``tailers``.
        failures: Watch registration errors collected by start(),
                  keyed by tailer index.
        logger: Optional SessionLogger.
    """

    def __init__(self, tailers: Sequence[FileTailer], logger=None):
        self.tailers: List[FileTailer] = list(tailers)
        self.view: ViewSelection = OVERVIEW
        self.controller = TabController(len(self.tailers))
        self.failures: Dict[int, WatchRegistrationError] = {}
        self.logger = logger

    @classmethod
    def from_paths(cls, paths, capacity: int, logger=None) -> "Session":
        return cls([FileTailer(p, capacity, logger=logger) for p in paths], logger=logger)

    def start(self, notify: Callable[[], None], **start_kwargs) -> Dict[int, WatchRegistrationError]:
        """
        Start watching every file.

        A failure for one path is recorded (and shown as that tab's
        status) without stopping the others.

        Returns:
            dict: index -> WatchRegistrationError for paths that could
                  not be watched.
        """
        for index, tailer in enumerate(self.tailers):
            try:
                tailer.start(notify, **start_kwargs)
            except WatchRegistrationError as exc:
                self.failures[index] = exc
                with tailer.lock:
                    tailer.status = f"not watched: {exc.reason}"
                if self.logger is not None:
                    self.logger.error("session", str(exc))
        return self.failures

    def apply(self, action) -> ViewSelection:
        self.view = self.controller.apply(self.view, action)
        return self.view

    def visible(self) -> List[FileTailer]:
        """Tailers shown in the current view, in tab order."""
        if isinstance(self.view, Single):
            return [self.tailers[self.view.index]]
        return list(self.tailers)

    def snapshot(self, rows: int) -> Frame:
        """
        Copy what the current view needs into an immutable Frame.

        Each tailer's lock is taken on its own and released before the
        next one; no two locks are ever held together.

        Args:
            rows: Lines to copy per visible pane.
        """
        visible = set(id(t) for t in self.visible())
        titles = []
        statuses = []
        panes = []

        for index, tailer in enumerate(self.tailers):
            with tailer.lock:
                status = tailer.status
                lines = tuple(tailer.tail(rows)) if id(tailer) in visible else None
            titles.append(tailer.title)
            statuses.append(status)
            if lines is not None:
                panes.append(Pane(index, tailer.title, lines, status))

        return Frame(self.view, tuple(titles), tuple(statuses), tuple(panes))

    def close(self) -> None:
        """Release every tailer's watch. Safe to call more than once."""
        for tailer in self.tailers:
            tailer.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
