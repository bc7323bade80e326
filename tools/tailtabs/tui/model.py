"""
Data models for the tailtabs TUI.

This module defines the value types shared between the tailing engine,
the session state machine and the curses drawer.

Purpose:
    Tailed lines, view selections and rendered frames cross thread
    boundaries (worker threads build lines, the render loop reads them).
    Keeping them as frozen dataclasses means a snapshot handed to the
    drawer can never be changed under its feet.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Span:
    """
    A run of text sharing one style.

    Attributes:
        text: The characters in this run (escape sequences removed).
        fg: ANSI colour index 0-15, or None for the terminal default.
        bold: Whether the run is drawn bold.
    """
    text: str
    fg: Optional[int] = None
    bold: bool = False


@dataclass(frozen=True)
class Line:
    """
    One complete line read from a tailed file.

    Attributes:
        text: Plain text with all escape sequences stripped.
        spans: Styled segments covering ``text`` in order.
    """
    text: str
    spans: Tuple[Span, ...] = ()

    @classmethod
    def plain(cls, text: str) -> "Line":
        return cls(text, (Span(text),) if text else ())


# ============================================================
# View selection
# ============================================================

@dataclass(frozen=True)
class Overview:
    """Show every tailed file at once."""


@dataclass(frozen=True)
class Single:
    """Show only the tailer at ``index`` (0-based)."""
    index: int


ViewSelection = Union[Overview, Single]

OVERVIEW = Overview()


# ============================================================
# Frames
# ============================================================

@dataclass(frozen=True)
class Pane:
    """
    Copied state of one visible tailer.

    Attributes:
        index: Position of the tailer in the session (0-based).
        title: Label shown in the tab bar and pane header.
        lines: The newest lines, oldest first.
        status: Last transient error for this file, or None.
    """
    index: int
    title: str
    lines: Tuple[Line, ...]
    status: Optional[str] = None


@dataclass(frozen=True)
class Frame:
    """
    Everything the drawer needs for one redraw.

    Attributes:
        view: The active view selection.
        titles: Titles of all tailers, for the tab bar.
        statuses: Status of all tailers, for tab markers.
        panes: The visible panes, in tab order.
    """
    view: ViewSelection
    titles: Tuple[str, ...]
    statuses: Tuple[Optional[str], ...]
    panes: Tuple[Pane, ...] = field(default_factory=tuple)
