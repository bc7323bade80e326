"""
Input actions.

The render loop never looks at raw key codes. Keys read from curses are
translated here into a handful of semantic actions:

    SelectTab(digit)  keys 0-9
    Quit              q, Q, Ctrl+C
    Noop              anything else (including terminal resize)
"""

import curses
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class SelectTab:
    digit: int


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Noop:
    pass


Action = Union[SelectTab, Quit, Noop]

QUIT_KEYS = (ord("q"), ord("Q"), 3)


def decode_key(ch: int) -> Optional[Action]:
    """
    Translate a curses getch() code into an action.

    Returns:
        The action, or None when no key was pending (getch returned -1).
    """
    if ch == -1:
        return None
    if ch in QUIT_KEYS:
        return Quit()
    if ord("0") <= ch <= ord("9"):
        return SelectTab(ch - ord("0"))
    return Noop()


class CursesInput:
    """
    Non-blocking key source backed by a curses window.

    The window is switched to nodelay mode so poll() returns at once.
    """

    def __init__(self, window):
        self.window = window
        self.window.nodelay(True)

    def poll(self) -> Optional[Action]:
        try:
            ch = self.window.getch()
        except KeyboardInterrupt:
            # Ctrl+C outside raw mode arrives as a signal, not a key
            return Quit()
        if ch == curses.KEY_RESIZE:
            return Noop()
        return decode_key(ch)
