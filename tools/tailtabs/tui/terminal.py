"""
Curses terminal lifecycle.

curses.wrapper() restores the terminal on every exit path but reports
setup and drawing failures as the same curses.error. The context
manager below performs the same steps itself so a failure to take over
the terminal (TerminalSetupError) can be told apart from a failure to
give it back (TerminalTeardownError).
"""

import curses
from contextlib import contextmanager

from ..errors import TerminalSetupError, TerminalTeardownError


def _restore(stdscr) -> None:
    if stdscr is not None:
        stdscr.keypad(False)
    curses.echo()
    curses.nocbreak()
    curses.endwin()


@contextmanager
def curses_screen():
    """
    Put the terminal in curses mode for the duration of the block.

    Yields:
        The curses standard screen.

    Raises:
        TerminalSetupError: curses could not initialise (no tty, unknown
                            TERM). A best-effort restore runs first.
        TerminalTeardownError: The terminal could not be restored and no
                               other exception was already propagating.
    """
    stdscr = None
    try:
        stdscr = curses.initscr()
        curses.noecho()
        curses.cbreak()
        stdscr.keypad(True)
        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error:
            # Monochrome terminal; the drawer falls back to plain text
            pass
        try:
            curses.curs_set(0)
        except curses.error:
            pass
    except curses.error as exc:
        try:
            _restore(stdscr)
        except curses.error:
            pass
        raise TerminalSetupError(f"cannot initialise terminal: {exc}") from exc

    failed = False
    try:
        yield stdscr
    except BaseException:
        failed = True
        raise
    finally:
        try:
            _restore(stdscr)
        except curses.error as exc:
            # Never mask the exception that is already on its way out
            if not failed:
                raise TerminalTeardownError(f"cannot restore terminal: {exc}") from exc
