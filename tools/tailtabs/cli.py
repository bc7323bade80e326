#!/usr/bin/env python3
"""
tailtabs - live multi-file log tailing in the terminal.

This module implements the command-line interface: it resolves
configuration, starts a watch on every requested file, hands the
terminal to the curses dashboard and reports problems once the terminal
has been restored.

Responsibilities:
    - Parse arguments and merge them over environment settings
    - Open the session log
    - Start one tailer per file and collect watch failures
    - Run the dashboard inside a curses session
    - Map outcomes onto exit codes

Usage:
    tailtabs --files PATH [PATH ...] [options]
    python -m tailtabs --files PATH [PATH ...] [options]

Examples:
    tailtabs --files /var/log/syslog app.log
    tailtabs --files build.log --history 50000
"""

import argparse
import sys
from typing import List, Optional

from .errors import TerminalSetupError, TerminalTeardownError
from .tui.bus import ChangeBus
from .tui.session import Session
from .tui.terminal import curses_screen
from .tui.views import run_dashboard
from .utils.sessionlog import SessionLogger, session_log_path
from .utils.settings import Settings, load_dotenv

# Exit codes
EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _positive(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser ready to parse sys.argv.
    """
    parser = argparse.ArgumentParser(
        prog="tailtabs",
        description="Follow several log files at once in a tabbed terminal view",
    )
    parser.add_argument(
        "--files",
        nargs="+",
        required=True,
        metavar="PATH",
        help="Files to follow; tab order follows argument order",
    )
    parser.add_argument(
        "--history",
        type=_non_negative,
        default=None,
        help="Lines kept per file (default: TAILTABS_HISTORY or 10000)",
    )
    parser.add_argument(
        "--queue-size",
        type=_positive,
        default=None,
        help="Pending redraw signals before watchers block (default: 100)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Diagnostic log path (default: TAILTABS_LOG_FILE or "
             "~/.local/state/tailtabs/tailtabs.log)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit if any file cannot be watched instead of skipping it",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    settings = Settings.from_env()
    if args.history is not None:
        settings.history = args.history
    if args.queue_size is not None:
        settings.queue_size = args.queue_size
    if args.log_file is not None:
        settings.log_file = args.log_file
    return settings


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run tailtabs and return the process exit code.

    Exit Codes:
        0: The user quit normally
        1: Terminal setup/teardown failed, or --strict and a watch failed
        2: Bad usage/configuration, or no file could be watched at all
    """
    # Load any .env configuration before reading settings
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ValueError as exc:
        print(f"tailtabs: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        logger = SessionLogger(session_log_path(settings.log_file))
    except OSError as exc:
        print(f"tailtabs: cannot open log file: {exc}", file=sys.stderr)
        return EXIT_USAGE

    bus = ChangeBus(settings.queue_size)
    session = Session.from_paths(args.files, settings.history, logger=logger)

    failures = session.start(bus.notify)
    if failures and (args.strict or len(failures) == len(session.tailers)):
        session.close()
        for exc in failures.values():
            print(f"tailtabs: {exc}", file=sys.stderr)
        return EXIT_FATAL if args.strict else EXIT_USAGE

    try:
        with curses_screen() as stdscr:
            run_dashboard(stdscr, session, bus, settings.input_slice)
    except (TerminalSetupError, TerminalTeardownError) as exc:
        logger.error("cli", str(exc))
        print(f"tailtabs: {exc}", file=sys.stderr)
        return EXIT_FATAL
    except KeyboardInterrupt:
        # Ctrl+C delivered as a signal is a normal quit
        pass
    finally:
        bus.close()
        session.close()

    # The terminal is back to normal; report files that were skipped
    for exc in failures.values():
        print(f"tailtabs: warning: {exc}", file=sys.stderr)
    if logger.dropped:
        print(
            f"tailtabs: warning: {logger.dropped} log line(s) not written to "
            f"{logger.path}: {logger.last_error}",
            file=sys.stderr,
        )

    return EXIT_OK


def main() -> None:
    """Console-script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
