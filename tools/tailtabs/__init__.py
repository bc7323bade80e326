"""
tailtabs - live multi-file log tailing dashboard.

This package follows several plain-text log files at once and shows the
newest lines of one file, or of all of them, in a curses view that
updates as the files grow.

Package Structure:
    - cli.py: Command-line interface and entry point
    - errors.py: Exception taxonomy
    - tui/: Tailing engine, session state and curses rendering
    - utils/: Configuration and session logging

Usage:
    Run as a module: python -m tailtabs --files <path> [<path> ...]

Example:
    python -m tailtabs --files /var/log/syslog app.log
"""

__version__ = "1.0.0"
