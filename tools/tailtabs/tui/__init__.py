"""
TUI components for tailtabs.

This subpackage holds the tailing engine and the curses dashboard built
on top of it.

Modules:
    - ring: Fixed-capacity history buffer
    - tailer: Delta reads (TailCursor) and per-file history (FileTailer)
    - watch: watchdog subscription plus per-file worker thread
    - bus: Fan-in of change signals into one bounded queue
    - session: Tailed files, active tab and the TabController
    - keys: Key codes to semantic actions
    - events: Input-first wait over keys and change signals
    - views: RenderLoop and the curses drawer
    - terminal: curses setup/teardown
    - ansi: SGR colour decoding into styled spans
    - model: Shared value types (Line, Frame, view selections)

Architecture:
    The TUI uses a producer-consumer pattern:
    1. One worker thread per file polls on filesystem events
    2. Workers signal the ChangeBus when history changed
    3. The main thread redraws from copied snapshots
"""
