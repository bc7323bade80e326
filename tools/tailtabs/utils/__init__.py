"""
Utility modules for tailtabs.

Modules:
    - settings: Defaults, .env loading and environment configuration
    - sessionlog: Append-only diagnostic log (the terminal belongs to
      curses while the dashboard runs)
"""
