import os
import sys

DEFAULT_SIZE = (80, 24)


def _env_size() -> tuple[int, int]:
    try:
        columns = int(os.environ.get("COLUMNS", ""))
        rows = int(os.environ.get("LINES", ""))
    except ValueError:
        return DEFAULT_SIZE
    if columns < 1 or rows < 1:
        return DEFAULT_SIZE
    return (columns, rows)


def get_terminal_size() -> tuple[int, int]:
    """Return (columns, rows) of the terminal.

    Falls back to $COLUMNS/$LINES, then (80, 24), when stdout is not a tty.
    """
    if not sys.stdout.isatty():
        return _env_size()
    try:
        size = os.get_terminal_size()
    except OSError:
        return _env_size()
    return (size.columns, size.lines)
