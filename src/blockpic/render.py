import sys
from typing import TextIO

import numpy as np

BLOCK = "█"


def fg_escape(index: int) -> str:
    """ANSI 256-colour foreground escape for a palette index."""
    return f"\033[38;5;{index}m"


def format_grid(grid: np.ndarray) -> str:
    """Each row is a newline followed by one coloured block per cell."""
    out = []
    for row in grid:
        out.append("\n")
        out.extend(f"{fg_escape(int(index))}{BLOCK}" for index in row)
    return "".join(out)


def render(grid: np.ndarray, stream: TextIO | None = None) -> None:
    stream = stream if stream is not None else sys.stdout
    stream.write(format_grid(grid))
    stream.flush()
