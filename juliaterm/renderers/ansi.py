from __future__ import annotations

from typing import Optional, TextIO

import numpy as np

from juliaterm.color import FG_256, RESET, palette
from juliaterm.fractal import escape_grid
from juliaterm.util.logging_setup import get_logger


def encode_grid(grid: np.ndarray, max_iters: int, sink: TextIO) -> int:
    """
    Write an escape-count grid to ``sink`` as 256-colour text.

    A colour directive is only emitted when the colour differs from the one
    already active; interior cells (count == max_iters) drop back to the
    default attributes with a reset and print a blank. Each row ends with a
    reset if a colour is still active, then a newline, so no colour leaks
    across rows. Returns the number of set + reset directives written.
    """
    lut = palette(max_iters)
    directives = 0
    for row in grid.tolist():
        parts = []
        active: Optional[int] = None
        for n in row:
            if n >= max_iters:
                if active is not None:
                    parts.append(RESET)
                    directives += 1
                    active = None
                parts.append(" ")
                continue
            color, glyph = lut[n]
            if color != active:
                parts.append(FG_256.format(color))
                directives += 1
                active = color
            parts.append(glyph)
        if active is not None:
            parts.append(RESET)
            directives += 1
        parts.append("\n")
        sink.write("".join(parts))
    return directives


def render(parameter: complex, width: int, height: int, max_iters: int, sink: TextIO) -> int:
    """Evaluate one Julia frame for ``parameter`` and encode it into ``sink``."""
    grid = escape_grid(parameter, width, height, max_iters)
    directives = encode_grid(grid, max_iters, sink)
    get_logger().debug("Frame c=%s size=%sx%s directives=%s", parameter, width, height, directives)
    return directives
