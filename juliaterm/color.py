# color.py

from __future__ import annotations

import math
from functools import lru_cache
from typing import Tuple

# Ordered from empty to solid; index grows with escape time.
SHADES = " .:-=+*oO#█"

SHADE_GAMMA = 0.85
SATURATION = 0.9
VALUE = 1.0
GRAY_THRESHOLD = 0.08

FG_256 = "\x1b[38;5;{}m"
RESET = "\x1b[0m"


def _round_half_up(x: float) -> int:
    # Non-negative inputs only; Python's round() is banker's rounding.
    return int(math.floor(x + 0.5))


def hsv_to_256(h_deg: float, s: float, v: float) -> int:
    """
    Quantise an HSV colour into the xterm 256-colour palette.

    Saturated colours land in the 6x6x6 cube (16..231). Anything with
    saturation below GRAY_THRESHOLD skips the cube and uses the 24-step
    grayscale ramp (232..255) keyed on value alone.
    """
    if s < GRAY_THRESHOLD:
        gray = min(_round_half_up(max(v, 0.0) * 23.0), 23)
        return 232 + gray

    h = (h_deg % 360.0 + 360.0) % 360.0 / 60.0
    c = v * s
    x = c * (1.0 - abs(h % 2.0 - 1.0))
    sector = int(h)
    if sector == 0:
        r1, g1, b1 = c, x, 0.0
    elif sector == 1:
        r1, g1, b1 = x, c, 0.0
    elif sector == 2:
        r1, g1, b1 = 0.0, c, x
    elif sector == 3:
        r1, g1, b1 = 0.0, x, c
    elif sector == 4:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x
    m = v - c

    ri = _round_half_up(min(max((r1 + m) * 5.0, 0.0), 5.0))
    gi = _round_half_up(min(max((g1 + m) * 5.0, 0.0), 5.0))
    bi = _round_half_up(min(max((b1 + m) * 5.0, 0.0), 5.0))
    return 16 + 36 * ri + 6 * gi + bi


def color_index(norm: float) -> int:
    return hsv_to_256(norm * 360.0, SATURATION, VALUE)


def shade_index(norm: float) -> int:
    """
    Index into SHADES for a normalised escape value.

    The gamma < 1 lifts low values so the ramp climbs quickly out of blank
    and then spends longer in the dense glyphs. Both the power curve and
    the rounding are non-decreasing, so the index is monotone in norm.
    """
    top = len(SHADES) - 1
    scaled = max(norm, 0.0) ** SHADE_GAMMA * top
    return _round_half_up(min(max(scaled, 0.0), float(top)))


def shade_char(norm: float) -> str:
    return SHADES[shade_index(norm)]


@lru_cache(maxsize=16)
def palette(max_iters: int) -> Tuple[Tuple[int, str], ...]:
    """(color index, glyph) for every escaping iteration count 0..max_iters-1."""
    out = []
    for n in range(max_iters):
        norm = n / max_iters
        out.append((color_index(norm), shade_char(norm)))
    return tuple(out)
