# fractal.py

"""Escape-time evaluation of the quadratic Julia iteration z <- z^2 + c.

Both kernels are compiled with numba and work on separate real/imaginary
floats so the inner loop never allocates. ``escape_grid`` fans rows out with
``prange``; each cell only depends on its own coordinate, so the result is
identical to calling ``escape_count`` cell by cell.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange

# Fixed viewport: re in [-1.5, 1.5), im in [-1, 1). Terminal cells are taller
# than they are wide, so the picture is stretched vertically on screen.
RE_SPAN = 3.0
IM_SPAN = 2.0
RE_MIN = -RE_SPAN / 2.0
IM_MIN = -IM_SPAN / 2.0
ESCAPE_RADIUS_SQR = 4.0


@njit(cache=True)
def _escape(c_re, c_im, z_re, z_im, max_iters):
    n = 0
    while z_re * z_re + z_im * z_im <= ESCAPE_RADIUS_SQR and n < max_iters:
        t = z_re * z_re - z_im * z_im + c_re
        z_im = 2.0 * z_re * z_im + c_im
        z_re = t
        n += 1
    return n


@njit(parallel=True, cache=True)
def _escape_grid(c_re, c_im, width, height, max_iters, out):
    for y in prange(height):
        im = (y / height) * IM_SPAN + IM_MIN
        for x in range(width):
            re = (x / width) * RE_SPAN + RE_MIN
            out[y, x] = _escape(c_re, c_im, re, im, max_iters)


def viewport_point(x: int, y: int, width: int, height: int) -> complex:
    """Complex-plane coordinate of grid cell (x, y)."""
    return complex((x / width) * RE_SPAN + RE_MIN, (y / height) * IM_SPAN + IM_MIN)


def escape_count(parameter: complex, point: complex, max_iters: int) -> int:
    """
    Iterations before |z| leaves radius 2, starting from z = point.

    Returns max_iters for points that never escape within the cap. A point
    already outside the radius returns 0.
    """
    return int(_escape(float(parameter.real), float(parameter.imag),
                       float(point.real), float(point.imag), int(max_iters)))


def escape_grid(parameter: complex, width: int, height: int, max_iters: int) -> np.ndarray:
    """int32 array of shape (height, width) with the escape count of every cell."""
    out = np.zeros((max(height, 0), max(width, 0)), dtype=np.int32)
    if width <= 0 or height <= 0:
        return out
    _escape_grid(float(parameter.real), float(parameter.imag), int(width), int(height), int(max_iters), out)
    return out
