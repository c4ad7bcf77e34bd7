import numpy as np
import pytest

from juliaterm.fractal import escape_count, escape_grid, viewport_point

C = complex(-0.8, 0.156)


def test_point_outside_radius_escapes_immediately():
    assert escape_count(C, complex(3.0, 0.0), 120) == 0


def test_fixed_point_never_escapes():
    assert escape_count(0j, 0j, 120) == 120
    assert escape_count(0j, complex(0.5, 0.5), 77) == 77


def test_known_escape_counts():
    # c = 0 squares |z|: 1.2 -> 1.44 -> 2.07 -> 4.3
    assert escape_count(0j, complex(1.2, 0.0), 50) == 2
    assert escape_count(0j, complex(2.0, 0.0), 50) == 1


def test_count_bounded_by_cap():
    for re in np.linspace(-2, 2, 21):
        for im in np.linspace(-2, 2, 21):
            n = escape_count(C, complex(re, im), 30)
            assert 0 <= n <= 30


def test_zero_cap():
    assert escape_count(C, 0j, 0) == 0


def test_viewport_corners():
    assert viewport_point(0, 0, 80, 24) == complex(-1.5, -1.0)
    mid = viewport_point(40, 12, 80, 24)
    assert mid == complex(0.0, 0.0)
    last = viewport_point(79, 23, 80, 24)
    assert last.real < 1.5 and last.imag < 1.0


def test_grid_matches_scalar_kernel():
    width, height, max_iters = 23, 11, 60
    grid = escape_grid(C, width, height, max_iters)
    assert grid.shape == (height, width)
    assert grid.dtype == np.int32
    for y in range(height):
        for x in range(width):
            assert grid[y, x] == escape_count(C, viewport_point(x, y, width, height), max_iters)


def test_grid_has_interior_and_escaping_cells():
    grid = escape_grid(0j, 80, 24, 120)
    assert (grid == 120).any()
    assert (grid < 120).any()


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (0, 0)])
def test_empty_grid(width, height):
    assert escape_grid(C, width, height, 10).size == 0
