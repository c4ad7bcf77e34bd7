import io
import re

import numpy as np
import pytest

from juliaterm.color import palette
from juliaterm.fractal import escape_grid
from juliaterm.renderers.ansi import encode_grid, render

TOKEN = re.compile(r"\x1b\[(?:38;5;(\d+)|0)m|(\n)|(.)", re.S)
MAX = 120


def decode(text):
    """Replay the stream: returns rows of (glyph, active colour or None)."""
    rows, row, active = [], [], None
    directives = 0
    for m in TOKEN.finditer(text):
        color, newline, glyph = m.groups()
        if newline:
            rows.append(row)
            row = []
        elif glyph is not None:
            row.append((glyph, active))
        else:
            directives += 1
            active = int(color) if color else None
    assert row == []
    return rows, directives


def expected_cells(grid, max_iters):
    lut = palette(max_iters)
    out = []
    for row in grid.tolist():
        cells = []
        for n in row:
            if n >= max_iters:
                cells.append((" ", None))
            else:
                color, glyph = lut[n]
                cells.append((glyph, color))
        out.append(cells)
    return out


def test_run_of_identical_cells_sets_colour_once():
    grid = np.full((1, 10), 5, dtype=np.int32)
    sink = io.StringIO()
    count = encode_grid(grid, MAX, sink)
    text = sink.getvalue()
    assert text.count("\x1b[38;5;") == 1
    assert text.count("\x1b[0m") == 1
    assert count == 2
    assert text.endswith("\x1b[0m\n")


def test_interior_cell_resets_and_prints_blank():
    grid = np.array([[5, MAX, 5]], dtype=np.int32)
    sink = io.StringIO()
    count = encode_grid(grid, MAX, sink)
    color, glyph = palette(MAX)[5]
    seq = f"\x1b[38;5;{color}m"
    assert sink.getvalue() == f"{seq}{glyph}\x1b[0m {seq}{glyph}\x1b[0m\n"
    assert count == 4


def test_all_interior_row_has_no_directives():
    grid = np.full((2, 4), MAX, dtype=np.int32)
    sink = io.StringIO()
    assert encode_grid(grid, MAX, sink) == 0
    assert sink.getvalue() == "    \n    \n"


def test_colour_does_not_leak_across_rows():
    grid = np.full((3, 4), 7, dtype=np.int32)
    sink = io.StringIO()
    encode_grid(grid, MAX, sink)
    lines = sink.getvalue().split("\n")[:-1]
    assert len(lines) == 3
    for line in lines:
        assert line.startswith("\x1b[38;5;")
        assert line.endswith("\x1b[0m")


def test_changing_colours_emit_new_directive():
    lut = palette(MAX)
    a = 0
    b = next(n for n in range(1, MAX) if lut[n][0] != lut[a][0])
    grid = np.array([[a, a, b, b]], dtype=np.int32)
    sink = io.StringIO()
    assert encode_grid(grid, MAX, sink) == 3


@pytest.mark.parametrize("c", [complex(-0.8, 0.156), complex(-0.4, 0.6), 0j])
def test_matches_naive_per_glyph_strategy(c):
    width, height = 64, 20
    grid = escape_grid(c, width, height, MAX)
    sink = io.StringIO()
    count = render(c, width, height, MAX, sink)

    rows, parsed = decode(sink.getvalue())
    assert parsed == count
    assert rows == expected_cells(grid, MAX)
    # naive: one directive before every glyph
    assert count <= width * height


def test_render_writes_one_line_per_row():
    sink = io.StringIO()
    render(complex(-0.8, 0.156), 30, 9, 50, sink)
    lines = sink.getvalue().split("\n")
    assert len(lines) == 10
    assert lines[-1] == ""


def test_zero_sized_frame_writes_nothing():
    sink = io.StringIO()
    assert render(complex(-0.8, 0.156), 0, 0, 50, sink) == 0
    assert sink.getvalue() == ""


class _BrokenSink:
    def write(self, data):
        raise BrokenPipeError("sink closed")


def test_write_errors_propagate():
    with pytest.raises(BrokenPipeError):
        render(complex(-0.8, 0.156), 10, 3, 20, _BrokenSink())
