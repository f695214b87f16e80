"""Test the color ramp and grid rasterization.

Tests for sparselife.core.colors and sparselife.core.raster:
    - Fixed ramp for counters 1-8 and clamped fallback beyond
    - Single pixel plotting and clipping below 2 px/cell
    - Inset squares at larger zoom
    - Buffer reuse without clearing, parameter validation

Test cases:
    - test_color_ramp_fixed_values()
    - test_color_fallback_is_clamped()
    - test_color_table_matches_color_of()
    - test_single_cell_at_center()
    - test_single_pixel_clipping()
    - test_square_inset()
    - test_square_clipped_at_edge()
    - test_half_pixel_rounds_away_from_zero()
    - test_render_keeps_existing_pixels()
    - test_render_rejects_bad_parameters()
    - test_to_rgb_bytes_layout()

Run:
    pytest tests/test_raster.py -v
"""
import numpy as np
import pytest

from sparselife.core.colors import COLOR_TABLE, color_of, colors_for
from sparselife.core.grid import SparseGrid
from sparselife.core.raster import render, to_rgb_bytes


# ============================================================================
# COLOR RAMP
# ============================================================================

def test_color_ramp_fixed_values():
    assert color_of(1) == (255, 255, 255)
    assert color_of(2) == (0, 255, 255)
    assert color_of(3) == (0, 100, 255)
    assert color_of(8) == (0, 0, 100)
    blues = [color_of(v)[2] for v in range(4, 9)]
    assert blues == sorted(blues, reverse=True)


def test_color_fallback_is_clamped():
    assert color_of(9) == (0, 0, 91)
    assert color_of(100) == (0, 0, 0)
    assert color_of(101) == (0, 0, 0)
    assert color_of(500) == (0, 0, 0)
    assert color_of(-400) == (0, 0, 255)


def test_color_table_matches_color_of():
    assert COLOR_TABLE.dtype == np.uint8
    counters = np.array([-400, -155, -154, -1, 0, 1, 2, 9, 100, 255, 300])
    expected = [list(color_of(int(v))) for v in counters]
    assert colors_for(counters).tolist() == expected
    assert colors_for(np.array([-400]))[0].tolist() == [0, 0, 255]


# ============================================================================
# RASTERIZATION
# ============================================================================

def test_single_cell_at_center():
    grid = SparseGrid({(3, -2): 1})
    img = render(grid, 10, 8, 3, -2, 1.0)
    assert img.shape == (8, 10, 3)
    lit = np.argwhere(img.any(axis=2))
    assert lit.tolist() == [[4, 5]]
    assert tuple(img[4, 5]) == (255, 255, 255)


def test_single_pixel_clipping():
    grid = SparseGrid({(0, 0): 1, (100, 0): 2, (-6, 0): 3, (0, -5): 4})
    img = render(grid, 10, 10, 0, 0, 1.5)
    # (-6, 0) lands at x = -4; (100, 0) and (0, -5) land off-screen as well
    assert np.argwhere(img.any(axis=2)).tolist() == [[5, 5]]


def test_square_inset():
    grid = SparseGrid({(0, 0): 2})
    img = render(grid, 20, 20, 0, 0, 4.0)
    lit = np.argwhere(img.any(axis=2))
    # Corner at (10, 10); square spans offsets 1..3
    assert {tuple(p) for p in lit} == {(y, x) for y in range(11, 14) for x in range(11, 14)}
    assert (img[11:14, 11:14] == (0, 255, 255)).all()


def test_square_clipped_at_edge():
    grid = SparseGrid({(2, 2): 1, (-3, -3): 1})
    img = render(grid, 10, 10, 0, 0, 4.5)
    # (2, 2): corner 14 -> entirely off-screen; (-3, -3): corner -8.5 -> -9
    # square covers -8..-6, off-screen as well
    assert not img.any()
    img = render(SparseGrid({(-1, -1): 1}), 10, 10, 0, 0, 4.5)
    # corner round(0.5) = 1, square covers 2..4
    assert np.argwhere(img.any(axis=2)).min(axis=0).tolist() == [2, 2]
    assert np.argwhere(img.any(axis=2)).max(axis=0).tolist() == [4, 4]


def test_half_pixel_rounds_away_from_zero():
    grid = SparseGrid({(0, 0): 1})
    img = render(grid, 5, 5, 0, 0, 1.0)
    # 0 * 1 + 2.5 rounds to 3, not 2
    assert np.argwhere(img.any(axis=2)).tolist() == [[3, 3]]


def test_render_keeps_existing_pixels():
    buffer = np.full((6, 6, 3), 7, dtype=np.uint8)
    out = render(SparseGrid({(0, 0): 8}), 6, 6, 0, 0, 1.0, out=buffer)
    assert out is buffer
    assert tuple(buffer[3, 3]) == (0, 0, 100)
    assert (buffer[0, 0] == 7).all()
    assert int((buffer != 7).any(axis=2).sum()) == 1


def test_render_rejects_bad_parameters():
    grid = SparseGrid({(0, 0): 1})
    with pytest.raises(ValueError):
        render(grid, 0, 10, 0, 0, 1.0)
    with pytest.raises(ValueError):
        render(grid, 10, 10, 0, 0, 0.0)
    with pytest.raises(ValueError):
        render(grid, 10, 10, 0, 0, 1.0, out=np.zeros((10, 11, 3), dtype=np.uint8))


def test_to_rgb_bytes_layout():
    img = render(SparseGrid({(0, 0): 1}), 4, 2, 0, 0, 1.0)
    data = to_rgb_bytes(img)
    assert len(data) == 4 * 2 * 3
    # Pixel (x=2, y=1) is row 1, column 2
    offset = (1 * 4 + 2) * 3
    assert data[offset:offset + 3] == b'\xff\xff\xff'
    assert data.count(0) == len(data) - 3
