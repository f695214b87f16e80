"""Projection of a sparse grid onto an RGB pixel buffer."""
import numpy as np
from typing import Optional

from .colors import colors_for
from .grid import SparseGrid, unpack_keys


def _round_half_away(values: np.ndarray) -> np.ndarray:
    # np.round rounds half to even; cell corners must round half away from zero
    return (np.sign(values) * np.floor(np.abs(values) + 0.5)).astype(np.int64)


def render(grid: SparseGrid, width: int, height: int, center_x: int, center_y: int,
           pixels_per_cell: float, out: Optional[np.ndarray] = None) -> np.ndarray:
    """Draw live cells into an RGB buffer.

    Each cell's corner lands at ``round((cell - center) * pixels_per_cell +
    size / 2)``. Below 2 pixels per cell a single pixel is plotted; otherwise
    a square spanning offsets ``1 .. int(pixels_per_cell) - 1`` from the
    corner, leaving a one pixel gap between neighbors. Anything off-screen is
    clipped.

    Args:
        grid: Cells to draw
        width: Buffer width in pixels
        height: Buffer height in pixels
        center_x: Cell X coordinate at the buffer center
        center_y: Cell Y coordinate at the buffer center
        pixels_per_cell: Zoom factor
        out: Optional (height, width, 3) uint8 buffer to draw into. It is
            not cleared. A black buffer is allocated when omitted.

    Returns:
        The (height, width, 3) uint8 buffer
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Buffer size must be positive, got {width}x{height}")
    if pixels_per_cell <= 0:
        raise ValueError(f"pixels_per_cell must be positive, got {pixels_per_cell}")
    if out is None:
        out = np.zeros((height, width, 3), dtype=np.uint8)
    elif out.shape != (height, width, 3):
        raise ValueError(f"Buffer shape {out.shape} doesn't match ({height}, {width}, 3)")

    if not len(grid):
        return out

    keys, counters = grid.arrays()
    xs, ys = unpack_keys(keys)

    px = _round_half_away((xs - center_x) * pixels_per_cell + width / 2.0)
    py = _round_half_away((ys - center_y) * pixels_per_cell + height / 2.0)
    colors = colors_for(counters)

    if pixels_per_cell < 2:
        visible = (px >= 0) & (px < width) & (py >= 0) & (py < height)
        out[py[visible], px[visible]] = colors[visible]
        return out

    side = int(pixels_per_cell)
    # Square covers [corner + 1, corner + side)
    visible = (px + side > 0) & (px + 1 < width) & (py + side > 0) & (py + 1 < height)
    for x, y, color in zip(px[visible], py[visible], colors[visible]):
        out[max(y + 1, 0):min(y + side, height), max(x + 1, 0):min(x + side, width)] = color
    return out


def to_rgb_bytes(buffer: np.ndarray) -> bytes:
    """Pack a buffer as row-major RGB, 3 bytes per pixel."""
    return np.ascontiguousarray(buffer, dtype=np.uint8).tobytes()
