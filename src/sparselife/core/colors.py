"""Age to color ramp."""
import numpy as np
from typing import Tuple

RGB = Tuple[int, int, int]

# Newborn cells are white, then fade through cyan into darkening blue
AGE_COLORS = {
    1: (255, 255, 255),
    2: (0, 255, 255),
    3: (0, 100, 255),
    4: (0, 0, 255),
    5: (0, 0, 230),
    6: (0, 0, 200),
    7: (0, 0, 150),
    8: (0, 0, 100),
}


def color_of(counter: int) -> RGB:
    """Map an age counter to an RGB triple.

    Counters past the ramp use ``100 - counter`` for blue, clamped to
    ``[0, 255]`` so old cells never wrap to a bright color.
    """
    if counter in AGE_COLORS:
        return AGE_COLORS[counter]
    return (0, 0, min(max(100 - counter, 0), 255))


# Lookup table over [TABLE_MIN, TABLE_MAX]; color_of is constant beyond both ends
TABLE_MIN = 100 - 255
TABLE_MAX = 255
COLOR_TABLE = np.array([color_of(v) for v in range(TABLE_MIN, TABLE_MAX + 1)], dtype=np.uint8)


def colors_for(counters: np.ndarray) -> np.ndarray:
    """Vectorized ``color_of`` returning an (N, 3) uint8 array."""
    return COLOR_TABLE[np.clip(counters, TABLE_MIN, TABLE_MAX) - TABLE_MIN]
