"""Sparse grid representation for the aging Game of Life."""
import numbers
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from ..utils.config import Config


class Coordinate(NamedTuple):
    """Cell position on the unbounded integer plane."""
    x: int
    y: int

    @property
    def packed(self) -> int:
        """Lossless int64 key for 32-bit coordinates: x in the high word, y's bits in the low word."""
        return (self.x << 32) | (self.y & 0xFFFFFFFF)

    @classmethod
    def unpack(cls, key: int) -> 'Coordinate':
        """Inverse of ``packed``."""
        return cls(key >> 32, ((key & 0xFFFFFFFF) ^ 0x80000000) - 0x80000000)

    def neighbors(self) -> List['Coordinate']:
        """Return the 8 cells at unit distance."""
        return [Coordinate(self.x + dx, self.y + dy) for dx, dy in NEIGHBOR_OFFSETS]


# Compass offsets, row by row from the top-left
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


def pack_keys(xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Vectorized ``Coordinate.packed`` over int arrays of any shape."""
    return (np.asarray(xs, dtype=np.int64) << 32) | (np.asarray(ys, dtype=np.int64) & 0xFFFFFFFF)


def unpack_keys(keys: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized ``Coordinate.unpack`` returning (xs, ys)."""
    keys = np.asarray(keys, dtype=np.int64)
    return keys >> 32, ((keys & 0xFFFFFFFF) ^ 0x80000000) - 0x80000000


class SparseGrid(Mapping):
    """Read-only mapping from Coordinate to age counter.

    A coordinate is present if and only if the cell is alive. Counters live
    in ``[1, Config.MAX_AGE]``; 1 means the cell was born (or re-affirmed) on
    the last step. Grids are never mutated: each step builds a new one.

    The cells are held as a dict, as a pair of packed-key/counter arrays, or
    both. The missing form is derived on first use.
    """

    __slots__ = ('_cells', '_view', '_keys', '_counters')

    def __init__(self, cells: Optional[Mapping] = None):
        """Create a grid from a coordinate to counter mapping.

        Args:
            cells: Mapping of (x, y) pairs to counters. Plain tuples are
                converted to Coordinate.

        Raises:
            TypeError: If a counter is not an integer
            ValueError: If a counter is outside ``[1, Config.MAX_AGE]``
        """
        owned: Dict[Coordinate, int] = {}
        for pos, value in (cells or {}).items():
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise TypeError(f"Counter at {tuple(pos)} must be an int, got {value!r}")
            if not 1 <= value <= Config.MAX_AGE:
                raise ValueError(f"Counter {value} at {tuple(pos)} outside [1, {Config.MAX_AGE}]")
            owned[Coordinate(*pos)] = int(value)
        self._set_cells(owned)
        self._keys = None
        self._counters = None

    @classmethod
    def _adopt(cls, cells: Dict[Coordinate, int]) -> 'SparseGrid':
        # Takes ownership of a dict built by the seed loader, skipping validation
        grid = cls.__new__(cls)
        grid._set_cells(cells)
        grid._keys = None
        grid._counters = None
        return grid

    @classmethod
    def _from_arrays(cls, keys: np.ndarray, counters: np.ndarray) -> 'SparseGrid':
        # Takes ownership of arrays built by the stepper, skipping validation
        grid = cls.__new__(cls)
        grid._cells = None
        grid._view = None
        grid._keys = keys
        grid._counters = counters
        keys.flags.writeable = False
        counters.flags.writeable = False
        return grid

    @classmethod
    def from_seed(cls, text: str) -> 'SparseGrid':
        """Build generation 0 from seed text (see ``core.seed``)."""
        from .seed import parse_seed
        return parse_seed(text)

    def _set_cells(self, cells: Dict[Coordinate, int]) -> None:
        self._cells = cells
        self._view = MappingProxyType(cells)

    def _dict(self) -> Dict[Coordinate, int]:
        if self._cells is None:
            xs, ys = unpack_keys(self._keys)
            self._set_cells({Coordinate(x, y): c for x, y, c in
                             zip(xs.tolist(), ys.tolist(), self._counters.tolist())})
        return self._cells

    def arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return read-only (packed keys, counters) int64 arrays."""
        if self._keys is None:
            cells = self._cells
            keys = np.fromiter((pos.packed for pos in cells), dtype=np.int64, count=len(cells))
            counters = np.fromiter(cells.values(), dtype=np.int64, count=len(cells))
            keys.flags.writeable = False
            counters.flags.writeable = False
            self._keys, self._counters = keys, counters
        return self._keys, self._counters

    def __getitem__(self, pos) -> int:
        return self._dict()[pos]

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._dict())

    def __len__(self) -> int:
        if self._cells is None:
            return len(self._keys)
        return len(self._cells)

    def __contains__(self, pos) -> bool:
        return pos in self._dict()

    def __eq__(self, other) -> bool:
        if isinstance(other, SparseGrid):
            return self._dict() == other._dict()
        return super().__eq__(other)

    def __repr__(self) -> str:
        return f"SparseGrid(population={len(self)})"

    @property
    def cells(self) -> Mapping:
        """Read-only view of the underlying mapping."""
        self._dict()
        return self._view

    @property
    def population(self) -> int:
        return len(self)

    def fresh(self) -> List[Coordinate]:
        """Coordinates whose counter is exactly 1."""
        return [pos for pos, value in self._dict().items() if value == 1]

    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Return (min_x, min_y, max_x, max_y) of live cells, or None if empty."""
        if not len(self):
            return None
        xs, ys = unpack_keys(self.arrays()[0])
        return int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max())

    def to_dict(self) -> Dict[Coordinate, int]:
        """Return a mutable copy of the cells."""
        return dict(self._dict())
