"""Generation transition for the aging Game of Life.

One step is a fork-join over an immutable snapshot of the previous grid:

* the aging pass runs as a background task, incrementing every counter and
  dropping cells that have reached ``Config.MAX_AGE``;
* meanwhile the caller counts, in parallel partitions, how many freshly born
  cells (counter 1) touch each coordinate;
* the caller then waits on the aging result and applies births and
  survivals on top of it.

Only counter-1 cells act as neighbors, and only counter-1 cells can survive
on a count of 2. Older cells persist through aging alone.

Cells travel as int64 arrays of packed coordinates (``Coordinate.packed``)
and counters; each partition is a numpy kernel, so partitions overlap on
the pool threads.
"""
import functools
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Sequence, Tuple, TypeVar

import numpy as np

from .grid import NEIGHBOR_OFFSETS, SparseGrid, pack_keys, unpack_keys
from ..utils.config import Config

LOG = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')
Cells = Tuple[np.ndarray, np.ndarray]  # (packed keys, counters or counts)

_DX = np.array([dx for dx, _ in NEIGHBOR_OFFSETS], dtype=np.int64)
_DY = np.array([dy for _, dy in NEIGHBOR_OFFSETS], dtype=np.int64)


class StepError(RuntimeError):
    """Raised when a step cannot be completed (e.g. the aging task failed)."""


def _empty() -> Cells:
    return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64)


def partition_bounds(length: int, parts: int) -> List[slice]:
    """Split ``range(length)`` into at most ``parts`` contiguous, non-empty slices."""
    parts = max(1, min(parts, length))
    size, extra = divmod(length, parts)
    bounds = []
    start = 0
    for i in range(parts):
        end = start + size + (1 if i < extra else 0)
        if end > start:
            bounds.append(slice(start, end))
        start = end
    return bounds


def partition(items: Sequence[T], parts: int) -> List[Sequence[T]]:
    """Split items into at most ``parts`` contiguous, non-empty chunks."""
    return [items[s] for s in partition_bounds(len(items), parts)]


def age_cells(keys: np.ndarray, counters: np.ndarray) -> Cells:
    """Increment every counter, dropping cells already at the age cap."""
    alive = counters < Config.MAX_AGE
    return keys[alive], counters[alive] + 1


def count_neighbors(keys: np.ndarray) -> Cells:
    """Fold one partition into unique neighbor keys and their counts."""
    xs, ys = unpack_keys(keys)
    neighbors = pack_keys(xs[:, None] + _DX, ys[:, None] + _DY).ravel()
    return np.unique(neighbors, return_counts=True)


def merge_counts(left: Cells, right: Cells) -> Cells:
    """Sum counts for shared keys; commutative and associative."""
    keys, inverse = np.unique(np.concatenate([left[0], right[0]]), return_inverse=True)
    counts = np.bincount(inverse.ravel(), weights=np.concatenate([left[1], right[1]]),
                         minlength=len(keys))
    return keys, counts.astype(np.int64)


def _concat_aged(left: Cells, right: Cells) -> Cells:
    # Partitions hold disjoint keys
    return np.concatenate([left[0], right[0]]), np.concatenate([left[1], right[1]])


class Stepper:
    """Computes successive generations using a thread pool."""

    def __init__(self, workers: int = Config.STEP_WORKERS):
        """Initialize the stepper.

        Args:
            workers: Number of partitions for the parallel passes
        """
        self.workers = max(1, workers)
        # Partition work runs here; the aging task gets its own thread so it
        # never waits on a pool it is queued in.
        self._pool = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix='life-part')
        self._aging = ThreadPoolExecutor(max_workers=1, thread_name_prefix='life-aging')

    def __enter__(self) -> 'Stepper':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut down worker threads."""
        self._aging.shutdown(wait=True)
        self._pool.shutdown(wait=True)

    def _map_reduce(self, fn: Callable[..., R], chunks: Sequence[tuple],
                    reduce: Callable[[R, R], R], initial: R) -> R:
        futures = [self._pool.submit(fn, *chunk) for chunk in chunks]
        return functools.reduce(reduce, (f.result() for f in futures), initial)

    def _age(self, keys: np.ndarray, counters: np.ndarray) -> Cells:
        # Runs on the aging thread; partitions are independent so order is irrelevant
        chunks = [(keys[s], counters[s]) for s in partition_bounds(len(keys), self.workers)]
        return self._map_reduce(age_cells, chunks, _concat_aged, _empty())

    def step(self, grid: SparseGrid) -> SparseGrid:
        """Compute the next generation.

        Args:
            grid: Current generation; read-only for the duration of the step

        Returns:
            Newly built next generation

        Raises:
            StepError: If the aging task failed
        """
        # Read-only arrays: both passes see the same snapshot without copying
        keys, counters = grid.arrays()
        aged_future: Future = self._aging.submit(self._age, keys, counters)

        fresh = keys[counters == 1]
        chunks = [(fresh[s],) for s in partition_bounds(len(fresh), self.workers)]
        candidates, counts = self._map_reduce(count_neighbors, chunks, merge_counts, _empty())
        band = (counts > 1) & (counts < 4)
        candidates, counts = candidates[band], counts[band]

        try:
            aged_keys, aged_counters = aged_future.result()
        except Exception as e:
            LOG.error(f"Aging task failed: {e}")
            raise StepError(f"Aging pass did not complete: {e}") from e

        born = candidates[(counts == 3) | ((counts == 2) & np.isin(candidates, fresh))]
        kept = ~np.isin(aged_keys, born)
        next_keys = np.concatenate([aged_keys[kept], born])
        next_counters = np.concatenate([aged_counters[kept], np.ones(len(born), dtype=np.int64)])
        return SparseGrid._from_arrays(next_keys, next_counters)


def step(grid: SparseGrid, workers: int = Config.STEP_WORKERS) -> SparseGrid:
    """One-off step with a temporary Stepper."""
    with Stepper(workers) as stepper:
        return stepper.step(grid)
