"""Sparse aging Game of Life engine."""
import numpy as np
from pathlib import Path
from typing import Optional, Union
import logging

from .grid import SparseGrid
from .raster import render
from .seed import load_seed_file, parse_seed
from .stepper import Stepper
from ..utils.config import Config

# Global logger
LOG = logging.getLogger(__name__)
LOG.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
LOG.addHandler(handler)


class SparseLifeEngine:
    """Holds the current generation and advances it one complete step at a time."""

    def __init__(self, seed: Optional[SparseGrid] = None, workers: int = Config.STEP_WORKERS):
        """Initialize the engine.

        Args:
            seed: Generation 0 grid, empty when omitted
            workers: Number of partitions for the parallel step passes
        """
        self.seed = seed if seed is not None else SparseGrid()
        self.grid = self.seed
        self.generation = 0
        self.is_running = False
        self.stepper = Stepper(workers)

    def __enter__(self) -> 'SparseLifeEngine':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release stepper threads."""
        self.stepper.close()

    def load_seed(self, text: str) -> None:
        """Replace the seed with parsed text and reset to generation 0.

        Raises:
            SeedFormatError: If the text is malformed; the current grid is kept
        """
        self.seed = parse_seed(text)
        self.reset()

    def load_seed_file(self, path: Union[str, Path]) -> None:
        """Replace the seed with a seed file and reset to generation 0."""
        self.seed = load_seed_file(path)
        self.reset()

    def step(self, steps: int = 1) -> None:
        """Advance simulation by specified number of steps.

        Args:
            steps: Number of simulation steps to perform
        """
        for _ in range(steps):
            self.grid = self.stepper.step(self.grid)
            self.generation += 1
            LOG.debug(f"Step {self.generation}: population={self.grid.population}")

    def reset(self) -> None:
        """Return to the seed generation."""
        self.grid = self.seed
        self.generation = 0

    def clear(self) -> None:
        """Drop every cell, keeping the seed for a later reset."""
        self.grid = SparseGrid()
        self.generation = 0

    def render(self, width: int, height: int, center_x: int, center_y: int,
               pixels_per_cell: float, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Render the current generation; see ``core.raster.render``."""
        return render(self.grid, width, height, center_x, center_y, pixels_per_cell, out)

    @property
    def population(self) -> int:
        """Number of live cells in the current generation."""
        return self.grid.population
