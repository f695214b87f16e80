"""Core module for the sparse aging Game of Life."""
from .grid import Coordinate, SparseGrid, NEIGHBOR_OFFSETS
from .seed import SeedFormatError, parse_seed, load_seed_file
from .stepper import Stepper, StepError, step
from .colors import color_of
from .raster import render, to_rgb_bytes
from .life_engine import SparseLifeEngine

__all__ = ['Coordinate', 'SparseGrid', 'NEIGHBOR_OFFSETS', 'SeedFormatError',
           'parse_seed', 'load_seed_file', 'Stepper', 'StepError', 'step',
           'color_of', 'render', 'to_rgb_bytes', 'SparseLifeEngine']
