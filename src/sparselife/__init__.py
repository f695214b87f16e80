"""Conway's Game of Life on an unbounded sparse grid with aging cells."""

__version__ = "0.1.0"
__author__ = "Life Game"

from .core.life_engine import SparseLifeEngine
from .core.grid import Coordinate, SparseGrid

__all__ = ['SparseLifeEngine', 'Coordinate', 'SparseGrid', '__version__']
