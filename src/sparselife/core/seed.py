"""Plain-text seed format loader.

A seed document is a sequence of blocks. Each block starts with a marker
line ``#P <x> <y>`` giving the block origin, followed by rows of text where
``*`` at column ``j`` of row ``i`` is a live cell at ``(x + j, y + i)``.
Anything before the first marker and any other character is ignored.
"""
import logging
from pathlib import Path
from typing import Dict, Tuple, Union

from .grid import Coordinate, SparseGrid
from ..utils.config import Config

LOG = logging.getLogger(__name__)


class SeedFormatError(ValueError):
    """Raised when a block origin cannot be parsed."""


def _parse_origin(line: str, block: int) -> Tuple[int, int]:
    fields = line.split()
    if len(fields) < 2:
        raise SeedFormatError(f"Block {block}: expected '{Config.SEED_MARKER} <x> <y>', got {line.strip()!r}")
    try:
        return int(fields[0]), int(fields[1])
    except ValueError as e:
        raise SeedFormatError(f"Block {block}: invalid origin {line.strip()!r}") from e


def parse_seed(text: str) -> SparseGrid:
    """Parse seed text into a generation 0 grid.

    Args:
        text: Seed document

    Returns:
        Grid with every marked cell at counter 1

    Raises:
        SeedFormatError: If any block origin is malformed. No partial grid
            is returned.
    """
    cells: Dict[Coordinate, int] = {}
    blocks = text.split(Config.SEED_MARKER)[1:]
    for block, chunk in enumerate(blocks):
        # Rows break on \n only; a trailing \r from \r\n endings is dropped
        lines = [line[:-1] if line.endswith("\r") else line for line in chunk.split("\n")]
        origin_x, origin_y = _parse_origin(lines[0], block)
        for i, row in enumerate(lines[1:]):
            for j, char in enumerate(row):
                if char == Config.LIVE_CHAR:
                    cells[Coordinate(origin_x + j, origin_y + i)] = 1
    return SparseGrid._adopt(cells)


def load_seed_file(path: Union[str, Path]) -> SparseGrid:
    """Read and parse a seed file.

    Args:
        path: Path to a UTF-8 seed file

    Returns:
        Generation 0 grid

    Raises:
        OSError: If the file cannot be read
        SeedFormatError: If the file is not UTF-8 or is malformed
    """
    path = Path(path)
    try:
        # Decode bytes directly; text mode would turn a lone \r into a row break
        grid = parse_seed(path.read_bytes().decode('utf-8'))
    except UnicodeDecodeError as e:
        LOG.error(f"Failed to load seed {path.name}: not UTF-8 text ({e})")
        raise SeedFormatError(f"{path.name} is not UTF-8 text: {e}") from e
    except (OSError, SeedFormatError) as e:
        LOG.error(f"Failed to load seed {path.name}: {e}")
        raise
    LOG.info(f"Loaded seed {path.name}: {grid.population} cells")
    return grid
