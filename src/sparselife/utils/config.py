"""Configuration constants for the sparse Game of Life application."""
from dataclasses import dataclass
from typing import Tuple


@dataclass
class Config:
    """Application configuration."""

    # Window settings
    WINDOW_WIDTH: int = 800
    WINDOW_HEIGHT: int = 600
    WINDOW_TITLE: str = "Game of Life"

    # Camera settings
    DEFAULT_ZOOM: float = 5.0      # Pixels per cell
    ZOOM_BASE: float = 1.5         # Multiplier per wheel notch
    MIN_ZOOM: float = 0.05
    MAX_ZOOM: float = 200.0
    PAN_SPEED: float = 1.3         # Cells moved per (pixel / zoom) of drag

    # Simulation settings
    DEFAULT_FPS: int = 60
    MAX_STEPS_PER_FRAME: int = 10
    DEFAULT_STEPS_PER_FRAME: int = 1
    MAX_AGE: int = 100             # Cells at this age die on the next step
    STEP_WORKERS: int = 4          # Partitions for the parallel passes

    # Seed format
    SEED_MARKER: str = "#P"
    LIVE_CHAR: str = "*"

    # Colors (RGB)
    BACKGROUND_COLOR: Tuple[int, int, int] = (0, 0, 0)
