"""Main entry point for the sparse Game of Life application."""
import argparse
import sys

from .core.life_engine import SparseLifeEngine
from .core.seed import SeedFormatError, load_seed_file
from .utils.config import Config


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(prog='sparselife', description=__doc__)
    parser.add_argument('seed', nargs='?', help="Seed file ('#P x y' blocks, '*' marks a live cell)")
    parser.add_argument('--width', type=int, default=Config.WINDOW_WIDTH, help='Window width in pixels')
    parser.add_argument('--height', type=int, default=Config.WINDOW_HEIGHT, help='Window height in pixels')
    parser.add_argument('--zoom', type=float, default=Config.DEFAULT_ZOOM, help='Initial pixels per cell')
    return parser.parse_args(argv)


def main(argv=None):
    """Run the Game of Life application."""
    args = parse_args(argv)

    # Seed errors abort before any window is created
    seed = None
    if args.seed:
        try:
            seed = load_seed_file(args.seed)
        except (OSError, SeedFormatError):
            sys.exit(1)

    from PySide6.QtWidgets import QApplication
    from .gui.main_window import MainWindow

    app = QApplication(sys.argv[:1])
    app.setStyle('Fusion')

    engine = SparseLifeEngine(seed)
    window = MainWindow(engine, zoom=args.zoom)
    window.resize(args.width, args.height)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
