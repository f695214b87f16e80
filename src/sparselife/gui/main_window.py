"""Main application window for the sparse Game of Life."""
from PySide6.QtWidgets import (QApplication, QMainWindow, QToolBar, QLabel, QSlider,
                               QStatusBar, QFileDialog, QMessageBox)
from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QAction, QKeySequence
from pathlib import Path
import logging

# Set up global logger
LOG = logging.getLogger(__name__)
LOG.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
LOG.addHandler(handler)

from .gl_widget import LifeGLWidget
from ..core.life_engine import SparseLifeEngine
from ..core.seed import SeedFormatError
from ..utils.config import Config


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, engine: SparseLifeEngine, zoom: float = Config.DEFAULT_ZOOM):
        """Initialize the main window.

        Args:
            engine: Engine with the seed already loaded
            zoom: Initial pixels per cell
        """
        super().__init__()

        self.settings = QSettings('LifeGame', 'SparseLife')
        self.setWindowTitle(Config.WINDOW_TITLE)

        geometry = self.settings.value('window_geometry')
        if geometry:
            self.restoreGeometry(geometry)
        else:
            self.setGeometry(100, 100, Config.WINDOW_WIDTH, Config.WINDOW_HEIGHT)

        self.is_playing = False
        self.last_folder = self.settings.value('last_folder', '')

        # Create central widget
        self.engine = engine
        self.gl_widget = LifeGLWidget(engine)
        self.gl_widget.zoom = zoom
        self.setCentralWidget(self.gl_widget)

        # Connect signals
        self.gl_widget.generation_updated.connect(self.update_generation_display)
        self.gl_widget.camera_changed.connect(self.update_zoom_display)
        self.gl_widget.simulation_failed.connect(self.on_simulation_failed)

        self.create_toolbar()
        self.create_status_bar()
        self.setup_keyboard_shortcuts()

    def create_toolbar(self):
        """Create main toolbar with simulation controls."""
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.play_pause_action = QAction("▶ Play", self)
        self.play_pause_action.triggered.connect(self.toggle_simulation)
        toolbar.addAction(self.play_pause_action)

        step_action = QAction("⏭ Step", self)
        step_action.triggered.connect(self.step_simulation)
        toolbar.addAction(step_action)

        reset_action = QAction("⏹ Reset", self)
        reset_action.triggered.connect(self.reset_simulation)
        toolbar.addAction(reset_action)

        toolbar.addSeparator()

        open_action = QAction("📂 Open Seed", self)
        open_action.triggered.connect(self.open_seed)
        toolbar.addAction(open_action)

        home_action = QAction("🏠 Home", self)
        home_action.triggered.connect(self.gl_widget.reset_viewport)
        toolbar.addAction(home_action)

        toolbar.addSeparator()

        # Speed control
        toolbar.addWidget(QLabel("Speed:"))
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(1, Config.MAX_STEPS_PER_FRAME)
        self.speed_slider.setValue(Config.DEFAULT_STEPS_PER_FRAME)
        self.speed_slider.setMaximumWidth(100)
        self.speed_slider.valueChanged.connect(self.update_simulation_speed)
        toolbar.addWidget(self.speed_slider)

        self.speed_label = QLabel(f"{Config.DEFAULT_STEPS_PER_FRAME}")
        self.speed_label.setMinimumWidth(20)
        toolbar.addWidget(self.speed_label)

    def create_status_bar(self):
        """Create status bar with generation, population and zoom."""
        status_bar = QStatusBar()
        self.setStatusBar(status_bar)

        self.generation_label = QLabel()
        self.population_label = QLabel()
        self.zoom_label = QLabel()
        status_bar.addWidget(self.generation_label)
        status_bar.addWidget(self.population_label)
        status_bar.addPermanentWidget(self.zoom_label)

        self.update_generation_display(self.engine.generation, self.engine.population)
        self.update_zoom_display(self.gl_widget.zoom)

    def setup_keyboard_shortcuts(self):
        """Set up keyboard shortcuts."""
        shortcuts = [
            (Qt.Key_Space, self.toggle_simulation),
            (Qt.Key_S, self.step_simulation),
            (Qt.Key_R, self.reset_simulation),
            (Qt.Key_H, self.gl_widget.reset_viewport),
            (Qt.Key_Escape, self.close),
        ]
        for key, slot in shortcuts:
            action = QAction(self)
            action.setShortcut(QKeySequence(key))
            action.triggered.connect(slot)
            self.addAction(action)

    def toggle_simulation(self):
        """Toggle between play and pause."""
        if self.is_playing:
            self.gl_widget.stop_simulation()
            self.play_pause_action.setText("▶ Play")
        else:
            self.gl_widget.start_simulation()
            self.play_pause_action.setText("⏸ Pause")
        self.is_playing = not self.is_playing

    def step_simulation(self):
        """Advance one generation when paused."""
        if not self.is_playing:
            self.gl_widget.step_once()
            LOG.info(f"STEP {self.engine.generation}: population {self.engine.population}")

    def reset_simulation(self):
        """Return to the seed generation."""
        if self.is_playing:
            self.toggle_simulation()
        self.gl_widget.reset_simulation()

    def update_generation_display(self, generation: int, population: int):
        """Update generation and population labels."""
        self.generation_label.setText(f"Generation: {generation}")
        self.population_label.setText(f"Cells: {population}")

    def update_zoom_display(self, zoom: float):
        """Update zoom label."""
        self.zoom_label.setText(f"Zoom: {zoom:.2f} px/cell")

    def update_simulation_speed(self, value: int):
        """Update simulation speed from slider."""
        self.gl_widget.set_simulation_speed(value)
        self.speed_label.setText(str(value))

    def on_simulation_failed(self, message: str):
        """Report a failed step and quit; the simulation cannot continue."""
        LOG.error(f"Simulation failed at generation {self.engine.generation}: {message}")
        QMessageBox.critical(self, "Simulation Failed", f"The simulation stopped:\n{message}")
        self.close()
        QApplication.exit(1)

    def open_seed(self):
        """Load a seed file, keeping the current grid on failure."""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Seed", self.last_folder,
            "Seed files (*.txt *.life *.lif);;All files (*)"
        )
        if not file_path:
            return

        self.last_folder = str(Path(file_path).parent)
        self.settings.setValue('last_folder', self.last_folder)

        try:
            self.engine.load_seed_file(file_path)
        except (OSError, SeedFormatError) as e:
            QMessageBox.critical(self, "Error Loading Seed", f"Failed to load seed:\n{e}")
            return

        if self.is_playing:
            self.toggle_simulation()
        self.gl_widget.reset_viewport()
        self.update_generation_display(self.engine.generation, self.engine.population)
        self.setWindowTitle(f"{Config.WINDOW_TITLE} - {Path(file_path).name}")

    def closeEvent(self, event):
        """Save settings and stop worker threads on close."""
        self.gl_widget.stop_simulation()
        self.gl_widget.cleanup()
        self.settings.setValue('window_geometry', self.saveGeometry())
        self.engine.close()
        super().closeEvent(event)
