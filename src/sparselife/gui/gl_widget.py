"""OpenGL widget for rendering the sparse Game of Life grid."""
import numpy as np
from PySide6.QtCore import Qt, QTimer, Signal, QPoint
from PySide6.QtOpenGLWidgets import QOpenGLWidget
from PySide6.QtGui import QMouseEvent, QWheelEvent
from OpenGL.GL import *
from typing import Optional

from ..core.life_engine import SparseLifeEngine
from ..core.stepper import StepError
from ..utils.config import Config


class LifeGLWidget(QOpenGLWidget):
    """OpenGL widget that presents the rasterized grid and handles pan/zoom."""

    generation_updated = Signal(int, int)  # generation, population
    camera_changed = Signal(float)  # zoom
    simulation_failed = Signal(str)  # error message

    def __init__(self, engine: SparseLifeEngine, parent=None):
        """Initialize the OpenGL widget.

        Args:
            engine: Engine holding the simulation
            parent: Parent widget
        """
        super().__init__(parent)

        self.engine = engine

        # Camera: cell at the widget center and pixels per cell
        self.zoom = Config.DEFAULT_ZOOM
        self.center_x = 0
        self.center_y = 0

        # Interaction state
        self.last_mouse_pos: Optional[QPoint] = None

        # Animation
        self.timer = QTimer()
        self.timer.timeout.connect(self.update_simulation)
        self.steps_per_frame = Config.DEFAULT_STEPS_PER_FRAME

        # Frame buffer and OpenGL texture
        self.frame = np.zeros((Config.WINDOW_HEIGHT, Config.WINDOW_WIDTH, 3), dtype=np.uint8)
        self.texture_id = None

    def initializeGL(self):
        """Initialize OpenGL context."""
        glClearColor(*(c / 255.0 for c in Config.BACKGROUND_COLOR), 1.0)

        self.texture_id = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, self.texture_id)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_NEAREST)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_NEAREST)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        # RGB rows are 3 * width bytes, not 4-byte aligned
        glPixelStorei(GL_UNPACK_ALIGNMENT, 1)

    def cleanup(self):
        """Release the OpenGL texture."""
        if self.texture_id:
            self.makeCurrent()
            glDeleteTextures([self.texture_id])
            self.texture_id = None
            self.doneCurrent()

    def resizeGL(self, width: int, height: int):
        """Handle widget resize.

        Args:
            width: New widget width
            height: New widget height
        """
        glViewport(0, 0, width, height)
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        glOrtho(0, width, height, 0, -1, 1)
        glMatrixMode(GL_MODELVIEW)

        self.frame = np.zeros((max(height, 1), max(width, 1), 3), dtype=np.uint8)

    def paintGL(self):
        """Render the current generation."""
        glClear(GL_COLOR_BUFFER_BIT)

        height, width = self.frame.shape[:2]
        self.frame[:] = Config.BACKGROUND_COLOR
        self.engine.render(width, height, self.center_x, self.center_y, self.zoom, out=self.frame)

        glBindTexture(GL_TEXTURE_2D, self.texture_id)
        glTexImage2D(GL_TEXTURE_2D, 0, GL_RGB,
                     width, height,
                     0, GL_RGB, GL_UNSIGNED_BYTE, self.frame)

        glEnable(GL_TEXTURE_2D)
        glBegin(GL_QUADS)
        glTexCoord2f(0, 0)
        glVertex2f(0, 0)
        glTexCoord2f(1, 0)
        glVertex2f(width, 0)
        glTexCoord2f(1, 1)
        glVertex2f(width, height)
        glTexCoord2f(0, 1)
        glVertex2f(0, height)
        glEnd()
        glDisable(GL_TEXTURE_2D)

    def _advance(self, steps: int) -> bool:
        """Step the engine; a failed step stops the timer and is reported once."""
        try:
            self.engine.step(steps)
        except StepError as e:
            self.stop_simulation()
            self.simulation_failed.emit(str(e))
            return False
        self.generation_updated.emit(self.engine.generation, self.engine.population)
        self.update()
        return True

    def update_simulation(self):
        """Advance the simulation and trigger a redraw.

        The frame painted afterwards shows the post-step generation.
        """
        if self.engine.is_running:
            self._advance(self.steps_per_frame)

    def start_simulation(self):
        """Start the simulation."""
        self.engine.is_running = True
        self.timer.start(1000 // Config.DEFAULT_FPS)

    def stop_simulation(self):
        """Stop the simulation."""
        self.engine.is_running = False
        self.timer.stop()

    def step_once(self):
        """Advance a single generation while paused."""
        self._advance(1)

    def reset_simulation(self):
        """Return to the seed generation."""
        self.stop_simulation()
        self.engine.reset()
        self.generation_updated.emit(0, self.engine.population)
        self.update()

    def set_simulation_speed(self, steps_per_frame: int):
        """Set simulation speed.

        Args:
            steps_per_frame: Number of steps per frame
        """
        self.steps_per_frame = min(max(1, steps_per_frame),
                                   Config.MAX_STEPS_PER_FRAME)

    def mousePressEvent(self, event: QMouseEvent):
        """Start a pan drag."""
        if event.button() == Qt.LeftButton:
            self.last_mouse_pos = event.pos()

    def mouseMoveEvent(self, event: QMouseEvent):
        """Pan the camera while dragging.

        Movement is converted to whole cells. The anchor only advances on
        axes that moved at least one cell, so slow drags still accumulate.
        """
        if self.last_mouse_pos is None:
            return
        pos = event.pos()
        dx = int((pos.x() - self.last_mouse_pos.x()) / self.zoom * Config.PAN_SPEED)
        dy = int((pos.y() - self.last_mouse_pos.y()) / self.zoom * Config.PAN_SPEED)
        self.center_x -= dx
        self.center_y -= dy
        if dx != 0 and dy != 0:
            self.last_mouse_pos = pos
        elif dx != 0:
            self.last_mouse_pos = QPoint(pos.x(), self.last_mouse_pos.y())
        elif dy != 0:
            self.last_mouse_pos = QPoint(self.last_mouse_pos.x(), pos.y())
        if dx or dy:
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent):
        """End a pan drag."""
        self.last_mouse_pos = None

    def wheelEvent(self, event: QWheelEvent):
        """Zoom by ZOOM_BASE per wheel notch."""
        notches = event.angleDelta().y() / 120
        self.zoom *= Config.ZOOM_BASE ** notches
        self.zoom = max(Config.MIN_ZOOM, min(Config.MAX_ZOOM, self.zoom))
        self.camera_changed.emit(self.zoom)
        self.update()

    def reset_viewport(self):
        """Center the camera on the live region (Home function)."""
        bounds = self.engine.grid.bounds()
        if bounds is None:
            self.center_x, self.center_y = 0, 0
        else:
            min_x, min_y, max_x, max_y = bounds
            self.center_x = (min_x + max_x) // 2
            self.center_y = (min_y + max_y) // 2
        self.zoom = Config.DEFAULT_ZOOM
        self.camera_changed.emit(self.zoom)
        self.update()
