"""Test the OpenGL widget's simulation timer.

Tests for sparselife.gui.gl_widget (offscreen, never shown):
    - A failed step stops the timer and is reported once
    - A successful tick advances the generation

Test cases:
    - test_step_error_stops_timer()
    - test_tick_advances_generation()

Run:
    pytest tests/test_gui.py -v
"""
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

try:
    from sparselife.gui.gl_widget import LifeGLWidget
except Exception as e:  # PyOpenGL or the Qt OpenGL module may be unavailable
    pytest.skip(f"OpenGL widget unavailable: {e}", allow_module_level=True)

from sparselife.core.life_engine import SparseLifeEngine
from sparselife.core.seed import parse_seed
from sparselife.core.stepper import StepError


@pytest.fixture(scope="module")
def app():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def engine():
    with SparseLifeEngine(parse_seed("#P 0 0\n***\n"), workers=2) as e:
        yield e


def test_step_error_stops_timer(app, engine, monkeypatch):
    def broken(grid):
        raise StepError("aging pass did not complete")

    monkeypatch.setattr(engine.stepper, 'step', broken)
    widget = LifeGLWidget(engine)
    failures = []
    widget.simulation_failed.connect(failures.append)

    widget.start_simulation()
    assert widget.timer.isActive()
    widget.update_simulation()

    assert not widget.timer.isActive()
    assert not engine.is_running
    assert failures == ["aging pass did not complete"]

    # Later ticks are no-ops once stopped
    widget.update_simulation()
    assert len(failures) == 1
    assert engine.generation == 0
    widget.deleteLater()


def test_tick_advances_generation(app, engine):
    widget = LifeGLWidget(engine)
    updates = []
    widget.generation_updated.connect(lambda gen, pop: updates.append((gen, pop)))

    widget.start_simulation()
    widget.update_simulation()
    widget.stop_simulation()

    assert engine.generation == 1
    assert updates == [(1, engine.population)]
    widget.deleteLater()
