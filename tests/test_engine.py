"""Test the simulation engine and command line parsing.

Tests for sparselife.core.life_engine and sparselife.__main__:
    - Seed loading and generation bookkeeping
    - Reset and clear
    - Failed loads keep the current grid
    - Rendering the current generation
    - Command line defaults and fatal seed errors

Test cases:
    - test_engine_steps_and_counts_generations()
    - test_reset_returns_to_seed()
    - test_clear_keeps_seed()
    - test_bad_seed_keeps_current_grid()
    - test_load_seed_file()
    - test_engine_render()
    - test_parse_args_defaults()
    - test_main_exits_on_bad_seed()
    - test_main_exits_on_non_utf8_seed()
    - test_step_error_leaves_generation()

Run:
    pytest tests/test_engine.py -v
"""
import pytest

from sparselife.__main__ import main, parse_args
from sparselife.core.life_engine import SparseLifeEngine
from sparselife.core.seed import SeedFormatError
from sparselife.core.stepper import StepError
from sparselife.utils.config import Config

GLIDER = "#P -1 -1\n.*.\n..*\n***\n"


@pytest.fixture
def engine():
    """Engine loaded with a glider."""
    with SparseLifeEngine(workers=2) as e:
        e.load_seed(GLIDER)
        yield e


def test_engine_steps_and_counts_generations(engine):
    assert engine.generation == 0
    assert engine.population == 5
    engine.step(3)
    assert engine.generation == 3
    assert engine.population > 0
    assert engine.grid is not engine.seed


def test_reset_returns_to_seed(engine):
    seed = engine.grid
    engine.step(4)
    engine.reset()
    assert engine.generation == 0
    assert engine.grid == seed


def test_clear_keeps_seed(engine):
    engine.step()
    engine.clear()
    assert engine.population == 0
    assert engine.generation == 0
    engine.reset()
    assert engine.population == 5


def test_bad_seed_keeps_current_grid(engine):
    engine.step(2)
    before = engine.grid
    with pytest.raises(SeedFormatError):
        engine.load_seed("#P one two\n*")
    assert engine.grid is before
    assert engine.generation == 2


def test_load_seed_file(engine, tmp_path):
    path = tmp_path / "block.life"
    path.write_text("#P 5 5\n**\n**\n", encoding='utf-8')
    engine.step()
    engine.load_seed_file(path)
    assert engine.generation == 0
    assert set(engine.grid) == {(5, 5), (6, 5), (5, 6), (6, 6)}


def test_engine_render(engine):
    img = engine.render(40, 30, 0, 0, 1.0)
    assert img.shape == (30, 40, 3)
    assert int(img.any(axis=2).sum()) == engine.population


def test_parse_args_defaults():
    args = parse_args([])
    assert args.seed is None
    assert args.width == Config.WINDOW_WIDTH
    assert args.height == Config.WINDOW_HEIGHT
    assert args.zoom == Config.DEFAULT_ZOOM

    args = parse_args(['seed.txt', '--zoom', '2.5'])
    assert args.seed == 'seed.txt'
    assert args.zoom == 2.5


def test_main_exits_on_bad_seed(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("#P 0 zero\n*", encoding='utf-8')
    with pytest.raises(SystemExit) as info:
        main([str(path)])
    assert info.value.code == 1


def test_main_exits_on_non_utf8_seed(tmp_path):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"#P 0 0\n*\xff\n")
    with pytest.raises(SystemExit) as info:
        main([str(path)])
    assert info.value.code == 1


def test_step_error_leaves_generation(engine, monkeypatch):
    def broken(grid):
        raise StepError("aging pass did not complete")

    monkeypatch.setattr(engine.stepper, 'step', broken)
    with pytest.raises(StepError):
        engine.step()
    assert engine.generation == 0
    assert engine.population == 5
