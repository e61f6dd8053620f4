"""
Pytest configuration and fixtures for autosnake tests.
"""

import logging
import random
import sys
from collections import deque
from pathlib import Path

import pytest


# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(PROJECT_ROOT / "scripts"))


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handler changes made by setup_logging() during a test."""
    logger = logging.getLogger("autosnake")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    yield logger

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def rng():
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def make_grid():
    """Build a Grid from text rows ('.' free, 'S' snake, 'F' food, '#' obstacle)."""
    from autosnake.game.grid import Grid

    def _make(*rows):
        return Grid.from_rows(rows)

    return _make


@pytest.fixture
def walk():
    """
    Follow a last-move-first move list from start.

    Returns the visited points, start excluded.
    """
    def _walk(start, moves):
        pending = list(moves)
        visited = []
        p = start
        while pending:
            p = p.step(pending.pop())
            visited.append(p)
        return visited

    return _walk


@pytest.fixture
def staged_game():
    """
    Create a SnakeGame and replace its board with a hand-made one.

    The snake is given head first.
    """
    from autosnake.core.types import Tile
    from autosnake.game.grid import Grid
    from autosnake.game.snake_game import SnakeGame
    from autosnake.utils.config_loader import GameConfig

    def _stage(rows, snake, direction, seed=0):
        game = SnakeGame(GameConfig(seed=seed))
        game.grid = Grid.from_rows(rows)
        game.width = game.grid.width
        game.height = game.grid.height
        game.snake = deque(snake)
        game.direction = direction
        food = game.grid.find_tile(Tile.FOOD)
        if food is not None:
            game.food = food
        return game

    return _stage


@pytest.fixture
def sample_config():
    """Provide sample configuration data for tests."""
    return {
        'game': {
            'grid_width': 24,
            'grid_height': 16,
            'obstacles': 5,
            'no_obstacles': False,
            'autopilot': True,
            'seed': 42,
        },
        'autopilot': {
            'fallback': 'random',
        },
        'logging': {
            'level': 'DEBUG',
            'log_file': None,
        },
    }
