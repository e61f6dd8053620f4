"""
Grid model and game loop.
"""

from .grid import Grid
from .autopilot import Autopilot
from .snake_game import SnakeGame, is_in_dead_end, place_obstacle, random_empty_point

__all__ = [
    'Grid',
    'Autopilot',
    'SnakeGame',
    'is_in_dead_end',
    'place_obstacle',
    'random_empty_point',
]
