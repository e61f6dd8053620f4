"""
Core types and interfaces for autosnake.
"""

from .types import Point, Direction, Tile, manhattan
from .errors import InvalidCoordinate
from .grid_interface import GridView

__all__ = [
    'Point',
    'Direction',
    'Tile',
    'manhattan',
    'InvalidCoordinate',
    'GridView',
]
