"""
Path solving for the autopilot.
"""

from .pathfinder import Pathfinder, AStarSearch, SearchStats, find, solve
from .fallback import (
    FALLBACKS,
    corridor_fallback,
    corridor_length,
    get_fallback,
    random_fallback,
)

__all__ = [
    'Pathfinder',
    'AStarSearch',
    'SearchStats',
    'find',
    'solve',
    'FALLBACKS',
    'corridor_fallback',
    'corridor_length',
    'get_fallback',
    'random_fallback',
]
