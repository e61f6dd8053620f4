"""
Autopilot - steer the snake along cached pathfinder routes.
"""
import logging
from typing import List, Optional

from ..core.types import Direction, Point
from ..solver.pathfinder import Pathfinder
from .grid import Grid


logger = logging.getLogger(__name__)


class Autopilot:
    """
    Consumes one cached move per tick and re-plans when the cache runs dry.
    """

    def __init__(self, pathfinder: Optional[Pathfinder] = None):
        self.pathfinder = pathfinder if pathfinder is not None else Pathfinder()
        self._moves: List[Direction] = []
        self.replans = 0

    @property
    def pending(self) -> int:
        """Number of cached moves not yet consumed."""
        return len(self._moves)

    def reset(self):
        """Drop cached moves, e.g. when a new round starts."""
        self._moves = []
        self.replans = 0

    def next_direction(self, grid: Grid, head: Point, food: Point) -> Optional[Direction]:
        """
        Get the move for this tick.

        Args:
            grid: The live grid; a snapshot is taken before searching
            head: Snake head position
            food: Food position

        Returns:
            The next direction, or None to hold the current heading
        """
        if not self._moves:
            self._moves = self.pathfinder.find(grid.snapshot(), head, food)
            self.replans += 1
            if not self._moves:
                logger.debug("Autopilot has no move from %s", head)
                return None

        return self._moves.pop()
