"""
Abstract grid view consumed by the pathfinder.

Anything exposing a width, a height and a tile lookup can be searched.
Adjacency and traversability are derived from those three.
"""

from abc import ABC, abstractmethod
from typing import List

from .errors import InvalidCoordinate
from .types import Point, Tile


# Canonical neighbor order: West, East, South, North
NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, 1), (0, -1))

TRAVERSABLE = frozenset({Tile.FREE, Tile.FOOD})


class GridView(ABC):
    """
    Read-only view of a rectangular tile field.
    """

    @property
    @abstractmethod
    def width(self) -> int:
        """Number of columns."""
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        """Number of rows."""
        pass

    @abstractmethod
    def tile(self, p: Point) -> Tile:
        """
        Get the tile at a point.

        Args:
            p: Point to look up

        Returns:
            The tile stored at p

        Raises:
            InvalidCoordinate: If p lies outside the grid
        """
        pass

    def in_bounds(self, p: Point) -> bool:
        return 0 <= p.x < self.width and 0 <= p.y < self.height

    def check_bounds(self, p: Point) -> None:
        """Raise InvalidCoordinate if p lies outside the grid."""
        if not self.in_bounds(p):
            raise InvalidCoordinate(p, (self.width, self.height))

    def neighbors(self, p: Point) -> List[Point]:
        """
        In-bounds orthogonal neighbors of p.

        The order is always West, East, South, North. Fallback tie-breaking
        depends on it.
        """
        result = []
        for dx, dy in NEIGHBOR_OFFSETS:
            x, y = p.x + dx, p.y + dy
            if 0 <= x < self.width and 0 <= y < self.height:
                result.append(Point(x, y))
        return result

    def is_traversable(self, p: Point) -> bool:
        """True iff the tile at p is FREE or FOOD."""
        return self.tile(p) in TRAVERSABLE
