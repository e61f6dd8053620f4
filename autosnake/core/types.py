"""
Value types shared by the grid model, the pathfinder and the game loop.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple


@dataclass(frozen=True)
class Point:
    """A point on the game grid. x grows East, y grows South."""
    x: int
    y: int

    def step(self, direction: "Direction") -> "Point":
        """Return the adjacent point in the given direction."""
        dx, dy = direction.delta
        return Point(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y}


class Tile(IntEnum):
    """Occupancy state of a single grid cell."""
    FREE = 0
    SNAKE = 1
    FOOD = 2
    OBSTACLE = 3
    CRASH = 4


class Direction(IntEnum):
    """Unit moves on the grid."""
    NORTH = 0
    SOUTH = 1
    WEST = 2
    EAST = 3

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    def opposite(self) -> "Direction":
        """Return the direction pointing the other way."""
        return _OPPOSITES[self]

    @classmethod
    def between(cls, origin: Point, dest: Point) -> "Direction":
        """
        Direction of the edge from origin to an adjacent dest.

        Raises:
            ValueError: If the points are not orthogonally adjacent
        """
        dx = dest.x - origin.x
        dy = dest.y - origin.y
        for direction, delta in _DELTAS.items():
            if delta == (dx, dy):
                return direction
        raise ValueError(f"{origin} and {dest} are not adjacent")


_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
    Direction.EAST: (1, 0),
}

_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
    Direction.EAST: Direction.WEST,
}


def manhattan(a: Point, b: Point) -> int:
    """Manhattan distance |dx| + |dy| between two points."""
    return abs(a.x - b.x) + abs(a.y - b.y)
