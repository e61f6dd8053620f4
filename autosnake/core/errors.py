"""
Exceptions raised by autosnake.
"""
from typing import Tuple


class InvalidCoordinate(ValueError):
    """A point lies outside the grid it was used with."""

    def __init__(self, point, size: Tuple[int, int]):
        self.point = point
        self.size = size
        width, height = size
        super().__init__(
            f"Point ({point.x}, {point.y}) is outside the {width}x{height} grid"
        )
