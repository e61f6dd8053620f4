"""
Fallback moves for when the target cannot be reached.

Each strategy takes (grid, start, rng) and returns either a one-element
direction list or an empty list when start is fully enclosed.
"""
import random
from typing import Callable, Dict, List, Optional

from ..core.grid_interface import GridView
from ..core.types import Direction, Point


FallbackStrategy = Callable[[GridView, Point, Optional[random.Random]], List[Direction]]


def open_neighbors(grid: GridView, start: Point) -> List[Point]:
    """Traversable neighbors of start in canonical neighbor order."""
    return [p for p in grid.neighbors(start) if grid.is_traversable(p)]


def corridor_length(grid: GridView, start: Point, direction: Direction) -> int:
    """Count consecutive traversable tiles walking straight from start."""
    length = 0
    p = start.step(direction)
    while grid.in_bounds(p) and grid.is_traversable(p):
        length += 1
        p = p.step(direction)
    return length


def corridor_fallback(
    grid: GridView,
    start: Point,
    rng: Optional[random.Random] = None,
) -> List[Direction]:
    """
    Head into the longest straight clear corridor next to start.

    Ties go to the earliest direction in neighbor order. rng is unused and
    only accepted so all strategies share one signature.
    """
    best: Optional[Direction] = None
    best_length = 0

    for neighbor in open_neighbors(grid, start):
        direction = Direction.between(start, neighbor)
        length = corridor_length(grid, start, direction)
        if length > best_length:
            best, best_length = direction, length

    return [best] if best is not None else []


def random_fallback(
    grid: GridView,
    start: Point,
    rng: Optional[random.Random] = None,
) -> List[Direction]:
    """Pick a traversable neighbor of start uniformly at random."""
    options = open_neighbors(grid, start)
    if not options:
        return []

    if rng is None:
        rng = random.Random()

    return [Direction.between(start, rng.choice(options))]


FALLBACKS: Dict[str, FallbackStrategy] = {
    "corridor": corridor_fallback,
    "random": random_fallback,
}


def get_fallback(name: str) -> FallbackStrategy:
    """
    Look up a fallback strategy by name.

    Raises:
        ValueError: If no strategy has that name
    """
    try:
        return FALLBACKS[name]
    except KeyError:
        raise ValueError(
            f"Unknown fallback '{name}'. Available: {', '.join(sorted(FALLBACKS))}"
        ) from None
