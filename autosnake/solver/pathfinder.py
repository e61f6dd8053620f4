"""
Autopilot Pathfinder - A* search from the snake head to the food.

The search runs over a read-only grid view and returns a list of moves
ordered last-move-first, so callers can pop() moves in traversal order.
When the target is unreachable a fallback strategy proposes a single move.

Open set ordering is (f, h, insertion order): lowest f first, then the
node closest to the target, then the node queued earliest.
"""
import heapq
import itertools
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..core.grid_interface import GridView
from ..core.types import Direction, Point, manhattan
from .fallback import get_fallback


logger = logging.getLogger(__name__)

NO_PARENT = -1


@dataclass
class SearchStats:
    """Bookkeeping from a single find() call."""
    expanded: int = 0
    path_length: int = 0
    used_fallback: bool = False


class AStarSearch:
    """
    One A* run over a grid view.

    Per-point g, f and parent records live in dense arrays sized to the
    grid. A point is finalized when it is popped from the open heap and is
    never expanded again. Stale heap entries are skipped on pop instead of
    being removed.
    """

    def __init__(self, grid: GridView, start: Point, target: Point):
        self.grid = grid
        self.start = start
        self.target = target

        shape = (grid.height, grid.width)
        self.g = np.zeros(shape, dtype=np.int64)
        self.f = np.zeros(shape, dtype=np.int64)
        self.parent = np.full(shape, NO_PARENT, dtype=np.int64)
        self.seen = np.zeros(shape, dtype=bool)
        self.closed = np.zeros(shape, dtype=bool)

        self.expanded = 0
        self._open: List[Tuple[int, int, int, int, int]] = []
        self._seq = itertools.count()

    def _push(self, p: Point, g: int, h: int, parent: Optional[Point]):
        f = g + h
        self.g[p.y, p.x] = g
        self.f[p.y, p.x] = f
        self.parent[p.y, p.x] = NO_PARENT if parent is None else self._index(parent)
        self.seen[p.y, p.x] = True
        heapq.heappush(self._open, (f, h, next(self._seq), p.x, p.y))

    def _index(self, p: Point) -> int:
        return p.y * self.grid.width + p.x

    def _point(self, index: int) -> Point:
        y, x = divmod(index, self.grid.width)
        return Point(x, y)

    def _can_enter(self, p: Point) -> bool:
        return p == self.target or self.grid.is_traversable(p)

    def run(self) -> Optional[List[Direction]]:
        """
        Search until the target is popped or the open set is empty.

        Returns:
            Moves last-first, or None if the target is unreachable
        """
        self._push(self.start, 0, manhattan(self.start, self.target), None)

        while self._open:
            f, _, _, x, y = heapq.heappop(self._open)
            if self.closed[y, x] or f != self.f[y, x]:
                continue

            self.closed[y, x] = True
            self.expanded += 1
            current = Point(x, y)

            if current == self.target:
                return self.reconstruct()

            g_next = int(self.g[y, x]) + 1
            for neighbor in self.grid.neighbors(current):
                if self.closed[neighbor.y, neighbor.x] or not self._can_enter(neighbor):
                    continue

                h = manhattan(neighbor, self.target)
                if self.seen[neighbor.y, neighbor.x] and g_next + h >= self.f[neighbor.y, neighbor.x]:
                    continue

                self._push(neighbor, g_next, h, current)

        return None

    def reconstruct(self) -> List[Direction]:
        """Walk parent links from target back to start."""
        moves = []
        child = self.target
        index = self.parent[child.y, child.x]
        while index != NO_PARENT:
            parent = self._point(int(index))
            moves.append(Direction.between(parent, child))
            child = parent
            index = self.parent[child.y, child.x]
        return moves


def solve(
    grid: GridView,
    start: Point,
    target: Point,
    rng: Optional[random.Random] = None,
    fallback: str = "corridor",
) -> Tuple[List[Direction], SearchStats]:
    """
    Run the search and report what it did.

    See find() for argument semantics.
    """
    grid.check_bounds(start)
    grid.check_bounds(target)
    strategy = get_fallback(fallback)

    stats = SearchStats()
    if start == target:
        return [], stats

    search = AStarSearch(grid, start, target)
    moves = search.run()
    stats.expanded = search.expanded

    if moves is None:
        moves = strategy(grid, start, rng)
        stats.used_fallback = True
        logger.debug(
            "No route from %s to %s after %d expansions, %s fallback gave %s",
            start, target, search.expanded, fallback,
            [d.name for d in moves],
        )
    else:
        logger.debug(
            "Route from %s to %s: %d moves, %d expansions",
            start, target, len(moves), search.expanded,
        )

    stats.path_length = len(moves)
    return moves, stats


def find(
    grid: GridView,
    start: Point,
    target: Point,
    rng: Optional[random.Random] = None,
    fallback: str = "corridor",
) -> List[Direction]:
    """
    Compute moves from start to target over traversable tiles.

    Args:
        grid: Read-only grid view; it is not mutated
        start: Search origin, usually the snake head
        target: Search goal, usually the food
        rng: Random source for the "random" fallback
        fallback: Strategy name used when the target is unreachable

    Returns:
        Directions ordered last-move-first. An empty list means no move
        is possible, or start already equals target.

    Raises:
        InvalidCoordinate: If start or target lies outside the grid
        ValueError: If fallback names no known strategy
    """
    moves, _ = solve(grid, start, target, rng=rng, fallback=fallback)
    return moves


class Pathfinder:
    """
    Reusable pathfinder bound to a fallback strategy and a random source.
    """

    def __init__(self, fallback: str = "corridor", rng: Optional[random.Random] = None):
        """
        Initialize the pathfinder.

        Args:
            fallback: Strategy name used when the target is unreachable
            rng: Random source threaded into the fallback
        """
        get_fallback(fallback)
        self.fallback = fallback
        self.rng = rng if rng is not None else random.Random()
        self.last_stats: Optional[SearchStats] = None

    def find(self, grid: GridView, start: Point, target: Point) -> List[Direction]:
        moves, self.last_stats = solve(
            grid, start, target, rng=self.rng, fallback=self.fallback
        )
        return moves
