"""
Snake Game Core - round setup and per-tick movement without rendering.

The grid is the single source of truth for occupancy. The snake body is
kept alongside it as a deque, head first, so the tail can be freed in
constant time.
"""
import logging
import random
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional

from ..core.types import Direction, Point, Tile
from ..solver.pathfinder import Pathfinder
from ..utils.config_loader import GameConfig
from .autopilot import Autopilot
from .grid import Grid


logger = logging.getLogger(__name__)

SNAKE_EDGE_DISTANCE = 4
FOOD_EDGE_DISTANCE = 1
MAX_OBSTACLE_ATTEMPTS = 100


def random_empty_point(grid: Grid, distance: int, rng: random.Random) -> Optional[Point]:
    """
    Pick a random FREE point strictly more than distance cells from the edge.

    Returns:
        A point, or None if no such point exists
    """
    points = [
        p for p in grid.points_with(Tile.FREE)
        if distance < p.x < grid.width - distance - 1
        and distance < p.y < grid.height - distance - 1
    ]
    if not points:
        return None
    return rng.choice(points)


def is_in_dead_end(grid: Grid, p: Point) -> bool:
    """
    Check whether p has fewer than two FREE neighbors.

    #p#
     #
    """
    free = sum(1 for n in grid.neighbors(p) if grid.tile(n) == Tile.FREE)
    return free < 2


def place_obstacle(grid: Grid, rng: random.Random, protected: Iterable[Point] = ()) -> bool:
    """
    Place one obstacle that does not box a neighbor into a dead end.

    FREE and FOOD neighbors are checked, as are neighbors listed in
    protected (e.g. the snake head, whose tile is SNAKE).

    Args:
        grid: Grid to modify
        rng: Random source
        protected: Extra points that must keep two FREE neighbors

    Returns:
        True if an obstacle was placed
    """
    protected = set(protected)
    for _ in range(MAX_OBSTACLE_ATTEMPTS):
        p = random_empty_point(grid, 0, rng)
        if p is None:
            return False

        grid.set_tile(p, Tile.OBSTACLE)
        if any(
            (grid.tile(n) in (Tile.FREE, Tile.FOOD) or n in protected)
            and is_in_dead_end(grid, n)
            for n in grid.neighbors(p)
        ):
            grid.set_tile(p, Tile.FREE)
            continue
        return True

    return False


class SnakeGame:
    """
    Core Snake game logic.

    The snake moves on a walled grid with scattered obstacles and tries to
    eat food. Eating grows the snake by one segment. The round ends when
    the head enters a tile that is neither FREE nor FOOD, or when no free
    tile is left for new food.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None,
                 autopilot: Optional[Autopilot] = None):
        """
        Initialize the game.

        Args:
            config: Round setup (defaults to GameConfig())
            rng: Random source (defaults to one seeded from config.seed)
            autopilot: Autopilot used by tick() (defaults to one sharing rng)
        """
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.autopilot = autopilot if autopilot is not None else Autopilot(Pathfinder(rng=self.rng))

        self.width = self.config.grid_width
        self.height = self.config.grid_height

        # Game state (initialized in reset)
        self.grid: Grid = Grid.with_border(self.width, self.height)
        self.snake: Deque[Point] = deque()
        self.food: Point = Point(0, 0)
        self.direction: Direction = Direction.EAST
        self.steps: int = 0
        self.game_over: bool = False
        self.crashed: bool = False
        self.won: bool = False

        self.reset()

    @property
    def head(self) -> Point:
        return self.snake[0]

    @property
    def length(self) -> int:
        return len(self.snake)

    def reset(self) -> Dict[str, Any]:
        """
        Start a new round and return its initial state.

        Returns:
            Dictionary containing the initial game state
        """
        self.grid = Grid.with_border(self.width, self.height)
        self.steps = 0
        self.game_over = False
        self.crashed = False
        self.won = False
        self.autopilot.reset()

        self._spawn_snake()
        self._spawn_food()

        if not self.config.no_obstacles:
            placed = sum(
                1 for _ in range(self.config.obstacles)
                if place_obstacle(self.grid, self.rng, protected=(self.head,))
            )
            if placed < self.config.obstacles:
                logger.warning("Placed %d of %d obstacles", placed, self.config.obstacles)

        logger.debug("New %dx%d round, head at %s, food at %s",
                     self.width, self.height, self.head, self.food)
        return self.get_state()

    def _spawn_snake(self):
        tail = random_empty_point(self.grid, SNAKE_EDGE_DISTANCE, self.rng)
        if tail is None:
            raise ValueError(f"Grid {self.width}x{self.height} is too small to spawn the snake")

        self.direction = self.rng.choice(list(Direction))
        head = tail.step(self.direction)

        self.snake = deque([head, tail])
        for p in self.snake:
            self.grid.set_tile(p, Tile.SNAKE)

    def _spawn_food(self) -> bool:
        food = random_empty_point(self.grid, FOOD_EDGE_DISTANCE, self.rng)
        if food is None:
            # Fallback: any free cell inside the border
            free = self.grid.points_with(Tile.FREE)
            if not free:
                return False
            food = self.rng.choice(free)

        self.food = food
        self.grid.set_tile(food, Tile.FOOD)
        return True

    def snake_direction(self) -> Direction:
        """Heading derived from the first two segments."""
        return Direction.between(self.snake[1], self.snake[0])

    def step(self, direction: Optional[Direction] = None) -> bool:
        """
        Advance the snake by one tile.

        Args:
            direction: New heading; ignored if it reverses the current one

        Returns:
            True if the round is over
        """
        if self.game_over:
            return True

        if direction is not None and direction != self.direction.opposite():
            self.direction = direction

        self.steps += 1
        next_head = self.head.step(self.direction)

        if not self.grid.in_bounds(next_head) or not self.grid.is_traversable(next_head):
            if self.grid.in_bounds(next_head):
                self.grid.set_tile(next_head, Tile.CRASH)
            self.crashed = True
            self.game_over = True
            logger.info("Crashed at %s after %d steps, length %d",
                        next_head, self.steps, self.length)
            return True

        ate = self.grid.tile(next_head) == Tile.FOOD

        self.snake.appendleft(next_head)
        self.grid.set_tile(next_head, Tile.SNAKE)

        if ate:
            if not self._spawn_food():
                self.won = True
                self.game_over = True
                logger.info("Board filled after %d steps, length %d", self.steps, self.length)
                return True
        else:
            tail = self.snake.pop()
            self.grid.set_tile(tail, Tile.FREE)

        return False

    def tick(self) -> bool:
        """
        Run one tick, letting the autopilot steer when it is enabled.

        Returns:
            True if the round is over
        """
        direction = None
        if self.config.autopilot and not self.game_over:
            direction = self.autopilot.next_direction(self.grid, self.head, self.food)
        return self.step(direction)

    def get_state(self) -> Dict[str, Any]:
        """
        Get current game state for display or inspection.

        Returns:
            Dictionary containing full game state
        """
        return {
            "snake": [p.to_dict() for p in self.snake],
            "food": self.food.to_dict(),
            "direction": int(self.direction),
            "steps": self.steps,
            "length": self.length,
            "game_over": self.game_over,
            "crashed": self.crashed,
            "won": self.won,
            "width": self.width,
            "height": self.height,
        }

    def board(self) -> List[str]:
        """Text rows of the current grid."""
        return self.grid.to_rows()
