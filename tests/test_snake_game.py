"""
Tests for round setup and per-tick movement.
"""

import random

import pytest


OPEN_BOARD = [
    "#######",
    "#.....#",
    "#.SS.F#",
    "#.....#",
    "#######",
]


class TestRoundSetup:
    """Tests for reset() and spawning."""

    def test_reset_creates_valid_state(self):
        """Test a new round has a two-segment snake, one food and the obstacles."""
        from autosnake.core.types import Direction, Tile
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        game = SnakeGame(GameConfig(seed=1))
        border = 2 * game.width + 2 * (game.height - 2)

        assert game.length == 2
        assert game.grid.count(Tile.SNAKE) == 2
        assert game.grid.count(Tile.FOOD) == 1
        assert game.grid.find_tile(Tile.FOOD) == game.food
        assert game.grid.count(Tile.OBSTACLE) == border + game.config.obstacles
        assert Direction.between(game.snake[1], game.snake[0]) == game.direction
        assert game.snake_direction() == game.direction

    def test_no_obstacles(self):
        """Test only the border is placed when obstacles are disabled."""
        from autosnake.core.types import Tile
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        game = SnakeGame(GameConfig(grid_width=14, grid_height=12, no_obstacles=True, seed=3))

        assert game.grid.count(Tile.OBSTACLE) == 2 * 14 + 2 * 10

    def test_spawn_distances(self):
        """Test the snake spawns away from the edge and food inside the border."""
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        for seed in range(10):
            game = SnakeGame(GameConfig(seed=seed))
            tail = game.snake[1]

            assert 4 < tail.x < game.width - 5
            assert 4 < tail.y < game.height - 5
            assert 1 < game.food.x < game.width - 2
            assert 1 < game.food.y < game.height - 2

    def test_same_seed_same_round(self):
        """Test rounds are reproducible from the seed."""
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        a = SnakeGame(GameConfig(seed=21))
        b = SnakeGame(GameConfig(seed=21))

        assert a.board() == b.board()
        assert list(a.snake) == list(b.snake)

    def test_reset_clears_round(self):
        """Test reset starts over after a crash."""
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        game = SnakeGame(GameConfig(seed=2, autopilot=False))
        while not game.step():
            pass

        state = game.reset()

        assert state["game_over"] is False
        assert state["steps"] == 0
        assert state["length"] == 2

    def test_grid_too_small(self):
        """Test a grid without room for the snake is rejected."""
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        with pytest.raises(ValueError, match="too small"):
            SnakeGame(GameConfig(grid_width=8, grid_height=8))

    def test_get_state(self):
        """Test the state dictionary."""
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        game = SnakeGame(GameConfig(seed=4))
        state = game.get_state()

        assert state["snake"] == [p.to_dict() for p in game.snake]
        assert state["food"] == game.food.to_dict()
        assert state["direction"] == int(game.direction)
        assert state["width"] == 20
        assert state["height"] == 15


class TestObstaclePlacement:
    """Tests for dead-end avoiding obstacle placement."""

    def test_dead_end_empty_grid(self):
        """Test nothing is a dead end on an empty grid."""
        from autosnake.core.types import Point
        from autosnake.game.grid import Grid
        from autosnake.game.snake_game import is_in_dead_end

        grid = Grid(3, 3)

        assert not is_in_dead_end(grid, Point(0, 0))
        assert not is_in_dead_end(grid, Point(1, 1))

    def test_dead_end_between_obstacles(self, make_grid):
        """Test a cell squeezed between two obstacles is a dead end."""
        from autosnake.core.types import Point
        from autosnake.game.snake_game import is_in_dead_end

        grid = make_grid(
            "#.#",
            "...",
            "...",
        )

        assert is_in_dead_end(grid, Point(1, 0))
        for p in (Point(0, 1), Point(0, 2), Point(1, 1), Point(1, 2), Point(2, 1), Point(2, 2)):
            assert not is_in_dead_end(grid, p)

    def test_dead_end_with_border(self, make_grid):
        """Test border obstacles count toward dead ends."""
        from autosnake.core.types import Point
        from autosnake.game.snake_game import is_in_dead_end

        grid = make_grid(
            "####",
            "##.#",
            "#..#",
            "####",
        )

        assert is_in_dead_end(grid, Point(2, 1))
        assert not is_in_dead_end(grid, Point(2, 2))

    def test_placement_never_creates_dead_ends(self):
        """Test each new obstacle leaves its free neighbors with two exits."""
        from autosnake.core.types import Tile
        from autosnake.game.grid import Grid
        from autosnake.game.snake_game import is_in_dead_end, place_obstacle

        grid = Grid.with_border(12, 12)
        rng = random.Random(8)

        for _ in range(15):
            before = set(grid.points_with(Tile.OBSTACLE))
            assert place_obstacle(grid, rng)
            (placed,) = set(grid.points_with(Tile.OBSTACLE)) - before

            for n in grid.neighbors(placed):
                if grid.tile(n) == Tile.FREE:
                    assert not is_in_dead_end(grid, n)

    def test_placement_keeps_food_reachable(self):
        """Test an obstacle is never placed where it would box in the food."""
        from autosnake.game.grid import Grid
        from autosnake.game.snake_game import place_obstacle

        rows = ["#####", "#F.##", "#.###", "#####"]
        grid = Grid.from_rows(rows)

        assert place_obstacle(grid, random.Random(0)) is False
        assert grid.to_rows() == rows

    def test_placement_keeps_protected_points_open(self):
        """Test protected points such as the head keep two free exits."""
        from autosnake.core.types import Point
        from autosnake.game.grid import Grid
        from autosnake.game.snake_game import place_obstacle

        rows = ["#####", "#S.##", "#.###", "#####"]

        grid = Grid.from_rows(rows)
        assert place_obstacle(grid, random.Random(0), protected=[Point(1, 1)]) is False
        assert grid.to_rows() == rows

        grid = Grid.from_rows(rows)
        assert place_obstacle(grid, random.Random(0)) is True

    def test_placement_fails_on_full_grid(self):
        """Test placement gives up when no free cell exists."""
        from autosnake.core.types import Tile
        from autosnake.game.grid import Grid
        from autosnake.game.snake_game import place_obstacle

        grid = Grid(3, 3)
        grid.fill(Tile.OBSTACLE)

        assert place_obstacle(grid, random.Random(0)) is False

    def test_random_empty_point_respects_distance(self):
        """Test candidate points stay strictly inside the requested margin."""
        from autosnake.game.grid import Grid
        from autosnake.game.snake_game import random_empty_point

        grid = Grid(12, 12)
        rng = random.Random(0)

        for _ in range(20):
            p = random_empty_point(grid, 4, rng)
            assert 5 <= p.x <= 6
            assert 5 <= p.y <= 6

        assert random_empty_point(Grid(5, 5), 4, rng) is None


class TestStep:
    """Tests for moving the snake one tile."""

    def test_moves_forward(self, staged_game):
        """Test the head advances and the tail is freed."""
        from autosnake.core.types import Direction, Point, Tile

        game = staged_game(OPEN_BOARD, [Point(3, 2), Point(2, 2)], Direction.EAST)

        assert game.step() is False
        assert game.head == Point(4, 2)
        assert game.length == 2
        assert game.steps == 1
        assert game.grid.tile(Point(4, 2)) == Tile.SNAKE
        assert game.grid.tile(Point(2, 2)) == Tile.FREE

    def test_eating_grows_and_respawns_food(self, staged_game):
        """Test food adds a segment and moves elsewhere."""
        from autosnake.core.types import Direction, Point, Tile

        game = staged_game(OPEN_BOARD, [Point(3, 2), Point(2, 2)], Direction.EAST)

        game.step()
        assert game.step() is False

        assert game.head == Point(5, 2)
        assert game.length == 3
        assert game.food == Point(2, 2)
        assert game.grid.count(Tile.FOOD) == 1
        assert game.grid.count(Tile.SNAKE) == 3

    def test_reverse_is_ignored(self, staged_game):
        """Test a 180 degree turn keeps the current heading."""
        from autosnake.core.types import Direction, Point

        game = staged_game(OPEN_BOARD, [Point(3, 2), Point(2, 2)], Direction.EAST)

        game.step(Direction.WEST)

        assert game.direction == Direction.EAST
        assert game.head == Point(4, 2)

    def test_turn(self, staged_game):
        """Test a quarter turn changes heading."""
        from autosnake.core.types import Direction, Point

        game = staged_game(OPEN_BOARD, [Point(3, 2), Point(2, 2)], Direction.EAST)

        game.step(Direction.NORTH)

        assert game.direction == Direction.NORTH
        assert game.head == Point(3, 1)

    def test_crash_into_wall(self, staged_game):
        """Test running into an obstacle ends the round and marks the crash."""
        from autosnake.core.types import Direction, Point, Tile

        game = staged_game(
            [
                "#######",
                "#.....#",
                "#...SS#",
                "#.....#",
                "#######",
            ],
            [Point(5, 2), Point(4, 2)],
            Direction.EAST,
        )

        assert game.step() is True
        assert game.crashed
        assert not game.won
        assert game.grid.tile(Point(6, 2)) == Tile.CRASH

        assert game.step(Direction.NORTH) is True
        assert game.steps == 1
        assert game.head == Point(5, 2)

    def test_crash_into_body(self, staged_game):
        """Test running into the snake's own body ends the round."""
        from autosnake.core.types import Direction, Point, Tile

        game = staged_game(
            [
                "#######",
                "#.SS..#",
                "#SSS..#",
                "#.....#",
                "#######",
            ],
            [Point(2, 1), Point(3, 1), Point(3, 2), Point(2, 2), Point(1, 2)],
            Direction.WEST,
        )

        assert game.step(Direction.SOUTH) is True
        assert game.crashed
        assert game.grid.tile(Point(2, 2)) == Tile.CRASH

    def test_filling_the_board_wins(self, staged_game):
        """Test eating the last food with no free tile left ends the round as won."""
        from autosnake.core.types import Direction, Point

        game = staged_game(
            [
                "#####",
                "#SSF#",
                "#####",
            ],
            [Point(2, 1), Point(1, 1)],
            Direction.EAST,
        )

        assert game.step() is True
        assert game.won
        assert not game.crashed
        assert game.length == 3


class TestTick:
    """Tests for autopilot-driven ticks."""

    def test_autopilot_reaches_food(self, staged_game):
        """Test the autopilot eats the food in the shortest number of ticks."""
        from autosnake.core.types import Direction, Point

        game = staged_game(
            [
                "########",
                "#......#",
                "#.SS...#",
                "#......#",
                "#....F.#",
                "########",
            ],
            [Point(3, 2), Point(2, 2)],
            Direction.EAST,
        )

        for _ in range(4):
            assert game.tick() is False

        assert game.head == Point(5, 4)
        assert game.length == 3
        assert game.steps == 4
        assert game.autopilot.pending == 0
        assert game.autopilot.replans == 1

    def test_tick_without_autopilot_holds_heading(self, staged_game):
        """Test ticks keep going straight when the autopilot is off."""
        from autosnake.core.types import Direction, Point

        game = staged_game(OPEN_BOARD, [Point(3, 2), Point(2, 2)], Direction.EAST)
        game.config.autopilot = False

        game.tick()

        assert game.head == Point(4, 2)
        assert game.autopilot.replans == 0

    def test_seeded_round_eats(self):
        """Test a seeded autopilot round eats at least once."""
        from autosnake.game.snake_game import SnakeGame
        from autosnake.utils.config_loader import GameConfig

        game = SnakeGame(GameConfig(seed=10))
        while not game.game_over and game.steps < 400:
            game.tick()

        assert game.length > 2
