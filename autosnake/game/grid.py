"""
Grid Model - numpy-backed tile field for one round of the game.

Cells are stored as int8 tile codes indexed [y, x], so a row of the
array is a row of the board as it appears on screen.
"""
from typing import Iterable, List, Optional

import numpy as np

from ..core.grid_interface import GridView
from ..core.types import Point, Tile


TILE_SYMBOLS = {
    Tile.FREE: ".",
    Tile.SNAKE: "S",
    Tile.FOOD: "F",
    Tile.OBSTACLE: "#",
    Tile.CRASH: "X",
}

SYMBOL_TILES = {symbol: tile for tile, symbol in TILE_SYMBOLS.items()}


class Grid(GridView):
    """
    Rectangular tile field with fixed dimensions.

    The game loop owns and mutates a Grid between ticks. The pathfinder
    only ever sees a read-only snapshot of it.
    """

    def __init__(self, width: int, height: int, cells: Optional[np.ndarray] = None):
        """
        Initialize the grid.

        Args:
            width: Grid width in cells
            height: Grid height in cells
            cells: Optional existing (height, width) array of tile codes
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self._width = width
        self._height = height

        if cells is None:
            cells = np.full((height, width), Tile.FREE, dtype=np.int8)
        elif cells.shape != (height, width):
            raise ValueError(
                f"Cell array shape {cells.shape} does not match {width}x{height}"
            )
        self.cells = cells

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def read_only(self) -> bool:
        return not self.cells.flags.writeable

    def tile(self, p: Point) -> Tile:
        self.check_bounds(p)
        return Tile(int(self.cells[p.y, p.x]))

    def set_tile(self, p: Point, tile: Tile):
        """Store a tile at p."""
        self.check_bounds(p)
        self.cells[p.y, p.x] = tile

    def fill(self, tile: Tile):
        self.cells[:] = tile

    def snapshot(self) -> "Grid":
        """
        Return a read-only copy of the grid.

        Later mutations of this grid are not visible through the snapshot.
        """
        cells = self.cells.copy()
        cells.flags.writeable = False
        return Grid(self._width, self._height, cells)

    def find_tile(self, tile: Tile) -> Optional[Point]:
        """Return the first point holding tile, scanning columns left to right."""
        xs, ys = np.nonzero(self.cells.T == tile)
        if len(xs) == 0:
            return None
        return Point(int(xs[0]), int(ys[0]))

    def points_with(self, tile: Tile) -> List[Point]:
        """All points holding tile, in x-major order."""
        xs, ys = np.nonzero(self.cells.T == tile)
        return [Point(int(x), int(y)) for x, y in zip(xs, ys)]

    def count(self, tile: Tile) -> int:
        return int(np.count_nonzero(self.cells == tile))

    def to_rows(self) -> List[str]:
        """Render the grid as one string per row using tile symbols."""
        return [
            "".join(TILE_SYMBOLS[Tile(int(code))] for code in row)
            for row in self.cells
        ]

    def __repr__(self) -> str:
        return f"Grid({self._width}x{self._height})"

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Grid":
        """
        Build a grid from text rows.

        Symbols: '.' free, 'S' snake, 'F' food, '#' obstacle, 'X' crash.

        Args:
            rows: Equal-length strings, top row first

        Returns:
            A new Grid
        """
        rows = list(rows)
        if not rows:
            raise ValueError("At least one row is required")

        width = len(rows[0])
        cells = np.empty((len(rows), width), dtype=np.int8)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has length {len(row)}, expected {width}")
            for x, symbol in enumerate(row):
                if symbol not in SYMBOL_TILES:
                    raise ValueError(f"Unknown tile symbol {symbol!r} at ({x}, {y})")
                cells[y, x] = SYMBOL_TILES[symbol]

        return cls(width, len(rows), cells)

    @classmethod
    def with_border(cls, width: int, height: int) -> "Grid":
        """Create a free grid whose outer ring is OBSTACLE."""
        grid = cls(width, height)
        grid.cells[0, :] = Tile.OBSTACLE
        grid.cells[-1, :] = Tile.OBSTACLE
        grid.cells[:, 0] = Tile.OBSTACLE
        grid.cells[:, -1] = Tile.OBSTACLE
        return grid
