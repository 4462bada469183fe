from array import array
from typing import Iterator, List, Optional, Tuple

Position = Tuple[int, int]


class Cell:
    """Read-only view of one grid cell. Wall flags are read live from the grid."""

    __slots__ = ('grid', 'x', 'y')

    def __init__(self, grid: "Grid", x: int, y: int):
        self.grid = grid
        self.x = x
        self.y = y

    @property
    def position(self) -> Position:
        return (self.x, self.y)

    @property
    def top(self) -> bool:
        return self.grid.has_wall(self.x, self.y, Grid.NORTH)

    @property
    def right(self) -> bool:
        return self.grid.has_wall(self.x, self.y, Grid.EAST)

    @property
    def bottom(self) -> bool:
        return self.grid.has_wall(self.x, self.y, Grid.SOUTH)

    @property
    def left(self) -> bool:
        return self.grid.has_wall(self.x, self.y, Grid.WEST)

    @property
    def visited(self) -> bool:
        return self.grid.is_visited(self.x, self.y)

    def __eq__(self, other):
        return isinstance(other, Cell) and other.grid is self.grid and other.position == self.position

    def __hash__(self):
        return hash(self.position)

    def __repr__(self):
        return f"Cell({self.x}, {self.y})"


class Grid:
    # Bitmask Constants
    NORTH = 0b00000001
    EAST  = 0b00000010
    SOUTH = 0b00000100
    WEST  = 0b00001000

    # Generation-time flag
    VISITED = 0b00010000

    # All walls present by default (N|E|S|W) = 15
    ALL_WALLS = NORTH | EAST | SOUTH | WEST

    # Clockwise order: top, right, bottom, left
    DIRECTIONS = (NORTH, EAST, SOUTH, WEST)

    # Direction Helpers
    DX = {NORTH: 0, SOUTH: 0, EAST: 1, WEST: -1}
    DY = {NORTH: -1, SOUTH: 1, EAST: 0, WEST: 0}
    OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

    # Player movement names
    MOVES = {"up": NORTH, "right": EAST, "down": SOUTH, "left": WEST}

    __slots__ = ('width', 'height', 'cells')

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        # 1 byte per cell, every wall up
        self.cells = array('B', [self.ALL_WALLS] * (width * height))

    @property
    def cols(self) -> int:
        return self.width

    @property
    def rows(self) -> int:
        return self.height

    def __len__(self):
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def cell(self, x: int, y: int) -> Optional[Cell]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return Cell(self, x, y)
        return None

    def reset(self):
        """Every wall back up, every VISITED flag cleared. Generators call this first."""
        self.cells = array('B', [self.ALL_WALLS] * (self.width * self.height))

    def carve_path(self, x1: int, y1: int, dir_bit: int):
        """
        Removes the wall between current cell (x,y) and the neighbor in 'dir_bit'.
        Also removes the OPPOSITE wall from the neighbor.
        """
        x2 = x1 + self.DX[dir_bit]
        y2 = y1 + self.DY[dir_bit]

        if not (0 <= x2 < self.width and 0 <= y2 < self.height):
            return  # Cannot carve into void

        self.cells[y1 * self.width + x1] &= ~dir_bit
        self.cells[y2 * self.width + x2] &= ~self.OPPOSITE[dir_bit]

    def add_wall(self, x: int, y: int, dir_bit: int):
        self.cells[y * self.width + x] |= dir_bit

        nx = x + self.DX[dir_bit]
        ny = y + self.DY[dir_bit]
        if 0 <= nx < self.width and 0 <= ny < self.height:
            self.cells[ny * self.width + nx] |= self.OPPOSITE[dir_bit]

    def has_wall(self, x: int, y: int, dir_bit: int) -> bool:
        return (self.cells[y * self.width + x] & dir_bit) != 0

    def set_visited(self, x: int, y: int, visited: bool = True):
        idx = y * self.width + x
        if visited:
            self.cells[idx] |= self.VISITED
        else:
            self.cells[idx] &= ~self.VISITED

    def is_visited(self, x: int, y: int) -> bool:
        return (self.cells[y * self.width + x] & self.VISITED) != 0

    def neighbors(self, x: int, y: int) -> List[Optional[Position]]:
        """Top, right, bottom, left. None where the neighbor falls off the grid."""
        out = []
        for d in self.DIRECTIONS:
            nx, ny = x + self.DX[d], y + self.DY[d]
            out.append((nx, ny) if self.in_bounds(nx, ny) else None)
        return out

    def get_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int, int]]:
        """
        Yields (nx, ny, direction_to_neighbor) for all valid grid neighbors.
        Does NOT check walls (that's for pathfinding).
        """
        if y > 0:
            yield (x, y - 1, self.NORTH)
        if x < self.width - 1:
            yield (x + 1, y, self.EAST)
        if y < self.height - 1:
            yield (x, y + 1, self.SOUTH)
        if x > 0:
            yield (x - 1, y, self.WEST)

    def get_open_neighbors(self, x: int, y: int) -> Iterator[Position]:
        """
        Yields (nx, ny) for neighbors that are NOT blocked by a wall.
        """
        val = self.cells[y * self.width + x]

        if not (val & self.NORTH) and y > 0:
            yield (x, y - 1)
        if not (val & self.EAST) and x < self.width - 1:
            yield (x + 1, y)
        if not (val & self.SOUTH) and y < self.height - 1:
            yield (x, y + 1)
        if not (val & self.WEST) and x > 0:
            yield (x - 1, y)

    def can_move(self, x: int, y: int, direction) -> bool:
        """Player movement query. `direction` is a wall bit or one of up/right/down/left."""
        if isinstance(direction, str):
            try:
                direction = self.MOVES[direction.lower()]
            except KeyError:
                raise ValueError(f"Unknown direction: {direction!r}") from None
        if not self.in_bounds(x, y):
            return False
        if self.has_wall(x, y, direction):
            return False
        return self.in_bounds(x + self.DX[direction], y + self.DY[direction])

    def count_open_edges(self) -> int:
        # Only EAST and SOUTH so each interior wall is counted once
        count = 0
        for y in range(self.height):
            for x in range(self.width):
                val = self.cells[y * self.width + x]
                if x < self.width - 1 and not (val & self.EAST):
                    count += 1
                if y < self.height - 1 and not (val & self.SOUTH):
                    count += 1
        return count
