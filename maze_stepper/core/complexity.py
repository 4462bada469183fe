import random
from typing import Dict, List, Optional, Tuple
from maze_stepper.core.grid import Grid


def count_walls(val: int) -> int:
    return bin(val & Grid.ALL_WALLS).count("1")


class MazePostProcessor:
    @staticmethod
    def dead_ends(grid: Grid) -> List[Tuple[int, int]]:
        """Cells with exactly one exit."""
        return [
            (x, y)
            for y in range(grid.height)
            for x in range(grid.width)
            if count_walls(grid.cells[y * grid.width + x]) == 3
        ]

    @staticmethod
    def braid(grid: Grid, factor: float = 1.0, seed: Optional[int] = None) -> int:
        """
        Removes dead ends to create loops.
        factor: 0.0 = Remove NO dead ends (Perfect Maze)
                1.0 = Remove ALL dead ends (No dead ends)
        Returns the number of walls knocked down.
        """
        if factor <= 0.0:
            return 0

        rng = random.Random(seed)
        dead_ends = MazePostProcessor.dead_ends(grid)
        rng.shuffle(dead_ends)

        target_remove = int(len(dead_ends) * min(factor, 1.0))
        removed_count = 0

        for x, y in dead_ends:
            if removed_count >= target_remove:
                break

            # An earlier carve may already have opened this one up
            if count_walls(grid.cells[grid.get_index(x, y)]) != 3:
                continue

            # Closed walls that still lead somewhere inside the grid
            closed = [d for nx, ny, d in grid.get_neighbors(x, y) if grid.has_wall(x, y, d)]
            if closed:
                grid.carve_path(x, y, rng.choice(closed))
                removed_count += 1

        return removed_count

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        dead_ends = 0
        intersections = 0  # 0, 1 walls
        corridors = 0  # 2 walls

        for val in grid.cells:
            walls = count_walls(val)
            if walls == 3:
                dead_ends += 1
            elif walls == 2:
                corridors += 1
            elif walls <= 1:
                intersections += 1

        total = grid.width * grid.height
        return {
            "dead_ends": dead_ends,
            "corridors": corridors,
            "intersections": intersections,
            "open_edges": grid.count_open_edges(),
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0,
        }
