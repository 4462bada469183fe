import random
from typing import Iterator, List, Tuple
from maze_stepper.algo.base import Generator

class RecursiveBacktracker(Generator):
    def run(self) -> Iterator[str]:
        rng = random.Random(self.seed)
        self.grid.reset()

        # Start at (0,0)
        start_x, start_y = 0, 0
        self.grid.set_visited(start_x, start_y)

        # Explicit stack instead of recursion
        stack: List[Tuple[int, int]] = [(start_x, start_y)]

        while stack:
            cx, cy = stack[-1]

            # Unvisited neighbors, in N, E, S, W order
            neighbors = [
                (nx, ny, dir_bit)
                for nx, ny, dir_bit in self.grid.get_neighbors(cx, cy)
                if not self.grid.is_visited(nx, ny)
            ]

            if neighbors:
                nx, ny, dir_bit = rng.choice(neighbors)

                # Carve
                self.grid.carve_path(cx, cy, dir_bit)
                self.grid.set_visited(nx, ny)

                stack.append((nx, ny))
                self.step_count += 1

                if self.step_count % self.REPORT_EVERY == 0:
                    yield f"Carving... Stack: {len(stack)}"
            else:
                # Backtrack
                stack.pop()

        yield "Done"
