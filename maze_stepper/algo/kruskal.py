import random
from typing import Iterator, List, Tuple
from maze_stepper.algo.base import Generator
from maze_stepper.core.dsu import DisjointSet
from maze_stepper.core.grid import Grid

class KruskalsAlgorithm(Generator):
    def run(self) -> Iterator[str]:
        rng = random.Random(self.seed)
        self.grid.reset()
        width, height = self.grid.width, self.grid.height

        # Every wall once: (x, y, dir) with dir EAST or SOUTH
        edges: List[Tuple[int, int, int]] = []
        for y in range(height):
            for x in range(width):
                if x < width - 1:
                    edges.append((x, y, Grid.EAST))
                if y < height - 1:
                    edges.append((x, y, Grid.SOUTH))

        rng.shuffle(edges)

        sets = DisjointSet(width * height)
        scanned = 0

        for x, y, dir_bit in edges:
            scanned += 1
            nx, ny = x + Grid.DX[dir_bit], y + Grid.DY[dir_bit]

            # Already connected -> carving would make a loop
            if sets.union(y * width + x, ny * width + nx):
                self.grid.carve_path(x, y, dir_bit)
                self.grid.set_visited(x, y)
                self.grid.set_visited(nx, ny)
                self.step_count += 1

                if self.step_count % self.REPORT_EVERY == 0:
                    yield f"Edges: {scanned}/{len(edges)}"

        yield "Done"
