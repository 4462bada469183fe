import random
from typing import Iterator, List, Set, Tuple
from maze_stepper.algo.base import Generator

class PrimsAlgorithm(Generator):
    def run(self) -> Iterator[str]:
        rng = random.Random(self.seed)
        self.grid.reset()

        start_x = rng.randrange(self.grid.width)
        start_y = rng.randrange(self.grid.height)
        self.grid.set_visited(start_x, start_y)

        # Frontier cells: list for random picks, set so no cell is queued twice
        frontier_list: List[Tuple[int, int]] = []
        frontier_set: Set[Tuple[int, int]] = set()

        def add_frontier(cx, cy):
            for nx, ny, _ in self.grid.get_neighbors(cx, cy):
                if not self.grid.is_visited(nx, ny) and (nx, ny) not in frontier_set:
                    frontier_set.add((nx, ny))
                    frontier_list.append((nx, ny))

        add_frontier(start_x, start_y)

        while frontier_list:
            # Pick random cell from frontier, swap remove for O(1)
            idx = rng.randrange(len(frontier_list))
            cx, cy = frontier_list[idx]
            frontier_list[idx] = frontier_list[-1]
            frontier_list.pop()
            frontier_set.discard((cx, cy))

            # Carve into one random in-maze neighbor
            in_maze = [
                (nx, ny, dir_bit)
                for nx, ny, dir_bit in self.grid.get_neighbors(cx, cy)
                if self.grid.is_visited(nx, ny)
            ]
            _, _, dir_bit = rng.choice(in_maze)
            self.grid.carve_path(cx, cy, dir_bit)
            self.grid.set_visited(cx, cy)
            self.step_count += 1

            add_frontier(cx, cy)

            if self.step_count % self.REPORT_EVERY == 0:
                yield f"Frontier: {len(frontier_list)}"

        yield "Done"
