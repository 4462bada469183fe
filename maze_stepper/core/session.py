import logging
import random
from dataclasses import dataclass, replace
from typing import FrozenSet, List, Optional
from maze_stepper.core.grid import Grid, Position
from maze_stepper.core.complexity import MazePostProcessor
from maze_stepper.algo.factory import (
    create_generator, create_solver, resolve_generator, resolve_solver,
)
from maze_stepper.algo.solvers import Solver, StepResult

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    rows: int = 25
    cols: int = 35
    min_size: int = 5
    max_size: int = 120
    method: str = "backtracker"
    algo: str = "bfs"
    seed: Optional[int] = None
    braid: float = 0.0
    steps_per_second: int = 30


def clamp(v: int, lo: int, hi: int) -> int:
    return min(hi, max(lo, v))


class MazeSession:
    """
    Everything one running instance knows about: the maze, the markers,
    the active solver and what the last solve left behind.
    """

    def __init__(self, config: Optional[SessionConfig] = None):
        # Own copy: generate() writes the clamped size back and spends the seed
        self.config = replace(config) if config is not None else SessionConfig()
        self.grid: Optional[Grid] = None
        self.seed: Optional[int] = None
        self.start: Position = (0, 0)
        self.goal: Position = (0, 0)
        self.player: Position = (0, 0)

        self.solver: Optional[Solver] = None
        self.last_result: Optional[StepResult] = None
        self.last_path: List[Position] = []
        self.visited: FrozenSet[Position] = frozenset()
        self.frontier: FrozenSet[Position] = frozenset()

        self.show_wire = False
        self.pick_mode: Optional[str] = None  # 'start' | 'goal' | None

        self.generate()

    @property
    def rows(self) -> int:
        return self.grid.height

    @property
    def cols(self) -> int:
        return self.grid.width

    @property
    def solving(self) -> bool:
        return self.solver is not None

    @property
    def at_goal(self) -> bool:
        return self.player == self.goal

    # Generation

    def generate(self, rows: Optional[int] = None, cols: Optional[int] = None,
                 method: Optional[str] = None, seed: Optional[int] = None) -> Grid:
        cfg = self.config
        rows = clamp(rows if rows is not None else cfg.rows, cfg.min_size, cfg.max_size)
        cols = clamp(cols if cols is not None else cfg.cols, cfg.min_size, cfg.max_size)
        method = resolve_generator(method or cfg.method)

        if seed is None:
            seed = cfg.seed if cfg.seed is not None else random.SystemRandom().randrange(2 ** 32)

        # Any solver still pointing at the old grid goes first
        self.solver = None
        self.clear()

        grid = Grid(cols, rows)
        create_generator(method, grid, seed=seed).run_all()
        if cfg.braid > 0.0:
            removed = MazePostProcessor.braid(grid, factor=cfg.braid, seed=seed)
            logger.debug(f"Braided: removed {removed} dead ends")

        self.grid = grid
        self.seed = seed
        cfg.rows, cfg.cols, cfg.method = rows, cols, method
        # A fixed config seed would replay the same maze on every press
        cfg.seed = None

        self.start = (0, 0)
        self.goal = (cols - 1, rows - 1)
        self.player = self.start
        self.pick_mode = None

        logger.info(f"Generated {cols}x{rows} maze with {method} (seed={seed})")
        return grid

    # Solving

    def solve(self, algo: Optional[str] = None) -> Solver:
        algo = resolve_solver(algo or self.config.algo)
        self.config.algo = algo
        self.clear()
        self.solver = create_solver(algo, self.grid, self.start, self.goal)
        logger.debug(f"Solving with {algo} from {self.start} to {self.goal}")
        return self.solver

    def step(self) -> Optional[StepResult]:
        if self.solver is None:
            return None

        solver = self.solver
        result = solver.step()
        self.visited = solver.visited
        self.frontier = solver.frontier
        self.last_result = result

        if result.done:
            self.solver = None
            self.frontier = frozenset()
            if result.found:
                self.last_path = list(result.path)
                logger.info(f"Path found: {len(result.path)} cells after {solver.steps} steps")
            else:
                logger.info(f"No path after {solver.steps} steps")
        return result

    def advance(self, n: int) -> Optional[StepResult]:
        """Up to n steps; stops early on a terminal result."""
        result = None
        for _ in range(n):
            result = self.step()
            if result is None or result.done:
                break
        return result

    def clear(self):
        self.last_path = []
        self.visited = frozenset()
        self.frontier = frozenset()

    # Markers & player

    def clamp_position(self, x: int, y: int) -> Position:
        return (clamp(x, 0, self.grid.width - 1), clamp(y, 0, self.grid.height - 1))

    def set_start(self, x: int, y: int):
        self.start = self.clamp_position(x, y)
        self.player = self.start

    def set_goal(self, x: int, y: int):
        self.goal = self.clamp_position(x, y)

    def pick_cell(self, x: int, y: int) -> Optional[str]:
        """Applies a pending start/goal pick. Returns which marker moved, if any."""
        mode = self.pick_mode
        if mode == "start":
            self.set_start(x, y)
        elif mode == "goal":
            self.set_goal(x, y)
        self.pick_mode = None
        return mode

    def reset_player(self):
        self.player = self.start

    def move_player(self, direction: str) -> bool:
        x, y = self.player
        if not self.grid.can_move(x, y, direction):
            return False
        d = Grid.MOVES[direction.lower()]
        self.player = (x + Grid.DX[d], y + Grid.DY[d])
        return True
