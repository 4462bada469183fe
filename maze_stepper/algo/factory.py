import logging
from typing import Callable, Dict, Optional
from maze_stepper.core.grid import Grid, Position
from maze_stepper.core.complexity import MazePostProcessor
from maze_stepper.algo.base import Generator
from maze_stepper.algo.dfs import RecursiveBacktracker
from maze_stepper.algo.prim import PrimsAlgorithm
from maze_stepper.algo.kruskal import KruskalsAlgorithm
from maze_stepper.algo.solvers import (
    Solver, BFS, DFS, Dijkstra, AStar, GreedyBestFirst,
    BidirectionalBFS, IterativeDeepeningDFS, WallFollower,
)

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR = "backtracker"
DEFAULT_SOLVER = "bfs"

GENERATORS: Dict[str, Callable[..., Generator]] = {
    "backtracker": RecursiveBacktracker,
    "dfs": RecursiveBacktracker,
    "prim": PrimsAlgorithm,
    "kruskal": KruskalsAlgorithm,
}

SOLVERS: Dict[str, Callable[[Grid, Position, Position], Solver]] = {
    "bfs": BFS,
    "dfs": DFS,
    "dijkstra": Dijkstra,
    "astar": AStar,
    "greedy": GreedyBestFirst,
    "bidir-bfs": BidirectionalBFS,
    "iddfs": IterativeDeepeningDFS,
    "wall-right": lambda g, s, e: WallFollower(g, s, e, rule="right"),
    "wall-left": lambda g, s, e: WallFollower(g, s, e, rule="left"),
}

# Listed once each, in menu order (the "dfs" generator alias is hidden)
GENERATOR_NAMES = ["backtracker", "prim", "kruskal"]
SOLVER_NAMES = list(SOLVERS)


def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def resolve_generator(method: Optional[str]) -> str:
    key = _normalize(method)
    if key not in GENERATORS:
        if key:
            logger.warning(f"Unknown generation method {method!r}, using {DEFAULT_GENERATOR}")
        return DEFAULT_GENERATOR
    return key


def resolve_solver(algo: Optional[str]) -> str:
    key = _normalize(algo)
    if key not in SOLVERS:
        if key:
            logger.warning(f"Unknown solver {algo!r}, using {DEFAULT_SOLVER}")
        return DEFAULT_SOLVER
    return key


def create_generator(method: Optional[str], grid: Grid, seed: Optional[int] = None) -> Generator:
    return GENERATORS[resolve_generator(method)](grid, seed=seed)


def create_solver(algo: Optional[str], grid: Grid, start: Position, goal: Position) -> Solver:
    return SOLVERS[resolve_solver(algo)](grid, tuple(start), tuple(goal))


def generate_maze(rows: int, cols: int, method: Optional[str] = None,
                  seed: Optional[int] = None, braid: float = 0.0) -> Grid:
    """Builds a rows x cols grid and carves it to completion."""
    grid = Grid(cols, rows)
    create_generator(method, grid, seed=seed).run_all()

    if braid > 0.0:
        removed = MazePostProcessor.braid(grid, factor=braid, seed=seed)
        logger.debug(f"Braid {braid}: removed {removed} dead ends")
    return grid
