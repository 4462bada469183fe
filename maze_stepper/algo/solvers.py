import heapq
import itertools
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Optional, Set, Tuple
from maze_stepper.core.grid import Grid, Position


@dataclass(frozen=True)
class StepResult:
    done: bool
    found: bool = False
    path: Optional[Tuple[Position, ...]] = None


PENDING = StepResult(done=False)
EXHAUSTED = StepResult(done=True, found=False)


def found(path) -> StepResult:
    return StepResult(done=True, found=True, path=tuple(path))


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reconstruct(came: Dict[Position, Position], end: Position) -> List[Position]:
    """Walks predecessor links back from `end` to the root, then reverses."""
    path = [end]
    curr = came.get(end)
    while curr is not None:
        path.append(curr)
        curr = came.get(curr)
    path.reverse()
    return path


class Solver(ABC):
    """
    A resumable search over a read-only grid.

    Every call to step() does one bounded unit of work and returns a StepResult.
    Once a terminal result has been returned, step() keeps returning that same
    object and nothing else changes.
    """

    def __init__(self, grid: Grid, start: Position, goal: Position):
        self.grid = grid
        self.start = tuple(start)
        self.goal = tuple(goal)
        self.path: List[Position] = []
        self.visited_count = 0
        self.steps = 0
        self.result: Optional[StepResult] = None

    @property
    def finished(self) -> bool:
        return self.result is not None

    def step(self) -> StepResult:
        if self.result is not None:
            return self.result

        self.steps += 1
        result = self._advance()
        if result.done:
            self.result = result
            if result.found:
                self.path = list(result.path)
        return result

    def run(self) -> Iterator[StepResult]:
        """Yields every step result up to and including the terminal one."""
        while True:
            result = self.step()
            yield result
            if result.done:
                return

    def run_all(self) -> StepResult:
        result = self.result
        for result in self.run():
            pass
        return result

    @abstractmethod
    def _advance(self) -> StepResult:
        pass

    @property
    @abstractmethod
    def visited(self) -> FrozenSet[Position]:
        """Snapshot of settled cells."""

    @property
    @abstractmethod
    def frontier(self) -> FrozenSet[Position]:
        """Snapshot of discovered cells still waiting to be expanded."""


class FrontierSolver(Solver):
    """
    BFS / DFS / Dijkstra / A* / Greedy share one loop. They only differ in
    how the frontier is ordered and how a pushed node is scored.
    """
    STACK = "stack"
    QUEUE = "queue"
    HEAP = "heap"

    discipline = QUEUE

    def __init__(self, grid: Grid, start: Position, goal: Position):
        super().__init__(grid, start, goal)
        self._visited: Set[Position] = set()
        self._came: Dict[Position, Position] = {}
        self._dist: Dict[Position, int] = {self.start: 0}
        # Insertion counter: equal scores pop in push order
        self._seq = itertools.count()

        if self.discipline == self.QUEUE:
            self._frontier = deque()
        else:
            self._frontier = []

        self._push(self.start, 0)

    def score(self, pos: Position, dist: int) -> int:
        return 0

    def _push(self, pos: Position, score: int):
        if self.discipline == self.HEAP:
            heapq.heappush(self._frontier, (score, next(self._seq), pos))
        else:
            self._frontier.append(pos)

    def _pop(self) -> Position:
        if self.discipline == self.STACK:
            return self._frontier.pop()
        if self.discipline == self.QUEUE:
            return self._frontier.popleft()
        return heapq.heappop(self._frontier)[2]

    def _advance(self) -> StepResult:
        if not self._frontier:
            return EXHAUSTED

        current = self._pop()
        if current in self._visited:
            # Stale duplicate, settled through a cheaper entry
            return PENDING

        self._visited.add(current)
        self.visited_count += 1

        if current == self.goal:
            return found(reconstruct(self._came, current))

        new_dist = self._dist[current] + 1  # uniform cost
        for nb in self.grid.get_open_neighbors(*current):
            if nb in self._visited:
                continue
            old = self._dist.get(nb)
            if old is None or new_dist < old:
                self._dist[nb] = new_dist
                self._came[nb] = current
                self._push(nb, self.score(nb, new_dist))

        return PENDING

    @property
    def visited(self) -> FrozenSet[Position]:
        return frozenset(self._visited)

    @property
    def frontier(self) -> FrozenSet[Position]:
        if self.discipline == self.HEAP:
            queued = (entry[2] for entry in self._frontier)
        else:
            queued = iter(self._frontier)
        return frozenset(p for p in queued if p not in self._visited)


class BFS(FrontierSolver):
    discipline = FrontierSolver.QUEUE


class DFS(FrontierSolver):
    discipline = FrontierSolver.STACK


class AStar(FrontierSolver):
    discipline = FrontierSolver.HEAP

    def heuristic(self, a: Position, b: Position) -> int:
        return manhattan(a, b)

    def score(self, pos: Position, dist: int) -> int:
        return dist + self.heuristic(pos, self.goal)


class Dijkstra(AStar):
    """ Weighted BFS (Dijkstra) is just A* with h(n) = 0. """
    def heuristic(self, a, b):
        return 0


class GreedyBestFirst(AStar):
    """Orders purely by distance-to-goal estimate. Fast, not optimal."""
    def score(self, pos: Position, dist: int) -> int:
        return self.heuristic(pos, self.goal)


class BidirectionalBFS(Solver):
    """
    Two BFS trees, one from each end, taking strict turns one node at a time.
    Stops as soon as one side discovers a cell the other side has already seen.
    """
    FORWARD = 0
    BACKWARD = 1

    def __init__(self, grid: Grid, start: Position, goal: Position):
        super().__init__(grid, start, goal)
        self._queues = (deque([self.start]), deque([self.goal]))
        self._seen: Tuple[Set[Position], Set[Position]] = ({self.start}, {self.goal})
        self._came: Tuple[Dict[Position, Position], Dict[Position, Position]] = ({}, {})
        self._closed: Set[Position] = set()
        self._turn = self.FORWARD
        self.meeting_point: Optional[Position] = None

    def _advance(self) -> StepResult:
        if not self._queues[0] and not self._queues[1]:
            return EXHAUSTED

        side = self._turn
        if not self._queues[side]:
            side = 1 - side  # borrow the other side's turn
        other = 1 - side
        self._turn = other

        current = self._queues[side].popleft()
        if current not in self._closed:
            self._closed.add(current)
            self.visited_count += 1

        if current in self._seen[other]:
            return self._meet(current)

        seen = self._seen[side]
        for nb in self.grid.get_open_neighbors(*current):
            if nb in seen:
                continue
            seen.add(nb)
            self._came[side][nb] = current
            self._queues[side].append(nb)

            if nb in self._seen[other]:
                return self._meet(nb)

        return PENDING

    def _meet(self, meet: Position) -> StepResult:
        self.meeting_point = meet

        # start -> meet
        path = reconstruct(self._came[self.FORWARD], meet)

        # meet -> goal, skipping meet itself
        came_bwd = self._came[self.BACKWARD]
        curr = came_bwd.get(meet)
        while curr is not None:
            path.append(curr)
            curr = came_bwd.get(curr)

        return found(path)

    @property
    def forward_visited(self) -> FrozenSet[Position]:
        return frozenset(self._seen[self.FORWARD])

    @property
    def backward_visited(self) -> FrozenSet[Position]:
        return frozenset(self._seen[self.BACKWARD])

    @property
    def visited(self) -> FrozenSet[Position]:
        return frozenset(self._closed)

    @property
    def frontier(self) -> FrozenSet[Position]:
        return frozenset(self._queues[0]) | frozenset(self._queues[1])


class IterativeDeepeningDFS(Solver):
    """
    Depth-limited DFS restarted from scratch with limit 0, 1, 2, ...
    Gives up once the limit passes rows*cols + 10.
    """

    def __init__(self, grid: Grid, start: Position, goal: Position):
        super().__init__(grid, start, goal)
        self.depth_limit = 0
        self.max_depth = grid.width * grid.height + 10
        self.iterations = 0
        self.expansions = 0
        self._restart()

    def _restart(self):
        # (position, depth, parent)
        self._stack: List[Tuple[Position, int, Optional[Position]]] = [(self.start, 0, None)]
        self._visited: Set[Position] = set()
        self._came: Dict[Position, Position] = {}
        self.visited_count = 0
        self.iterations += 1

    def _advance(self) -> StepResult:
        if not self._stack:
            self.depth_limit += 1
            if self.depth_limit > self.max_depth:
                return EXHAUSTED
            self._restart()
            return PENDING

        current, depth, parent = self._stack.pop()
        if current in self._visited:
            return PENDING

        self._visited.add(current)
        self.visited_count += 1
        self.expansions += 1
        if parent is not None:
            self._came[current] = parent

        if current == self.goal:
            return found(reconstruct(self._came, current))

        if depth < self.depth_limit:
            # Reversed so the first open neighbor (N, then E, S, W) pops first
            for nb in reversed(list(self.grid.get_open_neighbors(*current))):
                if nb not in self._visited:
                    self._stack.append((nb, depth + 1, current))

        return PENDING

    @property
    def visited(self) -> FrozenSet[Position]:
        return frozenset(self._visited)

    @property
    def frontier(self) -> FrozenSet[Position]:
        return frozenset(p for p, _, _ in self._stack if p not in self._visited)


class WallFollower(Solver):
    """
    Keeps one hand on the wall. Only reliable on perfect mazes; the move cap
    of rows*cols*8 stops it circling forever in a loop that never touches the goal.
    """
    # Clockwise: N, E, S, W
    DIRS = Grid.DIRECTIONS
    EAST = 1

    def __init__(self, grid: Grid, start: Position, goal: Position, rule: str = "right"):
        super().__init__(grid, start, goal)
        self.rule = rule
        self.facing = self.EAST
        self.position = self.start
        self.trail: List[Position] = [self.start]
        self.moves = 0
        self.max_moves = grid.width * grid.height * 8
        self._visited: Set[Position] = {self.start}
        self.visited_count = 1

    def check_order(self) -> List[int]:
        f = self.facing
        if self.rule == "left":
            return [(f - 1) % 4, f, (f + 1) % 4, (f + 2) % 4]
        return [(f + 1) % 4, f, (f - 1) % 4, (f + 2) % 4]

    def _advance(self) -> StepResult:
        if self.position == self.goal:
            return found(self.trail)
        if self.moves >= self.max_moves:
            return EXHAUSTED

        cx, cy = self.position
        for d_idx in self.check_order():
            d_bit = self.DIRS[d_idx]
            if self.grid.can_move(cx, cy, d_bit):
                break
        else:
            # Walled in on all four sides
            return EXHAUSTED

        self.facing = d_idx
        self.position = (cx + Grid.DX[d_bit], cy + Grid.DY[d_bit])
        self.moves += 1

        # Stepping straight back into the previous cell undoes the last move
        if len(self.trail) >= 2 and self.trail[-2] == self.position:
            self.trail.pop()
        else:
            self.trail.append(self.position)

        if self.position not in self._visited:
            self._visited.add(self.position)
            self.visited_count += 1

        if self.position == self.goal:
            return found(self.trail)
        return PENDING

    @property
    def visited(self) -> FrozenSet[Position]:
        return frozenset(self._visited)

    @property
    def frontier(self) -> FrozenSet[Position]:
        return frozenset([self.position])
