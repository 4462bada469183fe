import argparse
import sys
import os
import time
import logging

# Ensure project root is in path so we can import 'maze_stepper' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.grid import Grid
from maze_stepper.core.complexity import MazePostProcessor
from maze_stepper.core.session import MazeSession, SessionConfig
from maze_stepper.algo.factory import GENERATOR_NAMES, SOLVER_NAMES, create_solver
from maze_stepper.algo.solvers import IterativeDeepeningDFS

logger = logging.getLogger("maze_stepper")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def format_ascii(grid: Grid, path=None, start=None, goal=None) -> str:
    """Two text rows per cell row: the row's north walls, then its cells and west/east walls."""
    on_path = set(path or [])
    lines = []
    for y in range(grid.height):
        top = "+"
        mid = "|" if grid.has_wall(0, y, Grid.WEST) else " "
        for x in range(grid.width):
            top += "---+" if grid.has_wall(x, y, Grid.NORTH) else "   +"
            if (x, y) == start:
                body = " S "
            elif (x, y) == goal:
                body = " G "
            elif (x, y) in on_path:
                body = " . "
            else:
                body = "   "
            mid += body + ("|" if grid.has_wall(x, y, Grid.EAST) else " ")
        lines.append(top)
        lines.append(mid)

    bottom = "+"
    for x in range(grid.width):
        bottom += "---+" if grid.has_wall(x, grid.height - 1, Grid.SOUTH) else "   +"
    lines.append(bottom)
    return "\n".join(lines)


def build_session(args) -> MazeSession:
    config = SessionConfig(
        rows=args.rows,
        cols=args.cols,
        method=args.gen,
        algo=getattr(args, "algo", "bfs"),
        seed=args.seed,
        braid=args.braid,
        steps_per_second=getattr(args, "speed", 30),
    )
    return MazeSession(config)


def cmd_generate(args):
    session = build_session(args)
    stats = MazePostProcessor.calculate_stats(session.grid)
    logger.info(f"Stats: {stats}")
    print(f"Generated {session.cols}x{session.rows} maze ({session.config.method}, seed={session.seed})")
    if args.ascii:
        print(format_ascii(session.grid, start=session.start, goal=session.goal))


def cmd_solve(args):
    session = build_session(args)
    if args.start:
        session.set_start(*args.start)
    if args.goal:
        session.set_goal(*args.goal)

    logger.info(f"Solving with {args.algo.upper()} from {session.start} to {session.goal}...")
    solver = session.solve(args.algo)

    result = None
    while session.solving:
        result = session.step()
        if solver.steps % 1000 == 0:
            logger.debug(f"Steps: {solver.steps} Visited: {solver.visited_count}")

    if result.found:
        print(f"Done. Steps: {solver.steps} | Visited: {solver.visited_count} | Path Length: {len(result.path)}")
    else:
        print(f"No path. Steps: {solver.steps} | Visited: {solver.visited_count}")

    if isinstance(solver, IterativeDeepeningDFS):
        print(f"Depth limit: {solver.depth_limit} | Iterations: {solver.iterations} | Expansions: {solver.expansions}")

    if args.ascii:
        print(format_ascii(session.grid, path=session.last_path, start=session.start, goal=session.goal))
    return result


def cmd_play(args):
    from maze_stepper.viz.renderer import Renderer

    session = build_session(args)
    renderer = Renderer(session, record=args.record)
    logger.info("Visual mode enabled - Opening window...")
    renderer.init_window()
    renderer.run_loop()


def cmd_benchmark(args):
    session = build_session(args)
    grid = session.grid
    start_pos, end_pos = session.start, session.goal

    results = []
    for name in SOLVER_NAMES:
        solver = create_solver(name, grid, start_pos, end_pos)
        t_start = time.time()
        try:
            result = solver.run_all()
        except Exception as e:
            logger.error(f"{name} FAILED ({e})")
            results.append({"name": name, "time": float("inf"), "steps": 0, "path": 0, "visited": 0, "status": "Failed"})
            continue

        results.append({
            "name": name,
            "time": time.time() - t_start,
            "steps": solver.steps,
            "path": len(result.path) if result.found else 0,
            "visited": solver.visited_count,
            "status": "Success" if result.found else "No Path",
        })

    results.sort(key=lambda r: r["time"])

    print("=" * 72)
    print(f"{'RANK':<5} | {'ALGORITHM':<12} | {'TIME (s)':<10} | {'STEPS':<8} | {'PATH':<6} | {'VISITED':<8} | STATUS")
    print("-" * 72)
    for i, res in enumerate(results):
        print(f"{i+1:<5} | {res['name'].upper():<12} | {res['time']:<10.4f} | {res['steps']:<8} | "
              f"{res['path']:<6} | {res['visited']:<8} | {res['status']}")
    print("=" * 72)
    return results


def add_maze_args(parser, algo_default=None):
    parser.add_argument("--rows", type=int, default=25, help="Maze rows (clamped to 5-120)")
    parser.add_argument("--cols", type=int, default=35, help="Maze columns (clamped to 5-120)")
    parser.add_argument("--gen", type=str, default="backtracker", choices=GENERATOR_NAMES, help="Generation algorithm")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    parser.add_argument("--braid", type=float, default=0.0, help="Braid Factor (0.0 - 1.0)")
    if algo_default:
        parser.add_argument("--algo", type=str, default=algo_default, choices=SOLVER_NAMES, help="Solver algorithm")


def build_parser():
    parser = argparse.ArgumentParser(description="Maze Stepper: maze generation and step-by-step solving")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    add_maze_args(gen_parser)
    gen_parser.set_defaults(func=cmd_generate)
    gen_parser.add_argument("--ascii", action="store_true", help="Print the maze as text")

    solve_parser = subparsers.add_parser("solve", help="Generate a maze and solve it headless")
    add_maze_args(solve_parser, algo_default="bfs")
    solve_parser.add_argument("--start", type=int, nargs=2, metavar=("X", "Y"), help="Start cell")
    solve_parser.add_argument("--goal", type=int, nargs=2, metavar=("X", "Y"), help="Goal cell")
    solve_parser.add_argument("--ascii", action="store_true", help="Print the maze and path as text")
    solve_parser.set_defaults(func=cmd_solve)

    play_parser = subparsers.add_parser("play", help="Open the interactive viewer")
    add_maze_args(play_parser, algo_default="bfs")
    play_parser.add_argument("--speed", type=int, default=30, help="Solver steps per second (1-240)")
    play_parser.add_argument("--record", action="store_true", help="Record video")
    play_parser.set_defaults(func=cmd_play)

    bench_parser = subparsers.add_parser("benchmark", help="Race every solver on one maze")
    add_maze_args(bench_parser)
    bench_parser.set_defaults(func=cmd_benchmark)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return None

    logger.info(f"Running command: {args.command}")
    return args.func(args)


if __name__ == "__main__":
    main()
