import logging
import pygame
from maze_stepper.core.grid import Grid
from maze_stepper.core.session import MazeSession, clamp
from maze_stepper.algo.factory import SOLVER_NAMES
from maze_stepper.viz.recorder import VideoRecorder

logger = logging.getLogger(__name__)


class Renderer:
    COLOR_BG = (10, 13, 20)
    COLOR_WALL = (200, 200, 200)
    COLOR_VISITED = (45, 52, 66)
    COLOR_FRONTIER = (82, 72, 120)
    COLOR_SOLUTION = (255, 215, 0)  # Gold
    COLOR_START = (52, 211, 153)
    COLOR_GOAL = (248, 113, 113)
    COLOR_PLAYER = (96, 165, 250)
    COLOR_TEXT = (255, 255, 255)

    HUD_HEIGHT = 28
    MIN_SPEED = 1
    MAX_SPEED = 240
    MIN_CELL = 8
    TOAST_MS = 1100

    KEY_MOVES = {
        pygame.K_UP: "up", pygame.K_w: "up",
        pygame.K_RIGHT: "right", pygame.K_d: "right",
        pygame.K_DOWN: "down", pygame.K_s: "down",
        pygame.K_LEFT: "left", pygame.K_a: "left",
    }

    def __init__(self, session: MazeSession, width=1280, height=720, record=False):
        self.session = session
        self.screen_width = width
        self.screen_height = height

        self.cell_size = 24
        self.offset_x = 0
        self.offset_y = self.HUD_HEIGHT

        self.recorder = VideoRecorder(active=record)

        self.running = True
        self.animating = False
        self.accumulator = 0.0
        self.toast = ""
        self.toast_until = 0

        self.font = None
        self.clock = None
        self.surface = None

    @property
    def grid(self) -> Grid:
        return self.session.grid

    def fit_to_screen(self):
        """Square cells as large as the window allows, centred horizontally."""
        avail_w = self.screen_width - 2
        avail_h = self.screen_height - self.HUD_HEIGHT - 2
        self.cell_size = max(self.MIN_CELL, int(min(avail_w / self.grid.width, avail_h / self.grid.height)))
        self.offset_x = max(0, (self.screen_width - self.grid.width * self.cell_size) // 2)
        self.offset_y = self.HUD_HEIGHT

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Stepper - {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def flash(self, text: str):
        self.toast = text
        self.toast_until = pygame.time.get_ticks() + self.TOAST_MS
        logger.debug(text)

    def screen_to_world(self, sx, sy):
        wx = (sx - self.offset_x) // self.cell_size
        wy = (sy - self.offset_y) // self.cell_size
        return self.session.clamp_position(int(wx), int(wy))

    def cell_center(self, x, y):
        s = self.cell_size
        return (self.offset_x + x * s + s // 2, self.offset_y + y * s + s // 2)

    # Actions

    def on_generate(self):
        self.animating = False
        self.session.generate()
        pygame.display.set_caption(f"Maze Stepper - {self.grid.width}x{self.grid.height}")
        self.fit_to_screen()
        self.flash("New maze generated")

    def on_solve(self):
        self.session.solve()
        self.animating = True
        self.accumulator = 0.0

    def on_pause(self):
        if self.animating:
            self.animating = False
            self.flash("Paused")
        elif self.session.solving:
            self.animating = True
            self.accumulator = 0.0
            self.flash("Resumed")

    def on_step(self):
        if not self.session.solving:
            self.flash("Press Solve first")
            return
        self.report(self.session.step())

    def on_export(self):
        fname = f"maze_{self.grid.width}x{self.grid.height}.png"
        pygame.image.save(self.surface, fname)
        self.flash(f"Saved {fname}")

    def on_pick(self, kind: str):
        self.session.pick_mode = kind
        self.flash(f"Click a cell to set {kind.upper()}")

    def on_speed(self, factor: float):
        cfg = self.session.config
        cfg.steps_per_second = clamp(int(round(cfg.steps_per_second * factor)), self.MIN_SPEED, self.MAX_SPEED)
        self.flash(f"Speed: {cfg.steps_per_second} steps/s")

    def on_move(self, direction: str):
        if self.animating:
            return  # no walking while the solver runs
        if self.session.move_player(direction) and self.session.at_goal:
            self.flash("You reached the goal!")

    def report(self, result):
        if result is None:
            self.animating = False
            return
        if not result.done:
            return
        self.animating = False
        self.flash("Path found" if result.found else "No path")

    def handle_key(self, key):
        if key in self.KEY_MOVES:
            self.on_move(self.KEY_MOVES[key])
        elif key == pygame.K_g:
            self.on_generate()
        elif key == pygame.K_r:
            self.on_solve()
        elif key == pygame.K_p:
            self.on_pause()
        elif key == pygame.K_c:
            self.session.clear()
        elif key == pygame.K_PERIOD:
            self.on_step()
        elif key == pygame.K_i:
            self.on_pick("start")
        elif key == pygame.K_o:
            self.on_pick("goal")
        elif key == pygame.K_n:
            self.session.reset_player()
        elif key == pygame.K_v:
            self.session.show_wire = not self.session.show_wire
        elif key == pygame.K_e:
            self.on_export()
        elif key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
            self.on_speed(2)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.on_speed(0.5)
        elif key == pygame.K_ESCAPE:
            self.running = False
        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(SOLVER_NAMES):
                self.session.config.algo = SOLVER_NAMES[idx]
                self.flash(f"Solver: {SOLVER_NAMES[idx]}")

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                self.fit_to_screen()

            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self.session.pick_mode:
                    x, y = self.screen_to_world(*event.pos)
                    kind = self.session.pick_cell(x, y)
                    self.flash(f"{kind.capitalize()} cell set")

    # Drawing

    def draw_cells(self, cells, color):
        s = self.cell_size
        for x, y in cells:
            pygame.draw.rect(self.surface, color, (self.offset_x + x * s, self.offset_y + y * s, s, s))

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)

        if self.session.show_wire:
            self.draw_cells(self.session.visited, self.COLOR_VISITED)
            self.draw_cells(self.session.frontier, self.COLOR_FRONTIER)

        s = self.cell_size
        line_w = max(2, int(s * 0.18))
        for y in range(self.grid.height):
            for x in range(self.grid.width):
                cell = self.grid.cells[y * self.grid.width + x]
                px = self.offset_x + x * s
                py = self.offset_y + y * s

                # Each shared wall is drawn once: own S and E, plus the outer N/W edge
                if cell & Grid.SOUTH:
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px, py + s), (px + s, py + s), line_w)
                if cell & Grid.EAST:
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px + s, py), (px + s, py + s), line_w)
                if y == 0 and (cell & Grid.NORTH):
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px, py), (px + s, py), line_w)
                if x == 0 and (cell & Grid.WEST):
                    pygame.draw.line(self.surface, self.COLOR_WALL, (px, py), (px, py + s), line_w)

    def draw_path(self):
        path = self.session.last_path
        if len(path) < 2:
            return
        points = [self.cell_center(x, y) for x, y in path]
        pygame.draw.lines(self.surface, self.COLOR_SOLUTION, False, points, max(2, int(self.cell_size * 0.22)))

    def draw_markers(self):
        r = max(4, int(self.cell_size * 0.3))
        pygame.draw.circle(self.surface, self.COLOR_START, self.cell_center(*self.session.start), r)
        pygame.draw.circle(self.surface, self.COLOR_GOAL, self.cell_center(*self.session.goal), r)
        pygame.draw.circle(self.surface, self.COLOR_PLAYER, self.cell_center(*self.session.player), int(r * 0.9))

    def draw_hud(self):
        cfg = self.session.config
        if self.animating:
            status = "Solving"
        elif self.session.solving:
            status = "Paused"
        else:
            status = "Idle"
        rec_status = " | REC" if self.recorder.active else ""
        info = f"{cfg.algo} | {cfg.steps_per_second} sps | {self.grid.width}x{self.grid.height} {cfg.method} seed={self.session.seed} | {status}{rec_status}"
        if self.toast and pygame.time.get_ticks() < self.toast_until:
            info += f" | {self.toast}"

        lbl = self.font.render(info, True, self.COLOR_TEXT)
        self.surface.blit(lbl, (8, 6))

    # Main loop

    def tick_solver(self, dt: float):
        sps = clamp(self.session.config.steps_per_second, self.MIN_SPEED, self.MAX_SPEED)
        self.accumulator += dt
        steps = max(1, int(self.accumulator * sps))
        self.accumulator = max(0.0, self.accumulator - steps / sps)
        self.report(self.session.advance(steps))

    def run_loop(self):
        while self.running:
            dt = self.clock.tick(60) / 1000.0
            self.handle_input()

            if self.animating:
                self.tick_solver(dt)

            self.draw_grid()
            self.draw_path()
            self.draw_markers()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

        self.recorder.stop()
        pygame.quit()
