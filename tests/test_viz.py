import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# No window is ever opened here
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from maze_stepper.core.session import MazeSession, SessionConfig
from maze_stepper.viz.recorder import VideoRecorder, default_filename, surface_to_frame
from maze_stepper.viz.renderer import Renderer


class TestRecorder(unittest.TestCase):
    def test_surface_to_frame(self):
        surface = pygame.Surface((4, 3))
        surface.fill((255, 0, 0))
        frame = surface_to_frame(surface)

        # (height, width, BGR)
        self.assertEqual(frame.shape, (3, 4, 3))
        self.assertEqual(list(frame[0, 0]), [0, 0, 255])

    def test_default_filename(self):
        name = default_filename("run")
        self.assertTrue(os.path.basename(name).startswith("run_"))
        self.assertTrue(name.endswith(".mp4"))

    def test_inactive_recorder_ignores_frames(self):
        recorder = VideoRecorder(active=False)
        recorder.capture_frame(pygame.Surface((4, 3)))
        self.assertIsNone(recorder.writer)
        self.assertIsNone(recorder.output_file)
        self.assertEqual(recorder.frame_count, 0)
        recorder.stop()


class TestRendererLogic(unittest.TestCase):
    def create_renderer(self, rows=8, cols=10):
        session = MazeSession(SessionConfig(rows=rows, cols=cols, seed=6))
        return Renderer(session, width=1280, height=720)

    def test_fit_to_screen(self):
        renderer = self.create_renderer()
        renderer.fit_to_screen()
        self.assertEqual(renderer.cell_size, 86)
        self.assertEqual(renderer.offset_x, (1280 - 860) // 2)
        self.assertEqual(renderer.screen_to_world(210 + 86 * 3 + 5, 28 + 86 * 2 + 1), (3, 2))

    def test_screen_to_world_clamps(self):
        renderer = self.create_renderer()
        renderer.fit_to_screen()
        self.assertEqual(renderer.screen_to_world(0, 0), (0, 0))
        self.assertEqual(renderer.screen_to_world(5000, 5000), (9, 7))

    def test_tick_solver_paces_steps(self):
        renderer = self.create_renderer(rows=20, cols=20)
        renderer.on_solve()
        solver = renderer.session.solver
        self.assertTrue(renderer.animating)

        # At least one step per frame, even with no elapsed time
        renderer.tick_solver(0.0)
        self.assertEqual(solver.steps, 1)

        renderer.tick_solver(1.0)
        self.assertEqual(solver.steps, 31)
        self.assertEqual(renderer.accumulator, 0.0)

    def test_animation_stops_on_result(self):
        renderer = self.create_renderer()
        renderer.on_solve()
        renderer.session.config.steps_per_second = 240
        for _ in range(1000):
            if not renderer.animating:
                break
            renderer.tick_solver(1.0)

        self.assertFalse(renderer.animating)
        self.assertFalse(renderer.session.solving)
        self.assertEqual(renderer.session.last_path[-1], renderer.session.goal)

    def test_pause_resume(self):
        renderer = self.create_renderer()
        renderer.on_pause()
        self.assertFalse(renderer.animating)

        renderer.on_solve()
        renderer.on_pause()
        self.assertFalse(renderer.animating)
        self.assertTrue(renderer.session.solving)
        renderer.on_pause()
        self.assertTrue(renderer.animating)

    def test_keys(self):
        renderer = self.create_renderer()
        renderer.handle_key(pygame.K_2)
        self.assertEqual(renderer.session.config.algo, "dfs")

        renderer.handle_key(pygame.K_v)
        self.assertTrue(renderer.session.show_wire)

        renderer.handle_key(pygame.K_o)
        self.assertEqual(renderer.session.pick_mode, "goal")

        renderer.handle_key(pygame.K_ESCAPE)
        self.assertFalse(renderer.running)

    def test_speed_keys(self):
        renderer = self.create_renderer()
        self.assertEqual(renderer.session.config.steps_per_second, 30)

        renderer.handle_key(pygame.K_EQUALS)
        self.assertEqual(renderer.session.config.steps_per_second, 60)
        renderer.handle_key(pygame.K_MINUS)
        renderer.handle_key(pygame.K_MINUS)
        self.assertEqual(renderer.session.config.steps_per_second, 15)

        for _ in range(10):
            renderer.handle_key(pygame.K_EQUALS)
        self.assertEqual(renderer.session.config.steps_per_second, Renderer.MAX_SPEED)
        for _ in range(20):
            renderer.handle_key(pygame.K_MINUS)
        self.assertEqual(renderer.session.config.steps_per_second, Renderer.MIN_SPEED)

    def test_no_walking_while_solving(self):
        renderer = self.create_renderer()
        renderer.on_solve()
        renderer.handle_key(pygame.K_RIGHT)
        renderer.handle_key(pygame.K_DOWN)
        self.assertEqual(renderer.session.player, (0, 0))


if __name__ == '__main__':
    unittest.main()
