import unittest
import sys
import os

# Add project root to path so we can import maze_stepper
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.grid import Grid, Cell

class TestGrid(unittest.TestCase):
    def test_initialization(self):
        w, h = 10, 8
        grid = Grid(w, h)
        self.assertEqual(len(grid.cells), w * h)
        self.assertEqual((grid.cols, grid.rows), (w, h))
        # All cells should have all walls (value 15)
        for val in grid.cells:
            self.assertEqual(val, Grid.ALL_WALLS)

    def test_rejects_empty_grid(self):
        with self.assertRaises(ValueError):
            Grid(0, 5)

    def test_coordinates(self):
        grid = Grid(5, 5)
        self.assertEqual(grid.get_index(2, 2), 12)  # 2 * 5 + 2

        with self.assertRaises(IndexError):
            grid.get_index(-1, 0)
        with self.assertRaises(IndexError):
            grid.get_index(0, 5)

    def test_cell_out_of_bounds_is_none(self):
        grid = Grid(3, 2)
        self.assertIsNone(grid.cell(3, 0))
        self.assertIsNone(grid.cell(0, -1))
        self.assertEqual(grid.cell(2, 1), Cell(grid, 2, 1))

    def test_carve_path_both_sides(self):
        grid = Grid(2, 2)
        # (0,0) loses EAST, (1,0) loses WEST
        grid.carve_path(0, 0, Grid.EAST)

        a, b = grid.cell(0, 0), grid.cell(1, 0)
        self.assertFalse(a.right)
        self.assertFalse(b.left)

        # Others remain
        self.assertTrue(a.top)
        self.assertTrue(a.bottom)
        self.assertTrue(b.right)

        grid.add_wall(1, 0, Grid.WEST)
        self.assertTrue(grid.cell(0, 0).right)
        self.assertTrue(grid.cell(1, 0).left)

    def test_carve_into_void_is_noop(self):
        grid = Grid(2, 2)
        grid.carve_path(0, 0, Grid.NORTH)
        grid.carve_path(1, 1, Grid.EAST)
        self.assertTrue(all(v == Grid.ALL_WALLS for v in grid.cells))

    def test_reset(self):
        grid = Grid(3, 3)
        grid.carve_path(1, 1, Grid.SOUTH)
        grid.set_visited(1, 1)
        grid.reset()
        self.assertFalse(grid.is_visited(1, 1))
        self.assertTrue(all(v == Grid.ALL_WALLS for v in grid.cells))

    def test_visited_flags(self):
        grid = Grid(3, 3)
        self.assertFalse(grid.cell(1, 1).visited)
        grid.set_visited(1, 1)
        self.assertTrue(grid.is_visited(1, 1))
        grid.set_visited(1, 1, False)
        self.assertFalse(grid.is_visited(1, 1))

    def test_neighbors_order(self):
        grid = Grid(3, 3)
        self.assertEqual(grid.neighbors(1, 1), [(1, 0), (2, 1), (1, 2), (0, 1)])
        # Corner: top and left fall off the grid
        self.assertEqual(grid.neighbors(0, 0), [None, (1, 0), (0, 1), None])
        self.assertEqual(grid.neighbors(2, 2), [(2, 1), None, None, (1, 2)])

    def test_get_neighbors(self):
        grid = Grid(3, 3)
        self.assertEqual(len(list(grid.get_neighbors(1, 1))), 4)

        corner_neighbors = list(grid.get_neighbors(0, 0))
        self.assertEqual(corner_neighbors, [(1, 0, Grid.EAST), (0, 1, Grid.SOUTH)])

    def test_open_neighbors(self):
        grid = Grid(3, 3)
        self.assertEqual(list(grid.get_open_neighbors(1, 1)), [])
        grid.carve_path(1, 1, Grid.WEST)
        grid.carve_path(1, 1, Grid.NORTH)
        self.assertEqual(list(grid.get_open_neighbors(1, 1)), [(1, 0), (0, 1)])

    def test_can_move(self):
        grid = Grid(2, 2)
        grid.carve_path(0, 0, Grid.SOUTH)
        self.assertTrue(grid.can_move(0, 0, "down"))
        self.assertTrue(grid.can_move(0, 1, Grid.NORTH))
        self.assertFalse(grid.can_move(0, 0, "right"))
        self.assertFalse(grid.can_move(0, 0, "up"))
        with self.assertRaises(ValueError):
            grid.can_move(0, 0, "sideways")

    def test_count_open_edges(self):
        grid = Grid(3, 3)
        self.assertEqual(grid.count_open_edges(), 0)
        grid.carve_path(0, 0, Grid.EAST)
        grid.carve_path(2, 2, Grid.NORTH)
        self.assertEqual(grid.count_open_edges(), 2)

    def test_memory_sanity(self):
        # One byte per cell
        grid = Grid(1000, 1000)
        size_bytes = grid.cells.buffer_info()[1] * grid.cells.itemsize
        self.assertEqual(size_bytes, 1000 * 1000)

if __name__ == '__main__':
    unittest.main()
