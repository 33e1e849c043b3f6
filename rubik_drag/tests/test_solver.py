# rubik_drag/tests/test_solver.py
import unittest

from rubik_drag.core.cube_model import CubeModel
from rubik_drag.errors import SolverError
from rubik_drag.logic.scramble import generate_scramble
from rubik_drag.solve import kociemba_solver
from rubik_drag.solve.iddfs_solver import iddfs_solve, solve_pattern


class TestSolver(unittest.TestCase):
    def test_solver_small_scramble(self):
        c = CubeModel()
        c.apply_sequence("R U R' U'")
        sol = iddfs_solve(c, max_depth=6)
        self.assertIsNotNone(sol)
        c.apply_sequence(" ".join(sol))
        self.assertTrue(c.is_solved())

    def test_solved_cube_needs_no_moves(self):
        self.assertEqual(iddfs_solve(CubeModel()), [])

    def test_reports_depth_and_cancels(self):
        c = CubeModel()
        c.apply_sequence("R U F")
        depths = []
        sol = iddfs_solve(c, max_depth=5, on_depth=depths.append, should_cancel=lambda: len(depths) >= 2)
        self.assertIsNone(sol)
        self.assertEqual(depths, [1, 2])

    def test_solve_pattern(self):
        c = CubeModel()
        c.apply_sequence("F2 L'")
        sol = solve_pattern(c.to_string(), max_depth=3)
        self.assertEqual(sol, ["L", "F2"])

    def test_solve_pattern_errors(self):
        with self.assertRaises(SolverError):
            solve_pattern("UUU")

        c = CubeModel()
        c.apply_sequence("R U F")
        with self.assertRaises(SolverError):
            solve_pattern(c.to_string(), max_depth=1)


class TestKociembaSolver(unittest.TestCase):
    def test_solves_long_scrambles(self):
        for seed in range(5):
            with self.subTest(seed=seed):
                c = CubeModel()
                c.apply_sequence(" ".join(generate_scramble(25, seed=seed)))
                sol = kociemba_solver.solve_pattern(c.to_string())
                c.apply_sequence(" ".join(sol))
                self.assertTrue(c.is_solved())

    def test_rejects_impossible_state(self):
        # Dos stickers de esquina intercambiados: colores válidos pero estado inalcanzable
        c = CubeModel()
        c.apply_move("R")
        pattern = list(c.to_string())
        pattern[0], pattern[2] = pattern[2], pattern[0]
        with self.assertRaises(SolverError):
            kociemba_solver.solve_pattern("".join(pattern))


if __name__ == "__main__":
    unittest.main()
