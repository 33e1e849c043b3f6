# rubik_drag/tests/test_cube_model.py
import unittest

from rubik_drag.core import SOLVED_PATTERN, CubeModel
from rubik_drag.logic.moves import inverse_sequence
from rubik_drag.logic.patterns import (
    EXTENDED_RUBICON_SOLVE,
    FALSE_SHUFFLE,
    RUBICON_PATTERN,
    RUBICON_SETUP_AND_SOLVE,
    pattern_after,
)
from rubik_drag.logic.scramble import generate_scramble


class TestCubeModel(unittest.TestCase):
    def test_starts_solved(self):
        c = CubeModel()
        self.assertTrue(c.is_solved())
        self.assertEqual(c.to_string(), SOLVED_PATTERN)

    def test_U_then_Uprime_returns(self):
        c = CubeModel()
        before = c.to_hashable()
        c.apply_move("U")
        c.apply_move("U'")
        self.assertEqual(before, c.to_hashable())

    def test_U2_equals_two_U(self):
        c1 = CubeModel()
        c2 = CubeModel()
        c1.apply_move("U2")
        c2.apply_move("U")
        c2.apply_move("U")
        self.assertEqual(c1.to_hashable(), c2.to_hashable())

    def test_every_move_has_its_inverse(self):
        for base in "UDLRFBMES":
            for suffix in ("", "'", "2"):
                with self.subTest(move=base + suffix):
                    c = CubeModel()
                    c.apply_sequence("R U F'")
                    before = c.to_string()
                    c.apply_move(base + suffix)
                    c.apply_sequence(" ".join(inverse_sequence([base + suffix])))
                    self.assertEqual(before, c.to_string())

    def test_R_matches_kociemba_layout(self):
        c = CubeModel()
        c.apply_move("R")
        expected = (
            "UUFUUFUUF"
            "RRRRRRRRR"
            "FFDFFDFFD"
            "DDBDDBDDB"
            "LLLLLLLLL"
            "UBBUBBUBB"
        )
        self.assertEqual(c.to_string(), expected)

    def test_U_moves_top_rows(self):
        c = CubeModel()
        c.apply_move("U")
        self.assertEqual(c.state["F"][:3], ["R", "R", "R"])
        self.assertEqual(c.state["L"][:3], ["F", "F", "F"])
        self.assertEqual(c.state["B"][:3], ["L", "L", "L"])
        self.assertEqual(c.state["R"][:3], ["B", "B", "B"])
        self.assertEqual(c.state["U"], ["U"] * 9)

    def test_slices_follow_their_faces(self):
        # M sigue a L, E sigue a D, S sigue a F (mueven los centros)
        c = CubeModel()
        c.apply_move("M")
        self.assertEqual(c.state["F"][4], "U")

        c = CubeModel()
        c.apply_move("E")
        self.assertEqual(c.state["R"][4], "F")

        c = CubeModel()
        c.apply_move("S")
        self.assertEqual(c.state["R"][4], "U")

    def test_sexy_move_has_order_six(self):
        c = CubeModel()
        for i in range(6):
            c.apply_sequence("R U R' U'")
            if i < 5:
                self.assertFalse(c.is_solved())
        self.assertTrue(c.is_solved())

    def test_false_shuffle_is_identity(self):
        self.assertEqual(len(FALSE_SHUFFLE), 28)
        self.assertEqual(pattern_after(FALSE_SHUFFLE), SOLVED_PATTERN)

    def test_rubicon_setup_and_solve(self):
        self.assertNotEqual(RUBICON_PATTERN, SOLVED_PATTERN)
        self.assertEqual(pattern_after(RUBICON_SETUP_AND_SOLVE), SOLVED_PATTERN)
        self.assertEqual(pattern_after(EXTENDED_RUBICON_SOLVE, RUBICON_PATTERN), SOLVED_PATTERN)

    def test_string_round_trip(self):
        pattern = pattern_after(generate_scramble(25, seed=11))
        c = CubeModel.from_string(pattern)
        self.assertEqual(c.to_string(), pattern)
        self.assertFalse(c.is_solved())

    def test_rejects_invalid_patterns(self):
        with self.assertRaises(ValueError):
            CubeModel("UUU")
        with self.assertRaises(ValueError):
            CubeModel("X" + SOLVED_PATTERN[1:])
        with self.assertRaises(ValueError):
            CubeModel("R" + SOLVED_PATTERN[1:])

    def test_rejects_unknown_moves(self):
        c = CubeModel()
        with self.assertRaises(ValueError):
            c.apply_move("Q")
        with self.assertRaises(ValueError):
            c.apply_move("R3")

    def test_copy_is_independent(self):
        c = CubeModel()
        d = c.copy()
        d.apply_move("F")
        self.assertTrue(c.is_solved())
        self.assertFalse(d.is_solved())

    def test_reset(self):
        c = CubeModel()
        c.apply_sequence("R U F")
        c.reset()
        self.assertTrue(c.is_solved())

    def test_color_counts_remain_constant(self):
        c = CubeModel()
        # aplica varios movimientos
        c.apply_sequence("R U R' U' L D L' D' U2 R2 M E' S2")

        flat = []
        for face in c.FACES:
            flat.extend(c.state[face])

        # Cada color debe aparecer 9 veces
        for color in c.FACES:
            self.assertEqual(flat.count(color), 9)


if __name__ == "__main__":
    unittest.main()
