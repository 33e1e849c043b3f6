# rubik_drag/tests/test_moves.py
import unittest

from rubik_drag.logic.moves import inverse_move, inverse_sequence, normalize_token, parse_sequence
from rubik_drag.logic.scramble import generate_scramble


class TestMoves(unittest.TestCase):
    def test_normalize_token(self):
        self.assertEqual(normalize_token(" R "), "R")
        self.assertEqual(normalize_token("R’"), "R'")
        self.assertEqual(normalize_token("D2'"), "D2")
        self.assertEqual(normalize_token("M2"), "M2")
        self.assertEqual(normalize_token(""), "")

    def test_normalize_token_rejects(self):
        for tok in ("X", "R3", "r", "U''"):
            with self.subTest(tok=tok):
                with self.assertRaises(ValueError):
                    normalize_token(tok)

    def test_inverse_move(self):
        self.assertEqual(inverse_move("R"), "R'")
        self.assertEqual(inverse_move("R'"), "R")
        self.assertEqual(inverse_move("R2"), "R2")
        self.assertEqual(inverse_move("S"), "S'")

    def test_inverse_sequence(self):
        self.assertEqual(inverse_sequence(["R", "U", "F2"]), ["F2", "U'", "R'"])

    def test_parse_sequence(self):
        self.assertEqual(parse_sequence("R U  R' U'"), ["R", "U", "R'", "U'"])
        self.assertEqual(parse_sequence("   "), [])
        with self.assertRaises(ValueError):
            parse_sequence("R Q")


class TestScramble(unittest.TestCase):
    def test_length_and_tokens(self):
        seq = generate_scramble(20, seed=1)
        self.assertEqual(len(seq), 20)
        for tok in seq:
            self.assertEqual(normalize_token(tok), tok)

    def test_no_consecutive_face(self):
        for seed in range(20):
            seq = generate_scramble(40, seed=seed)
            for a, b in zip(seq, seq[1:]):
                self.assertNotEqual(a[0], b[0])

    def test_seed_is_reproducible(self):
        self.assertEqual(generate_scramble(15, seed=42), generate_scramble(15, seed=42))

    def test_rejects_non_positive(self):
        with self.assertRaises(ValueError):
            generate_scramble(0)


if __name__ == "__main__":
    unittest.main()
