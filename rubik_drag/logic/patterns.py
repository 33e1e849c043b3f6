# rubik_drag/logic/patterns.py
"""Patrones y listas de movimientos fijas usadas por los comandos."""
from __future__ import annotations

from typing import List

from rubik_drag.core.cube_model import SOLVED_PATTERN, CubeModel

# Permutación T aplicada dos veces: parece una mezcla pero es la identidad.
FALSE_SHUFFLE: List[str] = [
    "R", "U", "R'", "U'", "R'", "F", "R2", "U'", "R'", "U'", "R", "U", "R'", "F'",
    "R", "U", "R'", "U'", "R'", "F", "R2", "U'", "R'", "U'", "R", "U", "R'", "F'",
]

RUBICON_SETUP: List[str] = ["F", "L", "B", "R", "F", "L", "B"]
RUBICON_SOLVE: List[str] = ["B'", "L'", "F'", "R'", "B'", "L'", "F'"]

EXTENDED_RUBICON_SOLVE: List[str] = RUBICON_SOLVE[:3] + FALSE_SHUFFLE + RUBICON_SOLVE[3:]
RUBICON_SETUP_AND_SOLVE: List[str] = RUBICON_SETUP + RUBICON_SOLVE

# Lista fija del comando "demo": lleva el cubo resuelto al patrón Rubicon.
DEMO_MOVES: List[str] = list(RUBICON_SETUP)


def pattern_after(moves: List[str], start: str = SOLVED_PATTERN) -> str:
    """Serialización resultante de aplicar `moves` sobre `start`."""
    cube = CubeModel.from_string(start)
    for m in moves:
        cube.apply_move(m)
    return cube.to_string()


RUBICON_PATTERN: str = pattern_after(RUBICON_SETUP)

__all__ = [
    "SOLVED_PATTERN",
    "RUBICON_PATTERN",
    "FALSE_SHUFFLE",
    "RUBICON_SETUP",
    "RUBICON_SOLVE",
    "EXTENDED_RUBICON_SOLVE",
    "RUBICON_SETUP_AND_SOLVE",
    "DEMO_MOVES",
    "pattern_after",
]
