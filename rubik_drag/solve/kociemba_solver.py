# rubik_drag/solve/kociemba_solver.py
from __future__ import annotations

import logging
from typing import List

import kociemba

from rubik_drag.errors import SolverError
from rubik_drag.logic.moves import parse_sequence

logger = logging.getLogger(__name__)


def solve_pattern(pattern: str) -> List[str]:
    """Solver por defecto: algoritmo de dos fases de Kociemba.

    El string de entrada es el mismo que emite `CubeModel.to_string()`
    (caras URFDLB, 9 facelets por cara, letras de cara como colores).
    Resuelve cualquier estado alcanzable en pocos milisegundos.

    Args:
        pattern: Cubo serializado (54 facelets).

    Returns:
        Lista de tokens normalizados, por ejemplo ["R", "U'", "F2"].

    Raises:
        SolverError: Si el estado no es válido o el solver no encuentra solución.
    """
    try:
        raw = kociemba.solve(pattern)
    except ValueError as exc:
        raise SolverError(f"Kociemba rechazó el estado: {exc}") from exc

    try:
        moves = parse_sequence(raw)
    except ValueError as exc:
        raise SolverError(f"Salida de Kociemba inválida: {raw!r}") from exc

    logger.info("Solución Kociemba (%d pasos): %s", len(moves), " ".join(moves))
    return moves
