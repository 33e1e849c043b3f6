# rubik_drag/solve/iddfs_solver.py
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Set

from rubik_drag import config
from rubik_drag.core.cube_model import CubeHash, CubeModel
from rubik_drag.errors import SolverError
from rubik_drag.logic.moves import inverse_move

logger = logging.getLogger(__name__)

OnDepthCallback = Callable[[int], None]
ShouldCancelCallback = Callable[[], bool]

MOVES: List[str] = [
    "U", "U'", "U2",
    "D", "D'", "D2",
    "L", "L'", "L2",
    "R", "R'", "R2",
    "F", "F'", "F2",
    "B", "B'", "B2",
]

INV: Dict[str, str] = {m: inverse_move(m) for m in MOVES}


def iddfs_solve(
    model: CubeModel,
    max_depth: int = config.SOLVER_MAX_DEPTH,
    on_depth: Optional[OnDepthCallback] = None,
    should_cancel: Optional[ShouldCancelCallback] = None,
) -> Optional[List[str]]:
    """Busca una solución del cubo usando IDDFS (búsqueda en profundidad iterativa).

    Itera el límite de profundidad desde 1 hasta `max_depth` con dos podas:
    - No repetir la misma cara consecutivamente (U seguido de U/U'/U2).
    - No aplicar inmediatamente el inverso del último movimiento.

    Args:
        model: Cubo a resolver (no se modifica).
        max_depth: Profundidad máxima que se probará.
        on_depth: Callback opcional con la profundidad que se está probando.
        should_cancel: Callback opcional; si retorna True se corta la búsqueda.

    Returns:
        Lista de movimientos (ej: ["R", "U", "R'", "U'"]) si hay solución dentro de
        `max_depth`; lista vacía si ya está resuelto; None si no se encontró o se canceló.

    Notes:
        Sirve para mezclas cortas; para mezclas largas IDDFS explota combinatoriamente.
    """
    if model.is_solved():
        return []

    start = model.copy()
    start_hash = start.to_hashable()

    for depth_limit in range(1, max_depth + 1):
        if should_cancel is not None and should_cancel():
            return None

        if on_depth is not None:
            on_depth(depth_limit)

        res = _dfs(start, depth_limit, [], {start_hash}, None, should_cancel)
        if res is not None:
            return res

    return None


def _dfs(
    model: CubeModel,
    remaining: int,
    path: List[str],
    seen_on_path: Set[CubeHash],
    last_move: Optional[str],
    should_cancel: Optional[ShouldCancelCallback] = None,
) -> Optional[List[str]]:
    """DFS limitado en profundidad para IDDFS."""
    if should_cancel is not None and should_cancel():
        return None

    if model.is_solved():
        return list(path)

    if remaining == 0:
        return None

    for mv in MOVES:
        if last_move is not None and (mv[0] == last_move[0] or INV[last_move] == mv):
            continue

        child = model.copy()
        child.apply_move(mv)
        h = child.to_hashable()

        # Evitar ciclos dentro de la misma rama
        if h in seen_on_path:
            continue

        path.append(mv)
        seen_on_path.add(h)

        ans = _dfs(child, remaining - 1, path, seen_on_path, mv, should_cancel)
        if ans is not None:
            return ans

        seen_on_path.remove(h)
        path.pop()

    return None


def solve_pattern(
    pattern: str,
    max_depth: int = config.SOLVER_MAX_DEPTH,
    on_depth: Optional[OnDepthCallback] = None,
    should_cancel: Optional[ShouldCancelCallback] = None,
) -> List[str]:
    """Solver IDDFS para mezclas cortas: de un cubo serializado a los tokens que lo resuelven.

    Raises:
        SolverError: Si el patrón es inválido o no hay solución dentro de `max_depth`.
    """
    try:
        model = CubeModel.from_string(pattern)
    except ValueError as exc:
        raise SolverError(f"Estado de entrada inválido: {exc}") from exc

    solution = iddfs_solve(model, max_depth, on_depth=on_depth, should_cancel=should_cancel)
    if solution is None:
        raise SolverError(f"No se encontró solución con profundidad <= {max_depth}.")

    logger.info("Solución IDDFS (%d pasos): %s", len(solution), " ".join(solution))
    return solution
