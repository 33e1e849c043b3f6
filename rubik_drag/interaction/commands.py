# rubik_drag/interaction/commands.py
from __future__ import annotations

import logging
import random
from typing import Any, Callable, List, Optional

from rubik_drag import config
from rubik_drag.core.cube_model import SOLVED_PATTERN
from rubik_drag.errors import SolverError
from rubik_drag.interaction.sequencer import MoveSequencer
from rubik_drag.logic.moves import parse_sequence
from rubik_drag.logic.patterns import DEMO_MOVES, EXTENDED_RUBICON_SOLVE, RUBICON_PATTERN
from rubik_drag.logic.scramble import generate_scramble
from rubik_drag.solve.kociemba_solver import solve_pattern

logger = logging.getLogger(__name__)

Solver = Callable[..., Optional[List[str]]]


class CubeCommands:
    """Disparadores externos (botones/teclas), todos enrutados por `MoveSequencer`.

    Args:
        sequencer: Secuenciador que posee el cubo.
        solver: Función `solver(pattern, **kwargs) -> list[str] | None` (Kociemba por defecto).
        shuffle_length: Cantidad de tokens por mezcla.
        seed: Semilla opcional para mezclas reproducibles.
    """

    def __init__(
        self,
        sequencer: MoveSequencer,
        solver: Solver = solve_pattern,
        shuffle_length: int = config.SHUFFLE_LENGTH,
        seed: Optional[int] = None,
    ) -> None:
        self.sequencer = sequencer
        self.solver = solver
        self.shuffle_length = shuffle_length
        self._rng = random.Random(seed)

    def reset(self) -> bool:
        return self.sequencer.reset()

    def shuffle(self, n: Optional[int] = None) -> bool:
        """Mezcla con `n` tokens aleatorios (sin repetir cara consecutiva)."""
        moves = generate_scramble(n or self.shuffle_length, seed=self._rng.getrandbits(32))
        logger.info("Mezcla: %s", " ".join(moves))
        return self.sequencer.apply_move_list(moves)

    def demo(self) -> bool:
        """Reproduce la lista fija de demostración."""
        return self.sequencer.apply_move_list(DEMO_MOVES)

    def scan(self, step_delay_ms: int = config.SCAN_STEP_DELAY_MS) -> bool:
        """Transforma el cubo visible, celda por celda, en el patrón Rubicon."""
        return self.sequencer.transition_to_pattern(RUBICON_PATTERN, step_delay_ms)

    def play(self, text: str) -> bool:
        """Reproduce una secuencia escrita por el usuario ("R U R' U'").

        Raises:
            ValueError: Si algún token es inválido.
        """
        return self.sequencer.apply_move_list(parse_sequence(text))

    def solution_for(self, pattern: str, solver: Optional[Solver] = None, **solver_kwargs: Any) -> List[str]:
        """Lista de movimientos que lleva `pattern` al cubo resuelto.

        El patrón Rubicon usa su solución extendida fija; el resto se pide al solver.

        Args:
            pattern: Cubo serializado.
            solver: Solver a usar en lugar de `self.solver` (por ejemplo IDDFS).
            **solver_kwargs: Opciones que se pasan tal cual al solver.

        Raises:
            SolverError: Si el solver falla, no encuentra solución o devuelve tokens inválidos.
        """
        if pattern == SOLVED_PATTERN:
            return []
        if pattern == RUBICON_PATTERN:
            return list(EXTENDED_RUBICON_SOLVE)

        try:
            moves = (solver or self.solver)(pattern, **solver_kwargs)
        except SolverError:
            raise
        except Exception as exc:
            raise SolverError(f"El solver falló: {exc}") from exc

        if moves is None:
            raise SolverError("El solver no encontró solución.")

        try:
            return parse_sequence(" ".join(moves))
        except ValueError as exc:
            raise SolverError(f"El solver devolvió movimientos inválidos: {exc}") from exc

    def apply_solution(self, pattern: str, moves: List[str]) -> bool:
        """Reproduce una solución calculada para `pattern`.

        Si el cubo cambió desde que se calculó (por ejemplo, un drag durante la
        búsqueda en segundo plano), la solución ya no sirve y se descarta.

        Returns:
            True si arrancó la reproducción; False si la solución estaba vieja,
            vacía o había otra operación en curso.
        """
        if self.sequencer.as_string() != pattern:
            logger.warning("Solución descartada: el cubo cambió durante la búsqueda.")
            return False
        if not moves:
            return False
        return self.sequencer.apply_move_list(moves)

    def solve(self) -> bool:
        """Resuelve el cubo actual en el mismo hilo y reproduce la solución.

        Ruta síncrona para uso sin ventana (scripts, tests). La ventana busca en
        un `SolveWorker` y reproduce el resultado con `apply_solution`.

        Returns:
            True si arrancó la reproducción; False si ya estaba resuelto o había
            otra operación en curso.

        Raises:
            SolverError: Si no hay solución (el cubo no se modifica).
        """
        if self.sequencer.busy:
            logger.debug("Solve ignorado: hay una operación en curso.")
            return False

        pattern = self.sequencer.as_string()
        return self.apply_solution(pattern, self.solution_for(pattern))
