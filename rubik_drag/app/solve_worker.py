# rubik_drag/app/solve_worker.py
from __future__ import annotations

import traceback
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QThread, Signal

from rubik_drag.errors import SolverError
from rubik_drag.interaction.commands import CubeCommands
from rubik_drag.solve import iddfs_solver


class SolveWorker(QThread):
    """Hilo de trabajo para buscar una solución sin bloquear la UI.

    Trabaja sobre el string serializado (una copia), nunca sobre el cubo vivo:
    el secuenciador sigue siendo el único que lo muta, desde el hilo de la UI.

    Signals:
        depth_update(int): Profundidad que está probando el solver (solo IDDFS).
        finished_solution(object): Lista de movimientos, o None si se canceló.
        failed(str): El solver no pudo resolver (SolverError).
        error(str): Traceback de un error inesperado.
    """

    depth_update = Signal(int)
    finished_solution = Signal(object)
    failed = Signal(str)
    error = Signal(str)

    def __init__(self, commands: CubeCommands, pattern: str, iddfs_depth: Optional[int] = None) -> None:
        """Crea el worker.

        Args:
            commands: Comandos que saben elegir solución (fija o del solver).
            pattern: Cubo serializado a resolver.
            iddfs_depth: Si se indica, usa IDDFS con esa profundidad máxima en
                lugar del solver por defecto (Kociemba).
        """
        super().__init__()
        self.commands = commands
        self.pattern: str = pattern
        self.iddfs_depth: Optional[int] = iddfs_depth

    def run(self) -> None:
        options: Dict[str, Any] = {}
        if self.iddfs_depth is not None:
            options = {
                "solver": iddfs_solver.solve_pattern,
                "max_depth": self.iddfs_depth,
                "on_depth": self.depth_update.emit,
                "should_cancel": self.isInterruptionRequested,
            }

        try:
            sol: Optional[List[str]] = self.commands.solution_for(self.pattern, **options)
        except SolverError as exc:
            if self.isInterruptionRequested():
                self.finished_solution.emit(None)
            else:
                self.failed.emit(str(exc))
            return
        except Exception:
            self.error.emit(traceback.format_exc())
            return

        self.finished_solution.emit(sol)
