# rubik_drag/errors.py
from __future__ import annotations


class InvariantViolation(RuntimeError):
    """Inconsistencia geométrica o de tablas que no se puede reparar localmente.

    Ejemplos: normal de cara sin eje dominante, ángulo fuera de los bins,
    capa fuera de {-1, 0, 1}. Aborta la operación en curso.
    """


class SolverError(RuntimeError):
    """El solver externo no pudo producir una lista de movimientos válida."""
