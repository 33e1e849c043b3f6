# rubik_drag/interaction/sequencer.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from PySide6.QtCore import QObject, QTimer, Signal

from rubik_drag import config
from rubik_drag.core.cube_model import FACELET_COUNT, FACES, CubeModel, Face
from rubik_drag.core.notation import QUARTER_TURN_STOPS, token_to_rotation
from rubik_drag.core.store import StateStore
from rubik_drag.errors import InvariantViolation
from rubik_drag.interaction.gesture import ResolvedGesture
from rubik_drag.interaction.layer import LayerAnimator, PendingAnimation
from rubik_drag.logic.moves import normalize_token

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], None]


def qt_schedule(delay_ms: int, callback: Callable[[], None]) -> None:
    """Agenda `callback` en el loop de Qt dentro de `delay_ms` milisegundos."""
    QTimer.singleShot(delay_ms, callback)


class Ticket:
    """Permiso de una operación en curso; se libera una sola vez."""

    def __init__(self, guard: "SingleFlightGuard") -> None:
        self._guard = guard
        self.active: bool = True

    def release(self) -> None:
        if not self.active:
            return
        self.active = False
        self._guard._release(self)


class SingleFlightGuard:
    """Admite como máximo una operación en vuelo y rechaza el resto (sin cola)."""

    def __init__(self) -> None:
        self._ticket: Optional[Ticket] = None

    @property
    def held(self) -> bool:
        return self._ticket is not None

    def try_enter(self) -> Optional[Ticket]:
        """Devuelve un ticket si el guard estaba libre; None si hay otra operación."""
        if self._ticket is not None:
            return None
        self._ticket = Ticket(self)
        return self._ticket

    def release(self, ticket: Ticket) -> None:
        ticket.release()

    def _release(self, ticket: Ticket) -> None:
        if self._ticket is ticket:
            self._ticket = None

    def run_exclusive(self, operation: Callable[[Ticket], None]) -> bool:
        """Ejecuta `operation(ticket)` si no hay otra operación en vuelo.

        La operación libera el ticket cuando termina (puede ser en un callback
        posterior). Si lanza una excepción, el ticket se libera igual.

        Returns:
            True si la operación arrancó; False si fue rechazada (no-op).
        """
        ticket = self.try_enter()
        if ticket is None:
            logger.debug("Operación rechazada: ya hay una en curso.")
            return False
        try:
            operation(ticket)
        except BaseException:
            ticket.release()
            raise
        return True


class MoveSequencer(QObject):
    """Único dueño del estado del cubo mientras dura una operación protegida.

    Todas las mutaciones (drag resuelto, lista de movimientos, cambio de
    patrón, reset) pasan por el mismo `SingleFlightGuard`: si ya hay una en
    vuelo, la nueva es un no-op.

    Además del `CubeModel` simbólico mantiene la tabla `display` (lo que se
    dibuja) y la `PendingAnimation` de la capa que gira. El estado se muta
    antes de animar; `display` se actualiza al reagrupar la capa.

    Signals:
        progress(float): Avance index/total de una lista de movimientos (1.0 al terminar).
        state_changed(str): Serialización recién persistida.
        display_changed(): La tabla `display` o la capa pendiente cambiaron.
        finished(): Terminó una operación protegida (cubo arrastrable de nuevo).
        aborted(str): Una operación se abortó por una violación de invariante.

    Args:
        animator: Colaborador que anima capas (ver `LayerAnimator`).
        store: Almacén donde se persiste el cubo serializado.
        schedule: Agenda callbacks con demora (por defecto `QTimer.singleShot`).
        parent: QObject padre, opcional.
    """

    progress = Signal(float)
    state_changed = Signal(str)
    display_changed = Signal()
    finished = Signal()
    aborted = Signal(str)

    def __init__(
        self,
        animator: LayerAnimator,
        store: StateStore,
        schedule: Scheduler = qt_schedule,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.animator = animator
        self.store = store
        self._schedule = schedule

        self.guard = SingleFlightGuard()
        self.cube: CubeModel = self._load_initial()
        self.display: Dict[Face, List[str]] = self.cube.facelets()
        self.pending: Optional[PendingAnimation] = None
        self.draggable: bool = True

    @property
    def busy(self) -> bool:
        return self.guard.held

    def as_string(self) -> str:
        return self.cube.to_string()

    # --------------------------
    # Operaciones protegidas
    # --------------------------
    def apply_move_list(self, moves: Sequence[str]) -> bool:
        """Reproduce una lista de movimientos, uno por vez y en orden.

        Por cada token: muta el cubo, reporta progreso, anima la capa y al
        terminar la animación reagrupa y persiste.

        Args:
            moves: Tokens de notación ("R", "U'", "F2", ...).

        Returns:
            True si arrancó; False si había otra operación o la lista estaba vacía.

        Raises:
            ValueError: Si algún token es inválido (antes de tocar el cubo).
        """
        tokens = [t for t in (normalize_token(m) for m in moves) if t]
        if not tokens:
            return False
        return self.guard.run_exclusive(
            lambda ticket: self._run(ticket, self._start_move_list, tokens, ticket)
        )

    def commit_gesture(self, resolved: ResolvedGesture) -> bool:
        """Aplica el movimiento de un drag soltado y anima la capa hasta su parada.

        Si la notación está vacía (0°) solo se anima la vuelta de la capa.

        Returns:
            True si se aceptó; False si había otra operación (la capa vuelve a 0).
        """
        accepted = self.guard.run_exclusive(
            lambda ticket: self._run(ticket, self._start_commit, resolved, ticket)
        )
        if not accepted:
            resolved.pending.angle = 0.0
        return accepted

    def transition_to_pattern(self, pattern: str, step_delay_ms: int = config.SCAN_STEP_DELAY_MS) -> bool:
        """Transforma lo que se ve en `pattern` celda por celda y luego lo adopta.

        Es un cambio puramente visual (no pasa por la notación); al final el
        estado simbólico se reemplaza por un cubo nuevo construido desde el patrón.

        Raises:
            ValueError: Si el patrón es inválido.
        """
        target = CubeModel.from_string(pattern)
        return self.guard.run_exclusive(
            lambda ticket: self._run(ticket, self._start_transition, target, step_delay_ms, ticket)
        )

    def reset(self, pattern: Optional[str] = None) -> bool:
        """Descarta el cubo actual y crea uno nuevo (resuelto por defecto).

        Raises:
            ValueError: Si el patrón es inválido.
        """
        cube = CubeModel(pattern)
        return self.guard.run_exclusive(lambda ticket: self._run(ticket, self._do_reset, cube, ticket))

    # --------------------------
    # Pasos
    # --------------------------
    def _start_move_list(self, tokens: List[str], ticket: Ticket) -> None:
        logger.info("Reproduciendo %d movimientos: %s", len(tokens), " ".join(tokens))
        self.draggable = False
        self._play_step(tokens, 0, ticket)

    def _play_step(self, tokens: List[str], index: int, ticket: Ticket) -> None:
        if index >= len(tokens):
            self.progress.emit(1.0)
            self._finish(ticket)
            return

        token = tokens[index]
        axis, layer, radians = token_to_rotation(token)

        self.cube.apply_move(token)
        self.pending = PendingAnimation(axis, layer)
        self.progress.emit(index / len(tokens))
        self.display_changed.emit()

        self.animator.animate(
            self.pending,
            radians,
            self._continue(ticket, self._step_done, tokens, index, ticket),
        )

    def _step_done(self, tokens: List[str], index: int, ticket: Ticket) -> None:
        self._regroup()
        self._persist()
        self._play_step(tokens, index + 1, ticket)

    def _start_commit(self, resolved: ResolvedGesture, ticket: Ticket) -> None:
        if resolved.end_deg != 0 and resolved.end_deg not in QUARTER_TURN_STOPS:
            raise InvariantViolation(f"Ángulo final fuera de las paradas: {resolved.end_deg}")
        if resolved.end_deg and not resolved.notation:
            raise InvariantViolation("Giro de capa sin notación")

        self.draggable = False
        self.pending = resolved.pending

        if resolved.notation:
            self.cube.apply_sequence(resolved.notation)
            self._persist()
            logger.info("Movimiento manual: %s", resolved.notation)

        self.animator.animate(
            self.pending,
            resolved.target_angle,
            self._continue(ticket, self._end_commit, ticket),
        )

    def _end_commit(self, ticket: Ticket) -> None:
        self._regroup()
        self._finish(ticket)

    def _start_transition(self, target: CubeModel, step_delay_ms: int, ticket: Ticket) -> None:
        logger.info("Transición de patrón a %s", target.to_string())
        self.draggable = False
        self._regroup()
        self._morph_cell(target, 0, step_delay_ms, ticket)

    def _morph_cell(self, target: CubeModel, index: int, step_delay_ms: int, ticket: Ticket) -> None:
        if index >= FACELET_COUNT:
            self.cube = target
            self._regroup()
            self._persist()
            self._finish(ticket)
            return

        face = FACES[index // 9]
        self.display[face][index % 9] = target.state[face][index % 9]
        self.display_changed.emit()

        self._schedule(
            step_delay_ms,
            self._continue(ticket, self._morph_cell, target, index + 1, step_delay_ms, ticket),
        )

    def _do_reset(self, cube: CubeModel, ticket: Ticket) -> None:
        self.cube = cube
        self._regroup()
        self._persist()
        logger.info("Cubo reiniciado: %s", cube.to_string())
        self._finish(ticket)

    # --------------------------
    # Helpers
    # --------------------------
    def _load_initial(self) -> CubeModel:
        stored = self.store.read(config.STATE_FIELD)
        if not stored:
            return CubeModel()
        try:
            return CubeModel.from_string(stored)
        except ValueError as exc:
            logger.warning("Estado guardado inválido (%s); se usa el cubo resuelto.", exc)
            return CubeModel()

    def _persist(self) -> None:
        serialized = self.cube.to_string()
        self.store.write(config.STATE_FIELD, serialized)
        self.state_changed.emit(serialized)

    def _regroup(self) -> None:
        """Devuelve la capa al marco del cubo: `display` vuelve a reflejar el estado."""
        self.pending = None
        self.display = self.cube.facelets()
        self.display_changed.emit()

    def _finish(self, ticket: Ticket) -> None:
        self.pending = None
        self.draggable = True
        ticket.release()
        self.finished.emit()

    def _continue(self, ticket: Ticket, fn: Callable[..., None], *args: Any) -> Callable[[], None]:
        return lambda: self._run(ticket, fn, *args)

    def _run(self, ticket: Ticket, fn: Callable[..., None], *args: Any) -> None:
        try:
            fn(*args)
        except Exception as exc:
            self._abort(ticket, exc)
            raise

    def _abort(self, ticket: Ticket, exc: Exception) -> None:
        """Lleva el cubo a un estado quieto y seguro, una sola vez por operación."""
        if not ticket.active:
            return
        logger.error("Operación abortada: %s", exc, exc_info=exc)
        self.pending = None
        self.display = self.cube.facelets()
        self.draggable = True
        ticket.release()
        self.display_changed.emit()
        self.aborted.emit(str(exc))
