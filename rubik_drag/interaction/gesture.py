# rubik_drag/interaction/gesture.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Literal, Optional, Tuple

from rubik_drag import config
from rubik_drag.core.notation import LAYERS, Axis, build_notation
from rubik_drag.errors import InvariantViolation
from rubik_drag.interaction.camera import CameraFrame, horizontal_azimuth
from rubik_drag.interaction.layer import PendingAnimation

logger = logging.getLogger(__name__)

ScreenAxis = Literal["x", "y"]
Point = Tuple[float, float]
Vec3i = Tuple[int, int, int]
Vec3f = Tuple[float, float, float]

_AXIS_INDEX: Dict[str, int] = {"x": 0, "y": 1, "z": 2}

# (normal de la cara, eje secundario de pantalla) -> (eje de rotación, sentido)
# Pantalla con Y hacia abajo. Derecha y atrás invierten el sentido del drag vertical
# respecto de izquierda y frente; arriba/abajo se corrigen antes con el azimut.
FACE_AXIS_TABLE: Dict[Tuple[Vec3i, ScreenAxis], Tuple[Axis, int]] = {
    ((0, 1, 0), "y"): ("x", 1),
    ((0, 1, 0), "x"): ("z", -1),
    ((0, -1, 0), "y"): ("x", 1),
    ((0, -1, 0), "x"): ("z", 1),
    ((-1, 0, 0), "y"): ("z", 1),
    ((-1, 0, 0), "x"): ("y", 1),
    ((1, 0, 0), "y"): ("z", -1),
    ((1, 0, 0), "x"): ("y", 1),
    ((0, 0, 1), "y"): ("x", 1),
    ((0, 0, 1), "x"): ("y", 1),
    ((0, 0, -1), "y"): ("x", -1),
    ((0, 0, -1), "x"): ("y", 1),
}

# Caras cuya geometría en pantalla depende del azimut: signo con el que se gira el drag.
CAMERA_CORRECTION: Dict[Vec3i, int] = {
    (0, 1, 0): -1,
    (0, -1, 0): 1,
}


class GestureState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    AXIS_LOCKED = "axis_locked"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class PointerHit:
    """Resultado del picking al presionar: cubelet tocado y normal de la cara en mundo."""

    cubelet: Vec3i
    normal: Vec3f


@dataclass
class GestureSession:
    """Estado efímero de un drag, desde el press hasta el release."""

    anchor: Point
    current: Point
    cubelet: Vec3i
    normal: Vec3i
    axis: Optional[Axis] = None
    toward: int = 1
    locked: bool = False
    screen_axis: Optional[ScreenAxis] = None
    initial_sign: int = 0
    pending: Optional[PendingAnimation] = None


@dataclass(frozen=True)
class ResolvedGesture:
    """Movimiento resultante de soltar un drag con eje bloqueado.

    `notation` es "" cuando el ángulo se "snapea" a 0° (solo vuelve la capa).
    """

    pending: PendingAnimation
    end_deg: int
    sign: int
    notation: str

    @property
    def target_angle(self) -> float:
        return math.radians(self.end_deg * self.sign)


def snap_normal(normal: Vec3f, tolerance: float = config.NORMAL_SNAP_TOLERANCE) -> Vec3i:
    """Ajusta una normal a uno de los seis vectores unitarios de los ejes.

    Args:
        normal: Normal en mundo de la cara intersectada.
        tolerance: Magnitud mínima de la componente dominante.

    Returns:
        Vector (x, y, z) con una sola componente +-1.

    Raises:
        InvariantViolation: Si ninguna componente supera `tolerance`.
    """
    for i, value in enumerate(normal):
        if abs(value) > tolerance:
            snapped = [0, 0, 0]
            snapped[i] = 1 if value > 0 else -1
            return (snapped[0], snapped[1], snapped[2])
    raise InvariantViolation(f"Normal de cara sin eje dominante: {normal}")


def snap_angle(deg: float) -> int:
    """Lleva un ángulo sin signo (grados, 0..360) a la parada canónica más cercana.

    Bins semiabiertos: [0,40]->0, (40,130]->90, (130,220]->180,
    (220,310]->270, (310,360]->360.

    Raises:
        InvariantViolation: Si `deg` está fuera de [0, 360] (o es NaN).
    """
    if not 0.0 <= deg <= 360.0:
        raise InvariantViolation(f"Ángulo fuera de rango: {deg}")
    for limit, stop in config.SNAP_BINS:
        if deg <= limit:
            return stop
    raise InvariantViolation(f"Ángulo sin bin: {deg}")


def rotate_screen_vector(v: Point, angle: float) -> Point:
    """Rota un vector 2D de pantalla `angle` radianes alrededor del origen."""
    c = math.cos(angle)
    s = math.sin(angle)
    return (v[0] * c - v[1] * s, v[0] * s + v[1] * c)


def dominant_axis(v: Point) -> ScreenAxis:
    return "x" if abs(v[0]) > abs(v[1]) else "y"


def resolve_axis(normal: Vec3i, screen_axis: ScreenAxis) -> Tuple[Axis, int]:
    """Eje de rotación y sentido para una cara y un eje secundario de pantalla.

    Raises:
        InvariantViolation: Si la normal no es una de las seis canónicas.
    """
    entry = FACE_AXIS_TABLE.get((normal, screen_axis))
    if entry is None:
        raise InvariantViolation(f"Sin entrada para normal={normal} eje={screen_axis}")
    return entry


class GestureClassifier:
    """Máquina de estados que convierte un drag en un giro de capa.

    Estados: IDLE -> ARMED (press sobre el cubo) -> AXIS_LOCKED (superó la
    distancia mínima) -> RESOLVED (release), y vuelta a IDLE con `discard()`.

    El clasificador nunca toca el estado del cubo: solo escribe el ángulo vivo
    de `PendingAnimation` y entrega un `ResolvedGesture` al soltar.

    Args:
        camera: Cámara de solo lectura (para corregir drags en U/D).
        is_draggable: Devuelve False mientras otra operación controla el cubo.
        min_move: Distancia mínima (px) para bloquear el eje.
        rad_per_px: Ganancia del drag.
    """

    def __init__(
        self,
        camera: CameraFrame,
        is_draggable: Callable[[], bool] = lambda: True,
        min_move: float = config.MIN_MOVE_DISTANCE,
        rad_per_px: float = config.ROTATION_RAD_PER_PX,
    ) -> None:
        self.camera = camera
        self.is_draggable = is_draggable
        self.min_move = min_move
        self.rad_per_px = rad_per_px

        self._state: GestureState = GestureState.IDLE
        self._session: Optional[GestureSession] = None

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def session(self) -> Optional[GestureSession]:
        return self._session

    @property
    def pending(self) -> Optional[PendingAnimation]:
        """Capa que el usuario está arrastrando (None si no hay eje bloqueado)."""
        return self._session.pending if self._session is not None else None

    # --------------------------
    # Eventos de puntero
    # --------------------------
    def press(self, point: Point, hit: Optional[PointerHit]) -> bool:
        """IDLE -> ARMED si el press cae sobre el cubo y se puede arrastrar.

        Args:
            point: Coordenadas de pantalla del press.
            hit: Intersección del rayo con el cubo, o None.

        Returns:
            True si se armó una sesión.

        Raises:
            InvariantViolation: Si la normal intersectada no es casi axial.
        """
        if self._state is not GestureState.IDLE:
            self.discard()

        if hit is None:
            return False
        if not self.is_draggable():
            logger.debug("Press ignorado: el cubo no es arrastrable ahora.")
            return False

        normal = snap_normal(hit.normal)
        self._session = GestureSession(
            anchor=point,
            current=point,
            cubelet=hit.cubelet,
            normal=normal,
        )
        self._state = GestureState.ARMED
        logger.debug("Gesto armado en cubelet=%s normal=%s", hit.cubelet, normal)
        return True

    def move(self, point: Point) -> Optional[float]:
        """Procesa un movimiento del puntero.

        Args:
            point: Coordenadas actuales de pantalla.

        Returns:
            Ángulo vivo (rad) de la capa si hay eje bloqueado; None si no.
        """
        session = self._session
        if session is None or self._state not in (GestureState.ARMED, GestureState.AXIS_LOCKED):
            return None
        if not self.is_draggable():
            self.cancel()
            return None

        session.current = point
        try:
            if not session.locked:
                if not self._lock(session):
                    return None
            return self._update_angle(session)
        except InvariantViolation:
            self.cancel()
            raise

    def release(self) -> Optional[ResolvedGesture]:
        """AXIS_LOCKED -> RESOLVED: "snapea" el ángulo y arma la notación.

        Returns:
            El gesto resuelto, o None si no había eje bloqueado (un click) o si
            el arrastre fue revocado.

        Raises:
            InvariantViolation: Si el ángulo o la capa no tienen entrada en las tablas.
        """
        session = self._session
        if session is None or self._state is not GestureState.AXIS_LOCKED:
            self.discard()
            return None
        if not self.is_draggable():
            self.cancel()
            return None

        pending = session.pending
        try:
            if pending is None or session.axis is None:
                raise InvariantViolation("Release con eje bloqueado pero sin capa asignada")

            deg = abs(math.degrees(pending.angle)) % 360
            sign = (pending.angle > 0) - (pending.angle < 0)
            end_deg = snap_angle(deg)

            notation = ""
            if end_deg > 0:
                notation = build_notation(pending.axis, pending.layer, sign, end_deg)
        except InvariantViolation:
            self.cancel()
            raise

        self._state = GestureState.RESOLVED
        resolved = ResolvedGesture(pending=pending, end_deg=end_deg, sign=sign, notation=notation)
        logger.debug(
            "Gesto resuelto: axis=%s layer=%s %.1f° -> %s° %r",
            pending.axis, pending.layer, deg, end_deg, notation,
        )
        return resolved

    def cancel(self) -> None:
        """Descarta la sesión sin emitir movimiento y vuelve la capa a identidad."""
        if self._session is not None and self._session.pending is not None:
            self._session.pending.angle = 0.0
        if self._session is not None:
            logger.debug("Gesto cancelado.")
        self.discard()

    def discard(self) -> None:
        """Olvida la sesión actual (campos transitorios) y vuelve a IDLE."""
        self._session = None
        self._state = GestureState.IDLE

    # --------------------------
    # Internos
    # --------------------------
    def _delta(self, session: GestureSession) -> Point:
        return (session.current[0] - session.anchor[0], session.current[1] - session.anchor[1])

    def _corrected_delta(self, session: GestureSession) -> Point:
        """Delta de pantalla, girado por el azimut de la cámara en caras U/D."""
        delta = self._delta(session)
        correction = CAMERA_CORRECTION.get(session.normal)
        if correction is None:
            return delta
        azimuth = horizontal_azimuth(self.camera.position)
        return rotate_screen_vector(delta, azimuth * correction)

    def _lock(self, session: GestureSession) -> bool:
        """ARMED -> AXIS_LOCKED una vez superada la distancia mínima."""
        dx, dy = self._delta(session)
        if math.hypot(dx, dy) < self.min_move:
            return False

        screen_axis = dominant_axis(self._corrected_delta(session))
        axis, toward = resolve_axis(session.normal, screen_axis)

        layer = session.cubelet[_AXIS_INDEX[axis]]
        if layer not in LAYERS:
            raise InvariantViolation(f"Capa fuera de rango: {layer} en eje {axis}")

        session.screen_axis = screen_axis
        session.axis = axis
        session.toward = toward
        session.locked = True
        session.pending = PendingAnimation(axis, layer)
        self._state = GestureState.AXIS_LOCKED
        logger.debug("Eje bloqueado: pantalla=%s -> axis=%s toward=%+d layer=%d", screen_axis, axis, toward, layer)
        return True

    def _update_angle(self, session: GestureSession) -> float:
        if session.pending is None or session.screen_axis is None:
            raise InvariantViolation("Ángulo pedido sin eje bloqueado")

        delta = self._corrected_delta(session)
        distance = delta[0] if session.screen_axis == "x" else delta[1]
        if session.initial_sign == 0:
            session.initial_sign = 1 if distance >= 0 else -1

        angle = (distance - self.min_move * session.initial_sign) * self.rad_per_px * session.toward
        session.pending.angle = angle
        return angle
