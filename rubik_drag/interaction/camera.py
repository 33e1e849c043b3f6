# rubik_drag/interaction/camera.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, Tuple

Vec3f = Tuple[float, float, float]


class CameraFrame(Protocol):
    """Vista de solo lectura de la cámara que necesita el clasificador de gestos."""

    @property
    def position(self) -> Vec3f:
        ...


def horizontal_azimuth(position: Vec3f) -> float:
    """Ángulo (rad) de la cámara alrededor del eje vertical.

    0 cuando la cámara está sobre +Z, pi/2 sobre +X.

    Args:
        position: Posición de la cámara en coordenadas de mundo.

    Returns:
        atan2(x, z) en radianes, rango (-pi, pi].
    """
    x, _, z = position
    return math.atan2(x, z)


@dataclass(frozen=True)
class FixedCamera:
    """Cámara inmóvil en una posición dada."""

    position: Vec3f = (3.0, 3.0, 3.0)

    @classmethod
    def at_azimuth(cls, degrees: float, distance: float = 5.0, height: float = 3.0) -> "FixedCamera":
        """Cámara a `distance` del eje vertical, girada `degrees` desde +Z hacia +X."""
        a = math.radians(degrees)
        return cls((math.sin(a) * distance, height, math.cos(a) * distance))


@dataclass
class OrbitCamera:
    """Cámara orbital (yaw/pitch/distancia) como la que aplica el widget OpenGL.

    El widget transforma el modelo con T(0,0,-distance) * Rx(pitch) * Ry(yaw);
    la posición del ojo en mundo es la inversa aplicada al origen.
    """

    yaw: float = 35.0
    pitch: float = -20.0
    distance: float = 6.0

    @property
    def position(self) -> Vec3f:
        yaw = math.radians(self.yaw)
        pitch = math.radians(self.pitch)
        horizontal = self.distance * math.cos(pitch)
        return (
            -horizontal * math.sin(yaw),
            self.distance * math.sin(pitch),
            horizontal * math.cos(yaw),
        )

    def orbit(self, d_yaw: float, d_pitch: float) -> None:
        self.yaw += d_yaw
        self.pitch = max(-89.0, min(89.0, self.pitch + d_pitch))

    def zoom(self, delta: float) -> None:
        self.distance = max(2.5, min(20.0, self.distance - delta))
