# rubik_drag/interaction/layer.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Tuple

from rubik_drag.core.notation import Axis

Vec3i = Tuple[int, int, int]

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


@dataclass
class PendingAnimation:
    """Capa que está girando en pantalla: eje, capa y ángulo vivo (rad)."""

    axis: Axis
    layer: int
    angle: float = 0.0

    def contains(self, position: Vec3i) -> bool:
        """Indica si un cubelet (posición entera) pertenece a la capa."""
        return position[_AXIS_INDEX[self.axis]] == self.layer


class LayerAnimator(Protocol):
    """Colaborador visual que anima una capa y la reagrupa en el cubo.

    `animate` debe llamar a `on_done` una sola vez, después de que
    `pending.angle` llegó exactamente a `target` y la capa volvió al marco
    del cubo completo.
    """

    def animate(self, pending: PendingAnimation, target: float, on_done: Callable[[], None]) -> None:
        ...


class InstantAnimator:
    """Animador sin tween: salta al ángulo final y termina en el acto."""

    def animate(self, pending: PendingAnimation, target: float, on_done: Callable[[], None]) -> None:
        pending.angle = target
        on_done()
