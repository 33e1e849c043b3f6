# rubik_drag/core/notation.py
from __future__ import annotations

import math
from typing import Dict, List, Literal, Tuple

from rubik_drag.errors import InvariantViolation

Axis = Literal["x", "y", "z"]

AXES: Tuple[Axis, ...] = ("x", "y", "z")
LAYERS: Tuple[int, ...] = (-1, 0, 1)
QUARTER_TURN_STOPS: Tuple[int, ...] = (90, 180, 270, 360)

# (eje) -> [(token, sentido base)] para las capas -1, 0, 1.
# Sentido base +1 = giro positivo (regla de la mano derecha) sobre el eje.
NOTATION_TABLE: Dict[Axis, List[Tuple[str, int]]] = {
    "x": [("L", 1), ("M", 1), ("R", -1)],
    "y": [("D", 1), ("E", 1), ("U", -1)],
    "z": [("B", 1), ("S", -1), ("F", -1)],
}

# Inversa de la tabla: token -> (eje, capa, sentido base)
TOKEN_ROTATION: Dict[str, Tuple[Axis, int, int]] = {
    token: (axis, layer, base)
    for axis, row in NOTATION_TABLE.items()
    for layer, (token, base) in zip(LAYERS, row)
}


def lookup(axis: str, layer: int) -> Tuple[str, int]:
    """Devuelve el token y el sentido base para una capa.

    Args:
        axis: Eje de rotación ('x', 'y' o 'z').
        layer: Posición de la capa (-1, 0 o 1).

    Returns:
        (token, sentido_base), por ejemplo ("R", -1).

    Raises:
        InvariantViolation: Si (axis, layer) está fuera del dominio 3x3.
    """
    row = NOTATION_TABLE.get(axis)  # type: ignore[call-overload]
    if row is None or layer not in LAYERS:
        raise InvariantViolation(f"Capa sin entrada en la tabla: axis={axis!r} layer={layer!r}")
    return row[layer + 1]


def token_to_rotation(token: str) -> Tuple[Axis, int, float]:
    """Traduce un token de notación al giro visual equivalente.

    Args:
        token: Movimiento normalizado ("R", "U'", "M2", ...).

    Returns:
        (axis, layer, radians): el ángulo es con signo sobre el eje positivo.

    Raises:
        ValueError: Si el token no existe o el sufijo no está soportado.
    """
    base = token[:1]
    if base not in TOKEN_ROTATION:
        raise ValueError(f"Movimiento no soportado: {token}")

    suffix = token[1:]
    if suffix == "":
        quarters = 1
    elif suffix == "'":
        quarters = -1
    elif suffix in ("2", "2'"):
        quarters = 2
    else:
        raise ValueError(f"Sufijo no soportado: {token}")

    axis, layer, toward = TOKEN_ROTATION[base]
    return axis, layer, toward * quarters * math.pi / 2


def build_notation(axis: str, layer: int, sign: int, end_deg: int) -> str:
    """Construye la notación de un drag soltado y ya "snapeado".

    Cada cuarto de vuelta se emite como un token; 180° son dos tokens
    iguales y 270° son tres (no se colapsan a un giro inverso).

    Args:
        axis: Eje de la capa girada.
        layer: Capa girada (-1, 0, 1).
        sign: Signo del ángulo soltado (+1 / -1).
        end_deg: Ángulo final sin signo: 90, 180, 270 o 360.

    Returns:
        Tokens separados por espacio, por ejemplo "R' R'".

    Raises:
        InvariantViolation: Si `end_deg` no es una parada canónica > 0.
    """
    if end_deg not in QUARTER_TURN_STOPS:
        raise InvariantViolation(f"endDeg inválido: {end_deg}")

    token, toward = lookup(axis, layer)
    if sign < 0:
        toward *= -1
    if toward < 0:
        token += "'"

    return " ".join([token] * (end_deg // 90))
