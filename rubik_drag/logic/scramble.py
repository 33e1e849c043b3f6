# rubik_drag/logic/scramble.py
from __future__ import annotations

import random
from typing import List, Optional

FACES: List[str] = ["U", "D", "L", "R", "F", "B"]
SUFFIX: List[str] = ["", "'", "2"]


def generate_scramble(n: int, seed: Optional[int] = None) -> List[str]:
    """Genera una mezcla (scramble) aleatoria de `n` tokens.

    Nunca repite la misma letra de cara en dos tokens consecutivos
    (evita "U U'" o "R R2" seguidos).

    Args:
        n: Cantidad de movimientos a generar.
        seed: Semilla opcional para obtener resultados reproducibles.

    Returns:
        Lista de tokens, por ejemplo ["R", "U'", "F2", ...].

    Raises:
        ValueError: Si `n` es menor o igual a 0.
    """
    if n <= 0:
        raise ValueError("n debe ser mayor que 0.")

    rng = random.Random(seed)

    seq: List[str] = []
    last_face: Optional[str] = None

    for _ in range(n):
        face = rng.choice([f for f in FACES if f != last_face])
        last_face = face
        seq.append(face + rng.choice(SUFFIX))

    return seq
