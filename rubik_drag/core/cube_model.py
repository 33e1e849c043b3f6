# rubik_drag/core/cube_model.py
from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple

from rubik_drag.core.notation import TOKEN_ROTATION, Axis
from rubik_drag.logic.moves import normalize_token

Face = Literal["U", "R", "F", "D", "L", "B"]
Color = str  # El color de un sticker es la letra de su cara de origen
Vec3i = Tuple[int, int, int]
FaceletKey = Tuple[Face, int]
CubeHash = Tuple[Tuple[Color, ...], ...]

# Orden canónico de serialización (mismo orden que el string de Kociemba)
FACES: List[Face] = ["U", "R", "F", "D", "L", "B"]

FACE_NORMAL: Dict[Face, Vec3i] = {
    "U": (0, 1, 0),
    "R": (1, 0, 0),
    "F": (0, 0, 1),
    "D": (0, -1, 0),
    "L": (-1, 0, 0),
    "B": (0, 0, -1),
}

SOLVED_PATTERN: str = "".join(f * 9 for f in FACES)
FACELET_COUNT: int = len(SOLVED_PATTERN)


def sticker_position(face: Face, index: int) -> Vec3i:
    """Posición entera (x, y, z) del cubelet que contiene un sticker.

    Layout por cara (fila r, columna c), mirando la cara de frente con U arriba
    (U mirando desde arriba con B arriba; D desde abajo con F arriba):
        - U: x=c-1, y=+1, z=r-1
        - R: x=+1,  y=1-r, z=1-c
        - F: x=c-1, y=1-r, z=+1
        - D: x=c-1, y=-1, z=1-r
        - L: x=-1,  y=1-r, z=c-1
        - B: x=1-c, y=1-r, z=-1

    Args:
        face: Cara del sticker.
        index: Índice 0..8 en orden fila-columna.

    Returns:
        Coordenada del cubelet, cada componente en {-1, 0, 1}.
    """
    r, c = divmod(index, 3)
    if face == "U":
        return (c - 1, 1, r - 1)
    if face == "R":
        return (1, 1 - r, 1 - c)
    if face == "F":
        return (c - 1, 1 - r, 1)
    if face == "D":
        return (c - 1, -1, 1 - r)
    if face == "L":
        return (-1, 1 - r, c - 1)
    if face == "B":
        return (1 - c, 1 - r, -1)
    raise ValueError(f"Cara inválida: {face}")


# (face, idx) <-> (pos, normal)
_FACELET_TO_PN: Dict[FaceletKey, Tuple[Vec3i, Vec3i]] = {
    (f, i): (sticker_position(f, i), FACE_NORMAL[f]) for f in FACES for i in range(9)
}
_PN_TO_FACELET: Dict[Tuple[Vec3i, Vec3i], FaceletKey] = {
    pn: key for key, pn in _FACELET_TO_PN.items()
}
_AXIS_INDEX: Dict[str, int] = {"x": 0, "y": 1, "z": 2}


def rotate_vector(v: Vec3i, axis: str, turns: int) -> Vec3i:
    """Rota un vector entero 90°*turns alrededor de un eje (regla de la mano derecha)."""
    x, y, z = v
    for _ in range(turns % 4):
        if axis == "x":
            x, y, z = x, -z, y
        elif axis == "y":
            x, y, z = z, y, -x
        elif axis == "z":
            x, y, z = -y, x, z
        else:
            raise ValueError(f"Eje inválido: {axis}")
    return (x, y, z)


_PERMUTATIONS: Dict[Tuple[str, int, int], List[Tuple[FaceletKey, FaceletKey]]] = {}


def _layer_permutation(axis: str, layer: int, turns: int) -> List[Tuple[FaceletKey, FaceletKey]]:
    """Pares (origen, destino) de los stickers que mueve un giro de capa.

    Se calcula una sola vez por (eje, capa, giros) rotando posición y normal
    de cada facelet de la capa.
    """
    key = (axis, layer, turns % 4)
    perm = _PERMUTATIONS.get(key)
    if perm is not None:
        return perm

    idx = _AXIS_INDEX[axis]
    perm = []
    for src, (pos, n) in _FACELET_TO_PN.items():
        if pos[idx] != layer:
            continue
        dst = _PN_TO_FACELET[(rotate_vector(pos, axis, turns), rotate_vector(n, axis, turns))]
        perm.append((src, dst))

    _PERMUTATIONS[key] = perm
    return perm


class CubeModel:
    """Estado simbólico (facelets) de un cubo Rubik 3x3.

    Representación:
        - `state[face]` es una lista de 9 stickers (3x3) por cara, en orden fila-columna.
        - El color de cada sticker es la letra de la cara donde empezó ("U", "R", ...).

    Notación soportada:
        - Caras: U R F D L B
        - Slices: M (sigue a L), E (sigue a D), S (sigue a F)
        - Sufijos: "" (90°), "'" (inverso) y "2" (180°)

    El string canónico concatena las caras en orden URFDLB (54 caracteres),
    con el mismo layout que usa el formato de Kociemba.
    """

    FACES: List[Face] = FACES

    def __init__(self, pattern: Optional[str] = None) -> None:
        """Crea un cubo resuelto o a partir de un patrón serializado.

        Args:
            pattern: String de 54 facelets; si es None se usa el patrón resuelto.

        Raises:
            ValueError: Si el patrón no es válido.
        """
        self.state: Dict[Face, List[Color]] = self._parse_pattern(
            SOLVED_PATTERN if pattern is None else pattern
        )

    @classmethod
    def from_string(cls, pattern: str) -> "CubeModel":
        """Construye un cubo desde su serialización canónica."""
        return cls(pattern)

    @staticmethod
    def _parse_pattern(pattern: str) -> Dict[Face, List[Color]]:
        pattern = pattern.strip()
        if len(pattern) != FACELET_COUNT:
            raise ValueError(f"El patrón debe tener {FACELET_COUNT} facelets, tiene {len(pattern)}")

        unknown = set(pattern) - set(FACES)
        if unknown:
            raise ValueError(f"Colores desconocidos en el patrón: {sorted(unknown)}")

        for f in FACES:
            if pattern.count(f) != 9:
                raise ValueError(f"El color {f} aparece {pattern.count(f)} veces (se esperaban 9)")

        return {f: list(pattern[k * 9:(k + 1) * 9]) for k, f in enumerate(FACES)}

    # --------------------------
    # Public API
    # --------------------------
    def to_string(self) -> str:
        """Serializa el estado en el string canónico URFDLB."""
        return "".join("".join(self.state[f]) for f in FACES)

    def copy(self) -> "CubeModel":
        c = CubeModel.__new__(CubeModel)
        c.state = self.facelets()
        return c

    def facelets(self) -> Dict[Face, List[Color]]:
        """Copia independiente de la tabla de stickers."""
        return {f: list(self.state[f]) for f in FACES}

    def is_solved(self) -> bool:
        """Indica si el cubo está en el patrón resuelto (cada cara con su color)."""
        return self.to_string() == SOLVED_PATTERN

    def to_hashable(self) -> CubeHash:
        return tuple(tuple(self.state[f]) for f in FACES)

    def apply_sequence(self, seq: str) -> None:
        """Aplica una secuencia de movimientos separada por espacios.

        Args:
            seq: String con movimientos, por ejemplo: "R U R' U'".
        """
        for token in seq.split():
            self.apply_move(token)

    def apply_move(self, move: str) -> None:
        """Aplica un movimiento individual.

        Args:
            move: Movimiento en notación (por ejemplo: "R", "U'", "F2", "M").

        Raises:
            ValueError: Si el movimiento base o el sufijo no están soportados.
        """
        move = normalize_token(move)
        if not move:
            return

        axis, layer, toward = TOKEN_ROTATION[move[0]]
        suffix = move[1:]
        if suffix == "'":
            quarters = -1
        elif suffix == "2":
            quarters = 2
        else:
            quarters = 1

        self.rotate_layer(axis, layer, toward * quarters)

    def rotate_layer(self, axis: Axis, layer: int, turns: int) -> None:
        """Rota una capa en pasos de 90° (positivo = regla de la mano derecha).

        Args:
            axis: Eje de rotación ('x', 'y' o 'z').
            layer: Capa a rotar (-1, 0 o 1).
            turns: Cuartos de vuelta con signo (se normaliza mod 4).
        """
        if turns % 4 == 0:
            return

        old = self.state
        new = self.facelets()
        for (sf, si), (df, di) in _layer_permutation(axis, layer, turns):
            new[df][di] = old[sf][si]
        self.state = new

    def reset(self) -> None:
        """Reinicia el cubo a estado resuelto."""
        self.state = self._parse_pattern(SOLVED_PATTERN)
