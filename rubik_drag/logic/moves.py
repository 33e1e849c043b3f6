# rubik_drag/logic/moves.py
from __future__ import annotations

from typing import Dict, Iterable, List, Set, Tuple

FACE_LETTERS: Set[str] = {"U", "D", "L", "R", "F", "B"}
SLICE_LETTERS: Set[str] = {"M", "E", "S"}
VALID_BASES: Set[str] = FACE_LETTERS | SLICE_LETTERS
VALID_SUFFIX: Set[str] = {"", "'", "2"}

# Comillas tipográficas que suelen llegar al copiar secuencias de la web
_QUOTES: Dict[str, str] = {"’": "'", "‘": "'", "`": "'"}
_INVERSE_SUFFIX: Dict[str, str] = {"": "'", "'": "", "2": "2"}


def split_token(tok: str) -> Tuple[str, str]:
    """Separa un token en (letra, sufijo) validando ambas partes.

    Args:
        tok: Token ya sin espacios, por ejemplo "R'" o "M2".

    Returns:
        (base, sufijo) con el sufijo en {"", "'", "2"}.

    Raises:
        ValueError: Si la letra o el sufijo no son válidos.
    """
    for typographic, plain in _QUOTES.items():
        tok = tok.replace(typographic, plain)

    base, suf = tok[:1], tok[1:]
    if base not in VALID_BASES:
        raise ValueError(f"Movimiento inválido: {tok}")

    # El inverso de un 180° es el mismo giro: "D2'" se acepta como "D2"
    if suf == "2'":
        suf = "2"
    if suf not in VALID_SUFFIX:
        raise ValueError(f"Sufijo inválido en: {tok}")
    return base, suf


def normalize_token(tok: str) -> str:
    """Lleva un token a su forma canónica ("R’" -> "R'", "D2'" -> "D2").

    Returns:
        Token normalizado; "" si el token estaba vacío.

    Raises:
        ValueError: Si la base o el sufijo no son válidos.
    """
    tok = tok.strip()
    if not tok:
        return ""
    base, suf = split_token(tok)
    return base + suf


def inverse_move(m: str) -> str:
    """Movimiento que deshace `m` ("R" <-> "R'", "R2" es su propio inverso)."""
    m = m.strip()
    if not m:
        return ""
    base, suf = split_token(m)
    return base + _INVERSE_SUFFIX[suf]


def inverse_sequence(moves: Iterable[str]) -> List[str]:
    return [inverse_move(m) for m in reversed(list(moves))]


def parse_sequence(text: str) -> List[str]:
    """Convierte texto separado por espacios en tokens normalizados.

    Ejemplo:
        "R U R' U'" -> ["R", "U", "R'", "U'"]

    Raises:
        ValueError: Si algún token es inválido.
    """
    return [normalize_token(t) for t in text.split()]
