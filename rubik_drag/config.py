# rubik_drag/config.py
"""Constantes globales del motor de interacción.

Agrupa en un solo lugar los umbrales del drag, la ganancia de rotación,
los parámetros de animación y los nombres usados para persistir el estado.
Cambiar estos valores modifica la "sensación" del cubo de inmediato.
"""
from __future__ import annotations

import logging
import os
from typing import Tuple

# --- Gestos ---
# Distancia mínima (px) antes de bloquear el eje de rotación.
MIN_MOVE_DISTANCE: float = 10.0
# Radianes de giro por píxel arrastrado sobre el eje secundario.
ROTATION_RAD_PER_PX: float = 0.01
# Componente mínima para considerar una normal alineada a un eje.
NORMAL_SNAP_TOLERANCE: float = 0.9

# Cortes (en grados) de los bins semiabiertos: [0,40] (40,130] (130,220] (220,310] (310,360]
SNAP_BINS: Tuple[Tuple[float, int], ...] = (
    (40.0, 0),
    (130.0, 90),
    (220.0, 180),
    (310.0, 270),
    (360.0, 360),
)

# --- Animación ---
ANIM_FRAME_MS: int = 16  # ~60fps
ANIM_STEP_RAD: float = 0.10  # rad/frame

# --- Comandos ---
SHUFFLE_LENGTH: int = 20
SCAN_STEP_DELAY_MS: int = 500
SOLVER_MAX_DEPTH: int = 5

# --- Persistencia ---
STATE_FIELD: str = "fd"
SETTINGS_ORG: str = "rubik_drag"
SETTINGS_APP: str = "RubikDrag"

# --- Logging ---
LOG_LEVEL: int = getattr(
    logging, os.environ.get("RUBIK_DRAG_LOG_LEVEL", "INFO").upper(), logging.INFO
)
