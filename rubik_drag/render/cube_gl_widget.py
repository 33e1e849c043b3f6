# rubik_drag/render/cube_gl_widget.py
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QEvent, QPoint, QPointF, Qt, QTimer
from PySide6.QtGui import QMouseEvent, QTouchEvent, QWheelEvent
from PySide6.QtOpenGLWidgets import QOpenGLWidget

from OpenGL.GL import (
    glBegin,
    glClear,
    glClearColor,
    glColor3f,
    glDisable,
    glEnable,
    glEnd,
    glFlush,
    glLoadIdentity,
    glMatrixMode,
    glReadPixels,
    glRotatef,
    glTranslatef,
    glVertex3f,
    glViewport,
    GL_BLEND,
    GL_COLOR_BUFFER_BIT,
    GL_DEPTH_BUFFER_BIT,
    GL_DEPTH_TEST,
    GL_DITHER,
    GL_MODELVIEW,
    GL_PROJECTION,
    GL_QUADS,
    GL_RGB,
    GL_UNSIGNED_BYTE,
)
from OpenGL.GLU import gluPerspective

from rubik_drag import config
from rubik_drag.core.cube_model import FACE_NORMAL, FACES, Face, sticker_position
from rubik_drag.errors import InvariantViolation
from rubik_drag.interaction.camera import OrbitCamera
from rubik_drag.interaction.gesture import GestureClassifier, PointerHit
from rubik_drag.interaction.layer import PendingAnimation
from rubik_drag.interaction.sequencer import MoveSequencer

logger = logging.getLogger(__name__)

StickerCoord = Tuple[Face, int]  # (cara, índice 0..8)
Vec3f = Tuple[float, float, float]

STEP: float = 2.0 / 3.0

PALETTE: Dict[str, Vec3f] = {
    "U": (1.0, 1.0, 1.0),
    "R": (1.0, 0.0, 0.0),
    "F": (0.0, 0.85, 0.0),
    "D": (1.0, 1.0, 0.0),
    "L": (1.0, 0.5, 0.0),
    "B": (0.0, 0.35, 1.0),
}


class CubeGLWidget(QOpenGLWidget):
    """Widget OpenGL que dibuja el cubo y traduce el puntero en gestos.

    Características:
    - Render OpenGL clásico (sin shaders) de la tabla `display` del secuenciador.
    - Picking por color (funciona con HiDPI) -> `PointerHit`.
    - Mouse y touch normalizados a press/move/release para `GestureClassifier`.
    - Implementa `LayerAnimator` con un tween por QTimer.
    - Implementa `CameraFrame` a través de su `OrbitCamera` (botón derecho orbita).
    """

    def __init__(self, sequencer: MoveSequencer, parent=None) -> None:
        """Crea el widget y lo conecta al secuenciador.

        Args:
            sequencer: Dueño del estado del cubo y de la capa pendiente.
            parent: Widget padre (Qt), opcional.
        """
        super().__init__(parent)
        self.sequencer: MoveSequencer = sequencer
        self.camera: OrbitCamera = OrbitCamera()
        self.classifier: GestureClassifier = GestureClassifier(
            self.camera, is_draggable=lambda: self.sequencer.draggable
        )

        self._last_mouse_pos: QPoint = QPoint()
        self._orbiting: bool = False

        # Stickers
        self.sticker_margin: float = 0.04
        self.sticker_offset: float = 0.01

        self.selected: Optional[StickerCoord] = None

        # Tween de la capa
        self._anim: Optional[PendingAnimation] = None
        self._anim_target: float = 0.0
        self._anim_done: Optional[Callable[[], None]] = None
        self._anim_timer: QTimer = QTimer(self)
        self._anim_timer.setInterval(config.ANIM_FRAME_MS)
        self._anim_timer.timeout.connect(self._on_anim_tick)

        self.sequencer.display_changed.connect(self.update)
        self.sequencer.finished.connect(self.classifier.discard)

        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setFocusPolicy(Qt.ClickFocus)

    # --------------------------
    # LayerAnimator
    # --------------------------
    def animate(self, pending: PendingAnimation, target: float, on_done: Callable[[], None]) -> None:
        """Anima `pending.angle` hasta `target` y luego llama `on_done`."""
        self._anim = pending
        self._anim_target = target
        self._anim_done = on_done
        self._anim_timer.start()

    def _on_anim_tick(self) -> None:
        """Tick del timer: avanza el ángulo hasta llegar exactamente al objetivo."""
        pending = self._anim
        if pending is None:
            self._anim_timer.stop()
            return

        remaining = self._anim_target - pending.angle
        if abs(remaining) <= config.ANIM_STEP_RAD:
            pending.angle = self._anim_target
            self._finish_animation()
            return

        pending.angle += math.copysign(config.ANIM_STEP_RAD, remaining)
        self.update()

    def _finish_animation(self) -> None:
        self._anim_timer.stop()
        on_done = self._anim_done
        self._anim = None
        self._anim_done = None
        self.update()
        if on_done is not None:
            on_done()

    # --------------------------
    # OpenGL lifecycle
    # --------------------------
    def initializeGL(self) -> None:
        glClearColor(0.95, 0.95, 0.95, 1.0)
        glEnable(GL_DEPTH_TEST)

    def resizeGL(self, w: int, h: int) -> None:
        """Ajusta viewport y proyección cuando cambia el tamaño del widget."""
        if h == 0:
            h = 1

        dpr = self.devicePixelRatioF()
        fb_w = int(w * dpr)
        fb_h = int(h * dpr)

        glViewport(0, 0, fb_w, fb_h)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(45.0, fb_w / float(fb_h), 0.1, 100.0)

        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()

    def paintGL(self) -> None:
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self._apply_camera()
        self._draw_stickers()

    def _apply_camera(self) -> None:
        """Aplica la transformación de cámara (orbit) al modelo."""
        glMatrixMode(GL_MODELVIEW)
        glLoadIdentity()
        glTranslatef(0.0, 0.0, -self.camera.distance)
        glRotatef(self.camera.pitch, 1.0, 0.0, 0.0)
        glRotatef(self.camera.yaw, 0.0, 1.0, 0.0)

    def _active_layer(self) -> Optional[PendingAnimation]:
        """Capa a dibujar girada: la del secuenciador o la que arrastra el usuario."""
        return self.sequencer.pending or self.classifier.pending

    # --------------------------
    # Puntero (mouse + touch)
    # --------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.RightButton:
            self._orbiting = True
            self._last_mouse_pos = event.pos()
            event.accept()
            return

        if event.button() == Qt.LeftButton:
            self._pointer_down(event.position())
            event.accept()
            return

        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._orbiting:
            dx = event.position().x() - self._last_mouse_pos.x()
            dy = event.position().y() - self._last_mouse_pos.y()
            self._last_mouse_pos = event.pos()
            self.camera.orbit(dx * 0.4, dy * 0.4)
            self.update()
            event.accept()
            return

        if event.buttons() & Qt.LeftButton:
            self._pointer_move(event.position())
            event.accept()
            return

        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.RightButton and self._orbiting:
            self._orbiting = False
            event.accept()
            return

        if event.button() == Qt.LeftButton:
            self._pointer_up()
            event.accept()
            return

        super().mouseReleaseEvent(event)

    def event(self, event: QEvent) -> bool:
        """Normaliza eventos touch (primer punto) al mismo flujo que el mouse."""
        if isinstance(event, QTouchEvent) and event.points():
            pos = event.points()[0].position()
            if event.type() == QEvent.TouchBegin:
                self._pointer_down(pos)
            elif event.type() == QEvent.TouchUpdate:
                self._pointer_move(pos)
            elif event.type() in (QEvent.TouchEnd, QEvent.TouchCancel):
                self._pointer_up()
            event.accept()
            return True
        return super().event(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom in/out con la rueda del mouse."""
        self.camera.zoom(event.angleDelta().y() / 120.0 * 0.3)
        self.update()
        event.accept()

    def _pointer_down(self, pos: QPointF) -> None:
        hit = self.pick_sticker(int(pos.x()), int(pos.y()))
        self.selected = hit
        pointer_hit = None
        if hit is not None:
            face, idx = hit
            normal = FACE_NORMAL[face]
            pointer_hit = PointerHit(
                cubelet=sticker_position(face, idx),
                normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            )
        try:
            self.classifier.press((pos.x(), pos.y()), pointer_hit)
        except InvariantViolation as exc:
            logger.error("Press descartado: %s", exc)
            self._show_status(f"Error: {exc}", 3000)
        self.update()

    def _pointer_move(self, pos: QPointF) -> None:
        try:
            angle = self.classifier.move((pos.x(), pos.y()))
        except InvariantViolation as exc:
            logger.error("Drag descartado: %s", exc)
            self._show_status(f"Error: {exc}", 3000)
            angle = None
        if angle is not None:
            self.update()

    def _pointer_up(self) -> None:
        self.selected = None
        try:
            resolved = self.classifier.release()
        except InvariantViolation as exc:
            logger.error("Release descartado: %s", exc)
            self._show_status(f"Error: {exc}", 3000)
            self.update()
            return

        if resolved is None:
            self.update()
            return

        if self.sequencer.commit_gesture(resolved) and resolved.notation:
            self._show_status(f"Move: {resolved.notation}", 1200)
        self.update()

    def _show_status(self, msg: str, timeout_ms: int) -> None:
        w = self.window()
        if hasattr(w, "statusBar") and w.statusBar():
            w.statusBar().showMessage(msg, timeout_ms)

    # --------------------------
    # Picking (color picking)
    # --------------------------
    def pick_sticker(self, x: int, y: int) -> Optional[StickerCoord]:
        """Detecta qué sticker se encuentra bajo el cursor usando color picking.

        Args:
            x: Coordenada X en píxeles (coordenadas del widget).
            y: Coordenada Y en píxeles (coordenadas del widget).

        Returns:
            (cara, índice) si hay sticker; None si no, o si el cubo no es arrastrable.
        """
        if not self.sequencer.draggable:
            return None

        dpr = self.devicePixelRatioF()
        gl_x = int(x * dpr)
        gl_y = int((self.height() - y - 1) * dpr)

        self.makeCurrent()

        glDisable(GL_DITHER)
        glDisable(GL_BLEND)

        glClearColor(0.0, 0.0, 0.0, 1.0)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        self._apply_camera()
        mapping = self._draw_all_stickers_pick()

        glFlush()

        pixel = glReadPixels(gl_x, gl_y, 1, 1, GL_RGB, GL_UNSIGNED_BYTE)

        glClearColor(0.95, 0.95, 0.95, 1.0)

        if pixel is None:
            return None

        data = bytes(pixel)
        r, g, b = data[0], data[1], data[2]

        return mapping.get(r + (g << 8) + (b << 16))

    @staticmethod
    def _encode_id_color(pick_id: int) -> Vec3f:
        """Codifica un ID entero a un color RGB (0..1) para picking."""
        return (
            (pick_id & 0xFF) / 255.0,
            ((pick_id >> 8) & 0xFF) / 255.0,
            ((pick_id >> 16) & 0xFF) / 255.0,
        )

    def _draw_all_stickers_pick(self) -> Dict[int, StickerCoord]:
        mapping: Dict[int, StickerCoord] = {}

        glBegin(GL_QUADS)
        for pick_id, (face, idx) in enumerate(((f, i) for f in FACES for i in range(9)), start=1):
            mapping[pick_id] = (face, idx)
            glColor3f(*self._encode_id_color(pick_id))
            # área de pick un poco más grande que el sticker
            for v in self._sticker_quad(face, idx, self.sticker_margin - 0.03):
                glVertex3f(*v)
        glEnd()

        return mapping

    # --------------------------
    # Render helpers
    # --------------------------
    @staticmethod
    def _rot_point(p: Vec3f, axis: str, angle: float) -> Vec3f:
        """Rota un punto alrededor de un eje por un ángulo en radianes."""
        x, y, z = p
        c = math.cos(angle)
        s = math.sin(angle)

        if axis == "x":
            return (x, y * c - z * s, y * s + z * c)
        if axis == "y":
            return (x * c + z * s, y, -x * s + z * c)
        return (x * c - y * s, x * s + y * c, z)

    def _sticker_quad(
        self,
        face: Face,
        idx: int,
        margin: float,
        offset: Optional[float] = None,
    ) -> List[Vec3f]:
        """Retorna los 4 vértices (GL_QUADS) de un sticker.

        El centro sale de `sticker_position` (mismo layout que `CubeModel`);
        el quad se extiende sobre los dos ejes tangentes a la cara.
        """
        off = self.sticker_offset if offset is None else offset
        pos = sticker_position(face, idx)
        n = FACE_NORMAL[face]
        ni = next(i for i in range(3) if n[i] != 0)
        t1, t2 = [i for i in range(3) if i != ni]

        center = [p * STEP for p in pos]
        center[ni] = n[ni] * (1.0 + off)

        h = STEP / 2.0 - margin
        quad: List[Vec3f] = []
        for a, b in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
            v = list(center)
            v[t1] += a * h
            v[t2] += b * h
            quad.append((v[0], v[1], v[2]))
        return quad

    def _draw_stickers(self) -> None:
        """Dibuja plástico + sticker (+ highlight) de cada facelet de `display`."""
        display = self.sequencer.display
        layer = self._active_layer()

        glBegin(GL_QUADS)
        for face in FACES:
            for idx in range(9):
                rotate = layer is not None and layer.contains(sticker_position(face, idx))

                def emit(quad: List[Vec3f], rgb: Vec3f) -> None:
                    if rotate:
                        quad = [self._rot_point(v, layer.axis, layer.angle) for v in quad]
                    glColor3f(*rgb)
                    for v in quad:
                        glVertex3f(*v)

                if self.selected == (face, idx):
                    emit(
                        self._sticker_quad(face, idx, self.sticker_margin * 0.35, offset=self.sticker_offset * 0.8),
                        (0.10, 0.95, 0.85),
                    )

                emit(
                    self._sticker_quad(face, idx, margin=0.02, offset=self.sticker_offset * 0.55),
                    (0.05, 0.05, 0.06),
                )
                emit(
                    self._sticker_quad(face, idx, self.sticker_margin),
                    PALETTE.get(display[face][idx], (0.8, 0.8, 0.8)),
                )
        glEnd()
