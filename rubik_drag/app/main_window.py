# rubik_drag/app/main_window.py
from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from rubik_drag import config
from rubik_drag.app.solve_worker import SolveWorker
from rubik_drag.core.store import SettingsStore, StateStore
from rubik_drag.interaction.commands import CubeCommands
from rubik_drag.interaction.layer import InstantAnimator
from rubik_drag.interaction.sequencer import MoveSequencer
from rubik_drag.render.cube_gl_widget import CubeGLWidget

logger = logging.getLogger(__name__)

SOLVER_KOCIEMBA = "Kociemba (dos fases)"
SOLVER_IDDFS = "IDDFS (mezclas cortas)"


class MainWindow(QMainWindow):
    """Ventana principal del simulador.

    Coordina:
    - El secuenciador (`MoveSequencer`), único dueño del estado del cubo.
    - La vista OpenGL (`CubeGLWidget`), que anima capas y resuelve drags.
    - Los comandos (reset, mezcla, resolver, demo, escaneo, secuencia manual).
    - La búsqueda de solución en segundo plano (`SolveWorker`).

    Args:
        store: Almacén de persistencia; por defecto `QSettings`.
    """

    def __init__(self, store: Optional[StateStore] = None) -> None:
        super().__init__()
        self.setWindowTitle("Rubik Drag - PySide6")

        # --- Secuenciador + render ---
        self.sequencer = MoveSequencer(InstantAnimator(), store or SettingsStore(), parent=self)
        self.gl_widget = CubeGLWidget(self.sequencer, self)
        self.sequencer.animator = self.gl_widget
        self.commands = CubeCommands(self.sequencer)

        self._solve_worker: Optional[SolveWorker] = None
        self._solve_pattern: str = ""

        # --- UI ---
        root = QWidget()
        root_layout = QHBoxLayout(root)
        root_layout.addWidget(self.gl_widget, 1)

        panel = QWidget()
        panel_layout = QVBoxLayout(panel)
        panel.setFixedWidth(320)

        self.lbl_state = QLabel("")
        panel_layout.addWidget(self.lbl_state)

        row_main = QHBoxLayout()
        self.btn_reset = QPushButton("Reset")
        self.btn_demo = QPushButton("Demo")
        self.btn_scan = QPushButton("Scan")
        row_main.addWidget(self.btn_reset)
        row_main.addWidget(self.btn_demo)
        row_main.addWidget(self.btn_scan)
        panel_layout.addLayout(row_main)

        panel_layout.addWidget(QLabel("Mezclar"))
        row_scr = QHBoxLayout()
        self.spin_shuffle = QSpinBox()
        self.spin_shuffle.setRange(1, 200)
        self.spin_shuffle.setValue(config.SHUFFLE_LENGTH)
        self.btn_shuffle = QPushButton("Shuffle")
        row_scr.addWidget(self.spin_shuffle, 1)
        row_scr.addWidget(self.btn_shuffle, 1)
        panel_layout.addLayout(row_scr)

        panel_layout.addWidget(QLabel("Aplicar secuencia (ej: R U R' U')"))
        self.txt_seq = QLineEdit()
        self.txt_seq.setPlaceholderText("Ej: R U R' U'")
        panel_layout.addWidget(self.txt_seq)
        self.btn_apply = QPushButton("Aplicar")
        panel_layout.addWidget(self.btn_apply)

        panel_layout.addWidget(QLabel("Resolver"))
        self.cmb_solver = QComboBox()
        self.cmb_solver.addItems([SOLVER_KOCIEMBA, SOLVER_IDDFS])
        panel_layout.addWidget(self.cmb_solver)
        row_solve = QHBoxLayout()
        self.spin_solve_depth = QSpinBox()
        self.spin_solve_depth.setRange(1, 10)
        self.spin_solve_depth.setValue(config.SOLVER_MAX_DEPTH)
        self.spin_solve_depth.setEnabled(False)
        self.btn_solve = QPushButton("Solve")
        self.btn_cancel_solve = QPushButton("Cancelar")
        self.btn_cancel_solve.setEnabled(False)
        row_solve.addWidget(QLabel("Depth"), 0)
        row_solve.addWidget(self.spin_solve_depth, 1)
        row_solve.addWidget(self.btn_solve)
        row_solve.addWidget(self.btn_cancel_solve)
        panel_layout.addLayout(row_solve)

        self.status = QLabel("Listo.")
        panel_layout.addWidget(self.status)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        panel_layout.addWidget(self.progress_bar)
        panel_layout.addStretch(1)

        root_layout.addWidget(panel)
        self.setCentralWidget(root)

        # --- Conexiones ---
        self.btn_reset.clicked.connect(self.on_reset)
        self.btn_demo.clicked.connect(self.on_demo)
        self.btn_scan.clicked.connect(self.on_scan)
        self.btn_shuffle.clicked.connect(self.on_shuffle)
        self.btn_apply.clicked.connect(self.on_apply_sequence)
        self.btn_solve.clicked.connect(self.on_solve)
        self.btn_cancel_solve.clicked.connect(self.cancel_solve_search)
        self.cmb_solver.currentTextChanged.connect(self._on_solver_changed)

        self.sequencer.progress.connect(self._on_progress)
        self.sequencer.state_changed.connect(self._refresh_state_label)
        self.sequencer.finished.connect(self._on_operation_finished)
        self.sequencer.aborted.connect(self._on_operation_aborted)

        self.btn_reset.setShortcut("Ctrl+R")

        self._refresh_state_label()

    # -------------------
    # Helpers UI
    # -------------------
    def _refresh_state_label(self, *_: object) -> None:
        self.lbl_state.setText(
            "Estado: resuelto ✅" if self.sequencer.cube.is_solved() else "Estado: mezclado 🔄"
        )

    def _set_controls_enabled(self, enabled: bool) -> None:
        """Habilita o deshabilita los comandos (por ejemplo durante una secuencia)."""
        for w in (
            self.btn_reset,
            self.btn_demo,
            self.btn_scan,
            self.btn_shuffle,
            self.spin_shuffle,
            self.btn_apply,
            self.txt_seq,
            self.btn_solve,
            self.cmb_solver,
        ):
            w.setEnabled(enabled)

    def _started(self, accepted: bool, msg: str) -> None:
        """Actualiza la UI tras disparar una operación protegida."""
        if not accepted:
            return
        self.status.setText(msg)
        self._set_controls_enabled(False)

    def _on_progress(self, value: float) -> None:
        self.progress_bar.setValue(int(round(value * 100)))

    def _on_operation_finished(self) -> None:
        self.status.setText("Listo.")
        self._refresh_state_label()
        self._set_controls_enabled(True)

    def _on_operation_aborted(self, msg: str) -> None:
        self._set_controls_enabled(True)
        self.status.setText("Operación abortada.")
        QMessageBox.critical(self, "Error interno", msg)

    # -------------------
    # Comandos
    # -------------------
    def on_reset(self) -> None:
        self.cancel_solve_search()
        if self.commands.reset():
            self.progress_bar.setValue(0)
            self.status.setText("Listo.")

    def on_demo(self) -> None:
        self._started(self.commands.demo(), "Demo...")

    def on_scan(self) -> None:
        self._started(self.commands.scan(), "Escaneando...")

    def on_shuffle(self) -> None:
        self.cancel_solve_search()
        self._started(self.commands.shuffle(int(self.spin_shuffle.value())), "Mezclando...")

    def on_apply_sequence(self) -> None:
        """Aplica la secuencia escrita por el usuario."""
        seq = self.txt_seq.text().strip()
        if not seq:
            return
        try:
            accepted = self.commands.play(seq)
        except ValueError as exc:
            QMessageBox.warning(self, "Secuencia inválida", str(exc))
            return
        self._started(accepted, "Aplicando secuencia...")

    # -------------------
    # Solver (thread)
    # -------------------
    def on_solve(self) -> None:
        """Lanza la búsqueda de solución en un hilo y la reproduce al terminar."""
        if self.sequencer.busy:
            return
        if self._solve_worker is not None and self._solve_worker.isRunning():
            return

        self.status.setText("Buscando solución...")
        self.progress_bar.setRange(0, 0)  # indeterminado
        self._set_controls_enabled(False)
        self.btn_cancel_solve.setEnabled(True)

        self._solve_pattern = self.sequencer.as_string()
        iddfs_depth = None
        if self.cmb_solver.currentText() == SOLVER_IDDFS:
            iddfs_depth = int(self.spin_solve_depth.value())

        self._solve_worker = SolveWorker(self.commands, self._solve_pattern, iddfs_depth)
        self._solve_worker.depth_update.connect(self._on_solve_depth_update)
        self._solve_worker.finished_solution.connect(self._on_solve_finished)
        self._solve_worker.failed.connect(self._on_solve_failed)
        self._solve_worker.error.connect(self._on_solve_error)
        self._solve_worker.finished.connect(self._on_solve_thread_finished)
        self._solve_worker.start()

    def _on_solver_changed(self, name: str) -> None:
        self.spin_solve_depth.setEnabled(name == SOLVER_IDDFS)

    def _end_search(self) -> None:
        self.progress_bar.setRange(0, 100)
        self.btn_cancel_solve.setEnabled(False)

    def _on_solve_depth_update(self, d: int) -> None:
        self.status.setText(f"Buscando... probando profundidad {d}")

    def _on_solve_finished(self, sol: Optional[List[str]]) -> None:
        self._end_search()
        self._set_controls_enabled(True)

        if sol is None:
            self.status.setText("Búsqueda cancelada.")
            return
        if not sol:
            self.status.setText("El cubo ya está resuelto.")
            return

        if self.commands.apply_solution(self._solve_pattern, sol):
            self._started(True, f"Aplicando solución ({len(sol)} pasos)...")
        elif self.sequencer.as_string() != self._solve_pattern:
            self.status.setText("El cubo cambió durante la búsqueda; vuelve a resolver.")

    def _on_solve_failed(self, msg: str) -> None:
        """El solver no pudo resolver: el cubo queda intacto."""
        self._end_search()
        self._set_controls_enabled(True)
        self.status.setText("Sin solución.")
        logger.warning("Solver: %s", msg)
        QMessageBox.warning(self, "Sin solución", msg)

    def _on_solve_error(self, msg: str) -> None:
        self._end_search()
        self._set_controls_enabled(True)
        self.status.setText("Error en la búsqueda (revisa el log).")
        logger.error("Error en el hilo del solver:\n%s", msg)

    def _on_solve_thread_finished(self) -> None:
        if self._solve_worker is not None:
            self._solve_worker.deleteLater()
            self._solve_worker = None

    def cancel_solve_search(self) -> None:
        """Cancela la búsqueda del solver si está corriendo."""
        if self._solve_worker is not None and self._solve_worker.isRunning():
            self._solve_worker.requestInterruption()
            self._solve_worker.wait(300)

    def closeEvent(self, event: QCloseEvent) -> None:
        if self._solve_worker is not None and self._solve_worker.isRunning():
            self._solve_worker.requestInterruption()
            self._solve_worker.wait(1500)
        event.accept()
