# main.py
from __future__ import annotations

import sys
from typing import NoReturn

from PySide6.QtWidgets import QApplication

from rubik_drag import config
from rubik_drag.app.main_window import MainWindow
from rubik_drag.logging_config import setup_logging


def main() -> NoReturn:
    """Punto de entrada de la aplicación.

    Configura logging, crea la `QApplication`, construye la ventana principal
    y ejecuta el loop de eventos de Qt.
    """
    setup_logging(config.LOG_LEVEL)
    app = QApplication(sys.argv)
    w = MainWindow()
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
