# rubik_drag/core/store.py
from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

from PySide6.QtCore import QSettings

from rubik_drag import config

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Almacén clave-valor externo donde se persiste el cubo serializado."""

    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Almacén en memoria (tests y ejecuciones sin persistencia)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})
        self.writes: int = 0

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes += 1


class SettingsStore:
    """Almacén respaldado por `QSettings` (registro/ini según la plataforma).

    Args:
        organization: Nombre de organización para QSettings.
        application: Nombre de aplicación para QSettings.
    """

    def __init__(
        self,
        organization: str = config.SETTINGS_ORG,
        application: str = config.SETTINGS_APP,
    ) -> None:
        self._settings = QSettings(organization, application)

    def read(self, key: str) -> Optional[str]:
        value = self._settings.value(key)
        if value is None:
            return None
        return str(value)

    def write(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
        logger.debug("Estado persistido en %s (%s)", self._settings.fileName(), key)
