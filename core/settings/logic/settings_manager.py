"""
core/settings/logic/settings_manager.py
=======================================

High-level API for namespaced settings.
"""

from __future__ import annotations
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Final

from core.config.config_loader import config_loader
from core.contracts.settings import ISettingsManager
from core.logging.logic.logger import logger
from core.settings.logic.settings_repository import SettingsRepository


class SettingsManager(ISettingsManager):
    """Key-value store backed by :class:`SettingsRepository`."""

    def __init__(self, repository: SettingsRepository | None = None, *, db_path: Path | None = None) -> None:
        if repository is None:
            repository = SettingsRepository(db_path or config_loader.get_settings_db_path())
        self._repo = repository

    # ------------------------------------------------------------------ #
    #  API                                                               #
    # ------------------------------------------------------------------ #
    def get(self, namespace: str, key: str, fallback: Any | None = None) -> Any | None:
        return self._repo.get(namespace, key, fallback)

    def set(self, namespace: str, key: str, value: Any) -> None:
        self._repo.set(namespace, key, value)
        logger.log("SettingsManager", "Set", level="DEBUG", message=f"{namespace}.{key}")

    def delete(self, namespace: str, key: str) -> None:
        self._repo.delete(namespace, key)

    def items(self, namespace: str) -> Dict[str, Any]:
        return self._repo.items(namespace)

    def close(self) -> None:
        self._repo.close()


_default: SettingsManager | None = None
_default_lock: Final[RLock] = RLock()


def get_settings_manager() -> SettingsManager:
    """Return the process-wide manager, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = SettingsManager()
        return _default
