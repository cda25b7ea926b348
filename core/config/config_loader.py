"""
core/config/config_loader.py
============================

Thin accessor wrapper around :mod:`config_service`.

Components ask the loader for resolved paths and tunables instead of
digging into the service dataclasses. Every getter reads the service at
call time, so ``config_service.reload()`` is picked up without re-import.
"""
from __future__ import annotations

from pathlib import Path
from threading import RLock

from .config_service import ConfigService, config_service, DEFAULTS_INI

__all__ = [
    "ConfigLoader",
    "config_loader",
    "DEFAULTS_PATH",
]


class ConfigLoader:
    """Singleton facade returning resolved paths and typed settings."""

    _instance: "ConfigLoader | None" = None
    _lock = RLock()

    def __new__(cls) -> "ConfigLoader":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._service = config_service
            return cls._instance

    @property
    def service(self) -> ConfigService:
        return self._service

    # ----------------- Paths ------------------------------------------ #
    def get_settings_db_path(self) -> Path:
        return self._service.paths.settings_db_path

    def get_logging_db_path(self) -> Path:
        return self._service.paths.logging_db_path

    def get_icon_cache_dir(self) -> Path:
        return self._service.paths.cache_path / "icons"

    def get_plugins_dir(self) -> Path:
        return self._service.paths.plugins_path

    # ----------------- Meta-Infos ------------------------------------- #
    def get_app_name(self) -> str:
        return self._service.general.app_name

    def get_version(self) -> str:
        return self._service.general.version

    def get_modhub_id(self) -> str:
        return self._service.general.modhub_id

    def get_persistence_namespace(self) -> str:
        return self._service.general.persistence_namespace


config_loader: ConfigLoader = ConfigLoader()

DEFAULTS_PATH: Path = DEFAULTS_INI
