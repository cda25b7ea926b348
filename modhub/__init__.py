"""
Mod Hub feature package initializer.

Provides factory functions the host calls at startup to build the mod
registry and the registration facade handed to plugins, without
hard-coding the wiring of settings storage, tag store and icon cache.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from core.config.config_loader import config_loader
from core.contracts.settings import ISettingsManager
from core.settings.logic.settings_manager import get_settings_manager
from .api.mod_interface import IModHubMod, ModHubModBase
from .api.modhub_api import ModHubApi
from .exceptions.errors import ModHubError, RegistryNotReadyError
from .logic.icon_cache import IconCache
from .logic.mod_registry import ModRegistry
from .logic.persisted_state import RegistryStateRepository
from .models.mod_attributes import modhub_mod, setting, settings_section


def get_feature_name() -> str:
    """
    Human readable feature name (used e.g. for window titles).

    Returns:
        str: The configured application name.
    """
    return config_loader.get_app_name()


def create_registry(
    settings: Optional[ISettingsManager] = None,
    *,
    cache_dir: Optional[Path] = None,
    register_self: bool = True,
    load_state: bool = True,
) -> ModRegistry:
    """
    Factory for the process-wide mod registry.

    Args:
        settings (ISettingsManager, optional): Storage for favorites, tags and
            the hub's own settings. Defaults to the SQLite settings manager.
        cache_dir (Path, optional): Icon cache directory override.
        register_self (bool): Register the hub's own settings as a mod.
        load_state (bool): Load favorites, hidden mods and tags right away.

    Returns:
        ModRegistry: A fully wired registry.
    """
    settings = settings or get_settings_manager()
    registry = ModRegistry(
        settings=settings,
        state=RegistryStateRepository(settings),
        icon_cache=IconCache(cache_dir),
    )
    if load_state:
        registry.load_state()
    if register_self:
        registry.register_modhub()
    return registry


def create_api(registry: Optional[ModRegistry] = None) -> ModHubApi:
    """
    Factory for the registration facade.

    Args:
        registry (ModRegistry, optional): Attach right away; otherwise plugins
            get ``RegistryNotReadyError`` until ``attach`` is called.

    Returns:
        ModHubApi: The facade plugins register through.
    """
    return ModHubApi(registry)


__all__ = [
    "IModHubMod",
    "ModHubModBase",
    "ModHubApi",
    "ModHubError",
    "ModRegistry",
    "RegistryNotReadyError",
    "create_api",
    "create_registry",
    "get_feature_name",
    "modhub_mod",
    "setting",
    "settings_section",
]
