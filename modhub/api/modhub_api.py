"""
modhub/api/modhub_api.py
========================

Registration facade handed to plugins.

The host constructs one :class:`ModRegistry` at startup and attaches it
here; plugins call :meth:`ModHubApi.register` with either an
``IModHubMod`` or a settings object decorated with ``@modhub_mod``.
Registering before a registry is attached raises
:class:`RegistryNotReadyError` so plugins can retry later.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from modhub.api.mod_interface import IModHubMod
from modhub.exceptions.errors import RegistryNotReadyError
from modhub.logic.mod_registry import ModRegistry
from modhub.models.mod_info import ModInfo


class ModHubApi:
    def __init__(self, registry: ModRegistry | None = None) -> None:
        self._registry = registry

    def attach(self, registry: ModRegistry) -> None:
        self._registry = registry

    def detach(self) -> None:
        self._registry = None

    @property
    def is_loaded(self) -> bool:
        return self._registry is not None

    @property
    def registry(self) -> ModRegistry:
        if self._registry is None:
            raise RegistryNotReadyError("Mod Hub is not loaded yet")
        return self._registry

    def register(self, mod_or_settings: Any, plugin_folder: Path | str | None = None) -> Optional[ModInfo]:
        registry = self.registry
        if isinstance(mod_or_settings, IModHubMod):
            return registry.register_mod(mod_or_settings)
        folder = Path(plugin_folder) if plugin_folder is not None else None
        return registry.register_from_attributes(mod_or_settings, folder)

    def unregister(self, mod_id: str) -> None:
        if self._registry is not None:
            self._registry.unregister(mod_id)
