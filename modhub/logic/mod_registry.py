"""
modhub/logic/mod_registry.py
============================

Central store of registered mods plus the user-owned metadata layered on
top of them (favorites, hidden mods, tags).

Registration paths, all ending in one id-keyed map:

1. ``register_mod(IModHubMod)``           native descriptor
2. ``register_from_attributes(settings)`` class decorated with ``@modhub_mod``
3. ``discover_plugins(host)``             passive scan, run once after 1 and 2

Re-registering an id replaces the entry in place. Discovery never
overwrites, and skips plugins that look like an already registered mod.

Lifecycle: the host creates exactly one registry at startup, calls
``load_state()``, lets plugins register, runs ``discover_plugins()`` and
calls ``close()`` at shutdown. All calls are expected on one thread.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from core.config.config_loader import config_loader
from core.config.config_service import config_service
from core.contracts.host import HostPluginInfo, IPluginHost
from core.contracts.settings import ISettingsManager
from core.logging.logic.logger import Logger, logger as default_logger
from core.settings.logic.settings_manager import get_settings_manager
from modhub.logic.auto_discovery import (
    DEFAULT_ENTRY_STRATEGIES,
    EntryStrategy,
    collect_config_entries,
    is_plugin_already_registered,
)
from modhub.logic.icon_cache import IconCache
from modhub.logic.persisted_state import RegistryStateRepository
from modhub.logic.schema_extractor import SchemaExtractor
from modhub.logic.tag_store import HIDDEN_TAG, TagStore
from modhub.models.mod_attributes import get_mod_meta
from modhub.models.mod_info import ModInfo
from modhub.models.registry_events import RegistryEvent, RegistryEventType

RegistryListener = Callable[[RegistryEvent], None]

EXTERNAL_TAG = "External"


class ModRegistry:
    def __init__(
        self,
        *,
        settings: ISettingsManager | None = None,
        state: RegistryStateRepository | None = None,
        tag_store: TagStore | None = None,
        icon_cache: IconCache | None = None,
        extractor: SchemaExtractor | None = None,
        entry_strategies: Sequence[EntryStrategy] | None = None,
        plugins_dir: Path | None = None,
        modhub_id: str | None = None,
        load_images: bool = True,
        logger: Logger | None = None,
    ) -> None:
        self._logger = logger or default_logger
        if state is None:
            settings = settings or get_settings_manager()
            state = RegistryStateRepository(settings)
        self._settings = settings
        self._state = state
        self.tag_store = tag_store or TagStore(state, logger=self._logger)
        self.icon_cache = icon_cache or IconCache(logger=self._logger)
        self.extractor = extractor or SchemaExtractor(self._logger)
        self.entry_strategies: List[EntryStrategy] = list(entry_strategies or DEFAULT_ENTRY_STRATEGIES)
        self.plugins_dir = Path(plugins_dir) if plugins_dir else config_loader.get_plugins_dir()
        self.modhub_id = modhub_id or config_loader.get_modhub_id()
        self.load_images = load_images
        self.modhub_settings: Any = None

        self._mods: Dict[str, ModInfo] = {}
        self._favorites: Set[str] = set()
        self._hidden: Set[str] = set()
        self._listeners: List[RegistryListener] = []
        self.tag_store.subscribe(self._on_tags_changed)

    # ------------------------------------------------------------------ #
    #  Events                                                            #
    # ------------------------------------------------------------------ #
    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: RegistryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event_type: RegistryEventType, mod_id: Optional[str] = None) -> None:
        event = RegistryEvent(event_type, mod_id)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                self._logger.log("ModRegistry", "ListenerFailed", level="ERROR",
                                 reference_id=mod_id, message=f"{event_type}: {exc}")

    def _on_tags_changed(self, mod_id: Optional[str]) -> None:
        self._emit("tags_changed", mod_id)

    # ------------------------------------------------------------------ #
    #  Persisted state                                                   #
    # ------------------------------------------------------------------ #
    def load_state(self) -> None:
        self._favorites = self._state.load_favorites()
        self._hidden = self._state.load_hidden()
        self.tag_store.load()
        for mod_id in self._hidden:
            self.tag_store.attach_hidden(mod_id)
        self._logger.log(
            "ModRegistry",
            "StateLoaded",
            message=f"{len(self._favorites)} favorites, {len(self._hidden)} hidden, "
                    f"{len(self.tag_store.custom_tags)} custom tags",
        )

    def close(self) -> None:
        for mod in self._mods.values():
            mod.release_images()
        self.tag_store.unsubscribe(self._on_tags_changed)
        self._logger.log("ModRegistry", "Closed", message=f"{len(self._mods)} mods")

    # ------------------------------------------------------------------ #
    #  Registration                                                      #
    # ------------------------------------------------------------------ #
    def register_mod(self, mod: Any) -> Optional[ModInfo]:
        """Native path: ``mod`` implements ``IModHubMod``."""
        if mod is None:
            self._logger.log("ModRegistry", "RegisterFailed", level="ERROR", message="mod is None")
            return None
        try:
            mod_id = mod.mod_id
            if not mod_id:
                raise ValueError("empty mod_id")
            folder = mod.plugin_folder
            info = ModInfo(
                mod_id=mod_id,
                name=mod.name or mod_id,
                version=mod.version or "1.0.0",
                author=mod.author or "Unknown",
                description=mod.description or "",
                tags=tuple(self.tag_store.filter_native_tags(mod.tags)),
                icon_path=mod.icon_path,
                image_paths=tuple(mod.image_paths or ()),
                plugin_folder=Path(folder) if folder else None,
                mod_interface=mod,
                plugin_instance=mod.plugin_instance,
            )
            info.settings_object = mod.get_settings()
        except Exception as exc:  # noqa: BLE001
            self._logger.log("ModRegistry", "RegisterFailed", level="ERROR",
                             message=f"{type(mod).__name__}: {exc}")
            return None
        return self._store(info)

    def register_from_attributes(self, settings_obj: Any, plugin_folder: Path | None = None) -> Optional[ModInfo]:
        """Attribute path: metadata comes from the ``@modhub_mod`` bundle on the class."""
        if settings_obj is None:
            self._logger.log("ModRegistry", "RegisterFailed", level="ERROR", message="settings object is None")
            return None
        meta = get_mod_meta(settings_obj)
        if meta is None:
            self._logger.log(
                "ModRegistry",
                "MissingModAttribute",
                level="ERROR",
                message=f"{type(settings_obj).__name__} has no @modhub_mod bundle",
            )
            return None
        info = ModInfo(
            mod_id=meta.mod_id,
            name=meta.name,
            version=meta.version,
            author=meta.author or "Unknown",
            description=meta.description or "",
            tags=tuple(self.tag_store.filter_native_tags(meta.tags)),
            icon_path=meta.icon,
            image_paths=tuple(meta.images),
            plugin_folder=Path(plugin_folder) if plugin_folder else None,
            settings_object=settings_obj,
        )
        return self._store(info)

    def register_modhub(self) -> Optional[ModInfo]:
        """Register the hub's own settings as a native mod."""
        from modhub.logic.modhub_settings import ModHubSettings

        self.modhub_settings = ModHubSettings(self._settings, mod_id=self.modhub_id)
        return self.register_mod(self.modhub_settings)

    def _store(
        self,
        info: ModInfo,
        *,
        entries: Iterable[Any] | None = None,
        package: str | None = None,
        gallery_limit: int | None = None,
    ) -> ModInfo:
        existing = self._mods.get(info.mod_id)
        if existing is not None:
            self._logger.log("ModRegistry", "DuplicateRegistration", level="WARNING",
                             reference_id=info.mod_id, message="already registered, updating...")
            existing.release_images()

        if entries is None:
            info.sections = self.extractor.extract(info.settings_object, mod_id=info.mod_id)
        else:
            info.sections = self.extractor.extract_entries(entries, mod_id=info.mod_id)
        if self.load_images:
            self._load_images(info, package, gallery_limit)

        self._mods[info.mod_id] = info
        if not info.auto_discovered:
            self.tag_store.import_native_tags(info.tags)
        self._logger.log(
            "ModRegistry",
            "ModRegistered",
            reference_id=info.mod_id,
            message=f"{info.name} v{info.version} ({info.field_count} fields)",
        )
        self._emit("mod_registered", info.mod_id)
        return info

    def _load_images(self, info: ModInfo, package: str | None, gallery_limit: int | None) -> None:
        folder = info.plugin_folder or self.plugins_dir / info.mod_id
        try:
            info.icon = self.icon_cache.resolve_icon(
                info.name, info.mod_id, folder=folder, icon_path=info.icon_path, package=package
            )
            info.images = self.icon_cache.load_gallery(folder, info.image_paths, limit=gallery_limit)
        except (OSError, ValueError) as exc:
            self._logger.log("ModRegistry", "ImageLoadFailed", level="WARNING",
                             reference_id=info.mod_id, message=str(exc))

    def unregister(self, mod_id: str) -> bool:
        info = self._mods.pop(mod_id, None)
        if info is None:
            return False
        info.release_images()
        self._logger.log("ModRegistry", "ModUnregistered", reference_id=mod_id)
        self._emit("mod_unregistered", mod_id)
        return True

    # ------------------------------------------------------------------ #
    #  Auto-discovery                                                    #
    # ------------------------------------------------------------------ #
    def discover_plugins(self, host: Union[IPluginHost, Iterable[HostPluginInfo]]) -> int:
        """Register config entries of host plugins nobody registered explicitly."""
        plugins = host.iter_plugins() if isinstance(host, IPluginHost) else host
        count = 0
        for plugin in plugins:
            try:
                if self._discover_one(plugin):
                    count += 1
            except Exception as exc:  # noqa: BLE001
                self._logger.log("AutoDiscovery", "PluginFailed", level="WARNING",
                                 reference_id=getattr(plugin, "guid", None), message=str(exc))
        self._logger.log("AutoDiscovery", "DiscoveryComplete", message=f"Auto-discovered {count} plugins")
        return count

    def _discover_one(self, plugin: HostPluginInfo) -> bool:
        guid = plugin.guid
        if not guid or guid == self.modhub_id or guid in self._mods:
            return False
        if is_plugin_already_registered(self._mods.values(), plugin):
            self._logger.log("AutoDiscovery", "AlreadyRegistered", level="DEBUG", reference_id=guid)
            return False
        entries = collect_config_entries(
            plugin.config_store, self.entry_strategies, plugin_id=guid, logger=self._logger
        )
        if not entries:
            return False
        info = ModInfo(
            mod_id=guid,
            name=plugin.name or guid,
            version=plugin.version or "1.0.0",
            author=plugin.author or "Unknown",
            description=plugin.description or "External plugin",
            tags=(EXTERNAL_TAG,),
            plugin_folder=plugin.folder,
            settings_object=plugin.config_store,
            plugin_instance=plugin.instance,
            auto_discovered=True,
        )
        self._store(
            info,
            entries=entries,
            package=plugin.package,
            gallery_limit=config_service.icons.max_gallery_images,
        )
        return True

    # ------------------------------------------------------------------ #
    #  Queries                                                           #
    # ------------------------------------------------------------------ #
    @property
    def mods(self) -> Mapping[str, ModInfo]:
        return MappingProxyType(self._mods)

    @property
    def mod_count(self) -> int:
        return len(self._mods)

    def get_mod(self, mod_id: str) -> Optional[ModInfo]:
        return self._mods.get(mod_id)

    def get_mods_sorted_by_favorites(self, include_hidden: bool = False) -> List[ModInfo]:
        visible = [m for m in self._mods.values() if include_hidden or m.mod_id not in self._hidden]
        favorites = sorted((m for m in visible if m.mod_id in self._favorites), key=_by_name)
        others = sorted((m for m in visible if m.mod_id not in self._favorites), key=_by_name)
        return favorites + others

    def get_hidden_mods(self) -> List[ModInfo]:
        return sorted((m for m in self._mods.values() if m.mod_id in self._hidden), key=_by_name)

    def mod_has_tag(self, mod_id: str, tag: str) -> bool:
        if self.tag_store.mod_has_tag(mod_id, tag):
            return True
        mod = self._mods.get(mod_id)
        wanted = (tag or "").strip().casefold()
        return mod is not None and any(t.casefold() == wanted for t in mod.tags)

    def get_mods_by_tag(self, tag: str) -> List[ModInfo]:
        return sorted((m for m in self._mods.values() if self.mod_has_tag(m.mod_id, tag)), key=_by_name)

    def get_all_tags(self) -> Dict[str, int]:
        """Usage count per tag over native and assigned tags (case-insensitive)."""
        spelling: Dict[str, str] = {}
        counts: Dict[str, int] = {}
        for mod in self._mods.values():
            seen: Set[str] = set()
            for tag in [*mod.tags, *self.tag_store.get_mod_tags(mod.mod_id)]:
                key = tag.casefold()
                if key in seen:
                    continue
                seen.add(key)
                spelling.setdefault(key, tag)
                counts[key] = counts.get(key, 0) + 1
        return {spelling[k]: counts[k] for k in sorted(counts)}

    def search(self, query: str, include_hidden: bool = False) -> List[ModInfo]:
        needle = (query or "").strip().casefold()
        listing = self.get_mods_sorted_by_favorites(include_hidden)
        if not needle:
            return listing

        def _matches(mod: ModInfo) -> bool:
            haystack = [mod.name, mod.mod_id, mod.description, *mod.tags,
                        *self.tag_store.get_mod_tags(mod.mod_id)]
            return any(needle in (text or "").casefold() for text in haystack)

        return [m for m in listing if _matches(m)]

    # ------------------------------------------------------------------ #
    #  Favorites / hidden                                                #
    # ------------------------------------------------------------------ #
    def is_favorite(self, mod_id: str) -> bool:
        return mod_id in self._favorites

    def toggle_favorite(self, mod_id: str) -> bool:
        favorite = mod_id not in self._favorites
        if favorite:
            self._favorites.add(mod_id)
        else:
            self._favorites.discard(mod_id)
        self._state.save_favorites(self._favorites)
        self._logger.log("ModRegistry", "FavoriteToggled", level="DEBUG", reference_id=mod_id,
                         message=str(favorite))
        self._emit("favorites_changed", mod_id)
        return favorite

    def is_hidden(self, mod_id: str) -> bool:
        return mod_id in self._hidden

    def toggle_hidden(self, mod_id: str) -> bool:
        hidden = mod_id not in self._hidden
        self.set_hidden(mod_id, hidden)
        return hidden

    def set_hidden(self, mod_id: str, hidden: bool) -> None:
        if hidden:
            self._hidden.add(mod_id)
            self.tag_store.add_tag_to_mod(mod_id, HIDDEN_TAG, internal=True)
        else:
            self._hidden.discard(mod_id)
            self.tag_store.remove_tag_from_mod(mod_id, HIDDEN_TAG, internal=True)
        self._state.save_hidden(self._hidden)
        self._logger.log("ModRegistry", "HiddenChanged", level="DEBUG", reference_id=mod_id,
                         message=str(hidden))
        self._emit("hidden_changed", mod_id)

    # ------------------------------------------------------------------ #
    #  Tags (user-facing; ``Hidden`` is never accepted here)             #
    # ------------------------------------------------------------------ #
    @property
    def system_tags(self) -> List[str]:
        return self.tag_store.system_tags

    @property
    def custom_tags(self) -> List[str]:
        return self.tag_store.custom_tags

    def get_all_available_tags(self) -> List[str]:
        return self.tag_store.all_available_tags()

    def validate_tag(self, name: str) -> Optional[str]:
        return self.tag_store.validate_tag(name)

    def create_custom_tag(self, name: str) -> Optional[str]:
        return self.tag_store.create_custom_tag(name)

    def delete_custom_tag(self, tag: str) -> bool:
        return self.tag_store.delete_custom_tag(tag)

    def add_tag_to_mod(self, mod_id: str, tag: str) -> bool:
        return self.tag_store.add_tag_to_mod(mod_id, tag)

    def remove_tag_from_mod(self, mod_id: str, tag: str) -> bool:
        return self.tag_store.remove_tag_from_mod(mod_id, tag)

    def get_mod_custom_tags(self, mod_id: str) -> List[str]:
        return [t for t in self.tag_store.get_mod_tags(mod_id) if t != HIDDEN_TAG]

    # ------------------------------------------------------------------ #
    #  Field editing                                                     #
    # ------------------------------------------------------------------ #
    def _require(self, mod_id: str) -> ModInfo:
        mod = self._mods.get(mod_id)
        if mod is None:
            raise KeyError(f"unknown mod: {mod_id}")
        return mod

    def get_field_value(self, mod_id: str, section: str, field: str) -> Any:
        return self._require(mod_id).get_field_value(section, field)

    def set_field_value(self, mod_id: str, section: str, field: str, value: Any) -> None:
        self._require(mod_id).set_field_value(section, field, value)

    def reset_field(self, mod_id: str, section: str, field: str) -> bool:
        return self._require(mod_id).reset_field(section, field)

    def reset_all(self, mod_id: str) -> int:
        mod = self._require(mod_id)
        count = mod.reset_all_fields()
        self._call_hook(mod, "on_settings_reset")
        return count

    def capture_snapshot(self, mod_id: str) -> None:
        self._require(mod_id).capture_snapshot()

    def restore_snapshot(self, mod_id: str) -> None:
        self._require(mod_id).restore_snapshot()

    def commit_changes(self, mod_id: str) -> None:
        mod = self._require(mod_id)
        mod.commit_changes()
        self._call_hook(mod, "on_settings_saved")

    def _call_hook(self, mod: ModInfo, hook: str) -> None:
        if mod.mod_interface is None:
            return
        try:
            getattr(mod.mod_interface, hook)()
        except Exception as exc:  # noqa: BLE001
            self._logger.log("ModRegistry", "HookFailed", level="ERROR",
                             reference_id=mod.mod_id, message=f"{hook}: {exc}")


def _by_name(mod: ModInfo) -> str:
    return mod.name.casefold()
