"""
modhub/logic/auto_discovery.py
==============================

Helpers for the passive scan over host-loaded plugins.

Config stores of third-party plugins don't share an API, so entries are
pulled out by an ordered list of strategies; the first one returning a
non-empty list wins. Hosts can pass their own list to the registry.

    internal mapping  ->  ``store._entries`` (and similar names)
    keyed accessor    ->  ``store[key] for key in store.keys()``
    iteration         ->  ``for item in store`` (entries, pairs, ``.value``)
"""

from __future__ import annotations

from collections.abc import Iterable as IterableABC, Mapping
from typing import Any, Callable, Iterable, List, Sequence

from core.contracts.host import HostPluginInfo
from core.logging.logic.logger import Logger, logger as default_logger
from modhub.models.config_entry import is_wrapped_entry
from modhub.models.mod_info import ModInfo

EntryStrategy = Callable[[Any], List[Any]]

INTERNAL_ENTRY_FIELDS = ("_entries", "entries", "_all_config_entries", "_config_entries")


def entries_from_internal_mapping(store: Any) -> List[Any]:
    for attr in INTERNAL_ENTRY_FIELDS:
        container = getattr(store, attr, None)
        if isinstance(container, Mapping):
            values = list(container.values())
        elif isinstance(container, (list, tuple)):
            values = list(container)
        else:
            continue
        found = [v for v in values if is_wrapped_entry(v)]
        if found:
            return found
    return []


def entries_from_keyed_accessor(store: Any) -> List[Any]:
    keys = getattr(store, "keys", None)
    if not callable(keys):
        return []
    return [entry for entry in (store[k] for k in list(keys())) if is_wrapped_entry(entry)]


def entries_from_iteration(store: Any) -> List[Any]:
    if isinstance(store, (str, bytes)) or not isinstance(store, IterableABC):
        return []
    found = []
    for item in store:
        if is_wrapped_entry(item):
            found.append(item)
        elif isinstance(item, tuple) and len(item) == 2 and is_wrapped_entry(item[1]):
            found.append(item[1])
        elif is_wrapped_entry(getattr(item, "value", None)):
            found.append(item.value)
    return found


DEFAULT_ENTRY_STRATEGIES: Sequence[EntryStrategy] = (
    entries_from_internal_mapping,
    entries_from_keyed_accessor,
    entries_from_iteration,
)


def collect_config_entries(
    store: Any,
    strategies: Iterable[EntryStrategy] = DEFAULT_ENTRY_STRATEGIES,
    *,
    plugin_id: str = "",
    logger: Logger | None = None,
) -> List[Any]:
    if store is None:
        return []
    log = logger or default_logger
    for strategy in strategies:
        try:
            entries = strategy(store)
        except Exception as exc:  # noqa: BLE001 - try the next strategy
            log.log(
                "AutoDiscovery",
                "StrategyFailed",
                level="DEBUG",
                reference_id=plugin_id or None,
                message=f"{getattr(strategy, '__name__', strategy)}: {exc}",
            )
            continue
        if entries:
            return entries
    return []


def is_plugin_already_registered(mods: Iterable[ModInfo], plugin: HostPluginInfo) -> bool:
    """Fuzzy check for a plugin registered under a different id.

    Matches on the identical plugin instance, on id containment in either
    direction (case-insensitive) or on an equal display name. Short ids and
    generic names can false-positive; that is accepted.
    """
    guid = (plugin.guid or "").casefold()
    name = (plugin.name or "").casefold()
    for mod in mods:
        if plugin.instance is not None and mod.plugin_instance is plugin.instance:
            return True
        mod_id = mod.mod_id.casefold()
        if guid and mod_id and (guid in mod_id or mod_id in guid):
            return True
        if name and mod.name.casefold() == name:
            return True
    return False
