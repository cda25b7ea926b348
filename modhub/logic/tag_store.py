"""
modhub/logic/tag_store.py
=========================

System tags, user-created custom tags and per-mod tag assignments.

All name comparisons are case-insensitive; the first spelling seen is
kept for display. The ``Hidden`` system tag can only be assigned or
removed with ``internal=True`` (the registry's hide/unhide path).

Every mutation is written through to the repository immediately and
announced to subscribers with the affected mod id (``None`` when the
change is global).
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Set

from core.config.config_service import config_service
from core.logging.logic.logger import Logger, logger as default_logger
from modhub.logic.persisted_state import RegistryStateRepository

HIDDEN_TAG = "Hidden"

SYSTEM_TAGS = (
    "AI", "Weapons", "Graphics", "Audio", "UI", "Gameplay", "Performance",
    "Realism", "QoL", "Cheats", "Debug", "Bots", "Items", "Maps", "Quests",
    "Traders", "Skills", "Medical", "Ballistics", "Economy", "Flea", "Hideout",
    HIDDEN_TAG,
)

TagListener = Callable[[Optional[str]], None]


def _has_space(tag: str) -> bool:
    return any(ch.isspace() for ch in tag)


class TagStore:
    def __init__(
        self,
        repository: RegistryStateRepository | None = None,
        *,
        system_tags: Iterable[str] = SYSTEM_TAGS,
        max_length: int | None = None,
        native_max_length: int | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._repo = repository
        self._logger = logger or default_logger
        self.max_length = max_length or config_service.tags.max_length
        self.native_max_length = native_max_length or config_service.tags.native_max_length
        self._system: Dict[str, str] = {t.casefold(): t for t in system_tags}
        self._custom: Dict[str, str] = {}
        self._mod_tags: Dict[str, Set[str]] = {}
        self._listeners: List[TagListener] = []

    # ------------------------------------------------------------------ #
    #  Observers                                                         #
    # ------------------------------------------------------------------ #
    def subscribe(self, listener: TagListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TagListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, mod_id: Optional[str]) -> None:
        for listener in list(self._listeners):
            listener(mod_id)

    # ------------------------------------------------------------------ #
    #  Lookup                                                            #
    # ------------------------------------------------------------------ #
    @property
    def system_tags(self) -> List[str]:
        return sorted(self._system.values(), key=str.casefold)

    @property
    def custom_tags(self) -> List[str]:
        return sorted(self._custom.values(), key=str.casefold)

    def is_system_tag(self, tag: str) -> bool:
        return bool(tag) and tag.strip().casefold() in self._system

    def is_custom_tag(self, tag: str) -> bool:
        return bool(tag) and tag.strip().casefold() in self._custom

    def all_available_tags(self) -> List[str]:
        return sorted([*self._system.values(), *self._custom.values()], key=str.casefold)

    def get_mod_tags(self, mod_id: str) -> List[str]:
        return sorted(self._mod_tags.get(mod_id, ()), key=str.casefold)

    def mod_has_tag(self, mod_id: str, tag: str) -> bool:
        wanted = (tag or "").strip().casefold()
        return any(t.casefold() == wanted for t in self._mod_tags.get(mod_id, ()))

    def assignments(self) -> Dict[str, List[str]]:
        return {mod_id: self.get_mod_tags(mod_id) for mod_id in self._mod_tags}

    def _canonical(self, tag: str) -> Optional[str]:
        key = tag.casefold()
        return self._system.get(key) or self._custom.get(key)

    def _is_well_formed(self, tag: str) -> bool:
        return bool(tag) and not _has_space(tag) and len(tag) <= self.max_length

    # ------------------------------------------------------------------ #
    #  Validation / custom tags                                          #
    # ------------------------------------------------------------------ #
    def validate_tag(self, name: str) -> Optional[str]:
        """Return an error message, or ``None`` if ``name`` can be created."""
        tag = (name or "").strip()
        if not tag:
            return "Tag cannot be empty"
        if _has_space(tag):
            return "Tag cannot contain spaces"
        if len(tag) > self.max_length:
            return f"Tag is too long (max {self.max_length} chars)"
        if self.is_system_tag(tag):
            return "This tag already exists as system tag"
        if self.is_custom_tag(tag):
            return "This tag already exists"
        return None

    def create_custom_tag(self, name: str) -> Optional[str]:
        error = self.validate_tag(name)
        if error is not None:
            return error
        tag = name.strip()
        self._custom[tag.casefold()] = tag
        self._save_custom()
        self._logger.log("TagStore", "CustomTagCreated", level="DEBUG", message=tag)
        self._notify(None)
        return None

    def delete_custom_tag(self, tag: str) -> bool:
        if not tag or self.is_system_tag(tag):
            return False
        spelling = self._custom.pop(tag.strip().casefold(), None)
        if spelling is None:
            return False
        for mod_id in list(self._mod_tags):
            tags = self._mod_tags[mod_id]
            tags.discard(spelling)
            if not tags:
                del self._mod_tags[mod_id]
        self._save_custom()
        self._save_mod_tags()
        self._logger.log("TagStore", "CustomTagDeleted", level="DEBUG", message=spelling)
        self._notify(None)
        return True

    def filter_native_tags(self, tags: Iterable[str] | None) -> List[str]:
        """Author tags that are usable as-is, in their original order."""
        result: List[str] = []
        for tag in tags or ():
            if not isinstance(tag, str):
                continue
            tag = tag.strip()
            if tag and not _has_space(tag) and len(tag) <= self.native_max_length:
                result.append(tag)
        return result

    def import_native_tags(self, tags: Iterable[str] | None) -> int:
        added = 0
        for tag in self.filter_native_tags(tags):
            if self._canonical(tag) is None:
                self._custom[tag.casefold()] = tag
                added += 1
        if added:
            self._save_custom()
            self._notify(None)
        return added

    # ------------------------------------------------------------------ #
    #  Assignments                                                       #
    # ------------------------------------------------------------------ #
    def add_tag_to_mod(self, mod_id: str, tag: str, internal: bool = False) -> bool:
        return self._assign(mod_id, tag, internal=internal, persist=True)

    def remove_tag_from_mod(self, mod_id: str, tag: str, internal: bool = False) -> bool:
        tag = (tag or "").strip()
        if not mod_id or not self._is_well_formed(tag):
            return False
        if tag.casefold() == HIDDEN_TAG.casefold() and not internal:
            return False
        tags = self._mod_tags.get(mod_id)
        if not tags:
            return False
        match = next((t for t in tags if t.casefold() == tag.casefold()), None)
        if match is None:
            return False
        tags.discard(match)
        if not tags:
            del self._mod_tags[mod_id]
        self._save_mod_tags()
        self._notify(mod_id)
        return True

    def _assign(self, mod_id: str, tag: str, *, internal: bool, persist: bool) -> bool:
        tag = (tag or "").strip()
        if not mod_id or not self._is_well_formed(tag):
            return False
        if tag.casefold() == HIDDEN_TAG.casefold() and not internal:
            return False
        canonical = self._canonical(tag)
        new_custom = canonical is None
        if new_custom:
            canonical = tag
            self._custom[tag.casefold()] = tag
        tags = self._mod_tags.setdefault(mod_id, set())
        if canonical in tags:
            return False
        tags.add(canonical)
        if persist:
            if new_custom:
                self._save_custom()
            self._save_mod_tags()
            self._notify(mod_id)
        return True

    # ------------------------------------------------------------------ #
    #  Persistence                                                       #
    # ------------------------------------------------------------------ #
    def load(self) -> None:
        """Replace in-memory state with the persisted custom tags and assignments."""
        if self._repo is None:
            return
        self._custom.clear()
        self._mod_tags.clear()
        for tag in sorted(self._repo.load_custom_tags()):
            if self._canonical(tag) is None:
                self._custom[tag.casefold()] = tag
        for mod_id, tags in self._repo.load_mod_tags().items():
            for tag in tags:
                self._assign(mod_id, tag, internal=True, persist=False)

    def attach_hidden(self, mod_id: str) -> None:
        """Mark ``mod_id`` hidden in memory only (used when loading state)."""
        self._assign(mod_id, HIDDEN_TAG, internal=True, persist=False)

    def _save_custom(self) -> None:
        if self._repo is not None:
            self._repo.save_custom_tags(self._custom.values())

    def _save_mod_tags(self) -> None:
        if self._repo is not None:
            self._repo.save_mod_tags(self._mod_tags)
