"""
modhub/models/config_entry.py
=============================

Bindable config entries ("wrapped entries").

A plugin binds entries into a :class:`ConfigFile`; each entry knows its
section/key, its declared default, a description and optionally an
acceptable-value descriptor. The schema extractor treats any object that
exposes ``boxed_value``, ``default_value`` and ``description`` the same
way, so third-party entry types work without subclassing these.

When the file is given an :class:`ISettingsManager`, values are written
through on every change and read back on ``bind``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Tuple, Union

from core.contracts.settings import ISettingsManager
from core.logging.logic.logger import logger


@dataclass(frozen=True)
class ConfigDefinition:
    section: str
    key: str

    def __str__(self) -> str:
        return f"{self.section}.{self.key}"


class AcceptableValueRange:
    def __init__(self, min_value: Any, max_value: Any) -> None:
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        self.min_value = min_value
        self.max_value = max_value

    def is_valid(self, value: Any) -> bool:
        return self.min_value <= value <= self.max_value

    def clamp(self, value: Any) -> Any:
        return max(self.min_value, min(self.max_value, value))

    def __repr__(self) -> str:
        return f"AcceptableValueRange({self.min_value!r}, {self.max_value!r})"


class AcceptableValueList:
    def __init__(self, *values: Any) -> None:
        if not values:
            raise ValueError("AcceptableValueList needs at least one value")
        self.acceptable_values: Tuple[Any, ...] = tuple(values)

    def is_valid(self, value: Any) -> bool:
        return value in self.acceptable_values

    def clamp(self, value: Any) -> Any:
        return value if self.is_valid(value) else self.acceptable_values[0]

    def __repr__(self) -> str:
        return f"AcceptableValueList{self.acceptable_values!r}"


@dataclass
class ConfigDescription:
    description: str = ""
    acceptable_values: Union[AcceptableValueRange, AcceptableValueList, None] = None


class ConfigEntry:
    """One bound value. Assignments are clamped by the acceptable values."""

    def __init__(
        self,
        config_file: "ConfigFile",
        definition: ConfigDefinition,
        default_value: Any,
        description: ConfigDescription | None = None,
    ) -> None:
        self.config_file = config_file
        self.definition = definition
        self.default_value = default_value
        self.description = description or ConfigDescription()
        self.setting_type: type = type(default_value)
        self._value = self._clamp(default_value)
        self._listeners: List[Callable[["ConfigEntry"], None]] = []

    # ------------------------------------------------------------------ #
    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        new_value = self._clamp(new_value)
        if new_value == self._value:
            return
        self._value = new_value
        self.config_file._entry_changed(self)
        for cb in list(self._listeners):
            cb(self)

    # untyped access, the way the extractor and renderers talk to entries
    @property
    def boxed_value(self) -> Any:
        return self.value

    @boxed_value.setter
    def boxed_value(self, new_value: Any) -> None:
        self.value = new_value

    def on_changed(self, callback: Callable[["ConfigEntry"], None]) -> None:
        self._listeners.append(callback)

    def _clamp(self, value: Any) -> Any:
        acceptable = self.description.acceptable_values
        return acceptable.clamp(value) if acceptable is not None else value

    def __repr__(self) -> str:
        return f"ConfigEntry({self.definition}, value={self._value!r})"


# ---------------------------------------------------------------------- #
#  Value encoding for write-through persistence                          #
# ---------------------------------------------------------------------- #
def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def _decode(raw: Any, template: Any) -> Any:
    tp = type(template)
    if isinstance(template, Enum):
        return tp[raw]
    if dataclasses.is_dataclass(template):
        kwargs = {k: tuple(v) if isinstance(v, list) else v for k, v in dict(raw).items()}
        return tp(**kwargs)
    if isinstance(template, tuple):
        return tuple(raw)
    if isinstance(template, bool):
        return bool(raw)
    if isinstance(template, (int, float, str)):
        return tp(raw)
    return raw


class ConfigFile(Mapping):
    """Ordered collection of bound entries, keyed by definition."""

    def __init__(
        self,
        settings: ISettingsManager | None = None,
        namespace: str | None = None,
        *,
        save_on_set: bool = True,
    ) -> None:
        self._entries: Dict[ConfigDefinition, ConfigEntry] = {}
        self._settings = settings
        self.namespace = namespace or "config"
        self.save_on_set = save_on_set

    # ------------------------------------------------------------------ #
    def bind(
        self,
        section: str,
        key: str,
        default_value: Any,
        description: str | ConfigDescription | None = None,
    ) -> ConfigEntry:
        definition = ConfigDefinition(section, key)
        existing = self._entries.get(definition)
        if existing is not None:
            return existing
        if isinstance(description, str):
            description = ConfigDescription(description)
        entry = ConfigEntry(self, definition, default_value, description)
        self._entries[definition] = entry
        self._load_persisted(entry)
        return entry

    def save(self) -> None:
        for entry in self._entries.values():
            self._persist(entry)

    def reload(self) -> None:
        for entry in self._entries.values():
            self._load_persisted(entry)

    # ------------------------------------------------------------------ #
    #  Mapping protocol                                                  #
    # ------------------------------------------------------------------ #
    def __getitem__(self, item: Union[ConfigDefinition, Tuple[str, str]]) -> ConfigEntry:
        if not isinstance(item, ConfigDefinition):
            if not (isinstance(item, tuple) and len(item) == 2):
                raise KeyError(item)
            item = ConfigDefinition(*item)
        return self._entries[item]

    def __iter__(self) -> Iterator[ConfigDefinition]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------ #
    #  Persistence helpers                                               #
    # ------------------------------------------------------------------ #
    def _entry_changed(self, entry: ConfigEntry) -> None:
        if self.save_on_set:
            self._persist(entry)

    def _persist(self, entry: ConfigEntry) -> None:
        if self._settings is None:
            return
        self._settings.set(self.namespace, str(entry.definition), _encode(entry.value))

    def _load_persisted(self, entry: ConfigEntry) -> None:
        if self._settings is None:
            return
        raw = self._settings.get(self.namespace, str(entry.definition))
        if raw is None:
            return
        try:
            entry._value = entry._clamp(_decode(raw, entry.default_value))
        except (KeyError, TypeError, ValueError) as exc:
            logger.log(
                "ConfigFile",
                "DecodeFailed",
                level="WARNING",
                reference_id=self.namespace,
                message=f"{entry.definition}: {exc}",
            )


# ---------------------------------------------------------------------- #
#  Duck-typed access to foreign entry types                              #
# ---------------------------------------------------------------------- #
def is_wrapped_entry(obj: Any) -> bool:
    """True for :class:`ConfigEntry` and look-alikes from other stores."""
    if isinstance(obj, ConfigEntry):
        return True
    if obj is None or isinstance(obj, type):
        return False
    try:
        return all(hasattr(obj, attr) for attr in ("boxed_value", "default_value", "description"))
    except Exception:  # noqa: BLE001 - a raising property means "not an entry"
        return False


def entry_location(entry: Any) -> Tuple[str, str]:
    """(section, key) of a wrapped entry."""
    definition = getattr(entry, "definition", None) or entry
    return str(getattr(definition, "section", "")), str(getattr(definition, "key", ""))


def entry_description(entry: Any) -> Tuple[str, Any]:
    """(description text, acceptable-value descriptor or None)."""
    desc = getattr(entry, "description", None)
    if desc is None:
        return "", None
    if isinstance(desc, str):
        return desc, None
    return str(getattr(desc, "description", "") or ""), getattr(desc, "acceptable_values", None)


def entry_value_type(entry: Any) -> type | None:
    tp = getattr(entry, "setting_type", None)
    if isinstance(tp, type):
        return tp
    default = getattr(entry, "default_value", None)
    return type(default) if default is not None else None
