"""
modhub/models/field_info.py
===========================

One editable setting and the storage binding behind it.

A field reads and writes either a plain member of the settings object
(:class:`MemberBinding`) or a wrapped config entry (:class:`EntryBinding`).
``get_value``/``set_value``/``reset_value`` always go through the binding,
so a field behaves the same no matter which registration path built it.
Setters never validate against the field's constraint.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from modhub.models.constraint import Constraint
from modhub.models.field_kind import FieldKind, KindTraits, traits_for


class _Missing:
    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class FieldBinding(ABC):
    @abstractmethod
    def get(self) -> Any:
        ...

    @abstractmethod
    def set(self, value: Any) -> None:
        ...


class MemberBinding(FieldBinding):
    """Attribute (or property) on the plugin's settings object."""

    def __init__(self, owner: Any, member: str) -> None:
        self.owner = owner
        self.member = member

    def get(self) -> Any:
        return getattr(self.owner, self.member)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.member, value)

    def __repr__(self) -> str:
        return f"MemberBinding({type(self.owner).__name__}.{self.member})"


class EntryBinding(FieldBinding):
    """Wrapped config entry; reads and writes its boxed value."""

    def __init__(self, entry: Any) -> None:
        self.entry = entry

    def get(self) -> Any:
        return self.entry.boxed_value

    def set(self, value: Any) -> None:
        self.entry.boxed_value = value

    @property
    def declared_default(self) -> Any:
        return self.entry.default_value

    def __repr__(self) -> str:
        return f"EntryBinding({self.entry!r})"


@dataclass(eq=False)
class FieldInfo:
    name: str
    display_name: str
    binding: FieldBinding
    kind: FieldKind = FieldKind.OPAQUE
    value_type: Optional[type] = None
    tooltip: str = ""
    constraint: Constraint = None
    advanced: bool = False
    read_only: bool = False
    percentage: bool = False
    fmt: Optional[str] = None
    order: int = 0
    default_value: Any = MISSING
    initial_value: Any = MISSING

    @property
    def is_entry(self) -> bool:
        return isinstance(self.binding, EntryBinding)

    @property
    def traits(self) -> KindTraits:
        return traits_for(self.kind)

    # ------------------------------------------------------------------ #
    def get_value(self) -> Any:
        return self.binding.get()

    def set_value(self, value: Any) -> None:
        self.binding.set(value)

    def reset_value(self) -> Any:
        """Value a reset would write, or ``MISSING`` if none is known."""
        if isinstance(self.binding, EntryBinding):
            return self.binding.declared_default
        if self.default_value is not MISSING:
            return self.default_value
        return self.initial_value

    def reset(self) -> bool:
        value = self.reset_value()
        if value is MISSING:
            return False
        self.set_value(value)
        return True

    def __repr__(self) -> str:
        return f"FieldInfo({self.name!r}, kind={self.kind.value}, binding={self.binding!r})"
