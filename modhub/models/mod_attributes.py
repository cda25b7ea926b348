"""
modhub/models/mod_attributes.py
===============================

Declarative metadata for settings objects.

• ``@modhub_mod(...)``       mod bundle (id/name/version required)
• ``@settings_section(...)`` default section for a settings class
• ``setting(...)``           dataclass field with display metadata
• ``__modhub_fields__``      class mapping ``member -> FieldMeta`` for
                              plain attributes and properties

Example::

    @modhub_mod("com.example.fog", "Fog Tweaks", "1.2.0", tags=("Graphics",))
    @settings_section("Fog", order=1)
    @dataclass
    class FogSettings:
        density: float = setting(0.4, name="Density", value_range=(0.0, 1.0))
        debug_overlay: bool = setting(False, advanced=True)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, TypeVar

METADATA_KEY = "modhub"
MOD_ATTR = "__modhub_mod__"
SECTION_ATTR = "__modhub_section__"
FIELDS_ATTR = "__modhub_fields__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class FieldMeta:
    name: Optional[str] = None
    tooltip: Optional[str] = None
    section: Optional[str] = None
    # order of ``section``; the first member that declares one wins
    section_order: Optional[int] = None
    order: int = 0
    value_range: Optional[Tuple[float, ...]] = None
    choices: Optional[Tuple[Any, ...]] = None
    advanced: bool = False
    read_only: bool = False
    hidden: bool = False
    percentage: bool = False
    fmt: Optional[str] = None

    @property
    def tagged(self) -> bool:
        """Carries an explicit display name or section."""
        return self.name is not None or self.section is not None


@dataclass(frozen=True)
class SectionMeta:
    name: str
    order: int = 0


@dataclass(frozen=True)
class ModMeta:
    mod_id: str
    name: str
    version: str
    author: str = "Unknown"
    description: str = ""
    tags: Tuple[str, ...] = ()
    icon: Optional[str] = None
    images: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for key in ("mod_id", "name", "version"):
            if not str(getattr(self, key) or "").strip():
                raise ValueError(f"modhub_mod: missing required value '{key}'")


# ---------------------------------------------------------------------- #
#  Decorators / field helper                                             #
# ---------------------------------------------------------------------- #
def modhub_mod(
    mod_id: str,
    name: str,
    version: str,
    *,
    author: str = "Unknown",
    description: str = "",
    tags: Tuple[str, ...] = (),
    icon: Optional[str] = None,
    images: Tuple[str, ...] = (),
) -> Callable[[T], T]:
    meta = ModMeta(mod_id, name, version, author, description, tuple(tags), icon, tuple(images))

    def decorator(cls: T) -> T:
        setattr(cls, MOD_ATTR, meta)
        return cls

    return decorator


def settings_section(name: str, order: int = 0) -> Callable[[T], T]:
    meta = SectionMeta(name, order)

    def decorator(cls: T) -> T:
        setattr(cls, SECTION_ATTR, meta)
        return cls

    return decorator


def setting(default: Any = dataclasses.MISSING, *, default_factory: Any = dataclasses.MISSING, **meta: Any) -> Any:
    """``dataclasses.field`` carrying a :class:`FieldMeta`."""
    kwargs: dict = {"metadata": {METADATA_KEY: FieldMeta(**meta)}}
    if default is not dataclasses.MISSING:
        kwargs["default"] = default
    if default_factory is not dataclasses.MISSING:
        kwargs["default_factory"] = default_factory
    return dataclasses.field(**kwargs)


# ---------------------------------------------------------------------- #
#  Lookup                                                                #
# ---------------------------------------------------------------------- #
def get_mod_meta(obj: Any) -> Optional[ModMeta]:
    """Bundle declared directly on the object's class (not inherited)."""
    cls = obj if isinstance(obj, type) else type(obj)
    meta = cls.__dict__.get(MOD_ATTR)
    return meta if isinstance(meta, ModMeta) else None


def get_section_meta(cls: type) -> Optional[SectionMeta]:
    meta = getattr(cls, SECTION_ATTR, None)
    return meta if isinstance(meta, SectionMeta) else None


def get_field_meta(cls: type, member: str) -> Optional[FieldMeta]:
    for klass in cls.__mro__:
        mapping = klass.__dict__.get(FIELDS_ATTR)
        if mapping and member in mapping:
            return mapping[member]
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            if f.name == member:
                return f.metadata.get(METADATA_KEY)
    return None
