"""
modhub/models/field_kind.py
===========================

Closed set of semantic field types and the single dispatch table used by
field access and by renderers.

``kind_for_type`` maps a Python type to a :class:`FieldKind`; everything
else looks the kind up in :data:`KIND_TRAITS` instead of re-checking
``isinstance`` at each call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from modhub.models.value_types import Color, KeyboardShortcut, Vector2, Vector3


class FieldKind(str, Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    ENUM = "enum"
    KEYBIND = "keybind"
    COLOR = "color"
    VECTOR = "vector"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class KindTraits:
    widget: str
    numeric: bool = False
    supports_range: bool = False
    # Python types accepted by a plain-member binding of this kind
    accepts: tuple = ()


KIND_TRAITS: Dict[FieldKind, KindTraits] = {
    FieldKind.BOOL: KindTraits("toggle", accepts=(bool,)),
    FieldKind.INT: KindTraits("slider", numeric=True, supports_range=True, accepts=(int,)),
    FieldKind.FLOAT: KindTraits("slider", numeric=True, supports_range=True, accepts=(int, float)),
    FieldKind.STRING: KindTraits("text", accepts=(str,)),
    FieldKind.ENUM: KindTraits("dropdown", accepts=(Enum,)),
    FieldKind.KEYBIND: KindTraits("keybind", accepts=(KeyboardShortcut,)),
    FieldKind.COLOR: KindTraits("color", accepts=(Color,)),
    FieldKind.VECTOR: KindTraits("vector", numeric=True, accepts=(Vector2, Vector3, tuple)),
    FieldKind.OPAQUE: KindTraits("readonly"),
}

_VECTOR_TYPES = (Vector2, Vector3)


def kind_for_type(tp: Optional[type]) -> FieldKind:
    """Classify a value type; ``None`` or unknown types are opaque."""
    if not isinstance(tp, type):
        return FieldKind.OPAQUE
    # bool before int: bool is an int subclass
    if issubclass(tp, bool):
        return FieldKind.BOOL
    if issubclass(tp, Enum):
        return FieldKind.ENUM
    if issubclass(tp, int):
        return FieldKind.INT
    if issubclass(tp, float):
        return FieldKind.FLOAT
    if issubclass(tp, str):
        return FieldKind.STRING
    if issubclass(tp, KeyboardShortcut):
        return FieldKind.KEYBIND
    if issubclass(tp, Color):
        return FieldKind.COLOR
    if issubclass(tp, _VECTOR_TYPES):
        return FieldKind.VECTOR
    return FieldKind.OPAQUE


def traits_for(kind: FieldKind) -> KindTraits:
    return KIND_TRAITS[kind]
