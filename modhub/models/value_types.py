"""
modhub/models/value_types.py
============================

Small value objects for settings that are not plain scalars.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Color:
    """RGBA color with channels in ``0.0 .. 1.0``."""

    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass(frozen=True)
class KeyboardShortcut:
    main_key: str
    modifiers: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return "+".join((*self.modifiers, self.main_key))


@dataclass(frozen=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
