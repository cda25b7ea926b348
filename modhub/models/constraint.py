"""
modhub/models/constraint.py
===========================

Constraint descriptors attached to a field: none, a min/max/step range,
or a fixed list of allowed values. Fields carry them for the presenting
layer; nothing in the engine enforces them on ``set``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

DEFAULT_STEP = 0.01


@dataclass(frozen=True)
class RangeConstraint:
    minimum: float
    maximum: float
    step: Optional[float] = DEFAULT_STEP

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


@dataclass(frozen=True)
class ChoiceConstraint:
    values: Tuple[Any, ...]

    def __contains__(self, item: Any) -> bool:
        return item in self.values


Constraint = Union[RangeConstraint, ChoiceConstraint, None]


def range_from_tuple(bounds: Sequence[float]) -> RangeConstraint:
    """``(min, max)`` or ``(min, max, step)``."""
    if len(bounds) == 2:
        return RangeConstraint(float(bounds[0]), float(bounds[1]))
    if len(bounds) == 3:
        return RangeConstraint(float(bounds[0]), float(bounds[1]), float(bounds[2]))
    raise ValueError(f"range needs 2 or 3 items, got {len(bounds)}")


def constraint_from_acceptable(acceptable: Any) -> Constraint:
    """Translate a wrapped entry's native acceptable-value descriptor.

    Anything with ``min_value``/``max_value`` becomes a range without a
    step; anything with a non-empty ``acceptable_values`` sequence becomes
    a choice list.
    """
    if acceptable is None:
        return None
    if hasattr(acceptable, "min_value") and hasattr(acceptable, "max_value"):
        try:
            return RangeConstraint(float(acceptable.min_value), float(acceptable.max_value), step=None)
        except (TypeError, ValueError):
            return None
    values = getattr(acceptable, "acceptable_values", None)
    if values:
        return ChoiceConstraint(tuple(values))
    return None
