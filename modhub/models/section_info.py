"""Named, ordered group of fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from modhub.models.field_info import FieldInfo


@dataclass(eq=False)
class SectionInfo:
    name: str
    order: int = 0
    fields: List[FieldInfo] = field(default_factory=list)

    def find_field(self, name: str) -> Optional[FieldInfo]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def sort_fields(self) -> None:
        # list.sort is stable: equal order keys keep discovery order
        self.fields.sort(key=lambda f: f.order)
