"""
modhub/models/mod_info.py
=========================

One registered mod: metadata, parsed sections and loaded images.

The settings object stays owned by the plugin; the mod only reaches it
through the field bindings in ``sections``. Field-level editing and the
snapshot protocol are exposed here so callers don't have to walk the
section list themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple

from modhub.logic.edit_session import EditSession
from modhub.models.field_info import FieldInfo
from modhub.models.section_info import SectionInfo

if TYPE_CHECKING:
    from PIL import Image


@dataclass(eq=False)
class ModInfo:
    mod_id: str
    name: str
    version: str = "1.0.0"
    author: str = "Unknown"
    description: str = ""
    tags: Tuple[str, ...] = ()
    icon_path: Optional[str] = None
    image_paths: Tuple[str, ...] = ()
    plugin_folder: Optional[Path] = None
    settings_object: Any = None
    # IModHubMod for natively registered mods
    mod_interface: Any = None
    # host plugin instance, used to spot the same plugin under another id
    plugin_instance: Any = None
    auto_discovered: bool = False
    sections: List[SectionInfo] = field(default_factory=list)
    icon: Optional["Image.Image"] = None
    images: List["Image.Image"] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.session = EditSession(lambda: self.sections, owner_id=self.mod_id)

    # ------------------------------------------------------------------ #
    #  Schema access                                                     #
    # ------------------------------------------------------------------ #
    def iter_fields(self) -> Iterator[Tuple[SectionInfo, FieldInfo]]:
        for section in self.sections:
            for f in section.fields:
                yield section, f

    @property
    def field_count(self) -> int:
        return sum(len(s.fields) for s in self.sections)

    def find_section(self, name: str) -> Optional[SectionInfo]:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def find_field(self, section: str, name: str) -> Optional[FieldInfo]:
        sec = self.find_section(section)
        return sec.find_field(name) if sec else None

    def _require_field(self, section: str, name: str) -> FieldInfo:
        f = self.find_field(section, name)
        if f is None:
            raise KeyError(f"{self.mod_id}: no field {section}/{name}")
        return f

    # ------------------------------------------------------------------ #
    #  Field editing                                                     #
    # ------------------------------------------------------------------ #
    def get_field_value(self, section: str, name: str) -> Any:
        return self._require_field(section, name).get_value()

    def set_field_value(self, section: str, name: str, value: Any) -> None:
        self._require_field(section, name).set_value(value)

    def reset_field(self, section: str, name: str) -> bool:
        return self._require_field(section, name).reset()

    def reset_all_fields(self) -> int:
        return sum(1 for _, f in self.iter_fields() if f.reset())

    # ------------------------------------------------------------------ #
    #  Snapshot protocol                                                 #
    # ------------------------------------------------------------------ #
    def capture_snapshot(self) -> None:
        self.session.capture()

    def restore_snapshot(self) -> None:
        self.session.restore()

    def commit_changes(self) -> None:
        self.session.commit()

    @property
    def has_pending_changes(self) -> bool:
        return bool(self.session.changed_fields())

    # ------------------------------------------------------------------ #
    def release_images(self) -> None:
        for img in [self.icon, *self.images]:
            if img is not None:
                img.close()
        self.icon = None
        self.images = []
