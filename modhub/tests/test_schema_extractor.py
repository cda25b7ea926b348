"""
modhub/tests/test_schema_extractor.py

Section/field extraction from settings objects and wrapped entries.
"""

from __future__ import annotations

import unittest
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from core.logging.logic.logger import Logger
from modhub.logic.schema_extractor import SchemaExtractor, format_field_name
from modhub.models.config_entry import AcceptableValueList, AcceptableValueRange, ConfigDescription, ConfigFile
from modhub.models.constraint import ChoiceConstraint, RangeConstraint
from modhub.models.field_info import MISSING
from modhub.models.field_kind import FieldKind
from modhub.models.mod_attributes import FieldMeta, setting, settings_section
from modhub.models.value_types import Color, KeyboardShortcut, Vector3


class Quality(Enum):
    LOW = 1
    HIGH = 2


@settings_section("Fog", order=3)
@dataclass
class FogSettings:
    density: float = setting(0.4, name="Density", value_range=(0.0, 1.0))
    quality: Quality = setting(Quality.LOW, name="Quality", section="Render", section_order=1)
    tint: Color = Color(1.0, 1.0, 1.0)
    debug_overlay: bool = setting(False, advanced=True, order=5)
    secret: str = setting("x", hidden=True)
    offset: Vector3 = Vector3()


class PlainSettings:
    __modhub_fields__ = {
        "toggle": FieldMeta(name="Toggle", tooltip="Open the window", section="Keys"),
    }

    def __init__(self) -> None:
        self.speed = 10
        self.label = "hello"
        self.toggle = KeyboardShortcut("F10")
        self._private = 1

    @property
    def computed(self) -> int:
        return self.speed * 2

    def action(self) -> None:
        pass


class EntryHolder:
    __modhub_fields__ = {
        "volume": FieldMeta(name="Volume", section="Audio"),
    }

    def __init__(self) -> None:
        self._config = ConfigFile()
        self._volume = self._config.bind(
            "Audio", "Volume", 5, ConfigDescription("Master volume", AcceptableValueRange(0, 10))
        )
        self.untagged = self._config.bind("Audio", "Untagged", 1)

    @property
    def volume(self):
        return self._volume


class Exploding:
    def __init__(self) -> None:
        self.fine = 1

    @property
    def broken(self) -> int:
        raise RuntimeError("boom")


class LegacySettings:
    volume = 0.5
    enabled = True
    label = "fog"

    def describe(self) -> str:
        return self.label


@dataclass
class LimitedSettings:
    MAX_ITEMS: ClassVar[int] = 10
    volume: float = 0.5


class ConstantHolder:
    LIMIT: ClassVar[int] = 3
    speed = 1


class NoZeroInstance:
    def __init__(self, value: int) -> None:
        self.value = value


class TestFormatFieldName(unittest.TestCase):
    def test_camel_case_and_underscores(self) -> None:
        self.assertEqual(format_field_name("EnableFeature"), "Enable Feature")
        self.assertEqual(format_field_name("max_bot_count"), "max bot count")
        self.assertEqual(format_field_name("HTTPTimeout"), "HTTP Timeout")
        self.assertEqual(format_field_name("Volume"), "Volume")


class TestSchemaExtractor(unittest.TestCase):
    def setUp(self) -> None:
        self.extractor = SchemaExtractor(Logger(persist=False))

    def test_sections_sorted_by_order(self) -> None:
        sections = self.extractor.extract(FogSettings(), mod_id="fog")
        self.assertEqual([s.name for s in sections], ["Render", "Fog"])
        self.assertEqual([s.order for s in sections], [1, 3])

    def test_fields_and_kinds(self) -> None:
        sections = {s.name: s for s in self.extractor.extract(FogSettings())}
        fog = sections["Fog"]
        self.assertEqual([f.name for f in fog.fields], ["density", "tint", "offset", "debug_overlay"])
        density = fog.find_field("density")
        self.assertEqual(density.display_name, "Density")
        self.assertEqual(density.kind, FieldKind.FLOAT)
        self.assertEqual(density.constraint, RangeConstraint(0.0, 1.0, 0.01))
        self.assertEqual(fog.find_field("tint").kind, FieldKind.COLOR)
        self.assertEqual(fog.find_field("offset").kind, FieldKind.VECTOR)
        self.assertTrue(fog.find_field("debug_overlay").advanced)
        self.assertIsNone(fog.find_field("secret"))
        self.assertEqual(sections["Render"].fields[0].kind, FieldKind.ENUM)

    def test_initial_value_matches_live_object(self) -> None:
        obj = FogSettings(density=0.9, quality=Quality.HIGH)
        for section in self.extractor.extract(obj):
            for f in section.fields:
                self.assertEqual(f.get_value(), getattr(obj, f.name))
                self.assertEqual(f.initial_value, getattr(obj, f.name))

    def test_defaults_come_from_zero_instance(self) -> None:
        obj = FogSettings(density=0.9)
        density = self.extractor.extract(obj)[1].find_field("density")
        self.assertEqual(density.default_value, 0.4)
        density.set_value(0.1)
        self.assertTrue(density.reset())
        self.assertEqual(obj.density, 0.4)

    def test_plain_class_attributes_are_fields(self) -> None:
        obj = LegacySettings()
        sections = self.extractor.extract(obj)
        self.assertEqual([s.name for s in sections], ["General"])
        fields = sections[0].fields
        self.assertEqual([f.name for f in fields], ["volume", "enabled", "label"])
        self.assertEqual(fields[1].kind, FieldKind.BOOL)
        fields[0].set_value(0.8)
        self.assertEqual(obj.volume, 0.8)
        self.assertEqual(LegacySettings.volume, 0.5)
        self.assertTrue(fields[0].reset())
        self.assertEqual(obj.volume, 0.5)

    def test_class_var_constants_are_not_fields(self) -> None:
        names = [f.name for s in self.extractor.extract(LimitedSettings()) for f in s.fields]
        self.assertEqual(names, ["volume"])
        names = [f.name for s in self.extractor.extract(ConstantHolder()) for f in s.fields]
        self.assertEqual(names, ["speed"])

    def test_plain_object_skips_private_properties_and_methods(self) -> None:
        sections = self.extractor.extract(PlainSettings())
        by_name = {s.name: s for s in sections}
        self.assertEqual([f.name for f in by_name["General"].fields], ["speed", "label"])
        toggle = by_name["Keys"].fields[0]
        self.assertEqual(toggle.display_name, "Toggle")
        self.assertEqual(toggle.tooltip, "Open the window")
        self.assertEqual(toggle.kind, FieldKind.KEYBIND)

    def test_entries_need_a_tag(self) -> None:
        holder = EntryHolder()
        sections = self.extractor.extract(holder)
        self.assertEqual([s.name for s in sections], ["Audio"])
        volume = sections[0].fields[0]
        self.assertTrue(volume.is_entry)
        self.assertEqual(volume.tooltip, "Master volume")
        self.assertEqual(volume.constraint, RangeConstraint(0.0, 10.0, step=None))
        volume.set_value(8)
        self.assertEqual(holder.volume.value, 8)
        volume.reset()
        self.assertEqual(holder.volume.value, 5)

    def test_broken_member_is_skipped(self) -> None:
        sections = self.extractor.extract(Exploding())
        self.assertEqual([f.name for f in sections[0].fields], ["fine"])

    def test_member_without_zero_instance_resets_to_initial(self) -> None:
        obj = NoZeroInstance(7)
        f = self.extractor.extract(obj)[0].fields[0]
        self.assertIs(f.default_value, MISSING)
        obj.value = 1
        f.reset()
        self.assertEqual(obj.value, 7)

    def test_none_yields_nothing(self) -> None:
        self.assertEqual(self.extractor.extract(None), [])

    def test_extract_entries_groups_in_first_seen_order(self) -> None:
        config = ConfigFile()
        config.bind("Zeta", "EnableFeature", True)
        config.bind("Alpha", "Mode", "a", ConfigDescription("", AcceptableValueList("a", "b")))
        config.bind("Zeta", "max_count", 3)
        sections = self.extractor.extract_entries(config.values(), mod_id="ext")
        self.assertEqual([s.name for s in sections], ["Zeta", "Alpha"])
        self.assertEqual([f.display_name for f in sections[0].fields], ["Enable Feature", "max count"])
        self.assertEqual(sections[1].fields[0].constraint, ChoiceConstraint(("a", "b")))


if __name__ == "__main__":
    unittest.main()
