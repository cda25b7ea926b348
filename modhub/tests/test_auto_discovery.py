"""
modhub/tests/test_auto_discovery.py

Entry-reading strategies for foreign config stores and the fuzzy
already-registered check.
"""

from __future__ import annotations

import unittest

from core.contracts.host import HostPluginInfo
from core.logging.logic.logger import Logger
from modhub.logic.auto_discovery import (
    collect_config_entries,
    entries_from_internal_mapping,
    entries_from_iteration,
    entries_from_keyed_accessor,
    is_plugin_already_registered,
)
from modhub.models.config_entry import ConfigFile
from modhub.models.mod_info import ModInfo


class KeyedStore:
    def __init__(self, entries) -> None:
        self._data = {f"k{i}": e for i, e in enumerate(entries)}

    def keys(self):
        return self._data.keys()

    def __getitem__(self, key):
        return self._data[key]


class Wrapper:
    def __init__(self, value) -> None:
        self.value = value


def _exploding_strategy(store):
    raise RuntimeError("store refuses")


class TestStrategies(unittest.TestCase):
    def setUp(self) -> None:
        self.config = ConfigFile()
        self.a = self.config.bind("S", "A", 1)
        self.b = self.config.bind("S", "B", True)

    def test_internal_mapping(self) -> None:
        self.assertEqual(entries_from_internal_mapping(self.config), [self.a, self.b])
        self.assertEqual(entries_from_internal_mapping(object()), [])

    def test_keyed_accessor(self) -> None:
        store = KeyedStore([self.a, "noise", self.b])
        self.assertEqual(entries_from_keyed_accessor(store), [self.a, self.b])
        self.assertEqual(entries_from_internal_mapping(store), [])

    def test_iteration(self) -> None:
        store = [self.a, ("S.B", self.b), Wrapper(self.a), 5]
        self.assertEqual(entries_from_iteration(store), [self.a, self.b, self.a])
        self.assertEqual(entries_from_iteration("not a store"), [])

    def test_collect_tries_strategies_in_order(self) -> None:
        log = Logger(persist=False)
        found = collect_config_entries(
            self.config, [_exploding_strategy, entries_from_keyed_accessor], plugin_id="p", logger=log
        )
        self.assertEqual(found, [self.a, self.b])
        self.assertEqual(collect_config_entries(None), [])
        self.assertEqual(collect_config_entries(object(), logger=log), [])


class TestAlreadyRegistered(unittest.TestCase):
    def setUp(self) -> None:
        self.instance = object()
        self.mods = [
            ModInfo("foo.bar.custom", "Foo Bar Tweaks"),
            ModInfo("com.other", "Lighting", plugin_instance=self.instance),
        ]

    def test_id_contained_in_registered_id(self) -> None:
        self.assertTrue(is_plugin_already_registered(self.mods, HostPluginInfo("foo.bar", "Foo")))

    def test_registered_id_contained_in_plugin_id(self) -> None:
        self.assertTrue(is_plugin_already_registered(self.mods, HostPluginInfo("x.com.other.y", "Other")))

    def test_same_display_name(self) -> None:
        self.assertTrue(is_plugin_already_registered(self.mods, HostPluginInfo("zzz", "lighting")))

    def test_same_instance(self) -> None:
        plugin = HostPluginInfo("unrelated.id", "Unrelated", instance=self.instance)
        self.assertTrue(is_plugin_already_registered(self.mods, plugin))

    def test_unrelated_plugin(self) -> None:
        self.assertFalse(is_plugin_already_registered(self.mods, HostPluginInfo("baz.qux", "Baz")))

    def test_short_id_false_positive_is_accepted(self) -> None:
        # "bar" is a substring of "foo.bar.custom" although the plugins are unrelated
        self.assertTrue(is_plugin_already_registered(self.mods, HostPluginInfo("bar", "Bar Stool")))


if __name__ == "__main__":
    unittest.main()
