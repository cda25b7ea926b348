"""
core/tests/test_settings_manager.py

SQLite-backed namespaced key-value store.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.settings.logic.settings_manager import SettingsManager


class TestSettingsManager(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "nested" / "settings.db"
        self.manager = SettingsManager(db_path=self.db_path)

    def tearDown(self) -> None:
        self.manager.close()
        self._tmp.cleanup()

    def test_missing_key_returns_fallback(self) -> None:
        self.assertIsNone(self.manager.get("modhub", "favorite_mods"))
        self.assertEqual(self.manager.get("modhub", "favorite_mods", ""), "")

    def test_values_round_trip_as_json(self) -> None:
        self.manager.set("ns", "text", "a,b")
        self.manager.set("ns", "number", 3)
        self.manager.set("ns", "mapping", {"main_key": "F10", "modifiers": []})
        self.assertEqual(self.manager.get("ns", "text"), "a,b")
        self.assertEqual(self.manager.get("ns", "number"), 3)
        self.assertEqual(self.manager.get("ns", "mapping"), {"main_key": "F10", "modifiers": []})

    def test_set_overwrites_and_namespaces_are_separate(self) -> None:
        self.manager.set("a", "key", 1)
        self.manager.set("a", "key", 2)
        self.manager.set("b", "key", 9)
        self.assertEqual(self.manager.get("a", "key"), 2)
        self.assertEqual(self.manager.items("a"), {"key": 2})

    def test_delete(self) -> None:
        self.manager.set("ns", "gone", True)
        self.manager.delete("ns", "gone")
        self.assertIsNone(self.manager.get("ns", "gone"))

    def test_values_survive_reopen(self) -> None:
        self.manager.set("modhub", "hidden_mods", "x,y")
        self.manager.close()
        reopened = SettingsManager(db_path=self.db_path)
        try:
            self.assertEqual(reopened.get("modhub", "hidden_mods"), "x,y")
        finally:
            reopened.close()


if __name__ == "__main__":
    unittest.main()
