"""
modhub/tests/test_modhub_api.py

Registration facade and package factories.
"""

from __future__ import annotations

import tempfile
import unittest
from dataclasses import dataclass
from pathlib import Path

from core.settings.logic.settings_manager import SettingsManager
from modhub import ModHubModBase, RegistryNotReadyError, create_api, create_registry, modhub_mod


@modhub_mod("com.example.snow", "Snow", "1.2.0")
@dataclass
class SnowSettings:
    flakes: int = 100


class SnowMod(ModHubModBase):
    def __init__(self) -> None:
        self.settings = SnowSettings()

    @property
    def mod_id(self) -> str:
        return "com.example.snow.native"

    @property
    def name(self) -> str:
        return "Snow Native"

    def get_settings(self):
        return self.settings


class TestModHubApi(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.settings = SettingsManager(db_path=self.tmp / "settings.db")
        self.registry = create_registry(self.settings, cache_dir=self.tmp / "cache")

    def tearDown(self) -> None:
        self.registry.close()
        self.settings.close()
        self._tmp.cleanup()

    def test_register_before_load_raises(self) -> None:
        api = create_api()
        self.assertFalse(api.is_loaded)
        with self.assertRaises(RegistryNotReadyError):
            api.register(SnowMod())
        # unregister is a no-op while detached
        api.unregister("com.example.snow")

    def test_dispatches_by_registration_path(self) -> None:
        api = create_api()
        api.attach(self.registry)
        native = api.register(SnowMod())
        attributed = api.register(SnowSettings(), self.tmp / "snow")
        self.assertIsNotNone(native.mod_interface)
        self.assertEqual(attributed.version, "1.2.0")
        self.assertEqual(attributed.plugin_folder, self.tmp / "snow")
        api.unregister("com.example.snow")
        self.assertIsNone(self.registry.get_mod("com.example.snow"))

    def test_detach(self) -> None:
        api = create_api(self.registry)
        self.assertTrue(api.is_loaded)
        api.detach()
        with self.assertRaises(RegistryNotReadyError):
            _ = api.registry

    def test_factory_registers_hub(self) -> None:
        hub = self.registry.get_mod(self.registry.modhub_id)
        self.assertIsNotNone(hub)
        self.assertEqual(self.registry.mod_count, 1)
        self.assertEqual(hub.name, "Mod Hub")


if __name__ == "__main__":
    unittest.main()
