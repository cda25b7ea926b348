"""
core/tests/test_config_service.py

Layering and casting of the configuration service.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.config.config_loader import config_loader
from core.config.config_service import ConfigService


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        # isolate from a real user config.ini
        self._env = mock.patch.dict(
            os.environ,
            {"XDG_CONFIG_HOME": str(self.tmp / "config"), "APPDATA": str(self.tmp / "config")},
        )
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        self._tmp.cleanup()

    def _write_user_ini(self, text: str) -> None:
        folder = self.tmp / "config" / ("ModHub" if os.name == "nt" else "modhub")
        folder.mkdir(parents=True, exist_ok=True)
        (folder / "config.ini").write_text(text, encoding="utf-8")

    def test_shipped_defaults_are_typed(self) -> None:
        service = ConfigService()
        self.assertEqual(service.icons.size, 128)
        self.assertEqual(service.tags.max_length, 20)
        self.assertEqual(service.tags.native_max_length, 12)
        self.assertEqual(service.general.modhub_id, "com.modhub.core")
        self.assertIsInstance(service.paths.data_dir, Path)
        self.assertEqual(service.meta_source("Icons", "size")["layer"], "defaults.ini")

    def test_env_overrides_user_ini(self) -> None:
        self._write_user_ini("[General]\napp_name = From User\n\n[Tags]\nmax_length = 15\n")
        with mock.patch.dict(os.environ, {"MODHUB_TAGS__MAX_LENGTH": "30"}):
            service = ConfigService()
        self.assertEqual(service.general.app_name, "From User")
        self.assertEqual(service.tags.max_length, 30)
        self.assertEqual(service.meta_source("Tags", "max_length")["layer"], "env")
        self.assertEqual(service.meta_source("General", "app_name")["layer"], "user")

    def test_bool_cast(self) -> None:
        with mock.patch.dict(os.environ, {"MODHUB_LOGGING__PERSIST": "no"}):
            self.assertFalse(ConfigService().logging.persist)
        with mock.patch.dict(os.environ, {"MODHUB_LOGGING__PERSIST": "Yes"}):
            self.assertTrue(ConfigService().logging.persist)

    def test_paths_derive_from_data_dir(self) -> None:
        data_dir = self.tmp / "data"
        with mock.patch.dict(os.environ, {"MODHUB_PATHS__DATA_DIR": str(data_dir),
                                          "MODHUB_PATHS__CACHE_DIR": ""}):
            paths = ConfigService().paths
        self.assertEqual(paths.settings_db_path, data_dir / "settings.db")
        self.assertEqual(paths.logging_db_path, data_dir / "logs.db")
        self.assertEqual(paths.cache_path, data_dir / "cache")
        self.assertEqual(paths.plugins_path, data_dir / "plugins")

    def test_explicit_path_wins(self) -> None:
        target = self.tmp / "elsewhere" / "s.db"
        with mock.patch.dict(os.environ, {"MODHUB_PATHS__SETTINGS_DB": str(target)}):
            self.assertEqual(ConfigService().paths.settings_db_path, target)

    def test_get_casts_raw_value(self) -> None:
        service = ConfigService()
        self.assertEqual(service.get("Icons", "max_gallery_images", cast=int), 10)
        self.assertIsNone(service.get("Icons", "missing"))

    def test_loader_reads_global_service(self) -> None:
        self.assertEqual(config_loader.get_icon_cache_dir(), config_loader.service.paths.cache_path / "icons")
        self.assertEqual(config_loader.get_persistence_namespace(), "modhub")


if __name__ == "__main__":
    unittest.main()
