"""
modhub/tests/test_icon_cache.py

Placeholder generation, icon resolution chain and gallery loading.
"""

from __future__ import annotations

import importlib
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from PIL import Image

from core.logging.logic.logger import Logger
from modhub.logic.icon_cache import (
    ICON_COLORS,
    IconCache,
    get_initials,
    palette_index,
    sanitize_file_name,
    stable_hash,
)


class TestHelpers(unittest.TestCase):
    def test_initials(self) -> None:
        self.assertEqual(get_initials("Fog Tweaks"), "FT")
        self.assertEqual(get_initials("fog"), "FO")
        self.assertEqual(get_initials("my-cool_mod"), "MC")
        self.assertEqual(get_initials("Fog\tTweaks"), "FT")
        self.assertEqual(get_initials("  "), "?")
        self.assertEqual(get_initials(None), "?")

    def test_hash_is_stable(self) -> None:
        self.assertEqual(stable_hash("com.example.fog"), stable_hash("com.example.fog"))
        self.assertEqual(stable_hash("abc"), 0xA9993E36)
        self.assertIn(palette_index("com.example.fog"), range(len(ICON_COLORS)))

    def test_sanitize(self) -> None:
        self.assertEqual(sanitize_file_name('a/b:c*"d?'), "a_b_c__d_")


class TestIconCache(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.folder = self.tmp / "plugin"
        self.folder.mkdir()
        self.cache = self._new_cache()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _new_cache(self) -> IconCache:
        return IconCache(
            self.tmp / "cache",
            icon_size=32,
            corner_radius=4,
            max_icon_size=256,
            max_image_size=64,
            logger=Logger(persist=False),
        )

    def _png(self, path: Path, size=(100, 100), color=(200, 10, 10)) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color).save(path)
        return path

    # ------------------------------------------------------------------ #
    def test_generation_is_deterministic(self) -> None:
        first = self.cache.generate_icon("Fog Tweaks", "com.example.fog")
        second = self._new_cache().generate_icon("Fog Tweaks", "com.example.fog")
        self.assertEqual(first.size, (32, 32))
        self.assertEqual(first.mode, "RGBA")
        self.assertEqual(first.tobytes(), second.tobytes())
        self.assertEqual(first.getpixel((0, 0))[3], 0)
        self.assertEqual(first.getpixel((16, 2))[3], 255)

    def test_gradient_darkens_downwards(self) -> None:
        img = self.cache.generate_icon("?", "any")
        top = img.getpixel((1, 8))
        bottom = img.getpixel((1, 26))
        self.assertGreaterEqual(sum(top[:3]), sum(bottom[:3]))

    def test_different_ids_can_differ(self) -> None:
        colors = {self.cache.generate_icon("X", f"mod{i}").getpixel((16, 2))[:3] for i in range(20)}
        self.assertGreater(len(colors), 1)

    def test_generated_icon_is_cached_on_disk(self) -> None:
        created = self.cache.get_or_create_icon("Fog Tweaks", "com/example")
        path = self.tmp / "cache" / "com_example_FT.png"
        self.assertTrue(path.is_file())
        self.assertEqual(self.cache.cache_path("Fog Tweaks", "com/example"), path)
        again = self.cache.get_or_create_icon("Fog Tweaks", "com/example")
        self.assertEqual(again.tobytes(), created.tobytes())

    def test_explicit_icon_is_scaled_and_rounded(self) -> None:
        self._png(self.folder / "art" / "logo.png", size=(400, 200))
        icon = self.cache.resolve_icon("Fog", "fog", folder=self.folder, icon_path="art/logo.png")
        self.assertEqual(icon.size, (256, 128))
        self.assertEqual(icon.getpixel((0, 0))[3], 0)
        self.assertEqual(icon.getpixel((128, 64))[3], 255)

    def test_default_file_name_in_folder(self) -> None:
        self._png(self.folder / "cover.png", size=(40, 40), color=(1, 2, 3))
        icon = self.cache.resolve_icon("Fog", "fog", folder=self.folder, icon_path="missing.png")
        self.assertEqual(icon.size, (40, 40))
        self.assertEqual(icon.getpixel((20, 20))[:3], (1, 2, 3))

    def test_broken_file_falls_through_to_generated(self) -> None:
        (self.folder / "icon.png").write_bytes(b"not an image")
        icon = self.cache.resolve_icon("Fog", "fog", folder=self.folder)
        self.assertEqual(icon.size, (32, 32))
        self.assertEqual(icon.tobytes(), self.cache.generate_icon("Fog", "fog").tobytes())

    def test_unknown_package_is_ignored(self) -> None:
        self.assertIsNone(self.cache.load_embedded_icon("no_such_package_for_icons"))

    def _package(self, name: str, files) -> str:
        root = self.tmp / "site"
        pkg = root / name
        pkg.mkdir(parents=True)
        (pkg / "__init__.py").write_text("")
        for file_name, color in files:
            self._png(pkg / file_name, size=(10, 10), color=color)
        patcher = mock.patch.object(sys, "path", [str(root)] + sys.path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(sys.modules.pop, name, None)
        importlib.invalidate_caches()
        return name

    def test_embedded_icon_matches_exact_file_name(self) -> None:
        package = self._package("fog_embedded_icon", [("favicon.png", (0, 0, 255)), ("icon.png", (255, 0, 0))])
        icon = self.cache.load_embedded_icon(package)
        self.assertIsNotNone(icon)
        self.assertEqual(icon.getpixel((5, 5))[:3], (255, 0, 0))

    def test_embedded_lookalike_names_are_ignored(self) -> None:
        package = self._package("fog_decoy_icon", [("favicon.png", (0, 0, 255)), ("lexicon.png", (0, 255, 0))])
        self.assertIsNone(self.cache.load_embedded_icon(package))

    def test_gallery_order_dedupe_and_limit(self) -> None:
        self._png(self.folder / "a.png")
        self._png(self.folder / "images" / "b.png")
        Image.new("RGB", (10, 10)).save(self.folder / "images" / "c.jpg")
        (self.folder / "images" / "notes.txt").write_text("skip")

        images = self.cache.load_gallery(self.folder, ["a.png", "images/b.png", "gone.png"])
        self.assertEqual(len(images), 3)
        self.assertEqual(images[0].size, (64, 64))
        self.assertEqual(images[2].size, (10, 10))
        self.assertEqual(len(self.cache.load_gallery(self.folder, ["a.png"], limit=2)), 2)
        self.assertEqual(self.cache.load_gallery(None), [])


if __name__ == "__main__":
    unittest.main()
