"""
modhub/logic/icon_cache.py
==========================

Icons and gallery images for registered mods.

Icon resolution, first hit wins:

1. explicit icon path (absolute, or relative to the plugin folder)
2. a conventional file name in the plugin folder (``icon.png`` ...)
3. a conventional resource name inside the plugin's Python package
4. the on-disk cache ``<cache>/<sanitized id>_<initials>.png``
5. a freshly generated placeholder, written to the cache

Placeholders are deterministic: the background color is picked from a
fixed palette by a SHA-1 based hash of the mod id, and the initials are
drawn with a 5x7 bitmap font. Loaded images are downscaled to a maximum
edge length; icons also get rounded corners. I/O and decode errors are
logged and fall through to the next source.
"""

from __future__ import annotations

import hashlib
import io
import math
import re
from importlib import resources
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from PIL import Image, ImageDraw, UnidentifiedImageError

from core.config.config_loader import config_loader
from core.config.config_service import config_service
from core.logging.logic.logger import Logger, logger as default_logger
from modhub.logic.bitmap_font import GLYPH_HEIGHT, GLYPH_WIDTH, glyph
from modhub.models.value_types import Color

ICON_COLORS = (
    Color(0.23, 0.51, 0.96),  # blue
    Color(0.55, 0.27, 0.68),  # purple
    Color(0.91, 0.30, 0.24),  # red
    Color(0.95, 0.61, 0.07),  # orange
    Color(0.18, 0.80, 0.44),  # green
    Color(0.10, 0.74, 0.61),  # teal
    Color(0.20, 0.29, 0.37),  # dark
    Color(0.61, 0.35, 0.71),  # violet
)

DEFAULT_ICON_NAMES = ("icon.png", "Icon.png", "icon.jpg", "cover.png", "Cover.png")
EMBEDDED_ICON_NAMES = ("icon.png", "Icon.png", "cover.png")
GALLERY_DIR = "images"
GALLERY_SUFFIXES = (".png", ".jpg", ".jpeg")
LOADED_ICON_RADIUS = 0.125

_WORD_SEPARATORS = re.compile(r"[\s\-_.]+")
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_LOAD_ERRORS = (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError)


# ---------------------------------------------------------------------- #
#  Pure helpers                                                          #
# ---------------------------------------------------------------------- #
def get_initials(name: str | None) -> str:
    """First letters of the first two words, or the first two letters of a single word."""
    words = [w for w in _WORD_SEPARATORS.split(name or "") if w]
    if not words:
        return "?"
    if len(words) == 1:
        return words[0][:2].upper()
    return (words[0][0] + words[1][0]).upper()


def stable_hash(text: str) -> int:
    """Process-independent 32-bit hash (``hash()`` is salted per run)."""
    return int.from_bytes(hashlib.sha1(text.encode("utf-8")).digest()[:4], "big")


def palette_index(mod_id: str, palette_size: int = len(ICON_COLORS)) -> int:
    return stable_hash(mod_id or "") % palette_size


def sanitize_file_name(name: str) -> str:
    return _INVALID_FILENAME_CHARS.sub("_", name)


def is_outside_rounded_rect(x: int, y: int, width: int, height: int, radius: float) -> bool:
    if x < radius and y < radius:
        return math.hypot(x - radius, y - radius) > radius
    if x >= width - radius and y < radius:
        return math.hypot(x - (width - radius - 1), y - radius) > radius
    if x < radius and y >= height - radius:
        return math.hypot(x - radius, y - (height - radius - 1)) > radius
    if x >= width - radius and y >= height - radius:
        return math.hypot(x - (width - radius - 1), y - (height - radius - 1)) > radius
    return False


def apply_rounded_corners(img: Image.Image, radius: float | None = None) -> Image.Image:
    """Make pixels outside the corner quarter-circles transparent (in place)."""
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    width, height = img.size
    if radius is None:
        radius = min(width, height) * LOADED_ICON_RADIUS
    alpha = img.getchannel("A")
    px = alpha.load()
    reach = int(math.ceil(radius))
    xs = set(range(min(reach, width))) | set(range(max(0, width - reach), width))
    ys = set(range(min(reach, height))) | set(range(max(0, height - reach), height))
    for y in ys:
        for x in xs:
            if is_outside_rounded_rect(x, y, width, height, radius):
                px[x, y] = 0
    img.putalpha(alpha)
    return img


def resize_if_needed(img: Image.Image, max_size: int) -> Image.Image:
    """Downscale so the longer edge is at most ``max_size``, keeping aspect ratio."""
    width, height = img.size
    if width <= max_size and height <= max_size:
        return img
    scale = max_size / float(max(width, height))
    new_size = (max(1, int(width * scale)), max(1, int(height * scale)))
    resized = img.resize(new_size, Image.Resampling.LANCZOS)
    img.close()
    return resized


# ---------------------------------------------------------------------- #
#  Cache                                                                 #
# ---------------------------------------------------------------------- #
class IconCache:
    def __init__(
        self,
        cache_dir: Path | None = None,
        *,
        icon_size: int | None = None,
        corner_radius: int | None = None,
        max_icon_size: int | None = None,
        max_image_size: int | None = None,
        palette: Sequence[Color] = ICON_COLORS,
        logger: Logger | None = None,
    ) -> None:
        icons = config_service.icons
        self.cache_dir = Path(cache_dir) if cache_dir else config_loader.get_icon_cache_dir()
        self.icon_size = icon_size or icons.size
        self.corner_radius = corner_radius if corner_radius is not None else icons.corner_radius
        self.max_icon_size = max_icon_size or icons.max_icon_size
        self.max_image_size = max_image_size or icons.max_image_size
        self.palette = tuple(palette)
        self._logger = logger or default_logger

    # ------------------------------------------------------------------ #
    #  Generated placeholders                                            #
    # ------------------------------------------------------------------ #
    def cache_key(self, mod_id: str, initials: str) -> str:
        return f"{sanitize_file_name(mod_id)}_{sanitize_file_name(initials)}.png"

    def cache_path(self, name: str, mod_id: str) -> Path:
        return self.cache_dir / self.cache_key(mod_id, get_initials(name))

    def generate_icon(self, name: str, mod_id: str) -> Image.Image:
        size = self.icon_size
        base = self.palette[palette_index(mod_id, len(self.palette))]
        pixels = bytearray()
        for y in range(size):
            # darkens by up to 20% towards the bottom edge
            gradient = 1.0 - (y / float(size)) * 0.2
            rgb = bytes(int(round(c * gradient * 255)) for c in (base.r, base.g, base.b))
            for x in range(size):
                outside = is_outside_rounded_rect(x, y, size, size, self.corner_radius)
                pixels += rgb
                pixels.append(0 if outside else 255)
        img = Image.frombytes("RGBA", (size, size), bytes(pixels))
        self._draw_initials(img, get_initials(name))
        return img

    def _draw_initials(self, img: Image.Image, initials: str) -> None:
        size = img.size[0]
        scale = max(1, size // 16)
        spacing = 1
        advance = (GLYPH_WIDTH + spacing) * scale
        total_width = len(initials) * advance - spacing * scale
        start_x = (size - total_width) // 2
        start_y = (size - GLYPH_HEIGHT * scale) // 2
        draw = ImageDraw.Draw(img)
        for index, ch in enumerate(initials):
            rows = glyph(ch)
            if rows is None:
                continue
            offset_x = start_x + index * advance
            for py, row in enumerate(rows):
                for px, bit in enumerate(row):
                    if bit != "#":
                        continue
                    x0 = offset_x + px * scale
                    y0 = start_y + py * scale
                    draw.rectangle((x0, y0, x0 + scale - 1, y0 + scale - 1), fill=(255, 255, 255, 255))

    def get_or_create_icon(self, name: str, mod_id: str) -> Image.Image:
        path = self.cache_path(name, mod_id)
        if path.is_file():
            cached = self._open(path)
            if cached is not None:
                return cached
        img = self.generate_icon(name, mod_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            img.save(path, format="PNG")
        except OSError as exc:
            self._logger.log("IconCache", "CacheWriteFailed", level="WARNING",
                             reference_id=mod_id, message=f"{path}: {exc}")
        return img

    # ------------------------------------------------------------------ #
    #  Loaded images                                                     #
    # ------------------------------------------------------------------ #
    def _open(self, path: Path) -> Optional[Image.Image]:
        try:
            with Image.open(path) as im:
                return im.convert("RGBA")
        except _LOAD_ERRORS as exc:
            self._logger.log("IconCache", "ImageLoadFailed", level="WARNING", message=f"{path}: {exc}")
            return None

    def _finish(self, img: Image.Image, is_icon: bool) -> Image.Image:
        img = resize_if_needed(img, self.max_icon_size if is_icon else self.max_image_size)
        return apply_rounded_corners(img) if is_icon else img

    def load_image(self, path: Path, *, is_icon: bool = False) -> Optional[Image.Image]:
        path = Path(path)
        if not path.is_file():
            return None
        img = self._open(path)
        return self._finish(img, is_icon) if img is not None else None

    def load_image_bytes(self, data: bytes, *, is_icon: bool = False) -> Optional[Image.Image]:
        try:
            with Image.open(io.BytesIO(data)) as im:
                img = im.convert("RGBA")
        except _LOAD_ERRORS as exc:
            self._logger.log("IconCache", "ImageDecodeFailed", level="WARNING", message=str(exc))
            return None
        return self._finish(img, is_icon)

    def load_embedded_icon(self, package: str | None) -> Optional[Image.Image]:
        """Look for a conventional icon resource at the root of ``package``."""
        if not package:
            return None
        try:
            children = [c for c in resources.files(package).iterdir() if c.is_file()]
        except (ModuleNotFoundError, TypeError, OSError) as exc:
            self._logger.log("IconCache", "ResourceLookupFailed", level="DEBUG", message=f"{package}: {exc}")
            return None
        for wanted in EMBEDDED_ICON_NAMES:
            for child in children:
                if child.name == wanted:
                    try:
                        data = child.read_bytes()
                    except OSError:
                        continue
                    img = self.load_image_bytes(data, is_icon=True)
                    if img is not None:
                        return img
        return None

    @staticmethod
    def _resolve(path: str | Path, folder: Path | None) -> Path:
        p = Path(path)
        if not p.is_absolute() and folder is not None:
            p = folder / p
        return p

    def resolve_icon(
        self,
        name: str,
        mod_id: str,
        *,
        folder: Path | None = None,
        icon_path: str | Path | None = None,
        package: str | None = None,
    ) -> Image.Image:
        if icon_path:
            img = self.load_image(self._resolve(icon_path, folder), is_icon=True)
            if img is not None:
                return img
        if folder is not None:
            for candidate in DEFAULT_ICON_NAMES:
                img = self.load_image(folder / candidate, is_icon=True)
                if img is not None:
                    return img
        img = self.load_embedded_icon(package)
        if img is not None:
            return img
        return self.get_or_create_icon(name, mod_id)

    def load_gallery(
        self,
        folder: Path | None,
        image_paths: Iterable[str | Path] = (),
        *,
        limit: int | None = None,
    ) -> List[Image.Image]:
        """Explicit images first, then ``<folder>/images/*`` sorted by name."""
        loaded: List[Image.Image] = []
        seen: Set[Path] = set()

        def _full() -> bool:
            return limit is not None and len(loaded) >= limit

        for raw in image_paths:
            if _full():
                return loaded
            path = self._resolve(raw, folder)
            img = self.load_image(path)
            if img is not None:
                loaded.append(img)
                seen.add(path.resolve())

        gallery = folder / GALLERY_DIR if folder is not None else None
        if gallery is None or not gallery.is_dir():
            return loaded
        for path in sorted(gallery.iterdir()):
            if _full():
                break
            if path.suffix.lower() not in GALLERY_SUFFIXES or path.resolve() in seen:
                continue
            img = self.load_image(path)
            if img is not None:
                loaded.append(img)
        return loaded
