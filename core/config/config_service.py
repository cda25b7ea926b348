"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
ENV_PREFIX = "MODHUB_"


def _user_data_dir() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("LOCALAPPDATA") or (Path.home() / "AppData" / "Local")
        return Path(appdata) / "ModHub"
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")) / "modhub"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "General": {
        "app_name": "Mod Hub",
        "version": "1.1.0",
        "modhub_id": "com.modhub.core",
        "persistence_namespace": "modhub",
    },
    "Paths": {
        "data_dir": _user_data_dir().as_posix(),
        # empty = derived below data_dir
        "settings_db": "",
        "logging_db": "",
        "cache_dir": "",
        "plugins_dir": "",
    },
    "Icons": {
        "size": "128",
        "corner_radius": "16",
        "max_icon_size": "256",
        "max_image_size": "1024",
        "max_gallery_images": "10",
    },
    "Tags": {
        "max_length": "20",
        "native_max_length": "12",
    },
    "Logging": {
        "level": "INFO",
        "persist": "true",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class GeneralConfig:
    app_name: str = "Mod Hub"
    version: str = ""
    modhub_id: str = "com.modhub.core"
    persistence_namespace: str = "modhub"


@dataclass
class PathsConfig:
    data_dir: Path
    settings_db: str = ""
    logging_db: str = ""
    cache_dir: str = ""
    plugins_dir: str = ""

    def _derive(self, raw: str, fallback: str) -> Path:
        return Path(raw).expanduser() if raw.strip() else self.data_dir / fallback

    @property
    def settings_db_path(self) -> Path:
        return self._derive(self.settings_db, "settings.db")

    @property
    def logging_db_path(self) -> Path:
        return self._derive(self.logging_db, "logs.db")

    @property
    def cache_path(self) -> Path:
        return self._derive(self.cache_dir, "cache")

    @property
    def plugins_path(self) -> Path:
        return self._derive(self.plugins_dir, "plugins")


@dataclass
class IconsConfig:
    size: int = 128
    corner_radius: int = 16
    max_icon_size: int = 256
    max_image_size: int = 1024
    max_gallery_images: int = 10


@dataclass
class TagsConfig:
    max_length: int = 20
    native_max_length: int = 12


@dataclass
class LoggingConfig:
    level: str = "INFO"
    persist: bool = True


@dataclass
class AppConfig:
    general: GeneralConfig
    paths: PathsConfig
    icons: IconsConfig
    tags: TagsConfig
    logging: LoggingConfig


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    return _cp_to_dict(cp)


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


_TYPE_NAMES: Dict[str, type] = {"Path": Path, "bool": bool, "int": int, "float": float, "str": str}


def _cast(value: Any, typ: type | str) -> Any:
    if isinstance(typ, str):
        # dataclass field types are strings under postponed evaluation
        typ = _TYPE_NAMES.get(typ, str)
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays() -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "ModHub" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "modhub" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety.

    Precedence (lowest first): embedded defaults, ``defaults.ini``,
    the user's ``config.ini``, ``MODHUB_<SECTION>__<KEY>`` environment
    variables.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if DEFAULTS_INI.exists():
                _apply(merged, _read_ini(DEFAULTS_INI), "defaults.ini", str(DEFAULTS_INI), sources)

            # Layer 2: user overrides
            user_ini = _user_config_path()
            if user_ini.exists():
                _apply(merged, _read_ini(user_ini), "user", str(user_ini), sources)

            # Layer 3: environment variables
            _apply(merged, _env_overlays(), "env", "os.environ", sources)

            self._merged = merged
            self._sources = sources

            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))
            self.paths = _build_dataclass(PathsConfig, merged.get("Paths", {}))
            self.icons = _build_dataclass(IconsConfig, merged.get("Icons", {}))
            self.tags = _build_dataclass(TagsConfig, merged.get("Tags", {}))
            self.logging = _build_dataclass(LoggingConfig, merged.get("Logging", {}))

    def get_config(self) -> AppConfig:
        with self._lock:
            return AppConfig(
                general=self.general,
                paths=self.paths,
                icons=self.icons,
                tags=self.tags,
                logging=self.logging,
            )

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
