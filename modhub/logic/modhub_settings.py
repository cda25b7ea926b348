"""
modhub/logic/modhub_settings.py
===============================

The hub's own settings, registered through the native path so they show
up in the list like any other mod.
"""

from __future__ import annotations

from typing import Sequence

from core.config.config_loader import config_loader
from core.contracts.settings import ISettingsManager
from core.logging.logic.logger import logger
from modhub.api.mod_interface import ModHubModBase
from modhub.models.config_entry import (
    AcceptableValueList,
    AcceptableValueRange,
    ConfigDescription,
    ConfigEntry,
    ConfigFile,
)
from modhub.models.mod_attributes import FieldMeta
from modhub.models.value_types import KeyboardShortcut

SETTINGS_NAMESPACE = "modhub.settings"

ACCENT_COLORS = ("Red", "Gold", "Blue", "Green", "Purple", "Teal", "Orange")


class ModHubSettings(ModHubModBase):
    __modhub_fields__ = {
        "ui_scale": FieldMeta(
            name="UI Scale",
            tooltip="1 = Normal (up to 2K), 2 = Large, 3 = Extra Large (4K+)",
            section="Appearance",
            section_order=1,
        ),
        "collapse_sections_by_default": FieldMeta(
            name="Collapse Sections By Default",
            tooltip="Start with all settings sections collapsed",
            section="Appearance",
        ),
        "accent_color": FieldMeta(
            name="Accent Color",
            tooltip="Accent color of the Mod Hub window",
            section="Appearance",
        ),
        "right_margin": FieldMeta(
            name="Right Margin",
            tooltip="Right margin of the settings panel in pixels",
            section="Appearance",
        ),
        "toggle_key": FieldMeta(
            name="Toggle Key",
            tooltip="Key to open/close the Mod Hub window",
            section="System",
            section_order=2,
        ),
        "show_advanced": FieldMeta(
            name="Show Advanced Settings",
            tooltip="Show settings marked as advanced",
            section="System",
        ),
    }

    def __init__(
        self,
        settings: ISettingsManager | None = None,
        *,
        mod_id: str | None = None,
        namespace: str = SETTINGS_NAMESPACE,
    ) -> None:
        self._mod_id = mod_id or config_loader.get_modhub_id()
        self._config = ConfigFile(settings, namespace)
        c = self._config
        self._ui_scale = c.bind(
            "Appearance", "UI Scale", 1,
            ConfigDescription("UI scale factor", AcceptableValueList(1, 2, 3)),
        )
        self._collapse = c.bind("Appearance", "Collapse Sections By Default", False, "Collapse sections")
        self._accent = c.bind(
            "Appearance", "Accent Color", "Red",
            ConfigDescription("Accent color", AcceptableValueList(*ACCENT_COLORS)),
        )
        self._right_margin = c.bind(
            "Appearance", "Right Margin", 30,
            ConfigDescription("Right margin in pixels", AcceptableValueRange(0, 50)),
        )
        self._toggle_key = c.bind("General", "Toggle Key", KeyboardShortcut("F10"), "Toggle key")
        self._show_advanced = c.bind("General", "Show Advanced Settings", False, "Show advanced settings")

    # ------------------------------------------------------------------ #
    #  IModHubMod                                                        #
    # ------------------------------------------------------------------ #
    @property
    def mod_id(self) -> str:
        return self._mod_id

    @property
    def name(self) -> str:
        return config_loader.get_app_name()

    @property
    def version(self) -> str:
        return config_loader.get_version()

    @property
    def author(self) -> str:
        return "Mod Hub"

    @property
    def description(self) -> str:
        return "Settings of the Mod Hub window itself"

    @property
    def tags(self) -> Sequence[str]:
        return ("UI", "QoL")

    def get_settings(self) -> "ModHubSettings":
        return self

    def on_settings_saved(self) -> None:
        self._config.save()
        logger.log("ModHubSettings", "SettingsSaved", reference_id=self._mod_id)

    def on_settings_reset(self) -> None:
        for entry in self._config.values():
            entry.value = entry.default_value
        logger.log("ModHubSettings", "SettingsReset", reference_id=self._mod_id)

    # ------------------------------------------------------------------ #
    #  Entries                                                           #
    # ------------------------------------------------------------------ #
    @property
    def config(self) -> ConfigFile:
        return self._config

    @property
    def ui_scale(self) -> ConfigEntry:
        return self._ui_scale

    @property
    def collapse_sections_by_default(self) -> ConfigEntry:
        return self._collapse

    @property
    def accent_color(self) -> ConfigEntry:
        return self._accent

    @property
    def right_margin(self) -> ConfigEntry:
        return self._right_margin

    @property
    def toggle_key(self) -> ConfigEntry:
        return self._toggle_key

    @property
    def show_advanced(self) -> ConfigEntry:
        return self._show_advanced
