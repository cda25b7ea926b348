"""
modhub/api/mod_interface.py
===========================

Native registration contract.

A plugin implements :class:`IModHubMod` (usually via
:class:`ModHubModBase`) and hands the instance to ``ModHubApi.register``.
This path always wins over auto-discovery.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Sequence


class IModHubMod(ABC):
    """A plugin describing its own settings surface."""

    @property
    @abstractmethod
    def mod_id(self) -> str:
        """Stable unique id, e.g. ``com.author.modname``."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name."""

    @property
    @abstractmethod
    def version(self) -> str:
        ...

    @property
    @abstractmethod
    def author(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @property
    @abstractmethod
    def tags(self) -> Sequence[str]:
        ...

    @property
    @abstractmethod
    def icon_path(self) -> Optional[str]:
        """Icon file, absolute or relative to :attr:`plugin_folder`."""

    @property
    @abstractmethod
    def image_paths(self) -> Sequence[str]:
        """Gallery images, absolute or relative to :attr:`plugin_folder`."""

    @property
    def plugin_folder(self) -> Optional[Path]:
        return None

    @property
    def plugin_instance(self) -> Any:
        """Host plugin object, if any; lets auto-discovery skip it."""
        return None

    @abstractmethod
    def get_settings(self) -> Any:
        """Object whose members become the editable fields."""

    @abstractmethod
    def on_settings_saved(self) -> None:
        """Called after the user saved changes."""

    @abstractmethod
    def on_settings_reset(self) -> None:
        """Called after the user reset all fields to defaults."""


class ModHubModBase(IModHubMod):
    """Convenience base with the usual defaults; only id, name and settings are required."""

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def author(self) -> str:
        return "Unknown"

    @property
    def description(self) -> str:
        return ""

    @property
    def tags(self) -> Sequence[str]:
        return ()

    @property
    def icon_path(self) -> Optional[str]:
        return None

    @property
    def image_paths(self) -> Sequence[str]:
        return ()

    def on_settings_saved(self) -> None:
        pass

    def on_settings_reset(self) -> None:
        pass
