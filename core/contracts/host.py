"""core/contracts/host.py
======================

What an embedding host exposes so loaded plugins can be discovered.

The host owns plugin loading; the registry only reads the descriptors
below once, after all explicit registrations, to pick up configuration
entries of plugins that never registered themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional


@dataclass
class HostPluginInfo:
    """One plugin as the host knows it."""

    guid: str
    name: str
    version: str = "1.0.0"
    instance: Any = None
    # the plugin's config store; falls back to ``instance.config``
    config: Any = None
    location: Optional[Path] = None
    package: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None

    @property
    def config_store(self) -> Any:
        if self.config is not None:
            return self.config
        return getattr(self.instance, "config", None)

    @property
    def folder(self) -> Optional[Path]:
        if self.location is None:
            return None
        loc = Path(self.location)
        return loc.parent if loc.suffix else loc


class IPluginHost(ABC):
    """Enumerates plugins loaded by the embedding host."""

    @abstractmethod
    def iter_plugins(self) -> Iterable[HostPluginInfo]:
        """Yield plugins in the host's own load order."""
