"""core/contracts/settings.py
=========================

Settings contract used for dependency injection.

The registry persists its own state (favorites, hidden mods, tags) and
wrapped config entries through this interface, so hosts can plug in
their own key-value store instead of the bundled SQLite one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ISettingsManager(ABC):
    """High-level settings API (namespaced key-value store)."""

    @abstractmethod
    def get(self, namespace: str, key: str, fallback: Any | None = None) -> Any | None:
        """Return a stored value or fallback."""

    @abstractmethod
    def set(self, namespace: str, key: str, value: Any) -> None:
        """Persist a value."""

    @abstractmethod
    def delete(self, namespace: str, key: str) -> None:
        """Delete a stored value."""
