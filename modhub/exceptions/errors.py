"""Mod Hub exceptions."""
from __future__ import annotations


class ModHubError(Exception):
    """Base exception for the mod hub engine."""


class RegistryNotReadyError(ModHubError):
    """Raised when registering before a registry has been attached."""
