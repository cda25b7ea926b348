"""
modhub/models/registry_events.py

Change notifications raised by the mod registry.

Listeners subscribe on the registry and receive one event per mutation;
``mod_id`` is ``None`` for changes that are not tied to a single mod
(e.g. deleting a custom tag).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional


RegistryEventType = Literal[
    "mod_registered",
    "mod_unregistered",
    "favorites_changed",
    "hidden_changed",
    "tags_changed",
]


@dataclass(frozen=True, slots=True)
class RegistryEvent:
    """Represents one registry mutation."""

    type: RegistryEventType
    mod_id: Optional[str] = None
    ts_utc: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
