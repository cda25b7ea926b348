"""
modhub/logic/persisted_state.py
===============================

String codec and storage for the four pieces of registry-owned state.

Stored as independent entries in the settings namespace
(``General.persistence_namespace``):

=================  ==============================  =========================
key                content                         format
=================  ==============================  =========================
``favorite_mods``  set of mod ids                  ``id1,id2``
``hidden_mods``    set of mod ids                  ``id1,id2``
``custom_tags``    user-created tags               ``tag1|tag2``
``mod_tags``       mod id -> assigned tags         ``id1:t1,t2;id2:t3``
=================  ==============================  =========================

Encoders sort their output; decoders trim whitespace and drop empty or
malformed segments.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Set

from core.config.config_loader import config_loader
from core.contracts.settings import ISettingsManager

FAVORITES_KEY = "favorite_mods"
HIDDEN_KEY = "hidden_mods"
CUSTOM_TAGS_KEY = "custom_tags"
MOD_TAGS_KEY = "mod_tags"


# ---------------------------------------------------------------------- #
#  Codec                                                                 #
# ---------------------------------------------------------------------- #
def _split(text: str, sep: str) -> Set[str]:
    return {part.strip() for part in (text or "").split(sep) if part.strip()}


def encode_id_list(ids: Iterable[str]) -> str:
    return ",".join(sorted({i for i in ids if i}))


def decode_id_list(text: str) -> Set[str]:
    return _split(text, ",")


def encode_tag_list(tags: Iterable[str]) -> str:
    return "|".join(sorted({t for t in tags if t}))


def decode_tag_list(text: str) -> Set[str]:
    return _split(text, "|")


def encode_mod_tags(mapping: Mapping[str, Iterable[str]]) -> str:
    segments = []
    for mod_id in sorted(mapping):
        tags = sorted({t for t in mapping[mod_id] if t})
        if mod_id and tags:
            segments.append(f"{mod_id}:{','.join(tags)}")
    return ";".join(segments)


def decode_mod_tags(text: str) -> Dict[str, Set[str]]:
    result: Dict[str, Set[str]] = {}
    for segment in (text or "").split(";"):
        mod_id, sep, tags = segment.partition(":")
        mod_id = mod_id.strip()
        if not sep or not mod_id:
            continue
        parsed = _split(tags, ",")
        if parsed:
            result.setdefault(mod_id, set()).update(parsed)
    return result


# ---------------------------------------------------------------------- #
#  Repository                                                            #
# ---------------------------------------------------------------------- #
class RegistryStateRepository:
    """Reads and writes the encoded strings through an ISettingsManager."""

    def __init__(self, settings: ISettingsManager, namespace: str | None = None) -> None:
        self._settings = settings
        self.namespace = namespace or config_loader.get_persistence_namespace()

    def _load(self, key: str) -> str:
        raw = self._settings.get(self.namespace, key, "")
        return raw if isinstance(raw, str) else ""

    def _save(self, key: str, text: str) -> None:
        self._settings.set(self.namespace, key, text)

    # ------------------------------------------------------------------ #
    def load_favorites(self) -> Set[str]:
        return decode_id_list(self._load(FAVORITES_KEY))

    def save_favorites(self, ids: Iterable[str]) -> None:
        self._save(FAVORITES_KEY, encode_id_list(ids))

    def load_hidden(self) -> Set[str]:
        return decode_id_list(self._load(HIDDEN_KEY))

    def save_hidden(self, ids: Iterable[str]) -> None:
        self._save(HIDDEN_KEY, encode_id_list(ids))

    def load_custom_tags(self) -> Set[str]:
        return decode_tag_list(self._load(CUSTOM_TAGS_KEY))

    def save_custom_tags(self, tags: Iterable[str]) -> None:
        self._save(CUSTOM_TAGS_KEY, encode_tag_list(tags))

    def load_mod_tags(self) -> Dict[str, Set[str]]:
        return decode_mod_tags(self._load(MOD_TAGS_KEY))

    def save_mod_tags(self, mapping: Mapping[str, Iterable[str]]) -> None:
        self._save(MOD_TAGS_KEY, encode_mod_tags(mapping))
