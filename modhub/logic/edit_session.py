"""
modhub/logic/edit_session.py
============================

Per-mod undo buffer for in-progress edits.

    clean --capture()--> dirty --commit()--> clean   (live values kept)
                              --restore()--> clean   (live values rolled back)

``capture`` always replaces the previous snapshot. Calling ``restore`` or
``commit`` without a snapshot is a caller error and simply does nothing.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple

from core.logging.logic.logger import logger
from modhub.models.field_info import FieldInfo
from modhub.models.section_info import SectionInfo

SnapshotKey = Tuple[str, str]


class EditSession:
    def __init__(self, sections: Callable[[], Iterable[SectionInfo]], *, owner_id: str = "") -> None:
        self._sections = sections
        self._owner_id = owner_id
        self._snapshot: Dict[SnapshotKey, Any] | None = None

    @property
    def is_dirty(self) -> bool:
        return self._snapshot is not None

    def _iter_fields(self) -> Iterator[Tuple[SnapshotKey, FieldInfo]]:
        for section in self._sections():
            for f in section.fields:
                yield (section.name, f.name), f

    # ------------------------------------------------------------------ #
    def capture(self) -> int:
        snapshot: Dict[SnapshotKey, Any] = {}
        for key, f in self._iter_fields():
            try:
                snapshot[key] = f.get_value()
            except Exception as exc:  # noqa: BLE001
                logger.log(
                    "EditSession",
                    "SnapshotReadFailed",
                    level="DEBUG",
                    reference_id=self._owner_id,
                    message=f"{key[0]}/{key[1]}: {exc}",
                )
        self._snapshot = snapshot
        return len(snapshot)

    def restore(self) -> int:
        if self._snapshot is None:
            return 0
        snapshot, self._snapshot = self._snapshot, None
        restored = 0
        for key, f in self._iter_fields():
            if key not in snapshot:
                continue
            try:
                f.set_value(snapshot[key])
                restored += 1
            except Exception as exc:  # noqa: BLE001
                logger.log(
                    "EditSession",
                    "RestoreFailed",
                    level="WARNING",
                    reference_id=self._owner_id,
                    message=f"{key[0]}/{key[1]}: {exc}",
                )
        return restored

    def commit(self) -> None:
        self._snapshot = None

    def changed_fields(self) -> List[SnapshotKey]:
        """Keys whose live value differs from the snapshot."""
        if self._snapshot is None:
            return []
        changed = []
        for key, f in self._iter_fields():
            if key not in self._snapshot:
                continue
            try:
                if f.get_value() != self._snapshot[key]:
                    changed.append(key)
            except Exception:  # noqa: BLE001
                changed.append(key)
        return changed
