"""
core/settings/logic/settings_repository.py
==========================================

SQLite table ``settings(namespace, key, value)`` with JSON-encoded values.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

from core.common.db_interface import SQLiteRepository


def _to_json(v: Any) -> str:
    try:
        return json.dumps(v)
    except TypeError:
        return json.dumps(str(v))


def _from_json(txt: str) -> Any:
    try:
        return json.loads(txt)
    except ValueError:
        return txt


class SettingsRepository(SQLiteRepository):
    def __init__(self, db_path: Path) -> None:
        super().__init__(db_path, check_same_thread=False)
        os.makedirs(self.db_path.parent, exist_ok=True)
        self._ensure_schema()

    # ------------------------- public API ---------------------------- #
    def get(self, ns: str, key: str, fb: Any = None) -> Any | None:
        row = self.conn.execute(
            "SELECT value FROM settings WHERE namespace=? AND key=?",
            (ns, key),
        ).fetchone()
        return _from_json(row["value"]) if row else fb

    def set(self, ns: str, key: str, val: Any) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO settings (namespace,key,value)
                VALUES (?,?,?)
                ON CONFLICT(namespace,key) DO
                UPDATE SET value=excluded.value
                """,
                (ns, key, _to_json(val)),
            )

    def delete(self, ns: str, key: str) -> None:
        with self.conn:
            self.conn.execute(
                "DELETE FROM settings WHERE namespace=? AND key=?",
                (ns, key),
            )

    def items(self, ns: str) -> Dict[str, Any]:
        rows = self.conn.execute(
            "SELECT key, value FROM settings WHERE namespace=? ORDER BY key",
            (ns,),
        ).fetchall()
        return {r["key"]: _from_json(r["value"]) for r in rows}

    # ------------------------- schema -------------------------------- #
    def _ensure_schema(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings(
                namespace TEXT NOT NULL,
                key       TEXT NOT NULL,
                value     TEXT NOT NULL,
                PRIMARY KEY(namespace,key)
            )
            """
        )
        self.conn.commit()
