"""
core/logging/logic/logger.py
============================

Feature/event logger with an optional SQLite backend.

Every call is forwarded to the standard :mod:`logging` hierarchy under
``modhub.<feature>``. When persistence is enabled the entry is also
appended to the ``logs`` table; a broken database downgrades the logger
to stdlib-only output instead of failing the caller.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from core.config.config_loader import config_loader
from core.logging.models.log_entry import LogEntry

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class Logger:
    """Thread-safe logger writing to stdlib logging and SQLite."""

    def __init__(self, db_path: Path | None = None, *, persist: bool | None = None) -> None:
        service = config_loader.service
        self._lock = threading.Lock()
        self.db_path: Path = Path(db_path) if db_path else config_loader.get_logging_db_path()
        self.persist: bool = service.logging.persist if persist is None else persist
        self.min_level: int = _LEVELS.get(service.logging.level.upper(), logging.INFO)
        self.entries: list[LogEntry] = []
        self._conn: sqlite3.Connection | None = None
        self._db_ready = False

    # ------------------------------------------------------------------ #
    #  Connection management (reuse single connection)                   #
    # ------------------------------------------------------------------ #
    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            os.makedirs(self.db_path.parent, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def close(self) -> None:
        """Close the database connection and release resources."""
        with self._lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                finally:
                    self._conn = None
                    self._db_ready = False

    # ------------------------------------------------------------------ #
    #  Public API                                                        #
    # ------------------------------------------------------------------ #
    def log(
        self,
        feature: str,
        event: str,
        *,
        level: str = "INFO",
        reference_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        level = level.upper()
        numeric = _LEVELS.get(level, logging.INFO)

        text = f"{event}"
        if reference_id:
            text += f" [{reference_id}]"
        if message:
            text += f": {message}"
        logging.getLogger(f"modhub.{feature}").log(numeric, text)

        if numeric < self.min_level:
            return

        entry = LogEntry(
            id=None,
            timestamp=datetime.now(timezone.utc),
            log_level=level,
            feature=feature,
            event=event,
            reference_id=reference_id,
            message=message,
        )
        self.entries.append(entry)
        if self.persist:
            self._insert_log(entry)

    # ------------------------------------------------------------------ #
    #  Fetch / Clear                                                     #
    # ------------------------------------------------------------------ #
    def fetch_logs(
        self,
        *,
        feature: Optional[str] = None,
        level: Optional[str] = None,
        reference_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[LogEntry]:
        if not self.persist:
            rows = [
                e for e in reversed(self.entries)
                if (feature is None or e.feature == feature)
                and (level is None or e.log_level == level.upper())
                and (reference_id is None or e.reference_id == reference_id)
            ]
            return rows[:limit]

        query = "SELECT * FROM logs WHERE 1=1"
        params: list[object] = []
        if feature is not None:
            query += " AND feature = ?"
            params.append(feature)
        if level is not None:
            query += " AND log_level = ?"
            params.append(level.upper())
        if reference_id is not None:
            query += " AND reference_id = ?"
            params.append(reference_id)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        with self._lock:
            if not self._ensure_db():
                return []
            rows = self._get_connection().execute(query, params).fetchall()
        return [LogEntry.from_dict(dict(row)) for row in rows]

    def clear_logs(self) -> None:
        with self._lock:
            self.entries.clear()
            if self.persist and self._ensure_db():
                conn = self._get_connection()
                conn.execute("DELETE FROM logs")
                conn.commit()

    # ------------------------------------------------------------------ #
    #  Internal helpers                                                  #
    # ------------------------------------------------------------------ #
    def _ensure_db(self) -> bool:
        """Create the schema on first use. Caller holds the lock."""
        if self._db_ready:
            return True
        try:
            conn = self._get_connection()
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    feature TEXT NOT NULL,
                    event TEXT NOT NULL,
                    reference_id TEXT,
                    message TEXT,
                    log_level TEXT NOT NULL DEFAULT 'INFO'
                )
                """
            )
            conn.commit()
        except (OSError, sqlite3.Error) as exc:
            logging.getLogger("modhub.Logger").warning("log database unavailable: %s", exc)
            self.persist = False
            return False
        self._db_ready = True
        return True

    def _insert_log(self, entry: LogEntry) -> None:
        with self._lock:
            if not self._ensure_db():
                return
            try:
                conn = self._get_connection()
                conn.execute(
                    """
                    INSERT INTO logs
                        (timestamp, feature, event, reference_id, message, log_level)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        entry.timestamp.isoformat(),
                        entry.feature,
                        entry.event,
                        entry.reference_id,
                        entry.message,
                        entry.log_level,
                    ),
                )
                conn.commit()
            except sqlite3.Error as exc:
                logging.getLogger("modhub.Logger").warning("log insert failed: %s", exc)


# --------------------------------------------------------------------------- #
#  Global instance                                                            #
# --------------------------------------------------------------------------- #
logger: Logger = Logger()
