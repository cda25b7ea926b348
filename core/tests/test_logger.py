"""
core/tests/test_logger.py

Feature/event logger: stdlib forwarding, SQLite persistence, degradation.
"""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from core.logging.logic.logger import Logger


class TestLogger(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_forwards_to_stdlib_logging(self) -> None:
        log = Logger(persist=False)
        with self.assertLogs("modhub.ModRegistry", level="WARNING") as captured:
            log.log("ModRegistry", "DuplicateRegistration", level="WARNING",
                    reference_id="com.a", message="already registered, updating...")
        self.assertIn("DuplicateRegistration [com.a]: already registered", captured.output[0])

    def test_persists_and_filters(self) -> None:
        log = Logger(self.tmp / "logs.db", persist=True)
        try:
            log.log("ModRegistry", "ModRegistered", reference_id="com.a")
            log.log("TagStore", "CustomTagCreated", level="WARNING", message="gizmo")
            entries = log.fetch_logs(feature="ModRegistry")
            self.assertEqual(len(entries), 1)
            self.assertEqual(entries[0].event, "ModRegistered")
            self.assertEqual(entries[0].reference_id, "com.a")
            self.assertEqual([e.event for e in log.fetch_logs(level="warning")], ["CustomTagCreated"])
            log.clear_logs()
            self.assertEqual(log.fetch_logs(), [])
        finally:
            log.close()

    def test_below_min_level_is_not_kept(self) -> None:
        log = Logger(persist=False)
        log.min_level = logging.INFO
        log.log("SchemaExtractor", "MemberSkipped", level="DEBUG")
        self.assertEqual(log.fetch_logs(), [])

    def test_in_memory_newest_first(self) -> None:
        log = Logger(persist=False)
        log.log("A", "First")
        log.log("A", "Second")
        self.assertEqual([e.event for e in log.fetch_logs(limit=1)], ["Second"])

    def test_unusable_database_degrades(self) -> None:
        blocked = self.tmp / "dir_not_db"
        blocked.mkdir()
        log = Logger(blocked, persist=True)
        log.log("ModRegistry", "ModRegistered")
        self.assertFalse(log.persist)
        self.assertEqual([e.event for e in log.fetch_logs()], ["ModRegistered"])
        log.close()


if __name__ == "__main__":
    unittest.main()
