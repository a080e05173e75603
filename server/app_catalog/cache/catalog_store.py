import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from app_catalog.indexer.models import AppRecord

logger = logging.getLogger(__name__)


class CatalogStore:
    """
    SQLite-backed copy of the last scanned catalog.

    - Single persistent connection, WAL journal mode
    - Upserts keep launch statistics for ids that survive a rescan
    - The scan itself never reads this store
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,  # safe: every access holds self._lock
            timeout=10
        )
        self._conn.row_factory = sqlite3.Row
        self._init_db()

        logger.info(f"[CatalogStore] initialized at {self.db_path}")

    def _init_db(self):
        cursor = self._conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS apps (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                launch_path TEXT NOT NULL,
                working_directory TEXT,
                icon_path TEXT,
                source TEXT NOT NULL,
                last_modified INTEGER NOT NULL,
                launch_count INTEGER NOT NULL DEFAULT 0,
                last_launched_at REAL
            )
        """)
        self._conn.commit()

    def close(self):
        with self._lock:
            self._conn.close()

    # ============ WRITES ============

    def upsert(self, records: Iterable[AppRecord]) -> int:
        """Insert or update records by id. Returns how many rows were written."""
        written = 0
        with self._lock:
            cursor = self._conn.cursor()
            for record in records:
                if not record.launch_path.strip():
                    logger.warning(f"[CatalogStore] skip record without launch path: {record.id}")
                    continue
                cursor.execute("""
                    INSERT INTO apps (id, name, launch_path, working_directory,
                                      icon_path, source, last_modified)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        launch_path = excluded.launch_path,
                        working_directory = excluded.working_directory,
                        icon_path = excluded.icon_path,
                        source = excluded.source,
                        last_modified = excluded.last_modified
                """, (
                    record.id, record.name, record.launch_path,
                    record.working_directory, record.icon_path,
                    record.source, record.last_modified,
                ))
                written += 1
            self._conn.commit()
        logger.debug(f"[CatalogStore] upserted {written} apps")
        return written

    def record_launch(self, app_id: str) -> bool:
        """Bump the launch counter. Returns False for an unknown id."""
        with self._lock:
            cursor = self._conn.cursor()
            cursor.execute("""
                UPDATE apps
                SET launch_count = launch_count + 1, last_launched_at = ?
                WHERE id = ?
            """, (time.time(), app_id))
            self._conn.commit()
            return cursor.rowcount > 0

    def clear(self) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM apps")
            self._conn.commit()

    # ============ READS ============

    def fetch_all(self) -> List[Dict[str, Any]]:
        """Stored apps sorted by case-insensitive name, with launch statistics."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM apps ORDER BY lower(name), rowid"
            ).fetchall()
        return [self._row_to_dict(row) for row in rows]

    def get(self, app_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._conn.execute("SELECT * FROM apps WHERE id = ?", (app_id,)).fetchone()
        return self._row_to_dict(row) if row else None

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
        record = AppRecord(
            id=row["id"],
            name=row["name"],
            launch_path=row["launch_path"],
            working_directory=row["working_directory"],
            icon_path=row["icon_path"],
            source=row["source"],
            last_modified=row["last_modified"],
        )
        data = record.model_dump(by_alias=True)
        data["launchCount"] = row["launch_count"]
        data["lastLaunchedAt"] = row["last_launched_at"]
        return data
