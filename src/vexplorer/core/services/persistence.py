from __future__ import annotations

"""
Session Snapshot Persistence Service.

Provides a SQLite-backed key-value store holding the last session as a
JSON document stamped with its save time. Snapshots older than the
expiration window are treated as absent and purged on read. Like any
local cache it fails safe: storage errors are logged and degrade to
"no snapshot" instead of interrupting the session.
"""

import json
import logging
import sqlite3
import threading
import time
from typing import Callable, Optional

from vexplorer.domain.constants import DEFAULT_TTL_SECONDS, STORAGE_KEY
from vexplorer.domain.errors import ExplorerError
from vexplorer.domain.session_models import SessionSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Time-limited storage of one session snapshot per key.

    Args:
        db_path: SQLite database file (':memory:' is not supported because
            every call opens its own connection).
        ttl_seconds: Expiration window measured from the save timestamp.
        clock: Source of the current time in seconds.
        key: Storage key under which the snapshot lives.
    """

    def __init__(
            self,
            db_path: str,
            ttl_seconds: float = DEFAULT_TTL_SECONDS,
            clock: Callable[[], float] = time.time,
            key: str = STORAGE_KEY,
    ) -> None:
        self._db_path = db_path
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._key = key
        self._lock = threading.Lock()
        self._enabled = True

        self._init_db()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _init_db(self) -> None:
        """
        Create the snapshot table if it does not exist.
        """
        try:
            with self._lock:
                with sqlite3.connect(self._db_path) as conn:
                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS snapshots (
                            storage_key TEXT PRIMARY KEY,
                            payload TEXT NOT NULL,
                            saved_at REAL NOT NULL
                        )
                    """)
                    conn.commit()
            logger.debug(f"SnapshotStore: Database initialized at {self._db_path}")

        except sqlite3.Error as e:
            logger.warning(f"SnapshotStore: Failed to initialize database. Persistence disabled. Error: {e}")
            self._enabled = False

    def save(self, snapshot: SessionSnapshot) -> None:
        """
        Write {data, timestamp} for the snapshot, replacing any previous one.

        Args:
            snapshot: The {tree, openFiles, activeFile} triple to persist.
        """
        if not self._enabled:
            return

        now = self._clock()
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False)
        try:
            with self._lock:
                with sqlite3.connect(self._db_path) as conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO snapshots (storage_key, payload, saved_at) VALUES (?, ?, ?)",
                        (self._key, payload, now),
                    )
                    conn.commit()
            logger.debug(f"SnapshotStore: Saved snapshot at {now:.0f}")

        except sqlite3.Error as e:
            logger.warning(f"SnapshotStore: Write error: {e}")

    def load(self) -> Optional[SessionSnapshot]:
        """
        Return the stored snapshot if it exists and has not expired.

        Expired or unreadable entries are deleted as a side effect.

        Returns:
            Optional[SessionSnapshot]: The snapshot, or None.
        """
        if not self._enabled:
            return None

        try:
            with self._lock:
                with sqlite3.connect(self._db_path) as conn:
                    row = conn.execute(
                        "SELECT payload, saved_at FROM snapshots WHERE storage_key = ?",
                        (self._key,),
                    ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"SnapshotStore: Read error: {e}")
            return None

        if row is None:
            return None

        payload, saved_at = row
        if self._clock() - float(saved_at) >= self._ttl:
            logger.info("SnapshotStore: Stored session expired; purging it.")
            self.clear()
            return None

        try:
            return SessionSnapshot.from_dict(json.loads(payload))
        except (ValueError, TypeError, ExplorerError) as e:
            logger.warning(f"SnapshotStore: Discarding unreadable snapshot: {e}")
            self.clear()
            return None

    def clear(self) -> None:
        """
        Remove the stored snapshot unconditionally.
        """
        if not self._enabled:
            return

        try:
            with self._lock:
                with sqlite3.connect(self._db_path) as conn:
                    conn.execute("DELETE FROM snapshots WHERE storage_key = ?", (self._key,))
                    conn.commit()

        except sqlite3.Error as e:
            logger.error(f"SnapshotStore: Failed to clear snapshot: {e}")

    def saved_at(self) -> Optional[float]:
        """Timestamp of the stored snapshot, regardless of expiry."""
        if not self._enabled:
            return None
        try:
            with self._lock:
                with sqlite3.connect(self._db_path) as conn:
                    row = conn.execute(
                        "SELECT saved_at FROM snapshots WHERE storage_key = ?",
                        (self._key,),
                    ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"SnapshotStore: Read error: {e}")
            return None
        return float(row[0]) if row else None
