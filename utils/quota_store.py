"""
Persistent per-user daily request counters with TTL support.
Uses SQLite for persistence; increments run inside a write transaction so they are atomic.
"""
import time
import sqlite3
import threading
from pathlib import Path
from typing import Optional
from config import Config
from utils.logger import app_logger


class QuotaStore:
    """
    SQLite-backed counter store. Each row expires on its own and is evicted lazily.
    """

    # Counters outlive their UTC day by a margin so late requests still see them
    TTL_SECONDS = 2 * 24 * 60 * 60

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the quota store with SQLite persistence.

        Args:
            db_path: Path to SQLite database file (default: Config.QUOTA_DB_PATH)
        """
        if db_path is None:
            db_path = Config.QUOTA_DB_PATH
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._db_path = db_path
        self._local = threading.local()
        self._init_db()

        self._evict_expired()

        app_logger.info(f"Quota store initialized with SQLite: {self._db_path}")

    def _get_conn(self) -> sqlite3.Connection:
        """Get thread-local database connection in autocommit mode."""
        if not hasattr(self._local, 'conn'):
            self._local.conn = sqlite3.connect(
                self._db_path, check_same_thread=False, isolation_level=None
            )
            self._local.conn.row_factory = sqlite3.Row
        return self._local.conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=5000")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS quota_counters (
                quota_key TEXT PRIMARY KEY,
                count INTEGER NOT NULL,
                expires_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_quota_expires_at
            ON quota_counters(expires_at)
        """)

    def _evict_expired(self) -> None:
        """Remove expired counters from the database."""
        conn = self._get_conn()
        cursor = conn.execute("DELETE FROM quota_counters WHERE expires_at < ?", (time.time(),))
        if cursor.rowcount:
            app_logger.debug(f"Quota store: evicted {cursor.rowcount} expired counters")

    def get_count(self, key: str) -> int:
        """Current count for a key, 0 when absent or expired."""
        row = self._get_conn().execute(
            "SELECT count FROM quota_counters WHERE quota_key = ? AND expires_at >= ?",
            (key, time.time())
        ).fetchone()
        return int(row["count"]) if row else 0

    def increment_if_below(self, key: str, limit: int) -> Optional[int]:
        """
        Atomically increment the counter for key unless it already reached limit.

        Args:
            key: Counter key
            limit: Maximum allowed count

        Returns:
            The new count, or None if the counter was already at the limit
        """
        conn = self._get_conn()
        now = time.time()

        conn.execute("BEGIN IMMEDIATE")
        try:
            row = conn.execute(
                "SELECT count FROM quota_counters WHERE quota_key = ? AND expires_at >= ?",
                (key, now)
            ).fetchone()
            current = int(row["count"]) if row else 0

            if current >= limit:
                conn.execute("ROLLBACK")
                return None

            new_count = current + 1
            conn.execute("""
                INSERT OR REPLACE INTO quota_counters (quota_key, count, expires_at, updated_at)
                VALUES (?, ?, ?, ?)
            """, (key, new_count, now + self.TTL_SECONDS, now))
            conn.execute("DELETE FROM quota_counters WHERE expires_at < ?", (now,))
            conn.execute("COMMIT")
        except Exception:
            conn.execute("ROLLBACK")
            raise

        return new_count


_quota_store: Optional[QuotaStore] = None


def get_quota_store() -> QuotaStore:
    """Get the global quota store instance, creating it on first use."""
    global _quota_store
    if _quota_store is None:
        _quota_store = QuotaStore()
    return _quota_store
