"""SQLite cache for metadata lookups."""

import json
import sqlite3
import time
from pathlib import Path
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class MetadataCache:
    """Caches TMDB responses per (kind, key) for a fixed number of days.

    ``kind`` separates lookups of different shapes, e.g. ``movie`` for
    details by TMDB id and ``imdb`` for IMDb id to TMDB id resolution.
    """

    def __init__(self, db_path: Path, ttl_days: int = 7):
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_days * 86400
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS metadata_cache (
                        kind TEXT NOT NULL,
                        key TEXT NOT NULL,
                        value TEXT NOT NULL,
                        expires_at INTEGER NOT NULL,
                        PRIMARY KEY (kind, key)
                    )
                    """
                )
        finally:
            conn.close()
        logger.info("Metadata cache ready", db_path=str(self.db_path), ttl_days=ttl_days)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def get(self, kind: str, key: Any) -> Optional[Any]:
        """Get a cached value, or None when missing or expired."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT value FROM metadata_cache WHERE kind = ? AND key = ? AND expires_at > ?",
                (kind, str(key), int(time.time())),
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        logger.debug("Metadata cache hit", kind=kind, key=key)
        return json.loads(row[0])

    def set(self, kind: str, key: Any, value: Any) -> None:
        """Store a JSON-serializable value."""
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO metadata_cache (kind, key, value, expires_at) "
                    "VALUES (?, ?, ?, ?)",
                    (kind, str(key), json.dumps(value), int(time.time()) + self.ttl_seconds),
                )
        finally:
            conn.close()

    def purge_expired(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed
        """
        conn = self._connect()
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM metadata_cache WHERE expires_at <= ?", (int(time.time()),)
                )
            removed = cursor.rowcount
        finally:
            conn.close()

        if removed:
            logger.info("Purged expired metadata cache entries", count=removed)
        return removed
