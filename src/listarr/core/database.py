"""SQLite database holding the library, exclusions and list state."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from listarr.utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS movies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tmdb_id INTEGER NOT NULL UNIQUE,
        imdb_id TEXT,
        title TEXT NOT NULL,
        year INTEGER NOT NULL DEFAULT 0,
        monitored INTEGER NOT NULL DEFAULT 1,
        root_folder_path TEXT,
        path TEXT,
        quality_profile_id INTEGER NOT NULL DEFAULT 0,
        minimum_availability TEXT NOT NULL,
        tags TEXT NOT NULL DEFAULT '[]',
        added TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_movies_imdb_id ON movies(imdb_id)",
    """
    CREATE TABLE IF NOT EXISTS import_exclusions (
        tmdb_id INTEGER PRIMARY KEY,
        title TEXT,
        year INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS list_movies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        list_id INTEGER NOT NULL,
        tmdb_id INTEGER NOT NULL DEFAULT 0,
        imdb_id TEXT,
        title TEXT,
        year INTEGER NOT NULL DEFAULT 0,
        overview TEXT,
        genres TEXT NOT NULL DEFAULT '[]'
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_list_movies_list_id ON list_movies(list_id)",
    """
    CREATE TABLE IF NOT EXISTS import_list_status (
        provider_id INTEGER PRIMARY KEY,
        initial_failure TEXT,
        most_recent_failure TEXT,
        escalation_level INTEGER NOT NULL DEFAULT 0,
        disabled_till TEXT
    )
    """,
]


class PersistenceError(Exception):
    """Raised when a write or read against the database fails."""

    pass


class LibraryDatabase:
    """SQLite database shared by the library, exclusion and list services."""

    def __init__(self, db_path: Path):
        """Initialize database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.transaction() as conn:
            for statement in SCHEMA:
                conn.execute(statement)

        logger.info("Library database initialized", db_path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection context manager."""
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Run statements in a single transaction.

        Commits on success and rolls back on error. Any sqlite error is
        re-raised as PersistenceError.
        """
        try:
            with self._get_connection() as conn:
                try:
                    yield conn
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
        except sqlite3.Error as e:
            logger.error("Database operation failed", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(f"Database operation failed: {e}") from e
