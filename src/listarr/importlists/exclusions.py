"""Import exclusions: movies that lists must never add."""

from typing import List

from listarr.core.database import LibraryDatabase
from listarr.models.import_list import ImportExclusion
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class ImportExclusionsService:
    """Stores TMDB ids excluded from automatic list adds."""

    def __init__(self, db: LibraryDatabase):
        self.db = db

    def get_all_exclusions(self) -> List[ImportExclusion]:
        """Get every exclusion."""
        with self.db.transaction() as conn:
            rows = conn.execute(
                "SELECT tmdb_id, title, year FROM import_exclusions ORDER BY tmdb_id"
            ).fetchall()
        return [ImportExclusion(tmdb_id=r["tmdb_id"], title=r["title"], year=r["year"]) for r in rows]

    def add(self, exclusion: ImportExclusion) -> ImportExclusion:
        """Add or replace an exclusion."""
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO import_exclusions (tmdb_id, title, year) VALUES (?, ?, ?)",
                (exclusion.tmdb_id, exclusion.title, exclusion.year),
            )
        logger.info("Import exclusion added", tmdb_id=exclusion.tmdb_id, title=exclusion.title)
        return exclusion

    def delete(self, tmdb_id: int) -> bool:
        """Remove an exclusion.

        Returns:
            True if an exclusion was removed
        """
        with self.db.transaction() as conn:
            cursor = conn.execute("DELETE FROM import_exclusions WHERE tmdb_id = ?", (tmdb_id,))
            removed = cursor.rowcount > 0
        if removed:
            logger.info("Import exclusion removed", tmdb_id=tmdb_id)
        return removed
