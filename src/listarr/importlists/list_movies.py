"""Cached contents of each import list, as of its last successful fetch."""

import json
from typing import List, Optional

from listarr.core.database import LibraryDatabase
from listarr.models.movie import ListMovie
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class ListMovieService:
    """Keeps the most recent movies of every list for display."""

    def __init__(self, db: LibraryDatabase):
        self.db = db

    def sync_movies_for_list(self, movies: List[ListMovie], list_id: int) -> None:
        """Replace the cached movies of a list.

        Args:
            movies: Movies reported by the list
            list_id: Import list id
        """
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM list_movies WHERE list_id = ?", (list_id,))
            conn.executemany(
                """
                INSERT INTO list_movies (list_id, tmdb_id, imdb_id, title, year, overview, genres)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        list_id,
                        movie.tmdb_id,
                        movie.imdb_id,
                        movie.title,
                        movie.year,
                        movie.overview,
                        json.dumps(movie.genres),
                    )
                    for movie in movies
                ],
            )
        logger.debug("Synced list movies", list_id=list_id, count=len(movies))

    def get_list_movies(self, list_id: Optional[int] = None) -> List[ListMovie]:
        """Get cached movies, optionally for a single list."""
        sql = "SELECT * FROM list_movies"
        params: tuple = ()
        if list_id is not None:
            sql += " WHERE list_id = ?"
            params = (list_id,)
        sql += " ORDER BY id"

        with self.db.transaction() as conn:
            rows = conn.execute(sql, params).fetchall()

        return [
            ListMovie(
                list_id=row["list_id"],
                tmdb_id=row["tmdb_id"],
                imdb_id=row["imdb_id"],
                title=row["title"],
                year=row["year"],
                overview=row["overview"],
                genres=json.loads(row["genres"]),
            )
            for row in rows
        ]
