"""Bulk add of new movies to the library."""

import re
from dataclasses import replace
from datetime import datetime
from pathlib import PurePosixPath
from typing import List

from listarr.core.database import LibraryDatabase
from listarr.models.movie import Movie
from listarr.movies.service import movie_to_row
from listarr.utils.logger import get_logger

logger = get_logger(__name__)

_ILLEGAL_PATH_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def build_movie_folder(movie: Movie) -> str:
    """Build the movie folder name, e.g. ``The Matrix (1999)``.

    Falls back to the TMDB id when nothing usable is left of the title, so the
    folder is always a single path segment below the root folder.
    """
    title = _ILLEGAL_PATH_CHARS.sub("", movie.title or "").strip().strip(".").strip()
    if not title:
        title = f"tmdb-{movie.tmdb_id}"
    if movie.year:
        return f"{title} ({movie.year})"
    return title


class AddMovieService:
    """Adds new movies to the library."""

    def __init__(self, db: LibraryDatabase):
        """Initialize add service.

        Args:
            db: Library database
        """
        self.db = db

    def add_movies(self, movies: List[Movie], search_immediately: bool = False) -> List[Movie]:
        """Add movies in a single transaction.

        Movies whose TMDB id is already in the library, or repeated within the
        batch, are skipped so the call can safely be repeated.

        Args:
            movies: Movies to add
            search_immediately: Request a search for monitored movies
                that asked for one in their add options

        Returns:
            Copies of the movies actually added, with library ids assigned.
            The input movies are left untouched.
        """
        if not movies:
            logger.debug("No movies to add")
            return []

        added: List[Movie] = []
        with self.db.transaction() as conn:
            existing = {row[0] for row in conn.execute("SELECT tmdb_id FROM movies")}

            for movie in movies:
                if movie.tmdb_id in existing:
                    logger.debug("Movie already in library, skipping", movie=str(movie))
                    continue

                movie = replace(movie, added=movie.added or datetime.utcnow())
                if movie.root_folder_path and not movie.path:
                    movie.path = str(
                        PurePosixPath(movie.root_folder_path) / build_movie_folder(movie)
                    )

                data = movie_to_row(movie)
                columns = ", ".join(data.keys())
                placeholders = ", ".join("?" for _ in data)
                cursor = conn.execute(
                    f"INSERT INTO movies ({columns}) VALUES ({placeholders})",
                    list(data.values()),
                )
                movie.id = cursor.lastrowid
                existing.add(movie.tmdb_id)
                added.append(movie)

        for movie in added:
            logger.info("Movie added", movie=str(movie), path=movie.path, monitored=movie.monitored)
            if (
                search_immediately
                and movie.monitored
                and movie.add_options
                and movie.add_options.search_for_movie
            ):
                logger.info("Search requested for added movie", movie=str(movie))

        logger.info("Added movies to library", requested=len(movies), added=len(added))
        return added
