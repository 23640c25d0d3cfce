"""Library movie store."""

import json
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from listarr.core.database import LibraryDatabase, PersistenceError
from listarr.models.movie import MinimumAvailability, Movie
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


def movie_to_row(movie: Movie) -> dict:
    """Convert a movie to a database row."""
    return {
        "tmdb_id": movie.tmdb_id,
        "imdb_id": movie.imdb_id,
        "title": movie.title,
        "year": movie.year,
        "monitored": int(movie.monitored),
        "root_folder_path": movie.root_folder_path,
        "path": movie.path,
        "quality_profile_id": movie.quality_profile_id,
        "minimum_availability": MinimumAvailability(movie.minimum_availability).value,
        "tags": json.dumps(sorted(movie.tags)),
        "added": movie.added.isoformat() if movie.added else None,
    }


def movie_from_row(row) -> Movie:
    """Create a movie from a database row."""
    data = dict(row)
    return Movie(
        id=data["id"],
        tmdb_id=data["tmdb_id"],
        imdb_id=data["imdb_id"],
        title=data["title"],
        year=data["year"],
        monitored=bool(data["monitored"]),
        root_folder_path=data["root_folder_path"],
        path=data["path"],
        quality_profile_id=data["quality_profile_id"],
        minimum_availability=MinimumAvailability(data["minimum_availability"]),
        tags=json.loads(data["tags"]),
        added=datetime.fromisoformat(data["added"]) if data["added"] else None,
    )


class MovieService:
    """Reads and writes movies in the library."""

    def __init__(self, db: LibraryDatabase):
        """Initialize movie service.

        Args:
            db: Library database
        """
        self.db = db

    def get_all_movies(self) -> List[Movie]:
        """Get every movie in the library."""
        with self.db.transaction() as conn:
            rows = conn.execute("SELECT * FROM movies ORDER BY id").fetchall()
        return [movie_from_row(row) for row in rows]

    def get_movie(self, movie_id: int) -> Optional[Movie]:
        """Get a movie by library id."""
        with self.db.transaction() as conn:
            row = conn.execute("SELECT * FROM movies WHERE id = ?", (movie_id,)).fetchone()
        return movie_from_row(row) if row else None

    def find_by_tmdb_id(self, tmdb_id: int) -> Optional[Movie]:
        """Get a movie by TMDB id.

        Args:
            tmdb_id: TMDB id

        Returns:
            Movie if found, None otherwise
        """
        with self.db.transaction() as conn:
            row = conn.execute("SELECT * FROM movies WHERE tmdb_id = ?", (tmdb_id,)).fetchone()
        return movie_from_row(row) if row else None

    def update_movies(self, movies: List[Movie], notify: bool = True) -> List[Movie]:
        """Update a batch of movies in one transaction.

        An empty batch is a no-op.

        Args:
            movies: Movies with updated fields
            notify: Log each updated movie

        Returns:
            The updated movies
        """
        if not movies:
            return movies

        with self.db.transaction() as conn:
            for movie in movies:
                data = movie_to_row(movie)
                set_clause = ", ".join(f"{k} = ?" for k in data)
                conn.execute(
                    f"UPDATE movies SET {set_clause} WHERE id = ?",
                    list(data.values()) + [movie.id],
                )

        if notify:
            for movie in movies:
                logger.info("Movie updated", movie=str(movie), monitored=movie.monitored)

        logger.debug("Updated movies", count=len(movies))
        return movies

    def delete_movie(self, movie_id: int, delete_files: bool = False) -> None:
        """Delete a movie from the library.

        Args:
            movie_id: Library id of the movie
            delete_files: Also remove the movie folder from disk
        """
        movie = self.get_movie(movie_id)
        if movie is None:
            logger.warning("Movie to delete not found", movie_id=movie_id)
            return

        with self.db.transaction() as conn:
            conn.execute("DELETE FROM movies WHERE id = ?", (movie_id,))

        if delete_files and movie.path:
            self._delete_folder(Path(movie.path), movie.root_folder_path)

        logger.info("Movie deleted", movie=str(movie), delete_files=delete_files)

    def _delete_folder(self, path: Path, root_folder_path: Optional[str]) -> None:
        # Only a folder strictly below the movie's root folder may be removed
        root = Path(root_folder_path).resolve() if root_folder_path else None
        resolved = path.resolve()
        if root is None or resolved == root or root not in resolved.parents:
            logger.error(
                "Refusing to delete movie folder outside its root folder",
                path=str(path),
                root_folder_path=root_folder_path,
            )
            return

        if not path.exists():
            logger.debug("Movie folder does not exist", path=str(path))
            return

        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.error("Failed to delete movie folder", path=str(path), error=str(e))
            raise PersistenceError(f"Failed to delete movie folder {path}: {e}") from e

        logger.info("Deleted movie folder", path=str(path))
