"""Cleanup of library movies that are no longer on any list."""

from dataclasses import dataclass, field, replace
from typing import List

from listarr.core.identity import ListedIndex
from listarr.models.import_list import ListSyncLevel
from listarr.models.movie import ListMovie, Movie
from listarr.movies.service import MovieService
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CleanupResult:
    """What a cleanup pass did."""

    stale: List[Movie] = field(default_factory=list)
    unmonitored: List[Movie] = field(default_factory=list)
    deleted: List[Movie] = field(default_factory=list)


class LibraryReconciler:
    """Applies the configured sync level to movies missing from all lists."""

    def __init__(self, movie_service: MovieService, sync_level: ListSyncLevel):
        self.movie_service = movie_service
        self.sync_level = ListSyncLevel(sync_level)

    def clean_library(self, listed_movies: List[ListMovie]) -> CleanupResult:
        """Reconcile the library against the movies currently listed.

        Must only be called with the complete result of a sync in which no
        list failed.

        Deletes are issued one movie at a time. Unmonitored movies are sent
        in a single batch update, which is issued even when the batch is
        empty.

        Args:
            listed_movies: Deduplicated movies from all lists

        Returns:
            The stale movies and what was done to them
        """
        result = CleanupResult()

        if self.sync_level == ListSyncLevel.DISABLED:
            return result

        listed = ListedIndex(listed_movies)
        movies_to_update: List[Movie] = []

        for movie in self.movie_service.get_all_movies():
            if movie in listed:
                continue

            result.stale.append(movie)

            if self.sync_level == ListSyncLevel.LOG_ONLY:
                logger.info(
                    "Movie was in your library, but not found in your lists. "
                    "You might want to unmonitor or remove it",
                    movie=str(movie),
                )
            elif self.sync_level == ListSyncLevel.KEEP_AND_UNMONITOR:
                if not movie.monitored:
                    continue
                logger.info(
                    "Movie was in your library, but not found in your lists. "
                    "Keeping in library but unmonitoring it",
                    movie=str(movie),
                )
                movies_to_update.append(replace(movie, monitored=False))
            elif self.sync_level == ListSyncLevel.REMOVE_AND_KEEP:
                logger.info(
                    "Movie was in your library, but not found in your lists. "
                    "Removing from library (keeping files)",
                    movie=str(movie),
                )
                self.movie_service.delete_movie(movie.id, delete_files=False)
                result.deleted.append(movie)
            elif self.sync_level == ListSyncLevel.REMOVE_AND_DELETE:
                logger.info(
                    "Movie was in your library, but not found in your lists. "
                    "Removing from library and deleting files",
                    movie=str(movie),
                )
                self.movie_service.delete_movie(movie.id, delete_files=True)
                result.deleted.append(movie)

        self.movie_service.update_movies(movies_to_update, notify=True)
        result.unmonitored = movies_to_update

        return result
