"""Decides which listed movies are added to the library."""

from typing import Iterable, List, Optional

from listarr.models.import_list import ImportExclusion, ImportListDefinition
from listarr.models.movie import AddMovieOptions, ListMovie, Movie
from listarr.movies.service import MovieService
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class AutoAddSelector:
    """Stages new movies from auto-add lists for a single sync cycle."""

    def __init__(self, movie_service: MovieService, exclusions: Iterable[ImportExclusion]):
        """Initialize selector.

        Args:
            movie_service: Library store used to skip existing movies
            exclusions: Movies that must never be added
        """
        self.movie_service = movie_service
        self.excluded_ids = {exclusion.tmdb_id for exclusion in exclusions}
        self.movies_to_add: List[Movie] = []
        self._staged_ids = set()

    def process_movie_report(
        self, import_list: ImportListDefinition, report: ListMovie
    ) -> Optional[Movie]:
        """Stage a listed movie for adding if it is eligible.

        Args:
            import_list: Definition of the list the movie came from
            report: The listed movie

        Returns:
            The staged movie, or None if it was skipped
        """
        if report.tmdb_id == 0 or not import_list.enable_auto:
            return None

        if self.movie_service.find_by_tmdb_id(report.tmdb_id) is not None:
            logger.debug("Rejected, movie exists in library", movie=str(report))
            return None

        if report.tmdb_id in self.excluded_ids:
            logger.debug("Rejected due to list exclusion", movie=str(report))
            return None

        # Lists can disagree on ids, so the same TMDB id may survive dedup twice
        if report.tmdb_id in self._staged_ids:
            return None

        monitored = import_list.should_monitor
        movie = Movie(
            tmdb_id=report.tmdb_id,
            imdb_id=report.imdb_id,
            title=report.title or str(report.tmdb_id),
            year=report.year,
            monitored=monitored,
            root_folder_path=import_list.root_folder_path,
            quality_profile_id=import_list.quality_profile_id,
            minimum_availability=import_list.minimum_availability,
            tags=list(import_list.tags),
            add_options=AddMovieOptions(search_for_movie=monitored),
        )

        self._staged_ids.add(report.tmdb_id)
        self.movies_to_add.append(movie)
        return movie
