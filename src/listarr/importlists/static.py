"""Lists whose movies are written directly in the configuration."""

from listarr.importlists.base import ImportList
from listarr.models.import_list import FetchResult
from listarr.models.movie import ListMovie


class StaticList(ImportList):
    """A curated list configured inline; fetching it never fails."""

    async def fetch(self) -> FetchResult:
        movies = [
            ListMovie(
                tmdb_id=item.tmdb_id,
                imdb_id=item.imdb_id,
                title=item.title,
                year=item.year,
            )
            for item in self.definition.movies
        ]
        return FetchResult(movies=movies, any_failure=False)
