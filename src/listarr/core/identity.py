"""Identity rules for list movies.

Two different notions of "same movie" are used on purpose:

* Deduplication uses a single key chosen by priority: TMDB id, then IMDb id,
  then the exact title.
* Library cleanup treats a library movie as listed when *either* its TMDB id
  or its IMDb id appears on any list, so a list that only knows the other id
  never causes a removal.
"""

from typing import Iterable, List

from listarr.models.movie import ListMovie, Movie


def dedup_key(movie: ListMovie) -> str:
    """Key used to collapse duplicate list movies."""
    if movie.tmdb_id:
        return str(movie.tmdb_id)

    if movie.imdb_id and movie.imdb_id.strip():
        return movie.imdb_id

    return movie.title or ""


def distinct_by_identity(movies: Iterable[ListMovie]) -> List[ListMovie]:
    """Drop duplicates, keeping the first occurrence in order."""
    seen = set()
    distinct = []
    for movie in movies:
        key = dedup_key(movie)
        if key in seen:
            continue
        seen.add(key)
        distinct.append(movie)
    return distinct


class ListedIndex:
    """Lookup of the TMDB and IMDb ids present on the fetched lists."""

    def __init__(self, movies: Iterable[ListMovie]):
        self.tmdb_ids = set()
        self.imdb_ids = set()
        for movie in movies:
            if movie.tmdb_id:
                self.tmdb_ids.add(movie.tmdb_id)
            if movie.imdb_id:
                self.imdb_ids.add(movie.imdb_id)

    def contains(self, movie: Movie) -> bool:
        """Whether a library movie is still on at least one list."""
        if movie.tmdb_id and movie.tmdb_id in self.tmdb_ids:
            return True
        return bool(movie.imdb_id) and movie.imdb_id in self.imdb_ids

    def __contains__(self, movie: Movie) -> bool:
        return self.contains(movie)
