"""Maps bare list movies onto canonical TMDB records."""

from dataclasses import replace
from datetime import date
from typing import Optional

import httpx

from listarr.metadata.tmdb import TMDBClient, TMDBError
from listarr.models.movie import ListMovie
from listarr.utils.logger import get_logger

logger = get_logger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p/original"

# TMDB release_dates types
RELEASE_TYPE_DIGITAL = 4
RELEASE_TYPE_PHYSICAL = 5


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _sort_title(title: str) -> str:
    lowered = title.lower()
    for article in ("the ", "a ", "an "):
        if lowered.startswith(article):
            return lowered[len(article):]
    return lowered


def movie_from_tmdb(data: dict) -> ListMovie:
    """Build a canonical ListMovie from a TMDB movie details response."""
    title = data.get("title") or data.get("original_title") or ""
    in_cinemas = _parse_date(data.get("release_date"))

    certification = None
    physical_release = None
    digital_release = None
    for country in (data.get("release_dates") or {}).get("results", []):
        for release in country.get("release_dates", []):
            release_date = _parse_date(release.get("release_date"))
            if release.get("type") == RELEASE_TYPE_PHYSICAL and physical_release is None:
                physical_release = release_date
            elif release.get("type") == RELEASE_TYPE_DIGITAL and digital_release is None:
                digital_release = release_date
            if country.get("iso_3166_1") == "US" and release.get("certification"):
                certification = certification or release["certification"]

    trailer_id = next(
        (
            video.get("key")
            for video in (data.get("videos") or {}).get("results", [])
            if video.get("site") == "YouTube" and video.get("type") == "Trailer" and video.get("key")
        ),
        None,
    )
    translations = {}
    for translation in (data.get("translations") or {}).get("translations", []):
        language = translation.get("iso_639_1")
        translated_title = (translation.get("data") or {}).get("title")
        if language and translated_title:
            translations.setdefault(language, translated_title)

    images = [
        f"{IMAGE_BASE_URL}{data[key]}" for key in ("poster_path", "backdrop_path") if data.get(key)
    ]
    companies = data.get("production_companies") or []
    collection = data.get("belongs_to_collection") or {}

    return ListMovie(
        tmdb_id=data.get("id") or 0,
        imdb_id=data.get("imdb_id") or None,
        title=title,
        sort_title=_sort_title(title),
        year=in_cinemas.year if in_cinemas else 0,
        overview=data.get("overview"),
        ratings={"tmdb": data["vote_average"]} if data.get("vote_average") is not None else {},
        studio=companies[0].get("name") if companies else None,
        certification=certification,
        collection=collection.get("name"),
        status=data.get("status"),
        images=images,
        website=data.get("homepage") or None,
        youtube_trailer_id=trailer_id,
        translations=translations,
        in_cinemas=in_cinemas,
        physical_release=physical_release,
        digital_release=digital_release,
        genres=[genre["name"] for genre in data.get("genres", []) if genre.get("name")],
    )


class MovieMapper:
    """Resolves list movies to TMDB by TMDB id, IMDb id or title/year."""

    def __init__(self, tmdb_client: Optional[TMDBClient]):
        """Initialize mapper.

        Args:
            tmdb_client: TMDB client (None disables enrichment)
        """
        self.tmdb_client = tmdb_client

    async def map_movie(self, movie: ListMovie) -> Optional[ListMovie]:
        """Find the canonical record for a list movie.

        Args:
            movie: Movie as reported by a list

        Returns:
            Canonical movie, or None when there is no match or the lookup failed
        """
        if self.tmdb_client is None:
            return None

        try:
            tmdb_id = await self._resolve_tmdb_id(movie)
            if not tmdb_id:
                return None

            data = await self.tmdb_client.get_movie(tmdb_id)
        except (TMDBError, httpx.HTTPError) as e:
            logger.warning("Failed to map list movie", movie=str(movie), error=str(e))
            return None

        if data is None:
            return None
        return movie_from_tmdb(data)

    async def map_list_movie(self, movie: ListMovie) -> ListMovie:
        """Return an enriched copy of a list movie.

        Unmatched movies are returned unchanged; enrichment is best-effort.
        """
        try:
            mapped = await self.map_movie(movie)
        except Exception as e:
            logger.warning(
                "Unexpected error mapping list movie",
                movie=str(movie),
                error=str(e),
                error_type=type(e).__name__,
            )
            return movie

        if mapped is None:
            logger.debug("No metadata match for list movie", movie=str(movie))
            return movie

        return replace(mapped, list_id=movie.list_id)

    async def _resolve_tmdb_id(self, movie: ListMovie) -> Optional[int]:
        if movie.tmdb_id:
            return movie.tmdb_id

        if movie.imdb_id:
            return await self.tmdb_client.find_by_imdb_id(movie.imdb_id)

        if movie.title:
            results = await self.tmdb_client.search_movie(movie.title, year=movie.year or None)
            if results:
                return results[0].get("id")

        return None
