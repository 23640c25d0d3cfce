"""TMDB API client with caching and retry logic."""

from typing import Optional

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from listarr.metadata.cache import MetadataCache

logger = structlog.get_logger(__name__)


class TMDBError(Exception):
    """Base exception for TMDB API errors."""

    pass


class TMDBClient:
    """Minimal TMDB movie API client."""

    def __init__(
        self,
        api_key: str,
        cache: Optional[MetadataCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = "https://api.themoviedb.org/3",
    ):
        """Initialize TMDB client.

        Args:
            api_key: TMDB API key
            cache: Optional cache for API responses
            client: HTTP client (created if None)
            base_url: API base URL
        """
        self.api_key = api_key
        self.base_url = base_url
        self.cache = cache
        self.client = client or httpx.AsyncClient(timeout=10.0)
        logger.info("Initialized TMDB client", cache_enabled=cache is not None)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, path: str, **params) -> Optional[dict]:
        """GET a TMDB endpoint.

        Returns:
            Decoded JSON, or None on 404

        Raises:
            TMDBError: On any other error status or an undecodable body
        """
        response = await self.client.get(
            f"{self.base_url}{path}",
            params={"api_key": self.api_key, **params},
        )

        if response.status_code == 404:
            return None

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "TMDB API error",
                path=path,
                status_code=e.response.status_code,
                error=str(e),
            )
            raise TMDBError(f"TMDB API error: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            logger.error("TMDB returned invalid JSON", path=path, error=str(e))
            raise TMDBError(f"TMDB returned invalid JSON for {path}") from e

    async def get_movie(self, tmdb_id: int) -> Optional[dict]:
        """Get movie details from TMDB.

        Args:
            tmdb_id: TMDB movie ID

        Returns:
            Movie details, or None if not found
        """
        if self.cache and (cached := self.cache.get("movie", tmdb_id)):
            return cached

        data = await self._get(
            f"/movie/{tmdb_id}", append_to_response="release_dates,videos,translations"
        )
        if data is None:
            logger.debug("Movie not found on TMDB", tmdb_id=tmdb_id)
            return None

        logger.debug("Fetched movie from TMDB", tmdb_id=tmdb_id, title=data.get("title"))
        if self.cache:
            self.cache.set("movie", tmdb_id, data)
        return data

    async def find_by_imdb_id(self, imdb_id: str) -> Optional[int]:
        """Resolve an IMDb id to a TMDB id.

        Args:
            imdb_id: IMDb id (tt1234567)

        Returns:
            TMDB id if found, None otherwise
        """
        if self.cache and (cached := self.cache.get("imdb", imdb_id)):
            return cached.get("tmdb_id")

        data = await self._get(f"/find/{imdb_id}", external_source="imdb_id")
        results = (data or {}).get("movie_results", [])
        if not results:
            logger.debug("No TMDB movie for IMDb id", imdb_id=imdb_id)
            return None

        tmdb_id = results[0].get("id")
        if not tmdb_id:
            return None
        if self.cache:
            self.cache.set("imdb", imdb_id, {"tmdb_id": tmdb_id})
        return tmdb_id

    async def search_movie(self, query: str, year: Optional[int] = None) -> list[dict]:
        """Search for movies on TMDB.

        Args:
            query: Movie title
            year: Optional release year filter

        Returns:
            Search results (may be empty)
        """
        params = {"query": query}
        if year:
            params["year"] = year

        data = await self._get("/search/movie", **params)
        results = (data or {}).get("results", [])
        logger.debug("Searched TMDB for movie", query=query, year=year, result_count=len(results))
        return results
