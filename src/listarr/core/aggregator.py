"""Collects, enriches and deduplicates movies from all import lists."""

import asyncio
from dataclasses import replace
from typing import List, Optional

from listarr.core.identity import distinct_by_identity
from listarr.importlists.base import ImportList
from listarr.importlists.factory import ImportListFactory
from listarr.importlists.list_movies import ListMovieService
from listarr.importlists.status import ImportListStatusService
from listarr.metadata.mapper import MovieMapper
from listarr.models.import_list import FetchResult
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class FetchAggregator:
    """Fetches every usable list and merges the results.

    Lists are fetched and mapped concurrently; the merge happens afterwards in
    configuration order so the first list reporting a movie always wins.
    """

    def __init__(
        self,
        factory: ImportListFactory,
        status_service: ImportListStatusService,
        mapper: MovieMapper,
        list_movie_service: Optional[ListMovieService] = None,
        max_parallel_fetches: int = 4,
    ):
        """Initialize aggregator.

        Args:
            factory: Import list registry
            status_service: List health tracker
            mapper: Metadata mapper for list movies
            list_movie_service: Store for the last fetched contents of each list
            max_parallel_fetches: Lists fetched at the same time
        """
        self.factory = factory
        self.status_service = status_service
        self.mapper = mapper
        self.list_movie_service = list_movie_service
        self.max_parallel_fetches = max_parallel_fetches

    async def fetch(self, providers: Optional[List[ImportList]] = None) -> FetchResult:
        """Fetch, map and deduplicate movies.

        Args:
            providers: Lists to fetch (all available lists if None)

        Returns:
            Deduplicated movies and whether any list failed or was skipped
        """
        if providers is None:
            providers = self.factory.get_available_providers()

        blocked = {status.provider_id: status for status in self.status_service.get_blocked_providers()}
        semaphore = asyncio.Semaphore(self.max_parallel_fetches)

        async def fetch_one(provider: ImportList) -> FetchResult:
            status = blocked.get(provider.definition.id)
            if status is not None:
                logger.warning(
                    "Temporarily ignoring list due to recent failures",
                    list=provider.name,
                    disabled_till=status.disabled_till.isoformat(),
                )
                return FetchResult(any_failure=True)

            async with semaphore:
                return await self._fetch_and_map(provider)

        results = await asyncio.gather(*(fetch_one(provider) for provider in providers))

        movies = []
        any_failure = False
        for provider, result in zip(providers, results):
            any_failure |= result.any_failure
            if result.any_failure:
                continue

            movies.extend(result.movies)
            if self.list_movie_service:
                self.list_movie_service.sync_movies_for_list(result.movies, provider.definition.id)

        logger.debug(
            "Found movies from lists",
            count=len(movies),
            lists=", ".join(provider.name for provider in providers),
            any_failure=any_failure,
        )

        return FetchResult(movies=distinct_by_identity(movies), any_failure=any_failure)

    async def _fetch_and_map(self, provider: ImportList) -> FetchResult:
        try:
            result = await provider.fetch()
        except Exception as e:
            logger.warning(
                "Import list raised during fetch",
                list=provider.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return FetchResult(any_failure=True)

        if result.any_failure:
            logger.warning("Import list fetch failed", list=provider.name)
            return FetchResult(any_failure=True)

        # TODO: batch TMDB lookups for lists that report many movies at once
        mapped = [
            await self.mapper.map_list_movie(replace(movie, list_id=provider.definition.id))
            for movie in result.movies
        ]
        return FetchResult(movies=mapped, any_failure=False)
