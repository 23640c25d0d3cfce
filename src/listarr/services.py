"""Wiring of the ListArr services from configuration."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from listarr.config import Config
from listarr.core.aggregator import FetchAggregator
from listarr.core.commands import CommandQueue
from listarr.core.database import LibraryDatabase
from listarr.core.sync import ImportListSyncService
from listarr.importlists.exclusions import ImportExclusionsService
from listarr.importlists.factory import ImportListFactory
from listarr.importlists.list_movies import ListMovieService
from listarr.importlists.status import ImportListStatusService
from listarr.metadata.cache import MetadataCache
from listarr.metadata.mapper import MovieMapper
from listarr.metadata.tmdb import TMDBClient
from listarr.movies.add import AddMovieService
from listarr.movies.service import MovieService


@dataclass
class Services:
    """All long-lived services of a ListArr process."""

    config: Config
    db: LibraryDatabase
    http_client: httpx.AsyncClient
    movie_service: MovieService
    add_movie_service: AddMovieService
    exclusion_service: ImportExclusionsService
    list_movie_service: ListMovieService
    status_service: ImportListStatusService
    factory: ImportListFactory
    tmdb_client: Optional[TMDBClient]
    sync_service: ImportListSyncService
    command_queue: CommandQueue

    async def close(self):
        """Close the shared HTTP client."""
        await self.http_client.aclose()


def build_services(config: Config, http_client: Optional[httpx.AsyncClient] = None) -> Services:
    """Create every service from configuration.

    Args:
        config: Application configuration
        http_client: HTTP client shared by lists and TMDB (created if None)

    Returns:
        Wired services
    """
    http_client = http_client or httpx.AsyncClient(
        timeout=config.sync.request_timeout_seconds, follow_redirects=True
    )

    db = LibraryDatabase(Path(config.database.path))
    movie_service = MovieService(db)
    add_movie_service = AddMovieService(db)
    exclusion_service = ImportExclusionsService(db)
    list_movie_service = ListMovieService(db)
    status_service = ImportListStatusService(
        db, config.health.minimum_time_since_initial_failure
    )

    factory = ImportListFactory.from_definitions(
        config.import_lists,
        status_service,
        client=http_client,
        timeout=config.sync.request_timeout_seconds,
    )

    tmdb_client = None
    if config.tmdb.enabled and config.tmdb.api_key:
        cache = MetadataCache(Path(config.tmdb.cache_path), config.tmdb.cache_ttl_days)
        cache.purge_expired()
        tmdb_client = TMDBClient(config.tmdb.api_key, cache, client=http_client)

    aggregator = FetchAggregator(
        factory,
        status_service,
        MovieMapper(tmdb_client),
        list_movie_service,
        max_parallel_fetches=config.sync.max_parallel_fetches,
    )

    sync_service = ImportListSyncService(
        factory,
        aggregator,
        movie_service,
        add_movie_service,
        exclusion_service,
        sync_level=config.list_sync_level,
    )

    return Services(
        config=config,
        db=db,
        http_client=http_client,
        movie_service=movie_service,
        add_movie_service=add_movie_service,
        exclusion_service=exclusion_service,
        list_movie_service=list_movie_service,
        status_service=status_service,
        factory=factory,
        tmdb_client=tmdb_client,
        sync_service=sync_service,
        command_queue=CommandQueue(sync_service),
    )
