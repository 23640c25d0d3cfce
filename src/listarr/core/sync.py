"""Import list sync orchestrator."""

from dataclasses import dataclass
from typing import List

from listarr.core.aggregator import FetchAggregator
from listarr.core.reconciler import LibraryReconciler
from listarr.core.selector import AutoAddSelector
from listarr.importlists.base import ImportList
from listarr.importlists.exclusions import ImportExclusionsService
from listarr.importlists.factory import ImportListFactory, ImportListNotFoundError
from listarr.models.import_list import ListSyncLevel
from listarr.movies.add import AddMovieService
from listarr.movies.service import MovieService
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ImportListSyncCommand:
    """Request to sync import lists.

    A ``list_id`` of 0 syncs every list.
    """

    list_id: int = 0
    name: str = "ImportListSync"


@dataclass
class SyncResult:
    """Summary of a sync cycle."""

    fetched: int = 0
    added: int = 0
    stale: int = 0
    unmonitored: int = 0
    deleted: int = 0
    any_failure: bool = False
    cleaned: bool = False

    @property
    def message(self) -> str:
        return f"Added {self.added} movies from import lists"


class ImportListSyncService:
    """Runs a sync cycle: fetch, clean the library, add new movies."""

    def __init__(
        self,
        factory: ImportListFactory,
        aggregator: FetchAggregator,
        movie_service: MovieService,
        add_movie_service: AddMovieService,
        exclusion_service: ImportExclusionsService,
        sync_level: ListSyncLevel = ListSyncLevel.DISABLED,
    ):
        self.factory = factory
        self.aggregator = aggregator
        self.movie_service = movie_service
        self.add_movie_service = add_movie_service
        self.exclusion_service = exclusion_service
        self.sync_level = ListSyncLevel(sync_level)

    async def execute(self, command: ImportListSyncCommand) -> SyncResult:
        """Run a sync command.

        Args:
            command: Sync command, optionally targeting a single list

        Returns:
            Summary of the cycle

        Raises:
            ImportListNotFoundError: If the targeted list is unknown or disabled
            PersistenceError: If the library could not be read or written
        """
        if command.list_id:
            return await self.sync_list(command.list_id)
        return await self.sync_all()

    async def sync_all(self) -> SyncResult:
        """Sync every enabled list, cleaning the library when configured."""
        return await self._sync(self.factory.get_available_providers(), allow_cleanup=True)

    async def sync_list(self, list_id: int) -> SyncResult:
        """Sync a single list.

        The library is never cleaned: one list is not the full picture.
        """
        providers = [
            provider
            for provider in self.factory.get_available_providers()
            if provider.definition.id == list_id
        ]
        if not providers:
            raise ImportListNotFoundError(f"Import list {list_id} not found or not enabled")

        return await self._sync(providers, allow_cleanup=False)

    async def _sync(self, providers: List[ImportList], allow_cleanup: bool) -> SyncResult:
        fetch_result = await self.aggregator.fetch(providers)
        result = SyncResult(fetched=len(fetch_result.movies), any_failure=fetch_result.any_failure)

        if not any(provider.enable_auto for provider in providers):
            logger.info("No lists are enabled for auto-import.")
            return result

        listed_movies = fetch_result.movies

        if fetch_result.any_failure:
            logger.warning(
                "Skipping library cleanup, one or more lists failed or were skipped",
                fetched=result.fetched,
            )
        elif allow_cleanup:
            cleanup = LibraryReconciler(self.movie_service, self.sync_level).clean_library(
                listed_movies
            )
            result.cleaned = self.sync_level != ListSyncLevel.DISABLED
            result.stale = len(cleanup.stale)
            result.unmonitored = len(cleanup.unmonitored)
            result.deleted = len(cleanup.deleted)

        selector = AutoAddSelector(self.movie_service, self.exclusion_service.get_all_exclusions())

        for movie in listed_movies:
            if movie.tmdb_id != 0:
                selector.process_movie_report(self.factory.get(movie.list_id), movie)

        if selector.movies_to_add:
            logger.info(
                "Adding movies from your auto enabled lists to library",
                count=len(selector.movies_to_add),
            )

        self.add_movie_service.add_movies(selector.movies_to_add, True)
        result.added = len(selector.movies_to_add)

        logger.info(
            "Import list sync completed",
            fetched=result.fetched,
            added=result.added,
            stale=result.stale,
            unmonitored=result.unmonitored,
            deleted=result.deleted,
            any_failure=result.any_failure,
        )
        return result
