"""Common contract for import lists."""

from abc import ABC, abstractmethod
from typing import List, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from listarr.models.import_list import FetchResult, ImportListDefinition
from listarr.models.movie import ListMovie
from listarr.importlists.status import ImportListStatusService
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class ImportListError(Exception):
    """Raised when a list responds with an error or unusable content."""

    pass


class ImportList(ABC):
    """An external source of movies.

    The sync engine only relies on this interface and never on the concrete
    list type.
    """

    def __init__(self, definition: ImportListDefinition):
        self.definition = definition

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def enabled(self) -> bool:
        return self.definition.enabled

    @property
    def enable_auto(self) -> bool:
        return self.definition.enable_auto

    @abstractmethod
    async def fetch(self) -> FetchResult:
        """Fetch the movies currently on the list.

        Implementations must not raise; failures are reported through
        ``FetchResult.any_failure``.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.definition.id} name={self.name!r}>"


class HttpImportList(ImportList):
    """Base class for lists fetched with a single HTTP GET."""

    def __init__(
        self,
        definition: ImportListDefinition,
        status_service: Optional[ImportListStatusService] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        """Initialize HTTP import list.

        Args:
            definition: List configuration
            status_service: Health tracker to record success/failure on
            client: Shared HTTP client (a private one is created per fetch if None)
            timeout: Request timeout in seconds
        """
        super().__init__(definition)
        self.status_service = status_service
        self.client = client
        self.timeout = timeout

    async def fetch(self) -> FetchResult:
        """Fetch and parse the list, recording the outcome."""
        if not self.definition.url:
            logger.error("Import list has no URL configured", list=self.name)
            self._record_failure()
            return FetchResult(any_failure=True)

        try:
            response = await self._request(self.definition.url)
            if response.status_code != httpx.codes.OK:
                raise ImportListError(
                    f"{self.name} responded with unexpected status code {response.status_code}"
                )
            movies = self.parse_response(response)
        except Exception as e:
            logger.warning(
                "Import list fetch failed",
                list=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._record_failure()
            return FetchResult(any_failure=True)

        if self.status_service:
            self.status_service.record_success(self.definition.id)

        logger.debug("Fetched import list", list=self.name, count=len(movies))
        return FetchResult(movies=movies, any_failure=False)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, url: str) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if self.client is not None:
            return await self.client.get(url, headers=headers, timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, headers=headers)

    def _record_failure(self) -> None:
        if self.status_service:
            self.status_service.record_failure(self.definition.id)

    @abstractmethod
    def parse_response(self, response: httpx.Response) -> List[ListMovie]:
        """Turn a successful response into list movies.

        Raises:
            ImportListError: If the payload reports an error
        """
