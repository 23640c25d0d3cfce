"""Builds import list providers from their definitions."""

from typing import List, Optional

import httpx

from listarr.importlists.base import ImportList
from listarr.importlists.radarr import RadarrList
from listarr.importlists.static import StaticList
from listarr.importlists.status import ImportListStatusService
from listarr.importlists.stevenlu import StevenLuList
from listarr.models.import_list import ImportListDefinition
from listarr.utils.logger import get_logger

logger = get_logger(__name__)


class ImportListNotFoundError(Exception):
    """Raised when an import list id is not configured or not enabled."""

    pass


def create_import_list(
    definition: ImportListDefinition,
    status_service: Optional[ImportListStatusService] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0,
) -> ImportList:
    """Create the provider for a list definition.

    Args:
        definition: List configuration
        status_service: Health tracker for HTTP lists
        client: Shared HTTP client for HTTP lists
        timeout: Request timeout for HTTP lists

    Returns:
        Import list instance

    Raises:
        ValueError: If the implementation is not supported
    """
    implementation = definition.implementation.lower()
    if implementation == "radarr":
        return RadarrList(definition, status_service, client=client, timeout=timeout)
    elif implementation == "stevenlu":
        return StevenLuList(definition, status_service, client=client, timeout=timeout)
    elif implementation == "static":
        return StaticList(definition)
    else:
        raise ValueError(f"Unsupported import list implementation: {definition.implementation}")


class ImportListFactory:
    """Registry of the configured import lists."""

    def __init__(self, providers: List[ImportList]):
        self._providers = list(providers)

    @classmethod
    def from_definitions(
        cls,
        definitions: List[ImportListDefinition],
        status_service: Optional[ImportListStatusService] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> "ImportListFactory":
        """Build providers for every configured list."""
        providers = [
            create_import_list(definition, status_service, client=client, timeout=timeout)
            for definition in definitions
        ]
        logger.info("Import lists loaded", count=len(providers))
        return cls(providers)

    def all(self) -> List[ImportList]:
        """Every configured list, enabled or not."""
        return list(self._providers)

    def get_available_providers(self) -> List[ImportList]:
        """Enabled lists, in configuration order."""
        return [provider for provider in self._providers if provider.enabled]

    def get(self, list_id: int) -> ImportListDefinition:
        """Get the definition of a list.

        Raises:
            ImportListNotFoundError: If no list has this id
        """
        for provider in self._providers:
            if provider.definition.id == list_id:
                return provider.definition
        raise ImportListNotFoundError(f"Import list {list_id} not found")
