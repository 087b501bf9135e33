"""Factory producing ready document store clients from configuration."""

from collections.abc import Mapping
from typing import Any

from document_store.base import DocumentStoreClient
from document_store.config import DocumentStoreConfig
from document_store.errors import ConfigurationError
from document_store.memory import InMemoryDocumentStore
from document_store.rest_client import RestDocumentStoreClient


class DocumentStoreFactory:
    """Factory for creating DocumentStoreClient instances based on configuration."""

    @staticmethod
    def create(
        config: DocumentStoreConfig | None = None,
        *,
        documents: Mapping[str, Mapping[str, Any]] | None = None,
        session: Any | None = None,
    ) -> DocumentStoreClient:
        """Returns a ready DocumentStoreClient instance.

        Args:
            config: Store settings. Defaults to settings read from the environment.
            documents: Seed documents for the in-memory provider.
            session: Optional aiohttp session for the REST provider.

        Returns:
            An instance of a class implementing DocumentStoreClient.

        Raises:
            ConfigurationError: If an unsupported provider is specified.
        """
        config = config or DocumentStoreConfig()
        provider = config.provider.lower()

        if provider == "memory":
            return InMemoryDocumentStore(documents)
        elif provider == "rest":
            return RestDocumentStoreClient(config, session=session)
        else:
            raise ConfigurationError(f"Unsupported document store provider: {provider}")
