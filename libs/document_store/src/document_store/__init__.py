"""Document store interface - async read-by-key access to reference documents."""

from document_store.base import DocumentStoreClient, ReferenceDocument
from document_store.config import DocumentStoreConfig
from document_store.errors import (
    ConfigurationError,
    DocumentNotFoundError,
    DocumentStoreError,
    DocumentTransportError,
    MalformedDocumentError,
)
from document_store.factory import DocumentStoreFactory
from document_store.memory import InMemoryDocumentStore
from document_store.rest_client import RestDocumentStoreClient

__all__ = [
    "ConfigurationError",
    "DocumentNotFoundError",
    "DocumentStoreClient",
    "DocumentStoreConfig",
    "DocumentStoreError",
    "DocumentStoreFactory",
    "DocumentTransportError",
    "InMemoryDocumentStore",
    "MalformedDocumentError",
    "ReferenceDocument",
    "RestDocumentStoreClient",
]
