"""In-memory document store used for tests and local runs."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from document_store.base import DocumentStoreClient, ReferenceDocument
from document_store.errors import DocumentNotFoundError

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStoreClient):
    """Dictionary-backed document store.

    Args:
        documents: Path to field mapping used when a read has no namespace
            (or no namespace partitions are configured).
        namespaces: Optional namespace -> (path -> fields) partitions. When set,
            a read with a namespace only sees that partition.
        latency: Optional per-path delay in seconds applied before answering.
        failures: Optional per-path exception raised instead of answering.
    """

    def __init__(
        self,
        documents: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        namespaces: Mapping[str, Mapping[str, Mapping[str, Any]]] | None = None,
        latency: Mapping[str, float] | None = None,
        failures: Mapping[str, BaseException] | None = None,
    ) -> None:
        self._documents = dict(documents or {})
        self._namespaces = (
            {name: dict(docs) for name, docs in namespaces.items()}
            if namespaces is not None
            else None
        )
        self._latency = dict(latency or {})
        self._failures = dict(failures or {})
        self.reads: list[tuple[str, str | None]] = []

    def _partition(self, namespace: str | None) -> Mapping[str, Mapping[str, Any]]:
        if namespace is None or self._namespaces is None:
            return self._documents
        return self._namespaces.get(namespace, {})

    async def read(
        self, path: str, *, namespace: str | None = None
    ) -> ReferenceDocument:
        self.reads.append((path, namespace))

        delay = self._latency.get(path)
        if delay:
            await asyncio.sleep(delay)

        failure = self._failures.get(path)
        if failure is not None:
            raise failure

        fields = self._partition(namespace).get(path)
        if fields is None:
            raise DocumentNotFoundError(path, namespace)

        logger.debug(f"In-memory read hit for {path}")
        return ReferenceDocument(path=path, fields=dict(fields))
