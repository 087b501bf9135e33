"""Tests for the in-memory document store."""

import asyncio
import time

import pytest

from document_store import (
    DocumentNotFoundError,
    DocumentTransportError,
    InMemoryDocumentStore,
    ReferenceDocument,
)


class TestInMemoryDocumentStore:
    @pytest.mark.asyncio
    async def test_read_returns_document(self):
        store = InMemoryDocumentStore({"products/sku-1": {"price": 10}})

        document = await store.read("products/sku-1")

        assert isinstance(document, ReferenceDocument)
        assert document.path == "products/sku-1"
        assert document.fields == {"price": 10}
        assert document.get("price") == 10
        assert document.get("missing", 0) == 0

    @pytest.mark.asyncio
    async def test_read_returns_a_copy(self):
        seed = {"products/sku-1": {"price": 10}}
        store = InMemoryDocumentStore(seed)

        document = await store.read("products/sku-1")
        document.fields["price"] = 99  # type: ignore[index]

        assert (await store.read("products/sku-1")).fields == {"price": 10}

    @pytest.mark.asyncio
    async def test_missing_document_raises_not_found(self):
        store = InMemoryDocumentStore({})

        with pytest.raises(DocumentNotFoundError) as exc_info:
            await store.read("products/nope", namespace="shop")

        assert exc_info.value.path == "products/nope"
        assert exc_info.value.namespace == "shop"
        assert "shop" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_namespaces_partition_documents(self):
        store = InMemoryDocumentStore(
            {"products/sku-1": {"price": 1}},
            namespaces={"eu": {"products/sku-1": {"price": 2}}},
        )

        assert (await store.read("products/sku-1")).fields["price"] == 1
        assert (await store.read("products/sku-1", namespace="eu")).fields["price"] == 2
        with pytest.raises(DocumentNotFoundError):
            await store.read("products/sku-1", namespace="us")

    @pytest.mark.asyncio
    async def test_namespace_without_partitions_uses_default_documents(self):
        store = InMemoryDocumentStore({"products/sku-1": {"price": 1}})
        assert (await store.read("products/sku-1", namespace="any")).fields["price"] == 1

    @pytest.mark.asyncio
    async def test_injected_failure(self):
        store = InMemoryDocumentStore(
            {"products/sku-1": {"price": 1}},
            failures={"products/sku-1": DocumentTransportError("down")},
        )

        with pytest.raises(DocumentTransportError, match="down"):
            await store.read("products/sku-1")

    @pytest.mark.asyncio
    async def test_records_reads(self):
        store = InMemoryDocumentStore({"products/sku-1": {"price": 1}})

        await store.read("products/sku-1", namespace="shop")
        with pytest.raises(DocumentNotFoundError):
            await store.read("products/sku-2")

        assert store.reads == [("products/sku-1", "shop"), ("products/sku-2", None)]

    @pytest.mark.asyncio
    async def test_latency_is_concurrent(self):
        documents = {f"products/{i}": {"price": i} for i in range(10)}
        store = InMemoryDocumentStore(documents, latency={path: 0.05 for path in documents})

        start = time.monotonic()
        results = await asyncio.gather(*(store.read(path) for path in documents))
        elapsed = time.monotonic() - start

        assert [r.fields["price"] for r in results] == list(range(10))
        assert elapsed < 0.4

    @pytest.mark.asyncio
    async def test_close_is_a_no_op(self):
        await InMemoryDocumentStore().close()
