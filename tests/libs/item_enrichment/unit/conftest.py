"""Shared test fixtures for item enrichment unit tests."""

from typing import Any

import pytest

from document_store import InMemoryDocumentStore
from item_enrichment import EnrichmentSettings, MarginConfig, RecordingDiagnostics


@pytest.fixture
def reference_documents() -> dict[str, dict[str, Any]]:
    """Reference documents keyed by '<collection>/<item_id>'."""
    return {
        "products/sku-1": {"price": 10, "return_rate": 0.1},
        "products/sku-2": {"price": "100", "return_rate": "0.2"},
        "products/sku-3": {"price": 50.0, "return_rate": 0},
    }


@pytest.fixture
def store(reference_documents: dict[str, dict[str, Any]]) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(reference_documents)


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    return RecordingDiagnostics()


@pytest.fixture
def settings() -> EnrichmentSettings:
    """Settings independent of ITEM_ENRICHMENT_* variables in the environment."""
    return EnrichmentSettings(
        namespace=None,
        strict_formula=False,
        collection_id=None,
        value_field=None,
        return_rate_field="",
        value_calculation="valueQuantity",
        log_summary=True,
    )


@pytest.fixture
def margin_config() -> MarginConfig:
    return MarginConfig(
        collectionId="products",
        valueField="price",
        returnRateField="return_rate",
        valueCalculation="valueQuantity",
    )
