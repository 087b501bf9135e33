"""
Batch margin enrichment.
Reads one reference document per line item concurrently and attaches the
computed margin. A single item's failure never fails the batch.
"""

import asyncio
import logging
import math
import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from document_store import DocumentStoreClient, MalformedDocumentError, ReferenceDocument
from pydantic import ValidationError

from .calculator import compute_margin
from .config import EnrichmentSettings
from .diagnostics import EnrichmentDiagnostics, LoggingDiagnostics
from .exceptions import EnrichmentConfigurationError
from .models import MarginConfig

logger = logging.getLogger(__name__)


class ItemOutcome(str, Enum):
    ENRICHED = "enriched"
    SKIPPED = "skipped"
    FAILED = "failed"
    INVALID = "invalid"


@dataclass(frozen=True)
class EnrichmentStats:
    total: int
    enriched: int
    skipped: int
    failed: int
    invalid: int
    elapsed: float


@dataclass
class EnrichmentResult:
    items: list[Any]
    outcomes: list[ItemOutcome]
    stats: EnrichmentStats


def _item_identifier(item: Any) -> Any | None:
    if not isinstance(item, Mapping):
        return None
    item_id = item.get("item_id")
    if item_id is None or item_id == "":
        return None
    return item_id


class ItemEnricher:
    """
    Attaches a ``margin`` to every line item whose reference document can be read.

    The store is shared read-only by all lookups of a batch; items are
    mutated in place and the input list is returned.
    """

    def __init__(
        self,
        store: DocumentStoreClient,
        diagnostics: EnrichmentDiagnostics | None = None,
        settings: EnrichmentSettings | None = None,
    ):
        """
        Parameters:
            store: Any object exposing ``async read(path, *, namespace=None)``.
            diagnostics: Receiver for per-item diagnostics; defaults to LoggingDiagnostics().
            settings: Run settings; defaults to EnrichmentSettings() read from the environment.

        Raises:
            EnrichmentConfigurationError: If no usable store is given.
        """
        if store is None or not callable(getattr(store, "read", None)):
            logger.error("Item enrichment requires a document store with a read() method")
            raise EnrichmentConfigurationError(
                "A document store with an async read() method is required"
            )
        self.store = store
        self.diagnostics = diagnostics or LoggingDiagnostics()
        self.settings = settings or EnrichmentSettings()

    async def enrich(
        self,
        items: list[Any],
        config: MarginConfig | Mapping[str, Any] | None = None,
    ) -> list[Any]:
        """
        Enrich ``items`` in place and return the same list.

        Raises:
            EnrichmentConfigurationError: If the batch cannot run at all.
        """
        result = await self.enrich_with_stats(items, config)
        return result.items

    async def enrich_with_stats(
        self,
        items: list[Any],
        config: MarginConfig | Mapping[str, Any] | None = None,
    ) -> EnrichmentResult:
        """
        Enrich ``items`` in place and report per-item outcomes and batch counts.

        Parameters:
            items: Line items (dicts). Order and length are preserved.
            config: Margin configuration; a mapping is validated into a MarginConfig.
                When omitted, the settings defaults are used.

        Returns:
            EnrichmentResult: The input list, one outcome per item (same order) and stats.

        Raises:
            EnrichmentConfigurationError: If ``items`` is not a list or the configuration
                is invalid. Raised before any lookup is issued.
        """
        margin_config = self._resolve_config(items, config)

        start_time = time.time()
        outcomes = await asyncio.gather(
            *(
                self._enrich_item(index, item, margin_config)
                for index, item in enumerate(items)
            )
        )
        elapsed = time.time() - start_time

        stats = EnrichmentStats(
            total=len(items),
            enriched=outcomes.count(ItemOutcome.ENRICHED),
            skipped=outcomes.count(ItemOutcome.SKIPPED),
            failed=outcomes.count(ItemOutcome.FAILED),
            invalid=outcomes.count(ItemOutcome.INVALID),
            elapsed=elapsed,
        )
        if self.settings.log_summary:
            logger.info(
                f"Enriched {stats.enriched}/{stats.total} items from '{margin_config.collection_id}' "
                f"in {elapsed:.3f}s (skipped={stats.skipped}, failed={stats.failed}, invalid={stats.invalid})"
            )

        return EnrichmentResult(items=items, outcomes=list(outcomes), stats=stats)

    def _resolve_config(
        self, items: Any, config: MarginConfig | Mapping[str, Any] | None
    ) -> MarginConfig:
        if not isinstance(items, list):
            logger.error(f"Item enrichment expects a list of items, got {type(items).__name__}")
            raise EnrichmentConfigurationError(
                f"items must be a list, got {type(items).__name__}"
            )

        if config is None:
            margin_config = self.settings.default_margin_config()
        elif isinstance(config, MarginConfig):
            margin_config = config
        elif isinstance(config, Mapping):
            try:
                margin_config = MarginConfig.model_validate(config)
            except ValidationError as e:
                logger.error(f"Invalid margin configuration: {e}")
                raise EnrichmentConfigurationError(f"Invalid margin configuration: {e}") from e
        else:
            raise EnrichmentConfigurationError(
                f"config must be a MarginConfig or mapping, got {type(config).__name__}"
            )

        if margin_config.formula is None:
            if self.settings.strict_formula:
                logger.error(f"Unknown valueCalculation '{margin_config.value_calculation}'")
                raise EnrichmentConfigurationError(
                    f"Unknown valueCalculation '{margin_config.value_calculation}'"
                )
            logger.warning(
                f"Unknown valueCalculation '{margin_config.value_calculation}', "
                "every enriched item will get margin 0"
            )

        return margin_config

    async def _enrich_item(
        self, index: int, item: Any, config: MarginConfig
    ) -> ItemOutcome:
        item_id = _item_identifier(item)
        if item_id is None:
            self.diagnostics.missing_identifier(index, item)
            return ItemOutcome.SKIPPED

        key = config.document_key(item_id)
        document = await self._read(key)
        if isinstance(document, BaseException):
            self.diagnostics.lookup_failed(key, document)
            return ItemOutcome.FAILED

        margin = compute_margin(item, document, config)
        if not math.isfinite(margin):
            self.diagnostics.invalid_margin(key, margin)
            return ItemOutcome.INVALID

        item["margin"] = margin
        return ItemOutcome.ENRICHED

    async def _read(self, key: str) -> ReferenceDocument | Exception:
        """Read one document; failures are returned instead of raised."""
        try:
            document = await self.store.read(key, namespace=self.settings.namespace)
        except Exception as e:
            return e
        if not isinstance(getattr(document, "fields", None), Mapping):
            return MalformedDocumentError(f"Store returned no document fields for '{key}'")
        return document


async def enrich_items(
    items: list[Any],
    config: MarginConfig | Mapping[str, Any],
    store: DocumentStoreClient,
    diagnostics: EnrichmentDiagnostics | None = None,
    settings: EnrichmentSettings | None = None,
) -> list[Any]:
    """Enrich ``items`` in place using ``store`` and return the same list."""
    enricher = ItemEnricher(store, diagnostics=diagnostics, settings=settings)
    return await enricher.enrich(items, config)
