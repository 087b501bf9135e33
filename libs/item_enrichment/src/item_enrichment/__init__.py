"""Item margin enrichment library.

This library contains the margin enrichment pipeline for e-commerce line items:
- Margin formulas over reference documents (calculator)
- Concurrent per-item lookup and batch assembly (enricher)
- Injectable diagnostics
- Event payload item extraction
"""

from .calculator import compute_margin, to_number
from .config import EnrichmentSettings
from .diagnostics import (
    DiagnosticEvent,
    EnrichmentDiagnostics,
    LoggingDiagnostics,
    RecordingDiagnostics,
)
from .enricher import (
    EnrichmentResult,
    EnrichmentStats,
    ItemEnricher,
    ItemOutcome,
    enrich_items,
)
from .exceptions import EnrichmentConfigurationError, ItemEnrichmentError, PayloadError
from .models import MarginConfig, ValueCalculation
from .payload import extract_items

__all__ = [
    "DiagnosticEvent",
    "EnrichmentConfigurationError",
    "EnrichmentDiagnostics",
    "EnrichmentResult",
    "EnrichmentSettings",
    "EnrichmentStats",
    "ItemEnricher",
    "ItemEnrichmentError",
    "ItemOutcome",
    "LoggingDiagnostics",
    "MarginConfig",
    "PayloadError",
    "RecordingDiagnostics",
    "ValueCalculation",
    "compute_margin",
    "enrich_items",
    "extract_items",
    "to_number",
]
