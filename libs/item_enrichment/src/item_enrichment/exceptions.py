"""Exceptions for the item margin enrichment pipeline."""


class ItemEnrichmentError(Exception):
    """Base exception for item enrichment errors."""

    pass


class EnrichmentConfigurationError(ItemEnrichmentError):
    """Raised when a batch cannot run: malformed configuration or missing store."""

    pass


class PayloadError(ItemEnrichmentError):
    """Raised when an event payload does not carry a usable items list."""

    pass
