"""
Configuration for the item margin enrichment pipeline.
"""

import logging

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import EnrichmentConfigurationError
from .models import MarginConfig, ValueCalculation

logger = logging.getLogger(__name__)


class EnrichmentSettings(BaseSettings):
    """
    Enrichment run settings, read from ``ITEM_ENRICHMENT_*`` environment variables.

    The margin fields provide defaults for runs that do not pass an explicit
    MarginConfig (see ``default_margin_config``).
    """

    model_config = SettingsConfigDict(
        env_prefix="ITEM_ENRICHMENT_", case_sensitive=False, extra="ignore"
    )

    # Store reads
    namespace: str | None = Field(
        default=None, description="Project/namespace passed with every store read"
    )

    # Formula handling
    strict_formula: bool = Field(
        default=False,
        description="Fail the batch when valueCalculation is not a known formula (instead of margin 0)",
    )

    # Default margin configuration
    collection_id: str | None = Field(default=None, description="Default collectionId")
    value_field: str | None = Field(default=None, description="Default valueField")
    return_rate_field: str = Field(default="", description="Default returnRateField")
    value_calculation: str = Field(
        default=ValueCalculation.VALUE_QUANTITY.value,
        description="Default valueCalculation",
    )

    # Logging
    log_summary: bool = Field(default=True, description="Log a summary line per batch")

    def default_margin_config(self) -> MarginConfig:
        """
        Build a MarginConfig from the settings defaults.

        Raises:
            EnrichmentConfigurationError: If the defaults do not form a valid configuration.
        """
        try:
            return MarginConfig(
                collection_id=self.collection_id or "",
                value_field=self.value_field or "",
                return_rate_field=self.return_rate_field,
                value_calculation=self.value_calculation,
            )
        except ValidationError as e:
            raise EnrichmentConfigurationError(
                f"Default margin configuration is invalid: {e}"
            ) from e

    def log_configuration(self) -> None:
        """Log current configuration for debugging."""
        logger.info("Item Enrichment Configuration:")
        logger.info(f"  Namespace: {self.namespace or '<store default>'}")
        logger.info(f"  Collection: {self.collection_id or '<per run>'}")
        logger.info(f"  Value Field: {self.value_field or '<per run>'}")
        logger.info(f"  Value Calculation: {self.value_calculation}")
        logger.info(f"  Strict Formula: {'Enabled' if self.strict_formula else 'Disabled'}")
