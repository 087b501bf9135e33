"""Document store connection configuration."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("memory", "rest")


class DocumentStoreConfig(BaseSettings):
    """Connection settings for the reference document store."""

    model_config = SettingsConfigDict(
        env_prefix="DOCUMENT_STORE_", case_sensitive=False, extra="ignore"
    )

    provider: str = Field(
        default="rest", description="Store backend: 'memory' or 'rest'"
    )
    base_url: str = Field(
        default="https://firestore.googleapis.com/v1",
        description="Base URL of the REST documents API",
    )
    project: str | None = Field(
        default=None,
        description="Default project used when a read does not pass a namespace",
    )
    database: str = Field(default="(default)", description="Database identifier")
    timeout_seconds: float = Field(
        default=10.0, description="Total timeout for a single read in seconds"
    )
    auth_token: str | None = Field(
        default=None, description="Bearer token sent with every request"
    )

    @field_validator("provider")
    def validate_provider(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported document store provider '{v}'. "
                f"Must be one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return v

    @field_validator("timeout_seconds")
    def validate_timeout(cls, v: float) -> float:
        """
        Validate that a read timeout is between 0 (exclusive) and 300 seconds.

        Raises:
            ValueError: If `v` is not positive or is greater than 300.
        """
        if v <= 0 or v > 300:
            raise ValueError("Read timeout must be greater than 0 and at most 300 seconds")
        return v

    @field_validator("base_url")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def log_configuration(self) -> None:
        """Log current configuration for debugging. The auth token is never logged."""
        logger.info("Document Store Configuration:")
        logger.info(f"  Provider: {self.provider}")
        logger.info(f"  Base URL: {self.base_url}")
        logger.info(f"  Project: {self.project or '<per read>'}")
        logger.info(f"  Database: {self.database}")
        logger.info(f"  Timeout: {self.timeout_seconds}s")
        logger.info(f"  Auth: {'Bearer token' if self.auth_token else 'None'}")
