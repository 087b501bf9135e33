"""Margin configuration models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ValueCalculation(str, Enum):
    """Known margin formulas."""

    VALUE_QUANTITY = "valueQuantity"
    RETURN_RATE = "returnRate"
    VALUE_WITH_DISCOUNT = "valueWithDiscount"


class MarginConfig(BaseModel):
    """Per-batch margin configuration.

    Accepts both the camelCase names used by event-pipeline configuration
    (``collectionId``, ``valueField``, ...) and the snake_case field names.
    ``value_calculation`` stays a plain string so that an unknown formula
    can still be represented; see ``formula``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    collection_id: str = Field(alias="collectionId", description="Collection holding reference documents")
    value_field: str = Field(alias="valueField", description="Document field holding the item value")
    return_rate_field: str = Field(
        default="", alias="returnRateField", description="Document field holding the return rate"
    )
    value_calculation: str = Field(
        default=ValueCalculation.VALUE_QUANTITY.value,
        alias="valueCalculation",
        description="Formula name: valueQuantity, returnRate or valueWithDiscount",
    )

    @field_validator("collection_id")
    def validate_collection_id(cls, v: str) -> str:
        # Kept as given: the store key is collectionId + "/" + item_id
        if not v.strip():
            raise ValueError("collectionId must be a non-empty string")
        return v

    @field_validator("value_field")
    def validate_value_field(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("valueField must be a non-empty string")
        return v

    @field_validator("value_calculation", mode="before")
    def normalize_value_calculation(cls, v: Any) -> Any:
        if isinstance(v, ValueCalculation):
            return v.value
        return v

    @property
    def formula(self) -> ValueCalculation | None:
        """The selected formula, or None when ``value_calculation`` is not recognised."""
        try:
            return ValueCalculation(self.value_calculation)
        except ValueError:
            return None

    def document_key(self, item_id: Any) -> str:
        return f"{self.collection_id}/{item_id}"
