"""
Margin calculation for a single line item.
Pure and deterministic: no I/O, no shared state.
"""

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from document_store import ReferenceDocument

from .models import MarginConfig, ValueCalculation


def to_number(value: Any) -> float:
    """
    Coerce a document or item value to a float.

    Booleans map to 1.0/0.0, numbers convert directly and strings are parsed
    after stripping whitespace. Missing, blank, unparsable, out-of-range or
    non-scalar values yield NaN.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float, Decimal)):
        # Out-of-range ints and signalling Decimal NaNs do not convert
        try:
            return float(value)
        except (OverflowError, ValueError):
            return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _item_number(item: Mapping[str, Any], key: str, default: float) -> float:
    value = item.get(key)
    if value is None:
        return default
    return to_number(value)


def compute_margin(
    item: Mapping[str, Any], document: ReferenceDocument, config: MarginConfig
) -> float:
    """
    Compute the margin of ``item`` from its reference document.

    Parameters:
        item: Line item; ``quantity`` defaults to 1 and ``discount`` to 0.
        document: Reference document read for the item.
        config: Margin configuration selecting the fields and the formula.

    Returns:
        float: The margin. Unknown formulas yield 0. Missing or non-numeric
        source fields propagate as NaN; callers decide whether to keep it.
    """
    document_value = to_number(document.fields.get(config.value_field))
    quantity = _item_number(item, "quantity", 1.0)

    match config.formula:
        case ValueCalculation.VALUE_QUANTITY:
            return document_value * quantity
        case ValueCalculation.RETURN_RATE:
            return_rate = to_number(document.fields.get(config.return_rate_field))
            return (1 - return_rate) * document_value * quantity
        case ValueCalculation.VALUE_WITH_DISCOUNT:
            discount = _item_number(item, "discount", 0.0)
            return (document_value - discount) * quantity
        case _:
            return 0.0
