"""Item list extraction from event payloads."""

from collections.abc import Mapping
from typing import Any

from .exceptions import PayloadError


def extract_items(event: Any, key: str = "items") -> list[Any]:
    """
    Return the line-item list of an event payload.

    The list object itself is returned (not a copy) so that enrichment
    mutates the items the event carries. A missing or null list yields ``[]``.

    Raises:
        PayloadError: If the event is not a mapping or the items value is not a list.
    """
    if not isinstance(event, Mapping):
        raise PayloadError(f"Event payload must be an object, got {type(event).__name__}")

    items = event.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise PayloadError(f"Event '{key}' must be a list, got {type(items).__name__}")
    return items
