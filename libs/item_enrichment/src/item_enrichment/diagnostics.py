"""Diagnostics emitted while enriching a batch.

The enricher reports two per-item events (skipped for a missing identifier,
failed lookup) plus rejected non-finite margins through an injectable
``EnrichmentDiagnostics`` object. ``LoggingDiagnostics`` is the default;
``RecordingDiagnostics`` keeps the events in memory.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

MISSING_IDENTIFIER = "missing_identifier"
LOOKUP_FAILED = "lookup_failed"
INVALID_MARGIN = "invalid_margin"


class EnrichmentDiagnostics(Protocol):
    """Receiver for per-item enrichment diagnostics. Return values are ignored."""

    def missing_identifier(self, index: int, item: Any) -> None: ...

    def lookup_failed(self, key: str, error: BaseException) -> None: ...

    def invalid_margin(self, key: str, value: float) -> None: ...


class LoggingDiagnostics:
    """Write diagnostics as human-readable log records."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def missing_identifier(self, index: int, item: Any) -> None:
        self.log.info(f"Item at position {index} has no item_id, skipping margin lookup")

    def lookup_failed(self, key: str, error: BaseException) -> None:
        self.log.warning(
            f"Reference lookup failed for '{key}': {error.__class__.__name__}: {error}"
        )

    def invalid_margin(self, key: str, value: float) -> None:
        self.log.warning(
            f"Computed margin for '{key}' is not a finite number ({value}), leaving item unchanged"
        )


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: str
    index: int | None = None
    key: str | None = None
    detail: str = ""


@dataclass
class RecordingDiagnostics:
    """Collect diagnostics in memory."""

    events: list[DiagnosticEvent] = field(default_factory=list)

    def missing_identifier(self, index: int, item: Any) -> None:
        detail = repr(dict(item)) if isinstance(item, Mapping) else repr(item)
        self.events.append(DiagnosticEvent(MISSING_IDENTIFIER, index=index, detail=detail))

    def lookup_failed(self, key: str, error: BaseException) -> None:
        self.events.append(
            DiagnosticEvent(LOOKUP_FAILED, key=key, detail=f"{error.__class__.__name__}: {error}")
        )

    def invalid_margin(self, key: str, value: float) -> None:
        self.events.append(DiagnosticEvent(INVALID_MARGIN, key=key, detail=str(value)))

    def of_kind(self, kind: str) -> list[DiagnosticEvent]:
        return [event for event in self.events if event.kind == kind]
