"""Exception taxonomy for the reconciliation engine.

A failed name lookup is not an error here: resolution misses surface as an
empty code and a fail-safe ``SccRequired`` classification.
"""

from __future__ import annotations


class ShieldError(Exception):
    """Base class for engine errors."""

    pass


class SourceUnavailable(ShieldError):
    """Raised when an external source cannot be fetched."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class QueueWriteError(ShieldError):
    """Raised when a review queue item cannot be created."""

    def __init__(self, evidence_event_id: str, message: str):
        super().__init__(f"Failed to create review item for {evidence_event_id}: {message}")
        self.evidence_event_id = evidence_event_id
        self.message = message


class CountryTablesError(ShieldError):
    """Raised when the country tables file is missing or malformed."""

    pass
