"""Contracts for the external collaborators the engine reads from and writes to."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from sovereign_shield.core.ontology import (
    EvidenceEvent,
    NewReviewItem,
    ReviewQueueItem,
    SCCRegistryRecord,
)


@runtime_checkable
class EvidenceEventSource(Protocol):
    """Hash-chained evidence ledger (read-only from here)."""

    def fetch_events(self, filters: dict[str, Any] | None = None) -> list[EvidenceEvent]: ...


@runtime_checkable
class SCCRegistrySource(Protocol):
    """SCC registry; administration happens elsewhere."""

    def fetch_registries(self) -> list[SCCRegistryRecord]: ...


@runtime_checkable
class ReviewQueueSink(Protocol):
    """Human review queue."""

    def fetch_pending(self) -> list[ReviewQueueItem]: ...

    def create(self, item: NewReviewItem) -> str:
        """Create a queue item and return its id."""
        ...


@runtime_checkable
class DecidedIdSource(Protocol):
    """Evidence/event ids that already carry a final human decision."""

    def fetch_decided_ids(self) -> frozenset[str]: ...
