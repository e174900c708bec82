"""In-memory sources for offline runs and tests."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sovereign_shield.core.ontology import (
    EvidenceEvent,
    NewReviewItem,
    ReviewQueueItem,
    ReviewStatus,
    SCCRegistryRecord,
)


class InMemoryEvidenceSource:
    """Evidence ledger held in a list; events are append-only."""

    def __init__(self, events: Iterable[EvidenceEvent] = ()):
        self._events: list[EvidenceEvent] = list(events)

    def append(self, *events: EvidenceEvent) -> None:
        self._events.extend(events)

    def fetch_events(self, filters: dict[str, Any] | None = None) -> list[EvidenceEvent]:
        events = list(self._events)
        if filters and filters.get("event_type"):
            events = [e for e in events if e.event_type == str(filters["event_type"]).upper()]
        return events


class InMemoryRegistrySource:
    """SCC registry held in a dict keyed by record id."""

    def __init__(self, records: Iterable[SCCRegistryRecord] = ()):
        self._records: dict[str, SCCRegistryRecord] = {r.id: r for r in records}

    def upsert(self, record: SCCRegistryRecord) -> None:
        self._records[record.id] = record

    def remove(self, record_id: str) -> None:
        self._records.pop(record_id, None)

    def fetch_registries(self) -> list[SCCRegistryRecord]:
        return list(self._records.values())


class InMemoryReviewQueue:
    """Review queue that also reports the ids of decided items."""

    def __init__(self, items: Iterable[ReviewQueueItem] = ()):
        self._items: dict[str, ReviewQueueItem] = {i.id: i for i in items}

    @property
    def items(self) -> list[ReviewQueueItem]:
        return list(self._items.values())

    def fetch_pending(self) -> list[ReviewQueueItem]:
        return [i for i in self._items.values() if i.status == ReviewStatus.PENDING]

    def create(self, item: NewReviewItem) -> str:
        seal_id = f"SEAL-{uuid.uuid4().hex[:16].upper()}"
        self._items[seal_id] = ReviewQueueItem(
            id=seal_id,
            evidence_event_id=item.evidence_event_id,
            action=item.action,
            context=dict(item.context),
            status=ReviewStatus.PENDING,
            agent_id=item.agent_id,
            module=item.module,
            created_at=datetime.now(timezone.utc),
        )
        return seal_id

    def decide(self, item_id: str, approve: bool) -> ReviewQueueItem:
        """Record a human decision on a pending item."""
        item = self._items.get(item_id)
        if item is None or item.status != ReviewStatus.PENDING:
            raise KeyError(f"Review not found or already decided: {item_id}")
        status = ReviewStatus.APPROVED if approve else ReviewStatus.REJECTED
        decided = item.model_copy(update={"status": status})
        self._items[item_id] = decided
        return decided

    def fetch_decided_ids(self) -> frozenset[str]:
        return frozenset(
            i.evidence_event_id
            for i in self._items.values()
            if i.status != ReviewStatus.PENDING and i.evidence_event_id
        )
