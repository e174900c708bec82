"""
Review queue reconciliation.

Each cycle recomputes, from a snapshot, which review-class evidence events
still need a human decision and creates at most one queue item per event.

States per event:
    DECIDED         id/eventId in the decided set (overrides everything)
    NOT_APPLICABLE  not review-class, or destination has valid SCC coverage
    ENQUEUED        already represented in the queue index
    NEEDS_REVIEW    review-class, uncovered, not yet enqueued

Duplicate prevention relies only on the identifier index built from the
queue snapshot, so re-running a cycle over an unchanged snapshot creates
nothing new. Events without any destination are treated as uncovered.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable

from sovereign_shield.core.ontology import (
    EVENT_DATA_TRANSFER_REVIEW,
    EvidenceEvent,
    NewReviewItem,
    Snapshot,
    VerificationStatus,
    ensure_utc,
)
from sovereign_shield.core.ontology.review import DEFAULT_AGENT_ID
from sovereign_shield.jurisdiction import CountryCategory, CountryClassifier
from sovereign_shield.scc import SCCCoverageEvaluator
from sovereign_shield.severity import derive_severity

from .index import build_queue_index
from .schemas import (
    AttentionEntry,
    EventEvaluation,
    EventState,
    PartialWriteFailure,
    ReconcileResult,
)

if TYPE_CHECKING:
    from sovereign_shield.sources.base import ReviewQueueSink

logger = logging.getLogger(__name__)


DEFAULT_STALENESS = timedelta(days=7)
ACTION_PREFIX = "transfer_data_to_"
UNKNOWN_DESTINATION = "unknown"


def is_review_class(event: EvidenceEvent) -> bool:
    return (
        event.event_type == EVENT_DATA_TRANSFER_REVIEW
        or event.verification_status == VerificationStatus.REVIEW.value
    )


def review_action(code: str | None) -> str:
    """Stable action key, e.g. ``transfer_data_to_us``."""
    return f"{ACTION_PREFIX}{(code or '').lower() or UNKNOWN_DESTINATION}"


class ReviewQueueReconciler:
    """Decides which events need review and enqueues them exactly once."""

    def __init__(self, classifier: CountryClassifier, coverage: SCCCoverageEvaluator):
        self.classifier = classifier
        self.coverage = coverage

    # =========================================================================
    # State evaluation
    # =========================================================================

    def destination_code(self, event: EvidenceEvent) -> str:
        payload = event.payload
        return self.classifier.resolver.resolve_destination(
            payload.destination_country_code,
            payload.destination_country,
        )

    def evaluate(
        self,
        event: EvidenceEvent,
        snapshot: Snapshot,
        now: datetime,
        queue_index: Iterable[str] | None = None,
    ) -> EventState:
        """State of a single event against ``snapshot``."""
        if queue_index is None:
            queue_index = build_queue_index(snapshot.queue)
        return self._state(event, snapshot, now, frozenset(queue_index))

    def _state(
        self,
        event: EvidenceEvent,
        snapshot: Snapshot,
        now: datetime,
        queue_index: frozenset[str] | set[str],
    ) -> EventState:
        if event.identifiers & snapshot.decided_ids:
            return EventState.DECIDED
        if not is_review_class(event):
            return EventState.NOT_APPLICABLE

        code = self.destination_code(event)
        if code and self.coverage.has_valid_coverage(code, snapshot.registries, now):
            return EventState.NOT_APPLICABLE

        if event.identifiers & queue_index:
            return EventState.ENQUEUED
        return EventState.NEEDS_REVIEW

    def evaluate_all(self, snapshot: Snapshot, now: datetime) -> list[EventEvaluation]:
        queue_index = build_queue_index(snapshot.queue)
        return [
            EventEvaluation(
                event_id=event.id,
                state=self._state(event, snapshot, now, queue_index),
                destination_code=self.destination_code(event),
            )
            for event in snapshot.events
        ]

    def pending_review(self, snapshot: Snapshot, now: datetime) -> list[EvidenceEvent]:
        """Undecided, uncovered review events, enqueued or not.

        No staleness filter is applied here.
        """
        queue_index = build_queue_index(snapshot.queue)
        pending = []
        seen: set[str] = set()
        for event in snapshot.events:
            if event.identifiers & seen:
                continue
            if self._state(event, snapshot, now, queue_index).requires_review:
                pending.append(event)
                seen |= event.identifiers
        return pending

    # =========================================================================
    # Queue item planning and creation
    # =========================================================================

    def _reason(self, event: EvidenceEvent, code: str, name: str) -> str:
        if event.payload.reason:
            return event.payload.reason
        if not code:
            return "Destination country missing; transfer safeguards cannot be verified"
        category = self.classifier.classify(code).category
        if category == CountryCategory.SCC_REQUIRED:
            return f"Transfer to {name} requires Standard Contractual Clauses; no valid SCC registered"
        return f"Transfer to {name} flagged for review; no valid SCC registered"

    def build_item(self, event: EvidenceEvent) -> NewReviewItem:
        code = self.destination_code(event)
        classification = self.classifier.classify(code)
        name = event.payload.destination_country or (self.classifier.country_name(code) if code else "Unknown")
        categories = list(event.payload.data_categories)

        context = {
            "event_id": event.id,
            "evidence_id": event.evidence_id,
            "destination_country": name,
            "destination_country_code": code or None,
            "data_category": ", ".join(categories) if categories else "unspecified",
            "data_categories": categories,
            "legal_basis": classification.legal_basis_tag,
            "reason": self._reason(event, code, name),
        }
        if event.timestamp:
            context["occurred_at"] = event.timestamp.isoformat()

        return NewReviewItem(
            evidence_event_id=event.evidence_id,
            action=review_action(code),
            context=context,
            agent_id=event.payload.agent_id or DEFAULT_AGENT_ID,
        )

    def plan(self, snapshot: Snapshot, now: datetime) -> list[NewReviewItem]:
        """Queue items the current snapshot calls for, without side effects.

        Events repeated within one snapshot are planned once.
        """
        index = set(build_queue_index(snapshot.queue))
        items = []
        for event in snapshot.events:
            if self._state(event, snapshot, now, index) != EventState.NEEDS_REVIEW:
                continue
            items.append(self.build_item(event))
            index |= event.identifiers
        return items

    def reconcile(
        self,
        snapshot: Snapshot,
        sink: "ReviewQueueSink",
        now: datetime,
    ) -> ReconcileResult:
        """Create queue items for every event still needing review.

        A failed creation is logged and recorded; the remaining items are
        still attempted.
        """
        now = ensure_utc(now)
        states = Counter(e.state for e in self.evaluate_all(snapshot, now))
        items = self.plan(snapshot, now)
        result = ReconcileResult(planned=len(items), states=dict(states))

        for item in items:
            try:
                item_id = sink.create(item)
            except Exception as exc:
                logger.exception("Review item creation failed for %s", item.evidence_event_id)
                result.failures.append(
                    PartialWriteFailure(evidence_event_id=item.evidence_event_id, message=str(exc))
                )
                continue
            result.created.append(item_id)

        if items:
            logger.info(
                "Reconciled review queue: %d planned, %d created, %d failed",
                result.planned, result.created_count, len(result.failures),
            )
        return result

    # =========================================================================
    # Attention view
    # =========================================================================

    def attention(
        self,
        snapshot: Snapshot,
        now: datetime,
        staleness: timedelta = DEFAULT_STALENESS,
    ) -> list[AttentionEntry]:
        """Pending review events minus those older than ``staleness``.

        Stale events stay pending upstream and still count as pending
        approvals; they are only dropped from this list. Events without a
        timestamp are kept.
        """
        now = ensure_utc(now)
        queue_index = build_queue_index(snapshot.queue)
        entries = []
        for event in self.pending_review(snapshot, now):
            ts = event.timestamp
            if ts is not None and now - ts > staleness:
                continue

            code = self.destination_code(event)
            classification = self.classifier.classify(code)
            name = event.payload.destination_country or (self.classifier.country_name(code) if code else "")
            entries.append(AttentionEntry(
                event_id=event.id,
                evidence_id=event.evidence_id,
                occurred_at=ts,
                destination_code=code,
                destination_name=name,
                category=classification.category.value,
                legal_basis=classification.legal_basis_tag,
                data_categories=list(event.payload.data_categories),
                reason=self._reason(event, code, name or "Unknown"),
                severity=derive_severity(event).value,
                enqueued=bool(event.identifiers & queue_index),
            ))

        epoch = datetime.min.replace(tzinfo=now.tzinfo)
        entries.sort(key=lambda e: e.occurred_at or epoch, reverse=True)
        return entries
