"""
Rolling-window compliance metrics.

Every figure is recomputed from the cycle snapshot and an injected ``now``;
nothing is carried over between cycles.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from sovereign_shield.core.ontology import (
    EVENT_DATA_TRANSFER,
    EVENT_DATA_TRANSFER_BLOCKED,
    EVENT_DATA_TRANSFER_REVIEW,
    EVENT_HUMAN_OVERSIGHT_REJECTED,
    EvidenceEvent,
    SCCRegistryRecord,
    Snapshot,
    VerificationStatus,
    ensure_utc,
)
from sovereign_shield.jurisdiction import CountryCategory, CountryClassifier
from sovereign_shield.review_queue import ReviewQueueReconciler
from sovereign_shield.scc import DEFAULT_EXPIRY_WARNING_DAYS, SCCCoverageEvaluator, expiring_soon

from .schemas import DestinationSummary, SCCCoverage, ShieldMetrics, ShieldStatus


DEFAULT_WINDOW = timedelta(hours=24)
AT_RISK_THRESHOLD = 10

BLOCKED_EVENT_TYPES = frozenset({EVENT_DATA_TRANSFER_BLOCKED, EVENT_HUMAN_OVERSIGHT_REJECTED})


# =============================================================================
# Event predicates
# =============================================================================


def in_window(event: EvidenceEvent, now: datetime, window: timedelta = DEFAULT_WINDOW) -> bool:
    """True if the event happened within ``window`` before ``now``.

    Future-dated events (clock skew) count as recent; undated events never do.
    """
    ts = event.timestamp
    return ts is not None and ts >= ensure_utc(now) - window


def is_blocked(event: EvidenceEvent) -> bool:
    return (
        event.verification_status == VerificationStatus.BLOCK.value
        or event.severity == VerificationStatus.BLOCK.value
        or event.event_type in BLOCKED_EVENT_TYPES
    )


def is_allowed(event: EvidenceEvent) -> bool:
    return (
        event.verification_status == VerificationStatus.ALLOW.value
        or event.severity == VerificationStatus.ALLOW.value
        or event.event_type == EVENT_DATA_TRANSFER
    )


def is_review(event: EvidenceEvent) -> bool:
    return (
        event.verification_status == VerificationStatus.REVIEW.value
        or event.severity == VerificationStatus.REVIEW.value
        or event.event_type == EVENT_DATA_TRANSFER_REVIEW
    )


def recent_events(
    events: Iterable[EvidenceEvent],
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> list[EvidenceEvent]:
    return [e for e in events if in_window(e, now, window)]


def blocked_count(
    events: Iterable[EvidenceEvent],
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> int:
    return sum(1 for e in recent_events(events, now, window) if is_blocked(e))


def coverage_percentage(covered: int, total: int) -> int:
    """Whole percentage, halves rounded up."""
    if total == 0:
        return 0
    return math.floor(covered / total * 100 + 0.5)


def shield_status(blocked: int) -> ShieldStatus:
    if blocked > AT_RISK_THRESHOLD:
        return ShieldStatus.AT_RISK
    if blocked > 0:
        return ShieldStatus.ATTENTION
    return ShieldStatus.PROTECTED


# =============================================================================
# Aggregator
# =============================================================================


class MetricsAggregator:
    """Computes the shield metrics from a snapshot."""

    def __init__(
        self,
        classifier: CountryClassifier,
        coverage: SCCCoverageEvaluator,
        reconciler: ReviewQueueReconciler,
        window: timedelta = DEFAULT_WINDOW,
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    ):
        self.classifier = classifier
        self.coverage = coverage
        self.reconciler = reconciler
        self.window = window
        self.expiry_warning_days = expiry_warning_days

    def _destination(self, event: EvidenceEvent) -> str:
        return self.reconciler.destination_code(event)

    def blocked_24h(self, events: Iterable[EvidenceEvent], now: datetime) -> int:
        return blocked_count(events, now, self.window)

    def adequate_countries_24h(self, events: Iterable[EvidenceEvent], now: datetime) -> list[str]:
        """Distinct recent destinations classified EU/EEA or adequate."""
        codes = {
            code
            for code in (self._destination(e) for e in recent_events(events, now, self.window))
            if code and self.classifier.classify(code).allows_free_transfer
        }
        return sorted(codes)

    def scc_coverage(
        self,
        events: Iterable[EvidenceEvent],
        registries: Iterable[SCCRegistryRecord],
        now: datetime,
    ) -> SCCCoverage:
        """Coverage over every SCC-required destination ever transferred to."""
        registries = list(registries)
        destinations = {
            code
            for code in (self._destination(e) for e in events)
            if code and self.classifier.classify(code).category == CountryCategory.SCC_REQUIRED
        }
        uncovered = sorted(
            code for code in destinations
            if not self.coverage.has_valid_coverage(code, registries, now)
        )
        covered = len(destinations) - len(uncovered)
        return SCCCoverage(
            percentage=coverage_percentage(covered, len(destinations)),
            covered=covered,
            total=len(destinations),
            uncovered=uncovered,
        )

    def expiring_soon_count(self, registries: Iterable[SCCRegistryRecord], now: datetime) -> int:
        return len(expiring_soon(registries, now, self.expiry_warning_days))

    def pending_approvals_count(self, snapshot: Snapshot, now: datetime) -> int:
        """Events still requiring review, including stale ones."""
        return len(self.reconciler.pending_review(snapshot, now))

    def destinations_24h(
        self,
        events: Iterable[EvidenceEvent],
        registries: Iterable[SCCRegistryRecord],
        now: datetime,
    ) -> list[DestinationSummary]:
        counts = Counter(
            code
            for code in (self._destination(e) for e in recent_events(events, now, self.window))
            if code
        )
        covered = self.coverage.covered_destinations(registries, now)
        summaries = []
        for code, transfers in counts.most_common():
            classification = self.classifier.classify(code)
            summaries.append(DestinationSummary(
                code=code,
                name=classification.name,
                category=classification.category.value,
                legal_basis=classification.legal_basis_tag,
                transfers=transfers,
                scc_covered=code in covered,
            ))
        return summaries

    def compute(self, snapshot: Snapshot, now: datetime) -> ShieldMetrics:
        """All metrics for one cycle."""
        now = ensure_utc(now)
        recent = recent_events(snapshot.events, now, self.window)
        blocked = sum(1 for e in recent if is_blocked(e))

        high_risk = {
            code
            for code in (self._destination(e) for e in recent)
            if code and self.classifier.classify(code).category in (
                CountryCategory.SCC_REQUIRED, CountryCategory.BLOCKED,
            )
        }
        agents = {e.payload.agent_id or e.source_system for e in recent} - {""}

        return ShieldMetrics(
            computed_at=now,
            window_hours=int(self.window.total_seconds() // 3600),
            status=shield_status(blocked),
            transfers_24h=len(recent),
            allowed_24h=sum(1 for e in recent if is_allowed(e)),
            review_24h=sum(1 for e in recent if is_review(e)),
            blocked_24h=blocked,
            adequate_countries_24h=self.adequate_countries_24h(recent, now),
            high_risk_destinations_24h=len(high_risk),
            active_agents_24h=len(agents),
            scc_coverage=self.scc_coverage(snapshot.events, snapshot.registries, now),
            expiring_soon_count=self.expiring_soon_count(snapshot.registries, now),
            pending_approvals_count=self.pending_approvals_count(snapshot, now),
            destinations=self.destinations_24h(recent, snapshot.registries, now),
        )
