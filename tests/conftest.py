"""Pytest fixtures for test suite."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from sovereign_shield.core.ontology import (
    EvidenceEvent,
    SCCRegistryRecord,
    TransferPayload,
)
from sovereign_shield.engine import ShieldEngine
from sovereign_shield.jurisdiction import (
    CountryClassifier,
    CountryTables,
    NameResolver,
    default_country_tables,
)
from sovereign_shield.metrics import MetricsAggregator
from sovereign_shield.review_queue import ReviewQueueReconciler
from sovereign_shield.scc import SCCCoverageEvaluator
from sovereign_shield.sources import (
    InMemoryEvidenceSource,
    InMemoryRegistrySource,
    InMemoryReviewQueue,
    SnapshotLoader,
)


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return NOW


@pytest.fixture
def tables() -> CountryTables:
    return default_country_tables()


@pytest.fixture
def resolver(tables: CountryTables) -> NameResolver:
    return NameResolver.from_tables(tables)


@pytest.fixture
def classifier(tables: CountryTables, resolver: NameResolver) -> CountryClassifier:
    return CountryClassifier(tables, resolver)


@pytest.fixture
def coverage(resolver: NameResolver) -> SCCCoverageEvaluator:
    return SCCCoverageEvaluator(resolver)


@pytest.fixture
def reconciler(classifier: CountryClassifier, coverage: SCCCoverageEvaluator) -> ReviewQueueReconciler:
    return ReviewQueueReconciler(classifier, coverage)


@pytest.fixture
def aggregator(
    classifier: CountryClassifier,
    coverage: SCCCoverageEvaluator,
    reconciler: ReviewQueueReconciler,
) -> MetricsAggregator:
    return MetricsAggregator(classifier, coverage, reconciler)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_event() -> Callable[..., EvidenceEvent]:
    """Factory for evidence events; defaults to an hour-old review event."""

    def _make(
        event_id: str,
        *,
        event_type: str = "DATA_TRANSFER_REVIEW",
        status: str = "REVIEW",
        code: str | None = None,
        name: str | None = None,
        age: timedelta = timedelta(hours=1),
        ledger_id: str | None = None,
        categories: tuple[str, ...] = ("email",),
        source_system: str = "sovereign-shield",
        agent_id: str | None = None,
        severity: str = "",
        decision: str | None = None,
    ) -> EvidenceEvent:
        return EvidenceEvent(
            id=event_id,
            event_id=ledger_id,
            occurred_at=NOW - age if age is not None else None,
            event_type=event_type,
            verification_status=status,
            severity=severity,
            source_system=source_system,
            payload=TransferPayload(
                destination_country_code=code,
                destination_country=name,
                data_categories=categories,
                agent_id=agent_id,
                decision=decision,
            ),
        )

    return _make


@pytest.fixture
def make_record() -> Callable[..., SCCRegistryRecord]:
    """Factory for SCC registry records."""

    def _make(
        record_id: str,
        destination: str,
        *,
        status: str = "active",
        expires_in: timedelta | None = timedelta(days=365),
    ) -> SCCRegistryRecord:
        return SCCRegistryRecord(
            id=record_id,
            partner_name=f"Partner {record_id}",
            destination_country=destination,
            status=status,
            expires_at=NOW + expires_in if expires_in is not None else None,
        )

    return _make


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def review_queue() -> InMemoryReviewQueue:
    return InMemoryReviewQueue()


@pytest.fixture
def evidence_source() -> InMemoryEvidenceSource:
    return InMemoryEvidenceSource()


@pytest.fixture
def registry_source() -> InMemoryRegistrySource:
    return InMemoryRegistrySource()


@pytest.fixture
def engine(
    evidence_source: InMemoryEvidenceSource,
    registry_source: InMemoryRegistrySource,
    review_queue: InMemoryReviewQueue,
    reconciler: ReviewQueueReconciler,
    aggregator: MetricsAggregator,
) -> ShieldEngine:
    """Engine over in-memory sources with a fixed clock."""
    loader = SnapshotLoader(evidence_source, registry_source, review_queue, review_queue)
    return ShieldEngine(loader, review_queue, reconciler, aggregator, clock=lambda: NOW)
