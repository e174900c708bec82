"""
Evaluation cycle.

A cycle loads a fresh snapshot, creates any missing review items and
recomputes metrics and the attention view. No state survives between cycles
other than the loader's last-known fallbacks.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from pydantic import BaseModel, Field

from sovereign_shield.core.config import Settings, get_settings
from sovereign_shield.core.ontology import Snapshot, ensure_utc
from sovereign_shield.jurisdiction import (
    CountryClassifier,
    NameResolver,
    default_country_tables,
    load_country_tables,
)
from sovereign_shield.metrics import MetricsAggregator, ShieldMetrics
from sovereign_shield.review_queue import (
    DEFAULT_STALENESS,
    AttentionEntry,
    ReconcileResult,
    ReviewQueueReconciler,
)
from sovereign_shield.scc import SCCCoverageEvaluator
from sovereign_shield.sources import (
    ComplianceApiClient,
    InMemoryEvidenceSource,
    InMemoryRegistrySource,
    InMemoryReviewQueue,
    ReviewQueueSink,
    SnapshotLoader,
)

logger = logging.getLogger(__name__)


# Sources whose absence would let a cycle re-enqueue known work
WRITE_GUARD_SOURCES = ("queue", "decided_ids")


class CycleReport(BaseModel):
    """Everything one cycle produced."""
    evaluated_at: datetime
    metrics: ShieldMetrics
    attention: list[AttentionEntry] = Field(default_factory=list)
    reconcile: ReconcileResult | None = None  # None for read-only evaluations
    writes_skipped: bool = False
    connectivity: dict[str, bool] = Field(default_factory=dict)
    degraded: bool = False


class ShieldEngine:
    """Runs evaluation cycles over the external sources."""

    def __init__(
        self,
        loader: SnapshotLoader,
        sink: ReviewQueueSink,
        reconciler: ReviewQueueReconciler,
        aggregator: MetricsAggregator,
        staleness: timedelta = DEFAULT_STALENESS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.loader = loader
        self.sink = sink
        self.reconciler = reconciler
        self.aggregator = aggregator
        self.staleness = staleness
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    def _report(
        self,
        snapshot: Snapshot,
        now: datetime,
        reconcile: ReconcileResult | None = None,
        writes_skipped: bool = False,
    ) -> CycleReport:
        return CycleReport(
            evaluated_at=now,
            metrics=self.aggregator.compute(snapshot, now),
            attention=self.reconciler.attention(snapshot, now, self.staleness),
            reconcile=reconcile,
            writes_skipped=writes_skipped,
            connectivity=dict(snapshot.connectivity),
            degraded=snapshot.degraded,
        )

    def evaluate(self, now: datetime | None = None, snapshot: Snapshot | None = None) -> CycleReport:
        """Metrics and attention view only; never writes to the queue."""
        now = ensure_utc(now) if now else self.now()
        if snapshot is None:
            snapshot = self.loader.load()
        return self._report(snapshot, now)

    def run_cycle(self, now: datetime | None = None) -> CycleReport:
        """Load, reconcile and report.

        Queue writes are skipped while the queue or decided-id source is
        unavailable, since either gap could re-enqueue existing work.
        """
        now = ensure_utc(now) if now else self.now()
        snapshot = self.loader.load()

        blind = [name for name in WRITE_GUARD_SOURCES if not snapshot.connectivity.get(name, True)]
        if blind:
            logger.warning("Skipping review queue writes; unavailable sources: %s", ", ".join(blind))
            reconcile = None
        else:
            reconcile = self.reconciler.reconcile(snapshot, self.sink, now)

        report = self._report(snapshot, now, reconcile, writes_skipped=bool(blind))
        logger.info(
            "Cycle complete: %d events, %d created, %d pending, %d need attention%s",
            len(snapshot.events),
            reconcile.created_count if reconcile else 0,
            report.metrics.pending_approvals_count,
            len(report.attention),
            " (degraded)" if snapshot.degraded else "",
        )
        return report


# =============================================================================
# Composition
# =============================================================================


def build_engine(settings: Settings | None = None) -> ShieldEngine:
    """Wire an engine from settings.

    Without ``api_base_url`` the engine runs against empty in-memory sources.
    """
    settings = settings or get_settings()
    tables = load_country_tables(settings.countries_file) if settings.countries_file else default_country_tables()
    resolver = NameResolver.from_tables(tables)
    classifier = CountryClassifier(tables, resolver)
    coverage = SCCCoverageEvaluator(resolver)
    reconciler = ReviewQueueReconciler(classifier, coverage)
    aggregator = MetricsAggregator(
        classifier,
        coverage,
        reconciler,
        window=timedelta(hours=settings.metrics_window_hours),
        expiry_warning_days=settings.expiry_warning_days,
    )

    if settings.api_base_url:
        client = ComplianceApiClient(
            settings.api_base_url,
            token=settings.api_token,
            timeout=settings.request_timeout_seconds,
        )
        loader = SnapshotLoader(client, client, client, client)
        sink = client
    else:
        queue = InMemoryReviewQueue()
        loader = SnapshotLoader(InMemoryEvidenceSource(), InMemoryRegistrySource(), queue, queue)
        sink = queue

    return ShieldEngine(
        loader,
        sink,
        reconciler,
        aggregator,
        staleness=timedelta(days=settings.staleness_days),
    )
