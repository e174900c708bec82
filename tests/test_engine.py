"""Tests for the evaluation cycle and polling loop."""

import time
from datetime import timedelta

import pytest

from sovereign_shield.core.config import Settings
from sovereign_shield.core.errors import SourceUnavailable
from sovereign_shield.engine import ShieldEngine, ShieldPoller, build_engine
from sovereign_shield.metrics import ShieldStatus
from sovereign_shield.sources import ComplianceApiClient, InMemoryReviewQueue, SnapshotLoader


class DownQueue(InMemoryReviewQueue):
    """Queue whose reads fail while writes still succeed."""

    def fetch_pending(self):
        raise SourceUnavailable("queue", "timeout")


class CountingEngine:
    """Stand-in engine that fails on selected cycles."""

    def __init__(self, fail_on: set[int] = frozenset()):
        self.calls = 0
        self.fail_on = fail_on

    def run_cycle(self):
        self.calls += 1
        if self.calls in self.fail_on:
            raise RuntimeError("boom")


# =============================================================================
# Engine
# =============================================================================


class TestShieldEngine:
    """Tests for ShieldEngine cycles."""

    def test_cycle_enqueues_and_reports(self, engine, evidence_source, review_queue, make_event, now):
        evidence_source.append(
            make_event("e1", code="US"),
            make_event("e2", event_type="DATA_TRANSFER_BLOCKED", status="BLOCK", code="RU"),
        )
        report = engine.run_cycle()

        assert report.evaluated_at == now
        assert report.reconcile.created_count == 1
        assert report.writes_skipped is False
        assert report.degraded is False
        assert report.metrics.status == ShieldStatus.ATTENTION
        assert report.metrics.pending_approvals_count == 1
        assert [e.event_id for e in report.attention] == ["e1"]
        assert len(review_queue.items) == 1

        # The queue is re-read on the next cycle
        assert engine.run_cycle().attention[0].enqueued is True

    def test_repeated_cycles_are_idempotent(self, engine, evidence_source, review_queue, make_event):
        evidence_source.append(make_event("e1", code="US"), make_event("e2", name="Mexico"))
        engine.run_cycle()
        second = engine.run_cycle()

        assert second.reconcile.created_count == 0
        assert len(review_queue.items) == 2

    def test_decision_clears_pending(self, engine, evidence_source, review_queue, make_event):
        evidence_source.append(make_event("e1", code="US"))
        engine.run_cycle()
        review_queue.decide(review_queue.items[0].id, approve=True)

        report = engine.run_cycle()
        assert report.reconcile.created_count == 0
        assert report.metrics.pending_approvals_count == 0
        assert report.attention == []

    def test_new_scc_covers_event(self, engine, evidence_source, registry_source, make_event, make_record):
        evidence_source.append(make_event("e1", code="IN"))
        registry_source.upsert(make_record("r1", "India"))

        report = engine.run_cycle()
        assert report.reconcile.planned == 0
        assert report.metrics.pending_approvals_count == 0

    def test_evaluate_never_writes(self, engine, evidence_source, review_queue, make_event):
        evidence_source.append(make_event("e1", code="US"))
        report = engine.evaluate()

        assert report.reconcile is None
        assert review_queue.items == []
        assert report.metrics.pending_approvals_count == 1

    def test_writes_skipped_when_queue_unavailable(
        self, evidence_source, registry_source, reconciler, aggregator, make_event, now,
    ):
        queue = DownQueue()
        loader = SnapshotLoader(evidence_source, registry_source, queue, queue)
        engine = ShieldEngine(loader, queue, reconciler, aggregator, clock=lambda: now)
        evidence_source.append(make_event("e1", code="US"))

        report = engine.run_cycle()
        assert report.writes_skipped is True
        assert report.reconcile is None
        assert report.degraded is True
        assert report.connectivity["queue"] is False
        assert queue.items == []
        assert len(report.attention) == 1

    def test_explicit_now(self, engine, evidence_source, make_event, now):
        evidence_source.append(make_event("e1", code="US", age=timedelta(hours=1)))
        later = now + timedelta(days=2)
        assert engine.evaluate(later).metrics.transfers_24h == 0


class TestBuildEngine:
    """Tests for engine composition from settings."""

    def test_in_memory_default(self):
        engine = build_engine(Settings(api_base_url=None))
        assert isinstance(engine.sink, InMemoryReviewQueue)
        assert engine.loader.queue is engine.sink

    def test_remote_api(self):
        engine = build_engine(Settings(api_base_url="http://api.test", api_token="t", staleness_days=3))
        assert isinstance(engine.sink, ComplianceApiClient)
        assert engine.sink.base_url == "http://api.test"
        assert engine.staleness == timedelta(days=3)

    def test_window_from_settings(self):
        engine = build_engine(Settings(metrics_window_hours=48, expiry_warning_days=14))
        assert engine.aggregator.window == timedelta(hours=48)
        assert engine.aggregator.expiry_warning_days == 14


# =============================================================================
# Poller
# =============================================================================


class TestShieldPoller:
    """Tests for the polling loop."""

    def test_max_cycles(self):
        engine = CountingEngine()
        poller = ShieldPoller(engine, interval=0)
        poller.run(max_cycles=3)
        assert engine.calls == 3
        assert poller.cycles == 3

    def test_survives_failed_cycle(self):
        engine = CountingEngine(fail_on={1})
        poller = ShieldPoller(engine, interval=0)
        poller.run(max_cycles=2)
        assert engine.calls == 2

    def test_start_and_stop(self):
        engine = CountingEngine()
        poller = ShieldPoller(engine, interval=0.01)
        poller.start()
        deadline = time.monotonic() + 2
        while engine.calls == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        poller.stop(timeout=2)

        assert engine.calls >= 1
        assert poller.running is False

    @pytest.mark.parametrize("interval", [0.5, 5.0])
    def test_stop_interrupts_wait(self, interval):
        poller = ShieldPoller(CountingEngine(), interval=interval)
        poller.start()
        started = time.monotonic()
        poller.stop(timeout=2)
        assert time.monotonic() - started < 2
