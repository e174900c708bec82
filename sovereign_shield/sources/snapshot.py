"""
Snapshot assembly with per-source degradation.

Each source is fetched independently. When one is unavailable, the loader
substitutes its last successfully fetched collection (or an empty one) and
marks it disconnected; the other sources are unaffected.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sovereign_shield.core.errors import SourceUnavailable
from sovereign_shield.core.ontology import Snapshot

from .base import DecidedIdSource, EvidenceEventSource, ReviewQueueSink, SCCRegistrySource

logger = logging.getLogger(__name__)


SOURCE_NAMES = ("events", "registries", "queue", "decided_ids")


class SnapshotLoader:
    """Builds a ``Snapshot`` from the four external sources."""

    def __init__(
        self,
        events: EvidenceEventSource,
        registries: SCCRegistrySource,
        queue: ReviewQueueSink,
        decided: DecidedIdSource,
        event_filters: dict[str, Any] | None = None,
    ):
        self.events = events
        self.registries = registries
        self.queue = queue
        self.decided = decided
        self.event_filters = event_filters
        self._last_known: dict[str, Any] = {}

    def _fetch(self, name: str, fetch: Callable[[], Any], empty: Any) -> tuple[Any, bool]:
        try:
            value = fetch()
        except SourceUnavailable as exc:
            fallback = self._last_known.get(name, empty)
            logger.warning(
                "Source %s unavailable (%s); using %s",
                name, exc.message, "last known data" if name in self._last_known else "empty collection",
            )
            return fallback, False
        self._last_known[name] = value
        return value, True

    def load(self) -> Snapshot:
        events, events_ok = self._fetch(
            "events", lambda: self.events.fetch_events(self.event_filters), []
        )
        registries, registries_ok = self._fetch("registries", self.registries.fetch_registries, [])
        queue, queue_ok = self._fetch("queue", self.queue.fetch_pending, [])
        decided, decided_ok = self._fetch("decided_ids", self.decided.fetch_decided_ids, frozenset())

        return Snapshot(
            events=tuple(events),
            registries=tuple(registries),
            queue=tuple(queue),
            decided_ids=frozenset(decided),
            connectivity={
                "events": events_ok,
                "registries": registries_ok,
                "queue": queue_ok,
                "decided_ids": decided_ok,
            },
        )
