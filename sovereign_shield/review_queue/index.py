"""Identifier index over the current review queue snapshot."""

from __future__ import annotations

from typing import Iterable

from sovereign_shield.core.ontology import ReviewQueueItem


def build_queue_index(items: Iterable[ReviewQueueItem]) -> frozenset[str]:
    """Union of every identifier already represented in the queue.

    Covers ``evidence_event_id``, the item ``id`` and the ``event_id`` /
    ``evidence_id`` context back-references.
    """
    index: set[str] = set()
    for item in items:
        index |= item.represented_ids
    return frozenset(index)
