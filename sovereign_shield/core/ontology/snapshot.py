"""Point-in-time view of the three external sources for one evaluation cycle."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .events import EvidenceEvent
from .registry import SCCRegistryRecord
from .review import ReviewQueueItem


class Snapshot(BaseModel):
    """Inputs for one evaluation cycle.

    Sources are fetched independently and may be mutually stale; a snapshot
    is evaluated as-is.
    """
    events: tuple[EvidenceEvent, ...] = ()
    registries: tuple[SCCRegistryRecord, ...] = ()
    queue: tuple[ReviewQueueItem, ...] = ()
    decided_ids: frozenset[str] = frozenset()
    connectivity: dict[str, bool] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def degraded(self) -> bool:
        """True when at least one source fell back to stale or empty data."""
        return not all(self.connectivity.values())
