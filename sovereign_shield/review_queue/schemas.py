"""Review queue reconciliation schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class EventState(str, Enum):
    """Per-event reconciliation state."""
    NOT_APPLICABLE = "not_applicable"
    NEEDS_REVIEW = "needs_review"
    ENQUEUED = "enqueued"
    DECIDED = "decided"

    @property
    def requires_review(self) -> bool:
        """Awaiting a human decision, whether or not a queue item exists yet."""
        return self in (EventState.NEEDS_REVIEW, EventState.ENQUEUED)


class EventEvaluation(BaseModel):
    """State of one event within one cycle."""
    event_id: str
    state: EventState
    destination_code: str = ""


class PartialWriteFailure(BaseModel):
    """A queue item that could not be created this cycle."""
    evidence_event_id: str
    message: str


class ReconcileResult(BaseModel):
    """Outcome of one reconciliation pass."""
    planned: int = 0
    created: list[str] = Field(default_factory=list)  # queue item ids
    failures: list[PartialWriteFailure] = Field(default_factory=list)
    states: dict[EventState, int] = Field(default_factory=dict)

    @property
    def created_count(self) -> int:
        return len(self.created)


class AttentionEntry(BaseModel):
    """An undecided, uncovered review event recent enough for immediate attention."""
    event_id: str
    evidence_id: str
    occurred_at: datetime | None = None
    destination_code: str = ""
    destination_name: str = ""
    category: str
    legal_basis: str
    data_categories: list[str] = Field(default_factory=list)
    reason: str
    severity: str
    enqueued: bool = False
