"""Review queue work items."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .events import ensure_utc


DEFAULT_AGENT_ID = "sovereign-shield"
DEFAULT_MODULE = "sovereign-shield"


class ReviewStatus(str, Enum):
    """Human oversight status of a queue item."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReviewQueueItem(BaseModel):
    """A transfer decision awaiting (or carrying) human sign-off."""
    id: str
    evidence_event_id: str | None = None
    action: str = ""
    context: dict[str, Any] = Field(default_factory=dict)
    status: ReviewStatus = ReviewStatus.PENDING
    agent_id: str = DEFAULT_AGENT_ID
    module: str = DEFAULT_MODULE
    created_at: datetime | None = None

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def represented_ids(self) -> frozenset[str]:
        """Every identifier this item stands for in the queue."""
        candidates = [
            self.evidence_event_id,
            self.id,
            self.context.get("event_id"),
            self.context.get("evidence_id"),
        ]
        return frozenset(str(c) for c in candidates if c)


class NewReviewItem(BaseModel):
    """Creation request for a review queue item."""
    evidence_event_id: str
    action: str
    context: dict[str, Any] = Field(default_factory=dict)
    agent_id: str = DEFAULT_AGENT_ID
    module: str = DEFAULT_MODULE
