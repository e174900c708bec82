"""
Evidence event types.

Evidence events are produced by the upstream transfer evaluation engine and
sealed in a hash-chained ledger. They are immutable once observed; the chain
fields are carried through untouched and never interpreted here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


EVENT_DATA_TRANSFER = "DATA_TRANSFER"
EVENT_DATA_TRANSFER_BLOCKED = "DATA_TRANSFER_BLOCKED"
EVENT_DATA_TRANSFER_REVIEW = "DATA_TRANSFER_REVIEW"
EVENT_HUMAN_OVERSIGHT_APPROVED = "HUMAN_OVERSIGHT_APPROVED"
EVENT_HUMAN_OVERSIGHT_REJECTED = "HUMAN_OVERSIGHT_REJECTED"


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class VerificationStatus(str, Enum):
    """Decision recorded by the upstream evaluation engine."""
    ALLOW = "ALLOW"
    BLOCK = "BLOCK"
    REVIEW = "REVIEW"


class TransferPayload(BaseModel):
    """Transfer details carried in an evidence event payload."""
    destination_country_code: str | None = None
    destination_country: str | None = None  # free-text name
    data_categories: tuple[str, ...] = ()
    agent_id: str | None = None
    partner_name: str | None = None
    decision: str | None = None
    reason: str | None = None
    chain: dict[str, Any] = Field(default_factory=dict)  # opaque hash-chain fields
    attributes: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def has_destination(self) -> bool:
        return bool(self.destination_country_code or self.destination_country)


class EvidenceEvent(BaseModel):
    """A single immutable transfer-decision record."""
    id: str
    event_id: str | None = None
    correlation_id: str | None = None
    occurred_at: datetime | None = None
    created_at: datetime | None = None
    event_type: str = ""
    verification_status: str = ""
    severity: str = ""
    source_system: str = ""
    payload: TransferPayload = Field(default_factory=TransferPayload)

    model_config = {"frozen": True}

    @field_validator("occurred_at", "created_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @field_validator("event_type", "verification_status", "severity")
    @classmethod
    def _upper(cls, value: str) -> str:
        return (value or "").strip().upper()

    @property
    def identifiers(self) -> frozenset[str]:
        """All identifiers under which this event may be referenced."""
        return frozenset(i for i in (self.id, self.event_id) if i)

    @property
    def evidence_id(self) -> str:
        """Identifier used as the back-reference on review queue items."""
        return self.event_id or self.id

    @property
    def timestamp(self) -> datetime | None:
        return self.occurred_at or self.created_at
