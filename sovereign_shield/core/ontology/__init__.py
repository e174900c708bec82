"""Canonical data model shared by every engine component."""

from .events import (
    EVENT_DATA_TRANSFER,
    EVENT_DATA_TRANSFER_BLOCKED,
    EVENT_DATA_TRANSFER_REVIEW,
    EVENT_HUMAN_OVERSIGHT_APPROVED,
    EVENT_HUMAN_OVERSIGHT_REJECTED,
    VerificationStatus,
    TransferPayload,
    EvidenceEvent,
    ensure_utc,
)
from .registry import SCCStatus, SCCRegistryRecord
from .review import ReviewStatus, ReviewQueueItem, NewReviewItem
from .snapshot import Snapshot

__all__ = [
    # Events
    "EVENT_DATA_TRANSFER",
    "EVENT_DATA_TRANSFER_BLOCKED",
    "EVENT_DATA_TRANSFER_REVIEW",
    "EVENT_HUMAN_OVERSIGHT_APPROVED",
    "EVENT_HUMAN_OVERSIGHT_REJECTED",
    "VerificationStatus",
    "TransferPayload",
    "EvidenceEvent",
    "ensure_utc",
    # Registry
    "SCCStatus",
    "SCCRegistryRecord",
    # Review queue
    "ReviewStatus",
    "ReviewQueueItem",
    "NewReviewItem",
    # Snapshot
    "Snapshot",
]
