"""External sources - evidence ledger, SCC registry, review queue, decided ids."""

from .base import (
    DecidedIdSource,
    EvidenceEventSource,
    ReviewQueueSink,
    SCCRegistrySource,
)
from .http import ComplianceApiClient
from .memory import InMemoryEvidenceSource, InMemoryRegistrySource, InMemoryReviewQueue
from .snapshot import SOURCE_NAMES, SnapshotLoader

__all__ = [
    # Contracts
    "DecidedIdSource",
    "EvidenceEventSource",
    "ReviewQueueSink",
    "SCCRegistrySource",
    # Adapters
    "ComplianceApiClient",
    "InMemoryEvidenceSource",
    "InMemoryRegistrySource",
    "InMemoryReviewQueue",
    # Snapshot
    "SOURCE_NAMES",
    "SnapshotLoader",
]
