"""Review queue domain - reconciliation of transfer reviews."""

from .index import build_queue_index
from .service import (
    ACTION_PREFIX,
    DEFAULT_STALENESS,
    ReviewQueueReconciler,
    is_review_class,
    review_action,
)
from .schemas import (
    AttentionEntry,
    EventEvaluation,
    EventState,
    PartialWriteFailure,
    ReconcileResult,
)

__all__ = [
    # Index
    "build_queue_index",
    # Reconciler
    "ACTION_PREFIX",
    "DEFAULT_STALENESS",
    "ReviewQueueReconciler",
    "is_review_class",
    "review_action",
    # Schemas
    "AttentionEntry",
    "EventEvaluation",
    "EventState",
    "PartialWriteFailure",
    "ReconcileResult",
]
