"""Metrics domain - rolling-window transfer compliance statistics."""

from .service import (
    AT_RISK_THRESHOLD,
    DEFAULT_WINDOW,
    MetricsAggregator,
    blocked_count,
    coverage_percentage,
    in_window,
    is_allowed,
    is_blocked,
    is_review,
    recent_events,
    shield_status,
)
from .schemas import DestinationSummary, SCCCoverage, ShieldMetrics, ShieldStatus

__all__ = [
    # Aggregator
    "AT_RISK_THRESHOLD",
    "DEFAULT_WINDOW",
    "MetricsAggregator",
    # Pure helpers
    "blocked_count",
    "coverage_percentage",
    "in_window",
    "is_allowed",
    "is_blocked",
    "is_review",
    "recent_events",
    "shield_status",
    # Schemas
    "DestinationSummary",
    "SCCCoverage",
    "ShieldMetrics",
    "ShieldStatus",
]
