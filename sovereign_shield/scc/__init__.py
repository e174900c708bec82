"""SCC registry domain - contractual safeguard coverage."""

from .service import (
    DEFAULT_EXPIRY_WARNING_DAYS,
    SCCCoverageEvaluator,
    days_until_expiry,
    expiring_soon,
)

__all__ = [
    "DEFAULT_EXPIRY_WARNING_DAYS",
    "SCCCoverageEvaluator",
    "days_until_expiry",
    "expiring_soon",
]
