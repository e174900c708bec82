"""Compliance metrics schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ShieldStatus(str, Enum):
    """Overall transfer protection status."""
    PROTECTED = "PROTECTED"
    ATTENTION = "ATTENTION"
    AT_RISK = "AT_RISK"


class SCCCoverage(BaseModel):
    """SCC coverage across SCC-required destinations ever transferred to."""
    percentage: int = 0
    covered: int = 0
    total: int = 0
    uncovered: list[str] = Field(default_factory=list)


class DestinationSummary(BaseModel):
    """Transfers to one resolved destination within the window."""
    code: str
    name: str
    category: str
    legal_basis: str
    transfers: int = 0
    scc_covered: bool = False


class ShieldMetrics(BaseModel):
    """Rolling-window compliance metrics for one evaluation cycle."""
    computed_at: datetime
    window_hours: int = 24
    status: ShieldStatus = ShieldStatus.PROTECTED

    transfers_24h: int = 0
    allowed_24h: int = 0
    review_24h: int = 0
    blocked_24h: int = 0
    adequate_countries_24h: list[str] = Field(default_factory=list)
    high_risk_destinations_24h: int = 0
    active_agents_24h: int = 0

    scc_coverage: SCCCoverage = Field(default_factory=SCCCoverage)
    expiring_soon_count: int = 0
    pending_approvals_count: int = 0

    destinations: list[DestinationSummary] = Field(default_factory=list)

    @property
    def scc_coverage_pct(self) -> int:
        return self.scc_coverage.percentage
