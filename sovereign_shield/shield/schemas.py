"""Request/response models for the shield API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from sovereign_shield.metrics import ShieldMetrics
from sovereign_shield.review_queue import AttentionEntry


class MetricsResponse(BaseModel):
    metrics: ShieldMetrics
    connectivity: dict[str, bool] = Field(default_factory=dict)
    degraded: bool = False


class AttentionResponse(BaseModel):
    entries: list[AttentionEntry] = Field(default_factory=list)
    total: int = 0
    pending_approvals_count: int = 0
    connectivity: dict[str, bool] = Field(default_factory=dict)
    degraded: bool = False


class ResolveResponse(BaseModel):
    name: str
    code: str
    resolved: bool


class SeverityRequest(BaseModel):
    """Raw evidence event as returned by the evidence API."""
    event: dict[str, Any]


class SeverityResponse(BaseModel):
    event_id: str
    severity: str


class SourcesResponse(BaseModel):
    connectivity: dict[str, bool]
    degraded: bool
