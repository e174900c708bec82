"""Shield API endpoints."""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from sovereign_shield.engine import CycleReport, ShieldEngine, build_engine
from sovereign_shield.ingestion import normalize_event
from sovereign_shield.jurisdiction import CountryClassification
from sovereign_shield.severity import derive_severity
from sovereign_shield.sources import SOURCE_NAMES

from .schemas import (
    AttentionResponse,
    MetricsResponse,
    ResolveResponse,
    SeverityRequest,
    SeverityResponse,
    SourcesResponse,
)

router = APIRouter(prefix="/shield", tags=["shield"])


@lru_cache
def get_engine() -> ShieldEngine:
    """Engine built from settings (overridable in tests)."""
    return build_engine()


@router.get("/metrics", response_model=MetricsResponse)
def get_metrics(engine: ShieldEngine = Depends(get_engine)) -> MetricsResponse:
    """Rolling-window transfer compliance metrics."""
    report = engine.evaluate()
    return MetricsResponse(
        metrics=report.metrics,
        connectivity=report.connectivity,
        degraded=report.degraded,
    )


@router.get("/attention", response_model=AttentionResponse)
def get_attention(engine: ShieldEngine = Depends(get_engine)) -> AttentionResponse:
    """
    Transfers requiring attention.

    Lists undecided review events without valid SCC coverage from the last
    seven days. Older ones remain pending and are still counted in
    ``pending_approvals_count``.
    """
    report = engine.evaluate()
    return AttentionResponse(
        entries=report.attention,
        total=len(report.attention),
        pending_approvals_count=report.metrics.pending_approvals_count,
        connectivity=report.connectivity,
        degraded=report.degraded,
    )


@router.post("/reconcile", response_model=CycleReport)
def reconcile(engine: ShieldEngine = Depends(get_engine)) -> CycleReport:
    """Run one evaluation cycle now, creating any missing review items."""
    return engine.run_cycle()


@router.get("/sources", response_model=SourcesResponse)
def get_sources(engine: ShieldEngine = Depends(get_engine)) -> SourcesResponse:
    """Connectivity of each external source as of a fresh load."""
    snapshot = engine.loader.load()
    connectivity = {name: snapshot.connectivity.get(name, False) for name in SOURCE_NAMES}
    return SourcesResponse(connectivity=connectivity, degraded=not all(connectivity.values()))


@router.get("/countries/{code}", response_model=CountryClassification)
async def classify_country(code: str, engine: ShieldEngine = Depends(get_engine)) -> CountryClassification:
    """Classify a destination code; unknown codes default to SCC required."""
    return engine.reconciler.classifier.classify(code)


@router.get("/resolve", response_model=ResolveResponse)
async def resolve_country(
    name: str = Query(..., min_length=1),
    engine: ShieldEngine = Depends(get_engine),
) -> ResolveResponse:
    """Resolve a free-text country name to an ISO-2 code."""
    code = engine.reconciler.classifier.resolver.resolve(name)
    return ResolveResponse(name=name, code=code, resolved=bool(code))


@router.post("/severity", response_model=SeverityResponse)
async def get_severity(request: SeverityRequest) -> SeverityResponse:
    """Derive the audit severity of a raw evidence event."""
    try:
        event = normalize_event(request.event)
    except (ValueError, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=f"Invalid evidence event: {exc}")
    return SeverityResponse(event_id=event.id, severity=derive_severity(event).value)
