"""Shield API domain."""

from .router import router, get_engine
from .schemas import (
    AttentionResponse,
    MetricsResponse,
    ResolveResponse,
    SeverityRequest,
    SeverityResponse,
    SourcesResponse,
)

__all__ = [
    # Router
    "router",
    "get_engine",
    # Schemas
    "AttentionResponse",
    "MetricsResponse",
    "ResolveResponse",
    "SeverityRequest",
    "SeverityResponse",
    "SourcesResponse",
]
