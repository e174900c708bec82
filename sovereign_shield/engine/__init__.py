"""Engine - evaluation cycles and polling."""

from .service import CycleReport, ShieldEngine, build_engine
from .poller import DEFAULT_INTERVAL_SECONDS, ShieldPoller

__all__ = [
    "CycleReport",
    "ShieldEngine",
    "build_engine",
    "DEFAULT_INTERVAL_SECONDS",
    "ShieldPoller",
]
