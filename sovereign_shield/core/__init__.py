"""Core configuration, errors, logging and shared ontology."""

from .config import Settings, get_settings
from .errors import (
    ShieldError,
    SourceUnavailable,
    QueueWriteError,
    CountryTablesError,
)

__all__ = [
    "Settings",
    "get_settings",
    "ShieldError",
    "SourceUnavailable",
    "QueueWriteError",
    "CountryTablesError",
]
