"""Ingestion boundary - turns raw API records into canonical models."""

from .normalizer import (
    parse_timestamp,
    normalize_event,
    normalize_events,
    normalize_registry,
    normalize_registries,
    normalize_review_item,
    normalize_review_items,
    normalize_decided_ids,
)

__all__ = [
    "parse_timestamp",
    "normalize_event",
    "normalize_events",
    "normalize_registry",
    "normalize_registries",
    "normalize_review_item",
    "normalize_review_items",
    "normalize_decided_ids",
]
