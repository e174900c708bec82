"""
SCC coverage evaluation.

A destination is covered iff at least one registry record is active, resolves
to the destination code, and has no expiry or an expiry strictly after ``now``.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable

from sovereign_shield.core.ontology import SCCRegistryRecord, ensure_utc
from sovereign_shield.jurisdiction import NameResolver


DEFAULT_EXPIRY_WARNING_DAYS = 30

_DAY = timedelta(days=1)


class SCCCoverageEvaluator:
    """Determines whether destinations have a currently valid SCC."""

    def __init__(self, resolver: NameResolver):
        self.resolver = resolver

    def record_destination(self, record: SCCRegistryRecord) -> str:
        """Registry destinations may be codes or names; normalise to a code."""
        return self.resolver.resolve(record.destination_country)

    def is_valid(self, record: SCCRegistryRecord, now: datetime) -> bool:
        if not record.is_active:
            return False
        return record.expires_at is None or record.expires_at > ensure_utc(now)

    def has_valid_coverage(
        self,
        code: str | None,
        records: Iterable[SCCRegistryRecord],
        now: datetime,
    ) -> bool:
        code = (code or "").strip().upper()
        if not code:
            return False
        return any(
            self.is_valid(record, now) and self.record_destination(record) == code
            for record in records
        )

    def covered_destinations(
        self,
        records: Iterable[SCCRegistryRecord],
        now: datetime,
    ) -> frozenset[str]:
        """All codes with valid coverage; equivalent to ``has_valid_coverage`` per code."""
        covered = set()
        for record in records:
            if self.is_valid(record, now):
                code = self.record_destination(record)
                if code:
                    covered.add(code)
        return frozenset(covered)


def days_until_expiry(record: SCCRegistryRecord, now: datetime) -> int | None:
    """Whole days until expiry, rounded up; None for open-ended records."""
    if record.expires_at is None:
        return None
    return math.ceil((record.expires_at - ensure_utc(now)) / _DAY)


def expiring_soon(
    records: Iterable[SCCRegistryRecord],
    now: datetime,
    window_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> list[SCCRegistryRecord]:
    """Active, unexpired records expiring within ``window_days`` (inclusive).

    A record whose expiry has passed is excluded even when the rounded-up day
    count is still 0.
    """
    now = ensure_utc(now)
    result = []
    for record in records:
        if not record.is_active or record.expires_at is None or record.expires_at <= now:
            continue
        if days_until_expiry(record, now) <= window_days:
            result.append(record)
    return result
