"""
Audit severity derived from a raw evidence event.

Rules are ordered; the first match wins:
    1. blocked                      -> Critical
    2. human oversight rejected     -> Critical
    3. human oversight approved     -> Low
    4. erasure / crypto shredder    -> Erasure
    5. review                       -> High
    6. evaluation with allow/verify -> Low
    7. anything else                -> Info
"""

from __future__ import annotations

from enum import Enum

from sovereign_shield.core.ontology import (
    EVENT_HUMAN_OVERSIGHT_APPROVED,
    EVENT_HUMAN_OVERSIGHT_REJECTED,
    EvidenceEvent,
    VerificationStatus,
)


class Severity(str, Enum):
    """Display severity for the audit trail."""
    CRITICAL = "Critical"
    HIGH = "High"
    LOW = "Low"
    INFO = "Info"
    ERASURE = "Erasure"


CRYPTO_SHREDDER_SOURCE = "crypto_shredder"

# Decisions that count as a clean evaluation outcome
ALLOW_DECISIONS = frozenset({"ALLOW", "ALLOWED", "VERIFIED", "APPROVED", "PASS"})


def _is_blocked(label: str, status: str) -> bool:
    return "BLOCK" in label or status == VerificationStatus.BLOCK.value


def _is_erasure(label: str, source: str) -> bool:
    return "ERASURE" in label or CRYPTO_SHREDDER_SOURCE in source


def _is_review(label: str, status: str) -> bool:
    return "REVIEW" in label or status == VerificationStatus.REVIEW.value


def _is_allowed_evaluation(event: EvidenceEvent, label: str) -> bool:
    if "EVALUAT" not in label:
        return False
    decision = (event.payload.decision or event.verification_status or "").upper()
    return decision in ALLOW_DECISIONS


def derive_severity(event: EvidenceEvent) -> Severity:
    """Derive the display severity of ``event``."""
    label = event.event_type
    status = event.verification_status
    source = event.source_system.lower()

    if _is_blocked(label, status):
        return Severity.CRITICAL
    if EVENT_HUMAN_OVERSIGHT_REJECTED in label:
        return Severity.CRITICAL
    if EVENT_HUMAN_OVERSIGHT_APPROVED in label:
        return Severity.LOW
    if _is_erasure(label, source):
        return Severity.ERASURE
    if _is_review(label, status):
        return Severity.HIGH
    if _is_allowed_evaluation(event, label):
        return Severity.LOW
    return Severity.INFO
