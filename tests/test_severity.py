"""Tests for audit severity derivation."""

import pytest

from sovereign_shield.severity import Severity, derive_severity


class TestDeriveSeverity:
    """Tests for the ordered severity rules."""

    @pytest.mark.parametrize("event_type,status,expected", [
        ("DATA_TRANSFER_BLOCKED", "BLOCK", Severity.CRITICAL),
        ("DATA_TRANSFER", "BLOCK", Severity.CRITICAL),
        ("HUMAN_OVERSIGHT_REJECTED", "", Severity.CRITICAL),
        ("HUMAN_OVERSIGHT_APPROVED", "", Severity.LOW),
        ("GDPR_ERASURE_COMPLETED", "", Severity.ERASURE),
        ("DATA_TRANSFER_REVIEW", "REVIEW", Severity.HIGH),
        ("DATA_TRANSFER", "ALLOW", Severity.INFO),
    ])
    def test_rules(self, make_event, event_type, status, expected):
        assert derive_severity(make_event("e1", event_type=event_type, status=status)) == expected

    def test_erasure_beats_review(self, make_event):
        event = make_event("e1", event_type="GDPR_ERASURE_COMPLETED", status="REVIEW")
        assert derive_severity(event) == Severity.ERASURE

    def test_crypto_shredder_source(self, make_event):
        event = make_event("e1", event_type="KEY_DESTROYED", status="", source_system="Crypto_Shredder-v2")
        assert derive_severity(event) == Severity.ERASURE

    def test_blocked_beats_oversight_approved(self, make_event):
        event = make_event("e1", event_type="HUMAN_OVERSIGHT_APPROVED", status="BLOCK")
        assert derive_severity(event) == Severity.CRITICAL

    def test_allowed_evaluation(self, make_event):
        event = make_event("e1", event_type="TRANSFER_EVALUATED", status="", decision="ALLOW")
        assert derive_severity(event) == Severity.LOW

    def test_verified_evaluation_status(self, make_event):
        event = make_event("e1", event_type="POLICY_EVALUATION", status="VERIFIED")
        assert derive_severity(event) == Severity.LOW

    def test_evaluation_without_allow(self, make_event):
        event = make_event("e1", event_type="TRANSFER_EVALUATED", status="", decision="DENY")
        assert derive_severity(event) == Severity.INFO
