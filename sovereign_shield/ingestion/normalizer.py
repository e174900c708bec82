"""
Normalisation of raw compliance API records.

The upstream API mixes camelCase and snake_case spellings of the same field
(``eventId``/``event_id``, ``destinationCountryCode``/``destination_country_code``,
...). All variants are collapsed here, once, so that downstream components
only ever see the canonical models in ``sovereign_shield.core.ontology``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import ValidationError

from sovereign_shield.core.ontology import (
    EvidenceEvent,
    TransferPayload,
    SCCRegistryRecord,
    ReviewQueueItem,
    ReviewStatus,
)
from sovereign_shield.core.ontology.review import DEFAULT_AGENT_ID, DEFAULT_MODULE

logger = logging.getLogger(__name__)


# Payload keys consumed into TransferPayload fields
_DESTINATION_CODE_KEYS = ("destination_country_code", "destinationCountryCode", "country_code", "countryCode")
_DESTINATION_NAME_KEYS = ("destination_country", "destinationCountry", "country", "destination")
_CATEGORY_KEYS = ("data_categories", "dataCategories", "data_category", "dataCategory")
_AGENT_KEYS = ("agent_id", "agentId")
_PARTNER_KEYS = ("partner_name", "partnerName")
_CHAIN_KEYS = ("payload_hash", "payloadHash", "previous_hash", "previousHash", "nexus_seal", "nexusSeal")

_CONSUMED_PAYLOAD_KEYS = frozenset(
    _DESTINATION_CODE_KEYS + _DESTINATION_NAME_KEYS + _CATEGORY_KEYS + _AGENT_KEYS
    + _PARTNER_KEYS + _CHAIN_KEYS + ("decision", "reason")
)

# Decided items are reported as DECIDED + finalDecision by the oversight API
_FINAL_DECISION_STATUS: dict[str, ReviewStatus] = {
    "ALLOW": ReviewStatus.APPROVED,
    "APPROVE": ReviewStatus.APPROVED,
    "APPROVED": ReviewStatus.APPROVED,
    "BLOCK": ReviewStatus.REJECTED,
    "REJECT": ReviewStatus.REJECTED,
    "REJECTED": ReviewStatus.REJECTED,
}


def _pick(raw: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present, non-empty value among ``keys``."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return default


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse ISO-8601 strings (with or without ``Z``) or epoch seconds/millis.

    Unparseable values yield None rather than an error.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        seconds = value / 1000 if value > 1e11 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug("Epoch timestamp out of range: %r", value)
            return None
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp %r", value)
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


_TRUE_FLAGS = frozenset({"TRUE", "YES", "Y", "1"})


def _flag(value: Any) -> bool:
    """Booleans arrive as JSON booleans, numbers or strings such as ``"false"``."""
    """Booleans arrive as JSON booleans, numbers or strings such as \"false\"."""
    if isinstance(value, str):
        return value.strip().upper() in _TRUE_FLAGS
    return bool(value)


def _categories(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple, set)):
        return tuple(str(v).strip() for v in value if v is not None and str(v).strip())
    return (str(value),)


def _payload_dict(value: Any) -> dict[str, Any]:
    """Payloads arrive either as objects or as JSON-encoded strings."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str) and value.strip():
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            logger.debug("Payload is not valid JSON; ignoring")
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def _normalize_payload(raw_payload: dict[str, Any]) -> TransferPayload:
    code = _text(_pick(raw_payload, *_DESTINATION_CODE_KEYS))
    return TransferPayload(
        destination_country_code=code.upper() if code else None,
        destination_country=_text(_pick(raw_payload, *_DESTINATION_NAME_KEYS)),
        data_categories=_categories(_pick(raw_payload, *_CATEGORY_KEYS)),
        agent_id=_text(_pick(raw_payload, *_AGENT_KEYS)),
        partner_name=_text(_pick(raw_payload, *_PARTNER_KEYS)),
        decision=_text(raw_payload.get("decision")),
        reason=_text(raw_payload.get("reason")),
        chain={k: raw_payload[k] for k in _CHAIN_KEYS if k in raw_payload},
        attributes={k: v for k, v in raw_payload.items() if k not in _CONSUMED_PAYLOAD_KEYS},
    )


def normalize_event(raw: dict[str, Any]) -> EvidenceEvent:
    """Normalise one raw evidence event.

    Raises:
        ValueError: If the record carries no identifier at all.
    """
    event_id = _text(_pick(raw, "eventId", "event_id"))
    record_id = _text(_pick(raw, "id")) or event_id
    if not record_id:
        raise ValueError("Evidence event has neither 'id' nor 'eventId'")

    raw_payload = dict(_payload_dict(raw.get("payload")))
    # Hash-chain fields sometimes sit on the event itself
    for key in _CHAIN_KEYS:
        if key in raw and key not in raw_payload:
            raw_payload[key] = raw[key]

    return EvidenceEvent(
        id=record_id,
        event_id=event_id,
        correlation_id=_text(_pick(raw, "correlationId", "correlation_id")),
        occurred_at=parse_timestamp(_pick(raw, "occurredAt", "occurred_at")),
        created_at=parse_timestamp(_pick(raw, "createdAt", "created_at", "recordedAt", "recorded_at")),
        event_type=_text(_pick(raw, "eventType", "event_type")) or "",
        verification_status=_text(_pick(raw, "verificationStatus", "verification_status")) or "",
        severity=_text(raw.get("severity")) or "",
        source_system=_text(_pick(raw, "sourceSystem", "source_system")) or "",
        payload=_normalize_payload(raw_payload),
    )


def normalize_events(raws: Iterable[dict[str, Any]]) -> list[EvidenceEvent]:
    """Normalise a batch, dropping records that cannot be identified."""
    events = []
    for raw in raws:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object evidence event: %r", raw)
            continue
        try:
            events.append(normalize_event(raw))
        except (ValueError, ValidationError) as exc:
            logger.warning("Skipping malformed evidence event: %s", exc)
    return events


def normalize_registry(raw: dict[str, Any]) -> SCCRegistryRecord:
    """Normalise one raw SCC registry record."""
    return SCCRegistryRecord(
        id=str(_pick(raw, "id", default="")),
        partner_name=_text(_pick(raw, "partnerName", "partner_name")) or "",
        destination_country=_text(_pick(
            raw,
            "destinationCountryCode",
            "destination_country_code",
            "destinationCountry",
            "destination_country",
        )) or "",
        status=_pick(raw, "status", default=""),
        expires_at=parse_timestamp(_pick(raw, "expiresAt", "expires_at", "expiryDate", "expiry_date")),
        created_at=parse_timestamp(_pick(raw, "createdAt", "created_at")),
        tia_completed=_flag(_pick(raw, "tiaCompleted", "tia_completed", default=False)),
        dpa_id=_text(_pick(raw, "dpaId", "dpa_id")),
        scc_module=_text(_pick(raw, "sccModule", "scc_module")),
    )


def normalize_registries(raws: Iterable[dict[str, Any]]) -> list[SCCRegistryRecord]:
    records = []
    for raw in raws:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object SCC registry record: %r", raw)
            continue
        try:
            records.append(normalize_registry(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed SCC registry record: %s", exc)
    return records


def _review_status(raw: dict[str, Any]) -> ReviewStatus:
    status = str(_pick(raw, "status", default="PENDING")).strip().upper()
    if status in ReviewStatus.__members__:
        return ReviewStatus(status)
    final = str(_pick(raw, "finalDecision", "final_decision", default="")).strip().upper()
    if final in _FINAL_DECISION_STATUS:
        return _FINAL_DECISION_STATUS[final]
    return _FINAL_DECISION_STATUS.get(status, ReviewStatus.PENDING)


def normalize_review_item(raw: dict[str, Any]) -> ReviewQueueItem:
    """Normalise one raw review queue item."""
    item_id = _text(_pick(raw, "id", "sealId", "seal_id"))
    evidence_id = _text(_pick(raw, "evidenceEventId", "evidence_event_id", "evidenceId", "evidence_id"))
    context = raw.get("context")
    return ReviewQueueItem(
        id=item_id or evidence_id or "",
        evidence_event_id=evidence_id,
        action=_text(raw.get("action")) or "",
        context=context if isinstance(context, dict) else {},
        status=_review_status(raw),
        agent_id=_text(_pick(raw, "agentId", "agent_id")) or DEFAULT_AGENT_ID,
        module=_text(raw.get("module")) or DEFAULT_MODULE,
        created_at=parse_timestamp(_pick(raw, "created", "createdAt", "created_at")),
    )


def normalize_review_items(raws: Iterable[dict[str, Any]]) -> list[ReviewQueueItem]:
    items = []
    for raw in raws:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object review queue item: %r", raw)
            continue
        try:
            items.append(normalize_review_item(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed review queue item: %s", exc)
    return items


def normalize_decided_ids(raw: Any) -> frozenset[str]:
    """Accept either a bare list or ``{"evidenceEventIds": [...]}``."""
    if isinstance(raw, dict):
        raw = _pick(raw, "evidenceEventIds", "evidence_event_ids", "ids", default=[])
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(str(v).strip() for v in raw if v is not None and str(v).strip())
