"""
HTTP client for the remote compliance API.

Implements all four source contracts. Transport and decoding failures are
raised as ``SourceUnavailable`` (reads) or ``QueueWriteError`` (writes).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from sovereign_shield.core.errors import QueueWriteError, SourceUnavailable
from sovereign_shield.core.ontology import (
    EvidenceEvent,
    NewReviewItem,
    ReviewQueueItem,
    SCCRegistryRecord,
)
from sovereign_shield.ingestion import (
    normalize_decided_ids,
    normalize_events,
    normalize_registries,
    normalize_review_items,
)

logger = logging.getLogger(__name__)

# Default API URL
DEFAULT_API_URL = "http://localhost:8080"

EVENTS_ENDPOINT = "/api/v1/evidence/events"
REGISTRIES_ENDPOINT = "/api/v1/scc-registries"
PENDING_REVIEWS_ENDPOINT = "/api/v1/human_oversight/pending"
DECIDED_IDS_ENDPOINT = "/api/v1/human_oversight/decided-evidence-ids"
REVIEW_QUEUE_ENDPOINT = "/api/v1/review-queue"


def _unwrap(data: Any, key: str) -> list[dict]:
    """Endpoints return either a bare list or ``{key: [...]}``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return []


class ComplianceApiClient:
    """Client for the evidence, SCC registry and human oversight endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the compliance API
            token: Optional bearer token
            timeout: Per-request timeout in seconds
            session: Optional preconfigured session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, source: str, endpoint: str, params: dict | None = None) -> Any:
        """Make a GET request, raising SourceUnavailable on any failure."""
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise SourceUnavailable(source, str(exc)) from exc

    @staticmethod
    def _decode(source: str, normalize: Callable[[Any], Any], data: Any) -> Any:
        """Normalise a decoded body, raising SourceUnavailable if its shape is unusable."""
        try:
            return normalize(data)
        except (TypeError, AttributeError, ValueError) as exc:
            raise SourceUnavailable(source, f"Unexpected response shape: {exc}") from exc

    def _post(self, endpoint: str, data: dict) -> requests.Response:
        url = f"{self.base_url}{endpoint}"
        return self.session.post(url, json=data, timeout=self.timeout)

    # =========================================================================
    # Sources
    # =========================================================================

    def fetch_events(self, filters: dict[str, Any] | None = None) -> list[EvidenceEvent]:
        data = self._get("events", EVENTS_ENDPOINT, params=filters)
        return self._decode("events", normalize_events, _unwrap(data, "events"))

    def fetch_registries(self) -> list[SCCRegistryRecord]:
        data = self._get("registries", REGISTRIES_ENDPOINT)
        return self._decode("registries", normalize_registries, _unwrap(data, "registries"))

    def fetch_pending(self) -> list[ReviewQueueItem]:
        data = self._get("queue", PENDING_REVIEWS_ENDPOINT)
        return self._decode("queue", normalize_review_items, _unwrap(data, "reviews"))

    def fetch_decided_ids(self) -> frozenset[str]:
        data = self._get("decided_ids", DECIDED_IDS_ENDPOINT)
        return self._decode("decided_ids", normalize_decided_ids, data)

    # =========================================================================
    # Sink
    # =========================================================================

    def create(self, item: NewReviewItem) -> str:
        """Create a review queue item, returning its seal id."""
        body = {
            "agentId": item.agent_id,
            "action": item.action,
            "module": item.module,
            "context": item.context,
            "evidenceEventId": item.evidence_event_id,
        }
        try:
            response = self._post(REVIEW_QUEUE_ENDPOINT, body)
        except requests.RequestException as exc:
            raise QueueWriteError(item.evidence_event_id, str(exc)) from exc

        if not response.ok:
            raise QueueWriteError(item.evidence_event_id, self._error_message(response))

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}
        item_id = data.get("sealId") or data.get("seal_id") or data.get("id")
        if not item_id:
            raise QueueWriteError(item.evidence_event_id, "Response did not include an item id")
        return str(item_id)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(payload, dict):
            return str(payload.get("message") or payload.get("error") or payload)
        return str(payload)
