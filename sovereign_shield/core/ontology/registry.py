"""SCC registry records (contractual transfer safeguards)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from .events import ensure_utc


class SCCStatus(str, Enum):
    """Lifecycle status of a registry record."""
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"
    UNKNOWN = "unknown"


# Status spellings seen in registry payloads
_STATUS_ALIASES: dict[str, SCCStatus] = {
    "active": SCCStatus.ACTIVE,
    "valid": SCCStatus.ACTIVE,
    "expired": SCCStatus.EXPIRED,
    "revoked": SCCStatus.REVOKED,
    "deleted": SCCStatus.REVOKED,
}


class SCCRegistryRecord(BaseModel):
    """A registered SCC for one partner and destination."""
    id: str
    partner_name: str = ""
    destination_country: str = ""  # ISO-2 code or free-text name
    status: SCCStatus = SCCStatus.UNKNOWN
    expires_at: datetime | None = None
    created_at: datetime | None = None
    tia_completed: bool = False
    dpa_id: str | None = None
    scc_module: str | None = None

    model_config = {"frozen": True}

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> SCCStatus:
        if isinstance(value, SCCStatus):
            return value
        return _STATUS_ALIASES.get(str(value or "").strip().lower(), SCCStatus.UNKNOWN)

    @field_validator("expires_at", "created_at")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def is_active(self) -> bool:
        return self.status == SCCStatus.ACTIVE
