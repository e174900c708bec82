"""Country classification schemas."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class CountryCategory(str, Enum):
    """Regulatory category of a transfer destination."""
    EU_EEA = "eu_eea"
    BLOCKED = "blocked"
    SCC_REQUIRED = "scc_required"
    ADEQUATE = "adequate_protection"


class CountryClassification(BaseModel):
    """Derived classification of a destination code (not persisted)."""
    code: str  # "" when the destination could not be resolved
    category: CountryCategory
    legal_basis_tag: str  # Art. 44, Art. 45, Art. 46
    legal_basis_text: str
    name: str = ""
    resolved: bool = True

    model_config = {"frozen": True}

    @property
    def allows_free_transfer(self) -> bool:
        """EU/EEA and adequacy destinations need no extra safeguard."""
        return self.category in (CountryCategory.EU_EEA, CountryCategory.ADEQUATE)
