"""
Destination classification under GDPR Chapter V.

Priority order, first match wins:
    EU/EEA -> Blocked -> SCC-required -> Adequate -> SCC-required (default)

The order is total, so a code has exactly one classification. Unknown
destinations default to requiring a safeguard rather than to free transfer
or automatic blocking.
"""

from __future__ import annotations

import logging

from .resolver import NameResolver
from .schemas import CountryCategory, CountryClassification
from .tables import CountryTables, default_country_tables

logger = logging.getLogger(__name__)


LEGAL_BASIS_TAGS: dict[CountryCategory, str] = {
    CountryCategory.EU_EEA: "Art. 45",
    CountryCategory.BLOCKED: "Art. 44",
    CountryCategory.SCC_REQUIRED: "Art. 46",
    CountryCategory.ADEQUATE: "Art. 45",
}

LEGAL_BASIS_TEXT: dict[CountryCategory, str] = {
    CountryCategory.EU_EEA: "Art. 45 — Adequacy Decision (EU/EEA)",
    CountryCategory.BLOCKED: "Art. 44 — Transfer Prohibited (Blocked)",
    CountryCategory.SCC_REQUIRED: "Art. 46 — Standard Contractual Clauses Required",
    CountryCategory.ADEQUATE: "Art. 45 — Adequacy Decision",
}

DEFAULT_LEGAL_BASIS_TEXT = "Art. 46 — SCC Required (third country)"
NO_DESTINATION_TEXT = "—"


class CountryClassifier:
    """Maps resolved ISO-2 codes to a regulatory category and legal basis."""

    def __init__(self, tables: CountryTables, resolver: NameResolver | None = None):
        self.tables = tables
        self.resolver = resolver or NameResolver.from_tables(tables)

    def _category(self, code: str) -> tuple[CountryCategory, bool]:
        """Return (category, explicitly_listed)."""
        if code in self.tables.eu_eea:
            return CountryCategory.EU_EEA, True
        if code in self.tables.blocked:
            return CountryCategory.BLOCKED, True
        if code in self.tables.scc_required:
            return CountryCategory.SCC_REQUIRED, True
        if code in self.tables.adequate:
            return CountryCategory.ADEQUATE, True
        return CountryCategory.SCC_REQUIRED, False

    def classify(self, code: str | None) -> CountryClassification:
        """Classify an ISO-2 code."""
        code = (code or "").strip().upper()
        category, listed = self._category(code)

        if not code:
            text = NO_DESTINATION_TEXT
        elif listed:
            text = LEGAL_BASIS_TEXT[category]
        else:
            text = DEFAULT_LEGAL_BASIS_TEXT

        return CountryClassification(
            code=code,
            category=category,
            legal_basis_tag=LEGAL_BASIS_TAGS[category],
            legal_basis_text=text,
            name=self.country_name(code),
            resolved=bool(code),
        )

    def classify_destination(
        self,
        code: str | None = None,
        name: str | None = None,
    ) -> CountryClassification:
        """Resolve a code and/or free-text name, then classify.

        A resolution miss is non-fatal: it yields the default SCC-required
        classification with ``resolved=False``.
        """
        resolved = self.resolver.resolve_destination(code, name)
        if not resolved and (code or name):
            logger.debug("Unresolved destination code=%r name=%r; defaulting to SCC required", code, name)
        return self.classify(resolved)

    def country_name(self, code: str | None) -> str:
        """Display name for a code, falling back to the code itself."""
        code = (code or "").strip().upper()
        return self.tables.names.get(code, code)


def default_classifier() -> CountryClassifier:
    return CountryClassifier(default_country_tables())
