"""
Free-text country name resolution.

Lookup order, case-insensitive:
    1. exact alias match
    2. passthrough of anything that already looks like an ISO-2 code
    3. substring containment (either direction) against the alias table,
       first entry in table order wins
    4. "" (resolution miss)

Overlapping aliases in step 3 are resolved purely by table order; there is no
further tie-break.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from .tables import CountryTables, default_country_tables

logger = logging.getLogger(__name__)


def _is_iso2(text: str) -> bool:
    return len(text) == 2 and text.isascii() and text.isalpha()


class NameResolver:
    """Resolves country names and synonyms to ISO-2 codes."""

    def __init__(self, aliases: Mapping[str, str]):
        self._aliases = MappingProxyType(
            {str(k).strip().upper(): str(v).strip().upper() for k, v in aliases.items()}
        )

    @classmethod
    def from_tables(cls, tables: CountryTables) -> "NameResolver":
        return cls(tables.aliases)

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def resolve(self, text: str | None) -> str:
        """Resolve ``text`` to an ISO-2 code, or "" when nothing matches."""
        if not text:
            return ""
        name = str(text).strip().upper()
        if not name:
            return ""

        exact = self._aliases.get(name)
        if exact:
            return exact

        if _is_iso2(name):
            return name

        for key, code in self._aliases.items():
            if key in name or name in key:
                return code

        logger.debug("Country resolution miss for %r", text)
        return ""

    def resolve_destination(self, code: str | None, name: str | None) -> str:
        """Resolve a destination given as code and/or name; the code wins."""
        return self.resolve(code) or self.resolve(name)


def default_resolver() -> NameResolver:
    return NameResolver.from_tables(default_country_tables())
