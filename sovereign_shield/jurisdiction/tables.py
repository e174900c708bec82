"""
Country reference tables.

Loaded once from ``data/countries.yaml`` into an immutable ``CountryTables``
value which is then injected into the resolver and classifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from sovereign_shield.core.errors import CountryTablesError


COUNTRIES_FILE = Path(__file__).parent / "data" / "countries.yaml"

_REQUIRED_SETS = ("eu_eea", "adequate", "scc_required", "blocked")


@dataclass(frozen=True)
class CountryTables:
    """Immutable classification sets, display names and alias table."""
    eu_eea: frozenset[str]
    adequate: frozenset[str]
    scc_required: frozenset[str]
    blocked: frozenset[str]
    names: Mapping[str, str]
    aliases: Mapping[str, str]  # upper-cased text -> code, in lookup order


def _code_set(content: dict[str, Any], key: str) -> frozenset[str]:
    values = content.get(key)
    if not isinstance(values, list):
        raise CountryTablesError(f"Country tables: '{key}' must be a list of codes")
    return frozenset(str(v).strip().upper() for v in values)


def build_country_tables(content: dict[str, Any]) -> CountryTables:
    """Build tables from already-parsed content."""
    if not isinstance(content, dict):
        raise CountryTablesError("Country tables must be a mapping")
    for key in _REQUIRED_SETS:
        if key not in content:
            raise CountryTablesError(f"Country tables missing '{key}'")

    names = {
        str(code).strip().upper(): str(name).strip()
        for code, name in (content.get("names") or {}).items()
    }

    # Explicit aliases first, then every display name
    aliases: dict[str, str] = {}
    for text, code in (content.get("aliases") or {}).items():
        aliases[str(text).strip().upper()] = str(code).strip().upper()
    for code, name in names.items():
        aliases.setdefault(name.upper(), code)

    return CountryTables(
        eu_eea=_code_set(content, "eu_eea"),
        adequate=_code_set(content, "adequate"),
        scc_required=_code_set(content, "scc_required"),
        blocked=_code_set(content, "blocked"),
        names=MappingProxyType(names),
        aliases=MappingProxyType(aliases),
    )


def load_country_tables(path: str | Path | None = None) -> CountryTables:
    """Load country tables from a YAML file.

    Raises:
        CountryTablesError: If the file is missing or malformed.
    """
    path = Path(path) if path else COUNTRIES_FILE
    if not path.exists():
        raise CountryTablesError(f"Country tables file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CountryTablesError(f"Invalid YAML in {path}: {exc}") from exc

    return build_country_tables(content)


@lru_cache
def default_country_tables() -> CountryTables:
    """Tables shipped with the package (cached)."""
    return load_country_tables()
