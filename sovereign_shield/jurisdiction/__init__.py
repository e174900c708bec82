"""Jurisdiction domain - country resolution and transfer classification."""

from .tables import (
    COUNTRIES_FILE,
    CountryTables,
    build_country_tables,
    load_country_tables,
    default_country_tables,
)
from .resolver import NameResolver, default_resolver
from .classifier import (
    LEGAL_BASIS_TAGS,
    LEGAL_BASIS_TEXT,
    CountryClassifier,
    default_classifier,
)
from .schemas import CountryCategory, CountryClassification

__all__ = [
    # Tables
    "COUNTRIES_FILE",
    "CountryTables",
    "build_country_tables",
    "load_country_tables",
    "default_country_tables",
    # Resolver
    "NameResolver",
    "default_resolver",
    # Classifier
    "LEGAL_BASIS_TAGS",
    "LEGAL_BASIS_TEXT",
    "CountryClassifier",
    "default_classifier",
    # Schemas
    "CountryCategory",
    "CountryClassification",
]
