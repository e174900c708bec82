"""Severity domain - audit display severity of evidence events."""

from .service import (
    ALLOW_DECISIONS,
    CRYPTO_SHREDDER_SOURCE,
    Severity,
    derive_severity,
)

__all__ = [
    "ALLOW_DECISIONS",
    "CRYPTO_SHREDDER_SOURCE",
    "Severity",
    "derive_severity",
]
