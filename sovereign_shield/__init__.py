"""Sovereign Shield - transfer compliance classification and review reconciliation."""

__version__ = "0.3.0"
