"""Canonical vocabulary helpers."""

from .vocabulary import (
    COMPOSITE_KEY,
    DATA_DOMAINS,
    VOCABULARIES,
    clamp_source_system,
)

__all__ = [
    "COMPOSITE_KEY",
    "DATA_DOMAINS",
    "VOCABULARIES",
    "clamp_source_system",
]
