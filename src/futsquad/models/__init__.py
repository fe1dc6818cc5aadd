"""Roster data models."""

from .player import (
    FIELD_ATTRIBUTES,
    FLAG_FALSE,
    FLAG_FIELDS,
    FLAG_TRUE,
    PRICE_UNAVAILABLE,
    CanonicalField,
    ReferenceEntry,
    RosterEntry,
    normalize_definition_id,
    parse_price,
)

__all__ = [
    "CanonicalField",
    "FIELD_ATTRIBUTES",
    "FLAG_FALSE",
    "FLAG_FIELDS",
    "FLAG_TRUE",
    "PRICE_UNAVAILABLE",
    "ReferenceEntry",
    "RosterEntry",
    "normalize_definition_id",
    "parse_price",
]
