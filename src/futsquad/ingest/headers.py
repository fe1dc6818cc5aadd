"""Header synonym table mapping export column names onto canonical fields."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from futsquad.models import CanonicalField


HEADER_ALIAS_GROUPS: dict[CanonicalField, list[str]] = {
    CanonicalField.NAME: ["Name", "Player Name", "Player", "Full Name", "PlayerName"],
    CanonicalField.RATING: ["Rating", "OVR", "Overall", "Overall Rating"],
    CanonicalField.RARITY: ["Rarity", "Card Type", "Version"],
    CanonicalField.PREFERRED_POSITION: [
        "Preferred Position",
        "PreferredPosition",
        "Position",
        "Pos",
        "Main Position",
    ],
    CanonicalField.ALTERNATE_POSITIONS: [
        "Alternate Positions",
        "AlternatePositions",
        "Alt Positions",
        "Alt Pos",
        "Other Positions",
    ],
    CanonicalField.NATION: ["Nation", "Nationality", "Country"],
    CanonicalField.LEAGUE: ["League"],
    CanonicalField.TEAM: ["Team", "Club"],
    CanonicalField.PRICE_LIMITS: ["PriceLimits", "Price Limits", "Price Range"],
    CanonicalField.LAST_SALE_PRICE: ["LastSalePrice", "Last Sale Price", "Last Sold"],
    CanonicalField.DISCARD_VALUE: ["DiscardValue", "Discard Value", "Quick Sell"],
    CanonicalField.UNTRADEABLE: ["Untradeable", "Untradable", "Is Untradeable"],
    CanonicalField.LOANS: ["Loans", "Loan", "Is Loan"],
    CanonicalField.DEFINITION_ID: [
        "DefinitionId",
        "Definition Id",
        "Id",
        "Player Id",
        "PlayerId",
        "Def Id",
    ],
    CanonicalField.IS_DUPLICATE: ["IsDuplicate", "Is Duplicate", "Duplicate"],
    CanonicalField.IS_IN_ACTIVE_11: ["IsInActive11", "Is In Active 11", "In Active 11", "Active 11"],
    CanonicalField.EXTERNAL_PRICE: ["ExternalPrice", "External Price", "Price", "Market Price"],
}

REQUIRED_FIELDS: tuple[CanonicalField, ...] = (
    CanonicalField.NAME,
    CanonicalField.DEFINITION_ID,
)


def _header_token(value: str) -> str:
    return value.strip().casefold()


def _build_header_lookup() -> dict[str, CanonicalField]:
    lookup: dict[str, CanonicalField] = {}
    for field, variants in HEADER_ALIAS_GROUPS.items():
        for variant in variants:
            key = _header_token(variant)
            if key:
                lookup.setdefault(key, field)
    return lookup


HEADER_LOOKUP: Mapping[str, CanonicalField] = _build_header_lookup()


def normalize_header(
    raw_header: str,
    lookup: Mapping[str, CanonicalField] | None = None,
) -> Optional[CanonicalField]:
    """Resolve a raw header to its canonical field, or ``None`` when unknown."""

    lookup = HEADER_LOOKUP if lookup is None else lookup
    return lookup.get(_header_token(raw_header))


def build_column_map(
    header_row: Sequence[str],
    lookup: Mapping[str, CanonicalField] | None = None,
) -> Dict[CanonicalField, int]:
    """Map canonical fields to column indexes; the leftmost duplicate wins."""

    column_map: Dict[CanonicalField, int] = {}
    for index, raw_header in enumerate(header_row):
        field = normalize_header(raw_header, lookup)
        if field is None:
            continue
        column_map.setdefault(field, index)
    return column_map


def missing_required_fields(column_map: Mapping[CanonicalField, int]) -> list[CanonicalField]:
    return [field for field in REQUIRED_FIELDS if field not in column_map]


__all__ = [
    "HEADER_ALIAS_GROUPS",
    "HEADER_LOOKUP",
    "REQUIRED_FIELDS",
    "build_column_map",
    "missing_required_fields",
    "normalize_header",
]
