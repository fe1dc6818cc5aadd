"""Canonical roster models shared across ingestion, views and recommendations."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


PRICE_UNAVAILABLE = "-- NA --"
FLAG_TRUE = "true"
FLAG_FALSE = "false"


class CanonicalField(str, Enum):
    NAME = "Name"
    RATING = "Rating"
    RARITY = "Rarity"
    PREFERRED_POSITION = "Preferred Position"
    ALTERNATE_POSITIONS = "Alternate Positions"
    NATION = "Nation"
    LEAGUE = "League"
    TEAM = "Team"
    PRICE_LIMITS = "PriceLimits"
    LAST_SALE_PRICE = "LastSalePrice"
    DISCARD_VALUE = "DiscardValue"
    UNTRADEABLE = "Untradeable"
    LOANS = "Loans"
    DEFINITION_ID = "DefinitionId"
    IS_DUPLICATE = "IsDuplicate"
    IS_IN_ACTIVE_11 = "IsInActive11"
    EXTERNAL_PRICE = "ExternalPrice"
    PACE = "Pace"
    SHOOTING = "Shooting"
    PASSING = "Passing"
    DRIBBLING = "Dribbling"
    DEFENDING = "Defending"
    PHYSICALITY = "Physicality"
    TACTICAL_INTELLIGENCE = "Tactical Intelligence"
    PLAY_STYLE_PLUS = "PlayStylePlus"
    ARCHETYPE = "Archetype"


FLAG_FIELDS: Tuple[CanonicalField, ...] = (
    CanonicalField.UNTRADEABLE,
    CanonicalField.LOANS,
    CanonicalField.IS_DUPLICATE,
    CanonicalField.IS_IN_ACTIVE_11,
)

# Attribute on RosterEntry holding each CSV-sourced canonical field.
FIELD_ATTRIBUTES: dict[CanonicalField, str] = {
    CanonicalField.NAME: "name",
    CanonicalField.RATING: "rating",
    CanonicalField.RARITY: "rarity",
    CanonicalField.PREFERRED_POSITION: "preferred_position",
    CanonicalField.ALTERNATE_POSITIONS: "alternate_positions",
    CanonicalField.NATION: "nation",
    CanonicalField.LEAGUE: "league",
    CanonicalField.TEAM: "team",
    CanonicalField.PRICE_LIMITS: "price_limits",
    CanonicalField.LAST_SALE_PRICE: "last_sale_price",
    CanonicalField.DISCARD_VALUE: "discard_value",
    CanonicalField.UNTRADEABLE: "untradeable",
    CanonicalField.LOANS: "loans",
    CanonicalField.DEFINITION_ID: "definition_id",
    CanonicalField.IS_DUPLICATE: "is_duplicate",
    CanonicalField.IS_IN_ACTIVE_11: "is_in_active_11",
    CanonicalField.EXTERNAL_PRICE: "external_price",
}


_INTEGER_ID = re.compile(r"^[+-]?\d+$")


def normalize_definition_id(raw: str) -> str:
    """Trim the id and canonicalise integer-looking values (``"+0042"`` -> ``"42"``)."""

    text = raw.strip()
    if _INTEGER_ID.match(text):
        return str(int(text))
    return text


def parse_price(raw: str) -> Optional[float]:
    """Return the numeric price, or ``None`` for the sentinel and junk values."""

    text = raw.strip()
    if not text or text == PRICE_UNAVAILABLE:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


class ReferenceEntry(BaseModel):
    """Supplemental attributes for one player from the bundled dataset."""

    definition_id: str = Field(..., min_length=1)
    name: str = ""
    pace: str = Field(..., min_length=1)
    shooting: str = Field(..., min_length=1)
    passing: str = Field(..., min_length=1)
    dribbling: str = Field(..., min_length=1)
    defending: str = Field(..., min_length=1)
    physicality: str = Field(..., min_length=1)
    play_styles: Tuple[str, ...] = ()
    play_style_plus: Tuple[str, ...] = ()
    archetype: Optional[str] = None
    tactical_intelligence: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class RosterEntry(BaseModel):
    """One validated club roster row, optionally enriched with reference stats."""

    definition_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    rating: int = Field(..., ge=0, le=99)
    rarity: str = ""
    preferred_position: str = ""
    alternate_positions: str = ""
    nation: str = ""
    league: str = ""
    team: str = ""
    price_limits: str = ""
    last_sale_price: str = ""
    discard_value: str = ""
    untradeable: str = FLAG_FALSE
    loans: str = FLAG_FALSE
    is_duplicate: str = FLAG_FALSE
    is_in_active_11: str = FLAG_FALSE
    external_price: str = PRICE_UNAVAILABLE

    pace: Optional[str] = None
    shooting: Optional[str] = None
    passing: Optional[str] = None
    dribbling: Optional[str] = None
    defending: Optional[str] = None
    physicality: Optional[str] = None
    tactical_intelligence: Optional[str] = None
    play_styles: Tuple[str, ...] = ()
    play_style_plus: Tuple[str, ...] = ()
    archetype: Optional[str] = None
    has_detailed_stats: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_tradeable(self) -> bool:
        return self.untradeable != FLAG_TRUE

    def price_value(self) -> Optional[float]:
        return parse_price(self.external_price)

    def positions(self) -> List[str]:
        """Preferred position followed by the alternates, de-duplicated."""

        ordered: List[str] = []
        candidates = [self.preferred_position, *self.alternate_positions.split(",")]
        for token in candidates:
            token = token.strip().upper()
            if token and token not in ordered:
                ordered.append(token)
        return ordered
