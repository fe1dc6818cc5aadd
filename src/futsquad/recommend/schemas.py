"""Pydantic models for the squad recommendation contract."""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from futsquad.config import LINEUP_SIZE


class LineupPlayer(BaseModel):
    name: str
    position: str
    rating: str
    team: str = ""
    league: str = ""
    nation: str = ""

    @field_validator("rating", mode="before")
    @classmethod
    def _rating_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value


class SuggestedLineup(BaseModel):
    formation: str = Field(..., min_length=1)
    players: List[LineupPlayer] = Field(..., min_length=LINEUP_SIZE, max_length=LINEUP_SIZE)


class UpgradeTarget(BaseModel):
    name: str
    league: str = ""
    nation: str = ""
    club: str = ""


class Upgrade(BaseModel):
    replace: str
    with_: UpgradeTarget = Field(..., alias="with")
    approximate_price: float = Field(..., alias="approximatePrice", ge=0)
    reason: str = ""

    model_config = ConfigDict(populate_by_name=True)


class Recommendation(BaseModel):
    suggested_lineup: SuggestedLineup = Field(..., alias="suggestedLineup")
    upgrades: List[Upgrade] = Field(default_factory=list)
    summary: str = ""

    model_config = ConfigDict(populate_by_name=True)


class KnowledgeBase(BaseModel):
    general_advice: str = ""
    key_in_game_stats: List[dict] = Field(default_factory=list)
    meta_formations: List[dict] = Field(default_factory=list)
    playstyles_plus_meta: List[dict] = Field(default_factory=list)
    player_archetypes: List[dict] = Field(default_factory=list)


# Response schema sent to the generative API (OpenAPI subset it accepts).
_LINEUP_PLAYER_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "position": {"type": "STRING"},
        "rating": {"type": "STRING"},
        "team": {"type": "STRING"},
        "league": {"type": "STRING"},
        "nation": {"type": "STRING"},
    },
    "required": ["name", "position", "rating", "team", "league", "nation"],
}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "suggestedLineup": {
            "type": "OBJECT",
            "properties": {
                "formation": {"type": "STRING"},
                "players": {"type": "ARRAY", "items": _LINEUP_PLAYER_SCHEMA},
            },
            "required": ["formation", "players"],
        },
        "upgrades": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "replace": {"type": "STRING"},
                    "with": {
                        "type": "OBJECT",
                        "properties": {
                            "name": {"type": "STRING"},
                            "league": {"type": "STRING"},
                            "nation": {"type": "STRING"},
                            "club": {"type": "STRING"},
                        },
                        "required": ["name", "league", "nation", "club"],
                    },
                    "approximatePrice": {"type": "NUMBER"},
                    "reason": {"type": "STRING"},
                },
                "required": ["replace", "with", "approximatePrice", "reason"],
            },
        },
        "summary": {"type": "STRING"},
    },
    "required": ["suggestedLineup", "upgrades", "summary"],
}
