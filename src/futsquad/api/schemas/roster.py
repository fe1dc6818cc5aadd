from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from futsquad.models import RosterEntry


class DiagnosticResponse(BaseModel):
    row: int
    reason: str
    fatal: bool = False
    name: Optional[str] = None


class ImportResponse(BaseModel):
    roster_id: str
    file_name: str
    coins: int
    total_rows: int
    accepted_rows: int
    enriched_rows: int
    skipped_rows: int
    delimiter: str
    diagnostics: List[DiagnosticResponse] = Field(default_factory=list)


class RosterSummaryResponse(BaseModel):
    total_players: int
    average_rating: float
    min_price: float
    max_price: float
    priced_players: int
    detailed_players: int


class RosterViewResponse(BaseModel):
    roster_id: str
    total_players: int
    matched_players: int
    entries: List[RosterEntry]
    summary: RosterSummaryResponse


class StatComparisonResponse(BaseModel):
    label: str
    first: Union[int, float, str, None]
    second: Union[int, float, str, None]
    winner: Literal["first", "second", "tie", "none"]


class ComparisonResponse(BaseModel):
    first: RosterEntry
    second: RosterEntry
    basic_stats: List[StatComparisonResponse]
    detailed_stats: List[StatComparisonResponse]


class SessionResponse(BaseModel):
    saved: bool
    file_name: str = ""
    coins: int = 0
