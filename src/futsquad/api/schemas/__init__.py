"""Pydantic models for API I/O."""

from .recommendation import RecommendationRequest, RecommendationResponse
from .roster import (
    ComparisonResponse,
    DiagnosticResponse,
    ImportResponse,
    RosterSummaryResponse,
    RosterViewResponse,
    SessionResponse,
    StatComparisonResponse,
)

__all__ = [
    "ComparisonResponse",
    "DiagnosticResponse",
    "ImportResponse",
    "RecommendationRequest",
    "RecommendationResponse",
    "RosterSummaryResponse",
    "RosterViewResponse",
    "SessionResponse",
    "StatComparisonResponse",
]
