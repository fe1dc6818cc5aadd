"""Squad improvement recommendations from the generative API."""

from .gateway import (
    RecommendationError,
    RecommendationGateway,
    RecommendationRequestError,
    RecommendationUnavailableError,
    compact_roster,
)
from .knowledge import load_knowledge_base
from .schemas import KnowledgeBase, LineupPlayer, Recommendation, SuggestedLineup, Upgrade, UpgradeTarget

__all__ = [
    "KnowledgeBase",
    "LineupPlayer",
    "Recommendation",
    "RecommendationError",
    "RecommendationGateway",
    "RecommendationRequestError",
    "RecommendationUnavailableError",
    "SuggestedLineup",
    "Upgrade",
    "UpgradeTarget",
    "compact_roster",
    "load_knowledge_base",
]
