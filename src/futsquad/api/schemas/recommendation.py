from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from futsquad.recommend import Recommendation


class RecommendationRequest(BaseModel):
    budget: Optional[int] = Field(default=None, ge=0)
    formation: Optional[str] = None


class RecommendationResponse(BaseModel):
    roster_id: str
    recommendation: Recommendation
