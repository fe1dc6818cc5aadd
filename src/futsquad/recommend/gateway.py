"""Client for the generative squad-improvement service."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from futsquad.config import get_formation
from futsquad.config_loader import DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_TIMEOUT, Settings
from futsquad.models import RosterEntry
from futsquad.recommend.knowledge import load_knowledge_base, render_knowledge_base
from futsquad.recommend.schemas import RESPONSE_SCHEMA, KnowledgeBase, Recommendation


logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert squad builder for the Ultimate Team mode of a football video game. "
    "Build the strongest possible starting eleven from the user's club, respecting player "
    "positions and maximising chemistry through shared clubs, leagues and nations. Then "
    "suggest transfer market upgrades that fit within the user's coin budget. Only suggest "
    "tradeable replacements and never exceed the budget in total. Respond strictly with JSON "
    "matching the provided schema."
)


class RecommendationError(RuntimeError):
    """Base class for recommendation failures surfaced to the user."""


class RecommendationUnavailableError(RecommendationError):
    """Raised before any request when no API credential is configured."""


class RecommendationRequestError(RecommendationError):
    """Raised when the request or its response fails."""


def compact_roster(entries: Sequence[RosterEntry]) -> List[Dict[str, Any]]:
    """Project roster entries down to the fields the service needs."""

    compact: List[Dict[str, Any]] = []
    for entry in entries:
        item: Dict[str, Any] = {
            "name": entry.name,
            "rating": entry.rating,
            "position": entry.preferred_position,
            "altPositions": entry.alternate_positions,
            "team": entry.team,
            "league": entry.league,
            "nation": entry.nation,
            "tradeable": entry.is_tradeable,
            "price": entry.external_price,
        }
        if entry.has_detailed_stats:
            item["stats"] = {
                "pace": entry.pace,
                "shooting": entry.shooting,
                "passing": entry.passing,
                "dribbling": entry.dribbling,
                "defending": entry.defending,
                "physicality": entry.physicality,
            }
            if entry.archetype:
                item["archetype"] = entry.archetype
            if entry.play_style_plus:
                item["playStylesPlus"] = list(entry.play_style_plus)
        compact.append(item)
    return compact


def _validate_inputs(
    entries: Sequence[RosterEntry], budget: int, formation: Optional[str]
) -> Optional[str]:
    if not entries:
        raise ValueError("Roster is empty; import a club CSV first.")
    if isinstance(budget, bool) or not isinstance(budget, int) or budget < 0:
        raise ValueError(f"Budget must be a non-negative integer, got {budget!r}")
    if formation is None or not formation.strip():
        return None
    try:
        return get_formation(formation).label
    except KeyError as exc:
        raise ValueError(f"Unsupported formation {formation!r}") from exc


class RecommendationGateway:
    """Builds the request, calls the service once, and validates the reply."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: genai.Client | None = None,
        knowledge_base: KnowledgeBase | None = None,
    ):
        self.api_key = api_key or None
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._knowledge_base = knowledge_base

    @classmethod
    def from_settings(cls, settings: Settings, *, client: genai.Client | None = None) -> "RecommendationGateway":
        return cls(
            settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
            client=client,
        )

    def is_configured(self) -> bool:
        return self.api_key is not None

    @property
    def knowledge_base(self) -> KnowledgeBase:
        if self._knowledge_base is None:
            self._knowledge_base = load_knowledge_base()
        return self._knowledge_base

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(
                    base_url=self.base_url,
                    timeout=int(self.timeout * 1000),
                ),
            )
        return self._client

    def build_prompt(self, entries: Sequence[RosterEntry], budget: int, formation: Optional[str]) -> str:
        parts = [
            f"My coin budget for transfers is {budget} coins.",
            (
                f"I prefer to play the {formation} formation."
                if formation
                else "Choose the formation that best suits my players."
            ),
        ]
        knowledge = render_knowledge_base(self.knowledge_base)
        if knowledge:
            parts.append(f"Current game meta:\n{knowledge}")
        parts.append(
            "Players with a price of '-- NA --' have no known market value. "
            "Players marked tradeable=false cannot be sold."
        )
        parts.append(f"My club:\n{json.dumps(compact_roster(entries), ensure_ascii=False)}")
        return "\n\n".join(parts)

    def build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
            temperature=0.4,
        )

    def get_squad_improvements(
        self,
        entries: Sequence[RosterEntry],
        budget: int,
        formation: Optional[str] = None,
    ) -> Recommendation:
        """Request a lineup and upgrade plan for the roster.

        Raises :class:`RecommendationUnavailableError` without touching the
        network when no API key is set, ``ValueError`` for bad inputs, and
        :class:`RecommendationRequestError` for any failure after the request
        was attempted. Nothing is retried.
        """

        if not self.is_configured():
            raise RecommendationUnavailableError(
                "This feature is currently unavailable. The API key is not configured."
            )
        formation = _validate_inputs(entries, budget, formation)
        prompt = self.build_prompt(entries, budget, formation)

        logger.info(
            "Requesting squad recommendations for %s players (budget=%s, formation=%s)",
            len(entries),
            budget,
            formation or "auto",
        )
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.build_config(),
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.warning("Recommendation request failed: %s", exc)
            raise RecommendationRequestError(
                "Failed to get squad recommendations from the AI service. Please try again."
            ) from exc

        return self.parse_response(response.text)

    def parse_response(self, text: Optional[str]) -> Recommendation:
        try:
            recommendation = Recommendation.model_validate(json.loads(text))
        except (ValueError, TypeError) as exc:
            # json.JSONDecodeError and pydantic.ValidationError are ValueErrors.
            logger.warning("Recommendation response rejected: %s", exc)
            raise RecommendationRequestError(
                "The AI service returned an invalid recommendation. Please try again."
            ) from exc
        logger.info(
            "Received recommendation: %s with %s upgrades",
            recommendation.suggested_lineup.formation,
            len(recommendation.upgrades),
        )
        return recommendation


__all__ = [
    "RecommendationError",
    "RecommendationGateway",
    "RecommendationRequestError",
    "RecommendationUnavailableError",
    "compact_roster",
]
