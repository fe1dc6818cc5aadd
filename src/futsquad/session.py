"""Single-user roster session tying ingestion, views and recommendations together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Mapping, Optional, Sequence
from uuid import uuid4

from futsquad.ingest import ImportReport, RosterImportError, ingest_roster_csv
from futsquad.models import ReferenceEntry, RosterEntry
from futsquad.persistence import KeyValueStore, SessionSnapshot, load_session, save_session
from futsquad.recommend import (
    Recommendation,
    RecommendationError,
    RecommendationGateway,
    RecommendationUnavailableError,
)
from futsquad.views import FilterCriteria, RosterSummary, SortCriterion, project, summarize


logger = logging.getLogger(__name__)

RecommendationStatus = Literal["idle", "in_progress", "succeeded", "failed"]


class StaleRecommendationError(RuntimeError):
    """Raised when a recommendation finishes after its roster was replaced."""


@dataclass(frozen=True)
class RecommendationTicket:
    roster_id: str
    budget: int
    formation: Optional[str] = None


@dataclass
class RecommendationState:
    status: RecommendationStatus = "idle"
    result: Optional[Recommendation] = None
    error: Optional[str] = None
    roster_id: Optional[str] = None


@dataclass
class RosterSession:
    """Owns the current roster; every ingest replaces it wholesale."""

    reference_map: Optional[Mapping[str, ReferenceEntry]] = None
    coins: int = 50_000
    roster: List[RosterEntry] = field(default_factory=list)
    roster_id: str = field(default_factory=lambda: uuid4().hex)
    csv_text: str = ""
    file_name: str = ""
    error: str = ""
    last_report: Optional[ImportReport] = None
    recommendation: RecommendationState = field(default_factory=RecommendationState)

    def _replace_roster(self, entries: Sequence[RosterEntry]) -> None:
        self.roster = list(entries)
        self.roster_id = uuid4().hex
        self.recommendation = RecommendationState()

    def ingest(self, text: str, file_name: str = "") -> ImportReport:
        """Import CSV text; on failure the roster is left empty and the error kept."""

        self.csv_text = text
        self.file_name = file_name
        try:
            result = ingest_roster_csv(text, self.reference_map)
        except RosterImportError as exc:
            self._replace_roster([])
            self.last_report = None
            self.error = str(exc)
            raise
        self._replace_roster(result.entries)
        self.last_report = result.report
        self.error = ""
        return result.report

    def view(
        self,
        criteria: FilterCriteria | None = None,
        sort: Sequence[SortCriterion] = (),
    ) -> List[RosterEntry]:
        return project(self.roster, criteria, sort)

    def summary(self) -> RosterSummary:
        return summarize(self.roster)

    def find(self, definition_id: str) -> Optional[RosterEntry]:
        for entry in self.roster:
            if entry.definition_id == definition_id:
                return entry
        return None

    def begin_recommendation(self, budget: int | None = None, formation: Optional[str] = None) -> RecommendationTicket:
        ticket = RecommendationTicket(
            roster_id=self.roster_id,
            budget=self.coins if budget is None else budget,
            formation=formation,
        )
        self.recommendation = RecommendationState(status="in_progress", roster_id=self.roster_id)
        return ticket

    def complete_recommendation(self, ticket: RecommendationTicket, result: Recommendation) -> bool:
        """Apply a result; returns False when the roster changed meanwhile."""

        if ticket.roster_id != self.roster_id:
            logger.warning(
                "Discarding recommendation for roster %s; current roster is %s",
                ticket.roster_id,
                self.roster_id,
            )
            return False
        self.recommendation = RecommendationState(status="succeeded", result=result, roster_id=ticket.roster_id)
        return True

    def fail_recommendation(self, ticket: RecommendationTicket, message: str) -> bool:
        if ticket.roster_id != self.roster_id:
            return False
        self.recommendation = RecommendationState(status="failed", error=message, roster_id=ticket.roster_id)
        return True

    def improve_squad(
        self,
        gateway: RecommendationGateway,
        budget: int | None = None,
        formation: Optional[str] = None,
    ) -> Recommendation:
        """Run one recommendation round trip against the current roster."""

        if not self.roster:
            raise ValueError("Please upload your club CSV file first.")
        if not gateway.is_configured():
            raise RecommendationUnavailableError(
                "This feature is currently unavailable. The API key is not configured."
            )
        ticket = self.begin_recommendation(budget, formation)
        snapshot = list(self.roster)
        try:
            result = gateway.get_squad_improvements(snapshot, ticket.budget, ticket.formation)
        except (RecommendationError, ValueError) as exc:
            self.fail_recommendation(ticket, str(exc))
            raise
        if not self.complete_recommendation(ticket, result):
            raise StaleRecommendationError("The roster changed while the recommendation was in progress.")
        return result

    def save(self, store: KeyValueStore) -> bool:
        if not self.csv_text:
            return False
        save_session(store, SessionSnapshot(csv_text=self.csv_text, coins=self.coins, file_name=self.file_name))
        return True

    def restore(self, store: KeyValueStore) -> Optional[ImportReport]:
        """Reload the saved session; ``None`` when nothing usable was saved."""

        snapshot = load_session(store)
        if snapshot is None:
            return None
        self.coins = snapshot.coins
        return self.ingest(snapshot.csv_text, snapshot.file_name)


__all__ = [
    "RecommendationState",
    "RecommendationTicket",
    "RosterSession",
    "StaleRecommendationError",
]
