"""REST API for the roster session."""

from __future__ import annotations

from dataclasses import asdict
from typing import Literal, Optional

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from futsquad.api.schemas import (
    ComparisonResponse,
    DiagnosticResponse,
    ImportResponse,
    RecommendationRequest,
    RecommendationResponse,
    RosterSummaryResponse,
    RosterViewResponse,
    SessionResponse,
    StatComparisonResponse,
)
from futsquad.config_loader import Settings
from futsquad.ingest import ImportReport, RosterImportError, get_reference_map
from futsquad.persistence import KeyValueStore, SqliteKeyValueStore, has_saved_session
from futsquad.recommend import (
    RecommendationGateway,
    RecommendationRequestError,
    RecommendationUnavailableError,
)
from futsquad.session import RosterSession, StaleRecommendationError
from futsquad.views import (
    DEFAULT_MAX_PRICE,
    FilterCriteria,
    RosterSummary,
    compare_players,
    parse_sort_spec,
)


def _summary_response(summary: RosterSummary) -> RosterSummaryResponse:
    return RosterSummaryResponse(**asdict(summary))


def _import_response(session: RosterSession, report: ImportReport) -> ImportResponse:
    return ImportResponse(
        roster_id=session.roster_id,
        file_name=session.file_name,
        coins=session.coins,
        total_rows=report.total_rows,
        accepted_rows=report.accepted_rows,
        enriched_rows=report.enriched_rows,
        skipped_rows=report.skipped_rows,
        delimiter=report.delimiter,
        diagnostics=[DiagnosticResponse(**asdict(item)) for item in report.diagnostics],
    )


def create_app(
    settings: Settings | None = None,
    *,
    gateway: RecommendationGateway | None = None,
    store: KeyValueStore | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="futsquad")
    session = RosterSession(
        reference_map=get_reference_map(settings.reference_path),
        coins=settings.default_coins,
    )
    gateway = gateway or RecommendationGateway.from_settings(settings)
    store = store or SqliteKeyValueStore(settings.db_path)
    app.state.session = session
    app.state.gateway = gateway
    app.state.store = store

    @app.get("/health")
    async def health() -> dict[str, object]:
        return {
            "status": "ok",
            "recommendations_available": gateway.is_configured(),
            "saved_session": has_saved_session(store),
        }

    @app.post("/roster", response_model=ImportResponse)
    async def upload_roster(
        roster: UploadFile = File(...),
        coins: Optional[int] = Form(None),
    ) -> ImportResponse:
        contents = await roster.read()
        try:
            text = contents.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise HTTPException(status_code=400, detail="Roster file is not valid UTF-8 text") from exc
        if coins is not None:
            if coins < 0:
                raise HTTPException(status_code=400, detail="coins must be non-negative")
            session.coins = coins
        try:
            report = await run_in_threadpool(session.ingest, text, roster.filename or "")
        except RosterImportError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _import_response(session, report)

    @app.get("/roster", response_model=RosterViewResponse)
    async def view_roster(
        name: str = "",
        position: str = "",
        club: str = "",
        rarity: str = "",
        nation: str = "",
        min_rating: int = Query(0, ge=0, le=99),
        max_rating: int = Query(99, ge=0, le=99),
        min_price: float = Query(0, ge=0),
        max_price: float = Query(DEFAULT_MAX_PRICE, ge=0),
        tradeable: Literal["all", "tradeable", "untradeable"] = "all",
        sort: Optional[str] = None,
        limit: Optional[int] = Query(None, ge=1),
    ) -> RosterViewResponse:
        try:
            sort_criteria = parse_sort_spec(sort)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        criteria = FilterCriteria(
            name=name,
            position=position,
            club=club,
            rarity=rarity,
            nation=nation,
            min_rating=min_rating,
            max_rating=max_rating,
            min_price=min_price,
            max_price=max_price,
            tradeable=tradeable,
        )
        entries = session.view(criteria, sort_criteria)
        matched = len(entries)
        if limit is not None:
            entries = entries[:limit]
        return RosterViewResponse(
            roster_id=session.roster_id,
            total_players=len(session.roster),
            matched_players=matched,
            entries=entries,
            summary=_summary_response(session.summary()),
        )

    @app.get("/roster/summary", response_model=RosterSummaryResponse)
    async def roster_summary() -> RosterSummaryResponse:
        return _summary_response(session.summary())

    @app.get("/roster/compare", response_model=ComparisonResponse)
    async def compare(first: str, second: str) -> ComparisonResponse:
        first_entry = session.find(first)
        second_entry = session.find(second)
        if first_entry is None or second_entry is None:
            missing = first if first_entry is None else second
            raise HTTPException(status_code=404, detail=f"Player {missing} not found")
        comparison = compare_players(first_entry, second_entry)
        return ComparisonResponse(
            first=first_entry,
            second=second_entry,
            basic_stats=[StatComparisonResponse(**asdict(stat)) for stat in comparison.basic_stats],
            detailed_stats=[StatComparisonResponse(**asdict(stat)) for stat in comparison.detailed_stats],
        )

    @app.post("/recommendations", response_model=RecommendationResponse)
    async def recommendations(request: RecommendationRequest) -> RecommendationResponse:
        if not session.roster:
            raise HTTPException(status_code=400, detail="Please upload your club CSV file first.")
        roster_id = session.roster_id
        try:
            result = await run_in_threadpool(
                session.improve_squad, gateway, request.budget, request.formation
            )
        except RecommendationUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except RecommendationRequestError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except StaleRecommendationError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return RecommendationResponse(roster_id=roster_id, recommendation=result)

    @app.post("/session/save", response_model=SessionResponse)
    async def save_session() -> SessionResponse:
        if not session.save(store):
            raise HTTPException(status_code=400, detail="Nothing to save; upload a roster first.")
        return SessionResponse(saved=True, file_name=session.file_name, coins=session.coins)

    @app.post("/session/load", response_model=ImportResponse)
    async def load_session() -> ImportResponse:
        try:
            report = await run_in_threadpool(session.restore, store)
        except RosterImportError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if report is None:
            raise HTTPException(status_code=404, detail="No saved session")
        return _import_response(session, report)

    return app


__all__ = ["create_app"]
