import pytest

from futsquad.ingest import NoValidRowsError
from futsquad.persistence import MemoryKeyValueStore
from futsquad.recommend import (
    Recommendation,
    RecommendationGateway,
    RecommendationRequestError,
    RecommendationUnavailableError,
)
from futsquad.session import RosterSession, StaleRecommendationError
from futsquad.views import FilterCriteria, SortCriterion


CSV = "Name,DefinitionId,Rating,Team\nAlice,1,85,Arsenal\nBob,2,78,Chelsea\nCara,3,90,Arsenal\n"


def _recommendation() -> Recommendation:
    return Recommendation.model_validate(
        {
            "suggestedLineup": {
                "formation": "4-3-3",
                "players": [
                    {"name": f"P{index}", "position": "CM", "rating": "80"} for index in range(11)
                ],
            },
            "upgrades": [],
            "summary": "ok",
        }
    )


class FakeGateway(RecommendationGateway):
    def __init__(self, on_call=None, error=None):
        super().__init__("fake-key")
        self.on_call = on_call
        self.error = error
        self.calls = []

    def get_squad_improvements(self, entries, budget, formation=None):
        self.calls.append((list(entries), budget, formation))
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return _recommendation()


def _session() -> RosterSession:
    session = RosterSession(reference_map={})
    session.ingest(CSV, "club.csv")
    return session


def test_ingest_replaces_roster_and_id():
    session = _session()
    first_id = session.roster_id

    session.ingest("Name,DefinitionId\nZed,9", "other.csv")

    assert [entry.name for entry in session.roster] == ["Zed"]
    assert session.roster_id != first_id
    assert session.file_name == "other.csv"


def test_failed_ingest_leaves_empty_roster():
    session = _session()

    with pytest.raises(NoValidRowsError):
        session.ingest("Name,DefinitionId,Rating\nX,1,500")

    assert session.roster == []
    assert "No valid player data" in session.error
    assert session.last_report is None


def test_view_and_summary():
    session = _session()

    view = session.view(FilterCriteria(club="arsenal"), [SortCriterion("rating", "desc")])

    assert [entry.name for entry in view] == ["Cara", "Alice"]
    assert session.summary().total_players == 3
    assert session.find("2").name == "Bob"
    assert session.find("404") is None


def test_improve_squad_uses_coins_by_default():
    session = _session()
    session.coins = 1234
    gateway = FakeGateway()

    result = session.improve_squad(gateway, formation="4-4-2")

    assert result.summary == "ok"
    assert gateway.calls[0][1:] == (1234, "4-4-2")
    assert session.recommendation.status == "succeeded"


def test_improve_squad_requires_roster():
    with pytest.raises(ValueError):
        RosterSession(reference_map={}).improve_squad(FakeGateway())


def test_improve_squad_requires_configured_gateway():
    session = _session()

    with pytest.raises(RecommendationUnavailableError):
        session.improve_squad(RecommendationGateway(None))
    assert session.recommendation.status == "idle"


def test_failed_recommendation_is_recorded():
    session = _session()
    gateway = FakeGateway(error=RecommendationRequestError("service down"))

    with pytest.raises(RecommendationRequestError):
        session.improve_squad(gateway)

    assert session.recommendation.status == "failed"
    assert session.recommendation.error == "service down"


def test_result_for_replaced_roster_is_discarded():
    session = _session()
    gateway = FakeGateway(on_call=lambda: session.ingest("Name,DefinitionId\nNew,5"))

    with pytest.raises(StaleRecommendationError):
        session.improve_squad(gateway)

    assert session.recommendation.status == "idle"
    assert session.recommendation.result is None


def test_stale_ticket_cannot_complete_or_fail():
    session = _session()
    ticket = session.begin_recommendation(1000)
    session.ingest(CSV)

    assert session.complete_recommendation(ticket, _recommendation()) is False
    assert session.fail_recommendation(ticket, "late") is False
    assert session.recommendation.status == "idle"


def test_save_and_restore_round_trip():
    store = MemoryKeyValueStore()
    session = _session()
    session.coins = 777

    assert session.save(store) is True

    restored = RosterSession(reference_map={})
    report = restored.restore(store)

    assert report.accepted_rows == 3
    assert restored.coins == 777
    assert restored.file_name == "club.csv"
    assert [entry.name for entry in restored.roster] == ["Alice", "Bob", "Cara"]


def test_save_without_roster_and_restore_without_snapshot():
    store = MemoryKeyValueStore()
    session = RosterSession(reference_map={})

    assert session.save(store) is False
    assert session.restore(store) is None
