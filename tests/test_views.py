import pytest

from futsquad.models import PRICE_UNAVAILABLE, RosterEntry
from futsquad.views import (
    FilterCriteria,
    SortCriterion,
    compare_players,
    parse_sort_spec,
    project,
    summarize,
)
from futsquad.views.filtering import build_predicates


def _entry(definition_id: str, name: str, rating: int = 80, **overrides) -> RosterEntry:
    data = {
        "definition_id": definition_id,
        "name": name,
        "rating": rating,
        "preferred_position": "ST",
        "team": "Arsenal",
        "league": "Premier League",
        "nation": "England",
        "rarity": "Rare",
        "external_price": "1000",
    }
    data.update(overrides)
    return RosterEntry(**data)


def _roster():
    return [
        _entry("1", "Émile Smith Rowe", 80, preferred_position="CAM", external_price="5000"),
        _entry("2", "bukayo saka", 87, preferred_position="RW", alternate_positions="RM,ST", external_price="90000"),
        _entry("3", "Ben White", 82, preferred_position="RB", team="Arsenal", external_price=PRICE_UNAVAILABLE),
        _entry("4", "Kieran Trippier", 82, preferred_position="RB", team="Newcastle", untradeable="true", nation="England"),
        _entry("5", "Virgil van Dijk", 89, preferred_position="CB", team="Liverpool", nation="Holland", rarity="TOTW"),
    ]


def test_default_criteria_build_no_predicates():
    assert build_predicates(FilterCriteria()) == []


def test_project_without_criteria_returns_copy():
    roster = _roster()

    view = project(roster)

    assert view == roster
    assert view is not roster


def test_name_filter_is_case_insensitive_substring():
    names = [entry.name for entry in project(_roster(), FilterCriteria(name="SAKA"))]

    assert names == ["bukayo saka"]


def test_position_filter_matches_alternates():
    ids = [entry.definition_id for entry in project(_roster(), FilterCriteria(position="st"))]

    assert ids == ["2"]


def test_club_filter_matches_team_or_league():
    assert [entry.definition_id for entry in project(_roster(), FilterCriteria(club="liver"))] == ["5"]
    assert len(project(_roster(), FilterCriteria(club="premier"))) == 5


def test_rarity_and_nation_are_exact():
    assert [entry.definition_id for entry in project(_roster(), FilterCriteria(rarity="TOTW"))] == ["5"]
    assert project(_roster(), FilterCriteria(nation="eng")) == []


def test_rating_range_is_inclusive():
    ids = [entry.definition_id for entry in project(_roster(), FilterCriteria(min_rating=82, max_rating=87))]

    assert ids == ["2", "3", "4"]


def test_unavailable_price_counts_as_zero_in_range():
    ids = [entry.definition_id for entry in project(_roster(), FilterCriteria(max_price=1000))]

    assert ids == ["3", "4", "5"]
    assert project(_roster(), FilterCriteria(min_price=1)) == [
        entry for entry in _roster() if entry.definition_id != "3"
    ]


def test_tradeable_filter():
    assert [entry.definition_id for entry in project(_roster(), FilterCriteria(tradeable="untradeable"))] == ["4"]
    assert len(project(_roster(), FilterCriteria(tradeable="tradeable"))) == 4


def test_multi_key_sort_is_stable():
    view = project(
        _roster(),
        sort=[SortCriterion("position"), SortCriterion("rating", "desc")],
    )

    assert [entry.definition_id for entry in view] == ["1", "5", "3", "4", "2"]


def test_equal_keys_keep_roster_order():
    view = project(_roster(), sort=[SortCriterion("team")])

    assert [entry.definition_id for entry in view] == ["1", "2", "3", "5", "4"]


def test_name_sort_folds_accents_and_case():
    view = project(_roster(), sort=[SortCriterion("name")])

    assert [entry.name for entry in view] == [
        "Ben White",
        "bukayo saka",
        "Émile Smith Rowe",
        "Kieran Trippier",
        "Virgil van Dijk",
    ]


def test_unavailable_price_sorts_below_real_prices():
    ascending = project(_roster(), sort=[SortCriterion("price")])
    descending = project(_roster(), sort=[SortCriterion("price", "desc")])

    assert ascending[0].definition_id == "3"
    assert descending[-1].definition_id == "3"
    assert descending[0].definition_id == "2"


def test_project_does_not_mutate_input():
    roster = _roster()
    before = list(roster)

    project(roster, FilterCriteria(min_rating=85), [SortCriterion("rating", "desc")])

    assert roster == before


def test_parse_sort_spec():
    assert parse_sort_spec("rating:desc, name") == [
        SortCriterion("rating", "desc"),
        SortCriterion("name", "asc"),
    ]
    assert parse_sort_spec("") == []
    assert parse_sort_spec(None) == []


@pytest.mark.parametrize("spec", ["height", "rating:sideways", "price:up"])
def test_parse_sort_spec_rejects_unknown_values(spec):
    with pytest.raises(ValueError):
        parse_sort_spec(spec)


def test_summarize_roster():
    summary = summarize(_roster())

    assert summary.total_players == 5
    assert summary.average_rating == pytest.approx(84.0)
    assert summary.min_price == 1000
    assert summary.max_price == 90000
    assert summary.priced_players == 4
    assert summary.detailed_players == 0


def test_summarize_ignores_unavailable_prices():
    summary = summarize([_entry("1", "A", external_price=PRICE_UNAVAILABLE)])

    assert summary.priced_players == 0
    assert summary.min_price == 0.0


def test_summarize_empty_roster():
    summary = summarize([])

    assert summary.total_players == 0
    assert summary.average_rating == 0.0
    assert summary.min_price == 0.0
    assert summary.max_price == 0.0


def test_compare_basic_stats():
    first = _entry("1", "A", 85, external_price="20000", league="LaLiga")
    second = _entry("2", "B", 88, external_price="15000")

    comparison = compare_players(first, second)
    by_label = {row.label: row for row in comparison.basic_stats}

    assert by_label["Rating"].winner == "second"
    assert by_label["Price"].winner == "second"
    assert by_label["League"].winner == "none"
    assert by_label["League"].first == "LaLiga"
    assert comparison.detailed_stats == []


def test_compare_unknown_price_has_no_winner():
    first = _entry("1", "A", external_price=PRICE_UNAVAILABLE)
    second = _entry("2", "B", external_price="100")

    by_label = {row.label: row for row in compare_players(first, second).basic_stats}

    assert by_label["Price"].winner == "none"
    assert by_label["Price"].first is None


def test_compare_detailed_stats_only_when_both_enriched():
    stats = {
        "pace": "90",
        "shooting": "80",
        "passing": "70",
        "dribbling": "85",
        "defending": "40",
        "physicality": "60",
        "has_detailed_stats": True,
    }
    first = _entry("1", "A", **stats, tactical_intelligence="88")
    second = _entry("2", "B", **{**stats, "pace": "95"})

    comparison = compare_players(first, second)
    by_label = {row.label: row for row in comparison.detailed_stats}

    assert by_label["Pace"].winner == "second"
    assert by_label["Shooting"].winner == "tie"
    assert "Tactical Int." not in by_label
    assert compare_players(first, _entry("3", "C")).detailed_stats == []
