import json
from pathlib import Path

from futsquad.ingest import build_reference_map, enrich, get_reference_map, ingest_roster_csv, load_reference_map
from futsquad.ingest.enrichment import DEFAULT_REFERENCE_PATH, reference_from_mapping
from futsquad.models import RosterEntry


def _reference(definition_id: str, **overrides):
    record = {
        "definition_id": definition_id,
        "name": "Reference Player",
        "pace": "92",
        "shooting": "80",
        "passing": "81",
        "dribbling": "85",
        "defending": "40",
        "physicality": "70",
    }
    record.update(overrides)
    return reference_from_mapping(record)


def _entry(definition_id: str, name: str = "Player") -> RosterEntry:
    return RosterEntry(definition_id=definition_id, name=name, rating=80)


def test_matching_id_attaches_substats():
    reference_map = {"189596": _reference("189596")}

    [entry] = enrich([_entry("189596")], reference_map)

    assert entry.has_detailed_stats is True
    assert entry.pace == "92"
    assert entry.physicality == "70"


def test_unmatched_id_has_no_substats():
    reference_map = {"189596": _reference("189596")}

    [entry] = enrich([_entry("1")], reference_map)

    assert entry.has_detailed_stats is False
    assert entry.pace is None
    assert entry.play_style_plus == ()


def test_enrich_preserves_order_and_does_not_mutate_input():
    entries = [_entry("2", "B"), _entry("189596", "A"), _entry("3", "C")]
    reference_map = {"189596": _reference("189596")}

    enriched = enrich(entries, reference_map)

    assert [entry.name for entry in enriched] == ["B", "A", "C"]
    assert all(entry.has_detailed_stats is False for entry in entries)


def test_leading_zero_ids_join():
    reference_map = build_reference_map([{"id": "00042", "p": "70", "s": "1", "a": "2", "d": "3", "e": "4", "h": "5"}])

    result = ingest_roster_csv("Name,DefinitionId\nZero,42", reference_map)

    assert result.entries[0].has_detailed_stats
    assert result.report.enriched_rows == 1


def test_compact_keys_are_expanded():
    reference = reference_from_mapping(
        {
            "id": "7",
            "n": "Compact",
            "p": "90",
            "s": "91",
            "a": "92",
            "d": "93",
            "e": "30",
            "h": "60",
            "pl": ["Rapid"],
            "ps": "Quick Step, Finesse Shot",
            "at": "Inside Forward",
            "ti": "88",
        }
    )

    assert reference.definition_id == "7"
    assert reference.passing == "92"
    assert reference.play_style_plus == ("Quick Step", "Finesse Shot")
    assert reference.archetype == "Inside Forward"
    assert reference.tactical_intelligence == "88"


def test_invalid_records_are_skipped():
    reference_map = build_reference_map([{"n": "No id"}, {"id": "5", "p": "1", "s": "1", "a": "1", "d": "1", "e": "1", "h": "1"}])

    assert list(reference_map) == ["5"]


def test_records_without_substats_are_skipped():
    reference_map = build_reference_map(
        [
            {"id": "5"},
            {"id": "6", "p": None, "s": "1", "a": "1", "d": "1", "e": "1", "h": "1"},
            {"id": "7", "p": " ", "s": "1", "a": "1", "d": "1", "e": "1", "h": "1"},
        ]
    )

    assert reference_map == {}
    [entry] = enrich([_entry("5")], reference_map)
    assert entry.has_detailed_stats is False
    assert entry.pace is None


def test_numeric_substats_are_kept_as_text():
    reference = reference_from_mapping({"id": "8", "p": 91, "s": 1, "a": 2, "d": 3, "e": 4, "h": 5})

    assert reference.pace == "91"


def test_missing_file_yields_empty_map(tmp_path: Path):
    assert load_reference_map(tmp_path / "missing.json") == {}


def test_corrupt_file_yields_empty_map(tmp_path: Path):
    path = tmp_path / "reference.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_reference_map(path) == {}


def test_players_wrapper_is_accepted(tmp_path: Path):
    path = tmp_path / "reference.json"
    path.write_text(
        json.dumps({"players": [{"id": "9", "p": "1", "s": "1", "a": "1", "d": "1", "e": "1", "h": "1"}]}),
        encoding="utf-8",
    )

    assert set(load_reference_map(path)) == {"9"}


def test_reference_map_is_cached_per_path(tmp_path: Path):
    path = tmp_path / "reference.json"
    path.write_text(json.dumps([{"id": "9", "p": "1", "s": "1", "a": "1", "d": "1", "e": "1", "h": "1"}]), encoding="utf-8")

    first = get_reference_map(path)
    path.write_text("[]", encoding="utf-8")

    assert get_reference_map(path) is first


def test_bundled_dataset_loads():
    reference_map = load_reference_map(DEFAULT_REFERENCE_PATH)

    assert "189596" in reference_map
    assert reference_map["189596"].pace == "62"
    assert all(reference.definition_id == key for key, reference in reference_map.items())
