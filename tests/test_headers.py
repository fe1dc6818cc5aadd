import pytest

from futsquad.ingest import build_column_map, normalize_header
from futsquad.models import CanonicalField


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Name", CanonicalField.NAME),
        ("PLAYER NAME", CanonicalField.NAME),
        ("  club ", CanonicalField.TEAM),
        ("Team", CanonicalField.TEAM),
        ("price", CanonicalField.EXTERNAL_PRICE),
        ("ExternalPrice", CanonicalField.EXTERNAL_PRICE),
        ("ID", CanonicalField.DEFINITION_ID),
        ("player id", CanonicalField.DEFINITION_ID),
        ("definitionid", CanonicalField.DEFINITION_ID),
        ("Pos", CanonicalField.PREFERRED_POSITION),
    ],
)
def test_normalize_header_synonyms(raw, expected):
    assert normalize_header(raw) is expected


@pytest.mark.parametrize("raw", ["", "Pace", "Favourite Snack", "Name2"])
def test_unknown_headers_do_not_bind(raw):
    assert normalize_header(raw) is None


def test_first_duplicate_wins():
    column_map = build_column_map(["Price", "Name", "ExternalPrice", "Player Name", "Id"])

    assert column_map[CanonicalField.EXTERNAL_PRICE] == 0
    assert column_map[CanonicalField.NAME] == 1
    assert column_map[CanonicalField.DEFINITION_ID] == 4


def test_unknown_columns_keep_positions():
    column_map = build_column_map(["Notes", "Name", "Whatever", "DefinitionId"])

    assert column_map == {CanonicalField.NAME: 1, CanonicalField.DEFINITION_ID: 3}


def test_custom_lookup():
    lookup = {"spieler": CanonicalField.NAME}

    assert build_column_map(["Spieler", "Name"], lookup) == {CanonicalField.NAME: 0}
