"""Reconcile tokenized club CSV rows into validated roster entries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from futsquad.ingest.enrichment import enrich, get_reference_map
from futsquad.ingest.headers import build_column_map, missing_required_fields
from futsquad.ingest.tokenizer import detect_delimiter, strip_input, tokenize
from futsquad.models import (
    FIELD_ATTRIBUTES,
    FLAG_FALSE,
    FLAG_FIELDS,
    FLAG_TRUE,
    PRICE_UNAVAILABLE,
    CanonicalField,
    ReferenceEntry,
    RosterEntry,
    normalize_definition_id,
    parse_price,
)


logger = logging.getLogger(__name__)

HEADER_ROW_NUMBER = 1
RATING_MIN = 0
RATING_MAX = 99

_RATING_PATTERN = re.compile(r"^[+-]?\d+$")
_PRICE_NOISE = re.compile(r"[,\s]")

# Compatibility shim for the flag spellings seen across export tools.
# Everything is stored as the canonical "true"/"false" strings.
_FLAG_SPELLINGS: Dict[str, str] = {
    "true": FLAG_TRUE,
    "t": FLAG_TRUE,
    "yes": FLAG_TRUE,
    "y": FLAG_TRUE,
    "1": FLAG_TRUE,
    "false": FLAG_FALSE,
    "f": FLAG_FALSE,
    "no": FLAG_FALSE,
    "n": FLAG_FALSE,
    "0": FLAG_FALSE,
    "": FLAG_FALSE,
}


class RosterImportError(ValueError):
    """Raised when a CSV cannot produce a roster at all."""


class EmptyCsvError(RosterImportError):
    def __init__(self) -> None:
        super().__init__("CSV is empty.")


class NoDataRowsError(RosterImportError):
    def __init__(self) -> None:
        super().__init__("CSV has a header but no data rows.")


class MissingColumnsError(RosterImportError):
    def __init__(self, missing: Sequence[CanonicalField]):
        self.missing = tuple(missing)
        names = ", ".join(field.value for field in self.missing)
        super().__init__(f"Invalid CSV format. Missing required columns: {names}")


class NoValidRowsError(RosterImportError):
    def __init__(self, diagnostics: Sequence["Diagnostic"]):
        self.diagnostics = tuple(diagnostics)
        super().__init__(
            "No valid player data could be parsed. "
            f"All {len(self.diagnostics)} data rows were rejected."
        )


@dataclass(frozen=True)
class Diagnostic:
    """Why one source row was skipped (or, when fatal, why the import failed)."""

    row: int
    reason: str
    fatal: bool = False
    name: Optional[str] = None


@dataclass(frozen=True)
class ReconcileResult:
    entries: List[RosterEntry]
    diagnostics: List[Diagnostic]
    missing_fields: Tuple[CanonicalField, ...] = ()

    @property
    def fatal(self) -> bool:
        return any(diagnostic.fatal for diagnostic in self.diagnostics)


@dataclass(frozen=True)
class ImportReport:
    total_rows: int
    accepted_rows: int
    enriched_rows: int
    delimiter: str
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def skipped_rows(self) -> int:
        return len(self.diagnostics)


@dataclass(frozen=True)
class RosterImport:
    entries: List[RosterEntry]
    report: ImportReport


def _is_blank_row(row: Sequence[str]) -> bool:
    return len(row) == 1 and not row[0].strip()


def _parse_rating(raw: str) -> Optional[int]:
    text = raw.strip()
    if not _RATING_PATTERN.match(text):
        return None
    value = int(text)
    if value < RATING_MIN or value > RATING_MAX:
        return None
    return value


def _coerce_flag(raw: str, column: CanonicalField) -> str:
    flag = _FLAG_SPELLINGS.get(raw.strip().lower())
    if flag is None:
        logger.debug("Unrecognised %s value %r; treating as false", column.value, raw)
        return FLAG_FALSE
    return flag


def _normalize_price(raw: str) -> str:
    text = _PRICE_NOISE.sub("", raw)
    if parse_price(text) is None:
        return PRICE_UNAVAILABLE
    return text


def _build_entry(values: Mapping[CanonicalField, str], rating: int) -> RosterEntry:
    data: Dict[str, object] = {}
    for canonical, attribute in FIELD_ATTRIBUTES.items():
        raw = values.get(canonical, "")
        if canonical in FLAG_FIELDS:
            data[attribute] = _coerce_flag(raw, canonical)
        elif canonical is CanonicalField.EXTERNAL_PRICE:
            data[attribute] = _normalize_price(raw)
        else:
            data[attribute] = raw
    data["rating"] = rating
    data["definition_id"] = normalize_definition_id(values[CanonicalField.DEFINITION_ID])
    return RosterEntry(**data)


def reconcile(
    header_row: Sequence[str],
    data_rows: Sequence[Sequence[str]],
    *,
    lookup: Mapping[str, CanonicalField] | None = None,
) -> ReconcileResult:
    """Validate tokenized rows against the header and build roster entries.

    Row numbers in diagnostics are 1-based over tokenized records, with the
    header as row 1. They are record numbers, not physical line numbers:
    leading blank lines are stripped before tokenizing and a quoted field
    spanning several lines still counts as one record. A bad row never stops
    the rows after it.
    """

    column_map = build_column_map(header_row, lookup)
    missing = missing_required_fields(column_map)
    if missing:
        names = ", ".join(field.value for field in missing)
        return ReconcileResult(
            entries=[],
            diagnostics=[
                Diagnostic(
                    row=HEADER_ROW_NUMBER,
                    reason=f"Missing required columns: {names}",
                    fatal=True,
                )
            ],
            missing_fields=tuple(missing),
        )

    has_rating_column = CanonicalField.RATING in column_map
    if not has_rating_column:
        logger.info("No rating column found; ratings default to %s", RATING_MIN)

    expected = len(header_row)
    entries: List[RosterEntry] = []
    diagnostics: List[Diagnostic] = []

    for offset, row in enumerate(data_rows):
        row_number = HEADER_ROW_NUMBER + 1 + offset
        if _is_blank_row(row):
            continue

        def skip(reason: str, name: Optional[str] = None) -> None:
            logger.debug("Skipping row %s: %s", row_number, reason)
            diagnostics.append(Diagnostic(row=row_number, reason=reason, name=name))

        if len(row) != expected:
            skip(f"Expected {expected} fields, but found {len(row)}.")
            continue

        values = {canonical: row[index].strip() for canonical, index in column_map.items()}
        name = values[CanonicalField.NAME]
        if not name:
            skip("Missing player name.")
            continue
        if not values[CanonicalField.DEFINITION_ID]:
            skip("Missing definition id.", name)
            continue

        rating = RATING_MIN
        if has_rating_column:
            raw_rating = values[CanonicalField.RATING]
            parsed = _parse_rating(raw_rating)
            if parsed is None:
                skip(f"Invalid rating {raw_rating!r}; expected an integer between 0 and 99.", name)
                continue
            rating = parsed

        try:
            entries.append(_build_entry(values, rating))
        except ValidationError as exc:
            skip(f"Invalid row: {exc.errors()[0]['msg']}", name)

    return ReconcileResult(entries=entries, diagnostics=diagnostics)


def ingest_roster_csv(
    text: str,
    reference_map: Mapping[str, ReferenceEntry] | None = None,
    *,
    delimiter: str | None = None,
) -> RosterImport:
    """Tokenize, reconcile and enrich a club export in one step.

    Raises a :class:`RosterImportError` subclass for structural problems;
    individual bad rows are only reported through the import diagnostics.
    """

    stripped = strip_input(text)
    if not stripped:
        raise EmptyCsvError()

    delimiter = delimiter or detect_delimiter(stripped)
    rows = tokenize(stripped, delimiter)
    header_row, data_rows = rows[0], rows[1:]
    if all(_is_blank_row(row) for row in data_rows):
        raise NoDataRowsError()

    result = reconcile(header_row, data_rows)
    if result.fatal:
        raise MissingColumnsError(result.missing_fields)
    if not result.entries:
        raise NoValidRowsError(result.diagnostics)

    if reference_map is None:
        reference_map = get_reference_map()
    entries = enrich(result.entries, reference_map)

    report = ImportReport(
        total_rows=sum(1 for row in data_rows if not _is_blank_row(row)),
        accepted_rows=len(entries),
        enriched_rows=sum(1 for entry in entries if entry.has_detailed_stats),
        delimiter=delimiter,
        diagnostics=list(result.diagnostics),
    )
    logger.info(
        "Imported %s/%s roster rows (%s enriched, %s skipped)",
        report.accepted_rows,
        report.total_rows,
        report.enriched_rows,
        report.skipped_rows,
    )
    return RosterImport(entries=entries, report=report)


def load_roster_csv(
    path: Path,
    reference_map: Mapping[str, ReferenceEntry] | None = None,
    *,
    delimiter: str | None = None,
) -> RosterImport:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise RosterImportError(f"{path.name} is not valid UTF-8 text") from exc
    return ingest_roster_csv(text, reference_map, delimiter=delimiter)


__all__ = [
    "Diagnostic",
    "EmptyCsvError",
    "ImportReport",
    "MissingColumnsError",
    "NoDataRowsError",
    "NoValidRowsError",
    "ReconcileResult",
    "RosterImport",
    "RosterImportError",
    "ingest_roster_csv",
    "load_roster_csv",
    "reconcile",
]
