"""Input adapters that turn club exports into enriched roster entries."""

from .enrichment import build_reference_map, enrich, get_reference_map, load_reference_map
from .headers import build_column_map, normalize_header
from .roster import (
    Diagnostic,
    EmptyCsvError,
    ImportReport,
    MissingColumnsError,
    NoDataRowsError,
    NoValidRowsError,
    ReconcileResult,
    RosterImport,
    RosterImportError,
    ingest_roster_csv,
    load_roster_csv,
    reconcile,
)
from .tokenizer import detect_delimiter, tokenize

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
    "build_column_map",
    "build_reference_map",
    "detect_delimiter",
    "enrich",
    "get_reference_map",
    "ingest_roster_csv",
    "load_reference_map",
    "load_roster_csv",
    "normalize_header",
    "reconcile",
    "tokenize",
]
