"""Reference dataset loading and the enrichment join onto roster entries."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from futsquad.models import ReferenceEntry, RosterEntry, normalize_definition_id


logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).resolve().parent.parent / "data" / "reference_players.json"

# Compact keys used by the bundled dataset.
_COMPACT_KEYS = {
    "id": "definition_id",
    "n": "name",
    "p": "pace",
    "s": "shooting",
    "a": "passing",
    "d": "dribbling",
    "e": "defending",
    "h": "physicality",
    "pl": "play_styles",
    "ps": "play_style_plus",
    "at": "archetype",
    "ti": "tactical_intelligence",
}

_REFERENCE_CACHE: Dict[Path, Dict[str, ReferenceEntry]] = {}


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _text_tuple(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(item).strip() for item in value if str(item).strip())


def reference_from_mapping(raw: Mapping[str, Any]) -> ReferenceEntry:
    """Build a reference entry from either compact or long-form keys."""

    data = {_COMPACT_KEYS.get(key, key): value for key, value in raw.items()}
    return ReferenceEntry(
        definition_id=normalize_definition_id(str(data.get("definition_id", ""))),
        name=str(data.get("name") or ""),
        pace=_optional_text(data.get("pace")),
        shooting=_optional_text(data.get("shooting")),
        passing=_optional_text(data.get("passing")),
        dribbling=_optional_text(data.get("dribbling")),
        defending=_optional_text(data.get("defending")),
        physicality=_optional_text(data.get("physicality")),
        play_styles=_text_tuple(data.get("play_styles")),
        play_style_plus=_text_tuple(data.get("play_style_plus")),
        archetype=_optional_text(data.get("archetype")),
        tactical_intelligence=_optional_text(data.get("tactical_intelligence")),
    )


def build_reference_map(records: Iterable[Mapping[str, Any]]) -> Dict[str, ReferenceEntry]:
    """Index raw reference records by normalized id, skipping invalid ones."""

    reference_map: Dict[str, ReferenceEntry] = {}
    skipped = 0
    for raw in records:
        try:
            entry = reference_from_mapping(raw)
        except (ValidationError, AttributeError, TypeError) as exc:
            skipped += 1
            logger.debug("Skipping reference record %r: %s", raw, exc)
            continue
        reference_map.setdefault(entry.definition_id, entry)
    if skipped:
        logger.warning("Ignored %s invalid reference records", skipped)
    return reference_map


def load_reference_map(path: Path | None = None) -> Dict[str, ReferenceEntry]:
    """Load a reference dataset file; any failure yields an empty map."""

    path = path or DEFAULT_REFERENCE_PATH
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Reference dataset unavailable at %s: %s", path, exc)
        return {}
    if isinstance(payload, dict):
        payload = payload.get("players", [])
    if not isinstance(payload, list):
        logger.warning("Reference dataset at %s has unexpected shape; ignoring", path)
        return {}
    reference_map = build_reference_map(item for item in payload if isinstance(item, dict))
    logger.info("Loaded %s reference players from %s", len(reference_map), path)
    return reference_map


def get_reference_map(path: Path | None = None) -> Mapping[str, ReferenceEntry]:
    """Return the process-wide reference map, loading it on first use."""

    key = (path or DEFAULT_REFERENCE_PATH).resolve()
    if key not in _REFERENCE_CACHE:
        _REFERENCE_CACHE[key] = load_reference_map(key)
    return _REFERENCE_CACHE[key]


def enrich_entry(entry: RosterEntry, reference: Optional[ReferenceEntry]) -> RosterEntry:
    if reference is None:
        return entry.model_copy(
            update={
                "pace": None,
                "shooting": None,
                "passing": None,
                "dribbling": None,
                "defending": None,
                "physicality": None,
                "tactical_intelligence": None,
                "play_styles": (),
                "play_style_plus": (),
                "archetype": None,
                "has_detailed_stats": False,
            }
        )
    return entry.model_copy(
        update={
            "pace": reference.pace,
            "shooting": reference.shooting,
            "passing": reference.passing,
            "dribbling": reference.dribbling,
            "defending": reference.defending,
            "physicality": reference.physicality,
            "tactical_intelligence": reference.tactical_intelligence,
            "play_styles": reference.play_styles,
            "play_style_plus": reference.play_style_plus,
            "archetype": reference.archetype,
            "has_detailed_stats": True,
        }
    )


def enrich(
    entries: Sequence[RosterEntry],
    reference_map: Mapping[str, ReferenceEntry],
) -> List[RosterEntry]:
    """Attach reference substats to every entry whose id is known."""

    enriched = [
        enrich_entry(entry, reference_map.get(normalize_definition_id(entry.definition_id)))
        for entry in entries
    ]
    matched = sum(1 for entry in enriched if entry.has_detailed_stats)
    logger.debug("Enriched %s/%s roster entries", matched, len(enriched))
    return enriched


__all__ = [
    "DEFAULT_REFERENCE_PATH",
    "build_reference_map",
    "enrich",
    "enrich_entry",
    "get_reference_map",
    "load_reference_map",
    "reference_from_mapping",
]
