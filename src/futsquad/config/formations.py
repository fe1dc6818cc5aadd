"""Formation configuration used to validate lineup requests and responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class FormationRules:
    label: str
    slot_order: Tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.slot_order)


_FORMATIONS: Dict[str, FormationRules] = {
    rules.label: rules
    for rules in (
        FormationRules("4-3-3", ("GK", "LB", "CB", "CB", "RB", "CM", "CM", "CM", "LW", "ST", "RW")),
        FormationRules("4-3-3 (4)", ("GK", "LB", "CB", "CB", "RB", "CM", "CAM", "CM", "LW", "ST", "RW")),
        FormationRules("4-4-2", ("GK", "LB", "CB", "CB", "RB", "LM", "CM", "CM", "RM", "ST", "ST")),
        FormationRules("4-2-3-1", ("GK", "LB", "CB", "CB", "RB", "CDM", "CDM", "LM", "CAM", "RM", "ST")),
        FormationRules("4-1-2-1-2", ("GK", "LB", "CB", "CB", "RB", "CDM", "CM", "CM", "CAM", "ST", "ST")),
        FormationRules("4-2-2-2", ("GK", "LB", "CB", "CB", "RB", "CDM", "CDM", "CAM", "CAM", "ST", "ST")),
        FormationRules("4-5-1", ("GK", "LB", "CB", "CB", "RB", "LM", "CM", "CM", "CM", "RM", "ST")),
        FormationRules("3-5-2", ("GK", "CB", "CB", "CB", "CDM", "CDM", "LM", "CAM", "RM", "ST", "ST")),
        FormationRules("3-4-3", ("GK", "CB", "CB", "CB", "LM", "CM", "CM", "RM", "LW", "ST", "RW")),
        FormationRules("5-3-2", ("GK", "LWB", "CB", "CB", "CB", "RWB", "CM", "CM", "CM", "ST", "ST")),
        FormationRules("5-2-1-2", ("GK", "LWB", "CB", "CB", "CB", "RWB", "CM", "CM", "CAM", "ST", "ST")),
    )
}

LINEUP_SIZE = 11


def iter_formations() -> Iterable[FormationRules]:
    """Return an iterator of all configured formations."""

    return _FORMATIONS.values()


def get_formation(label: str) -> FormationRules:
    """Fetch a formation by label, raising KeyError if it is not configured."""

    key = label.strip()
    if key not in _FORMATIONS:
        raise KeyError(f"No formation configured for {label!r}")
    return _FORMATIONS[key]


FORMATION_CHOICES: Mapping[str, FormationRules] = dict(_FORMATIONS)
