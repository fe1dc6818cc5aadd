"""Side-by-side comparison of two roster entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

from futsquad.models import RosterEntry


Better = Literal["higher", "lower", "none"]
Winner = Literal["first", "second", "tie", "none"]
StatValue = Union[int, float, str, None]


@dataclass(frozen=True)
class StatComparison:
    label: str
    first: StatValue
    second: StatValue
    winner: Winner


@dataclass(frozen=True)
class PlayerComparison:
    first_id: str
    second_id: str
    basic_stats: List[StatComparison] = field(default_factory=list)
    detailed_stats: List[StatComparison] = field(default_factory=list)


def _parse_stat(raw: Optional[str]) -> int:
    if not raw:
        return 0
    try:
        return int(raw.strip())
    except ValueError:
        return 0


def _compare(label: str, first: StatValue, second: StatValue, better: Better) -> StatComparison:
    if better == "none" or first is None or second is None:
        return StatComparison(label=label, first=first, second=second, winner="none")
    if first == second:
        winner: Winner = "tie"
    elif better == "higher":
        winner = "first" if first > second else "second"  # type: ignore[operator]
    else:
        winner = "first" if first < second else "second"  # type: ignore[operator]
    return StatComparison(label=label, first=first, second=second, winner=winner)


def compare_players(first: RosterEntry, second: RosterEntry) -> PlayerComparison:
    """Compare two players; an unknown price never wins the price row."""

    basic = [
        _compare("Rating", first.rating, second.rating, "higher"),
        _compare("Price", first.price_value(), second.price_value(), "lower"),
        _compare("Position", first.preferred_position, second.preferred_position, "none"),
        _compare("League", first.league, second.league, "none"),
        _compare("Nation", first.nation, second.nation, "none"),
    ]

    detailed: List[StatComparison] = []
    if first.has_detailed_stats and second.has_detailed_stats:
        for label, attribute in (
            ("Pace", "pace"),
            ("Shooting", "shooting"),
            ("Passing", "passing"),
            ("Dribbling", "dribbling"),
            ("Defending", "defending"),
            ("Physicality", "physicality"),
        ):
            detailed.append(
                _compare(
                    label,
                    _parse_stat(getattr(first, attribute)),
                    _parse_stat(getattr(second, attribute)),
                    "higher",
                )
            )
    if first.tactical_intelligence and second.tactical_intelligence:
        detailed.append(
            _compare(
                "Tactical Int.",
                _parse_stat(first.tactical_intelligence),
                _parse_stat(second.tactical_intelligence),
                "higher",
            )
        )

    return PlayerComparison(
        first_id=first.definition_id,
        second_id=second.definition_id,
        basic_stats=basic,
        detailed_stats=detailed,
    )


__all__ = ["PlayerComparison", "StatComparison", "compare_players"]
