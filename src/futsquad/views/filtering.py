"""Helpers for slicing a roster by common attributes."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from statistics import fmean
from typing import Callable, Iterable, List, Literal, Sequence

from futsquad.models import RosterEntry


DEFAULT_MIN_RATING = 0
DEFAULT_MAX_RATING = 99
DEFAULT_MIN_PRICE = 0
DEFAULT_MAX_PRICE = 20_000_000

# Sort rank of the price-unavailable sentinel; below every real price.
UNAVAILABLE_PRICE_RANK = -1.0

SortField = Literal["name", "rating", "price", "position", "team", "league", "nation", "rarity"]
SortDirection = Literal["asc", "desc"]
TradeableFilter = Literal["all", "tradeable", "untradeable"]

SORT_FIELDS: tuple[str, ...] = ("name", "rating", "price", "position", "team", "league", "nation", "rarity")


@dataclass(frozen=True)
class FilterCriteria:
    """Filtering configuration for roster projections."""

    name: str = ""
    position: str = ""
    club: str = ""
    rarity: str = ""
    nation: str = ""
    min_rating: int = DEFAULT_MIN_RATING
    max_rating: int = DEFAULT_MAX_RATING
    min_price: float = DEFAULT_MIN_PRICE
    max_price: float = DEFAULT_MAX_PRICE
    tradeable: TradeableFilter = "all"


@dataclass(frozen=True)
class SortCriterion:
    field: SortField
    direction: SortDirection = "asc"


@dataclass(frozen=True)
class RosterSummary:
    """Club-wide aggregates over the unfiltered roster."""

    total_players: int
    average_rating: float
    min_price: float
    max_price: float
    priced_players: int
    detailed_players: int


Predicate = Callable[[RosterEntry], bool]


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.casefold()


def _price_for_filter(entry: RosterEntry) -> float:
    price = entry.price_value()
    return 0.0 if price is None else price


def _price_for_sort(entry: RosterEntry) -> float:
    price = entry.price_value()
    return UNAVAILABLE_PRICE_RANK if price is None else price


def build_predicates(criteria: FilterCriteria) -> List[Predicate]:
    """Return only the predicates whose criteria differ from the defaults."""

    predicates: List[Predicate] = []

    name = criteria.name.strip().casefold()
    if name:
        predicates.append(lambda entry: name in entry.name.casefold())

    position = criteria.position.strip().casefold()
    if position:
        predicates.append(
            lambda entry: position in entry.preferred_position.casefold()
            or position in entry.alternate_positions.casefold()
        )

    club = criteria.club.strip().casefold()
    if club:
        predicates.append(
            lambda entry: club in entry.team.casefold() or club in entry.league.casefold()
        )

    rarity = criteria.rarity.strip()
    if rarity:
        predicates.append(lambda entry: entry.rarity == rarity)

    nation = criteria.nation.strip()
    if nation:
        predicates.append(lambda entry: entry.nation == nation)

    if criteria.min_rating != DEFAULT_MIN_RATING or criteria.max_rating != DEFAULT_MAX_RATING:
        min_rating, max_rating = criteria.min_rating, criteria.max_rating
        predicates.append(lambda entry: min_rating <= entry.rating <= max_rating)

    if criteria.min_price != DEFAULT_MIN_PRICE or criteria.max_price != DEFAULT_MAX_PRICE:
        min_price, max_price = criteria.min_price, criteria.max_price
        predicates.append(lambda entry: min_price <= _price_for_filter(entry) <= max_price)

    if criteria.tradeable == "tradeable":
        predicates.append(lambda entry: entry.is_tradeable)
    elif criteria.tradeable == "untradeable":
        predicates.append(lambda entry: not entry.is_tradeable)

    return predicates


def _sort_key(field: str) -> Callable[[RosterEntry], object]:
    if field == "rating":
        return lambda entry: entry.rating
    if field == "price":
        return _price_for_sort
    if field == "position":
        return lambda entry: _fold(entry.preferred_position)
    if field in {"team", "league", "nation", "rarity", "name"}:
        return lambda entry: _fold(getattr(entry, field))
    raise ValueError(f"Unsupported sort field {field!r}")


def sort_entries(entries: Iterable[RosterEntry], sort: Sequence[SortCriterion]) -> List[RosterEntry]:
    """Stable multi-key sort; the first criterion has the highest priority."""

    ordered = list(entries)
    # Sorting by the lowest-priority key first keeps each pass stable.
    for criterion in reversed(sort):
        ordered.sort(key=_sort_key(criterion.field), reverse=criterion.direction == "desc")
    return ordered


def project(
    roster: Sequence[RosterEntry],
    criteria: FilterCriteria | None = None,
    sort: Sequence[SortCriterion] = (),
) -> List[RosterEntry]:
    """Filter and order a roster; the input sequence is never modified."""

    predicates = build_predicates(criteria or FilterCriteria())
    if predicates:
        selected = [entry for entry in roster if all(predicate(entry) for predicate in predicates)]
    else:
        selected = list(roster)
    if sort:
        selected = sort_entries(selected, sort)
    return selected


def parse_sort_spec(spec: str | None) -> List[SortCriterion]:
    """Parse ``"rating:desc,name"`` into sort criteria."""

    criteria: List[SortCriterion] = []
    if not spec:
        return criteria
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        field, _, direction = part.partition(":")
        field = field.strip().lower()
        direction = (direction.strip().lower() or "asc")
        if field not in SORT_FIELDS:
            raise ValueError(f"Unsupported sort field {field!r}")
        if direction not in {"asc", "desc"}:
            raise ValueError(f"Unsupported sort direction {direction!r}")
        criteria.append(SortCriterion(field=field, direction=direction))  # type: ignore[arg-type]
    return criteria


def summarize(roster: Sequence[RosterEntry]) -> RosterSummary:
    ratings = [float(entry.rating) for entry in roster]
    prices = [price for price in (entry.price_value() for entry in roster) if price is not None]
    return RosterSummary(
        total_players=len(roster),
        average_rating=fmean(ratings) if ratings else 0.0,
        min_price=min(prices) if prices else 0.0,
        max_price=max(prices) if prices else 0.0,
        priced_players=len(prices),
        detailed_players=sum(1 for entry in roster if entry.has_detailed_stats),
    )


__all__ = [
    "DEFAULT_MAX_PRICE",
    "DEFAULT_MAX_RATING",
    "DEFAULT_MIN_PRICE",
    "DEFAULT_MIN_RATING",
    "FilterCriteria",
    "RosterSummary",
    "SORT_FIELDS",
    "SortCriterion",
    "build_predicates",
    "parse_sort_spec",
    "project",
    "sort_entries",
    "summarize",
]
