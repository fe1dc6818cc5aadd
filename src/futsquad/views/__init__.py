"""Roster view utilities (filtering, sorting, aggregates, comparison)."""

from .compare import PlayerComparison, StatComparison, compare_players
from .filtering import (
    DEFAULT_MAX_PRICE,
    FilterCriteria,
    RosterSummary,
    SortCriterion,
    parse_sort_spec,
    project,
    summarize,
)

__all__ = [
    "DEFAULT_MAX_PRICE",
    "FilterCriteria",
    "PlayerComparison",
    "RosterSummary",
    "SortCriterion",
    "StatComparison",
    "compare_players",
    "parse_sort_spec",
    "project",
    "summarize",
]
