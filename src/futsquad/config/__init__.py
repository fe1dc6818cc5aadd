"""Configuration helpers for formations."""

from .formations import FORMATION_CHOICES, LINEUP_SIZE, FormationRules, get_formation, iter_formations

__all__ = [
    "FORMATION_CHOICES",
    "FormationRules",
    "LINEUP_SIZE",
    "get_formation",
    "iter_formations",
]
