"""
The six abilities and their score modifiers.
"""

import math
from enum import Enum


class Ability(str, Enum):
    """Ability labels, declared in display order."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"


ABILITY_ORDER: tuple[Ability, ...] = tuple(Ability)

# Catalog ability-score indices ("str", "dex", ...) and display names ("STR", ...)
ABILITY_SCORE_MAP: dict[str, Ability] = {
    "str": Ability.STR,
    "dex": Ability.DEX,
    "con": Ability.CON,
    "int": Ability.INT,
    "wis": Ability.WIS,
    "cha": Ability.CHA,
}


def parse_ability(value: str) -> Ability:
    """
    Resolve an ability from its full name, catalog index or abbreviation.

    Raises:
        ValueError: If the value names no ability
    """
    key = value.strip().lower()
    if key in ABILITY_SCORE_MAP:
        return ABILITY_SCORE_MAP[key]
    return Ability(key)


def ability_modifier(score: int) -> int:
    """Modifier for an ability score: floor((score - 10) / 2)."""
    return math.floor((score - 10) / 2)


def format_modifier(modifier: int) -> str:
    """Render a modifier with an explicit sign, e.g. +2, +0, -1."""
    return f"+{modifier}" if modifier >= 0 else str(modifier)
