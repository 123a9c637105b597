"""
Static per-class tables used by the wizard.

The reference catalog does not expose a class's primary abilities or its
skill/cantrip pick counts at level 1 in a usable form, so they live here.
"""

from collections.abc import Iterable

from .abilities import Ability

CLASS_PRIMARY_STATS: dict[str, tuple[Ability, ...]] = {
    "barbarian": (Ability.STR, Ability.CON),
    "bard": (Ability.DEX, Ability.CHA),
    "cleric": (Ability.WIS, Ability.CHA),
    "druid": (Ability.INT, Ability.WIS),
    "fighter": (Ability.STR, Ability.CON),
    "monk": (Ability.STR, Ability.DEX),
    "paladin": (Ability.WIS, Ability.CHA),
    "ranger": (Ability.STR, Ability.DEX),
    "rogue": (Ability.DEX, Ability.INT),
    "sorcerer": (Ability.CON, Ability.CHA),
    "warlock": (Ability.WIS, Ability.CHA),
    "wizard": (Ability.INT, Ability.WIS),
}

SKILL_CHOICE_LIMITS: dict[str, int] = {
    "barbarian": 2,
    "bard": 3,
    "cleric": 2,
    "druid": 2,
    "fighter": 2,
    "monk": 2,
    "paladin": 2,
    "ranger": 3,
    "rogue": 4,
    "sorcerer": 2,
    "warlock": 2,
    "wizard": 2,
}

CANTRIP_LIMITS: dict[str, int] = {
    "bard": 2,
    "cleric": 3,
    "druid": 2,
    "sorcerer": 4,
    "warlock": 2,
    "wizard": 3,
}


def skill_limit(class_index: str | None) -> int:
    """Number of skill proficiencies the class picks at creation (0 if unknown)."""
    if class_index is None:
        return 0
    return SKILL_CHOICE_LIMITS.get(class_index, 0)


def cantrip_limit(class_index: str | None) -> int:
    """Number of cantrips the class picks at creation (0 if unknown)."""
    if class_index is None:
        return 0
    return CANTRIP_LIMITS.get(class_index, 0)


def recommended_classes(bonus_abilities: Iterable[Ability]) -> list[str]:
    """
    Classes whose primary abilities intersect the given ability bonuses.

    Returned in the table's order.
    """
    bonuses = set(bonus_abilities)
    return [class_index for class_index, primaries in CLASS_PRIMARY_STATS.items() if bonuses.intersection(primaries)]
