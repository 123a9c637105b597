"""
Hit point and leveling rules.
"""

from ..error_types import ErrorMessages
from ..exceptions import ValidationError
from .abilities import ability_modifier

MAX_LEVEL = 20


def initial_max_hp(hit_die: int, constitution: int) -> int:
    """First-level hit points: the full hit die plus the CON modifier, at least 1."""
    return max(1, hit_die + ability_modifier(constitution))


def can_level_up(level: int) -> bool:
    """Whether a character at this level may gain another level."""
    return level < MAX_LEVEL


def validate_level_up(level: int, hit_die: int, hp_roll: int) -> None:
    """
    Check a level-up request before anything is written.

    Raises:
        ValidationError: At the maximum level, or when the roll is outside 1..hit_die
    """
    if not can_level_up(level):
        raise ValidationError(
            f"Character is at level {level}; cannot exceed {MAX_LEVEL}",
            field="level",
            value=level,
            user_friendly=ErrorMessages.MAX_LEVEL_REACHED,
        )
    if not 1 <= hp_roll <= hit_die:
        raise ValidationError(
            f"hp_roll {hp_roll} outside 1..{hit_die}",
            field="hp_roll",
            value=hp_roll,
            user_friendly=f"The hit point roll must be between 1 and {hit_die}",
        )


def hp_gain(hp_roll: int, constitution: int) -> int:
    """Hit points gained on level-up: the die roll plus the CON modifier, at least 1."""
    return max(1, hp_roll + ability_modifier(constitution))
