"""
Tests for hit point and leveling rules.
"""

import pytest

from charforge.error_types import ErrorMessages
from charforge.exceptions import ValidationError
from charforge.game.leveling import MAX_LEVEL, can_level_up, hp_gain, initial_max_hp, validate_level_up


class TestInitialMaxHp:
    """Test first-level hit points."""

    def test_hit_die_plus_con_modifier(self):
        assert initial_max_hp(6, 13) == 7
        assert initial_max_hp(10, 16) == 13

    def test_never_below_one(self):
        assert initial_max_hp(6, 1) == 1


class TestLevelUp:
    """Test level-up validation and HP gain."""

    def test_can_level_up_below_max(self):
        assert can_level_up(1)
        assert can_level_up(MAX_LEVEL - 1)
        assert not can_level_up(MAX_LEVEL)

    def test_valid_roll_passes(self):
        validate_level_up(3, 6, 1)
        validate_level_up(3, 6, 6)

    @pytest.mark.parametrize("hp_roll", [0, 7, -2])
    def test_roll_outside_hit_die_rejected(self, hp_roll):
        with pytest.raises(ValidationError) as exc_info:
            validate_level_up(3, 6, hp_roll)
        assert exc_info.value.field == "hp_roll"

    def test_max_level_checked_first(self):
        """At level 20 the level message wins even with a bad roll."""
        with pytest.raises(ValidationError) as exc_info:
            validate_level_up(MAX_LEVEL, 6, 99)
        assert exc_info.value.user_friendly == ErrorMessages.MAX_LEVEL_REACHED

    def test_hp_gain(self):
        assert hp_gain(4, 14) == 6
        assert hp_gain(1, 3) == 1
