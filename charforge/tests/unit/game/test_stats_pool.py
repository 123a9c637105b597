"""
Tests for StatsGenerator.

Covers both pool methods and the 4d6-drop-lowest roll itself.
"""

# pylint: disable=redefined-outer-name
# Justification: pytest fixtures redefine names

import random
from unittest.mock import Mock

import pytest

from charforge.exceptions import ValidationError
from charforge.game.stats_generator import POOL_SIZE, STANDARD_ARRAY, StatsGenerator, roll_4d6_drop_lowest


@pytest.fixture
def stats_generator():
    """Create a seeded StatsGenerator instance for testing."""
    return StatsGenerator(random.Random(7))


class TestRoll4d6DropLowest:
    """Test the single-slot roll."""

    def test_drops_the_lowest_die(self):
        rng = Mock()
        rng.randint.side_effect = [1, 6, 4, 3]
        assert roll_4d6_drop_lowest(rng) == 13

    def test_drops_only_one_of_equal_lowest_dice(self):
        rng = Mock()
        rng.randint.side_effect = [2, 2, 2, 2]
        assert roll_4d6_drop_lowest(rng) == 6

    def test_range(self):
        rng = random.Random(99)
        for _ in range(500):
            assert 3 <= roll_4d6_drop_lowest(rng) <= 18


class TestGeneratePool:
    """Test generate_pool."""

    def test_standard_array(self, stats_generator):
        assert stats_generator.generate_pool("standard_array") == STANDARD_ARRAY == (15, 14, 13, 12, 10, 8)

    def test_rolled_pool_has_six_values_in_range(self, stats_generator):
        pool = stats_generator.generate_pool("4d6_drop_lowest")
        assert len(pool) == POOL_SIZE
        assert all(3 <= value <= 18 for value in pool)

    def test_same_seed_same_pool(self):
        first = StatsGenerator(random.Random(5)).generate_pool("4d6_drop_lowest")
        second = StatsGenerator(random.Random(5)).generate_pool("4d6_drop_lowest")
        assert first == second

    def test_unknown_method_raises(self, stats_generator):
        with pytest.raises(ValidationError) as exc_info:
            stats_generator.generate_pool("point_buy")
        assert exc_info.value.field == "method"
