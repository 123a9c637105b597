"""
Stats pool generation for character creation.

A pool is exactly six integers, produced either from the fixed standard
array or by rolling 4d6 and dropping the lowest die for each slot.
"""

import random

from ..exceptions import ValidationError
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

POOL_SIZE = 6
STANDARD_ARRAY: tuple[int, ...] = (15, 14, 13, 12, 10, 8)


def roll_4d6_drop_lowest(rng: random.Random | None = None) -> int:
    """Roll four d6, discard the single lowest, and sum the other three (3-18)."""
    rng = rng or random.Random()
    rolls = [rng.randint(1, 6) for _ in range(4)]
    rolls.remove(min(rolls))
    return sum(rolls)


class StatsGenerator:
    """Service for generating stat pools."""

    METHODS = ("standard_array", "4d6_drop_lowest")

    def __init__(self, rng: random.Random | None = None) -> None:
        """
        Initialize the stats generator.

        Args:
            rng: Random source; a fresh unseeded one when omitted
        """
        self._rng = rng or random.Random()
        logger.info("StatsGenerator initialized")

    def generate_pool(self, method: str) -> tuple[int, ...]:
        """
        Generate a fresh pool of six values.

        Args:
            method: "standard_array" or "4d6_drop_lowest"

        Returns:
            tuple[int, ...]: Six positive integers

        Raises:
            ValidationError: If the method is unknown
        """
        pool_methods = {
            "standard_array": self._standard_array,
            "4d6_drop_lowest": self._roll_4d6_drop_lowest,
        }

        pool_method = pool_methods.get(method)
        if pool_method is None:
            raise ValidationError(
                f"Unknown stat generation method: {method}",
                field="method",
                value=method,
                user_friendly=f"Unknown stat generation method '{method}'. Use one of: {', '.join(self.METHODS)}",
            )

        pool = pool_method()
        logger.info("Stat pool generated", method=method, pool=list(pool))
        return pool

    def _standard_array(self) -> tuple[int, ...]:
        return STANDARD_ARRAY

    def _roll_4d6_drop_lowest(self) -> tuple[int, ...]:
        return tuple(roll_4d6_drop_lowest(self._rng) for _ in range(POOL_SIZE))
