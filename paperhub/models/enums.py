"""Enums for model fields."""

from enum import Enum


class Level(str, Enum):
    """Reputation tiers, ordered from lowest to highest."""

    SILVER = "Silver"
    GOLD = "Gold"
    DIAMOND = "Diamond"
    LEGENDARY = "Legendary"

    @property
    def rank(self) -> int:
        """Position of this tier in the ladder (0 is the lowest)."""
        return list(Level).index(self)


# Checked highest first; a user lands on the first threshold their points reach.
# 1000 re-affirms Silver, so everything below 2000 collapses onto Silver.
LEVEL_THRESHOLDS: tuple[tuple[int, Level], ...] = (
    (4000, Level.LEGENDARY),
    (3000, Level.DIAMOND),
    (2000, Level.GOLD),
    (1000, Level.SILVER),
    (0, Level.SILVER),
)
