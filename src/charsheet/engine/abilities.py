"""Ability score arithmetic for D&D 5E.

Pure functions deriving sheet numbers from raw scores and levels:
modifiers, proficiency bonus and point-buy costs.

Example:
    >>> ability_modifier(15)
    2
    >>> proficiency_bonus(5)
    3
    >>> point_buy_remaining([15, 15, 15, 8, 8, 8])
    0
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from charsheet.core.constants import (
    MAX_CHARACTER_LEVEL,
    MIN_CHARACTER_LEVEL,
    POINT_BUY_COSTS,
    POINT_BUY_MAX,
    POINT_BUY_MIN,
    POINT_BUY_TOTAL,
    STANDARD_ARRAY,
)
from charsheet.core.exceptions import OutOfRangeError, UnsupportedScoreError


def ability_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is ``(score - 10) // 2``, rounding toward negative
    infinity, and is defined for any integer score.

    Args:
        score: The ability score.

    Returns:
        The ability modifier.

    Example:
        >>> ability_modifier(10)
        0
        >>> ability_modifier(18)
        4
        >>> ability_modifier(7)
        -2
    """
    return (score - 10) // 2


def format_modifier(modifier: int) -> str:
    """Render a modifier with an explicit sign ('+3', '-1', '+0')."""
    return f"{modifier:+d}"


def proficiency_bonus(level: int) -> int:
    """Calculate proficiency bonus from character level.

    Args:
        level: Character level (1-20).

    Returns:
        ``ceil(level / 4) + 1``: +2 at level 1 up to +6 at level 17.

    Raises:
        OutOfRangeError: If level is outside 1-20.
    """
    if not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL:
        msg = f"Character level must be between {MIN_CHARACTER_LEVEL} and {MAX_CHARACTER_LEVEL}"
        raise OutOfRangeError(
            msg,
            value=level,
            minimum=MIN_CHARACTER_LEVEL,
            maximum=MAX_CHARACTER_LEVEL,
        )
    return math.ceil(level / 4) + 1


# =============================================================================
# Point Buy
# =============================================================================


def point_buy_cost(score: int) -> int:
    """Cost of a single score under point buy.

    Args:
        score: Ability score before background bonuses (8-15).

    Returns:
        Points spent on the score.

    Raises:
        UnsupportedScoreError: If the score has no point-buy cost.
    """
    try:
        return POINT_BUY_COSTS[score]
    except KeyError:
        msg = f"Point buy scores must be between {POINT_BUY_MIN} and {POINT_BUY_MAX}"
        raise UnsupportedScoreError(msg, score=score) from None


def point_buy_total(scores: Iterable[int]) -> int:
    """Total points spent on a set of scores."""
    return sum(point_buy_cost(score) for score in scores)


def point_buy_remaining(scores: Iterable[int], budget: int = POINT_BUY_TOTAL) -> int:
    """Points left from the budget; negative when overspent."""
    return budget - point_buy_total(scores)


__all__ = [
    "STANDARD_ARRAY",
    "ability_modifier",
    "format_modifier",
    "proficiency_bonus",
    "point_buy_cost",
    "point_buy_total",
    "point_buy_remaining",
]
