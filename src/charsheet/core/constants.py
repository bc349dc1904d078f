"""Rules constants for the charsheet core.

D&D 5E (2024) numbers shared by the dice, ability, resource and
condition modules.
"""

from __future__ import annotations

# =============================================================================
# Dice
# =============================================================================

DICE_TYPES: tuple[int, ...] = (4, 6, 8, 10, 12, 20, 100)
"""Standard polyhedral dice; no other die can appear in a formula."""

CRITICAL_DIE = 20
"""Only this die can produce a critical or a fumble."""

ABILITY_SCORE_FORMULA = "4d6kh3"
"""Roll four d6 and keep the highest three."""

MAX_DICE = 100
"""Default cap on dice rolled by one formula."""

MAX_DICE_LIMIT = 1000
"""Hard cap; d20 refuses more rolls than this per expression."""

# =============================================================================
# Point Buy (PHB)
# =============================================================================

POINT_BUY_TOTAL = 27
"""Total points available for point buy character creation."""

POINT_BUY_MIN = 8
"""Minimum ability score in point buy."""

POINT_BUY_MAX = 15
"""Maximum ability score in point buy (before background bonuses)."""

POINT_BUY_COSTS = {
    8: 0,
    9: 1,
    10: 2,
    11: 3,
    12: 4,
    13: 5,
    14: 7,
    15: 9,
}

STANDARD_ARRAY = (15, 14, 13, 12, 10, 8)
"""Standard array values for ability scores."""

MAX_ABILITY_SCORE = 20
"""Ceiling for ability score increases from feats."""

# =============================================================================
# Levels & Pools
# =============================================================================

MIN_CHARACTER_LEVEL = 1
MAX_CHARACTER_LEVEL = 20

MIN_SPELL_SLOT_LEVEL = 1
MAX_SPELL_SLOT_LEVEL = 9

MAX_PACT_SLOT_LEVEL = 5
"""Pact magic slots never exceed 5th level."""

# =============================================================================
# Conditions
# =============================================================================

MIN_EXHAUSTION_LEVEL = 0
MAX_EXHAUSTION_LEVEL = 6


__all__ = [
    "DICE_TYPES",
    "CRITICAL_DIE",
    "ABILITY_SCORE_FORMULA",
    "MAX_DICE",
    "MAX_DICE_LIMIT",
    "POINT_BUY_TOTAL",
    "POINT_BUY_MIN",
    "POINT_BUY_MAX",
    "POINT_BUY_COSTS",
    "STANDARD_ARRAY",
    "MAX_ABILITY_SCORE",
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "MIN_SPELL_SLOT_LEVEL",
    "MAX_SPELL_SLOT_LEVEL",
    "MAX_PACT_SLOT_LEVEL",
    "MIN_EXHAUSTION_LEVEL",
    "MAX_EXHAUSTION_LEVEL",
]
