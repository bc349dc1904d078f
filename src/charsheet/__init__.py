"""charsheet - Rules computation core for a D&D 5E character sheet.

The core owns the numbers on the sheet; the host application owns
storage, presentation and users.

- Dice: parse notation, roll with keep-highest/lowest, spot criticals
- Abilities: modifiers, proficiency bonus, point buy
- Resources: limited-use features, spell slots, pact slots, rests
- Conditions: the sixteen sheet conditions and graded exhaustion
- Reference data: edition-filtered index with stable entity keys

Example:
    >>> from charsheet import DiceRoller, ResourceLedger, class_resources, RestTier
    >>>
    >>> roller = DiceRoller(seed=42)
    >>> roller.roll_from_text("1d20+5", label="Athletics").total
    >>>
    >>> ledger = ResourceLedger.from_resources(class_resources("barbarian", level=3))
    >>> ledger.use("Rage")
    2
    >>> ledger.rest(RestTier.LONG).resources
    ('Rage',)

Modules:
    core: Configuration, logging, constants and the exception hierarchy.
    models: Enumerations and typed reference-data entities.
    engine: Dice, ability math, resources, conditions and class tables.
    rules: Entity keys, the ruleset index and the reference-data loader.
"""

from __future__ import annotations

# Core
from charsheet.core.config import Settings, get_settings
from charsheet.core.exceptions import CharsheetError
from charsheet.core.logging import configure_logging, get_logger

# Engine
from charsheet.engine.abilities import (
    ability_modifier,
    format_modifier,
    point_buy_cost,
    proficiency_bonus,
)
from charsheet.engine.class_features import class_resources
from charsheet.engine.conditions import ConditionSet
from charsheet.engine.dice import (
    DiceFormula,
    DiceRoller,
    RollOutcome,
    RollType,
    format_roll_result,
    parse_formula,
    roll,
)
from charsheet.engine.resources import (
    PactSlotPool,
    Resource,
    ResourceLedger,
    SpellSlotPool,
)

# Models
from charsheet.models.enums import Ability, Condition, RechargeTrigger, RestTier

# Reference data
from charsheet.rules.index import RulesetIndex
from charsheet.rules.keys import KeyCodec


__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "CharsheetError",
    "configure_logging",
    "get_logger",
    # Dice
    "DiceFormula",
    "DiceRoller",
    "RollOutcome",
    "RollType",
    "format_roll_result",
    "parse_formula",
    "roll",
    # Abilities
    "ability_modifier",
    "format_modifier",
    "point_buy_cost",
    "proficiency_bonus",
    # Resources & conditions
    "Resource",
    "ResourceLedger",
    "SpellSlotPool",
    "PactSlotPool",
    "ConditionSet",
    "class_resources",
    # Enums
    "Ability",
    "Condition",
    "RechargeTrigger",
    "RestTier",
    # Reference data
    "RulesetIndex",
    "KeyCodec",
]
