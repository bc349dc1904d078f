"""Rules engine for the charsheet core.

This module contains the stateful and computational rules:
- Dice notation parsing and rolling
- Ability score arithmetic and point buy
- Limited-use resources, spell slots and pact slots
- Status conditions and exhaustion
- Class resource tables and class-derived numbers
- Feat prerequisites, feat ability increases and feature choices
"""

from __future__ import annotations

from charsheet.engine.abilities import (
    ability_modifier,
    format_modifier,
    point_buy_cost,
    point_buy_remaining,
    point_buy_total,
    proficiency_bonus,
)
from charsheet.engine.class_features import (
    CLASS_RESOURCES,
    SPELLCASTING_ABILITY,
    SUBCLASS_RESOURCES,
    ArmorClass,
    ResourceDefinition,
    class_resources,
    extra_attacks,
    martial_arts_die,
    movement_speed,
    rage_damage,
    sneak_attack_dice,
    unarmored_armor_class,
)
from charsheet.engine.conditions import ConditionSet, coerce_condition
from charsheet.engine.dice import (
    DiceFormula,
    DiceRoller,
    KeepRule,
    RollOutcome,
    RollType,
    SingleRollResult,
    format_roll_result,
    has_critical,
    has_fumble,
    parse_formula,
    roll,
)
from charsheet.engine.feats import (
    FEAT_CATEGORIES,
    apply_feat_ability_bonus,
    category_label,
    check_prerequisites,
    choosable_abilities,
    coerce_ability,
    format_prerequisites,
    meets_prerequisites,
)
from charsheet.engine.feature_choices import (
    CLASS_FEATURE_CHOICES,
    SUBCLASS_FEATURE_CHOICES,
    FeatureChoice,
    feature_choices_for,
    new_feature_choices_at,
    validate_feature_choices,
)
from charsheet.engine.resources import (
    PactSlotPool,
    Resource,
    ResourceLedger,
    RestSummary,
    SlotLevel,
    SpellSlotPool,
    pip_toggle_target,
    reset_on_rest,
)


__all__ = [
    # Dice
    "DiceFormula",
    "DiceRoller",
    "KeepRule",
    "RollOutcome",
    "RollType",
    "SingleRollResult",
    "format_roll_result",
    "has_critical",
    "has_fumble",
    "parse_formula",
    "roll",
    # Abilities
    "ability_modifier",
    "format_modifier",
    "point_buy_cost",
    "point_buy_remaining",
    "point_buy_total",
    "proficiency_bonus",
    # Resources
    "PactSlotPool",
    "Resource",
    "ResourceLedger",
    "RestSummary",
    "SlotLevel",
    "SpellSlotPool",
    "pip_toggle_target",
    "reset_on_rest",
    # Conditions
    "ConditionSet",
    "coerce_condition",
    # Class features
    "CLASS_RESOURCES",
    "SUBCLASS_RESOURCES",
    "SPELLCASTING_ABILITY",
    "ArmorClass",
    "ResourceDefinition",
    "class_resources",
    "extra_attacks",
    "martial_arts_die",
    "movement_speed",
    "rage_damage",
    "sneak_attack_dice",
    "unarmored_armor_class",
    # Feats
    "FEAT_CATEGORIES",
    "apply_feat_ability_bonus",
    "category_label",
    "check_prerequisites",
    "choosable_abilities",
    "coerce_ability",
    "format_prerequisites",
    "meets_prerequisites",
    # Feature choices
    "CLASS_FEATURE_CHOICES",
    "SUBCLASS_FEATURE_CHOICES",
    "FeatureChoice",
    "feature_choices_for",
    "new_feature_choices_at",
    "validate_feature_choices",
]
