"""Pydantic V2 schemas and enumerations for the charsheet rules core.

Submodules:
    enums: Closed vocabularies (Ability, Condition, RechargeTrigger, RestTier, ...).
    entities: Typed, read-only reference records (Race, CharacterClass, Spell, ...).

Example:
    >>> from charsheet.models import Spell, Condition
    >>> Spell.model_validate({"name": "Shield", "source": "XPHB", "level": 1, "school": "A"}).key
    'shield|XPHB'
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from charsheet.models.enums import (
    Ability,
    Condition,
    EntityCategory,
    KeepMode,
    RechargeTrigger,
    RestTier,
    SpellSchool,
)

# =============================================================================
# Reference Entities
# =============================================================================
from charsheet.models.entities import (
    CATEGORY_MODELS,
    Background,
    BaseItem,
    CharacterClass,
    ClassFeature,
    ClassReference,
    Feat,
    HitDice,
    Item,
    Race,
    RulesetEntity,
    Spell,
    SpellClasses,
    Subclass,
    SubclassFeature,
)


__all__ = [
    # Enumerations
    "Ability",
    "Condition",
    "EntityCategory",
    "KeepMode",
    "RechargeTrigger",
    "RestTier",
    "SpellSchool",
    # Entities
    "RulesetEntity",
    "Race",
    "Background",
    "Feat",
    "HitDice",
    "CharacterClass",
    "Subclass",
    "ClassFeature",
    "SubclassFeature",
    "ClassReference",
    "SpellClasses",
    "Spell",
    "Item",
    "BaseItem",
    "CATEGORY_MODELS",
]
