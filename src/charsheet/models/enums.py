"""Enumeration types for the charsheet rules core.

These enums are the closed vocabularies the rules operate on: abilities,
status conditions, recharge triggers, rest tiers, keep modes, spell
schools and reference-data categories.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """D&D 5E ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation.

        Returns:
            Three-letter abbreviation (e.g., 'STR').
        """
        return self.name


class Condition(StrEnum):
    """Status conditions tracked on a character sheet.

    The fifteen rules conditions plus ``concentrating``, which the sheet
    tracks the same way. ``EXHAUSTION`` is graded; its membership follows
    the exhaustion level.
    """

    BLINDED = "blinded"
    CHARMED = "charmed"
    DEAFENED = "deafened"
    EXHAUSTION = "exhaustion"
    FRIGHTENED = "frightened"
    GRAPPLED = "grappled"
    INCAPACITATED = "incapacitated"
    INVISIBLE = "invisible"
    PARALYZED = "paralyzed"
    PETRIFIED = "petrified"
    POISONED = "poisoned"
    PRONE = "prone"
    RESTRAINED = "restrained"
    STUNNED = "stunned"
    UNCONSCIOUS = "unconscious"
    CONCENTRATING = "concentrating"

    @property
    def is_graded(self) -> bool:
        """Whether the condition carries a numeric level."""
        return self is Condition.EXHAUSTION


class RechargeTrigger(StrEnum):
    """When a limited-use resource is restored."""

    SHORT_REST = "short"
    LONG_REST = "long"
    DAWN = "dawn"
    NEVER = "never"

    @property
    def label(self) -> str:
        """Human-readable recharge label."""
        labels = {
            RechargeTrigger.SHORT_REST: "Short Rest",
            RechargeTrigger.LONG_REST: "Long Rest",
            RechargeTrigger.DAWN: "Dawn",
            RechargeTrigger.NEVER: "Unlimited",
        }
        return labels[self]


class RestTier(StrEnum):
    """Recovery events a character can take."""

    SHORT = "short"
    LONG = "long"
    DAWN = "dawn"

    @property
    def satisfies(self) -> frozenset[RechargeTrigger]:
        """Recharge triggers restored by this rest tier.

        A long rest is a superset of a short rest. Dawn is its own event
        and is not folded into a long rest.
        """
        satisfied = {
            RestTier.SHORT: frozenset({RechargeTrigger.SHORT_REST}),
            RestTier.LONG: frozenset(
                {RechargeTrigger.SHORT_REST, RechargeTrigger.LONG_REST}
            ),
            RestTier.DAWN: frozenset({RechargeTrigger.DAWN}),
        }
        return satisfied[self]


class KeepMode(StrEnum):
    """Which dice a keep-clause retains."""

    HIGHEST = "highest"
    LOWEST = "lowest"

    @property
    def code(self) -> str:
        """Notation code used in formulas ('h' or 'l')."""
        return self.value[0]


class SpellSchool(StrEnum):
    """D&D 5E schools of magic."""

    ABJURATION = "abjuration"
    CONJURATION = "conjuration"
    DIVINATION = "divination"
    ENCHANTMENT = "enchantment"
    EVOCATION = "evocation"
    ILLUSION = "illusion"
    NECROMANCY = "necromancy"
    TRANSMUTATION = "transmutation"

    @classmethod
    def from_code(cls, code: str) -> SpellSchool:
        """Resolve a single-letter school code from reference data.

        Args:
            code: One of A, C, D, E, I, N, T, V.

        Returns:
            The matching school.

        Raises:
            KeyError: If the code is not a known school.
        """
        codes = {
            "A": cls.ABJURATION,
            "C": cls.CONJURATION,
            "D": cls.DIVINATION,
            "E": cls.ENCHANTMENT,
            "I": cls.ILLUSION,
            "N": cls.NECROMANCY,
            "T": cls.TRANSMUTATION,
            "V": cls.EVOCATION,
        }
        return codes[code.upper()]


class EntityCategory(StrEnum):
    """Reference-data collection names (5etools category keys)."""

    RACE = "race"
    BACKGROUND = "background"
    FEAT = "feat"
    CLASS = "class"
    SUBCLASS = "subclass"
    CLASS_FEATURE = "classFeature"
    SUBCLASS_FEATURE = "subclassFeature"
    SPELL = "spell"
    ITEM = "item"
    BASE_ITEM = "baseitem"


__all__ = [
    "Ability",
    "Condition",
    "RechargeTrigger",
    "RestTier",
    "KeepMode",
    "SpellSchool",
    "EntityCategory",
]
