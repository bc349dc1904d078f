"""Class features that ask the player to choose.

Fighting styles, expertise, metamagic, invocations, maneuvers and similar
features each unlock at a class (or subclass) level and need one or more
picks from a fixed option list. Picks are stored under a choice key
derived from the feature name, e.g. ``"fighting_style"``.

Example:
    >>> validate_feature_choices("Fighter", 3, "Battle Master", {"fighting_style": "defense"})
    ['Combat Superiority: Maneuvers']
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from charsheet.core.logging import get_logger


logger = get_logger(__name__)

ChoiceValue = str | Sequence[str]


@dataclass(frozen=True)
class FeatureChoice:
    """A feature that needs player picks.

    Attributes:
        feature_name: Display name of the feature.
        level: Class level at which the choice unlocks.
        options: Keys of the options on offer.
        count: Picks required.
        multiple: Whether the value is a list of picks.
    """

    feature_name: str
    level: int
    options: tuple[str, ...]
    count: int = 1
    multiple: bool = False

    @property
    def key(self) -> str:
        """Storage key, e.g. ``'fighting_style_additional'``."""
        return re.sub(r"[^a-z0-9]+", "_", self.feature_name.lower()).strip("_")


# =============================================================================
# Option Lists
# =============================================================================

FIGHTING_STYLES = (
    "archery",
    "blind-fighting",
    "defense",
    "dueling",
    "great-weapon-fighting",
    "interception",
    "protection",
    "thrown-weapon-fighting",
    "two-weapon-fighting",
    "unarmed-fighting",
)

MANEUVERS = (
    "commanders-strike",
    "disarming-attack",
    "distracting-strike",
    "evasive-footwork",
    "feinting-attack",
    "goading-attack",
    "lunging-attack",
    "maneuvering-attack",
    "menacing-attack",
    "parry",
    "precision-attack",
    "pushing-attack",
    "rally",
    "riposte",
    "sweeping-attack",
    "tactical-assessment",
    "trip-attack",
)

METAMAGIC = (
    "careful-spell",
    "distant-spell",
    "empowered-spell",
    "extended-spell",
    "heightened-spell",
    "quickened-spell",
    "seeking-spell",
    "subtle-spell",
    "transmuted-spell",
    "twinned-spell",
)

ELDRITCH_INVOCATIONS = (
    "agonizing-blast",
    "armor-of-shadows",
    "beast-speech",
    "beguiling-influence",
    "devils-sight",
    "eldritch-mind",
    "eldritch-sight",
    "eldritch-spear",
    "eyes-of-the-rune-keeper",
    "fiendish-vigor",
    "gaze-of-two-minds",
    "gift-of-the-ever-living-ones",
    "grasp-of-hadar",
    "improved-pact-weapon",
    "lance-of-lethargy",
    "mask-of-many-faces",
    "misty-visions",
    "one-with-shadows",
    "otherworldly-leap",
    "repelling-blast",
    "thirsting-blade",
    "voice-of-the-chain-master",
    "whispers-of-the-grave",
    "witch-sight",
)

SKILLS = (
    "acrobatics",
    "animal-handling",
    "arcana",
    "athletics",
    "deception",
    "history",
    "insight",
    "intimidation",
    "investigation",
    "medicine",
    "nature",
    "perception",
    "performance",
    "persuasion",
    "religion",
    "sleight-of-hand",
    "stealth",
    "survival",
)

TOTEM_SPIRITS = ("bear", "eagle", "elk", "tiger", "wolf")

PACT_BOONS = ("pact-of-the-blade", "pact-of-the-chain", "pact-of-the-tome", "pact-of-the-talisman")

LAND_TYPES = (
    "arctic",
    "coast",
    "desert",
    "forest",
    "grassland",
    "mountain",
    "swamp",
    "underdark",
)


def _styles(*keys: str) -> tuple[str, ...]:
    return tuple(style for style in FIGHTING_STYLES if style in keys)


def _additional(
    name: str,
    levels: Sequence[int],
    options: tuple[str, ...],
    count: int,
) -> list[FeatureChoice]:
    return [
        FeatureChoice(f"{name} (Additional)", level, options, count=count, multiple=True)
        for level in levels
    ]


# =============================================================================
# Choice Tables
# =============================================================================

CLASS_FEATURE_CHOICES: dict[str, list[FeatureChoice]] = {
    "fighter": [
        FeatureChoice("Fighting Style", 1, FIGHTING_STYLES),
        FeatureChoice("Fighting Style (Additional)", 10, FIGHTING_STYLES),
    ],
    "paladin": [
        FeatureChoice(
            "Fighting Style",
            2,
            _styles(
                "defense",
                "dueling",
                "great-weapon-fighting",
                "protection",
                "blind-fighting",
                "interception",
            ),
        ),
    ],
    "ranger": [
        FeatureChoice(
            "Fighting Style",
            2,
            _styles(
                "archery",
                "defense",
                "dueling",
                "thrown-weapon-fighting",
                "two-weapon-fighting",
                "blind-fighting",
            ),
        ),
    ],
    "rogue": [
        FeatureChoice("Expertise", 1, SKILLS, count=2, multiple=True),
        *_additional("Expertise", [6], SKILLS, 2),
    ],
    "bard": [
        FeatureChoice("Expertise", 3, SKILLS, count=2, multiple=True),
        *_additional("Expertise", [10], SKILLS, 2),
    ],
    "sorcerer": [
        FeatureChoice("Metamagic", 3, METAMAGIC, count=2, multiple=True),
        *_additional("Metamagic", [10, 17], METAMAGIC, 1),
    ],
    "warlock": [
        FeatureChoice("Pact Boon", 3, PACT_BOONS),
        FeatureChoice("Eldritch Invocation", 2, ELDRITCH_INVOCATIONS, count=2, multiple=True),
        *_additional("Eldritch Invocation", [5, 7, 9, 12, 15, 18], ELDRITCH_INVOCATIONS, 1),
    ],
}

SUBCLASS_FEATURE_CHOICES: dict[str, list[FeatureChoice]] = {
    "battle-master": [
        FeatureChoice("Combat Superiority: Maneuvers", 3, MANEUVERS, count=3, multiple=True),
        *_additional("Maneuvers", [7, 10, 15], MANEUVERS, 2),
    ],
    "path-of-the-totem-warrior": [
        FeatureChoice("Totem Spirit", 3, TOTEM_SPIRITS),
        FeatureChoice("Aspect of the Beast", 6, TOTEM_SPIRITS),
        FeatureChoice("Totemic Attunement", 14, TOTEM_SPIRITS),
    ],
    "circle-of-the-land": [
        FeatureChoice("Land Type", 2, LAND_TYPES),
    ],
}


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.split("|")[0].strip().lower())


def _choices(class_name: str, subclass: str | None) -> list[FeatureChoice]:
    choices = list(CLASS_FEATURE_CHOICES.get(_slug(class_name), []))
    if subclass:
        choices.extend(SUBCLASS_FEATURE_CHOICES.get(_slug(subclass), []))
    return choices


def feature_choices_for(
    class_name: str,
    level: int,
    subclass: str | None = None,
) -> list[FeatureChoice]:
    """Choices unlocked at or below a level, class choices first.

    Accepts display names and entity keys for the class and subclass.
    """
    return [choice for choice in _choices(class_name, subclass) if choice.level <= level]


def new_feature_choices_at(
    class_name: str,
    level: int,
    subclass: str | None = None,
) -> list[FeatureChoice]:
    """Choices that unlock exactly at a level."""
    return [choice for choice in _choices(class_name, subclass) if choice.level == level]


def validate_feature_choices(
    class_name: str,
    level: int,
    subclass: str | None,
    current_choices: Mapping[str, ChoiceValue],
) -> list[str]:
    """List the feature choices still missing or invalid.

    Args:
        class_name: Class display name or key.
        level: Class level.
        subclass: Subclass name, if chosen.
        current_choices: Picks keyed by FeatureChoice.key.

    Returns:
        One entry per unmet choice: the feature name when nothing is
        picked, ``'<name> (need N more)'`` when too few are picked, and
        ``'<name> (unknown option: x)'`` for picks outside the options.
    """
    missing = []
    for choice in feature_choices_for(class_name, level, subclass):
        value = current_choices.get(choice.key)
        if not value:
            missing.append(choice.feature_name)
            continue

        picks = [value] if isinstance(value, str) else list(value)
        unknown = [pick for pick in picks if pick not in choice.options]
        if unknown:
            missing.append(f"{choice.feature_name} (unknown option: {', '.join(unknown)})")
        elif choice.multiple and len(picks) < choice.count:
            missing.append(f"{choice.feature_name} (need {choice.count - len(picks)} more)")

    if missing:
        logger.debug(
            "Feature choices incomplete", class_name=class_name, class_level=level, missing=missing
        )
    return missing


__all__ = [
    "FeatureChoice",
    "CLASS_FEATURE_CHOICES",
    "SUBCLASS_FEATURE_CHOICES",
    "feature_choices_for",
    "new_feature_choices_at",
    "validate_feature_choices",
]
