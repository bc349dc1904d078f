"""Class and subclass resource tables and class-derived numbers.

Limited-use features (Rage, Ki, Channel Divinity, ...) are declared once
as ResourceDefinition entries keyed by class or subclass slug. Building a
character's resources evaluates each definition at the character's level
and ability scores and returns fresh, full Resource pools.

Example:
    >>> [r.name for r in class_resources("fighter|XPHB", "Battle Master", level=9)]
    ['Second Wind', 'Action Surge', 'Indomitable', 'Superiority Dice']
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import NamedTuple

from charsheet.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from charsheet.core.exceptions import OutOfRangeError
from charsheet.core.logging import get_logger
from charsheet.engine.abilities import ability_modifier
from charsheet.engine.resources import Resource
from charsheet.models.enums import Ability, RechargeTrigger


logger = get_logger(__name__)

AbilityScores = Mapping[Ability | str, int]
MaxUses = Callable[[int, AbilityScores | None], int | None]
"""Maximum uses at a level; None when the feature is unlimited."""


def _by_level(*steps: tuple[int, int]) -> MaxUses:
    """Step table: the value of the highest threshold at or below the level."""
    ordered = sorted(steps, reverse=True)

    def max_uses(level: int, _scores: AbilityScores | None) -> int | None:
        for threshold, value in ordered:
            if level >= threshold:
                return value
        return 0

    return max_uses


def _modifier(scores: AbilityScores | None, ability: Ability) -> int:
    if scores is None:
        return 0
    return ability_modifier(scores.get(ability, 10))


def _at_least_one_plus(ability: Ability) -> MaxUses:
    return lambda _level, scores: max(1, _modifier(scores, ability))


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.split("|")[0].strip().lower())


def _check_level(level: int) -> None:
    if not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL:
        raise OutOfRangeError(
            "Class level out of range",
            value=level,
            minimum=MIN_CHARACTER_LEVEL,
            maximum=MAX_CHARACTER_LEVEL,
        )


@dataclass(frozen=True)
class ResourceDefinition:
    """A limited-use feature before it is sized for a character.

    Attributes:
        name: Resource name.
        short_label: Compact label.
        recharge: When the feature comes back.
        description: Rules summary.
        max_uses: Maximum uses at a level.
    """

    name: str
    short_label: str
    recharge: RechargeTrigger
    description: str
    max_uses: MaxUses

    def build(self, level: int, ability_scores: AbilityScores | None = None) -> Resource | None:
        """Create a full Resource, or None when the feature is not tracked at this level."""
        maximum = self.max_uses(level, ability_scores)
        if maximum is None or maximum <= 0:
            return None
        return Resource(
            name=self.name,
            short_label=self.short_label,
            max=maximum,
            recharge=self.recharge,
            description=self.description,
        )


# =============================================================================
# Class Resources
# =============================================================================

CLASS_RESOURCES: dict[str, tuple[ResourceDefinition, ...]] = {
    "barbarian": (
        ResourceDefinition(
            name="Rage",
            short_label="Rage",
            recharge=RechargeTrigger.LONG_REST,
            description="Enter a rage as a bonus action for extra damage and resistance.",
            max_uses=_by_level((1, 2), (3, 3), (6, 4), (12, 5), (17, 6)),
        ),
    ),
    "bard": (
        ResourceDefinition(
            name="Bardic Inspiration",
            short_label="Inspiration",
            recharge=RechargeTrigger.LONG_REST,
            description="Give an ally a bonus die for an ability check, attack roll or save.",
            max_uses=_at_least_one_plus(Ability.CHA),
        ),
    ),
    "cleric": (
        ResourceDefinition(
            name="Channel Divinity",
            short_label="Channel",
            recharge=RechargeTrigger.SHORT_REST,
            description="Channel divine energy to fuel magical effects.",
            max_uses=_by_level((1, 1), (6, 2), (18, 3)),
        ),
    ),
    "druid": (
        ResourceDefinition(
            name="Wild Shape",
            short_label="Wild Shape",
            recharge=RechargeTrigger.SHORT_REST,
            description="Transform into a beast you have seen before.",
            max_uses=lambda level, _scores: None if level >= 20 else 2,
        ),
    ),
    "fighter": (
        ResourceDefinition(
            name="Second Wind",
            short_label="2nd Wind",
            recharge=RechargeTrigger.SHORT_REST,
            description="Regain 1d10 + fighter level hit points as a bonus action.",
            max_uses=_by_level((1, 1)),
        ),
        ResourceDefinition(
            name="Action Surge",
            short_label="Action Surge",
            recharge=RechargeTrigger.SHORT_REST,
            description="Take one additional action on your turn.",
            max_uses=_by_level((1, 1), (17, 2)),
        ),
        ResourceDefinition(
            name="Indomitable",
            short_label="Indomitable",
            recharge=RechargeTrigger.LONG_REST,
            description="Reroll a failed saving throw.",
            max_uses=_by_level((9, 1), (13, 2), (17, 3)),
        ),
    ),
    "monk": (
        ResourceDefinition(
            name="Ki Points",
            short_label="Ki",
            recharge=RechargeTrigger.SHORT_REST,
            description="Fuel ki features and monk abilities.",
            max_uses=lambda level, _scores: level,
        ),
    ),
    "paladin": (
        ResourceDefinition(
            name="Lay on Hands",
            short_label="Lay on Hands",
            recharge=RechargeTrigger.LONG_REST,
            description="Heal creatures by touch from a pool of hit points.",
            max_uses=lambda level, _scores: level * 5,
        ),
        ResourceDefinition(
            name="Channel Divinity",
            short_label="Channel",
            recharge=RechargeTrigger.SHORT_REST,
            description="Channel divine energy for sacred effects.",
            max_uses=_by_level((3, 1), (11, 2)),
        ),
    ),
    "sorcerer": (
        ResourceDefinition(
            name="Sorcery Points",
            short_label="Sorcery",
            recharge=RechargeTrigger.LONG_REST,
            description="Fuel metamagic and create spell slots.",
            max_uses=lambda level, _scores: level,
        ),
    ),
    "wizard": (
        ResourceDefinition(
            name="Arcane Recovery",
            short_label="Arcane Rec",
            recharge=RechargeTrigger.LONG_REST,
            description="Recover expended spell slots during a short rest, once per long rest.",
            max_uses=lambda level, _scores: math.ceil(level / 2),
        ),
    ),
}
"""Class resources keyed by class slug. Unlimited features are not listed."""


SUBCLASS_RESOURCES: dict[str, tuple[ResourceDefinition, ...]] = {
    "battle-master": (
        ResourceDefinition(
            name="Superiority Dice",
            short_label="Sup. Dice",
            recharge=RechargeTrigger.SHORT_REST,
            description="Fuel combat maneuvers with superiority dice.",
            max_uses=_by_level((1, 4), (7, 5), (15, 6)),
        ),
    ),
    "light-domain": (
        ResourceDefinition(
            name="Warding Flare",
            short_label="Warding",
            recharge=RechargeTrigger.LONG_REST,
            description="Impose disadvantage on an attack roll against you.",
            max_uses=_at_least_one_plus(Ability.WIS),
        ),
    ),
    "war-domain": (
        ResourceDefinition(
            name="War Priest",
            short_label="War Priest",
            recharge=RechargeTrigger.LONG_REST,
            description="Make a weapon attack as a bonus action after attacking.",
            max_uses=_at_least_one_plus(Ability.WIS),
        ),
    ),
    "school-of-abjuration": (
        ResourceDefinition(
            name="Arcane Ward",
            short_label="Ward HP",
            recharge=RechargeTrigger.LONG_REST,
            description="Protective ward that absorbs damage.",
            max_uses=lambda level, scores: level * 2 + _modifier(scores, Ability.INT),
        ),
    ),
    "school-of-divination": (
        ResourceDefinition(
            name="Portent",
            short_label="Portent",
            recharge=RechargeTrigger.LONG_REST,
            description="Replace any d20 roll with a foretold result.",
            max_uses=_by_level((1, 2), (14, 3)),
        ),
    ),
    "circle-of-the-land": (
        ResourceDefinition(
            name="Natural Recovery",
            short_label="Nat Rec",
            recharge=RechargeTrigger.LONG_REST,
            description="Recover spell slots during a short rest.",
            max_uses=lambda level, _scores: math.ceil(level / 2),
        ),
    ),
    "wild-magic": (
        ResourceDefinition(
            name="Tides of Chaos",
            short_label="Tides",
            recharge=RechargeTrigger.LONG_REST,
            description="Gain advantage on one attack roll, ability check or save.",
            max_uses=_by_level((1, 1)),
        ),
    ),
    "the-archfey": (
        ResourceDefinition(
            name="Fey Presence",
            short_label="Fey Pres",
            recharge=RechargeTrigger.SHORT_REST,
            description="Charm or frighten creatures in a 10-foot cube.",
            max_uses=_by_level((1, 1)),
        ),
    ),
}
"""Subclass resources keyed by subclass slug."""


def class_resources(
    class_name: str,
    subclass: str | None = None,
    level: int = 1,
    ability_scores: AbilityScores | None = None,
) -> list[Resource]:
    """Build the limited-use resources of a class (and subclass) at a level.

    Args:
        class_name: Class name or entity key ('Fighter', 'fighter|XPHB').
        subclass: Optional subclass name or key ('Battle Master').
        level: Class level (1-20).
        ability_scores: Scores by ability, for ability-sized resources.

    Returns:
        Fresh, full resources; features with no uses at this level or
        unlimited uses are omitted.

    Raises:
        OutOfRangeError: If level is outside 1-20.
    """
    _check_level(level)
    definitions: list[ResourceDefinition] = list(CLASS_RESOURCES.get(_slug(class_name), ()))
    if subclass:
        definitions.extend(SUBCLASS_RESOURCES.get(_slug(subclass), ()))

    resources = [
        resource
        for definition in definitions
        if (resource := definition.build(level, ability_scores)) is not None
    ]
    logger.debug(
        "Class resources built",
        class_name=class_name,
        subclass=subclass,
        character_level=level,
        resources=[r.name for r in resources],
    )
    return resources


# =============================================================================
# Derived Numbers
# =============================================================================


def sneak_attack_dice(level: int) -> str:
    """Sneak Attack dice for a rogue level ('1d6' at 1, '10d6' at 19)."""
    _check_level(level)
    return f"{math.ceil(level / 2)}d6"


def martial_arts_die(level: int) -> str:
    """Martial Arts die for a monk level."""
    _check_level(level)
    if level >= 17:
        return "1d12"
    if level >= 11:
        return "1d10"
    if level >= 5:
        return "1d8"
    return "1d6"


def rage_damage(level: int) -> int:
    """Rage damage bonus for a barbarian level."""
    _check_level(level)
    if level >= 16:
        return 4
    if level >= 9:
        return 3
    return 2


_EXTRA_ATTACK_CLASSES = frozenset({"barbarian", "monk", "paladin", "ranger"})


def extra_attacks(class_name: str, level: int) -> int:
    """Attacks per Attack action for a class level."""
    key = _slug(class_name)
    if key == "fighter":
        if level >= 20:
            return 4
        if level >= 11:
            return 3
        if level >= 5:
            return 2
    if key in _EXTRA_ATTACK_CLASSES and level >= 5:
        return 2
    return 1


class ArmorClass(NamedTuple):
    """Armor class and the rule that produced it."""

    value: int
    source: str


def unarmored_armor_class(
    class_name: str,
    ability_scores: AbilityScores,
    *,
    armor_class: int = 10,
    has_armor: bool = False,
    has_shield: bool = False,
) -> ArmorClass:
    """Armor class from worn armor or the class's Unarmored Defense.

    Args:
        class_name: Class name or key.
        ability_scores: Scores by ability.
        armor_class: AC of worn armor, used when ``has_armor``.
        has_armor: Whether body armor is worn.
        has_shield: Whether a shield is carried (monks lose Unarmored Defense).

    Returns:
        The armor class and its source label.
    """
    if has_armor:
        return ArmorClass(armor_class, "Armor")

    key = _slug(class_name)
    dex = _modifier(ability_scores, Ability.DEX)
    if key == "monk" and not has_shield:
        return ArmorClass(10 + dex + _modifier(ability_scores, Ability.WIS), "Unarmored Defense (Monk)")
    if key == "barbarian":
        return ArmorClass(
            10 + dex + _modifier(ability_scores, Ability.CON),
            "Unarmored Defense (Barbarian)",
        )
    return ArmorClass(10 + dex, "Unarmored")


_MONK_SPEED_BONUS: Sequence[tuple[int, int]] = ((18, 30), (14, 25), (10, 20), (6, 15), (2, 10))


def movement_speed(
    class_name: str,
    level: int,
    base_speed: int = 30,
    *,
    heavy_armor: bool = False,
) -> int:
    """Walking speed after Unarmored Movement or Fast Movement."""
    key = _slug(class_name)
    if key == "monk" and not heavy_armor:
        for threshold, bonus in _MONK_SPEED_BONUS:
            if level >= threshold:
                return base_speed + bonus
    if key == "barbarian" and level >= 5 and not heavy_armor:
        return base_speed + 10
    return base_speed


SPELLCASTING_ABILITY: dict[str, Ability] = {
    "bard": Ability.CHA,
    "cleric": Ability.WIS,
    "druid": Ability.WIS,
    "paladin": Ability.CHA,
    "ranger": Ability.WIS,
    "sorcerer": Ability.CHA,
    "warlock": Ability.CHA,
    "wizard": Ability.INT,
    # Subclasses that add spellcasting
    "eldritch-knight": Ability.INT,
    "arcane-trickster": Ability.INT,
}


__all__ = [
    "ResourceDefinition",
    "CLASS_RESOURCES",
    "SUBCLASS_RESOURCES",
    "class_resources",
    "sneak_attack_dice",
    "martial_arts_die",
    "rage_damage",
    "extra_attacks",
    "ArmorClass",
    "unarmored_armor_class",
    "movement_speed",
    "SPELLCASTING_ABILITY",
]
