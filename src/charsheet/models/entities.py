"""Typed reference-data records for the charsheet rules core.

Reference data arrives as 5etools-style JSON collections keyed by
category. Each category is parsed into its own frozen pydantic model so
the rest of the core works with named, typed fields instead of open
dictionaries. Fields the core does not model are preserved in
``model_extra`` so records from newer upstream data still load.

Example:
    >>> spell = Spell.model_validate({"name": "Fireball", "source": "XPHB",
    ...                               "level": 3, "school": "V"})
    >>> spell.key
    'fireball|XPHB'
    >>> spell.school_name
    <SpellSchool.EVOCATION: 'evocation'>
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from charsheet.models.enums import EntityCategory, SpellSchool


# =============================================================================
# Base Record
# =============================================================================


class RulesetEntity(BaseModel):
    """Base class for all read-only reference records.

    Attributes:
        name: Display name as published.
        source: Source book abbreviation (e.g. 'XPHB').
        edition: Edition marker when the record carries one.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
    )

    name: str = Field(min_length=1, description="Published name")
    source: str = Field(min_length=1, description="Source abbreviation")
    edition: str | None = Field(default=None, description="Edition marker")

    @property
    def key(self) -> str:
        """Stable entity key (``slug(name)|SOURCE``)."""
        from charsheet.rules.keys import KeyCodec

        return KeyCodec.encode(self.name, self.source)


# =============================================================================
# Character Options
# =============================================================================


class Race(RulesetEntity):
    """A species/race option."""

    size: list[str] = Field(default_factory=list)
    speed: int | dict[str, Any] | None = Field(default=None)
    darkvision: int | None = Field(default=None)

    @property
    def walking_speed(self) -> int | None:
        """Walking speed in feet, whichever form the record uses."""
        if isinstance(self.speed, dict):
            walk = self.speed.get("walk")
            return walk if isinstance(walk, int) else None
        return self.speed


class Background(RulesetEntity):
    """A character background."""


class Feat(RulesetEntity):
    """A feat, optionally with prerequisites."""

    category: list[str] = Field(default_factory=list)
    repeatable: bool = Field(default=False)
    prerequisite: list[dict[str, Any]] | None = Field(default=None)
    ability: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Classes
# =============================================================================


class HitDice(BaseModel):
    """Hit dice block of a class (``hd`` in the data)."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(default=1, ge=1)
    faces: int = Field(ge=1)


class CharacterClass(RulesetEntity):
    """A character class."""

    hd: HitDice | None = Field(default=None)
    proficiency: list[str] = Field(default_factory=list)
    spellcasting_ability: str | None = Field(default=None, alias="spellcastingAbility")
    caster_progression: str | None = Field(default=None, alias="casterProgression")
    class_features: list[str | dict[str, Any]] = Field(
        default_factory=list, alias="classFeatures"
    )
    subclass_title: str | None = Field(default=None, alias="subclassTitle")

    @property
    def hit_die(self) -> int | None:
        """Faces of the class hit die."""
        return self.hd.faces if self.hd else None

    @property
    def subclass_level(self) -> int:
        """Level at which the subclass is chosen.

        Read from the first ``gainSubclassFeature`` entry of the class
        feature list (``name|class|classSource|level[|source]``); 3 when
        the data does not say.
        """
        for entry in self.class_features:
            if isinstance(entry, dict) and entry.get("gainSubclassFeature"):
                parts = str(entry.get("classFeature", "")).split("|")
                if len(parts) > 3 and parts[3].isdigit():
                    return int(parts[3])
        return 3


class Subclass(RulesetEntity):
    """A subclass of a character class."""

    short_name: str | None = Field(default=None, alias="shortName")
    class_name: str = Field(alias="className")
    class_source: str = Field(alias="classSource")


class ClassFeature(RulesetEntity):
    """A feature granted by a class at a level."""

    class_name: str = Field(alias="className")
    class_source: str = Field(alias="classSource")
    level: int = Field(ge=1)


class SubclassFeature(RulesetEntity):
    """A feature granted by a subclass at a level."""

    class_name: str = Field(alias="className")
    class_source: str = Field(alias="classSource")
    subclass_short_name: str = Field(alias="subclassShortName")
    subclass_source: str | None = Field(default=None, alias="subclassSource")
    level: int = Field(ge=1)


# =============================================================================
# Spells & Items
# =============================================================================


class ClassReference(BaseModel):
    """A class named in a spell's eligibility list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    source: str | None = None


class SpellClasses(BaseModel):
    """The ``classes`` block of a spell record."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    from_class_list: list[ClassReference] = Field(
        default_factory=list, alias="fromClassList"
    )


class Spell(RulesetEntity):
    """A spell."""

    level: int = Field(ge=0, le=9)
    school: str = Field(min_length=1, description="Single-letter school code")
    classes: SpellClasses | None = Field(default=None)

    @property
    def school_name(self) -> SpellSchool | None:
        """Full school, or None for an unrecognised code."""
        try:
            return SpellSchool.from_code(self.school)
        except KeyError:
            return None

    @property
    def is_cantrip(self) -> bool:
        return self.level == 0

    @property
    def class_names(self) -> list[str]:
        """Names of classes that may learn the spell."""
        if self.classes is None:
            return []
        return [ref.name for ref in self.classes.from_class_list]


class Item(RulesetEntity):
    """A magic or mundane item."""

    type: str | None = Field(default=None)
    rarity: str | None = Field(default=None)
    req_attune: bool | str | None = Field(default=None, alias="reqAttune")

    @property
    def requires_attunement(self) -> bool:
        return bool(self.req_attune)


class BaseItem(Item):
    """A base (mundane template) item."""


CATEGORY_MODELS: dict[EntityCategory, type[RulesetEntity]] = {
    EntityCategory.RACE: Race,
    EntityCategory.BACKGROUND: Background,
    EntityCategory.FEAT: Feat,
    EntityCategory.CLASS: CharacterClass,
    EntityCategory.SUBCLASS: Subclass,
    EntityCategory.CLASS_FEATURE: ClassFeature,
    EntityCategory.SUBCLASS_FEATURE: SubclassFeature,
    EntityCategory.SPELL: Spell,
    EntityCategory.ITEM: Item,
    EntityCategory.BASE_ITEM: BaseItem,
}
"""Model used to parse each reference category."""


__all__ = [
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
