"""In-memory index of reference data for one ruleset variant.

The index takes raw 5etools-style collections (a mapping of category name
to a list of record dicts), parses each record into its typed entity,
drops records that belong to other rules editions and answers the lookups
a character builder needs: entities by key, class features up to a level,
spells available to a class.

Edition filtering keeps a record when its source is the supported source
or its edition marker is the supported edition. It applies to races,
backgrounds, feats, classes and subclasses. Class and subclass features
follow their owning class. Spells and items are indexed as supplied.

Example:
    >>> index = RulesetIndex({"spell": [{"name": "Fire Bolt", "source": "XPHB",
    ...                                  "level": 0, "school": "V"}]})
    >>> index.get_spell("fire-bolt|XPHB").name
    'Fire Bolt'
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar, cast

from pydantic import ValidationError as PydanticValidationError

from charsheet.core.exceptions import DataLoadError, UnknownEntityError
from charsheet.core.logging import get_logger
from charsheet.models.entities import (
    CATEGORY_MODELS,
    Background,
    BaseItem,
    CharacterClass,
    ClassFeature,
    Feat,
    Item,
    Race,
    RulesetEntity,
    Spell,
    Subclass,
    SubclassFeature,
)
from charsheet.models.enums import EntityCategory
from charsheet.rules.keys import KeyCodec
from charsheet.rules.spell_lists import spell_names_for_class


logger = get_logger(__name__)

EntityT = TypeVar("EntityT", bound=RulesetEntity)

_EDITION_FILTERED = (
    EntityCategory.RACE,
    EntityCategory.BACKGROUND,
    EntityCategory.FEAT,
    EntityCategory.CLASS,
    EntityCategory.SUBCLASS,
)


def _normalize_name(name: str) -> str:
    """Comparable form of a class name or key ('Fighter', 'fighter|XPHB')."""
    return name.split(KeyCodec.separator)[0].replace("-", " ").strip().lower()


def _normalize_key(key: str) -> str:
    name, source = KeyCodec.decode(key)
    return KeyCodec.encode(name, source)


class RulesetIndex:
    """Typed, edition-filtered reference data with key lookups.

    Attributes:
        supported_source: Source tag retained by the edition filter.
        supported_edition: Edition marker retained by the edition filter.
    """

    def __init__(
        self,
        collections: Mapping[str, Iterable[Mapping[str, Any]]],
        *,
        supported_source: str = "XPHB",
        supported_edition: str = "one",
    ) -> None:
        """Parse and filter the raw collections.

        Args:
            collections: Record dicts by category name ('spell', 'class', ...).
                Unknown categories are ignored.
            supported_source: Source tag of the supported rules.
            supported_edition: Edition marker of the supported rules.

        Raises:
            DataLoadError: If a record does not fit its category's model.
        """
        self.supported_source = supported_source.strip().upper()
        self.supported_edition = supported_edition

        parsed = {
            category: self._parse(category, collections.get(category.value, ()))
            for category in EntityCategory
        }
        for category in _EDITION_FILTERED:
            parsed[category] = self.filter_to_supported_edition(parsed[category])

        supported_classes = {
            (_normalize_name(c.name), c.source.upper()) for c in parsed[EntityCategory.CLASS]
        }
        for category in (EntityCategory.CLASS_FEATURE, EntityCategory.SUBCLASS_FEATURE):
            parsed[category] = [
                feature
                for feature in parsed[category]
                if self._owner_supported(feature, supported_classes)
            ]

        self._entities: dict[EntityCategory, list[RulesetEntity]] = parsed
        self._by_key: dict[EntityCategory, dict[str, RulesetEntity]] = {}
        for category, entities in parsed.items():
            keyed: dict[str, RulesetEntity] = {}
            for entity in entities:
                keyed.setdefault(entity.key, entity)
            self._by_key[category] = keyed

        logger.info(
            "Ruleset index built",
            supported_source=self.supported_source,
            counts={str(c): len(e) for c, e in parsed.items() if e},
        )

    @staticmethod
    def _parse(
        category: EntityCategory,
        records: Iterable[Mapping[str, Any]],
    ) -> list[RulesetEntity]:
        model = CATEGORY_MODELS[category]
        entities = []
        for record in records:
            try:
                entities.append(model.model_validate(record))
            except PydanticValidationError as e:
                raise DataLoadError(
                    f"Invalid {category} record {record.get('name')!r}",
                    details={"category": str(category), "errors": e.error_count()},
                ) from e
        return entities

    def _owner_supported(
        self,
        feature: ClassFeature | SubclassFeature,
        supported_classes: set[tuple[str, str]],
    ) -> bool:
        source = feature.class_source.upper()
        owner = (_normalize_name(feature.class_name), source)
        return owner in supported_classes or source == self.supported_source

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def filter_to_supported_edition(self, entities: Iterable[EntityT]) -> list[EntityT]:
        """Keep entities from the supported source or edition, in order."""
        return [
            entity
            for entity in entities
            if entity.source.upper() == self.supported_source
            or entity.edition == self.supported_edition
        ]

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def entities(self, category: EntityCategory | str) -> list[RulesetEntity]:
        """All retained entities of a category, in input order."""
        return list(self._entities[EntityCategory(category)])

    def races(self) -> list[Race]:
        return self._typed(EntityCategory.RACE, Race)

    def backgrounds(self) -> list[Background]:
        return self._typed(EntityCategory.BACKGROUND, Background)

    def feats(self) -> list[Feat]:
        return self._typed(EntityCategory.FEAT, Feat)

    def classes(self) -> list[CharacterClass]:
        return self._typed(EntityCategory.CLASS, CharacterClass)

    def spells(self) -> list[Spell]:
        return self._typed(EntityCategory.SPELL, Spell)

    def items(self) -> list[Item]:
        return self._typed(EntityCategory.ITEM, Item)

    def base_items(self) -> list[BaseItem]:
        return self._typed(EntityCategory.BASE_ITEM, BaseItem)

    def _typed(self, category: EntityCategory, model: type[EntityT]) -> list[EntityT]:
        return [e for e in self._entities[category] if isinstance(e, model)]

    # -------------------------------------------------------------------------
    # Key Lookups
    # -------------------------------------------------------------------------

    def resolve(self, category: EntityCategory | str, key: str) -> RulesetEntity:
        """Look up an entity by key.

        Args:
            category: Category to search.
            key: Entity key; case and whitespace are normalized.

        Returns:
            The matching entity.

        Raises:
            UnknownEntityError: If no retained entity has the key.
            ValidationError: If the key has no source separator.
        """
        category = EntityCategory(category)
        entity = self._by_key[category].get(_normalize_key(key))
        if entity is None:
            raise UnknownEntityError(
                f"No {category} with key {key!r}",
                key=key,
                category=str(category),
            )
        return entity

    def get_spell(self, key: str) -> Spell:
        return cast(Spell, self.resolve(EntityCategory.SPELL, key))

    def get_feat(self, key: str) -> Feat:
        return cast(Feat, self.resolve(EntityCategory.FEAT, key))

    def find_class(self, name_or_key: str) -> CharacterClass:
        """Find a class by key ('wizard|XPHB') or name ('Wizard').

        Raises:
            UnknownEntityError: If no retained class matches.
        """
        if KeyCodec.separator in name_or_key:
            return cast(CharacterClass, self.resolve(EntityCategory.CLASS, name_or_key))

        wanted = _normalize_name(name_or_key)
        for cls in self.classes():
            if _normalize_name(cls.name) == wanted:
                return cls
        raise UnknownEntityError(
            f"No class named {name_or_key!r}",
            key=name_or_key,
            category=str(EntityCategory.CLASS),
        )

    # -------------------------------------------------------------------------
    # Class Queries
    # -------------------------------------------------------------------------

    def class_names(self) -> list[str]:
        """Names of the retained classes, sorted."""
        return sorted(c.name for c in self.classes())

    def class_features_up_to(self, class_name: str, max_level: int) -> list[ClassFeature]:
        """Features of a class gained at or below a level, ordered by level.

        Args:
            class_name: Class name or key, matched case-insensitively.
            max_level: Highest level to include.
        """
        wanted = _normalize_name(class_name)
        features = [
            f
            for f in self._typed(EntityCategory.CLASS_FEATURE, ClassFeature)
            if _normalize_name(f.class_name) == wanted and f.level <= max_level
        ]
        return sorted(features, key=lambda f: f.level)

    def subclasses_for(self, class_name: str) -> list[Subclass]:
        wanted = _normalize_name(class_name)
        return [
            s
            for s in self._typed(EntityCategory.SUBCLASS, Subclass)
            if _normalize_name(s.class_name) == wanted
        ]

    def subclass_features_up_to(
        self,
        class_name: str,
        subclass_short_name: str,
        max_level: int,
    ) -> list[SubclassFeature]:
        """Features of a subclass gained at or below a level, ordered by level."""
        wanted_class = _normalize_name(class_name)
        wanted_subclass = subclass_short_name.strip().lower()
        features = [
            f
            for f in self._typed(EntityCategory.SUBCLASS_FEATURE, SubclassFeature)
            if _normalize_name(f.class_name) == wanted_class
            and f.subclass_short_name.lower() == wanted_subclass
            and f.level <= max_level
        ]
        return sorted(features, key=lambda f: f.level)

    def subclass_level(self, class_name: str) -> int:
        """Level at which a class picks its subclass.

        Raises:
            UnknownEntityError: If the class is not retained.
        """
        return self.find_class(class_name).subclass_level

    # -------------------------------------------------------------------------
    # Spell Queries
    # -------------------------------------------------------------------------

    def spells_for_class(self, class_name: str) -> list[Spell]:
        """Spells a class can learn (case-insensitive).

        A spell's own class list decides when it has one. Spells without
        one, as in the XPHB files, are looked up in the static class lists.
        """
        wanted = _normalize_name(class_name)
        fallback = spell_names_for_class(wanted)
        return [
            spell
            for spell in self.spells()
            if (
                any(_normalize_name(name) == wanted for name in spell.class_names)
                if spell.class_names
                else spell.name.lower() in fallback
            )
        ]

    def spells_by_level(self, level: int, spells: Sequence[Spell] | None = None) -> list[Spell]:
        """Spells of one level, from the whole index or a given subset."""
        pool = self.spells() if spells is None else spells
        return [spell for spell in pool if spell.level == level]

    def cantrips(self) -> list[Spell]:
        return self.spells_by_level(0)


__all__ = [
    "RulesetIndex",
]
