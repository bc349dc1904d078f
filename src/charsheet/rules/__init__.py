"""Reference data: entity keys, the edition-filtered index and the file loader."""

from __future__ import annotations

from charsheet.rules.keys import EntityKey, KeyCodec, build_key, parse_key
from charsheet.rules.index import RulesetIndex
from charsheet.rules.loader import DATA_FILE_PATTERNS, build_index, load_reference_data
from charsheet.rules.spell_lists import (
    CLASS_SPELL_LISTS,
    is_spell_available_to_class,
    spell_names_for_class,
)


__all__ = [
    "EntityKey",
    "KeyCodec",
    "build_key",
    "parse_key",
    "RulesetIndex",
    "DATA_FILE_PATTERNS",
    "build_index",
    "load_reference_data",
    "CLASS_SPELL_LISTS",
    "spell_names_for_class",
    "is_spell_available_to_class",
]
