"""Pytest configuration and shared fixtures.

This module provides common fixtures for the charsheet test suite:
settings isolation, seeded and scripted dice rollers, and a small
5etools-style reference data set covering both supported (XPHB) and
legacy (PHB) records.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

import pytest

from charsheet.engine.dice import DiceRoller
from charsheet.models.enums import Ability
from charsheet.rules.index import RulesetIndex


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from charsheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "CHARSHEET_DEBUG": "true",
        "CHARSHEET_LOG_LEVEL": "DEBUG",
        "CHARSHEET_RULESET_SUPPORTED_SOURCE": "xdmg",
        "CHARSHEET_DICE_SEED": "1234",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Dice Fixtures
# =============================================================================


class ScriptedRandom:
    """Random source that replays a fixed sequence of draws."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self._values:
            msg = "ScriptedRandom ran out of values"
            raise AssertionError(msg)
        return self._values.pop(0)


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded dice roller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def scripted_roller() -> Callable[..., DiceRoller]:
    """Provide a factory for rollers that return the given draws in order.

    Example:
        roller = scripted_roller(2, 5, 6, 1)
    """

    def factory(*values: int) -> DiceRoller:
        return DiceRoller(random_source=ScriptedRandom(values))

    return factory


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> dict[Ability, int]:
    """Provide sample character ability scores.

    Returns:
        Dictionary of ability scores.
    """
    return {
        Ability.STR: 16,
        Ability.DEX: 14,
        Ability.CON: 15,
        Ability.INT: 10,
        Ability.WIS: 12,
        Ability.CHA: 8,
    }


# =============================================================================
# Reference Data Fixtures
# =============================================================================


def _fighter_class() -> dict[str, Any]:
    return {
        "name": "Fighter",
        "source": "XPHB",
        "edition": "one",
        "hd": {"number": 1, "faces": 10},
        "proficiency": ["str", "con"],
        "classFeatures": [
            "Fighting Style|Fighter|XPHB|1",
            "Second Wind|Fighter|XPHB|1",
            "Action Surge|Fighter|XPHB|2",
            {"classFeature": "Fighter Subclass|Fighter|XPHB|3", "gainSubclassFeature": True},
            "Extra Attack|Fighter|XPHB|5",
        ],
        "subclassTitle": "Fighter Subclass",
    }


def _sample_collections() -> dict[str, list[dict[str, Any]]]:
    return {
        "race": [
            {"name": "Human", "source": "XPHB", "size": ["M"], "speed": 30},
            {"name": "Human", "source": "PHB", "speed": 30},
            {"name": "Dwarf", "source": "PHB", "edition": "one", "speed": {"walk": 30}},
            {"name": "Elf", "source": "PHB", "edition": "classic", "speed": 30},
        ],
        "background": [
            {"name": "Acolyte", "source": "XPHB"},
            {"name": "Acolyte", "source": "PHB"},
        ],
        "feat": [
            {"name": "Alert", "source": "XPHB", "category": ["O"]},
            {"name": "Alert", "source": "PHB"},
            {
                "name": "Great Weapon Master",
                "source": "XPHB",
                "category": ["G"],
                "prerequisite": [{"level": 4}],
            },
        ],
        "class": [
            _fighter_class(),
            {"name": "Fighter", "source": "PHB", "hd": {"number": 1, "faces": 10}},
            {
                "name": "Wizard",
                "source": "XPHB",
                "edition": "one",
                "hd": {"number": 1, "faces": 6},
                "spellcastingAbility": "int",
                "casterProgression": "full",
                "classFeatures": [
                    "Arcane Recovery|Wizard|XPHB|1",
                    {"classFeature": "Wizard Subclass|Wizard|XPHB|3", "gainSubclassFeature": True},
                ],
            },
            {
                "name": "Cleric",
                "source": "XPHB",
                "edition": "one",
                "hd": {"number": 1, "faces": 8},
                "spellcastingAbility": "wis",
                "classFeatures": ["Divine Order|Cleric|XPHB|1"],
            },
        ],
        "subclass": [
            {
                "name": "Battle Master",
                "shortName": "Battle Master",
                "source": "XPHB",
                "className": "Fighter",
                "classSource": "XPHB",
            },
            {
                "name": "Champion",
                "shortName": "Champion",
                "source": "XPHB",
                "className": "Fighter",
                "classSource": "XPHB",
            },
            {
                "name": "Battle Master",
                "shortName": "Battle Master",
                "source": "PHB",
                "className": "Fighter",
                "classSource": "PHB",
            },
            {
                "name": "Evoker",
                "shortName": "Evoker",
                "source": "XPHB",
                "className": "Wizard",
                "classSource": "XPHB",
            },
        ],
        "classFeature": [
            {"name": "Action Surge", "source": "XPHB", "className": "Fighter", "classSource": "XPHB", "level": 2},
            {"name": "Fighting Style", "source": "XPHB", "className": "Fighter", "classSource": "XPHB", "level": 1},
            {"name": "Second Wind", "source": "XPHB", "className": "Fighter", "classSource": "XPHB", "level": 1},
            {"name": "Extra Attack", "source": "XPHB", "className": "Fighter", "classSource": "XPHB", "level": 5},
            {"name": "Fighting Style", "source": "PHB", "className": "Fighter", "classSource": "PHB", "level": 1},
            {"name": "Arcane Recovery", "source": "XPHB", "className": "Wizard", "classSource": "XPHB", "level": 1},
        ],
        "subclassFeature": [
            {
                "name": "Combat Superiority",
                "source": "XPHB",
                "className": "Fighter",
                "classSource": "XPHB",
                "subclassShortName": "Battle Master",
                "subclassSource": "XPHB",
                "level": 3,
            },
            {
                "name": "Know Your Enemy",
                "source": "XPHB",
                "className": "Fighter",
                "classSource": "XPHB",
                "subclassShortName": "Battle Master",
                "subclassSource": "XPHB",
                "level": 7,
            },
            {
                "name": "Improved Critical",
                "source": "XPHB",
                "className": "Fighter",
                "classSource": "XPHB",
                "subclassShortName": "Champion",
                "subclassSource": "XPHB",
                "level": 3,
            },
            {
                "name": "Combat Superiority",
                "source": "PHB",
                "className": "Fighter",
                "classSource": "PHB",
                "subclassShortName": "Battle Master",
                "subclassSource": "PHB",
                "level": 3,
            },
        ],
        "spell": [
            {
                "name": "Fire Bolt",
                "source": "XPHB",
                "level": 0,
                "school": "V",
                "classes": {
                    "fromClassList": [
                        {"name": "Sorcerer", "source": "XPHB"},
                        {"name": "Wizard", "source": "XPHB"},
                    ]
                },
            },
            {
                "name": "Magic Missile",
                "source": "XPHB",
                "level": 1,
                "school": "V",
                "classes": {"fromClassList": [{"name": "Wizard", "source": "XPHB"}]},
            },
            {
                "name": "Cure Wounds",
                "source": "XPHB",
                "level": 1,
                "school": "A",
                "classes": {"fromClassList": [{"name": "Cleric", "source": "XPHB"}]},
            },
            {"name": "Fireball", "source": "PHB", "level": 3, "school": "V"},
        ],
        "item": [
            {"name": "Bag of Holding", "source": "XDMG", "type": "W", "rarity": "uncommon"},
            {
                "name": "Cloak of Protection",
                "source": "XDMG",
                "rarity": "uncommon",
                "reqAttune": True,
            },
        ],
        "baseitem": [
            {"name": "Longsword", "source": "XPHB", "type": "M|XPHB", "rarity": "none"},
        ],
    }


@pytest.fixture
def sample_collections() -> dict[str, list[dict[str, Any]]]:
    """Provide raw reference collections with XPHB and PHB records."""
    return _sample_collections()


@pytest.fixture
def ruleset_index(sample_collections: dict[str, list[dict[str, Any]]]) -> RulesetIndex:
    """Provide an index of the sample collections filtered to XPHB."""
    return RulesetIndex(sample_collections)


@pytest.fixture
def reference_data_dir(
    tmp_path: Path,
    sample_collections: dict[str, list[dict[str, Any]]],
) -> Path:
    """Write the sample collections as 5etools files.

    Args:
        tmp_path: Pytest temporary path fixture.
        sample_collections: Raw reference collections.

    Returns:
        Directory containing the JSON files.
    """
    data_dir = tmp_path / "5etools"
    data_dir.mkdir()

    files = {
        "races.json": {"race": sample_collections["race"]},
        "backgrounds.json": {"background": sample_collections["background"]},
        "feats.json": {"feat": sample_collections["feat"]},
        "spells-xphb.json": {"spell": sample_collections["spell"]},
        "items.json": {"item": sample_collections["item"]},
        "items-base.json": {"baseitem": sample_collections["baseitem"]},
    }
    for class_name in ("Fighter", "Wizard", "Cleric"):
        files[f"class-{class_name.lower()}.json"] = {
            "class": [c for c in sample_collections["class"] if c["name"] == class_name],
            "subclass": [
                s for s in sample_collections["subclass"] if s["className"] == class_name
            ],
            "classFeature": [
                f for f in sample_collections["classFeature"] if f["className"] == class_name
            ],
            "subclassFeature": [
                f for f in sample_collections["subclassFeature"] if f["className"] == class_name
            ],
        }

    for name, payload in files.items():
        (data_dir / name).write_text(json.dumps(payload), encoding="utf-8")
    return data_dir
