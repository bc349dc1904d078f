"""Tests for class feature choices."""

from __future__ import annotations

from charsheet.engine.feature_choices import (
    FeatureChoice,
    feature_choices_for,
    new_feature_choices_at,
    validate_feature_choices,
)


MANEUVERS_KEY = "combat_superiority_maneuvers"


class TestFeatureChoices:
    """Tests for looking up feature choices."""

    def test_choice_key(self) -> None:
        """Test storage keys are derived from feature names."""
        additional = FeatureChoice("Fighting Style (Additional)", 10, ())

        assert additional.key == "fighting_style_additional"
        assert FeatureChoice("Combat Superiority: Maneuvers", 3, ()).key == MANEUVERS_KEY

    def test_class_and_subclass_choices(self) -> None:
        """Test subclass choices follow class choices, up to the level."""
        choices = feature_choices_for("fighter|XPHB", 7, "Battle Master")

        assert [(c.feature_name, c.level) for c in choices] == [
            ("Fighting Style", 1),
            ("Combat Superiority: Maneuvers", 3),
            ("Maneuvers (Additional)", 7),
        ]

    def test_unknown_class_has_no_choices(self) -> None:
        """Test classes without choices return nothing."""
        assert feature_choices_for("Monk", 20) == []

    def test_new_choices_at_level(self) -> None:
        """Test only choices unlocking at exactly that level are returned."""
        choices = new_feature_choices_at("Warlock", 3)

        assert [c.feature_name for c in choices] == ["Pact Boon"]

    def test_paladin_styles_are_restricted(self) -> None:
        """Test paladins cannot pick ranged fighting styles."""
        (style,) = feature_choices_for("Paladin", 2)

        assert "archery" not in style.options
        assert "defense" in style.options


class TestValidateFeatureChoices:
    """Tests for validate_feature_choices."""

    def test_all_made(self) -> None:
        """Test complete choices report nothing missing."""
        choices = {
            "fighting_style": "defense",
            MANEUVERS_KEY: ["parry", "riposte", "trip-attack"],
        }

        assert validate_feature_choices("Fighter", 3, "Battle Master", choices) == []

    def test_missing_choice(self) -> None:
        """Test an unmade choice is named."""
        choices = {"fighting_style": "defense"}

        missing = validate_feature_choices("Fighter", 3, "Battle Master", choices)

        assert missing == ["Combat Superiority: Maneuvers"]

    def test_too_few_picks(self) -> None:
        """Test the number of further picks needed is reported."""
        missing = validate_feature_choices("Sorcerer", 3, None, {"metamagic": ["quickened-spell"]})

        assert missing == ["Metamagic (need 1 more)"]

    def test_single_pick_counts_as_one(self) -> None:
        """Test a bare string counts as one pick."""
        missing = validate_feature_choices("Rogue", 1, None, {"expertise": "stealth"})

        assert missing == ["Expertise (need 1 more)"]

    def test_unknown_option(self) -> None:
        """Test picks outside the option list are reported."""
        missing = validate_feature_choices("Fighter", 1, None, {"fighting_style": "berserking"})

        assert missing == ["Fighting Style (unknown option: berserking)"]

    def test_level_gates_choices(self) -> None:
        """Test choices above the level are not required."""
        assert validate_feature_choices("Warlock", 1, None, {}) == []
        assert validate_feature_choices("Warlock", 2, None, {}) == ["Eldritch Invocation"]
