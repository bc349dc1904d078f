"""Tests for feat prerequisites and ability score increases."""

from __future__ import annotations

import pytest

from charsheet.core.exceptions import ValidationError
from charsheet.engine.feats import (
    apply_feat_ability_bonus,
    category_label,
    check_prerequisites,
    choosable_abilities,
    coerce_ability,
    format_prerequisites,
    meets_prerequisites,
)
from charsheet.models.entities import Feat
from charsheet.models.enums import Ability


@pytest.fixture
def grappler() -> Feat:
    """Provide a feat with level and either-or ability prerequisites."""
    return Feat.model_validate(
        {
            "name": "Grappler",
            "source": "XPHB",
            "category": ["G"],
            "prerequisite": [{"level": 4, "ability": [{"str": 13, "dex": 13}]}],
            "ability": [{"choose": {"from": ["str", "dex"], "amount": 1}}],
        }
    )


@pytest.fixture
def actor() -> Feat:
    """Provide a feat with a single ability prerequisite and a fixed increase."""
    return Feat.model_validate(
        {
            "name": "Actor",
            "source": "PHB",
            "prerequisite": [{"ability": [{"cha": 13}]}],
            "ability": [{"cha": 1}],
        }
    )


class TestCheckPrerequisites:
    """Tests for check_prerequisites."""

    def test_no_prerequisites(self) -> None:
        """Test a feat without prerequisites is always available."""
        alert = Feat(name="Alert", source="XPHB")

        assert check_prerequisites(alert, level=1, ability_scores={}) == []
        assert format_prerequisites(alert) == "None"

    def test_all_met(self, grappler: Feat, sample_ability_scores: dict[Ability, int]) -> None:
        """Test a character meeting every requirement gets no reasons."""
        assert check_prerequisites(grappler, level=4, ability_scores=sample_ability_scores) == []
        assert meets_prerequisites(grappler, level=4, ability_scores=sample_ability_scores)

    def test_level_too_low(self, grappler: Feat, sample_ability_scores: dict[Ability, int]) -> None:
        """Test the level requirement is reported with the current level."""
        reasons = check_prerequisites(grappler, level=3, ability_scores=sample_ability_scores)

        assert reasons == ["Requires level 4 (you are level 3)"]

    def test_either_ability_satisfies(self, grappler: Feat) -> None:
        """Test one qualifying score among alternatives is enough."""
        scores = {Ability.STR: 8, Ability.DEX: 13}

        assert check_prerequisites(grappler, level=4, ability_scores=scores) == []

    def test_no_ability_alternative_met(self, grappler: Feat) -> None:
        """Test every alternative is named when none is met."""
        scores = {Ability.STR: 12, Ability.DEX: 12}

        assert check_prerequisites(grappler, level=4, ability_scores=scores) == [
            "Requires Strength 13 or Dexterity 13"
        ]

    def test_single_ability_shows_current_score(self, actor: Feat) -> None:
        """Test a single ability requirement reports the current score."""
        reasons = check_prerequisites(actor, level=1, ability_scores={"charisma": 8})

        assert reasons == ["Requires Charisma 13 (you have 8)"]

    def test_feature_and_free_text(self) -> None:
        """Test feature and free-text prerequisites are listed."""
        feat = Feat.model_validate(
            {
                "name": "Defense",
                "source": "XPHB",
                "prerequisite": [
                    {
                        "feature": ["Fighting Style"],
                        "otherSummary": {"entrySummary": "Spellcasting feature"},
                    }
                ],
            }
        )

        assert check_prerequisites(feat, level=1, ability_scores={}) == [
            "Requires: Fighting Style",
            "Spellcasting feature",
        ]
        assert check_prerequisites(
            feat, level=1, ability_scores={}, features=["fighting style"]
        ) == ["Spellcasting feature"]

    def test_format_prerequisites(self, grappler: Feat) -> None:
        """Test prerequisites render as readable text."""
        assert format_prerequisites(grappler) == "Level 4, STR 13 or DEX 13"


class TestApplyFeatAbilityBonus:
    """Tests for apply_feat_ability_bonus."""

    def test_fixed_increase(self, actor: Feat, sample_ability_scores: dict[Ability, int]) -> None:
        """Test a fixed increase is applied to a copy of the scores."""
        updated = apply_feat_ability_bonus(actor, sample_ability_scores)

        assert updated[Ability.CHA] == 9
        assert sample_ability_scores[Ability.CHA] == 8

    @pytest.mark.parametrize(("score", "expected"), [(19, 20), (20, 20), (22, 22)])
    def test_capped_at_twenty(self, actor: Feat, score: int, expected: int) -> None:
        """Test increases stop at 20 and never lower a score."""
        assert apply_feat_ability_bonus(actor, {Ability.CHA: score})[Ability.CHA] == expected

    def test_hidden_bonus_skipped(self) -> None:
        """Test hidden increases are not applied."""
        feat = Feat.model_validate(
            {
                "name": "Ability Score Improvement",
                "source": "XPHB",
                "ability": [{"str": 2, "hidden": True}],
            }
        )

        assert apply_feat_ability_bonus(feat, {Ability.STR: 14}) == {Ability.STR: 14}

    def test_chosen_ability(self, grappler: Feat) -> None:
        """Test a choose block raises the chosen ability."""
        updated = apply_feat_ability_bonus(grappler, {"str": 15, "dex": 12}, chosen=["dex"])

        assert updated == {Ability.STR: 15, Ability.DEX: 13}
        assert choosable_abilities(grappler) == {"from": ["str", "dex"], "amount": 1}

    @pytest.mark.parametrize("chosen", [["wis"], ["str", "dex"]])
    def test_invalid_choice(self, grappler: Feat, chosen: list[str]) -> None:
        """Test abilities not offered, or too many, are rejected."""
        with pytest.raises(ValidationError):
            apply_feat_ability_bonus(grappler, {"str": 15}, chosen=chosen)


class TestFeatHelpers:
    """Tests for ability and category helpers."""

    @pytest.mark.parametrize("value", [Ability.DEX, "dex", "DEX", "Dexterity"])
    def test_coerce_ability(self, value: Ability | str) -> None:
        """Test abilities resolve from the enum, names and codes."""
        assert coerce_ability(value) is Ability.DEX

    def test_coerce_unknown_ability(self) -> None:
        """Test unknown abilities are rejected."""
        with pytest.raises(ValidationError):
            coerce_ability("luck")

    def test_category_label(self, grappler: Feat) -> None:
        """Test category codes map to labels."""
        assert category_label(grappler) == "General"
        assert category_label(Feat(name="Odd", source="XPHB", category=["ZZ"])) == "Unknown"
