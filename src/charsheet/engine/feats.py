"""Feat prerequisites and feat ability score increases.

Feats come from the reference index as Feat records whose ``prerequisite``
and ``ability`` blocks keep the 5etools shape:

    prerequisite: [{"level": 4, "ability": [{"str": 13, "dex": 13}]}]
    ability: [{"cha": 1}, {"choose": {"from": ["str", "dex"], "amount": 1}}]

Example:
    >>> grappler = Feat(name="Grappler", source="XPHB",
    ...                 prerequisite=[{"level": 4, "ability": [{"str": 13, "dex": 13}]}])
    >>> check_prerequisites(grappler, level=1, ability_scores={Ability.STR: 10})
    ['Requires level 4 (you are level 1)', 'Requires Strength 13 or Dexterity 13']
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from charsheet.core.constants import MAX_ABILITY_SCORE
from charsheet.core.exceptions import ValidationError
from charsheet.core.logging import get_logger
from charsheet.models.entities import Feat
from charsheet.models.enums import Ability


logger = get_logger(__name__)

AbilityScores = Mapping[Ability | str, int]

FEAT_CATEGORIES: dict[str, str] = {
    "G": "General",
    "O": "Origin",
    "FS": "Fighting Style",
    "EB": "Epic Boon",
}


def coerce_ability(value: Ability | str) -> Ability:
    """Resolve an ability from the enum, its name or its 5etools code.

    Raises:
        ValidationError: If the value names no ability.
    """
    if isinstance(value, Ability):
        return value
    text = str(value).strip()
    try:
        return Ability(text.lower())
    except ValueError:
        pass
    try:
        return Ability[text.upper()]
    except KeyError:
        raise ValidationError(
            f"Unknown ability {value!r}",
            field_name="ability",
            invalid_value=value,
        ) from None


def category_label(feat: Feat) -> str:
    """Display label of a feat's first category, 'Unknown' if unlisted."""
    code = feat.category[0] if feat.category else "G"
    return FEAT_CATEGORIES.get(code, "Unknown")


# =============================================================================
# Prerequisites
# =============================================================================


def _required_level(requirement: Any) -> int | None:
    if isinstance(requirement, dict):
        requirement = requirement.get("level")
    return requirement if isinstance(requirement, int) else None


def _ability_reason(requirement: Mapping[str, int], scores: AbilityScores) -> str | None:
    """Reason an ability requirement is unmet; any listed score satisfies it."""
    options = [(coerce_ability(code), minimum) for code, minimum in requirement.items()]
    if not options:
        return None
    if any(scores.get(ability, 0) >= minimum for ability, minimum in options):
        return None
    if len(options) == 1:
        ability, minimum = options[0]
        return f"Requires {ability.full_name} {minimum} (you have {scores.get(ability, 0)})"
    wanted = " or ".join(f"{ability.full_name} {minimum}" for ability, minimum in options)
    return f"Requires {wanted}"


def _summary(other: Any) -> str | None:
    if isinstance(other, dict):
        return other.get("entrySummary") or other.get("entry")
    return other or None


def check_prerequisites(
    feat: Feat,
    *,
    level: int,
    ability_scores: AbilityScores,
    features: Iterable[str] = (),
) -> list[str]:
    """List the reasons a character cannot take a feat.

    Args:
        feat: The feat record.
        level: Total character level.
        ability_scores: Current scores keyed by ability.
        features: Names of features the character has (e.g. 'Fighting Style').

    Returns:
        Human-readable reasons, empty when every prerequisite is met.
        Free-text prerequisites are always listed for the player to check.
    """
    held = {name.strip().lower() for name in features}
    reasons: list[str] = []
    for prerequisite in feat.prerequisite or []:
        required = _required_level(prerequisite.get("level"))
        if required is not None and level < required:
            reasons.append(f"Requires level {required} (you are level {level})")

        for requirement in prerequisite.get("ability", []):
            reason = _ability_reason(requirement, ability_scores)
            if reason:
                reasons.append(reason)

        missing = [f for f in prerequisite.get("feature", []) if f.lower() not in held]
        if missing:
            reasons.append(f"Requires: {', '.join(missing)}")

        summary = _summary(prerequisite.get("otherSummary"))
        if summary:
            reasons.append(summary)

    if reasons:
        logger.debug("Feat prerequisites unmet", feat=feat.name, reasons=reasons)
    return reasons


def meets_prerequisites(feat: Feat, *, level: int, ability_scores: AbilityScores) -> bool:
    return not check_prerequisites(feat, level=level, ability_scores=ability_scores)


def format_prerequisites(feat: Feat) -> str:
    """Readable prerequisite text, e.g. ``'Level 4, STR 13 or DEX 13'``."""
    parts = []
    for prerequisite in feat.prerequisite or []:
        pieces = []
        required = _required_level(prerequisite.get("level"))
        if required is not None:
            pieces.append(f"Level {required}")
        for requirement in prerequisite.get("ability", []):
            pieces.append(
                " or ".join(f"{code.upper()} {minimum}" for code, minimum in requirement.items())
            )
        pieces.extend(prerequisite.get("feature", []))
        summary = _summary(prerequisite.get("otherSummary"))
        if summary:
            pieces.append(summary)
        if pieces:
            parts.append(", ".join(pieces))
    return " or ".join(parts) or "None"


# =============================================================================
# Ability Score Increases
# =============================================================================


def choosable_abilities(feat: Feat) -> dict[str, Any] | None:
    """The first visible ``choose`` block of a feat, or None."""
    for bonus in feat.ability:
        if "choose" in bonus and not bonus.get("hidden"):
            return bonus["choose"]
    return None


def apply_feat_ability_bonus(
    feat: Feat,
    scores: AbilityScores,
    chosen: Iterable[Ability | str] = (),
) -> dict[Ability, int]:
    """Apply a feat's ability score increases.

    Fixed increases always apply; a ``choose`` block applies its amount to
    each ability in ``chosen``. Hidden blocks are skipped. No score is
    raised above 20, and scores already above 20 are left unchanged.

    Args:
        feat: The feat record.
        scores: Current scores keyed by ability.
        chosen: Abilities picked for the feat's ``choose`` block.

    Returns:
        A new mapping of each ability in ``scores`` (and any the feat
        raises) to its updated value.

    Raises:
        ValidationError: If a chosen ability is not offered, or more are
            chosen than the feat allows.
    """
    updated = {coerce_ability(ability): score for ability, score in scores.items()}
    picks = [coerce_ability(ability) for ability in chosen]

    def increase(ability: Ability, amount: int) -> None:
        current = updated.get(ability, 0)
        updated[ability] = max(current, min(MAX_ABILITY_SCORE, current + amount))

    for bonus in feat.ability:
        if bonus.get("hidden"):
            continue
        for code, amount in bonus.items():
            if code not in ("choose", "hidden") and isinstance(amount, int):
                increase(coerce_ability(code), amount)

    if picks:
        choose = choosable_abilities(feat)
        offered = {coerce_ability(code) for code in choose.get("from", [])} if choose else set()
        allowed = choose.get("count", 1) if choose else 0
        invalid = [ability for ability in picks if ability not in offered]
        if invalid or len(picks) > allowed:
            logger.warning("Feat ability choice rejected", feat=feat.name, chosen=picks)
            raise ValidationError(
                f"Invalid ability choice for {feat.name}",
                field_name="chosen",
                invalid_value=[str(a) for a in picks],
            )
        for ability in picks:
            increase(ability, choose.get("amount", 1))

    return updated


__all__ = [
    "FEAT_CATEGORIES",
    "coerce_ability",
    "category_label",
    "check_prerequisites",
    "meets_prerequisites",
    "format_prerequisites",
    "choosable_abilities",
    "apply_feat_ability_bonus",
]
