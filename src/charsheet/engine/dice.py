"""Dice notation parsing and rolling for D&D 5E.

Supports the single-group notation used on a character sheet: an optional
count, ``d``, the die faces, an optional keep-clause (``kh3`` / ``kl1``)
and an optional signed modifier, e.g. ``1d20+5``, ``4d6kh3``, ``d8-1``.

Parsing and evaluation go through the d20 library. Notation d20 accepts
but a sheet formula does not (nested sets, rerolls, arithmetic between
dice groups) is rejected after parsing.

Example:
    >>> roller = DiceRoller(seed=7)
    >>> outcome = roller.roll_from_text("4d6kh3", label="Strength")
    >>> outcome.total == sum(r.result for r in outcome.rolls if r.kept)
    True
"""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

import d20
from d20 import diceast

from charsheet.core.constants import ABILITY_SCORE_FORMULA, CRITICAL_DIE, DICE_TYPES, MAX_DICE
from charsheet.core.exceptions import InvalidFormulaError
from charsheet.core.logging import get_logger
from charsheet.engine.abilities import ability_modifier, format_modifier
from charsheet.models.enums import KeepMode


if TYPE_CHECKING:
    from charsheet.core.config import Settings


logger = get_logger(__name__)

_KEEP_MODES = {KeepMode.HIGHEST.code: KeepMode.HIGHEST, KeepMode.LOWEST.code: KeepMode.LOWEST}


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in ``[a, b]``.

    ``random.Random`` satisfies this; tests pass scripted sources.
    """

    def randint(self, a: int, b: int) -> int: ...


class RollType(StrEnum):
    """Types of d20 rolls."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


# =============================================================================
# Parsed Formula
# =============================================================================


@dataclass(frozen=True)
class KeepRule:
    """Keep-clause of a formula.

    Attributes:
        mode: Keep the highest or the lowest dice.
        count: Number of dice kept.
    """

    mode: KeepMode
    count: int


@dataclass(frozen=True)
class DiceFormula:
    """A parsed dice formula.

    Attributes:
        count: Number of dice rolled (at least 1).
        die: Faces per die, one of the standard dice.
        modifier: Static modifier added to the kept dice.
        keep: Optional keep-highest/lowest rule, keeping 1 to ``count`` dice.

    Raises:
        InvalidFormulaError: On construction with any of the above violated.
    """

    count: int
    die: int
    modifier: int = 0
    keep: KeepRule | None = None

    def __post_init__(self) -> None:
        if self.count < 1:
            raise InvalidFormulaError("Dice count must be positive", expression=self.notation)
        if self.die not in DICE_TYPES:
            raise InvalidFormulaError(
                f"Unsupported die d{self.die}",
                expression=self.notation,
                details={"allowed": list(DICE_TYPES)},
            )
        if self.keep is not None and not 1 <= self.keep.count <= self.count:
            raise InvalidFormulaError(
                f"Cannot keep {self.keep.count} of {self.count} dice",
                expression=self.notation,
            )

    @property
    def notation(self) -> str:
        """Canonical notation, e.g. ``'4d6kh3'`` or ``'1d20+5'``."""
        text = f"{self.count}d{self.die}"
        if self.keep is not None:
            text += f"k{self.keep.mode.code}{self.keep.count}"
        if self.modifier:
            text += f"{self.modifier:+d}"
        return text

    def __str__(self) -> str:
        return self.notation


def _keep_rule(operations: Sequence[Any], text: str) -> KeepRule:
    """Translate d20 set operations into a single keep-highest/lowest rule."""
    if len(operations) != 1:
        raise InvalidFormulaError("Only one keep-clause is allowed", expression=text)
    (operation,) = operations
    if operation.op != "k" or len(operation.sels) != 1:
        raise InvalidFormulaError("Only kh/kl keep-clauses are supported", expression=text)
    (selector,) = operation.sels
    if selector.cat not in _KEEP_MODES or not isinstance(selector.num, int):
        raise InvalidFormulaError("Only kh/kl keep-clauses are supported", expression=text)
    return KeepRule(mode=_KEEP_MODES[selector.cat], count=selector.num)


def parse_formula(text: str, *, max_dice: int = MAX_DICE) -> DiceFormula:
    """Parse dice notation into a DiceFormula.

    Matching is case-insensitive and ignores all whitespace.

    Args:
        text: Dice notation such as ``'2d6+3'`` or ``'2d20kh1'``.
        max_dice: Most dice the formula may roll.

    Returns:
        The parsed formula.

    Raises:
        InvalidFormulaError: If d20 cannot parse the text, the text is not
            a single dice group with an optional keep-clause and whole-number
            modifier, the count is not positive or above ``max_dice``, the
            die is non-standard, or the keep count is zero or exceeds the count.
    """
    if not text or not text.strip():
        raise InvalidFormulaError("Empty dice expression", expression=text)

    cleaned = "".join(text.split()).lower()
    try:
        node = d20.parse(cleaned).roll
    except d20.RollError as e:
        raise InvalidFormulaError("Unrecognised dice notation", expression=text) from e

    modifier = 0
    if isinstance(node, diceast.BinOp):
        right = node.right
        if node.op not in ("+", "-") or not (
            isinstance(right, diceast.Literal) and isinstance(right.value, int)
        ):
            raise InvalidFormulaError("Modifier must be a whole number", expression=text)
        modifier = right.value if node.op == "+" else -right.value
        node = node.left

    keep = None
    if isinstance(node, diceast.OperatedDice):
        keep = _keep_rule(node.operations, text)
        node = node.value

    if not isinstance(node, diceast.Dice) or not isinstance(node.size, int):
        raise InvalidFormulaError("Unrecognised dice notation", expression=text)
    if node.num > max_dice:
        raise InvalidFormulaError(
            f"Cannot roll more than {max_dice} dice",
            expression=text,
            details={"max_dice": max_dice},
        )

    return DiceFormula(count=node.num, die=node.size, modifier=modifier, keep=keep)




# =============================================================================
# Roll Results
# =============================================================================


@dataclass(frozen=True)
class SingleRollResult:
    """One die of a roll.

    Attributes:
        die: Faces of the die.
        result: Face rolled, in ``[1, die]``.
        kept: Whether the die counts toward the total.
        is_critical: Natural 20 on a d20, whether or not it was kept.
        is_fumble: Natural 1 on a d20, whether or not it was kept.
    """

    die: int
    result: int
    kept: bool = True
    is_critical: bool = False
    is_fumble: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.result <= self.die:
            msg = f"Die result {self.result} outside 1..{self.die}"
            raise ValueError(msg)


@dataclass(frozen=True)
class RollOutcome:
    """The evaluated result of a formula.

    Attributes:
        formula_text: The notation as supplied by the caller.
        formula: The parsed formula.
        rolls: Every die rolled, in roll order.
        modifier: Static modifier applied.
        total: Sum of kept dice plus the modifier.
        label: Optional caller label (e.g. 'Perception').
        timestamp: When the roll was made (UTC).
    """

    formula_text: str
    formula: DiceFormula
    rolls: tuple[SingleRollResult, ...]
    modifier: int
    total: int
    label: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def kept_results(self) -> list[int]:
        """Faces of the kept dice, in roll order."""
        return [r.result for r in self.rolls if r.kept]

    @property
    def has_critical(self) -> bool:
        return has_critical(self)

    @property
    def has_fumble(self) -> bool:
        return has_fumble(self)


def has_critical(outcome: RollOutcome) -> bool:
    """Check whether any kept die is a natural 20 on a d20."""
    return any(r.is_critical and r.kept for r in outcome.rolls)


def has_fumble(outcome: RollOutcome) -> bool:
    """Check whether any kept die is a natural 1 on a d20."""
    return any(r.is_fumble and r.kept for r in outcome.rolls)


def format_roll_result(outcome: RollOutcome) -> str:
    """Format an outcome for display.

    Criticals are wrapped in ``**``, fumbles in ``~~`` and dropped dice in
    parentheses.

    Example:
        >>> format_roll_result(outcome)  # doctest: +SKIP
        '[**20** + (3)] + 5 = 25'
    """
    parts = []
    for r in outcome.rolls:
        if r.is_critical:
            parts.append(f"**{r.result}**")
        elif r.is_fumble:
            parts.append(f"~~{r.result}~~")
        elif not r.kept:
            parts.append(f"({r.result})")
        else:
            parts.append(str(r.result))

    text = f"[{' + '.join(parts)}]"
    if outcome.modifier > 0:
        text += f" + {outcome.modifier}"
    elif outcome.modifier < 0:
        text += f" - {abs(outcome.modifier)}"
    return f"{text} = {outcome.total}"


# =============================================================================
# Roller
# =============================================================================


class _SourcedRoller(d20.Roller):
    """d20 roller drawing every die face from an injected random source."""

    def __init__(self, source: RandomSource) -> None:
        super().__init__()
        self._source = source

    def _eval_dice(self, node: diceast.Dice) -> d20.Dice:
        faces = []
        for _ in range(node.num):
            self.context.count_roll()
            value = self._source.randint(1, node.size)
            faces.append(d20.Die(node.size, [d20.Literal(value)], context=self.context))
        return d20.Dice(node.num, node.size, faces, context=self.context)


def _find_dice(node: Any) -> d20.Dice | None:
    """Depth-first search of a d20 result tree for its dice group."""
    if isinstance(node, d20.Dice):
        return node
    for child in getattr(node, "children", ()):
        found = _find_dice(child)
        if found is not None:
            return found
    return None


def _first_rolled_wins(faces: Sequence[int], kept: Sequence[bool]) -> list[bool]:
    """Reassign kept flags so that among equal faces the earliest rolled is kept.

    The kept multiset (and therefore the total) is unchanged.
    """
    remaining = Counter(face for face, is_kept in zip(faces, kept, strict=True) if is_kept)
    flags = []
    for face in faces:
        flags.append(remaining[face] > 0)
        remaining[face] -= 1
    return flags


class DiceRoller:
    """Evaluates dice formulas against a random source.

    Example:
        >>> roller = DiceRoller()
        >>> result = roller.roll_from_text("1d20+5")
        >>> print(f"Total: {result.total}")
    """

    def __init__(
        self,
        *,
        random_source: RandomSource | None = None,
        seed: int | None = None,
        max_dice: int = MAX_DICE,
        ability_score_sets: int = 6,
    ) -> None:
        """Initialize the dice roller.

        Args:
            random_source: Source of uniform integers, called once per die.
                Defaults to a ``random.Random`` seeded with ``seed``.
            seed: Optional seed for reproducible rolls.
            max_dice: Most dice a single formula may roll.
            ability_score_sets: Totals produced by roll_ability_scores.
        """
        self._roller = _SourcedRoller(random_source or random.Random(seed))
        self._max_dice = max_dice
        self._ability_score_sets = ability_score_sets
        logger.debug("DiceRoller initialized", seed=seed, max_dice=max_dice)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> DiceRoller:
        """Build a roller from the dice settings.

        Args:
            settings: Application settings; the cached singleton if omitted.

        Returns:
            A configured DiceRoller.
        """
        if settings is None:
            from charsheet.core.config import get_settings

            settings = get_settings()
        return cls(
            seed=settings.dice.seed,
            max_dice=settings.dice.max_dice,
            ability_score_sets=settings.dice.ability_score_sets,
        )

    def roll(
        self,
        formula: DiceFormula,
        *,
        label: str | None = None,
        formula_text: str | None = None,
    ) -> RollOutcome:
        """Roll a parsed formula.

        Args:
            formula: The formula to evaluate.
            label: Optional label carried on the outcome.
            formula_text: Original notation; the canonical form if omitted.

        Returns:
            RollOutcome with every die, its keep status and the total.

        Raises:
            InvalidFormulaError: If the formula rolls more dice than allowed.
        """
        if formula.count > self._max_dice:
            logger.warning("Too many dice", formula=formula.notation, max_dice=self._max_dice)
            raise InvalidFormulaError(
                f"Cannot roll more than {self._max_dice} dice",
                expression=formula.notation,
                details={"max_dice": self._max_dice},
            )

        try:
            result = self._roller.roll(formula.notation)
        except d20.RollError as e:
            raise InvalidFormulaError(str(e), expression=formula.notation) from e

        dice = _find_dice(result.expr)
        dies = dice.values if dice is not None else []
        faces = [die.number for die in dies]
        kept = _first_rolled_wins(faces, [die.kept for die in dies])

        rolls = tuple(
            SingleRollResult(
                die=formula.die,
                result=value,
                kept=is_kept,
                is_critical=formula.die == CRITICAL_DIE and value == CRITICAL_DIE,
                is_fumble=formula.die == CRITICAL_DIE and value == 1,
            )
            for value, is_kept in zip(faces, kept, strict=True)
        )

        outcome = RollOutcome(
            formula_text=formula_text or formula.notation,
            formula=formula,
            rolls=rolls,
            modifier=formula.modifier,
            total=result.total,
            label=label,
        )
        logger.info(
            "Dice rolled",
            formula=outcome.formula_text,
            label=label,
            total=outcome.total,
            critical=outcome.has_critical,
            fumble=outcome.has_fumble,
        )
        return outcome

    def roll_from_text(self, text: str, *, label: str | None = None) -> RollOutcome:
        """Parse and roll dice notation.

        Args:
            text: Dice notation (e.g. '1d20+5', '4d6kh3').
            label: Optional label carried on the outcome.

        Returns:
            The roll outcome.

        Raises:
            InvalidFormulaError: If the notation is invalid.
        """
        try:
            formula = parse_formula(text, max_dice=self._max_dice)
        except InvalidFormulaError:
            logger.warning("Rejected dice formula", formula=text)
            raise
        return self.roll(formula, label=label, formula_text=text)

    def roll_ability_check(
        self,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
        label: str | None = None,
    ) -> RollOutcome:
        """Roll an ability check (``1d20 + modifier``).

        Advantage rolls ``2d20kh1``, disadvantage ``2d20kl1``.
        """
        return self.roll_from_text(_d20_notation(modifier, roll_type), label=label)

    def roll_ability_check_for_score(
        self,
        score: int,
        *,
        proficiency: int = 0,
        roll_type: RollType = RollType.NORMAL,
        label: str | None = None,
    ) -> RollOutcome:
        """Roll a check from a raw ability score.

        Args:
            score: Ability score; its modifier is derived.
            proficiency: Proficiency bonus to add, if proficient.
            roll_type: Normal, advantage or disadvantage.
            label: Optional label carried on the outcome.
        """
        modifier = ability_modifier(score) + proficiency
        return self.roll_ability_check(modifier, roll_type=roll_type, label=label)

    def roll_attack(
        self,
        attack_bonus: int,
        *,
        roll_type: RollType = RollType.NORMAL,
        label: str | None = None,
    ) -> RollOutcome:
        """Roll an attack (``1d20 + attack_bonus``)."""
        return self.roll_from_text(_d20_notation(attack_bonus, roll_type), label=label)

    def roll_saving_throw(
        self,
        modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
        label: str | None = None,
    ) -> RollOutcome:
        """Roll a saving throw."""
        return self.roll_ability_check(modifier, roll_type=roll_type, label=label)

    def roll_initiative(
        self,
        dexterity_modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> RollOutcome:
        """Roll initiative."""
        return self.roll_ability_check(
            dexterity_modifier, roll_type=roll_type, label="Initiative"
        )

    def roll_ability_score(self) -> RollOutcome:
        """Roll one ability score (``4d6kh3``)."""
        return self.roll_from_text(ABILITY_SCORE_FORMULA, label="Ability Score")

    def roll_ability_scores(self, count: int | None = None) -> list[int]:
        """Roll a full set of ability scores.

        The totals are returned sorted highest first so they can be
        assigned by hand in order of preference.

        Args:
            count: Number of scores; the configured set size if omitted.

        Returns:
            Ability score totals, descending.
        """
        count = self._ability_score_sets if count is None else count
        scores = [self.roll_ability_score().total for _ in range(count)]
        return sorted(scores, reverse=True)


def _d20_notation(modifier: int, roll_type: RollType) -> str:
    dice = {
        RollType.NORMAL: "1d20",
        RollType.ADVANTAGE: "2d20kh1",
        RollType.DISADVANTAGE: "2d20kl1",
    }[roll_type]
    return f"{dice}{format_modifier(modifier)}"


# Module-level convenience roller
_default_roller: DiceRoller | None = None


def roll(text: str, *, label: str | None = None) -> RollOutcome:
    """Convenience function to roll dice notation.

    Example:
        >>> result = roll("1d20+5")
        >>> print(result.total)
    """
    global _default_roller  # noqa: PLW0603
    if _default_roller is None:
        _default_roller = DiceRoller()
    return _default_roller.roll_from_text(text, label=label)


__all__ = [
    "RandomSource",
    "RollType",
    "KeepRule",
    "DiceFormula",
    "parse_formula",
    "SingleRollResult",
    "RollOutcome",
    "has_critical",
    "has_fumble",
    "format_roll_result",
    "DiceRoller",
    "roll",
]
