"""Status conditions and graded exhaustion.

A ConditionSet tracks which of the sixteen sheet conditions are active.
Exhaustion is graded 0-6 and is reported active exactly when its level
is above zero. Both fields are read-only from outside; every change goes
through the mutation methods, which keep the two in step. Listeners can
subscribe to transitions, for example to play a sound or refresh a badge,
and are told once per real change.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from charsheet.core.constants import MAX_EXHAUSTION_LEVEL, MIN_EXHAUSTION_LEVEL
from charsheet.core.exceptions import OutOfRangeError, ValidationError
from charsheet.core.logging import get_logger
from charsheet.models.enums import Condition


logger = get_logger(__name__)

ConditionListener = Callable[[Condition, bool], None]
"""Called with the condition and whether it was entered (True) or left."""


def coerce_condition(value: Condition | str) -> Condition:
    """Resolve a condition from an enum member or its name.

    Raises:
        ValidationError: If the name is not one of the sixteen conditions.
    """
    if isinstance(value, Condition):
        return value
    try:
        return Condition(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown condition {value!r}",
            field_name="condition",
            invalid_value=value,
        ) from None


class ConditionSet(BaseModel):
    """Active conditions of one character.

    Attributes:
        conditions: Active conditions in the order they were applied.
        exhaustion_level: Exhaustion level (0-6).

    Example:
        >>> conditions = ConditionSet()
        >>> conditions.toggle(Condition.POISONED)
        True
        >>> conditions.set_exhaustion_level(2)
        >>> conditions.active_conditions()
        [<Condition.POISONED: 'poisoned'>, <Condition.EXHAUSTION: 'exhaustion'>]
    """

    model_config = ConfigDict(extra="forbid")

    conditions: tuple[Condition, ...] = Field(default=(), frozen=True)
    exhaustion_level: int = Field(
        default=0,
        ge=MIN_EXHAUSTION_LEVEL,
        le=MAX_EXHAUSTION_LEVEL,
        frozen=True,
    )

    _listeners: list[ConditionListener] = PrivateAttr(default_factory=list)

    @model_validator(mode="after")
    def sync_exhaustion(self) -> ConditionSet:
        """Drop duplicates and keep exhaustion membership in step with its level."""
        conditions = list(dict.fromkeys(self.conditions))
        level = self.exhaustion_level
        has_exhaustion = Condition.EXHAUSTION in conditions
        if level > 0 and not has_exhaustion:
            conditions.append(Condition.EXHAUSTION)
        elif has_exhaustion and level == 0:
            level = 1
        self._commit(conditions, level)
        return self

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_active(self, condition: Condition | str) -> bool:
        return coerce_condition(condition) in self.conditions

    def active_conditions(self) -> list[Condition]:
        """Active conditions in application order."""
        return list(self.conditions)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def subscribe(self, listener: ConditionListener) -> Callable[[], None]:
        """Register a transition listener.

        Args:
            listener: Called as ``listener(condition, entered)``.

        Returns:
            A function that unregisters the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def toggle(self, condition: Condition | str) -> bool:
        """Flip a condition on or off.

        Toggling exhaustion on sets level 1; toggling it off sets level 0.

        Returns:
            Whether the condition is active afterwards.
        """
        condition = coerce_condition(condition)
        if condition in self.conditions:
            self._leave(condition)
            return False
        self._enter(condition)
        return True

    def add(self, condition: Condition | str) -> bool:
        """Apply a condition; returns whether it was newly applied."""
        condition = coerce_condition(condition)
        if condition in self.conditions:
            return False
        self._enter(condition)
        return True

    def remove(self, condition: Condition | str) -> bool:
        """Clear a condition; returns whether it had been active."""
        condition = coerce_condition(condition)
        if condition not in self.conditions:
            return False
        self._leave(condition)
        return True

    def clear(self) -> list[Condition]:
        """Clear every condition; returns those that were active."""
        cleared = self.active_conditions()
        for condition in cleared:
            self._leave(condition)
        return cleared

    def set_exhaustion_level(self, level: int) -> None:
        """Set the exhaustion level.

        Level 0 removes exhaustion; any level from 1 makes it active.
        Moving between non-zero levels is not a transition.

        Raises:
            OutOfRangeError: If level is outside 0-6.
        """
        if not MIN_EXHAUSTION_LEVEL <= level <= MAX_EXHAUSTION_LEVEL:
            logger.warning("Exhaustion level rejected", exhaustion_level=level)
            raise OutOfRangeError(
                "Exhaustion level out of range",
                value=level,
                minimum=MIN_EXHAUSTION_LEVEL,
                maximum=MAX_EXHAUSTION_LEVEL,
            )

        was_active = self.exhaustion_level > 0
        if level == 0 and was_active:
            self._leave(Condition.EXHAUSTION)
        elif level > 0 and not was_active:
            self._commit(self.conditions, level)
            self._enter(Condition.EXHAUSTION)
        else:
            self._commit(self.conditions, level)
            logger.info("Exhaustion level set", exhaustion_level=level)

    def _enter(self, condition: Condition) -> None:
        level = self.exhaustion_level
        if condition is Condition.EXHAUSTION and level == 0:
            level = 1
        self._commit((*self.conditions, condition), level)
        logger.info(
            "Condition applied",
            condition=str(condition),
            exhaustion_level=self.exhaustion_level,
        )
        self._notify(condition, entered=True)

    def _leave(self, condition: Condition) -> None:
        level = 0 if condition is Condition.EXHAUSTION else self.exhaustion_level
        self._commit(tuple(c for c in self.conditions if c is not condition), level)
        logger.info("Condition removed", condition=str(condition))
        self._notify(condition, entered=False)

    def _commit(self, conditions: Iterable[Condition], level: int) -> None:
        # Fields are frozen against outside assignment; write the stored values.
        self.__dict__["conditions"] = tuple(conditions)
        self.__dict__["exhaustion_level"] = level

    def _notify(self, condition: Condition, *, entered: bool) -> None:
        for listener in list(self._listeners):
            listener(condition, entered)


__all__ = [
    "ConditionListener",
    "coerce_condition",
    "ConditionSet",
]
