"""Limited-use resources, spell slots and pact slots.

Each character owns one ResourceLedger holding its class resources (Rage,
Ki, Channel Divinity, ...), a spell slot pool and, for pact casters, a
pact slot pool. All pools follow the same contract:

- ``use`` never partially consumes; asking for more than is available
  raises InsufficientResourceError and leaves the pool untouched.
- ``recover`` adds back up to the maximum.
- A rest restores pools whose recharge trigger the rest tier satisfies.
  A long rest includes everything a short rest restores; dawn is its own
  event.

Example:
    >>> rage = Resource(name="Rage", max=3, recharge=RechargeTrigger.LONG_REST)
    >>> rage.use()
    2
    >>> reset_on_rest([rage], RestTier.LONG)
    ['Rage']
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from charsheet.core.constants import (
    MAX_PACT_SLOT_LEVEL,
    MAX_SPELL_SLOT_LEVEL,
    MIN_SPELL_SLOT_LEVEL,
)
from charsheet.core.exceptions import (
    InsufficientResourceError,
    OutOfRangeError,
    UnknownEntityError,
    ValidationError,
)
from charsheet.core.logging import get_logger
from charsheet.models.enums import RechargeTrigger, RestTier


logger = get_logger(__name__)


def _require_positive(amount: int) -> None:
    if amount < 1:
        msg = "Amount must be at least 1"
        raise ValidationError(msg, field_name="amount", invalid_value=amount)


def pip_toggle_target(index: int, used: int, total: int) -> int:
    """Compute the new used count after clicking a pip.

    Pips are shown left to right with the first ``used`` marked. Clicking
    a marked pip clears it and everything after it; clicking an unmarked
    pip marks it and everything before it.

    Args:
        index: Zero-based pip clicked.
        used: Pips currently marked.
        total: Pips shown.

    Returns:
        The new used count, clamped to ``[0, total]``.

    Example:
        >>> pip_toggle_target(0, 2, 4)
        0
        >>> pip_toggle_target(2, 2, 4)
        3
    """
    target = index if index < used else index + 1
    return max(0, min(target, total))


# =============================================================================
# Limited-Use Resources
# =============================================================================


class Resource(BaseModel):
    """A named limited-use feature such as Rage or Ki.

    Attributes:
        name: Display name; unique within a ledger.
        short_label: Compact label for narrow layouts.
        max: Maximum uses.
        current: Uses remaining (0 to max). Defaults to max.
        recharge: When the resource is restored to max.
        description: Free-text rules summary.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    name: str = Field(min_length=1)
    short_label: str = Field(default="")
    max: int = Field(ge=0, description="Maximum uses")
    current: int = Field(ge=0, description="Uses remaining")
    recharge: RechargeTrigger = Field(default=RechargeTrigger.LONG_REST)
    description: str = Field(default="")

    @model_validator(mode="before")
    @classmethod
    def default_current_to_max(cls, data: Any) -> Any:
        """A fresh resource starts full."""
        if isinstance(data, dict) and data.get("current") is None and "max" in data:
            data = {**data, "current": data["max"]}
        return data

    @model_validator(mode="after")
    def validate_current_bounds(self) -> Resource:
        """Ensure current never exceeds max."""
        if self.current > self.max:
            msg = f"current ({self.current}) exceeds max ({self.max})"
            raise ValueError(msg)
        return self

    @property
    def is_depleted(self) -> bool:
        return self.current == 0

    def recharges_on(self, tier: RestTier) -> bool:
        """Check whether a rest of this tier restores the resource."""
        return self.recharge in tier.satisfies

    def use(self, amount: int = 1) -> int:
        """Spend uses.

        Args:
            amount: Uses to spend (at least 1).

        Returns:
            Uses remaining.

        Raises:
            ValidationError: If amount is below 1.
            InsufficientResourceError: If fewer than ``amount`` remain.
        """
        _require_positive(amount)
        if self.current < amount:
            logger.warning(
                "Resource use rejected",
                resource=self.name,
                requested=amount,
                available=self.current,
            )
            raise InsufficientResourceError(
                f"Not enough {self.name} remaining",
                resource=self.name,
                requested=amount,
                available=self.current,
            )
        self.current -= amount
        logger.info("Resource used", resource=self.name, amount=amount, remaining=self.current)
        return self.current

    def recover(self, amount: int = 1) -> int:
        """Regain uses, never beyond max.

        Returns:
            Uses actually regained.
        """
        _require_positive(amount)
        before = self.current
        self.current = min(self.max, self.current + amount)
        return self.current - before

    def restore(self) -> bool:
        """Refill to max; returns whether anything changed."""
        if self.current == self.max:
            return False
        self.current = self.max
        return True


def reset_on_rest(resources: Iterable[Resource], tier: RestTier) -> list[str]:
    """Restore every resource the rest tier recharges.

    Args:
        resources: Resources to consider.
        tier: Rest taken.

    Returns:
        Names of resources that were below max and are now full.
    """
    restored = [r.name for r in resources if r.recharges_on(tier) and r.restore()]
    if restored:
        logger.info("Resources restored", tier=str(tier), resources=restored)
    return restored


# =============================================================================
# Spell Slots
# =============================================================================


class SlotLevel(BaseModel):
    """Slots of a single spell level."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    total: int = Field(default=0, ge=0)
    used: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_used_bounds(self) -> SlotLevel:
        if self.used > self.total:
            msg = f"used ({self.used}) exceeds total ({self.total})"
            raise ValueError(msg)
        return self

    @property
    def available(self) -> int:
        return self.total - self.used


def _check_spell_level(level: int) -> None:
    if not MIN_SPELL_SLOT_LEVEL <= level <= MAX_SPELL_SLOT_LEVEL:
        raise OutOfRangeError(
            "Spell slot level out of range",
            value=level,
            minimum=MIN_SPELL_SLOT_LEVEL,
            maximum=MAX_SPELL_SLOT_LEVEL,
        )


class SpellSlotPool(BaseModel):
    """Spell slots by level (1-9). Restored by a long rest only.

    Example:
        >>> pool = SpellSlotPool.from_totals({1: 4, 2: 2})
        >>> pool.use(1)
        3
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    levels: dict[int, SlotLevel] = Field(default_factory=dict)

    @field_validator("levels", mode="after")
    @classmethod
    def validate_levels(cls, value: dict[int, SlotLevel]) -> dict[int, SlotLevel]:
        """Keys must be spell levels; stored in ascending order."""
        for level in value:
            if not MIN_SPELL_SLOT_LEVEL <= level <= MAX_SPELL_SLOT_LEVEL:
                msg = f"Spell slot level must be 1-9, got {level}"
                raise ValueError(msg)
        return dict(sorted(value.items()))

    @classmethod
    def from_totals(cls, totals: Mapping[int, int]) -> SpellSlotPool:
        """Build a fresh pool from ``{level: total}``."""
        return cls(levels={level: SlotLevel(total=total) for level, total in totals.items()})

    def slot(self, level: int) -> SlotLevel:
        """Slots at a level; an empty level when the character has none."""
        _check_spell_level(level)
        return self.levels.get(level, SlotLevel())

    def available(self, level: int) -> int:
        return self.slot(level).available

    def use(self, level: int, amount: int = 1) -> int:
        """Expend slots of a level.

        Returns:
            Slots of that level still available.

        Raises:
            ValidationError: If amount is below 1.
            OutOfRangeError: If level is outside 1-9.
            InsufficientResourceError: If too few slots are available.
        """
        _require_positive(amount)
        slot = self.slot(level)
        if slot.available < amount:
            logger.warning(
                "Spell slot use rejected",
                slot_level=level,
                requested=amount,
                available=slot.available,
            )
            raise InsufficientResourceError(
                f"No level {level} spell slots remaining",
                resource=f"spell slot level {level}",
                requested=amount,
                available=slot.available,
            )
        slot.used += amount
        logger.info("Spell slot used", slot_level=level, remaining=slot.available)
        return slot.available

    def recover(self, level: int, amount: int = 1) -> int:
        """Regain expended slots of a level; returns slots regained."""
        _require_positive(amount)
        slot = self.slot(level)
        regained = min(amount, slot.used)
        if regained:
            slot.used -= regained
        return regained

    def set_used(self, level: int, used: int) -> None:
        """Set how many slots of a level are expended.

        Raises:
            OutOfRangeError: If used is outside ``[0, total]``.
        """
        slot = self.slot(level)
        if not 0 <= used <= slot.total:
            raise OutOfRangeError(
                f"Used slots for level {level} out of range",
                value=used,
                minimum=0,
                maximum=slot.total,
            )
        if level in self.levels:
            slot.used = used

    def toggle_pip(self, level: int, index: int) -> int:
        """Apply a pip click at a level; returns the new used count."""
        slot = self.slot(level)
        target = pip_toggle_target(index, slot.used, slot.total)
        self.set_used(level, target)
        return target

    def restore_all(self) -> list[int]:
        """Clear every expended slot; returns the levels that changed."""
        restored = []
        for level, slot in self.levels.items():
            if slot.used:
                slot.used = 0
                restored.append(level)
        return restored


# =============================================================================
# Pact Magic
# =============================================================================


class PactSlotPool(BaseModel):
    """Pact magic slots, all cast at one level.

    Unlike spell slots, pact slots come back on a short rest.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    slots: int = Field(default=0, ge=0)
    used: int = Field(default=0, ge=0)
    caster_level: int = Field(default=1, ge=1, le=MAX_PACT_SLOT_LEVEL)

    @model_validator(mode="after")
    def validate_used_bounds(self) -> PactSlotPool:
        if self.used > self.slots:
            msg = f"used ({self.used}) exceeds slots ({self.slots})"
            raise ValueError(msg)
        return self

    @property
    def available(self) -> int:
        return self.slots - self.used

    def use(self, amount: int = 1) -> int:
        """Expend pact slots; returns slots still available.

        Raises:
            ValidationError: If amount is below 1.
            InsufficientResourceError: If too few slots are available.
        """
        _require_positive(amount)
        if self.available < amount:
            logger.warning(
                "Pact slot use rejected",
                requested=amount,
                available=self.available,
            )
            raise InsufficientResourceError(
                "No pact slots remaining",
                resource="pact slot",
                requested=amount,
                available=self.available,
            )
        self.used += amount
        logger.info("Pact slot used", caster_level=self.caster_level, remaining=self.available)
        return self.available

    def recover(self, amount: int = 1) -> int:
        _require_positive(amount)
        regained = min(amount, self.used)
        self.used -= regained
        return regained

    def set_used(self, used: int) -> None:
        if not 0 <= used <= self.slots:
            raise OutOfRangeError(
                "Used pact slots out of range",
                value=used,
                minimum=0,
                maximum=self.slots,
            )
        self.used = used

    def toggle_pip(self, index: int) -> int:
        target = pip_toggle_target(index, self.used, self.slots)
        self.set_used(target)
        return target

    def restore(self) -> int:
        """Clear expended slots; returns how many came back."""
        restored = self.used
        self.used = 0
        return restored


# =============================================================================
# Ledger
# =============================================================================


@dataclass(frozen=True)
class RestSummary:
    """What a rest restored.

    Attributes:
        tier: Rest taken.
        resources: Names of resources refilled.
        spell_slot_levels: Spell levels whose slots were cleared.
        pact_slots: Pact slots regained.
    """

    tier: RestTier
    resources: tuple[str, ...] = ()
    spell_slot_levels: tuple[int, ...] = ()
    pact_slots: int = 0

    @property
    def restored_anything(self) -> bool:
        return bool(self.resources or self.spell_slot_levels or self.pact_slots)


class ResourceLedger(BaseModel):
    """All expendable pools of one character.

    Attributes:
        resources: Limited-use resources by name.
        spell_slots: Spell slots by level.
        pact_slots: Pact magic slots, for pact casters.

    Example:
        >>> ledger = ResourceLedger.from_resources([Resource(name="Ki", max=5,
        ...     recharge=RechargeTrigger.SHORT_REST)])
        >>> ledger.use("Ki", 2)
        3
        >>> ledger.rest(RestTier.SHORT).resources
        ('Ki',)
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    resources: dict[str, Resource] = Field(default_factory=dict)
    spell_slots: SpellSlotPool = Field(default_factory=SpellSlotPool)
    pact_slots: PactSlotPool | None = Field(default=None)

    @classmethod
    def from_resources(
        cls,
        resources: Iterable[Resource],
        *,
        spell_slots: Mapping[int, int] | None = None,
        pact_slots: PactSlotPool | None = None,
    ) -> ResourceLedger:
        """Build a ledger from resources and optional slot totals."""
        return cls(
            resources={r.name: r for r in resources},
            spell_slots=SpellSlotPool.from_totals(spell_slots or {}),
            pact_slots=pact_slots,
        )

    def add(self, resource: Resource) -> None:
        """Track a resource, replacing any with the same name."""
        self.resources[resource.name] = resource

    def get(self, name: str) -> Resource:
        """Look up a resource by name (case-insensitive).

        Raises:
            UnknownEntityError: If the character has no such resource.
        """
        if name in self.resources:
            return self.resources[name]
        lowered = name.lower()
        for resource_name, resource in self.resources.items():
            if resource_name.lower() == lowered:
                return resource
        raise UnknownEntityError(f"No resource named {name!r}", key=name, category="resource")

    def use(self, name: str, amount: int = 1) -> int:
        return self.get(name).use(amount)

    def recover(self, name: str, amount: int = 1) -> int:
        return self.get(name).recover(amount)

    def use_spell_slot(self, level: int, amount: int = 1) -> int:
        return self.spell_slots.use(level, amount)

    def recover_spell_slot(self, level: int, amount: int = 1) -> int:
        return self.spell_slots.recover(level, amount)

    def toggle_spell_slot(self, level: int, index: int) -> int:
        return self.spell_slots.toggle_pip(level, index)

    def _require_pact_slots(self) -> PactSlotPool:
        if self.pact_slots is None:
            raise UnknownEntityError("Character has no pact slots", category="resource")
        return self.pact_slots

    def use_pact_slot(self, amount: int = 1) -> int:
        return self._require_pact_slots().use(amount)

    def recover_pact_slot(self, amount: int = 1) -> int:
        return self._require_pact_slots().recover(amount)

    def toggle_pact_slot(self, index: int) -> int:
        return self._require_pact_slots().toggle_pip(index)

    def rest(self, tier: RestTier) -> RestSummary:
        """Take a rest and restore everything it recharges.

        Resources follow their own trigger. Spell slots come back on a
        long rest; pact slots on a short or long rest. Dawn restores only
        dawn-recharging resources.

        Args:
            tier: Rest taken.

        Returns:
            Summary of what was restored.
        """
        resources = reset_on_rest(self.resources.values(), tier)

        slot_levels: list[int] = []
        if tier is RestTier.LONG:
            slot_levels = self.spell_slots.restore_all()

        pact = 0
        if self.pact_slots is not None and tier in (RestTier.SHORT, RestTier.LONG):
            pact = self.pact_slots.restore()

        summary = RestSummary(
            tier=tier,
            resources=tuple(resources),
            spell_slot_levels=tuple(slot_levels),
            pact_slots=pact,
        )
        logger.info(
            "Rest taken",
            tier=str(tier),
            resources=list(summary.resources),
            spell_slot_levels=list(summary.spell_slot_levels),
            pact_slots=summary.pact_slots,
        )
        return summary


__all__ = [
    "pip_toggle_target",
    "Resource",
    "reset_on_rest",
    "SlotLevel",
    "SpellSlotPool",
    "PactSlotPool",
    "RestSummary",
    "ResourceLedger",
]
