"""Tests for resources, spell slots, pact slots and rests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from charsheet.core.exceptions import (
    InsufficientResourceError,
    OutOfRangeError,
    UnknownEntityError,
    ValidationError,
)
from charsheet.engine.resources import (
    PactSlotPool,
    Resource,
    ResourceLedger,
    SpellSlotPool,
    pip_toggle_target,
    reset_on_rest,
)
from charsheet.models.enums import RechargeTrigger, RestTier


def make_resource(
    name: str = "Rage",
    maximum: int = 3,
    recharge: RechargeTrigger = RechargeTrigger.LONG_REST,
    current: int | None = None,
) -> Resource:
    return Resource(name=name, max=maximum, current=current, recharge=recharge)


class TestResource:
    """Tests for limited-use resources."""

    def test_starts_full(self) -> None:
        """Test a new resource defaults to max."""
        assert make_resource().current == 3

    def test_current_cannot_exceed_max(self) -> None:
        """Test construction rejects current above max."""
        with pytest.raises(PydanticValidationError):
            make_resource(current=4)

    def test_assignment_is_validated(self) -> None:
        """Test assignments outside the bounds are rejected."""
        rage = make_resource()

        with pytest.raises(PydanticValidationError):
            rage.current = -1
        with pytest.raises(PydanticValidationError):
            rage.current = 4

    def test_use(self) -> None:
        """Test spending uses."""
        rage = make_resource()

        assert rage.use() == 2
        assert rage.use(2) == 0
        assert rage.is_depleted

    def test_use_more_than_available(self) -> None:
        """Test over-spending raises and leaves the pool untouched."""
        rage = make_resource(current=1)

        with pytest.raises(InsufficientResourceError) as exc_info:
            rage.use(2)

        assert rage.current == 1
        assert exc_info.value.details == {"resource": "Rage", "requested": 2, "available": 1}

    def test_use_from_empty(self) -> None:
        """Test using a depleted resource raises."""
        with pytest.raises(InsufficientResourceError):
            make_resource(current=0).use()

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_amount(self, amount: int) -> None:
        """Test amounts below one are rejected."""
        rage = make_resource()

        with pytest.raises(ValidationError):
            rage.use(amount)
        with pytest.raises(ValidationError):
            rage.recover(amount)

    def test_recover_caps_at_max(self) -> None:
        """Test recovery never exceeds max."""
        rage = make_resource(current=1)

        assert rage.recover(5) == 2
        assert rage.current == 3

    def test_zero_max_resource(self) -> None:
        """Test a resource with no uses can be tracked."""
        empty = make_resource(maximum=0)

        assert empty.current == 0
        assert empty.recover() == 0


class TestResetOnRest:
    """Tests for rest-driven recharge."""

    @pytest.fixture
    def spent(self) -> list[Resource]:
        """Provide one depleted resource per recharge trigger."""
        return [
            make_resource("Ki", 5, RechargeTrigger.SHORT_REST, current=0),
            make_resource("Rage", 3, RechargeTrigger.LONG_REST, current=0),
            make_resource("Wand", 7, RechargeTrigger.DAWN, current=0),
            make_resource("Boon", 1, RechargeTrigger.NEVER, current=0),
        ]

    def test_short_rest(self, spent: list[Resource]) -> None:
        """Test a short rest restores only short-rest resources."""
        assert reset_on_rest(spent, RestTier.SHORT) == ["Ki"]
        assert [r.current for r in spent] == [5, 0, 0, 0]

    def test_long_rest_includes_short(self, spent: list[Resource]) -> None:
        """Test a long rest restores short- and long-rest resources."""
        assert reset_on_rest(spent, RestTier.LONG) == ["Ki", "Rage"]

    def test_dawn(self, spent: list[Resource]) -> None:
        """Test dawn restores only dawn resources."""
        assert reset_on_rest(spent, RestTier.DAWN) == ["Wand"]

    def test_never_is_untouched(self, spent: list[Resource]) -> None:
        """Test no rest restores a never-recharging resource."""
        for tier in RestTier:
            reset_on_rest(spent, tier)

        assert spent[3].current == 0

    def test_full_resources_not_reported(self) -> None:
        """Test only resources that changed are listed."""
        assert reset_on_rest([make_resource()], RestTier.LONG) == []


class TestPipToggle:
    """Tests for pip click arithmetic."""

    @pytest.mark.parametrize(
        ("index", "used", "total", "expected"),
        [
            (0, 0, 4, 1),
            (2, 2, 4, 3),
            (3, 1, 4, 4),
            (0, 2, 4, 0),
            (1, 3, 4, 1),
            (5, 0, 4, 4),
            (-2, 0, 4, 0),
        ],
    )
    def test_target(self, index: int, used: int, total: int, expected: int) -> None:
        """Test marked pips clear and unmarked pips fill, clamped to the pool."""
        assert pip_toggle_target(index, used, total) == expected


class TestSpellSlotPool:
    """Tests for spell slots."""

    def test_use_and_recover(self) -> None:
        """Test slots are expended and regained per level."""
        pool = SpellSlotPool.from_totals({1: 4, 2: 2})

        assert pool.use(1) == 3
        assert pool.use(1, 2) == 1
        assert pool.recover(1) == 1
        assert pool.available(1) == 2
        assert pool.available(2) == 2

    def test_use_exhausted_level(self) -> None:
        """Test using a spent level raises without change."""
        pool = SpellSlotPool.from_totals({1: 1})
        pool.use(1)

        with pytest.raises(InsufficientResourceError):
            pool.use(1)
        assert pool.slot(1).used == 1

    def test_use_level_without_slots(self) -> None:
        """Test a level the character has no slots in is unaffordable."""
        with pytest.raises(InsufficientResourceError):
            SpellSlotPool.from_totals({1: 2}).use(3)

    @pytest.mark.parametrize("level", [0, 10])
    def test_level_out_of_range(self, level: int) -> None:
        """Test spell levels outside 1-9 are rejected."""
        with pytest.raises(OutOfRangeError):
            SpellSlotPool().use(level)

    def test_recover_never_exceeds_total(self) -> None:
        """Test recovering an unspent level regains nothing."""
        pool = SpellSlotPool.from_totals({1: 2})

        assert pool.recover(1, 3) == 0
        assert pool.available(1) == 2

    def test_levels_sorted(self) -> None:
        """Test levels are stored in ascending order."""
        pool = SpellSlotPool.from_totals({3: 2, 1: 4, 2: 3})

        assert list(pool.levels) == [1, 2, 3]

    def test_invalid_level_key(self) -> None:
        """Test construction rejects levels outside 1-9."""
        with pytest.raises(PydanticValidationError):
            SpellSlotPool.from_totals({10: 1})

    def test_set_used_bounds(self) -> None:
        """Test set_used rejects counts above the total."""
        pool = SpellSlotPool.from_totals({1: 2})

        with pytest.raises(OutOfRangeError):
            pool.set_used(1, 3)

    def test_toggle_pip(self) -> None:
        """Test pip clicks mark and clear slots."""
        pool = SpellSlotPool.from_totals({1: 4})

        assert pool.toggle_pip(1, 2) == 3
        assert pool.toggle_pip(1, 0) == 0
        assert pool.slot(1).used == 0

    def test_restore_all(self) -> None:
        """Test restoring reports the levels that changed."""
        pool = SpellSlotPool.from_totals({1: 4, 2: 3, 3: 2})
        pool.use(1)
        pool.use(3, 2)

        assert pool.restore_all() == [1, 3]
        assert pool.available(3) == 2


class TestPactSlotPool:
    """Tests for pact magic slots."""

    def test_use_and_recover(self) -> None:
        """Test pact slots are expended and regained."""
        pact = PactSlotPool(slots=2, caster_level=3)

        assert pact.use() == 1
        assert pact.recover() == 1
        assert pact.available == 2

    def test_insufficient(self) -> None:
        """Test over-spending pact slots raises."""
        with pytest.raises(InsufficientResourceError):
            PactSlotPool(slots=1).use(2)

    def test_caster_level_bounds(self) -> None:
        """Test pact slots cannot be above 5th level."""
        with pytest.raises(PydanticValidationError):
            PactSlotPool(slots=2, caster_level=6)

    def test_toggle_pip(self) -> None:
        """Test pip clicks on pact slots."""
        pact = PactSlotPool(slots=2)

        assert pact.toggle_pip(1) == 2
        assert pact.toggle_pip(1) == 1


class TestResourceLedger:
    """Tests for a character's full set of pools."""

    @pytest.fixture
    def ledger(self) -> ResourceLedger:
        """Provide a warlock-like ledger with both slot kinds."""
        return ResourceLedger.from_resources(
            [
                make_resource("Channel Divinity", 2, RechargeTrigger.SHORT_REST),
                make_resource("Rage", 3, RechargeTrigger.LONG_REST),
                make_resource("Wand Charges", 7, RechargeTrigger.DAWN),
            ],
            spell_slots={1: 4, 2: 2},
            pact_slots=PactSlotPool(slots=2, caster_level=2),
        )

    def test_get_is_case_insensitive(self, ledger: ResourceLedger) -> None:
        """Test resource lookup ignores case."""
        assert ledger.get("rage").name == "Rage"

    def test_get_unknown(self, ledger: ResourceLedger) -> None:
        """Test an unknown resource name raises."""
        with pytest.raises(UnknownEntityError):
            ledger.get("Ki")

    def test_use_and_recover(self, ledger: ResourceLedger) -> None:
        """Test ledger delegates to the named resource."""
        assert ledger.use("Rage", 2) == 1
        assert ledger.recover("Rage") == 1
        assert ledger.get("Rage").current == 2

    def test_slot_operations(self, ledger: ResourceLedger) -> None:
        """Test spell and pact slot delegation."""
        assert ledger.use_spell_slot(1) == 3
        assert ledger.recover_spell_slot(1) == 1
        assert ledger.toggle_spell_slot(2, 0) == 1
        assert ledger.use_pact_slot() == 1
        assert ledger.recover_pact_slot() == 1
        assert ledger.toggle_pact_slot(0) == 1

    def test_no_pact_slots(self) -> None:
        """Test pact operations fail for non-pact casters."""
        with pytest.raises(UnknownEntityError):
            ResourceLedger().use_pact_slot()

    def _spend_everything(self, ledger: ResourceLedger) -> None:
        ledger.use("Channel Divinity", 2)
        ledger.use("Rage", 3)
        ledger.use("Wand Charges", 4)
        ledger.use_spell_slot(1, 2)
        ledger.use_spell_slot(2)
        ledger.use_pact_slot(2)

    def test_short_rest(self, ledger: ResourceLedger) -> None:
        """Test a short rest restores short-rest resources and pact slots only."""
        self._spend_everything(ledger)

        summary = ledger.rest(RestTier.SHORT)

        assert summary.resources == ("Channel Divinity",)
        assert summary.spell_slot_levels == ()
        assert summary.pact_slots == 2
        assert ledger.get("Rage").current == 0
        assert ledger.spell_slots.available(1) == 2

    def test_long_rest(self, ledger: ResourceLedger) -> None:
        """Test a long rest restores everything a short rest does and more."""
        self._spend_everything(ledger)

        summary = ledger.rest(RestTier.LONG)

        assert summary.resources == ("Channel Divinity", "Rage")
        assert summary.spell_slot_levels == (1, 2)
        assert summary.pact_slots == 2
        assert ledger.get("Wand Charges").current == 3

    def test_dawn(self, ledger: ResourceLedger) -> None:
        """Test dawn restores dawn resources but no slots."""
        self._spend_everything(ledger)

        summary = ledger.rest(RestTier.DAWN)

        assert summary.resources == ("Wand Charges",)
        assert summary.spell_slot_levels == ()
        assert summary.pact_slots == 0
        assert ledger.pact_slots is not None
        assert ledger.pact_slots.available == 0

    def test_rest_with_nothing_spent(self, ledger: ResourceLedger) -> None:
        """Test a rest on a full ledger restores nothing."""
        assert not ledger.rest(RestTier.LONG).restored_anything
