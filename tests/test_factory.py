"""Tests for the FactoryScheduler day / minute / machine loop."""

import pytest

from partsim.config import CONVEYOR_LENGTH
from partsim.errors import InvalidArgument, InvalidConfiguration
from partsim.factory import FactoryScheduler
from partsim.models import MachineSpec, Order


def _spec(machine_id=1, period=2, defect_interval=5, weight=10.0, weight_error=0.5):
    return MachineSpec(id=machine_id, name=f"Part{machine_id}", weight=weight,
                       weight_error=weight_error, period=period,
                       defect_interval=defect_interval)


class TestRunArguments:

    @pytest.mark.parametrize("days,minutes", [
        (0, 10), (-1, 10), (1, 0), (1, -5), (True, 10), (1, 2.5), ("3", 10),
    ])
    def test_invalid_arguments_rejected_before_mutation(self, bolt_spec, days, minutes):
        factory = FactoryScheduler([bolt_spec])
        with pytest.raises(InvalidArgument):
            factory.run(days, minutes)
        assert factory.env.now == 0
        assert factory.day == 0
        assert factory.produced_count(1) == 0
        assert factory.metrics.daily_snapshots == []

    def test_invalid_machine_rejected_at_setup(self):
        with pytest.raises(InvalidConfiguration):
            FactoryScheduler([_spec(defect_interval=0)])

    @pytest.mark.parametrize("kwargs", [
        {"period": True},
        {"period": 2.5},
        {"defect_interval": 1.5},
        {"defect_interval": False},
    ])
    def test_non_integer_machine_timing_rejected(self, kwargs):
        with pytest.raises(InvalidConfiguration):
            _spec(**kwargs)

    @pytest.mark.parametrize("parts,orders", [
        ("", "orders.csv"), ("parts.csv", ""), (None, "orders.csv"), ("parts.csv", "  "),
    ])
    def test_from_files_rejects_empty_paths(self, parts, orders):
        with pytest.raises(InvalidArgument):
            FactoryScheduler.from_files(parts, orders)


class TestProductionLoop:

    def test_bolt_scenario(self, bolt_spec):
        factory = FactoryScheduler([bolt_spec])
        factory.run(days=1, minutes=10)

        events = factory.metrics.production_events
        assert len(events) == 5
        assert [e.serial for e in events] == [0, 1, 2, 3, 4]
        assert [e.defective for e in events] == [True, False, False, False, False]
        assert factory.produced_count(1) == 5
        assert factory.defect_count(1) == 1
        assert factory.inventory_count(1) == 4

    @pytest.mark.parametrize("period,days,minutes", [
        (3, 1, 9),
        (2, 3, 7),
        (5, 2, 12),
        (1, 2, 15),
        (4, 4, 30),
    ])
    def test_throughput_matches_floor(self, period, days, minutes):
        factory = FactoryScheduler([_spec(period=period, defect_interval=1000)])
        factory.run(days, minutes)
        exited = factory.inventory_count(1) + factory.defect_count(1)
        assert exited == (days * minutes) // period

    def test_period_three_nine_minutes_three_exits(self):
        factory = FactoryScheduler([_spec(period=3)])
        factory.run(1, 9)
        assert factory.inventory_count(1) + factory.defect_count(1) == 3
        assert factory.metrics.flushed_in_transit == 3

    def test_parts_exiting_mid_day_reach_inventory(self):
        factory = FactoryScheduler([_spec(period=1, defect_interval=1000)])
        factory.run(1, 25)
        # 15 exit during the day, 10 are flushed off the belt
        assert factory.inventory_count(1) + factory.defect_count(1) == 25
        assert factory.metrics.flushed_in_transit == CONVEYOR_LENGTH

    def test_belts_flushed_at_day_end(self, bolt_spec, nut_spec):
        factory = FactoryScheduler([bolt_spec, nut_spec])
        factory.run(2, 30)
        assert all(line.in_transit == 0 for line in factory.lines)
        assert factory.production_bin.is_empty()

    def test_every_produced_part_is_accounted_for(self, bolt_spec, nut_spec):
        factory = FactoryScheduler([bolt_spec, nut_spec])
        factory.run(3, 47)
        for line in factory.lines:
            type_id = line.part.type_id
            assert (factory.inventory_count(type_id) + factory.defect_count(type_id)
                    == line.produced_count)

    def test_clock_advances_one_per_minute(self, bolt_spec):
        factory = FactoryScheduler([bolt_spec])
        factory.run(3, 20)
        assert factory.env.now == 60
        assert factory.day == 3

    def test_timer_carries_across_days(self):
        factory = FactoryScheduler([_spec(period=4, defect_interval=1000)])
        factory.run(2, 3)
        # Ticks 1..6, the only zero countdown falls on tick 4 (day 2)
        snaps = factory.metrics.daily_snapshots
        assert snaps[0].produced == {1: 0}
        assert snaps[1].produced == {1: 1}

    def test_same_seed_reproducible(self, bolt_spec, nut_spec):
        a = FactoryScheduler([bolt_spec, nut_spec], seed=7)
        b = FactoryScheduler([bolt_spec, nut_spec], seed=7)
        a.run(2, 40)
        b.run(2, 40)
        wa = [e.weight for e in a.metrics.production_events]
        wb = [e.weight for e in b.metrics.production_events]
        assert wa == wb

    def test_callbacks_called_once_per_day(self, bolt_spec):
        factory = FactoryScheduler([bolt_spec])
        shift_ends, day_ends, in_transit = [], [], []

        def on_shift_end(day):
            shift_ends.append(day)
            in_transit.append(factory.get_line(1).in_transit)

        factory.run(3, 10, on_day_end=day_ends.append, on_shift_end=on_shift_end)
        assert shift_ends == [1, 2, 3]
        assert day_ends == [1, 2, 3]
        assert in_transit == [5, 5, 5]

    def test_get_line_unknown_id(self, bolt_spec):
        with pytest.raises(KeyError):
            FactoryScheduler([bolt_spec]).get_line(99)


class TestOrderFulfilment:

    def test_order_waits_for_enough_stock(self):
        spec = _spec(period=1, defect_interval=1000)
        factory = FactoryScheduler([spec], [Order(1, "Island Motors", {1: 3})])

        factory.run(1, 3)
        # serial 0 is defective, so only two accepted units
        assert factory.inventory_count(1) == 2
        assert factory.orders[0].fulfilled is False

        filled = factory.run(1, 1)
        assert [o.id for o in filled] == [1]
        assert factory.orders[0].fulfilled is True
        assert factory.inventory_count(1) == 0

    def test_rerun_does_not_charge_fulfilled_orders_again(self):
        spec = _spec(period=1, defect_interval=1000)
        factory = FactoryScheduler([spec], [Order(1, "X", {1: 2})])
        factory.run(1, 5)
        assert factory.orders[0].fulfilled is True
        assert factory.inventory_count(1) == 2

        factory.process_orders()
        assert factory.inventory_count(1) == 2

        factory.run(1, 2)
        assert factory.inventory_count(1) == 4

    def test_matching_runs_once_after_all_days(self):
        spec = _spec(period=1, defect_interval=1000)
        factory = FactoryScheduler([spec], [Order(1, "X", {1: 10})])
        factory.run(3, 4)
        # 12 produced, 11 accepted; a per-day matcher would have failed days 1-2
        assert factory.orders[0].fulfilled is True
        assert factory.inventory_count(1) == 1
        assert [s.inventory[1] for s in factory.metrics.daily_snapshots] == [3, 7, 11]
