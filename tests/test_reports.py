"""Tests for metrics, the plain-text report and chart output."""

import os

import pytest

from partsim.factory import FactoryScheduler
from partsim.models import Order
from partsim.reports import (
    plot_dashboard,
    print_conveyors,
    print_kpi_table,
    print_machine_table,
    print_order_table,
    render_text_report,
)


@pytest.fixture
def finished_factory(bolt_spec, nut_spec):
    orders = [
        Order(1, "Island Motors", {1: 2, 2: 1}),
        Order(2, "San Juan Garage", {1: 500}),
    ]
    factory = FactoryScheduler([bolt_spec, nut_spec], orders, seed=5)
    factory.run(days=1, minutes=10)
    return factory


class TestKpis:

    def test_bolt_kpis(self, bolt_spec):
        factory = FactoryScheduler([bolt_spec], [Order(1, "X", {1: 4})])
        factory.run(1, 10)
        k = factory.metrics.compute_kpis(factory.order_book)
        assert k["total_produced"] == 5
        assert k["total_defective"] == 1
        assert k["total_accepted"] == 4
        assert k["defect_rate_pct"] == pytest.approx(20.0)
        assert 9.5 <= k["mean_weight"] < 10.5
        assert k["produced_by_machine"] == {1: 5}
        assert k["orders_fulfilled"] == 1
        assert k["fill_rate_pct"] == pytest.approx(100.0)
        assert k["days_simulated"] == 1

    def test_kpis_before_any_run(self, bolt_spec):
        factory = FactoryScheduler([bolt_spec])
        k = factory.metrics.compute_kpis(factory.order_book)
        assert k["total_produced"] == 0
        assert k["defect_rate_pct"] == 0.0
        assert k["fill_rate_pct"] == 0.0
        assert k["unit_fill_rate_pct"] == 0.0

    def test_unit_fill_rate(self, finished_factory):
        k = finished_factory.metrics.compute_kpis(finished_factory.order_book)
        assert k["orders_fulfilled"] == 1
        assert k["orders_pending"] == 1
        assert k["units_requested"] == 503
        assert k["units_shipped"] == 3

    def test_drain_counters(self, finished_factory):
        m = finished_factory.metrics
        assert m.drained_accepted + m.drained_defective == len(m.production_events)


class TestTextReport:

    def test_layout(self, finished_factory):
        report = render_text_report(finished_factory)
        lines = report.splitlines()
        assert lines[0] == "\t\t\tREPORT"
        assert "Parts Produced per Machine" in lines
        # Bolt: 5 produced, 1 defective, 4 accepted - 2 shipped
        assert "Machine 1 Produced: Bolt 5\t(1 defective)\t(2 in inventory)" in lines
        # Nut: 3 produced, 1 defective, 2 accepted - 1 shipped
        assert "Machine 2 Produced: Nut 3\t(1 defective)\t(1 in inventory)" in lines
        assert "ORDERS" in lines
        assert "1 Island Motors 2 FULFILLED" in lines
        assert "2 San Juan Garage 1 PENDING" in lines


class TestConsoleOutput:

    def test_tables_render(self, finished_factory, capsys):
        kpis = finished_factory.metrics.compute_kpis(finished_factory.order_book)
        print_machine_table(finished_factory)
        print_order_table(finished_factory)
        print_kpi_table(kpis)
        out = capsys.readouterr().out
        assert "Bolt" in out
        assert "San Juan Garage" in out
        assert "PENDING" in out

    def test_conveyors_render(self, bolt_spec, capsys):
        factory = FactoryScheduler([bolt_spec])
        factory.run(1, 2, on_shift_end=lambda day: print_conveyors(factory))
        out = capsys.readouterr().out
        assert "|Machine 1||P|_________" in out


class TestDashboard:

    def test_writes_png(self, finished_factory, tmp_path):
        kpis = finished_factory.metrics.compute_kpis(finished_factory.order_book)
        path = plot_dashboard(finished_factory, kpis, str(tmp_path / "reports"))
        assert path.endswith("dashboard.png")
        assert os.path.getsize(path) > 0

    def test_no_snapshots_no_chart(self, bolt_spec, tmp_path):
        factory = FactoryScheduler([bolt_spec])
        kpis = factory.metrics.compute_kpis(factory.order_book)
        assert plot_dashboard(factory, kpis, str(tmp_path)) == ""
