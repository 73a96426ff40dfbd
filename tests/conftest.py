"""Shared test fixtures for PartSim tests."""

import random

import pytest

from partsim.machine import ProductionLine
from partsim.models import MachineSpec, Order


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def bolt_spec():
    """Machine 1 'Bolt': 10.0 ± 0.5 kg, every 2 minutes, every 5th defective."""
    return MachineSpec(id=1, name="Bolt", weight=10.0, weight_error=0.5,
                       period=2, defect_interval=5)


@pytest.fixture
def nut_spec():
    return MachineSpec(id=2, name="Nut", weight=1.0, weight_error=0.1,
                       period=3, defect_interval=4)


@pytest.fixture
def bolt_line(bolt_spec):
    return ProductionLine.from_spec(bolt_spec, random.Random(42))


@pytest.fixture
def make_line():
    """Build a ProductionLine with sensible defaults for the given overrides."""
    def _make(machine_id=1, name="Widget", weight=5.0, weight_error=0.25,
              period=3, defect_interval=4, rng=None):
        spec = MachineSpec(id=machine_id, name=name, weight=weight,
                           weight_error=weight_error, period=period,
                           defect_interval=defect_interval)
        return ProductionLine.from_spec(spec, rng or random.Random(1))
    return _make


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def sample_orders():
    return [
        Order(1, "Island Motors", {1: 2}),
        Order(2, "Caribe Auto Repair", {1: 1, 2: 1}),
        Order(3, "San Juan Garage", {2: 50}),
    ]


@pytest.fixture
def write_csv(tmp_path):
    """Write *text* to a CSV file under tmp_path and return its path."""
    def _write(name, text):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
