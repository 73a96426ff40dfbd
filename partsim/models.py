"""Data-model classes shared across the simulation."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

from .errors import InvalidConfiguration


@dataclass(frozen=True)
class Part:
    """One physical unit produced by a machine."""

    type_id:   int
    name:      str
    weight:    float = 0.0
    defective: bool  = False
    serial:    int   = -1          # 0-based production index; -1 for templates

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MachineSpec:
    """One row of the machine table: a machine and the part it makes."""

    id:              int
    name:            str
    weight:          float
    weight_error:    float
    period:          int
    defect_interval: int

    def __post_init__(self) -> None:
        for label, value in (("period", self.period), ("defect interval", self.defect_interval)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(
                    f"Machine {self.id}: {label} must be an integer (got {value!r})"
                )
        if self.period <= 0:
            raise InvalidConfiguration(
                f"Machine {self.id}: period must be greater than 0 (got {self.period})"
            )
        if self.defect_interval <= 0:
            raise InvalidConfiguration(
                f"Machine {self.id}: defect interval must be greater than 0 "
                f"(got {self.defect_interval})"
            )
        if self.weight_error < 0:
            raise InvalidConfiguration(
                f"Machine {self.id}: weight error cannot be negative (got {self.weight_error})"
            )

    @property
    def template(self) -> Part:
        return Part(type_id=self.id, name=self.name, weight=self.weight)


class OrderStatus(str, Enum):
    PENDING   = "PENDING"
    FULFILLED = "FULFILLED"


@dataclass(frozen=True)
class Order:
    """
    A customer purchase order for one or more part types.

    Instances are immutable; the matcher swaps a pending order for the
    result of :meth:`with_fulfilled`.
    """

    id:              int
    customer_name:   str
    requested_parts: Mapping[int, int] = field(default_factory=dict)
    status:          OrderStatus       = OrderStatus.PENDING

    def __post_init__(self) -> None:
        for type_id, qty in self.requested_parts.items():
            if qty < 0:
                raise InvalidConfiguration(
                    f"Order {self.id}: quantity for part {type_id} cannot be negative"
                )
        object.__setattr__(
            self, "requested_parts", MappingProxyType(dict(self.requested_parts))
        )

    @classmethod
    def from_pairs(
        cls,
        order_id: int,
        customer_name: str,
        pairs: Iterable[Tuple[int, int]],
    ) -> "Order":
        """Build an order from ``(type_id, qty)`` pairs; repeated ids add up."""
        requested: Dict[int, int] = {}
        for type_id, qty in pairs:
            requested[type_id] = requested.get(type_id, 0) + qty
        return cls(order_id, customer_name, requested)

    @property
    def fulfilled(self) -> bool:
        return self.status is OrderStatus.FULFILLED

    @property
    def part_count(self) -> int:
        """Number of distinct part types requested."""
        return len(self.requested_parts)

    @property
    def total_units(self) -> int:
        return sum(self.requested_parts.values())

    def with_fulfilled(self) -> "Order":
        return replace(self, status=OrderStatus.FULFILLED)

    def __str__(self) -> str:
        return f"{self.id} {self.customer_name} {self.part_count} {self.status.value}"


@dataclass
class ProductionEvent:
    """A part leaving a machine's press and entering its conveyor."""

    minute:     float = 0.0        # simulation time (minutes)
    machine_id: int   = 0
    type_id:    int   = 0
    serial:     int   = 0
    weight:     float = 0.0
    defective:  bool  = False


@dataclass
class DailySnapshot:
    """Factory state recorded at the end of one simulated day."""

    day:        int
    inventory:  Dict[int, int] = field(default_factory=dict)
    defects:    Dict[int, int] = field(default_factory=dict)
    produced:   Dict[int, int] = field(default_factory=dict)   # machine id → cumulative
    in_transit: int            = 0

    @property
    def total_inventory(self) -> int:
        return sum(self.inventory.values())
