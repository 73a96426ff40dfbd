"""
FactoryScheduler: SimPy-clocked production of car parts and order matching.

Daily cycle (one SimPy process per day):

   minute 0 … M-1
      for every line, in setup order
         line.tick() ──► part leaving the conveyor ──► production_bin (LIFO)
   end of day
      every conveyor flushed ─────────────────────► production_bin
      production_bin drained ──► inventory[type]   (accepted)
                              └► defects[type]     (defective)
   after the last day
      order book matched once against inventory
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import simpy

from .config import DEFAULT_SEED
from .errors import InvalidArgument
from .inventory import DefectLedger, Inventory, ProductionBuffer
from .machine import ProductionLine
from .metrics import MetricsCollector
from .models import DailySnapshot, MachineSpec, Order, Part
from .orders import OrderBook

logger = logging.getLogger(__name__)


def _validate_positive(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer (got {value!r})")
    if value <= 0:
        raise InvalidArgument(f"{name} must be greater than 0 (got {value})")


def _validate_path(path, name: str) -> None:
    if path is None:
        raise InvalidArgument(f"{name} cannot be None")
    if not str(path).strip():
        raise InvalidArgument(f"{name} cannot be empty")


class FactoryScheduler:
    """
    Production scheduler for a set of independent part machines.

    Usage::

        factory = FactoryScheduler(machine_specs, orders, seed=42)
        factory.run(days=5, minutes=480)
        factory.inventory_count(1)
    """

    def __init__(
        self,
        machines: Sequence[MachineSpec],
        orders: Iterable[Order] = (),
        seed: int = DEFAULT_SEED,
    ) -> None:
        self.env  = simpy.Environment()
        self.seed = seed
        self.rng  = random.Random(seed)

        # ── Machines ──────────────────────────────────────────────────────────
        self.lines: List[ProductionLine] = [
            ProductionLine.from_spec(spec, self.rng) for spec in machines
        ]

        # ── Part catalog (type id → template part) ────────────────────────────
        self.catalog: Dict[int, Part] = {
            line.part.type_id: line.part for line in self.lines
        }

        # ── Stock ─────────────────────────────────────────────────────────────
        self.production_bin = ProductionBuffer()
        self.inventory      = Inventory(self.catalog)
        self.defects        = DefectLedger(self.catalog)

        # ── Orders ────────────────────────────────────────────────────────────
        self.order_book = OrderBook(orders)

        # ── Metrics ───────────────────────────────────────────────────────────
        self.metrics = MetricsCollector(self.env)
        self.day     = 0

        logger.info(
            "Factory ready: %d machine(s), %d part type(s), %d order(s), seed=%s",
            len(self.lines), len(self.catalog), len(self.order_book), seed,
        )

    @classmethod
    def from_files(
        cls,
        parts_path: str,
        orders_path: str,
        seed: int = DEFAULT_SEED,
    ) -> "FactoryScheduler":
        """Build a factory from a machine CSV and an order CSV."""
        from .loader import load_machines, load_orders

        _validate_path(parts_path, "Parts path")
        _validate_path(orders_path, "Orders path")
        return cls(load_machines(parts_path), load_orders(orders_path), seed=seed)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def orders(self) -> List[Order]:
        return self.order_book.orders

    def get_line(self, machine_id: int) -> ProductionLine:
        for line in self.lines:
            if line.id == machine_id:
                return line
        raise KeyError(f"No machine with id {machine_id}")

    def produced_count(self, machine_id: int) -> int:
        return self.get_line(machine_id).produced_count

    def defect_count(self, type_id: int) -> int:
        return self.defects.count(type_id)

    def inventory_count(self, type_id: int) -> int:
        return self.inventory.count(type_id)

    # =========================================================================
    # Production
    # =========================================================================

    def production_shift(self, minutes: int):
        """
        SimPy process for one working day: tick every line once per minute.
        """
        for _ in range(minutes):
            for line in self.lines:
                before = line.produced_count
                part   = line.tick()
                if line.produced_count != before:
                    self.metrics.record_production(line.id, line.last_produced)
                if part is not None:
                    self.production_bin.push(part)
            yield self.env.timeout(1)

    def flush_conveyors(self) -> int:
        """Move every part still in transit into the production bin."""
        flushed = 0
        for line in self.lines:
            for part in line.drain_conveyor():
                self.production_bin.push(part)
                flushed += 1
        self.metrics.flushed_in_transit += flushed
        return flushed

    def store_in_inventory(self) -> None:
        """Empty the production bin into inventory and the defect ledger."""
        for part in self.production_bin.drain():
            if part.defective:
                self.defects.record(part)
            else:
                self.inventory.add(part)
            self.metrics.record_drain(part)

    def end_of_day(self) -> None:
        in_transit = sum(line.in_transit for line in self.lines)
        self.flush_conveyors()
        self.store_in_inventory()
        self.day += 1

        self.metrics.record_snapshot(DailySnapshot(
            day        = self.day,
            inventory  = self.inventory.levels(),
            defects    = self.defects.levels(),
            produced   = {line.id: line.produced_count for line in self.lines},
            in_transit = in_transit,
        ))
        logger.debug(
            "Day %d closed: %d in stock, %d defective, %d flushed from belts",
            self.day, len(self.inventory), self.defects.total(), in_transit,
        )

    # =========================================================================
    # Orders
    # =========================================================================

    def process_orders(self) -> List[Order]:
        filled = self.order_book.match(self.inventory)
        logger.info(
            "Order matching: %d fulfilled this pass, %d pending",
            len(filled), len(self.order_book.pending()),
        )
        return filled

    # =========================================================================
    # Run
    # =========================================================================

    def run(
        self,
        days: int,
        minutes: int,
        on_day_end: Optional[Callable[[int], None]] = None,
        on_shift_end: Optional[Callable[[int], None]] = None,
    ) -> List[Order]:
        """
        Simulate *days* days of *minutes* minutes each, then match orders.

        ``on_shift_end(day)`` runs after the last minute of a day while parts
        are still on the belts; ``on_day_end(day)`` runs after the drain.
        Returns the orders fulfilled by the matching pass.
        """
        _validate_positive(days, "Days")
        _validate_positive(minutes, "Minutes")

        for _ in range(days):
            shift = self.env.process(self.production_shift(minutes))
            self.env.run(until=shift)
            if on_shift_end is not None:
                on_shift_end(self.day + 1)
            self.end_of_day()
            if on_day_end is not None:
                on_day_end(self.day)

        return self.process_orders()
