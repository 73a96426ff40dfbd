"""Metrics collection and KPI computation."""

from __future__ import annotations
from typing import Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    import simpy
    from .orders import OrderBook

from .models import DailySnapshot, Part, ProductionEvent


class MetricsCollector:
    """Accumulates every event that happens during a simulation run."""

    def __init__(self, env: "simpy.Environment") -> None:
        self.env = env

        # ── Event logs ────────────────────────────────────────────────────────
        self.production_events: List[ProductionEvent] = []
        self.daily_snapshots:   List[DailySnapshot]   = []

        # ── Aggregate counters ────────────────────────────────────────────────
        self.drained_accepted:  int = 0
        self.drained_defective: int = 0
        self.flushed_in_transit: int = 0   # parts pulled off belts at day end

    # ── Helpers ───────────────────────────────────────────────────────────────

    def record_production(self, machine_id: int, part: Part) -> None:
        self.production_events.append(ProductionEvent(
            minute     = self.env.now,
            machine_id = machine_id,
            type_id    = part.type_id,
            serial     = part.serial,
            weight     = part.weight,
            defective  = part.defective,
        ))

    def record_drain(self, part: Part) -> None:
        if part.defective:
            self.drained_defective += 1
        else:
            self.drained_accepted += 1

    def record_snapshot(self, snapshot: DailySnapshot) -> None:
        self.daily_snapshots.append(snapshot)

    def weights_by_type(self) -> Dict[int, List[float]]:
        out: Dict[int, List[float]] = {}
        for ev in self.production_events:
            out.setdefault(ev.type_id, []).append(ev.weight)
        return out

    # ── KPI computation ───────────────────────────────────────────────────────

    def compute_kpis(self, order_book: "OrderBook") -> dict:
        k: dict = {}

        # ── Production ────────────────────────────────────────────────────────
        events = self.production_events
        k["total_produced"]  = len(events)
        k["total_defective"] = sum(1 for e in events if e.defective)
        k["total_accepted"]  = k["total_produced"] - k["total_defective"]
        k["defect_rate_pct"] = (
            k["total_defective"] / k["total_produced"] * 100 if events else 0.0
        )
        k["mean_weight"] = (
            sum(e.weight for e in events) / len(events) if events else 0.0
        )

        k["produced_by_machine"] = {}
        for e in events:
            k["produced_by_machine"][e.machine_id] = (
                k["produced_by_machine"].get(e.machine_id, 0) + 1
            )

        k["flushed_in_transit"] = self.flushed_in_transit
        k["days_simulated"]     = len(self.daily_snapshots)

        # ── Orders ────────────────────────────────────────────────────────────
        orders    = order_book.orders
        fulfilled = [o for o in orders if o.fulfilled]
        k["total_orders"]     = len(orders)
        k["orders_fulfilled"] = len(fulfilled)
        k["orders_pending"]   = len(orders) - len(fulfilled)
        k["fill_rate_pct"]    = (len(fulfilled) / len(orders) * 100) if orders else 0.0

        units_req = sum(o.total_units for o in orders)
        units_out = sum(o.total_units for o in fulfilled)
        k["units_requested"] = units_req
        k["units_shipped"]   = units_out
        k["unit_fill_rate_pct"] = (units_out / units_req * 100) if units_req else 0.0

        return k
