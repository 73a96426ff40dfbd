"""Order book and the all-or-nothing order matcher."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

from .inventory import Inventory
from .models import Order

logger = logging.getLogger(__name__)


class OrderBook:
    """Customer orders kept in the order they were received."""

    def __init__(self, orders: Iterable[Order] = ()) -> None:
        self._orders: List[Order] = list(orders)

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    def pending(self) -> List[Order]:
        return [o for o in self._orders if not o.fulfilled]

    def fulfilled(self) -> List[Order]:
        return [o for o in self._orders if o.fulfilled]

    def __iter__(self) -> Iterator[Order]:
        return iter(list(self._orders))

    def __len__(self) -> int:
        return len(self._orders)

    # ── Matching ──────────────────────────────────────────────────────────────

    @staticmethod
    def can_fulfil(order: Order, inventory: Inventory) -> bool:
        return all(
            inventory.count(type_id) >= qty
            for type_id, qty in order.requested_parts.items()
        )

    def match(self, inventory: Inventory) -> List[Order]:
        """
        One pass over pending orders in arrival order.

        Each order that the current stock fully covers consumes its parts
        (oldest first) and is marked fulfilled. Returns the orders fulfilled
        by this pass.
        """
        filled: List[Order] = []
        for idx, order in enumerate(self._orders):
            if order.fulfilled:
                continue
            if not self.can_fulfil(order, inventory):
                logger.debug("Order %s pending: insufficient stock", order.id)
                continue

            for type_id, qty in order.requested_parts.items():
                inventory.take(type_id, qty)
            self._orders[idx] = order.with_fulfilled()
            filled.append(self._orders[idx])
            logger.debug("Order %s fulfilled for %s", order.id, order.customer_name)

        return filled
