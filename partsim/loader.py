"""
CSV loaders for the machine and order tables.

Machine table columns::

    id,name,weight,weight_error,period,defect_interval

Order table columns::

    id,customer,requested_parts          # e.g.  7,Island Motors,(1 3)-(2 4)

A row that cannot be parsed is skipped with a warning. A file that cannot be
read or is not valid UTF-8 is reported and yields an empty dataset.
"""

from __future__ import annotations

import csv
import logging
from typing import List, Optional, Tuple

from .config import MACHINES, ORDERS
from .errors import InvalidConfiguration
from .models import MachineSpec, Order

logger = logging.getLogger(__name__)


def parse_requested_parts(text: str) -> List[Tuple[int, int]]:
    """
    Parse ``(id qty)-(id qty)…`` into ``[(id, qty), …]`` in written order.

    Repeated part ids are kept as separate pairs; :meth:`Order.from_pairs`
    adds them up.
    """
    pairs: List[Tuple[int, int]] = []
    for chunk in text.strip().split("-"):
        pair = chunk.replace("(", "").replace(")", "").split()
        if len(pair) != 2:
            raise ValueError(f"Malformed part request {chunk!r}")
        type_id, qty = int(pair[0]), int(pair[1])
        pairs.append((type_id, qty))
    return pairs


def _machine_from_row(row: List[str]) -> MachineSpec:
    if len(row) < 6:
        raise ValueError(f"expected 6 columns, got {len(row)}")
    return MachineSpec(
        id              = int(row[0]),
        name            = row[1].strip(),
        weight          = float(row[2]),
        weight_error    = float(row[3]),
        period          = int(row[4]),
        defect_interval = int(row[5]),
    )


def _order_from_row(row: List[str]) -> Order:
    if len(row) < 3:
        raise ValueError(f"expected 3 columns, got {len(row)}")
    return Order.from_pairs(
        order_id      = int(row[0]),
        customer_name = row[1].strip(),
        pairs         = parse_requested_parts(row[2]),
    )


def _read_rows(path: str, label: str) -> Optional[List[List[str]]]:
    try:
        with open(path, newline="", encoding="utf-8") as fh:
            rows = list(csv.reader(fh))
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("%s file %s cannot be read: %s", label, path, exc)
        return None
    # Header row, then data; blank lines carry no data.
    return [r for r in rows[1:] if any(cell.strip() for cell in r)]


def load_machines(path: str) -> List[MachineSpec]:
    rows = _read_rows(path, "Machine")
    if rows is None:
        return []

    specs: List[MachineSpec] = []
    for lineno, row in enumerate(rows, start=2):
        try:
            specs.append(_machine_from_row(row))
        except (ValueError, InvalidConfiguration) as exc:
            logger.warning("Skipping machine row %d in %s: %s", lineno, path, exc)
    logger.info("Loaded %d machine(s) from %s", len(specs), path)
    return specs


def load_orders(path: str) -> List[Order]:
    rows = _read_rows(path, "Order")
    if rows is None:
        return []

    orders: List[Order] = []
    for lineno, row in enumerate(rows, start=2):
        try:
            orders.append(_order_from_row(row))
        except (ValueError, InvalidConfiguration) as exc:
            logger.warning("Skipping order row %d in %s: %s", lineno, path, exc)
    logger.info("Loaded %d order(s) from %s", len(orders), path)
    return orders


# ── Built-in sample dataset ───────────────────────────────────────────────────

def machines_from_config() -> List[MachineSpec]:
    return [MachineSpec(**row) for row in MACHINES]


def orders_from_config() -> List[Order]:
    return [
        Order.from_pairs(
            row["id"], row["customer"], parse_requested_parts(row["requested_parts"]),
        )
        for row in ORDERS
    ]
