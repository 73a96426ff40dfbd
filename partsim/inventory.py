"""Production bin, finished-parts inventory and defect ledger."""

from __future__ import annotations
from collections import deque
from typing import Deque, Dict, Iterable, Iterator, List, Optional

from .models import Part


class ProductionBuffer:
    """LIFO bin collecting every part that leaves a conveyor during a day."""

    def __init__(self) -> None:
        self._items: List[Part] = []

    def push(self, part: Part) -> None:
        self._items.append(part)

    def pop(self) -> Part:
        if not self._items:
            raise IndexError("pop from an empty production buffer")
        return self._items.pop()

    def peek(self) -> Optional[Part]:
        return self._items[-1] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def drain(self) -> Iterator[Part]:
        """Pop until empty, newest first."""
        while self._items:
            yield self._items.pop()

    def __len__(self) -> int:
        return len(self._items)


class Inventory:
    """Accepted parts per part type, oldest at the front."""

    def __init__(self, type_ids: Iterable[int] = ()) -> None:
        self._stock: Dict[int, Deque[Part]] = {t: deque() for t in type_ids}

    def add(self, part: Part) -> None:
        self._stock.setdefault(part.type_id, deque()).append(part)

    def count(self, type_id: int) -> int:
        stock = self._stock.get(type_id)
        return len(stock) if stock is not None else 0

    def take(self, type_id: int, qty: int) -> List[Part]:
        """Remove and return the *qty* oldest units of *type_id*."""
        if qty > self.count(type_id):
            raise ValueError(
                f"Cannot take {qty} of part {type_id}: only {self.count(type_id)} in stock"
            )
        stock = self._stock.get(type_id, deque())
        return [stock.popleft() for _ in range(qty)]

    def parts(self, type_id: int) -> List[Part]:
        return list(self._stock.get(type_id, ()))

    def type_ids(self) -> List[int]:
        return list(self._stock.keys())

    def levels(self) -> Dict[int, int]:
        return {t: len(stock) for t, stock in self._stock.items()}

    def __len__(self) -> int:
        return sum(len(stock) for stock in self._stock.values())


class DefectLedger:
    """Count of defective parts scrapped per part type."""

    def __init__(self, type_ids: Iterable[int] = ()) -> None:
        self._counts: Dict[int, int] = {t: 0 for t in type_ids}

    def record(self, part: Part) -> None:
        self._counts[part.type_id] = self._counts.get(part.type_id, 0) + 1

    def count(self, type_id: int) -> int:
        return self._counts.get(type_id, 0)

    def levels(self) -> Dict[int, int]:
        return dict(self._counts)

    def total(self) -> int:
        return sum(self._counts.values())
