"""
ProductionLine: one machine, its cycle timer and its output conveyor.

Every simulated minute the line is ticked once:

   timer ring   [p-1, p-2, …, 0]  ── head ──► countdown value
        │
        │ 0 → press a new Part, anything else → press nothing
        ▼
   conveyor ring (CONVEYOR_LENGTH slots)
        front slot exits the belt ──► returned by tick()

A part pressed on minute *t* therefore leaves the conveyor on minute
*t + CONVEYOR_LENGTH* unless the belt is flushed first.
"""

from __future__ import annotations

import random
from typing import Iterator, List, Optional

from .config import CONVEYOR_LENGTH
from .errors import InvalidConfiguration
from .models import MachineSpec, Part


class ProductionLine:
    """
    A machine producing a single part type on a fixed cadence.

    Usage::

        rng  = random.Random(42)
        line = ProductionLine.from_spec(spec, rng)
        part = line.tick()        # None while nothing exits the conveyor
    """

    def __init__(
        self,
        machine_id: int,
        part: Part,
        period: int,
        weight_error: float,
        defect_interval: int,
        rng: Optional[random.Random] = None,
        conveyor_length: int = CONVEYOR_LENGTH,
    ) -> None:
        for label, value in (("period", period), ("defect interval", defect_interval)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(
                    f"Machine {machine_id}: {label} must be an integer (got {value!r})"
                )
        if period <= 0:
            raise InvalidConfiguration(
                f"Machine {machine_id}: period must be greater than 0 (got {period})"
            )
        if defect_interval <= 0:
            raise InvalidConfiguration(
                f"Machine {machine_id}: defect interval must be greater than 0 "
                f"(got {defect_interval})"
            )
        if weight_error < 0:
            raise InvalidConfiguration(
                f"Machine {machine_id}: weight error cannot be negative (got {weight_error})"
            )
        if conveyor_length <= 0:
            raise InvalidConfiguration(
                f"Machine {machine_id}: conveyor length must be greater than 0"
            )

        self.id              = machine_id
        self.part            = part
        self.period          = period
        self.weight_error    = weight_error
        self.defect_interval = defect_interval
        self.conveyor_length = conveyor_length
        self.rng             = rng if rng is not None else random.Random()

        self.produced_count: int            = 0
        self.last_produced:  Optional[Part] = None

        # ── Timer ring ────────────────────────────────────────────────────────
        self._timer:      List[int] = self._initial_timer()
        self._timer_head: int       = 0

        # ── Conveyor ring ─────────────────────────────────────────────────────
        self._belt:      List[Optional[Part]] = []
        self._belt_head: int                  = 0
        self.reset_conveyor_belt()

    @classmethod
    def from_spec(cls, spec: MachineSpec, rng: Optional[random.Random] = None) -> "ProductionLine":
        return cls(
            machine_id      = spec.id,
            part            = spec.template,
            period          = spec.period,
            weight_error    = spec.weight_error,
            defect_interval = spec.defect_interval,
            rng             = rng,
        )

    # =========================================================================
    # Timer
    # =========================================================================

    def _initial_timer(self) -> List[int]:
        return list(range(self.period - 1, -1, -1))

    def tick_timer(self) -> int:
        """Return the countdown value at the head, then rotate the ring."""
        if not self._timer:
            self._timer      = self._initial_timer()
            self._timer_head = 0

        value = self._timer[self._timer_head]
        self._timer_head = (self._timer_head + 1) % len(self._timer)
        return value

    @property
    def countdown(self) -> int:
        """Minutes left before the next part is pressed (0 = this tick)."""
        return self._timer[self._timer_head] if self._timer else self.period - 1

    # =========================================================================
    # Conveyor
    # =========================================================================

    def reset_conveyor_belt(self) -> None:
        """Re-arm the conveyor with ``conveyor_length`` empty slots."""
        self._belt      = [None] * self.conveyor_length
        self._belt_head = 0

    @property
    def conveyor_size(self) -> int:
        return len(self._belt)

    def conveyor_snapshot(self) -> List[Optional[Part]]:
        """Slots ordered front (next to exit) to back (newest)."""
        n = len(self._belt)
        return [self._belt[(self._belt_head + i) % n] for i in range(n)]

    @property
    def in_transit(self) -> int:
        return sum(1 for slot in self._belt if slot is not None)

    def drain_conveyor(self) -> Iterator[Part]:
        """
        Flush every part still on the belt, front first.

        The belt is left empty; the next :meth:`tick` re-arms it.
        """
        slots = self.conveyor_snapshot()
        self._belt      = []
        self._belt_head = 0
        for slot in slots:
            if slot is not None:
                yield slot

    def _shift_belt(self, incoming: Optional[Part]) -> Optional[Part]:
        # Front slot leaves and the incoming slot takes its place at the back.
        outgoing = self._belt[self._belt_head]
        self._belt[self._belt_head] = incoming
        self._belt_head = (self._belt_head + 1) % len(self._belt)
        return outgoing

    # =========================================================================
    # Production
    # =========================================================================

    def _press_part(self) -> Part:
        base  = self.part.weight
        err   = self.weight_error
        part  = Part(
            type_id   = self.part.type_id,
            name      = self.part.name,
            weight    = base - err + 2 * err * self.rng.random(),
            defective = self.produced_count % self.defect_interval == 0,
            serial    = self.produced_count,
        )
        self.produced_count += 1
        self.last_produced   = part
        return part

    def tick(self) -> Optional[Part]:
        """
        Advance the line by one minute.

        Returns the part leaving the conveyor this minute, or ``None``.
        """
        if not self._belt:
            self.reset_conveyor_belt()

        remaining = self.tick_timer()
        incoming  = self._press_part() if remaining == 0 else None
        return self._shift_belt(incoming)

    # =========================================================================
    # Presentation
    # =========================================================================

    def render_conveyor(self) -> str:
        """``|Machine {id}|`` followed by the belt, newest slot leftmost."""
        cells = "".join(
            "_" if slot is None else "|P|"
            for slot in reversed(self.conveyor_snapshot())
        )
        return f"|Machine {self.id}|{cells}"

    def __str__(self) -> str:
        return f"Machine {self.id} Produced: {self.part.name} {self.produced_count}"

    def __repr__(self) -> str:
        return (
            f"ProductionLine(id={self.id}, part={self.part.name!r}, "
            f"period={self.period}, defect_interval={self.defect_interval})"
        )
