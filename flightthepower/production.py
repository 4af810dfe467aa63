from __future__ import annotations

import logging
from dataclasses import dataclass, field

from flightthepower.ledger import Ledger
from flightthepower.power import Power

logger = logging.getLogger(__name__)


class ProductionTimer:
    """Repeating timer that completes at most once per tick.

    On completion the elapsed time resets to zero; any overrun past the
    period is discarded rather than carried into the next period.
    """

    def __init__(self, period: float) -> None:
        if period <= 0:
            raise ValueError(f"Timer period must be positive, got {period}")
        self.period = period
        self.elapsed = 0.0

    def tick(self, delta: float) -> bool:
        """Advance by *delta* seconds. Returns True if the period completed."""
        if delta < 0:
            raise ValueError(f"Cannot advance a timer by negative time ({delta})")
        self.elapsed += delta
        if self.elapsed >= self.period:
            self.elapsed = 0.0
            return True
        return False

    @property
    def remaining(self) -> float:
        return max(self.period - self.elapsed, 0.0)

    def reset(self) -> None:
        self.elapsed = 0.0


@dataclass
class LivePower:
    """Runtime instance of an unlocked power: a working copy plus its timer."""

    power: Power
    timer: ProductionTimer = field(init=False)

    def __post_init__(self) -> None:
        self.timer = ProductionTimer(self.power.production_rate)

    @classmethod
    def spawn(cls, catalog_entry: Power) -> LivePower:
        return cls(catalog_entry.copy())

    @property
    def id(self) -> int:
        return self.power.id


class ProductionClock:
    """Advances every live power's timer and credits finished periods."""

    def advance(
        self, delta: float, live_powers: dict[int, LivePower], ledger: Ledger
    ) -> int:
        """Tick all timers in id order. Returns the total amount credited."""
        total = 0
        for power_id in sorted(live_powers):
            live = live_powers[power_id]
            if not live.timer.tick(delta):
                continue
            amount = live.power.credit_per_period
            ledger.add(amount)
            total += amount
            if amount > 0:
                logger.debug("Total power +%d from power %d", amount, power_id)
        return total


class AutoClicker:
    """Settings-gated periodic +1 credit, independent of manual clicks."""

    def __init__(self, interval: float) -> None:
        self.timer = ProductionTimer(interval)

    def advance(self, delta: float, enabled: bool, ledger: Ledger) -> int:
        if not enabled:
            return 0
        if self.timer.tick(delta):
            ledger.add(1)
            return 1
        return 0
