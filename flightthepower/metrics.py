from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flightthepower.session import GameSession


@dataclass
class LedgerSnapshot:
    time: float
    total_power: int
    owned: dict[int, int] = field(default_factory=dict)


@dataclass
class PurchaseEvent:
    time: float
    power_id: int
    cost_paid: int
    total_power_after: int


@dataclass
class UnlockEvent:
    time: float
    power_id: int


class MetricsCollector:
    """Collects simulation metrics at configurable intervals."""

    def __init__(self, snapshot_interval: float = 1.0) -> None:
        self.snapshot_interval = snapshot_interval
        self._last_snapshot_time: float = -1.0

        self.snapshots: list[LedgerSnapshot] = []
        self.purchases: list[PurchaseEvent] = []
        self.unlocks: list[UnlockEvent] = []

    def record_tick(self, session: GameSession) -> None:
        """Record a snapshot if enough time has passed."""
        if session.time_elapsed - self._last_snapshot_time >= self.snapshot_interval:
            self._take_snapshot(session)
            self._last_snapshot_time = session.time_elapsed

    def record_purchase(
        self, session: GameSession, power_id: int, cost_paid: int
    ) -> None:
        self.purchases.append(
            PurchaseEvent(
                time=session.time_elapsed,
                power_id=power_id,
                cost_paid=cost_paid,
                total_power_after=session.ledger_value,
            )
        )

    def record_unlock(self, session: GameSession, power_id: int) -> None:
        self.unlocks.append(UnlockEvent(time=session.time_elapsed, power_id=power_id))

    def _take_snapshot(self, session: GameSession) -> None:
        self.snapshots.append(
            LedgerSnapshot(
                time=session.time_elapsed,
                total_power=session.ledger_value,
                owned={pid: session.owned(pid) for pid in session.live_powers},
            )
        )
