from __future__ import annotations

from dataclasses import dataclass, field

from flightthepower.metrics import (
    LedgerSnapshot,
    MetricsCollector,
    PurchaseEvent,
    UnlockEvent,
)


@dataclass
class SimulationReport:
    """Container for simulation results and derived metrics."""

    strategy_description: str = ""
    outcome: str = ""
    total_time: float = 0.0
    final_total_power: int = 0
    final_owned: dict[int, int] = field(default_factory=dict)

    # Raw metrics
    snapshots: list[LedgerSnapshot] = field(default_factory=list)
    purchases: list[PurchaseEvent] = field(default_factory=list)
    unlocks: list[UnlockEvent] = field(default_factory=list)

    # Derived metrics
    unlock_times: dict[int, float] = field(default_factory=dict)
    purchase_gaps: list[float] = field(default_factory=list)
    max_purchase_gap: float = 0.0
    mean_purchase_gap: float = 0.0
    purchases_per_minute: float = 0.0

    def unlock_time(self, power_id: int) -> float | None:
        return self.unlock_times.get(power_id)

    def total_power_series(self) -> list[tuple[float, int]]:
        """Return (time, total power) pairs."""
        return [(s.time, s.total_power) for s in self.snapshots]

    def purchase_counts(self) -> dict[int, int]:
        counts: dict[int, int] = {}
        for p in self.purchases:
            counts[p.power_id] = counts.get(p.power_id, 0) + 1
        return counts


def build_report(
    collector: MetricsCollector,
    strategy_description: str,
    outcome: str,
    total_time: float,
    final_total_power: int,
    final_owned: dict[int, int],
) -> SimulationReport:
    """Build a SimulationReport from collected metrics."""
    unlock_times = {u.power_id: u.time for u in collector.unlocks}

    # Purchase gaps
    purchase_gaps: list[float] = []
    purchase_times = sorted(p.time for p in collector.purchases)
    if purchase_times:
        purchase_gaps.append(purchase_times[0])  # gap from t=0 to first purchase
        for i in range(1, len(purchase_times)):
            purchase_gaps.append(purchase_times[i] - purchase_times[i - 1])

    max_gap = max(purchase_gaps) if purchase_gaps else 0.0
    mean_gap = (sum(purchase_gaps) / len(purchase_gaps)) if purchase_gaps else 0.0
    ppm = (len(collector.purchases) / total_time * 60.0) if total_time > 0 else 0.0

    return SimulationReport(
        strategy_description=strategy_description,
        outcome=outcome,
        total_time=total_time,
        final_total_power=final_total_power,
        final_owned=final_owned,
        snapshots=collector.snapshots,
        purchases=collector.purchases,
        unlocks=collector.unlocks,
        unlock_times=unlock_times,
        purchase_gaps=purchase_gaps,
        max_purchase_gap=max_gap,
        mean_purchase_gap=mean_gap,
        purchases_per_minute=ppm,
    )
