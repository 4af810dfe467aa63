from __future__ import annotations

import logging

from flightthepower.events import (
    ManualClick,
    PowerUnlocked,
    PurchaseCompleted,
    RequestPurchase,
)
from flightthepower.metrics import MetricsCollector
from flightthepower.report import SimulationReport, build_report
from flightthepower.session import GameSession
from flightthepower.strategy import Strategy

logger = logging.getLogger(__name__)

MAX_TICKS = 10_000_000


class Simulation:
    """Drives a session headless with a purchasing strategy and records metrics."""

    def __init__(
        self,
        strategy: Strategy,
        duration: float,
        tick_resolution: float = 1.0,
        session: GameSession | None = None,
        stop_on_unlock: int | None = None,
    ) -> None:
        if tick_resolution <= 0:
            raise ValueError("tick_resolution must be positive")
        self.strategy = strategy
        self.duration = duration
        self.tick_resolution = tick_resolution
        self.session = session or GameSession.new()
        self.stop_on_unlock = stop_on_unlock
        self.collector = MetricsCollector(snapshot_interval=tick_resolution)

    def run(self) -> SimulationReport:
        session = self.session
        tick_count = 0
        outcome = "Duration reached"

        while session.time_elapsed < self.duration:
            tick_count += 1
            if tick_count > MAX_TICKS:
                outcome = "Max ticks reached"
                break

            # Clicks are queued ahead of purchases so they can fund them
            for _ in range(self.strategy.get_clicks(self.tick_resolution)):
                session.submit(ManualClick())
            affordable = [s for s in session.power_statuses() if s.affordable]
            for power_id in self.strategy.decide_purchases(session, affordable):
                session.submit(RequestPurchase(power_id))

            costs = {s.id: s.cost for s in session.power_statuses()}
            stop = False
            for signal in session.tick(self.tick_resolution):
                if isinstance(signal, PowerUnlocked):
                    self.collector.record_unlock(session, signal.power_id)
                    if signal.power_id == self.stop_on_unlock:
                        stop = True
                elif isinstance(signal, PurchaseCompleted):
                    self.collector.record_purchase(
                        session, signal.power_id, costs.get(signal.power_id, 0)
                    )

            self.collector.record_tick(session)
            if stop:
                outcome = f"Power {self.stop_on_unlock} unlocked"
                break

        logger.info(
            "Simulation finished at %.1fs: %s (%d purchases)",
            session.time_elapsed,
            outcome,
            len(self.collector.purchases),
        )
        return build_report(
            collector=self.collector,
            strategy_description=self.strategy.describe(),
            outcome=outcome,
            total_time=session.time_elapsed,
            final_total_power=session.ledger_value,
            final_owned={pid: session.owned(pid) for pid in sorted(session.live_powers)},
        )
