from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flightthepower.power import PowerStatus

if TYPE_CHECKING:
    from flightthepower.session import GameSession


@dataclass
class ClickProfile:
    """Configures manual clicking for strategies."""

    clicks_per_second: float = 0.0

    def get_clicks(self, duration: float) -> int:
        return max(int(self.clicks_per_second * duration), 0)


class Strategy(ABC):
    """Base class for simulation strategies."""

    def __init__(self, click_profile: ClickProfile | None = None) -> None:
        self.click_profile = click_profile

    @abstractmethod
    def decide_purchases(
        self, session: GameSession, affordable: list[PowerStatus]
    ) -> list[int]:
        """Return ordered list of power ids to buy this tick."""
        ...

    def get_clicks(self, duration: float) -> int:
        if self.click_profile:
            return self.click_profile.get_clicks(duration)
        return 0

    @abstractmethod
    def describe(self) -> str: ...

    def _describe_clicks(self) -> str:
        if self.click_profile and self.click_profile.clicks_per_second > 0:
            return f" ({self.click_profile.clicks_per_second:g} CPS)"
        return ""


class GreedyCheapest(Strategy):
    """Buy the cheapest affordable power first."""

    def decide_purchases(
        self, session: GameSession, affordable: list[PowerStatus]
    ) -> list[int]:
        return [s.id for s in sorted(affordable, key=lambda s: (s.cost, s.id))]

    def describe(self) -> str:
        return "GreedyCheapest" + self._describe_clicks()


class SaveForBest(Strategy):
    """Save up for the unlocked power with the best output per unit of cost."""

    def decide_purchases(
        self, session: GameSession, affordable: list[PowerStatus]
    ) -> list[int]:
        candidates = [
            s
            for s in session.power_statuses()
            if s.unlocked and s.current_owned < s.max_owned and s.production_amount > 0
        ]
        if not candidates:
            return []
        best = max(candidates, key=_efficiency)
        if any(s.id == best.id for s in affordable):
            return [best.id]
        return []

    def describe(self) -> str:
        return "SaveForBest" + self._describe_clicks()


def _efficiency(status: PowerStatus) -> float:
    per_second = status.production_amount / status.production_rate
    if status.cost <= 0:
        return float("inf")
    return per_second / status.cost
