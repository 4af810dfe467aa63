from __future__ import annotations

import logging
from dataclasses import dataclass

from flightthepower.errors import PurchaseError
from flightthepower.ledger import Ledger
from flightthepower.production import LivePower

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a single buy-one-unit attempt."""

    success: bool
    power_id: int
    error: PurchaseError | None = None
    new_owned: int = 0
    ledger_after: int = 0

    def __bool__(self) -> bool:
        return self.success


def purchase(
    power_id: int, ledger: Ledger, live_powers: dict[int, LivePower]
) -> PurchaseResult:
    """Buy one unit of a live power. Nothing changes unless every check passes."""
    live = live_powers.get(power_id)
    if live is None:
        return _reject(power_id, PurchaseError.NOT_FOUND, ledger)

    power = live.power
    # A maxed-out power reports MAX_OWNED_REACHED even when also unaffordable
    if power.current_owned >= power.max_owned:
        return _reject(power_id, PurchaseError.MAX_OWNED_REACHED, ledger)
    if ledger.value - power.cost < 0:
        return _reject(power_id, PurchaseError.INSUFFICIENT_FUNDS, ledger)

    ledger.add(-power.cost)
    power.current_owned += 1
    logger.info(
        "Bought power %d (%s), now own %d",
        power_id,
        power.title,
        power.current_owned,
    )
    return PurchaseResult(
        success=True,
        power_id=power_id,
        new_owned=power.current_owned,
        ledger_after=ledger.value,
    )


def _reject(power_id: int, error: PurchaseError, ledger: Ledger) -> PurchaseResult:
    logger.debug("Purchase of power %d rejected: %s", power_id, error.name)
    return PurchaseResult(
        success=False, power_id=power_id, error=error, ledger_after=ledger.value
    )
