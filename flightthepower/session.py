from __future__ import annotations

import logging
from typing import Any

from flightthepower.catalog import PowerCatalog
from flightthepower.errors import SessionClosedError
from flightthepower.events import (
    AutoClickToggled,
    Command,
    CommandQueue,
    GameSaved,
    ManualClick,
    PurchaseCompleted,
    PurchaseRejected,
    RequestExit,
    RequestPurchase,
    RequestSave,
    SessionExited,
    Signal,
    ToggleAutoClick,
)
from flightthepower.ledger import Ledger
from flightthepower.persistence import PersistenceGateway
from flightthepower.power import PowerStatus
from flightthepower.production import AutoClicker, LivePower, ProductionClock
from flightthepower.purchase import purchase
from flightthepower.settings import Settings
from flightthepower.unlock import UnlockEngine, UnlockFlags

logger = logging.getLogger(__name__)


class GameSession:
    """Owns all mutable game state and runs the per-tick simulation pass."""

    def __init__(
        self,
        ledger: Ledger,
        catalog: PowerCatalog,
        unlock_flags: UnlockFlags,
        settings: Settings,
        gateway: PersistenceGateway | None = None,
    ) -> None:
        self.ledger = ledger
        self.catalog = catalog
        self.flags = unlock_flags.merged_with(catalog.ids())
        self.settings = settings
        self.gateway = gateway

        self.unlocks = UnlockEngine(self.flags)
        self.clock = ProductionClock()
        self.auto_clicker = AutoClicker(settings.auto_click_interval)
        self.live_powers: dict[int, LivePower] = {}
        self.commands = CommandQueue()
        self.time_elapsed: float = 0.0
        self.exited = False

        # Powers unlocked in an earlier session are live from the start
        for power_id in self.flags.unlocked_ids():
            self._spawn(power_id)

    @classmethod
    def new(
        cls,
        settings: Settings | None = None,
        gateway: PersistenceGateway | None = None,
    ) -> GameSession:
        """Fresh session with the built-in defaults."""
        catalog = PowerCatalog.defaults()
        return cls(
            ledger=Ledger(),
            catalog=catalog,
            unlock_flags=UnlockFlags.for_ids(catalog.ids()),
            settings=settings or Settings(),
            gateway=gateway,
        )

    @classmethod
    def start(cls, gateway: PersistenceGateway) -> GameSession:
        """Restore every aggregate from disk, using defaults for any that fail."""
        return cls(
            ledger=gateway.load_or_default(gateway.load_ledger, Ledger),
            catalog=gateway.load_or_default(gateway.load_catalog, PowerCatalog.defaults),
            unlock_flags=gateway.load_or_default(
                gateway.load_unlock_flags, UnlockFlags.defaults
            ),
            settings=gateway.load_or_default(gateway.load_settings, Settings),
            gateway=gateway,
        )

    # ── Core loop ────────────────────────────────────────────────────

    def submit(self, command: Command) -> None:
        """Queue a command from the presentation layer for the next tick."""
        if self.exited:
            raise SessionClosedError("Session has exited")
        self.commands.push(command)

    def tick(self, delta: float) -> list[Signal]:
        """Advance the game by *delta* seconds and apply queued commands.

        Order: timers and production credits, then unlocks, then commands in
        the order they were submitted. Returns the signals produced.
        """
        if self.exited:
            raise SessionClosedError("Session has exited")
        if delta < 0:
            raise ValueError(f"Tick delta must be non-negative, got {delta}")

        signals: list[Signal] = []

        self.clock.advance(delta, self.live_powers, self.ledger)
        self.auto_clicker.advance(delta, self.settings.auto_click, self.ledger)

        for unlocked in self.unlocks.evaluate(self.ledger.value, self.catalog):
            self._spawn(unlocked.power_id)
            signals.append(unlocked)

        self.time_elapsed += delta

        pending = self.commands.drain()
        for i, command in enumerate(pending):
            signals.extend(self._apply(command))
            if self.exited:
                dropped = len(pending) - i - 1
                if dropped:
                    logger.info("Dropped %d command(s) queued after exit", dropped)
                break
        return signals

    def save(self) -> dict[str, bool]:
        """Sync live owned counts into the catalog and write every aggregate."""
        self._sync_catalog()
        if self.gateway is None:
            logger.warning("No save location configured; nothing written")
            return {}
        return self.gateway.save_all(self.ledger, self.catalog, self.flags, self.settings)

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def ledger_value(self) -> int:
        return self.ledger.value

    def is_unlocked(self, power_id: int) -> bool:
        return self.flags.is_unlocked(power_id)

    def owned(self, power_id: int) -> int:
        live = self.live_powers.get(power_id)
        if live is not None:
            return live.power.current_owned
        power = self.catalog.find(power_id)
        return power.current_owned if power else 0

    def power_statuses(self) -> list[PowerStatus]:
        result: list[PowerStatus] = []
        for entry in self.catalog:
            live = self.live_powers.get(entry.id)
            power = live.power if live else entry
            result.append(
                PowerStatus(
                    id=power.id,
                    title=power.title,
                    cost=power.cost,
                    production_amount=power.production_amount,
                    production_rate=power.production_rate,
                    current_owned=power.current_owned,
                    max_owned=power.max_owned,
                    unlock_threshold=power.unlock_threshold,
                    unlocked=self.flags.is_unlocked(power.id),
                    affordable=(
                        live is not None
                        and self.ledger.value >= power.cost
                        and power.current_owned < power.max_owned
                    ),
                    next_credit_in=live.timer.remaining if live else None,
                )
            )
        return result

    def snapshot(self) -> dict[str, Any]:
        """JSON-friendly view of the state a renderer needs."""
        return {
            "total_power": self.ledger.value,
            "time_elapsed": round(self.time_elapsed, 3),
            "auto_click": self.settings.auto_click,
            "powers": [
                {
                    "id": s.id,
                    "title": s.title,
                    "owned": s.current_owned,
                    "unlocked": s.unlocked,
                }
                for s in self.power_statuses()
            ],
        }

    # ── Private helpers ──────────────────────────────────────────────

    def _apply(self, command: Command) -> list[Signal]:
        if isinstance(command, ManualClick):
            self.ledger.manual_click()
            return []
        if isinstance(command, RequestPurchase):
            result = purchase(command.power_id, self.ledger, self.live_powers)
            if result.success:
                return [
                    PurchaseCompleted(result.power_id, result.new_owned, result.ledger_after)
                ]
            return [PurchaseRejected(result.power_id, result.error)]
        if isinstance(command, ToggleAutoClick):
            self.settings.auto_click = not self.settings.auto_click
            logger.info("Auto-click %s", "on" if self.settings.auto_click else "off")
            return [AutoClickToggled(self.settings.auto_click)]
        if isinstance(command, RequestSave):
            return [GameSaved(self.save())]
        if isinstance(command, RequestExit):
            # Exit always saves first
            saved = GameSaved(self.save())
            self.exited = True
            logger.info("Session exited after %.1fs", self.time_elapsed)
            return [saved, SessionExited()]
        raise TypeError(f"Unknown command: {command!r}")

    def _spawn(self, power_id: int) -> None:
        if power_id in self.live_powers:
            logger.debug("Power %d already live", power_id)
            return
        if not self.flags.is_unlocked(power_id):
            logger.debug("Power %d not unlocked; not spawning", power_id)
            return
        entry = self.catalog.find(power_id)
        if entry is None:
            logger.warning("Unlocked power %d has no catalog entry", power_id)
            return
        self.live_powers[power_id] = LivePower.spawn(entry)
        logger.info("Spawned power %d (%s)", power_id, entry.title)

    def _sync_catalog(self) -> None:
        # Configuration fields are fixed after load; only the owned count moves
        for power_id, live in self.live_powers.items():
            self.catalog.sync_from_runtime(
                power_id, current_owned=live.power.current_owned
            )
