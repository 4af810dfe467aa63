"""Commands consumed from the presentation layer and signals produced for it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from flightthepower.errors import PurchaseError


# ── Commands (presentation -> core) ──────────────────────────────────


@dataclass(frozen=True)
class RequestPurchase:
    power_id: int


@dataclass(frozen=True)
class ManualClick:
    pass


@dataclass(frozen=True)
class RequestSave:
    pass


@dataclass(frozen=True)
class RequestExit:
    pass


@dataclass(frozen=True)
class ToggleAutoClick:
    pass


Command = Union[RequestPurchase, ManualClick, RequestSave, RequestExit, ToggleAutoClick]


# ── Signals (core -> presentation) ───────────────────────────────────


@dataclass(frozen=True)
class PowerUnlocked:
    power_id: int


@dataclass(frozen=True)
class PurchaseCompleted:
    power_id: int
    new_owned: int
    ledger_after: int


@dataclass(frozen=True)
class PurchaseRejected:
    power_id: int
    error: PurchaseError


@dataclass(frozen=True)
class AutoClickToggled:
    enabled: bool


@dataclass(frozen=True)
class GameSaved:
    results: dict[str, bool] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return bool(self.results) and all(self.results.values())


@dataclass(frozen=True)
class SessionExited:
    pass


Signal = Union[
    PowerUnlocked,
    PurchaseCompleted,
    PurchaseRejected,
    AutoClickToggled,
    GameSaved,
    SessionExited,
]


class CommandQueue:
    """FIFO of commands waiting for the next tick."""

    def __init__(self) -> None:
        self._commands: list[Command] = []

    def push(self, command: Command) -> None:
        self._commands.append(command)

    def drain(self) -> list[Command]:
        commands = self._commands[:]
        self._commands.clear()
        return commands

    def __len__(self) -> int:
        return len(self._commands)
