from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Ledger:
    """The single "total power" currency counter."""

    def __init__(self, value: int = 0) -> None:
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def add(self, amount: int) -> None:
        """Add *amount* (negative for debits). Callers guard the non-negative rule."""
        self._value += amount

    def manual_click(self) -> None:
        self.add(1)
        logger.debug("Click, total power now %d", self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self._value == other._value

    def __repr__(self) -> str:
        return f"Ledger({self._value})"
