from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from flightthepower.catalog import PowerCatalog
from flightthepower.events import PowerUnlocked

logger = logging.getLogger(__name__)


class UnlockFlags:
    """Per-power "is purchasable" flags. Flags only ever go from False to True."""

    def __init__(self, flags: dict[int, bool] | None = None) -> None:
        self._flags: dict[int, bool] = dict(flags or {})

    @classmethod
    def for_ids(cls, ids: Iterable[int]) -> UnlockFlags:
        return cls({i: False for i in ids})

    @classmethod
    def defaults(cls) -> UnlockFlags:
        return cls.for_ids(PowerCatalog.defaults().ids())

    def is_unlocked(self, power_id: int) -> bool:
        return self._flags.get(power_id, False)

    def has(self, power_id: int) -> bool:
        return power_id in self._flags

    def unlock(self, power_id: int) -> bool:
        """Set the flag. Returns True only on a False -> True transition."""
        if self._flags.get(power_id, False):
            return False
        self._flags[power_id] = True
        return True

    def unlocked_ids(self) -> list[int]:
        return sorted(i for i, v in self._flags.items() if v)

    def merged_with(self, ids: Iterable[int]) -> UnlockFlags:
        """Copy with an entry for every id; existing flags are kept as-is."""
        merged = dict(self._flags)
        for i in ids:
            merged.setdefault(i, False)
        return UnlockFlags(merged)

    def as_dict(self) -> dict[int, bool]:
        return dict(self._flags)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._flags))

    def __len__(self) -> int:
        return len(self._flags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnlockFlags):
            return NotImplemented
        return self._flags == other._flags

    def __repr__(self) -> str:
        return f"UnlockFlags(unlocked={self.unlocked_ids()})"

    # ── Serialization ────────────────────────────────────────────────

    def to_mapping(self) -> dict[str, bool]:
        # JSON object keys are strings
        return {str(i): v for i, v in sorted(self._flags.items())}

    @classmethod
    def from_mapping(cls, data: Any) -> UnlockFlags:
        if not isinstance(data, dict):
            raise TypeError(f"Unlock flags must be an object, got {type(data).__name__}")
        flags: dict[int, bool] = {}
        for key, value in data.items():
            if not isinstance(value, bool):
                raise TypeError(f"Unlock flag for {key!r} must be a boolean")
            power_id = int(key)
            if power_id < 0:
                raise ValueError(f"Invalid power id {key!r}")
            flags[power_id] = value
        return cls(flags)


class UnlockEngine:
    """Flips unlock flags once total power reaches each power's threshold."""

    def __init__(self, flags: UnlockFlags) -> None:
        self.flags = flags

    def evaluate(self, ledger_value: int, catalog: PowerCatalog) -> list[PowerUnlocked]:
        """Unlock every locked power whose threshold is met. Returns the new signals."""
        signals: list[PowerUnlocked] = []
        for power in catalog:
            # Ids without a flag entry are never unlockable
            if not self.flags.has(power.id) or self.flags.is_unlocked(power.id):
                continue
            if ledger_value >= power.unlock_threshold:
                self.flags.unlock(power.id)
                signals.append(PowerUnlocked(power.id))
                logger.info("Unlocked power %d (%s)", power.id, power.title)
        return signals
