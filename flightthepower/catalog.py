from __future__ import annotations

import logging
from typing import Any, Iterator

from flightthepower.power import I64_MAX, Power, field_names

logger = logging.getLogger(__name__)

# (title, cost, production_amount, production_rate, max_owned, unlock_threshold)
_DEFAULT_POWERS: list[tuple[str, int, int, float, int, int]] = [
    ("Default Power", 0, 1, 1_000_000.0, 1, I64_MAX),
    ("Middle School Science Project", 50, 5, 5.0, I64_MAX, 50),
    ("Hamster on a Wheel", 1_000, 25, 1.0, 30_000_000, 1_000),
    ("'Gas' Engine", 33_333, 100_000, 240.0, 1, 10_000),
    ("Portable Generator", 242_424, 800, 8.0, I64_MAX, 100_000),
    ("Hotwire the Neighbors", 999_999, 222, 0.5, 128_000_000, 1_000_000),
    ("Electric Eel Farm", 2_500_000, 45_000, 30.0, 10_000_000, 10_000_000),
    ("Miniscule Hadron Collider", 111_111_111, 123_456, 33.0, 123_456_789, 100_000_000),
    ("Luke-warm Fusion Reactor", 987_654_321, 9_999, 0.1, 1, 1_000_000_000),
    ("Buttered Cat Paradox", 1, 1, 0.00001, 999, 10_000_000_000),
]


class PowerCatalog:
    """Ordered set of power definitions, indexed by id."""

    def __init__(self, powers: list[Power] | None = None) -> None:
        self._powers: list[Power] = []
        self._by_id: dict[int, Power] = {}
        for power in powers or []:
            if power.id in self._by_id:
                raise ValueError(f"Duplicate power id: {power.id}")
            self._powers.append(power)
            self._by_id[power.id] = power

    @classmethod
    def defaults(cls) -> PowerCatalog:
        """The built-in 10-entry catalog used on first run."""
        return cls(
            [
                Power(
                    id=i,
                    title=title,
                    cost=cost,
                    production_amount=amount,
                    production_rate=rate,
                    max_owned=max_owned,
                    unlock_threshold=unlock,
                )
                for i, (title, cost, amount, rate, max_owned, unlock) in enumerate(
                    _DEFAULT_POWERS
                )
            ]
        )

    # ── Queries ──────────────────────────────────────────────────────

    def find(self, power_id: int) -> Power | None:
        return self._by_id.get(power_id)

    def ids(self) -> list[int]:
        return [p.id for p in self._powers]

    def __iter__(self) -> Iterator[Power]:
        return iter(self._powers)

    def __len__(self) -> int:
        return len(self._powers)

    def __contains__(self, power_id: object) -> bool:
        return power_id in self._by_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PowerCatalog):
            return NotImplemented
        return self._powers == other._powers

    def __repr__(self) -> str:
        return f"PowerCatalog({len(self._powers)} powers)"

    # ── Mutation ─────────────────────────────────────────────────────

    def sync_from_runtime(self, power_id: int, **observed: Any) -> None:
        """Overwrite fields of a catalog entry with values observed at runtime.

        This is the only path by which in-session changes reach the persisted
        catalog. Unknown ids are ignored.
        """
        power = self._by_id.get(power_id)
        if power is None:
            return
        unknown = set(observed) - field_names()
        if unknown:
            raise ValueError(f"Unknown power fields: {sorted(unknown)}")
        if observed.get("id", power_id) != power_id:
            raise ValueError("Power id cannot be changed by a runtime sync")

        previous = {name: getattr(power, name) for name in observed}
        for name, value in observed.items():
            setattr(power, name, value)
        try:
            power.validate()
        except ValueError:
            for name, value in previous.items():
                setattr(power, name, value)
            raise
        logger.debug("Synced power %d: %s", power_id, observed)

    # ── Serialization ────────────────────────────────────────────────

    def to_records(self) -> list[dict[str, Any]]:
        return [p.to_record() for p in self._powers]

    @classmethod
    def from_records(cls, records: Any) -> PowerCatalog:
        if not isinstance(records, list):
            raise TypeError(f"Power catalog must be a list, got {type(records).__name__}")
        return cls([Power.from_record(r) for r in records])
