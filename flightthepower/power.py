from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

# Largest value the save format has ever stored for "unbounded" counts.
I64_MAX = 9_223_372_036_854_775_807

_RECORD_KEYS = (
    "title",
    "id",
    "cost",
    "production_amount",
    "production_rate",
    "max_owned",
    "current_owned",
    "unlock_bound",
)


@dataclass
class Power:
    """A purchasable production unit and its purchase state."""

    id: int
    title: str = ""
    cost: int = 0
    production_amount: int = 0
    production_rate: float = 1.0
    max_owned: int = 1
    unlock_threshold: int = 0
    current_owned: int = 0

    def __post_init__(self) -> None:
        if not self.title:
            self.title = f"Power {self.id}"
        self.validate()

    def validate(self) -> None:
        if self.id < 0:
            raise ValueError(f"Power id must be non-negative, got {self.id}")
        for name in ("cost", "production_amount", "unlock_threshold"):
            if getattr(self, name) < 0:
                raise ValueError(f"Power {self.id}: {name} must be non-negative")
        if not (self.production_rate > 0 and math.isfinite(self.production_rate)):
            raise ValueError(
                f"Power {self.id}: production_rate must be a positive number of seconds"
            )
        if not 0 <= self.current_owned <= self.max_owned:
            raise ValueError(
                f"Power {self.id}: current_owned {self.current_owned} "
                f"outside 0..{self.max_owned}"
            )

    @property
    def credit_per_period(self) -> int:
        return self.production_amount * self.current_owned

    def copy(self) -> Power:
        return Power(**asdict(self))

    def to_record(self) -> dict[str, Any]:
        """Encode as a save-file record."""
        return {
            "power": None,
            "title": self.title,
            "id": self.id,
            "cost": self.cost,
            "production_amount": self.production_amount,
            "production_rate": float(self.production_rate),
            "max_owned": self.max_owned,
            "current_owned": self.current_owned,
            "unlock_bound": self.unlock_threshold,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Power:
        """Decode a save-file record. Raises KeyError/TypeError/ValueError on bad shape."""
        if not isinstance(record, dict):
            raise TypeError(f"Power record must be an object, got {type(record).__name__}")
        missing = [k for k in _RECORD_KEYS if k not in record]
        if missing:
            raise KeyError(f"Power record missing fields: {', '.join(missing)}")
        ints = {
            k: _as_int(record[k], k)
            for k in ("id", "cost", "production_amount", "max_owned", "current_owned", "unlock_bound")
        }
        rate = record["production_rate"]
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise TypeError("production_rate must be a number")
        title = record["title"]
        if not isinstance(title, str):
            raise TypeError("title must be a string")
        return cls(
            id=ints["id"],
            title=title,
            cost=ints["cost"],
            production_amount=ints["production_amount"],
            production_rate=float(rate),
            max_owned=ints["max_owned"],
            unlock_threshold=ints["unlock_bound"],
            current_owned=ints["current_owned"],
        )


def field_names() -> set[str]:
    return {f.name for f in fields(Power)}


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class PowerStatus:
    """Read-only view of a power for rendering and query results."""

    id: int
    title: str
    cost: int
    production_amount: int
    production_rate: float
    current_owned: int
    max_owned: int
    unlock_threshold: int
    unlocked: bool
    affordable: bool
    next_credit_in: float | None
