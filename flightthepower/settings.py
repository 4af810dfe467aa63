from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

# Environment variable that overrides the platform data directory
DATA_DIR_ENV = "FLIGHTTHEPOWER_DATA_DIR"


@dataclass
class Settings:
    """User settings. The core only reads these, apart from toggling auto-click."""

    auto_click: bool = False
    auto_click_interval: float = 0.125
    sprite_scale: float = 1.0

    def __post_init__(self) -> None:
        if self.auto_click_interval <= 0:
            raise ValueError("auto_click_interval must be positive")
        if self.sprite_scale <= 0:
            raise ValueError("sprite_scale must be positive")

    def to_mapping(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Any) -> Settings:
        """Decode settings. Unknown keys are ignored, missing keys take defaults."""
        if not isinstance(data, dict):
            raise TypeError(f"Settings must be an object, got {type(data).__name__}")
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name == "auto_click":
                if not isinstance(value, bool):
                    raise TypeError("auto_click must be a boolean")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{f.name} must be a number")
            else:
                value = float(value)
            kwargs[f.name] = value
        return cls(**kwargs)
