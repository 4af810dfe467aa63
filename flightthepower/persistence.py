"""Save/load of each game aggregate as its own JSON file.

Every aggregate (settings, unlock flags, total power, power catalog) lives
in a separate file so that one unreadable file never costs the others.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from flightthepower.catalog import PowerCatalog
from flightthepower.errors import (
    ConfigurationError,
    PersistenceError,
    SerializationError,
    StorageError,
)
from flightthepower.ledger import Ledger
from flightthepower.settings import DATA_DIR_ENV, Settings
from flightthepower.unlock import UnlockFlags

logger = logging.getLogger(__name__)

QUALIFIER = "me"
ORGANIZATION = "awfullymatt"
APPLICATION = "flightthepower"
FORMAT_DIR = "json"

SETTINGS_FILE = "settings.json"
UNLOCKS_FILE = "power_unlocks.json"
TOTAL_POWER_FILE = "total_power.json"
POWERS_FILE = "powers.json"

T = TypeVar("T")


def resolve_data_dir(
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    """Return the per-user application data directory for this platform.

    Raises ConfigurationError when no directory can be determined.
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    override = environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if platform.startswith("win"):
        appdata = environ.get("APPDATA")
        if not appdata:
            raise ConfigurationError("APPDATA is not set; cannot locate save directory")
        return Path(appdata) / ORGANIZATION / APPLICATION / "data"

    if home is None:
        try:
            home = Path.home()
        except RuntimeError as e:
            raise ConfigurationError(f"Cannot determine home directory: {e}") from e

    if platform == "darwin":
        return (
            home
            / "Library"
            / "Application Support"
            / f"{QUALIFIER}.{ORGANIZATION}.{APPLICATION}"
        )

    xdg = environ.get("XDG_DATA_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg) / APPLICATION
    return home / ".local" / "share" / APPLICATION


class PersistenceGateway:
    """Reads and writes aggregates under ``<data_dir>/json``."""

    def __init__(self, data_dir: Path | str) -> None:
        self.save_dir = Path(data_dir) / FORMAT_DIR

    @classmethod
    def for_platform(cls) -> PersistenceGateway:
        return cls(resolve_data_dir())

    def path_for(self, name: str) -> Path:
        return self.save_dir / name

    # ── Raw file access ──────────────────────────────────────────────

    def save(self, name: str, payload: Any) -> Path:
        """Write *payload* as JSON. Raises StorageError or SerializationError."""
        try:
            text = json.dumps(payload, indent=2)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode {name}: {e}") from e

        path = self.path_for(name)
        try:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
                f.write("\n")
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

        logger.info("Saved %s", path)
        return path

    def load(self, name: str) -> Any:
        """Read and parse a JSON file. Raises StorageError or SerializationError."""
        path = self.path_for(name)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Malformed {path}: {e}") from e

        logger.info("Loaded %s", path)
        return data

    def delete_all(self) -> list[Path]:
        """Remove every save file that exists. Returns the removed paths."""
        removed: list[Path] = []
        for name in (SETTINGS_FILE, UNLOCKS_FILE, TOTAL_POWER_FILE, POWERS_FILE):
            path = self.path_for(name)
            if path.exists():
                try:
                    path.unlink()
                except OSError as e:
                    raise StorageError(f"Cannot delete {path}: {e}") from e
                removed.append(path)
        return removed

    # ── Aggregates ───────────────────────────────────────────────────

    def save_ledger(self, ledger: Ledger) -> Path:
        return self.save(TOTAL_POWER_FILE, ledger.value)

    def load_ledger(self) -> Ledger:
        return Ledger(self._decode(TOTAL_POWER_FILE, _decode_int))

    def save_catalog(self, catalog: PowerCatalog) -> Path:
        return self.save(POWERS_FILE, catalog.to_records())

    def load_catalog(self) -> PowerCatalog:
        return self._decode(POWERS_FILE, PowerCatalog.from_records)

    def save_unlock_flags(self, flags: UnlockFlags) -> Path:
        return self.save(UNLOCKS_FILE, flags.to_mapping())

    def load_unlock_flags(self) -> UnlockFlags:
        return self._decode(UNLOCKS_FILE, UnlockFlags.from_mapping)

    def save_settings(self, settings: Settings) -> Path:
        return self.save(SETTINGS_FILE, settings.to_mapping())

    def load_settings(self) -> Settings:
        return self._decode(SETTINGS_FILE, Settings.from_mapping)

    def save_all(
        self,
        ledger: Ledger,
        catalog: PowerCatalog,
        unlock_flags: UnlockFlags,
        settings: Settings,
    ) -> dict[str, bool]:
        """Save every aggregate independently. Failures are logged, not raised."""
        jobs: list[tuple[str, Callable[[], Path]]] = [
            (SETTINGS_FILE, lambda: self.save_settings(settings)),
            (UNLOCKS_FILE, lambda: self.save_unlock_flags(unlock_flags)),
            (TOTAL_POWER_FILE, lambda: self.save_ledger(ledger)),
            (POWERS_FILE, lambda: self.save_catalog(catalog)),
        ]
        results: dict[str, bool] = {}
        for name, job in jobs:
            try:
                job()
                results[name] = True
            except PersistenceError:
                logger.exception("Failed to save %s", name)
                results[name] = False
        return results

    def load_or_default(self, loader: Callable[[], T], default: Callable[[], T]) -> T:
        """Run *loader*; on any persistence failure fall back to *default()*."""
        try:
            return loader()
        except PersistenceError as e:
            logger.warning("%s; using defaults", e)
            return default()

    # ── Private helpers ──────────────────────────────────────────────

    def _decode(self, name: str, decoder: Callable[[Any], T]) -> T:
        data = self.load(name)
        try:
            return decoder(data)
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Invalid content in {name}: {e}") from e


def _decode_int(data: Any) -> int:
    if isinstance(data, bool) or not isinstance(data, int):
        raise TypeError(f"Total power must be an integer, got {data!r}")
    return data
