from __future__ import annotations

from enum import Enum, auto


class PurchaseError(Enum):
    """Why a purchase was rejected. Returned as a value, never raised."""

    NOT_FOUND = auto()
    INSUFFICIENT_FUNDS = auto()
    MAX_OWNED_REACHED = auto()


class PersistenceError(Exception):
    """Base class for save/load failures of a single aggregate."""


class StorageError(PersistenceError):
    """The save file could not be read or written."""


class SerializationError(PersistenceError):
    """The save file exists but its content does not match the aggregate."""


class ConfigurationError(Exception):
    """No per-user data directory could be resolved."""


class SessionClosedError(RuntimeError):
    """The session already handled an exit request."""
