# flightthepower: idle game simulation core (powers, production, unlocks, saves)

from flightthepower.errors import (
    PurchaseError,
    PersistenceError,
    StorageError,
    SerializationError,
    ConfigurationError,
    SessionClosedError,
)
from flightthepower.power import Power, PowerStatus
from flightthepower.catalog import PowerCatalog
from flightthepower.ledger import Ledger
from flightthepower.unlock import UnlockFlags, UnlockEngine
from flightthepower.production import ProductionTimer, ProductionClock, LivePower, AutoClicker
from flightthepower.purchase import PurchaseResult, purchase
from flightthepower.settings import Settings
from flightthepower.persistence import PersistenceGateway, resolve_data_dir
from flightthepower.events import (
    RequestPurchase,
    ManualClick,
    RequestSave,
    RequestExit,
    ToggleAutoClick,
    PowerUnlocked,
    PurchaseCompleted,
    PurchaseRejected,
    AutoClickToggled,
    GameSaved,
    SessionExited,
)
from flightthepower.session import GameSession
from flightthepower.strategy import Strategy, ClickProfile, GreedyCheapest, SaveForBest
from flightthepower.metrics import MetricsCollector
from flightthepower.simulation import Simulation
from flightthepower.report import SimulationReport, build_report
from flightthepower.formatting import format_text_report

__all__ = [
    # Errors
    "PurchaseError",
    "PersistenceError",
    "StorageError",
    "SerializationError",
    "ConfigurationError",
    "SessionClosedError",
    # Data model
    "Power",
    "PowerStatus",
    "PowerCatalog",
    "Ledger",
    "UnlockFlags",
    "Settings",
    # Engines
    "UnlockEngine",
    "ProductionTimer",
    "ProductionClock",
    "LivePower",
    "AutoClicker",
    "PurchaseResult",
    "purchase",
    # Persistence
    "PersistenceGateway",
    "resolve_data_dir",
    # Events
    "RequestPurchase",
    "ManualClick",
    "RequestSave",
    "RequestExit",
    "ToggleAutoClick",
    "PowerUnlocked",
    "PurchaseCompleted",
    "PurchaseRejected",
    "AutoClickToggled",
    "GameSaved",
    "SessionExited",
    # Session
    "GameSession",
    # Simulation
    "Strategy",
    "ClickProfile",
    "GreedyCheapest",
    "SaveForBest",
    "MetricsCollector",
    "Simulation",
    "SimulationReport",
    "build_report",
    "format_text_report",
]
